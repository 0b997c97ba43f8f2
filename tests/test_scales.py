from __future__ import annotations

import math

import pytest

from tipsdash.scales import (
    HIGH_COLOR,
    LOW_COLOR,
    ColorScale,
    build_band_scale,
    build_color_bar_scale,
    build_color_scale,
    build_linear_scale,
    nice_domain,
    ticks,
)


def test_linear_midpoint():
    assert build_linear_scale([0, 10], [0, 100])(5) == 50


def test_linear_inverted_range():
    y = build_linear_scale([0, 4], [200, 0])
    assert y(0) == 200
    assert y(4) == 0
    assert y(1) == 150


def test_linear_nan_and_degenerate_domain():
    assert math.isnan(build_linear_scale([0, 10], [0, 100])(math.nan))
    assert build_linear_scale([3, 3], [0, 100])(3) == 50


@pytest.mark.parametrize(
    "domain, expected",
    [
        ((0, 9.7), (0, 10)),
        ((0, 3.265), (0, 3.5)),
        ((0, 1), (0, 1)),
        ((0.2, 0.93), (0.2, 1.0)),
    ],
)
def test_nice_rounds_outward(domain, expected):
    assert nice_domain(*domain) == pytest.approx(expected)


def test_nice_keeps_domain_when_step_never_settles(monkeypatch):
    steps = iter([1.0, 2.0] * 10)
    monkeypatch.setattr("tipsdash.scales.tick_increment", lambda start, stop, count: next(steps))
    assert nice_domain(0.3, 9.7) == (0.3, 9.7)


def test_nice_reversed_domain_and_zero_count():
    assert nice_domain(9.7, 0) == pytest.approx((10, 0))
    assert nice_domain(0, 9.7, 0) == (0, 9.7)


def test_nice_flag_on_linear_scale():
    y = build_linear_scale([0, 9.7], [100, 0], nice=True)
    assert y.domain == (0.0, 10.0)
    assert y(5) == 50


def test_ticks():
    assert ticks(0, 10, 5) == [0, 2, 4, 6, 8, 10]
    assert ticks(0, 1, 10) == pytest.approx([i / 10 for i in range(11)])
    assert ticks(10, 0, 5) == [10, 8, 6, 4, 2, 0]
    assert ticks(2, 2, 5) == [2]
    assert ticks(0, 1, 0) == []


def test_band_scale_without_padding():
    x = build_band_scale(["A", "B"], [0, 100], 0)
    assert x.bandwidth == 50
    assert x("A") == 0
    assert x("B") == 50


def test_band_scale_with_padding():
    x = build_band_scale(["A", "B"], [0, 100], 0.5)
    assert x.step == pytest.approx(40)
    assert x.bandwidth == pytest.approx(20)
    assert x("A") == pytest.approx(20)
    assert x("B") == pytest.approx(60)


def test_band_scale_reversed_range_and_unknown_value():
    y = build_band_scale(["A", "B"], [100, 0], 0.5)
    assert y("A") == pytest.approx(60)
    assert y("B") == pytest.approx(20)
    assert y("C") is None


def test_band_scale_drops_duplicates():
    x = build_band_scale(["A", "B", "A"], [0, 100])
    assert x.domain == ("A", "B")
    assert x.bandwidth == 50


def test_color_scale_endpoints_and_midpoint():
    color = build_color_scale(-0.5, 1.0)
    assert color(-0.5) == LOW_COLOR
    assert color(1.0) == HIGH_COLOR
    assert color(0.25) == "#86815e"


def test_color_scale_unknown_for_nan():
    assert build_color_scale(0, 1)(math.nan) is None


def test_color_bar_scale_swaps_endpoints():
    bar = build_color_bar_scale(0, 1)
    assert bar(0) == HIGH_COLOR
    assert bar(1) == LOW_COLOR
    assert bar.domain == build_color_scale(0, 1).domain


def test_color_domain_falls_back_when_missing():
    assert build_color_scale(None, None).domain == (-1.0, 1.0)


def test_color_scale_accepts_named_and_short_hex_colors():
    color = ColorScale(domain=(0.0, 1.0), range=("yellow", "#00f"))
    assert color(0) == LOW_COLOR
    assert color(1) == "#0000ff"
    assert color("n/a") is None
