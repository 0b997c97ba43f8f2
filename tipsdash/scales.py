"""Domain -> range mappings shared by every renderer.

The behaviour tracks d3-scale closely (band padding, `nice`, tick generation)
so that positions computed here line up with what a browser renderer draws.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

import matplotlib.colors as mcolors

LOW_COLOR = "#ffff00"
HIGH_COLOR = "#0e03bb"
DEFAULT_COLOR_DOMAIN: Tuple[float, float] = (-1.0, 1.0)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _js_round(value: float) -> int:
    # Half rounds up, not to even.
    return int(math.floor(value + 0.5))


def _tick_factor(error: float) -> int:
    if error >= _E10:
        return 10
    if error >= _E5:
        return 5
    if error >= _E2:
        return 2
    return 1


def tick_increment(start: float, stop: float, count: int) -> float:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    factor = _tick_factor(step / 10 ** power)
    if power >= 0:
        return factor * 10 ** power
    return -(10 ** -power) / factor


def _tick_spec(start: float, stop: float, count: float) -> Tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    factor = _tick_factor(step / 10 ** power)
    if power < 0:
        inc = 10 ** -power / factor
        i1, i2 = _js_round(start * inc), _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10 ** power * factor
        i1, i2 = _js_round(start / inc), _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def ticks(start: float, stop: float, count: int = 10) -> List[float]:
    """Uniformly spaced, human-friendly values in [start, stop]."""
    if not count > 0 or math.isnan(start) or math.isnan(stop):
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, count)
    if not i2 >= i1:
        return []
    if inc < 0:
        out = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        out = [float((i1 + i) * inc) for i in range(i2 - i1 + 1)]
    return out[::-1] if reverse else out


def nice_domain(start: float, stop: float, count: int = 10) -> Tuple[float, float]:
    """Extend [start, stop] outward to tick boundaries.

    The bounds are only replaced once the tick step settles; if it never does
    within ten rounds the domain comes back unchanged.
    """
    if not count > 0 or math.isnan(start) or math.isnan(stop) or start == stop:
        return start, stop
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    prestep = None
    for _ in range(10):
        step = tick_increment(lo, hi, count)
        if step == prestep:
            lo, hi = float(lo) + 0.0, float(hi) + 0.0
            return (hi, lo) if reverse else (lo, hi)
        if step > 0:
            lo = math.floor(lo / step) * step
            hi = math.ceil(hi / step) * step
        elif step < 0:
            lo = math.ceil(lo * step) / step
            hi = math.floor(hi * step) / step
        else:
            break
        prestep = step
    return start, stop


def _normalize(value: float, d0: float, d1: float) -> float:
    span = d1 - d0
    if span:
        return (value - d0) / span
    return 0.5


@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: Any) -> float:
        try:
            x = float(value)
        except (TypeError, ValueError):
            return math.nan
        if math.isnan(x):
            return math.nan
        t = _normalize(x, *self.domain)
        r0, r1 = self.range
        return r0 + (r1 - r0) * t

    def ticks(self, count: int = 10) -> List[float]:
        return ticks(self.domain[0], self.domain[-1], count)


def build_linear_scale(domain_extent: Sequence[float], range_extent: Sequence[float], nice: bool = False) -> LinearScale:
    d0, d1 = float(domain_extent[0]), float(domain_extent[1])
    if nice:
        d0, d1 = nice_domain(d0, d1)
    return LinearScale(domain=(d0, d1), range=(float(range_extent[0]), float(range_extent[1])))


@dataclass(frozen=True)
class BandScale:
    domain: Tuple[Hashable, ...]
    range: Tuple[float, float]
    padding: float
    step: float
    bandwidth: float
    _positions: Dict[Hashable, float] = field(repr=False, compare=False)

    def __call__(self, value: Hashable) -> Optional[float]:
        return self._positions.get(value)


def build_band_scale(domain_values: Sequence[Hashable], range_extent: Sequence[float], padding: float = 0.0) -> BandScale:
    """Equal-width bands; `padding` is applied both between and around bands."""
    domain = tuple(dict.fromkeys(domain_values))
    n = len(domain)
    r0, r1 = float(range_extent[0]), float(range_extent[1])
    reverse = r1 < r0
    start, stop = (r1, r0) if reverse else (r0, r1)
    step = (stop - start) / max(1, n - padding + padding * 2)
    start += (stop - start - step * (n - padding)) * 0.5
    values = [start + step * i for i in range(n)]
    if reverse:
        values.reverse()
    return BandScale(
        domain=domain,
        range=(r0, r1),
        padding=float(padding),
        step=step,
        bandwidth=step * (1 - padding),
        _positions=dict(zip(domain, values)),
    )


@lru_cache(maxsize=8)
def _colormap(low: str, high: str) -> mcolors.Colormap:
    return mcolors.LinearSegmentedColormap.from_list(f"gradient_{low}_{high}", [mcolors.to_rgb(low), mcolors.to_rgb(high)])


@dataclass(frozen=True)
class ColorScale:
    domain: Tuple[float, float]
    range: Tuple[str, str]

    def __call__(self, value: Any) -> Optional[str]:
        try:
            x = float(value)
        except (TypeError, ValueError):
            return None
        if math.isnan(x):
            return None
        t = _normalize(x, *self.domain)
        return mcolors.to_hex(_colormap(*self.range)(t), keep_alpha=False)

    def ticks(self, count: int = 10) -> List[float]:
        return ticks(self.domain[0], self.domain[1], count)


def _color_domain(min_value: Optional[float], max_value: Optional[float]) -> Tuple[float, float]:
    if min_value is None or max_value is None or math.isnan(min_value) or math.isnan(max_value):
        return DEFAULT_COLOR_DOMAIN
    return float(min_value), float(max_value)


def build_color_scale(min_value: Optional[float], max_value: Optional[float]) -> ColorScale:
    return ColorScale(domain=_color_domain(min_value, max_value), range=(LOW_COLOR, HIGH_COLOR))


def build_color_bar_scale(min_value: Optional[float], max_value: Optional[float]) -> ColorScale:
    return ColorScale(domain=_color_domain(min_value, max_value), range=(HIGH_COLOR, LOW_COLOR))
