from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from tipsdash.data import _load_dashboard_data_cached, load_tips

TIPS_CSV = """total_bill, tip, sex, smoker, day, time, size
16.99,1.01,Female,No,Sun,Dinner,2
10.34,1.66,Male,No,Sun,Dinner,3
21.01,3.5,Male,No,Sun,Dinner,3
20.65,3.35,Male,No,Sat,Dinner,3
17.92,4.08,Male,No,Sat,Dinner,2
27.2,4.0,Male,No,Thur,Lunch,4
19.44,3.0,Male,Yes,Thur,Lunch,2
5.75,1.0,Female,Yes,Fri,Dinner,2
"""


@pytest.fixture(autouse=True)
def _clear_load_cache():
    _load_dashboard_data_cached.cache_clear()
    yield
    _load_dashboard_data_cached.cache_clear()


@pytest.fixture
def tips_path(tmp_path: Path) -> Path:
    path = tmp_path / "tips.csv"
    path.write_text(TIPS_CSV)
    return path


@pytest.fixture
def tips(tips_path: Path) -> pd.DataFrame:
    return load_tips(tips_path)


@pytest.fixture
def linear_table() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"tip": 1, "total_bill": 10, "size": 2},
            {"tip": 2, "total_bill": 20, "size": 2},
            {"tip": 3, "total_bill": 30, "size": 2},
        ]
    )


@pytest.fixture
def blank_sex_path(tmp_path: Path) -> Path:
    path = tmp_path / "blank_sex.csv"
    path.write_text(
        "total_bill,tip,sex,smoker,day,time,size\n"
        "10,1,,No,Sun,Dinner,2\n"
        "20,2,Male,No,Sat,Dinner,3\n"
        "30,4,Male,Yes,Sat,Dinner,4\n"
    )
    return path


@pytest.fixture
def blank_sex_tips(blank_sex_path: Path) -> pd.DataFrame:
    return load_tips(blank_sex_path)
