from __future__ import annotations

import pytest

from core.utils import format_time, progress_percent


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0:00"),
        (9.9, "0:09"),
        (65, "1:05"),
        (3599, "59:59"),
        (float("nan"), "0:00"),
        (float("inf"), "0:00"),
        (-4, "0:00"),
        (None, "0:00"),
    ],
)
def test_format_time(seconds, expected) -> None:
    assert format_time(seconds) == expected


def test_progress_percent_is_bounded() -> None:
    assert progress_percent(30, 120) == 25.0
    assert progress_percent(130, 120) == 100.0
    assert progress_percent(10, 0) == 0.0
    assert progress_percent(10, float("nan")) == 0.0
