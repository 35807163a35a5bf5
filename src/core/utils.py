import math


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def finite_or_zero(value) -> float:
    """
    Coerce a media telemetry value to a usable float.
    Qt reports unknown durations as 0 or -1; streams may report inf.
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(v) or math.isinf(v) or v < 0:
        return 0.0
    return v


def progress_percent(position_s: float, duration_s: float) -> float:
    duration_s = finite_or_zero(duration_s)
    if duration_s <= 0:
        return 0.0
    return clamp(finite_or_zero(position_s) / duration_s * 100.0, 0.0, 100.0)


def format_time(seconds) -> str:
    """
    Format seconds as m:ss for the player labels.
    NaN, infinity and negative values render as 0:00.
    """
    s = int(finite_or_zero(seconds))
    m = s // 60
    s = s % 60
    return f"{m}:{s:02d}"
