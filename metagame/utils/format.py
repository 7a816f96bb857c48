import math
from typing import Optional

_RED = (220, 160, 160)
_NEUTRAL = (245, 245, 245)
_GREEN = (160, 220, 165)


def _rgb(color) -> str:
    return f"rgb({color[0]}, {color[1]}, {color[2]})"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def winrate_color(wr: float) -> str:
    """Color gradient: red (<=30%) -> gray (48-52%) -> green (>=70%)."""
    if wr <= 0.30:
        return _rgb(_RED)
    if wr <= 0.48:
        start, end, t = _RED, _NEUTRAL, (wr - 0.30) / 0.18
    elif wr <= 0.52:
        return _rgb(_NEUTRAL)
    elif wr <= 0.70:
        start, end, t = _NEUTRAL, _GREEN, (wr - 0.52) / 0.18
    else:
        return _rgb(_GREEN)

    return _rgb([_round_half_up(a + (b - a) * t) for a, b in zip(start, end)])


def pct(value: Optional[float], decimals: int = 1) -> str:
    """Format a 0-1 fraction as a percentage string."""
    if value is None:
        return "—"
    return f"{value * 100:.{decimals}f}%"
