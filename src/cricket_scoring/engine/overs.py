"""Over and ball arithmetic.

Overs are written in mixed radix: the integer part counts completed overs and
the first decimal digit counts legal balls (0-5) in the over in progress, so
``4.5`` is 29 balls and ``5.0`` is 30.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

BALLS_PER_OVER = 6

OversValue = Union[int, float, str]


def legal_balls_to_overs(balls: int) -> float:
    """Convert a count of legal balls to overs notation."""
    if balls < 0:
        raise ValueError(f"Ball count cannot be negative: {balls}")
    return round(balls // BALLS_PER_OVER + (balls % BALLS_PER_OVER) / 10, 1)


def overs_to_legal_balls(overs: OversValue) -> int:
    """Convert overs notation back to a count of legal balls.

    Accepts ints, floats and ``"X.Y"`` strings. Raises ``ValueError`` when the
    balls part is above 5 or the value is negative.
    """
    if overs is None or overs == "":
        return 0
    try:
        value = Decimal(str(overs)).quantize(Decimal("0.1"))
    except InvalidOperation:
        raise ValueError(f"Invalid overs value: {overs!r}")

    if value < 0:
        raise ValueError(f"Overs cannot be negative: {overs!r}")

    whole = int(value)
    part = int((value - whole) * 10)
    if part >= BALLS_PER_OVER:
        raise ValueError(f"Invalid overs value {overs!r}: balls part must be 0-5")

    return whole * BALLS_PER_OVER + part


def add_legal_balls(overs: OversValue, count: int = 1) -> float:
    """Add ``count`` legal balls to an overs figure."""
    return legal_balls_to_overs(overs_to_legal_balls(overs) + count)


def balls_in_over(overs: OversValue) -> int:
    """Legal balls bowled in the over in progress (0-5)."""
    return overs_to_legal_balls(overs) % BALLS_PER_OVER


def format_overs(overs: OversValue) -> str:
    balls = overs_to_legal_balls(overs)
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def strike_rate(runs: int, balls: int) -> str:
    """Runs per 100 balls, to 2 decimal places."""
    if not balls:
        return "0.00"
    return f"{runs / balls * 100:.2f}"


def economy(runs: int, overs: OversValue) -> str:
    """Runs conceded per six legal balls, to 2 decimal places."""
    balls = overs_to_legal_balls(overs)
    if balls == 0:
        return "0.00"
    return f"{runs / (balls / BALLS_PER_OVER):.2f}"
