"""Human-facing order numbers: ``ES`` + YYMMDD + a three-digit random suffix."""

import random
from collections.abc import Container
from datetime import datetime

ORDER_NUMBER_PREFIX = "ES"
SUFFIX_SPACE = 1000


class OrderNumberExhausted(Exception):
    """Every suffix for the day is already taken."""

    def __init__(self, day: str):
        self.day = day
        super().__init__(f"No order numbers left for {day}")


def order_number_for(moment: datetime, suffix: int) -> str:
    return f"{ORDER_NUMBER_PREFIX}{moment:%y%m%d}{suffix:03d}"


def generate_order_number(moment: datetime, taken: Container[str] = (), rng: random.Random | None = None) -> str:
    """Draw a random order number for ``moment``'s day that is not in ``taken``.

    Suffixes are drawn uniformly from 000-999 and redrawn on collision. Once
    more than half the day's numbers are in use the remaining free ones are
    picked from directly, so the call always terminates.
    """
    rng = rng or random.Random()

    for _ in range(SUFFIX_SPACE // 2):
        candidate = order_number_for(moment, rng.randrange(SUFFIX_SPACE))
        if candidate not in taken:
            return candidate

    free = [n for n in (order_number_for(moment, s) for s in range(SUFFIX_SPACE)) if n not in taken]
    if not free:
        raise OrderNumberExhausted(f"{moment:%Y-%m-%d}")
    return rng.choice(free)
