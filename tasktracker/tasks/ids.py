from __future__ import annotations

import random
import time

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_RAND_LIMIT = 1_000_000_000


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    out: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


def make_task_id(now_ms: int | None = None, rand: int | None = None) -> str:
    """Build a ``t_<time>_<rand>`` id from epoch milliseconds and a random int.

    Both parts are base36. Collisions are unlikely, not impossible.
    """
    ms = int(time.time() * 1000) if now_ms is None else now_ms
    r = random.randrange(_RAND_LIMIT) if rand is None else rand
    return f"t_{to_base36(ms)}_{to_base36(r)}"


__all__ = ["make_task_id", "to_base36"]
