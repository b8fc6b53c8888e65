# Synthetic items for the /api/data endpoint
import random
import re
from datetime import datetime, timezone

DEFAULT_COUNT = 10
ERROR_RATE = 0.2

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.123Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_count(raw: str | None, default: int = DEFAULT_COUNT) -> int:
    """Leading base-10 integer of ``raw``.

    Missing or empty input gives ``default``; anything without a leading
    integer gives 0, as do negative numbers. Trailing garbage is ignored.
    """
    if not raw:
        return default
    m = _LEADING_INT.match(raw)
    if m is None:
        return 0
    return max(0, int(m.group(1)))


def generate_items(count: int, error_rate: float = ERROR_RATE, rng: random.Random | None = None) -> list[dict]:
    rng = rng or random.Random()
    threshold = 1.0 - error_rate
    return [
        {
            "id": i,
            "name": f"Item {i}",
            "timestamp": utc_timestamp(),
            "status": "error" if rng.random() > threshold else "ok",
        }
        for i in range(1, count + 1)
    ]


def count_errors(items: list[dict]) -> int:
    return sum(1 for item in items if item["status"] == "error")
