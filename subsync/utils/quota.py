"""Data-quota helpers for subscription usage display."""

import re

from subsync.core.config import settings

UNLIMITED = "unlimited"

_QUOTA_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(GB|TB)?\s*$", re.IGNORECASE)


def parse_quota_gb(data_quota: str | None) -> float | None:
    """
    "500GB" -> 500.0, "1TB" -> 1000.0, "Unlimited" -> None.
    Unparseable quotas are treated like unlimited.
    """
    if not data_quota or data_quota.strip().lower() == UNLIMITED:
        return None
    m = _QUOTA_RE.match(data_quota)
    if not m:
        return None
    amount = float(m.group(1))
    if (m.group(2) or "GB").upper() == "TB":
        amount *= 1000
    return amount if amount > 0 else None


def _raw_percentage(usage_gb: float, data_quota: str | None) -> float:
    quota = parse_quota_gb(data_quota)
    if quota is None:
        return 0.0
    return min(usage_gb / quota * 100, 100.0)


def usage_percentage(usage_gb: float, data_quota: str | None) -> int:
    return round(_raw_percentage(usage_gb, data_quota))


def is_near_limit(usage_gb: float, data_quota: str | None, threshold: int | None = None) -> bool:
    limit = settings.usage_alert_threshold if threshold is None else threshold
    return _raw_percentage(usage_gb, data_quota) > limit
