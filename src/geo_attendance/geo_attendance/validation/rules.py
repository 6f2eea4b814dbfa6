"""Independent boolean checks over an attendance attempt.

Every rule fails closed: missing input evaluates to False instead of raising.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Iterable, Optional

from ..geo.distance import distance_meters
from ..geo.model import GeoPoint


def within_radius(current: Optional[GeoPoint], office: Optional[GeoPoint], radius_meters: Optional[float]) -> bool:
    if current is None or office is None or radius_meters is None:
        return False
    return distance_meters(current, office) <= float(radius_meters)


def wifi_approved(ssid: Optional[str], approved_ssids: Optional[Iterable[str]]) -> bool:
    if not ssid or not ssid.strip() or not approved_ssids:
        return False
    return ssid.strip() in {s.strip() for s in approved_ssids if s}


def device_registered(fingerprint: Optional[str], registered: Optional[Iterable[str]]) -> bool:
    if not fingerprint or not registered:
        return False
    return fingerprint in set(registered)


def within_work_hours(moment: Optional[datetime], start: Optional[time], end: Optional[time]) -> bool:
    """Inclusive HH:MM window; a window with start > end wraps past midnight."""
    if moment is None or start is None or end is None:
        return False

    current = moment.time().replace(second=0, microsecond=0)
    start = start.replace(second=0, microsecond=0)
    end = end.replace(second=0, microsecond=0)

    if start <= end:
        return start <= current <= end
    return current >= start or current <= end
