from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Device:
    """A browser/device fingerprint an employee checks in from.

    Newly registered devices stay inactive until an admin approves them.
    """

    device_id: int
    user_id: int
    fingerprint: str
    device_name: str
    is_active: bool
    first_seen: datetime
    last_seen: datetime
