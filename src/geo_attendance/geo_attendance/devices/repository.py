from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Device


class DeviceRepository(Protocol):
    def get_by_id(self, device_id: int) -> Optional[Device]:
        raise NotImplementedError

    def get_by_fingerprint(self, *, user_id: int, fingerprint: str) -> Optional[Device]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, active_only: bool = False) -> Sequence[Device]:
        raise NotImplementedError

    def list_inactive(self, *, limit: int = 200) -> Sequence[Device]:
        raise NotImplementedError

    def create(self, *, user_id: int, fingerprint: str, device_name: str, seen_at: datetime) -> int:
        raise NotImplementedError

    def set_active(self, *, device_id: int, is_active: bool) -> bool:
        raise NotImplementedError

    def touch(self, *, device_id: int, seen_at: datetime) -> bool:
        raise NotImplementedError
