from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_MAX_DEVICES_PER_USER
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DeviceLimitReached, PersistenceFailure, ValidationError
from .model import Device
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


class DeviceService:
    def __init__(self, devices: DeviceRepository):
        self._devices = devices

    def active_fingerprints(self, user_id: int) -> frozenset[str]:
        return frozenset(d.fingerprint for d in self._devices.list_for_user(int(user_id), active_only=True))

    def list_for_user(self, user_id: int) -> Sequence[Device]:
        return self._devices.list_for_user(int(user_id))

    def register(
        self,
        *,
        user_id: int,
        fingerprint: str,
        device_name: str = "",
        max_devices: int = DEFAULT_MAX_DEVICES_PER_USER,
        now: datetime | None = None,
    ) -> Device:
        """Register a device for admin approval; returns the existing one if known."""
        now = now or now_local()
        fingerprint = require_non_empty(fingerprint, "device fingerprint")

        existing = self._devices.get_by_fingerprint(user_id=int(user_id), fingerprint=fingerprint)
        if existing:
            return existing

        active = self._devices.list_for_user(int(user_id), active_only=True)
        if len(active) >= int(max_devices):
            raise DeviceLimitReached(f"device limit reached ({max_devices} per employee)")

        name = (device_name or "").strip() or f"Device {now.date().isoformat()}"
        device_id = self._devices.create(user_id=int(user_id), fingerprint=fingerprint, device_name=name, seen_at=now)
        device = self._devices.get_by_id(device_id)
        if not device:
            raise PersistenceFailure("device registration was not stored")
        logger.info("device registered: user_id=%s device_id=%s (awaiting approval)", user_id, device_id)
        return device

    def seen(self, *, user_id: int, fingerprint: str | None, now: datetime) -> None:
        if not fingerprint:
            return
        device = self._devices.get_by_fingerprint(user_id=int(user_id), fingerprint=fingerprint)
        if device and device.is_active:
            self._devices.touch(device_id=device.device_id, seen_at=now)

    def list_pending(self, *, current_role: Role) -> Sequence[Device]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        return self._devices.list_inactive()

    def approve(self, *, current_role: Role, device_id: int, max_devices: int = DEFAULT_MAX_DEVICES_PER_USER) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        device = self._devices.get_by_id(int(device_id))
        if not device:
            raise ValidationError("device not found")
        if device.is_active:
            return

        active = self._devices.list_for_user(device.user_id, active_only=True)
        if len(active) >= int(max_devices):
            raise DeviceLimitReached(f"device limit reached ({max_devices} per employee)")

        if not self._devices.set_active(device_id=device.device_id, is_active=True):
            raise PersistenceFailure("device approval failed")
        logger.info("device approved: device_id=%s user_id=%s", device.device_id, device.user_id)

    def deactivate(self, *, current_role: Role, device_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        if not self._devices.set_active(device_id=int(device_id), is_active=False):
            raise ValidationError("device not found")
