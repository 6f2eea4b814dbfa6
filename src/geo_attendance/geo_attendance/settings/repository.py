from __future__ import annotations

from typing import Mapping, Protocol, Sequence


class SettingsRepository(Protocol):
    def get_all(self) -> dict[str, str]:
        raise NotImplementedError

    def upsert_many(self, values: Mapping[str, str]) -> bool:
        raise NotImplementedError

    # Approved WiFi networks
    def list_approved_ssids(self) -> Sequence[str]:
        raise NotImplementedError

    def add_approved_ssid(self, *, ssid: str, bssid: str | None = None) -> int:
        raise NotImplementedError

    def deactivate_ssid(self, *, ssid: str) -> bool:
        raise NotImplementedError
