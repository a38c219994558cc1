"""Runtime configuration provider.

Facility settings live in ``ConfigEntry`` rows so staff can change them
without a deploy. Services receive a ``ConfigProvider`` and read through it
on every call; nothing here caches values between requests.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Mapping

from django.db import transaction  # type: ignore

from .models import ConfigEntry

logger = logging.getLogger(__name__)

AUDIT_REQUIRED_KEY = "facility.auditRequired"
MAX_DURATION_HOURS_KEY = "facility.maxDurationHours"


def coerce_bool(raw: Any, default: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return default


def coerce_number(raw: Any, default: float) -> float:
    if isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        return raw if math.isfinite(raw) else default
    if isinstance(raw, str) and raw.strip():
        try:
            value = float(raw.strip())
        except ValueError:
            return default
        return value if math.isfinite(value) else default
    return default


class ConfigProvider(ABC):
    """Read access to typed configuration values."""

    @abstractmethod
    def get_raw(self, key: str) -> Any:
        """Stored value for ``key`` or None when unset"""

    def get_bool(self, key: str, default: bool) -> bool:
        return coerce_bool(self.get_raw(key), default)

    def get_number(self, key: str, default: float) -> float:
        return coerce_number(self.get_raw(key), default)


class DatabaseConfigProvider(ConfigProvider):
    """Reads and writes ``ConfigEntry`` rows."""

    def get_raw(self, key: str) -> Any:
        return ConfigEntry.objects.filter(pk=key).values_list("value", flat=True).first()

    @transaction.atomic
    def set_values(self, values: Mapping[str, Any], updated_by=None) -> None:
        for key, value in values.items():
            ConfigEntry.objects.update_or_create(
                key=key,
                defaults={"value": value, "updated_by": updated_by},
            )
            logger.info(f"Config entry {key} set to {value!r}")


class StaticConfigProvider(ConfigProvider):
    """In-memory provider for scripts and unit tests."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = dict(values or {})

    def get_raw(self, key: str) -> Any:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
