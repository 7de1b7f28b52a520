from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    CONF_CLOSE_POSITION,
    CONF_DEVICE_CODE,
    CONF_HOST,
    CONF_OPEN_POSITION,
    DEFAULT_CLOSE_POSITION,
    DEFAULT_OPEN_POSITION,
    DEFAULT_SCHEME,
    DEVICE_CODE_LENGTH,
)

_FLOAT_RE = re.compile(r"^[-+]?([0-9]+(\.[0-9]+)?|Infinity)$")


def parse_float(value: Any, fallback: float) -> float:
    """Parse a number or numeric string, returning ``fallback`` for anything else."""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str) and _FLOAT_RE.match(value.strip()):
        result = float(value.strip().replace("Infinity", "inf"))
    else:
        return fallback
    if math.isnan(result):
        return fallback
    return result


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_HOST, default=""): _text,
        vol.Optional(CONF_DEVICE_CODE, default=""): _text,
        vol.Optional(CONF_OPEN_POSITION, default=DEFAULT_OPEN_POSITION): lambda v: parse_float(
            v, DEFAULT_OPEN_POSITION
        ),
        vol.Optional(CONF_CLOSE_POSITION, default=DEFAULT_CLOSE_POSITION): lambda v: parse_float(
            v, DEFAULT_CLOSE_POSITION
        ),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class SlideConfig:
    host: str
    device_code: str
    open_position: float = DEFAULT_OPEN_POSITION
    close_position: float = DEFAULT_CLOSE_POSITION

    @classmethod
    def create(
        cls,
        host: Any,
        device_code: Any,
        open_position: Any = DEFAULT_OPEN_POSITION,
        close_position: Any = DEFAULT_CLOSE_POSITION,
    ) -> SlideConfig:
        """Build a usable config from loose input.

        Bounds are clamped into [0, 1]. When the closed bound does not lie
        beyond the open bound both fall back to the defaults. Never raises.
        """
        open_pos = _clamp_unit(parse_float(open_position, DEFAULT_OPEN_POSITION))
        close_pos = _clamp_unit(parse_float(close_position, DEFAULT_CLOSE_POSITION))
        if close_pos <= open_pos:
            open_pos, close_pos = DEFAULT_OPEN_POSITION, DEFAULT_CLOSE_POSITION

        return cls(
            host=_text(host),
            device_code=_text(device_code),
            open_position=open_pos,
            close_position=close_pos,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> SlideConfig:
        if not isinstance(data, Mapping):
            data = {}
        conf = CONFIG_SCHEMA(dict(data))
        return cls.create(
            conf[CONF_HOST],
            conf[CONF_DEVICE_CODE],
            conf[CONF_OPEN_POSITION],
            conf[CONF_CLOSE_POSITION],
        )

    def replace(self, **changes: Any) -> SlideConfig:
        values = {
            "host": self.host,
            "device_code": self.device_code,
            "open_position": self.open_position,
            "close_position": self.close_position,
        }
        unknown = set(changes) - set(values)
        if unknown:
            raise TypeError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        values.update(changes)
        return SlideConfig.create(**values)

    @property
    def is_valid(self) -> bool:
        return bool(self.host) and len(self.device_code) == DEVICE_CODE_LENGTH

    @property
    def is_complete(self) -> bool:
        return bool(self.host) and bool(self.device_code)

    @property
    def base_url(self) -> str:
        if "://" in self.host:
            return self.host.rstrip("/")
        return f"{DEFAULT_SCHEME}{self.host.rstrip('/')}"

    def position_for_percent(self, percent: float) -> float:
        # 0 % = open bound, 100 % = closed bound
        return self.open_position + (self.close_position - self.open_position) * (percent / 100.0)
