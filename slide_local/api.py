from __future__ import annotations

import asyncio
import errno
import logging
import math
from dataclasses import dataclass
from typing import Any

import aiohttp

from .config import SlideConfig
from .const import (
    AUTH_USERNAME,
    REQUEST_TIMEOUT_SEC,
    RPC_CALIBRATE,
    RPC_GET_INFO,
    RPC_SET_POS,
    RPC_STOP,
    RPC_WIFI,
)
from .errors import (
    SlideAuthError,
    SlideConfigurationError,
    SlideInputError,
    SlideProtocolError,
    SlideUnknownError,
    SlideUnreachableError,
)

_LOGGER = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class SlideStatus:
    current_position: float
    open_position: float
    close_position: float
    suggest_calibration: bool
    percentage: int
    open_percent: int

    @classmethod
    def from_position(cls, position: float, config: SlideConfig) -> SlideStatus:
        span = config.close_position - config.open_position
        ratio = (position - config.open_position) / span
        percentage = _round_half_up(max(0.0, min(1.0, ratio)) * 100)
        return cls(
            current_position=position,
            open_position=config.open_position,
            close_position=config.close_position,
            suggest_calibration=(
                position < config.open_position or position > config.close_position
            ),
            percentage=percentage,
            open_percent=100 - percentage,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": "success",
            "currentPosition": self.current_position,
            "openPosition": self.open_position,
            "closePosition": self.close_position,
            "suggestCalibration": self.suggest_calibration,
            "percentage": self.percentage,
            "openPercent": self.open_percent,
        }


def _connection_refused(err: aiohttp.ClientConnectorError) -> bool:
    os_error = err.os_error
    return isinstance(os_error, ConnectionRefusedError) or (
        getattr(os_error, "errno", None) == errno.ECONNREFUSED
    )


class SlideLocalApi:
    """Digest-authenticated access to the Slide local RPC endpoints."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: SlideConfig,
        timeout: float = REQUEST_TIMEOUT_SEC,
    ) -> None:
        self._session = session
        self._config = config
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._lock = asyncio.Lock()

    @property
    def config(self) -> SlideConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    async def call(self, path: str, body: dict[str, Any] | None = None) -> Any:
        """POST ``body`` to ``path`` and return the decoded JSON reply.

        A fresh digest middleware is built for every call, so each exchange
        goes through its own 401 challenge. The firmware keeps no sessions.
        """
        config = self._config
        if not config.is_complete:
            raise SlideConfigurationError(
                "Please enter both a hostname and a devicecode in order to control the Slide."
            )

        url = f"{self.base_url}{path}"
        digest = aiohttp.DigestAuthMiddleware(AUTH_USERNAME, config.device_code)
        payload: dict[str, Any] = {"json": body} if body is not None else {"data": b""}

        _LOGGER.debug("POST %s %s", url, body)
        try:
            async with self._lock:
                async with self._session.post(
                    url,
                    headers={"Content-Type": "application/json"},
                    timeout=self._timeout,
                    middlewares=(digest,),
                    **payload,
                ) as resp:
                    if resp.status == 401 or resp.reason == "Unauthorized":
                        raise SlideAuthError(
                            f'The Slide at hostname "{config.host}" rejected device code '
                            f'"{config.device_code}".'
                        )
                    if not 200 <= resp.status < 300:
                        raise SlideProtocolError(
                            f'The Slide at hostname "{config.host}" with device code '
                            f'"{config.device_code}" gave an unclear response.',
                            title=resp.reason or f"HTTP {resp.status}",
                        )
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError as e:
                        raise SlideProtocolError(
                            f'The Slide at hostname "{config.host}" returned invalid JSON: {e}'
                        ) from e
        except aiohttp.ClientConnectorError as e:
            if _connection_refused(e):
                raise SlideUnreachableError(
                    f'The Slide at hostname "{config.host}" with device code '
                    f'"{config.device_code}" is unresponsive.'
                ) from e
            raise SlideUnknownError(str(e)) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SlideUnknownError(str(e) or e.__class__.__name__) from e

        _LOGGER.debug("Reply from %s: %s", url, data)
        return data

    def status_from_position(self, position: float) -> SlideStatus:
        return SlideStatus.from_position(position, self._config)

    async def get_info(self) -> SlideStatus:
        data = await self.call(RPC_GET_INFO)
        pos = data.get("pos") if isinstance(data, dict) else None
        if isinstance(pos, bool) or not isinstance(pos, (int, float)):
            raise SlideProtocolError(
                f'The Slide at hostname "{self._config.host}" did not report a position.'
            )
        status = self.status_from_position(float(pos))
        if status.suggest_calibration:
            _LOGGER.warning(
                "Slide at %s reports position %s outside calibrated range [%s, %s]",
                self._config.host,
                status.current_position,
                status.open_position,
                status.close_position,
            )
        return status

    async def set_pos(self, position: float) -> Any:
        return await self.call(RPC_SET_POS, {"pos": position})

    async def calibrate(self) -> Any:
        return await self.call(RPC_CALIBRATE)

    async def stop(self) -> Any:
        return await self.call(RPC_STOP)

    async def update_wifi(self, ssid: str, password: str) -> Any:
        ssid = (ssid or "").strip()
        password = (password or "").strip()
        if not ssid or not password:
            raise SlideInputError(
                "Please pass both a new SSID and its password.",
            )
        return await self.call(RPC_WIFI, {"ssid": ssid, "pass": password})
