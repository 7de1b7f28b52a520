from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from typing import Any, TypeVar

import aiohttp

from .api import SlideLocalApi, SlideStatus
from .config import SlideConfig
from .const import DEFAULT_CLOSE_POSITION, DEFAULT_OPEN_POSITION, REQUEST_TIMEOUT_SEC
from .errors import SlideApiError, SlideError
from .motion import MotionController, SettlePolicy

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class Slide:
    """Entry point for host integrations.

    Every operation resolves to its result or to a :class:`SlideError`;
    API errors never propagate out of this class. Only one operation should
    be in flight at a time, callers serialize their own requests.
    """

    def __init__(
        self,
        config: SlideConfig,
        session: aiohttp.ClientSession | None = None,
        policy: SettlePolicy | None = None,
        timeout: float = REQUEST_TIMEOUT_SEC,
    ) -> None:
        self.config = config
        self._owns_session = session is None
        self._session = session
        self._policy = policy or SettlePolicy()
        self._timeout = timeout
        self._controller: MotionController | None = None

    @classmethod
    def configure(
        cls,
        host: Any,
        device_code: Any,
        open_position: Any = DEFAULT_OPEN_POSITION,
        close_position: Any = DEFAULT_CLOSE_POSITION,
        *,
        session: aiohttp.ClientSession | None = None,
        policy: SettlePolicy | None = None,
        timeout: float = REQUEST_TIMEOUT_SEC,
    ) -> Slide:
        config = SlideConfig.create(host, device_code, open_position, close_position)
        return cls(config, session=session, policy=policy, timeout=timeout)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any] | None,
        *,
        session: aiohttp.ClientSession | None = None,
        policy: SettlePolicy | None = None,
    ) -> Slide:
        return cls(SlideConfig.from_mapping(data), session=session, policy=policy)

    def reconfigure(self, **changes: Any) -> Slide:
        """Return a new Slide with updated settings.

        An open session is shared with the new instance, which then leaves
        closing it to this one.
        """
        return Slide(
            self.config.replace(**changes),
            session=self._session,
            policy=self._policy,
            timeout=self._timeout,
        )

    @property
    def is_valid(self) -> bool:
        return self.config.is_valid

    @property
    def controller(self) -> MotionController:
        if self._controller is None:
            if self._session is None:
                self._session = aiohttp.ClientSession()
            api = SlideLocalApi(self._session, self.config, timeout=self._timeout)
            self._controller = MotionController(api, self._policy)
        return self._controller

    async def close_session(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._controller = None

    async def __aenter__(self) -> Slide:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close_session()

    async def _run(self, name: str, operation: Awaitable[T]) -> T | SlideError:
        try:
            return await operation
        except SlideApiError as e:
            _LOGGER.debug("%s failed for %s: %s", name, self.config.host, e.error)
            return e.error

    async def get_status(self) -> SlideStatus | SlideError:
        return await self._run("get_status", self.controller.api.get_info())

    async def set_position(self, target: Any, force: bool = False) -> SlideStatus | SlideError:
        return await self._run("set_position", self.controller.set_position(target, force))

    async def set_percent(self, percent: Any) -> SlideStatus | SlideError:
        return await self._run("set_percent", self.controller.set_percent(percent))

    async def set_calibrated_percent(self, percent: Any) -> SlideStatus | SlideError:
        return await self._run(
            "set_calibrated_percent", self.controller.set_calibrated_percent(percent)
        )

    async def open(self) -> SlideStatus | SlideError:
        return await self._run("open", self.controller.open())

    async def close(self) -> SlideStatus | SlideError:
        return await self._run("close", self.controller.close())

    async def stop(self) -> Any:
        return await self._run("stop", self.controller.api.stop())

    async def recalibrate(self) -> SlideStatus | SlideError:
        return await self._run("recalibrate", self.controller.calibrate())

    async def update_network(self, ssid: str, password: str) -> Any:
        return await self._run("update_network", self.controller.api.update_wifi(ssid, password))
