from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .api import SlideLocalApi, SlideStatus
from .const import (
    CALIBRATE_DELAY_SEC,
    COOLDOWN_SEC,
    MAX_POLLS,
    POLL_INTERVAL_SEC,
    START_DELAY_SEC,
)
from .errors import SlideInputError, SlideTimeoutError

_LOGGER = logging.getLogger(__name__)

POSITION_SCHEMA = vol.Schema(vol.All(vol.Coerce(float), vol.Range(min=0.0, max=1.0)))
PERCENT_SCHEMA = vol.Schema(vol.All(vol.Coerce(float), vol.Range(min=0, max=100), int))


@dataclass(frozen=True)
class SettlePolicy:
    start_delay: float = START_DELAY_SEC
    poll_interval: float = POLL_INTERVAL_SEC
    cooldown: float = COOLDOWN_SEC
    calibrate_delay: float = CALIBRATE_DELAY_SEC
    max_polls: int | None = MAX_POLLS

    def __post_init__(self) -> None:
        # Settling needs two samples to compare
        if self.max_polls is not None and self.max_polls < 2:
            raise ValueError(f"max_polls must be at least 2, got {self.max_polls}")


def _validate_position(value: Any) -> float:
    if isinstance(value, bool):
        value = None
    try:
        return POSITION_SCHEMA(value)
    except (vol.Invalid, OverflowError) as e:
        raise SlideInputError(
            "Please pass a float between 0.0 and 1.0 as the new position.",
            title="Invalid position passed",
        ) from e


def _validate_percent(value: Any) -> int:
    if isinstance(value, bool):
        value = None
    try:
        return PERCENT_SCHEMA(value)
    except (vol.Invalid, OverflowError) as e:
        raise SlideInputError(
            'Please pass a percentage between 0 and 100, e.g. { "percent": 50 }.',
        ) from e


class MotionController:
    """Drives move/calibrate requests until the Slide stops moving.

    The SetPos and Calibrate RPCs return as soon as the motor starts, so every
    operation is followed by polling GetInfo until two consecutive samples
    report the same position.
    """

    def __init__(self, api: SlideLocalApi, policy: SettlePolicy | None = None) -> None:
        self.api = api
        self.policy = policy or SettlePolicy()

    async def wait_until_settled(self) -> SlideStatus:
        policy = self.policy
        await asyncio.sleep(policy.start_delay)

        last: float | None = None
        polls = 0
        while True:
            status = await self.api.get_info()
            polls += 1
            _LOGGER.debug("Poll %d: position %s", polls, status.current_position)

            if last is not None and status.current_position == last:
                await asyncio.sleep(policy.cooldown)
                return status

            if policy.max_polls is not None and polls >= policy.max_polls:
                _LOGGER.warning(
                    "Slide at %s still moving after %d polls", self.api.config.host, polls
                )
                raise SlideTimeoutError(
                    f'The Slide at hostname "{self.api.config.host}" kept moving after '
                    f"{polls} status polls."
                )

            last = status.current_position
            await asyncio.sleep(policy.poll_interval)

    async def set_position(self, target: Any, force: bool = False) -> SlideStatus:
        position = _validate_position(target)
        if not force:
            # Percentage requests never drive past the open stop
            position = max(position, self.api.config.open_position)

        current = await self.api.get_info()
        if current.current_position == position:
            _LOGGER.debug("Slide already at %s, nothing to do", position)
            return current

        _LOGGER.debug("Moving Slide at %s to %s", self.api.config.host, position)
        await self.api.set_pos(position)
        await self.wait_until_settled()
        return await self.api.get_info()

    async def set_percent(self, percent: Any) -> SlideStatus:
        return await self.set_position(_validate_percent(percent) / 100.0)

    async def set_calibrated_percent(self, percent: Any) -> SlideStatus:
        value = _validate_percent(percent)
        return await self.set_position(self.api.config.position_for_percent(value))

    async def open(self) -> SlideStatus:
        return await self.set_position(0.0, force=True)

    async def close(self) -> SlideStatus:
        return await self.set_position(1.0, force=True)

    async def calibrate(self) -> SlideStatus:
        await self.api.calibrate()
        await asyncio.sleep(self.policy.calibrate_delay)
        await self.wait_until_settled()
        return await self.api.get_info()
