# tests/conftest.py

import aiohttp
import pytest

from fakes.fake_slide_server import FakeSlide
from slide_local.motion import SettlePolicy


@pytest.fixture
def fast_policy():
    return SettlePolicy(start_delay=0, poll_interval=0, cooldown=0, calibrate_delay=0, max_polls=10)


@pytest.fixture
async def fake_slide(aiohttp_server):
    fake = FakeSlide()
    server = await aiohttp_server(fake.app())
    fake.host = f"{server.host}:{server.port}"
    return fake


@pytest.fixture
async def session():
    async with aiohttp.ClientSession() as s:
        yield s
