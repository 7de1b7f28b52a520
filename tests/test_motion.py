# tests/test_motion.py
import math

import pytest

from fakes.fake_api import FakeSlideApi
from slide_local.config import SlideConfig
from slide_local.errors import SlideInputError, SlideTimeoutError, SlideUnreachableError
from slide_local.motion import MotionController, SettlePolicy


@pytest.mark.asyncio
async def test_settles_after_two_identical_reads(fast_policy):
    api = FakeSlideApi([0.3, 0.3])
    status = await MotionController(api, fast_policy).wait_until_settled()

    assert status.current_position == 0.3
    assert api.names() == ["get_info", "get_info"]


@pytest.mark.asyncio
async def test_settles_on_first_repeated_pair(fast_policy):
    api = FakeSlideApi([0.3, 0.32, 0.32, 0.5])
    status = await MotionController(api, fast_policy).wait_until_settled()

    assert status.current_position == 0.32
    assert api.names() == ["get_info"] * 3


@pytest.mark.asyncio
async def test_settle_gives_up_after_max_polls(fast_policy):
    api = FakeSlideApi([i / 100 for i in range(50)])

    with pytest.raises(SlideTimeoutError) as exc_info:
        await MotionController(api, fast_policy).wait_until_settled()

    assert exc_info.value.error.code == 408
    assert len(api.calls) == fast_policy.max_polls


@pytest.mark.asyncio
async def test_set_position_short_circuits_when_already_there(fast_policy):
    api = FakeSlideApi([0.4])
    status = await MotionController(api, fast_policy).set_position(0.4)

    assert status.current_position == 0.4
    assert api.names() == ["get_info"]


@pytest.mark.asyncio
async def test_set_position_moves_then_polls_then_reads(fast_policy):
    api = FakeSlideApi([0.1, 0.4, 0.6, 0.6, 0.6])
    status = await MotionController(api, fast_policy).set_position(0.6)

    assert status.current_position == 0.6
    assert api.names() == ["get_info", "set_pos", "get_info", "get_info", "get_info", "get_info"]
    assert api.calls[1] == ("set_pos", 0.6)


@pytest.mark.asyncio
@pytest.mark.parametrize("target", [1.5, -0.1, math.nan, math.inf, 10**400, "abc", None, True])
async def test_invalid_positions_rejected_before_any_call(fast_policy, target):
    api = FakeSlideApi([0.4])

    with pytest.raises(SlideInputError) as exc_info:
        await MotionController(api, fast_policy).set_position(target)

    err = exc_info.value.error
    assert err.code == 422
    assert err.title == "Invalid position passed"
    assert api.calls == []


@pytest.mark.asyncio
async def test_requested_position_clamped_to_open_bound(fast_policy):
    cfg = SlideConfig.create("slide", "ABCD1234", 0.2, 0.9)
    api = FakeSlideApi([0.5, 0.2, 0.2], config=cfg)

    await MotionController(api, fast_policy).set_position(0.05)

    assert ("set_pos", 0.2) in api.calls


@pytest.mark.asyncio
async def test_open_and_close_force_absolute_targets(fast_policy):
    cfg = SlideConfig.create("slide", "ABCD1234", 0.2, 0.9)

    api = FakeSlideApi([0.5, 0.0, 0.0], config=cfg)
    status = await MotionController(api, fast_policy).open()
    assert ("set_pos", 0.0) in api.calls
    assert status.suggest_calibration is True
    assert status.open_percent == 100

    api = FakeSlideApi([0.5, 1.0, 1.0], config=cfg)
    await MotionController(api, fast_policy).close()
    assert ("set_pos", 1.0) in api.calls


@pytest.mark.asyncio
async def test_percent_requests(fast_policy):
    api = FakeSlideApi([0.0, 0.5, 0.5])
    await MotionController(api, fast_policy).set_percent(50)
    assert ("set_pos", 0.5) in api.calls

    cfg = SlideConfig.create("slide", "ABCD1234", 0.2, 0.6)
    api = FakeSlideApi([0.0, 0.4, 0.4], config=cfg)
    await MotionController(api, fast_policy).set_calibrated_percent(50)
    assert api.calls[1][0] == "set_pos"
    assert api.calls[1][1] == pytest.approx(0.4)


@pytest.mark.asyncio
@pytest.mark.parametrize("percent", [150, -1, math.inf, -math.inf, math.nan, "half"])
async def test_percent_out_of_range_rejected(fast_policy, percent):
    api = FakeSlideApi([0.0])
    controller = MotionController(api, fast_policy)

    with pytest.raises(SlideInputError) as exc_info:
        await controller.set_percent(percent)
    assert exc_info.value.error.code == 422

    with pytest.raises(SlideInputError) as exc_info:
        await controller.set_calibrated_percent(percent)

    assert exc_info.value.error.code == 422
    assert api.calls == []


@pytest.mark.asyncio
async def test_calibrate_waits_for_settle(fast_policy):
    api = FakeSlideApi([0.7, 0.0, 0.0, 0.0])
    status = await MotionController(api, fast_policy).calibrate()

    assert api.names()[0] == "calibrate"
    assert api.names().count("get_info") == 4
    assert status.current_position == 0.0


@pytest.mark.asyncio
async def test_errors_propagate_unchanged(fast_policy):
    api = FakeSlideApi([0.1, 0.3])
    boom = SlideUnreachableError("gone")
    api.fail_on["set_pos"] = boom

    with pytest.raises(SlideUnreachableError) as exc_info:
        await MotionController(api, fast_policy).set_position(0.3)

    assert exc_info.value is boom
    assert api.names() == ["get_info", "set_pos"]


@pytest.mark.asyncio
async def test_fractional_percent_numbers_and_strings_agree(fast_policy):
    for percent in (50.7, "50.7"):
        api = FakeSlideApi([0.0, 0.5, 0.5])
        await MotionController(api, fast_policy).set_percent(percent)
        assert ("set_pos", 0.5) in api.calls


@pytest.mark.parametrize("max_polls", [0, 1, -3])
def test_settle_policy_needs_room_for_two_samples(max_polls):
    with pytest.raises(ValueError):
        SettlePolicy(max_polls=max_polls)

    assert SettlePolicy(max_polls=2).max_polls == 2
    assert SettlePolicy(max_polls=None).max_polls is None
