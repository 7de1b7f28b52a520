"""Local control of Slide curtain motors."""
from .api import SlideLocalApi, SlideStatus
from .config import SlideConfig
from .errors import (
    SlideApiError,
    SlideAuthError,
    SlideConfigurationError,
    SlideError,
    SlideInputError,
    SlideProtocolError,
    SlideTimeoutError,
    SlideUnknownError,
    SlideUnreachableError,
)
from .motion import MotionController, SettlePolicy
from .slide import Slide

__all__ = [
    "MotionController",
    "SettlePolicy",
    "Slide",
    "SlideApiError",
    "SlideAuthError",
    "SlideConfig",
    "SlideConfigurationError",
    "SlideError",
    "SlideInputError",
    "SlideLocalApi",
    "SlideProtocolError",
    "SlideStatus",
    "SlideTimeoutError",
    "SlideUnknownError",
    "SlideUnreachableError",
]
