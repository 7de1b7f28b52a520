from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class SlideError:
    """Structured error handed back to callers instead of an exception."""

    code: int
    title: str
    message: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class SlideApiError(Exception):
    """Raised on any API/transport error."""

    code = 500
    title = "Unknown error"

    def __init__(self, message: str, title: str | None = None) -> None:
        super().__init__(message)
        self.error = SlideError(self.code, title or self.title, message)

    @property
    def message(self) -> str:
        return self.error.message


class SlideConfigurationError(SlideApiError):
    code = 400
    title = "Incomplete configuration"


class SlideAuthError(SlideApiError):
    code = 401
    title = "Invalid device code"


class SlideProtocolError(SlideApiError):
    code = 400
    title = "Unexpected response"


class SlideUnreachableError(SlideApiError):
    code = 404
    title = "Unable to connect"


class SlideTimeoutError(SlideApiError):
    code = 408
    title = "Device did not settle"


class SlideInputError(SlideApiError):
    code = 422
    title = "Invalid input"


class SlideUnknownError(SlideApiError):
    pass
