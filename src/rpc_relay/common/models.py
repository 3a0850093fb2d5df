from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

DEFAULT_CONTENT_TYPE = "application/json"
UNAVAILABLE_ERROR = "rpc unavailable"


class Completed(BaseModel):
    """An upstream returned an HTTP response, whatever its status."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    content_type: Optional[str] = None
    body: bytes = b""

    @property
    def media_type(self) -> str:
        return self.content_type or DEFAULT_CONTENT_TYPE


class Failed(BaseModel):
    """A single delivery attempt ended without a response."""

    model_config = ConfigDict(frozen=True)

    error: str


class AllFailed(BaseModel):
    """No target in the active sequence produced a response."""

    model_config = ConfigDict(frozen=True)

    error: str = UNAVAILABLE_ERROR

    def to_body(self) -> dict:
        return {"error": self.error}


AttemptOutcome = Union[Completed, Failed]
ForwardResult = Union[Completed, AllFailed]
