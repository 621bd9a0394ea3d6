"""
Typed contracts shared by the client, the control and the CLI.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class CapturedImage(BaseModel):
    """
    What the device capture call hands back.

    `file_content` is base64, optionally wrapped in a full data URL.
    A missing or empty `file_name` means the user cancelled the capture.
    """

    file_name: str | None = None
    file_content: str = ""


class ImagePayload(BaseModel):
    """Raw image bytes ready for upload."""

    content: bytes
    media_subtype: str
    file_name: str


class JobHandle(BaseModel):
    """Poll URL taken from the submission's Operation-Location header."""

    location: str


class RecognitionLine(BaseModel):
    text: str = ""


class RecognitionResult(BaseModel):
    """
    Lines of the first recognition result, in service order.
    """

    lines: list[RecognitionLine] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(line.text for line in self.lines).strip()

    @property
    def is_empty(self) -> bool:
        return self.text == ""


class OperationState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    POLLING = "polling"
    DONE = "done"
    ERROR = "error"
    CANCELLED = "cancelled"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    EMPTY_RESULT = "empty_result"
    CANCELLED = "cancelled"
    VALIDATION_ERROR = "validation_error"
    TRANSPORT_ERROR = "transport_error"


class OperationOutcome(BaseModel):
    """
    Terminal result of one capture/submit/poll cycle.

    Exactly one is produced per run. `text` is set for SUCCESS, `reason`
    for VALIDATION_ERROR, `http_status` and `message` for TRANSPORT_ERROR.
    """

    status: OutcomeStatus
    text: str | None = None
    reason: str | None = None
    http_status: int | None = None
    message: str | None = None
    error_code: str | None = None
    timings: dict[str, float] = Field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.status in (
            OutcomeStatus.VALIDATION_ERROR,
            OutcomeStatus.TRANSPORT_ERROR,
        )

    @classmethod
    def success(cls, text: str) -> "OperationOutcome":
        return cls(status=OutcomeStatus.SUCCESS, text=text)

    @classmethod
    def empty(cls) -> "OperationOutcome":
        return cls(status=OutcomeStatus.EMPTY_RESULT, text="")

    @classmethod
    def cancelled(cls) -> "OperationOutcome":
        return cls(status=OutcomeStatus.CANCELLED)

    @classmethod
    def validation_error(cls, reason: str, error_code: str | None = None) -> "OperationOutcome":
        return cls(
            status=OutcomeStatus.VALIDATION_ERROR, reason=reason, error_code=error_code
        )

    @classmethod
    def transport_error(
        cls, http_status: int, message: str, error_code: str | None = None
    ) -> "OperationOutcome":
        return cls(
            status=OutcomeStatus.TRANSPORT_ERROR,
            http_status=http_status,
            message=message,
            error_code=error_code,
        )
