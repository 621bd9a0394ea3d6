"""Exception hierarchy for the Read API client.

These exceptions travel between the internal submit/poll steps only.
ReadAsyncClient.run converts every one of them into an OperationOutcome,
so callers of run never have to catch them.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Error categories for classification and logging."""

    VALIDATION = "validation"
    TRANSPORT = "transport"


class ImageTextError(Exception):
    """Base exception for all image-to-text errors.

    Attributes:
        message: Human-readable error message
        error_code: Application-specific error code
        category: Error category for classification
        details: Additional context (dict)
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }


class ImageValidationError(ImageTextError):
    """Image rejected locally, before any network access."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR", **kwargs):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.VALIDATION,
            details=kwargs.pop("details", None),
        )


class UnsupportedMediaTypeError(ImageValidationError):
    """The captured file is not a jpeg, jpg or png image.

    Args:
        media_subtype: The subtype that was rejected (may be empty)
    """

    def __init__(self, media_subtype: str):
        super().__init__(
            message=f"Unsupported image type: {media_subtype or '<none>'}",
            error_code="UNSUPPORTED_MEDIA_TYPE",
            details={"media_subtype": media_subtype},
        )
        self.media_subtype = media_subtype


class InvalidImageContentError(ImageValidationError):
    """The captured content could not be decoded into image bytes."""

    def __init__(self, reason: str):
        super().__init__(
            message="Image content is not valid base64",
            error_code="INVALID_IMAGE_CONTENT",
            details={"reason": reason},
        )


class TransportError(ImageTextError):
    """HTTP or network failure talking to the Read API.

    Args:
        http_status: Response status, 0 when no response was received
        message: Fully classified message, see parsers.classify_http_error
    """

    def __init__(
        self,
        http_status: int,
        message: str,
        error_code: str = "TRANSPORT_ERROR",
        **kwargs,
    ):
        additional_details = kwargs.pop("details", {})
        additional_details["http_status"] = http_status
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.TRANSPORT,
            details=additional_details,
        )
        self.http_status = http_status


class MissingOperationLocationError(TransportError):
    """Submission succeeded but the response carried no Operation-Location."""

    def __init__(self, http_status: int):
        super().__init__(
            http_status=http_status,
            message="Missing operation location in submission response",
            error_code="MISSING_OPERATION_LOCATION",
        )


class RecognitionNotReadyError(TransportError):
    """The single scheduled poll found the job still queued or running."""

    def __init__(self, http_status: int, job_status: str):
        super().__init__(
            http_status=http_status,
            message=f"Text recognition not finished yet (status: {job_status})",
            error_code="RECOGNITION_NOT_READY",
            details={"job_status": job_status},
        )
        self.job_status = job_status


class RecognitionFailedError(TransportError):
    """The service reported the recognition job as failed."""

    def __init__(self, http_status: int, job_status: str):
        super().__init__(
            http_status=http_status,
            message=f"Text recognition failed (status: {job_status})",
            error_code="RECOGNITION_FAILED",
            details={"job_status": job_status},
        )
        self.job_status = job_status


class MalformedResponseError(TransportError):
    """A 2xx poll body without a usable recognitionResults[0].lines list."""

    def __init__(self, http_status: int, detail: str):
        super().__init__(
            http_status=http_status,
            message=f"Malformed recognition response: {detail}",
            error_code="MALFORMED_RESPONSE",
        )
