"""
Host-facing image-to-text control.

Binds the three host collaborators (device capture, change notification
and localized strings) to one ReadAsyncClient. The control keeps only the
values the host renders: status text, error flag, extracted text, image
preview and whether the capture trigger should be disabled.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from imagetext.clients.read_async_client import ReadAsyncClient
from imagetext.core.messages import MessageKey, StringLookup, resolve
from imagetext.models.dto import (
    CapturedImage,
    OperationOutcome,
    OperationState,
    OutcomeStatus,
)
from imagetext.utils.file_detection import (
    build_preview_url,
    is_supported_media_subtype,
    media_subtype_from_name,
)

logger = logging.getLogger(__name__)

CaptureFunc = Callable[[], Awaitable[Optional[CapturedImage]]]


class ImageToTextControl:
    def __init__(
        self,
        client: ReadAsyncClient,
        capture: CaptureFunc,
        notify: Callable[[], None],
        get_string: Optional[StringLookup] = None,
    ) -> None:
        self._client = client
        self._capture = capture
        self._notify = notify
        self._get_string = get_string

        self.state = OperationState.IDLE
        self.status_text = ""
        self.is_error = False
        self.extracted_text = ""
        self.preview_url: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        """True while the capture trigger must stay disabled."""
        return self.state in (OperationState.UPLOADING, OperationState.POLLING)

    def get_outputs(self) -> dict[str, str]:
        return {"extracted_text": self.extracted_text}

    async def on_capture_requested(self) -> Optional[OperationOutcome]:
        """Capture an image and run it through text recognition.

        Returns None when the request was ignored (already busy) or the
        capture call itself failed.
        """
        if self.is_busy:
            logger.debug("Capture requested while busy, ignoring")
            return None

        self.preview_url = None

        try:
            capture = await self._capture()
        except Exception as e:
            logger.warning("Image capture failed: %s", e)
            self._show_error(str(e))
            self._notify()
            return None

        if capture is not None and capture.file_name:
            media_subtype = media_subtype_from_name(capture.file_name)
            if is_supported_media_subtype(media_subtype):
                self.preview_url = build_preview_url(media_subtype, capture.file_content)

        outcome = await self._client.run(capture, on_state_change=self._on_state_change)
        self._apply_outcome(outcome)
        self._notify()
        return outcome

    def _on_state_change(self, state: OperationState) -> None:
        self.state = state
        if state == OperationState.UPLOADING:
            self._show_status(resolve(MessageKey.IMAGE_PROCESSING, self._get_string))
            self._notify()
        elif state == OperationState.POLLING:
            self._show_status(resolve(MessageKey.TEXT_SUBMITTED, self._get_string))
            self._notify()

    def _apply_outcome(self, outcome: OperationOutcome) -> None:
        if outcome.status == OutcomeStatus.SUCCESS:
            self.extracted_text = outcome.text or ""
            self._hide_error()
        elif outcome.status == OutcomeStatus.EMPTY_RESULT:
            self.extracted_text = ""
            self._show_error(resolve(MessageKey.NOTHING_TO_BE_PARSED, self._get_string))
        elif outcome.status == OutcomeStatus.CANCELLED:
            self._hide_error()
        elif outcome.status == OutcomeStatus.VALIDATION_ERROR:
            if outcome.error_code == "UNSUPPORTED_MEDIA_TYPE":
                self._show_error(
                    resolve(MessageKey.IMAGE_TYPE_NOT_SUPPORTED, self._get_string)
                )
            else:
                self._show_error(outcome.reason or "")
        else:
            self._show_error(outcome.message or "")

    def _show_status(self, text: str) -> None:
        self.status_text = text
        self.is_error = False

    def _show_error(self, text: str) -> None:
        self.status_text = text
        self.is_error = True

    def _hide_error(self) -> None:
        self.status_text = ""
        self.is_error = False
