import asyncio
import logging
import uuid
from typing import Awaitable, Callable, Optional, Union

import httpx

from imagetext.core.config import (
    FAILED_STATUSES,
    OPERATION_LOCATION_HEADER,
    PENDING_STATUSES,
    POLL_CONTENT_TYPE,
    READ_ANALYZE_PATH,
    SUBMIT_CONTENT_TYPE,
    SUBSCRIPTION_KEY_HEADER,
)
from imagetext.core.exceptions import (
    ImageValidationError,
    MalformedResponseError,
    MissingOperationLocationError,
    RecognitionFailedError,
    RecognitionNotReadyError,
    TransportError,
)
from imagetext.core.settings import ReadClientConfig
from imagetext.models.dto import (
    CapturedImage,
    ImagePayload,
    JobHandle,
    OperationOutcome,
    OperationState,
    RecognitionResult,
)
from imagetext.utils.file_detection import build_payload, validate_payload
from imagetext.utils.parsers import classify_http_error, parse_recognition_lines
from imagetext.utils.timing import StageTimers

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]
StateCallback = Callable[[OperationState], None]
ImageSource = Union[CapturedImage, ImagePayload, None]


class ReadAsyncClient:
    """Submit-then-poll client for the Computer Vision Read API.

    One call to `run` drives one image through upload, a fixed wait and a
    single poll. `submit` and `poll` are the individual steps; they raise
    ImageTextError subclasses, which `run` turns into an OperationOutcome.

    `sleep` is awaited for the poll delay and can be replaced in tests.
    """

    def __init__(
        self,
        config: ReadClientConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.config = config
        self._transport = transport
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_ssl,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def analyze_url(self) -> str:
        return f"{self.config.endpoint.rstrip('/')}/{READ_ANALYZE_PATH}"

    def _headers(self, content_type: str) -> dict[str, str]:
        return {
            "Content-Type": content_type,
            SUBSCRIPTION_KEY_HEADER: self.config.subscription_key.get_secret_value(),
        }

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        if not self._client:
            raise RuntimeError("Client not started")

        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise TransportError(
                http_status=0,
                message=classify_http_error(type(e).__name__, 0, ""),
                details={"reason": str(e)},
            ) from e

        if not resp.is_success:
            raise TransportError(
                http_status=resp.status_code,
                message=classify_http_error(resp.reason_phrase, resp.status_code, resp.text),
            )
        return resp

    async def submit(self, payload: ImagePayload) -> JobHandle:
        """Upload the image and return the poll handle.

        Raises:
            UnsupportedMediaTypeError: Before any request, for a bad subtype
            MissingOperationLocationError: 2xx without Operation-Location
            TransportError: Network failure or non-2xx response
        """
        validate_payload(payload)

        resp = await self._send(
            "POST",
            self.analyze_url,
            content=payload.content,
            headers=self._headers(SUBMIT_CONTENT_TYPE),
        )

        location = resp.headers.get(OPERATION_LOCATION_HEADER)
        if not location:
            raise MissingOperationLocationError(resp.status_code)
        return JobHandle(location=location)

    async def poll(self, handle: JobHandle, delay: Optional[float] = None) -> RecognitionResult:
        """Wait `delay` seconds, then fetch the result once.

        There is no retry loop; a job that is still running is reported as
        RecognitionNotReadyError and left to the caller.
        """
        await self._sleep(self.config.poll_delay_seconds if delay is None else delay)

        resp = await self._send(
            "GET", handle.location, headers=self._headers(POLL_CONTENT_TYPE)
        )

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(resp.status_code, "body is not JSON") from e

        job_status = str(data.get("status", "")) if isinstance(data, dict) else ""
        if job_status.lower() in PENDING_STATUSES:
            raise RecognitionNotReadyError(resp.status_code, job_status)
        if job_status.lower() in FAILED_STATUSES:
            raise RecognitionFailedError(resp.status_code, job_status)

        lines = parse_recognition_lines(data)
        if lines is None:
            raise MalformedResponseError(
                resp.status_code, "missing recognitionResults[0].lines"
            )
        return RecognitionResult(lines=lines)

    async def run(
        self,
        image: ImageSource,
        *,
        delay: Optional[float] = None,
        on_state_change: Optional[StateCallback] = None,
    ) -> OperationOutcome:
        """Drive one image through submit and poll.

        Never raises for validation or transport problems; every run ends in
        exactly one OperationOutcome. `on_state_change` is called after each
        state transition.
        """
        if self._client is None:
            async with self:
                return await self._run(image, delay, on_state_change)
        return await self._run(image, delay, on_state_change)

    async def _run(
        self,
        image: ImageSource,
        delay: Optional[float],
        on_state_change: Optional[StateCallback],
    ) -> OperationOutcome:
        operation_id = uuid.uuid4().hex[:12]
        timers = StageTimers()

        def emit(state: OperationState) -> None:
            if on_state_change is not None:
                on_state_change(state)

        try:
            payload = image if isinstance(image, ImagePayload) else build_payload(image)
            if payload is None:
                logger.info(
                    "Image capture cancelled",
                    extra={"operation_id": operation_id, "outcome": "cancelled"},
                )
                emit(OperationState.CANCELLED)
                return OperationOutcome.cancelled()

            validate_payload(payload)
            emit(OperationState.UPLOADING)

            with timers.timer("submit"):
                handle = await self.submit(payload)
            logger.info(
                "Image submitted for text recognition",
                extra={
                    "operation_id": operation_id,
                    "file_name": payload.file_name,
                    "media_subtype": payload.media_subtype,
                    "stage": "submit",
                    "duration_ms": timers.duration_ms("submit"),
                },
            )
            emit(OperationState.POLLING)

            with timers.timer("poll"):
                result = await self.poll(handle, delay)

        except ImageValidationError as e:
            logger.warning(
                "Image rejected: %s",
                e.message,
                extra={"operation_id": operation_id, "error_code": e.error_code},
            )
            outcome = OperationOutcome.validation_error(e.message, e.error_code)
        except TransportError as e:
            logger.error(
                "Text recognition request failed: %s",
                e.message,
                extra={
                    "operation_id": operation_id,
                    "http_status": e.http_status,
                    "error_code": e.error_code,
                },
            )
            outcome = OperationOutcome.transport_error(
                e.http_status, e.message, e.error_code
            )
        else:
            if result.is_empty:
                outcome = OperationOutcome.empty()
            else:
                outcome = OperationOutcome.success(result.text)

        outcome.timings = dict(timers.totals)
        logger.info(
            "Text recognition finished",
            extra={
                "operation_id": operation_id,
                "outcome": outcome.status.value,
                "duration_ms": timers.total_ms(),
            },
        )
        emit(OperationState.ERROR if outcome.is_error else OperationState.DONE)
        return outcome


async def recognize_image(
    image: ImageSource,
    config: ReadClientConfig,
    *,
    delay: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> OperationOutcome:
    async with ReadAsyncClient(config, transport=transport) as client:
        return await client.run(image, delay=delay)
