"""Unit tests for the host-facing ImageToTextControl."""

import httpx
import pytest

from imagetext.clients.read_async_client import ReadAsyncClient
from imagetext.control import ImageToTextControl
from imagetext.core.messages import MessageKey
from imagetext.models.dto import CapturedImage, OperationState, OutcomeStatus
from tests.conftest import OPERATION_URL


def read_api(poll_body=None, poll_status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(202, headers={"Operation-Location": OPERATION_URL})
        body = poll_body if poll_body is not None else {
            "recognitionResults": [{"lines": [{"text": "Total"}, {"text": "42.00"}]}]
        }
        return httpx.Response(poll_status, json=body)

    return httpx.MockTransport(handler)


class HostRecorder:
    """Collects a snapshot of the control each time the host is notified."""

    def __init__(self):
        self.control = None
        self.snapshots = []

    def notify(self):
        c = self.control
        self.snapshots.append((c.state, c.status_text, c.is_error, c.is_busy))


def make_control(config, sleep, capture, transport=None, get_string=None):
    host = HostRecorder()
    client = ReadAsyncClient(config, transport=transport or read_api(), sleep=sleep)
    control = ImageToTextControl(client, capture, host.notify, get_string)
    host.control = control
    return control, host


def capture_returning(result):
    async def capture():
        return result

    return capture


class TestImageToTextControl:
    """Tests for the capture → recognize → display flow."""

    @pytest.mark.asyncio
    async def test_success_flow(self, config, recording_sleep, png_base64):
        """Test status messages, busy flag and final text across the run."""
        control, host = make_control(
            config,
            recording_sleep,
            capture_returning(CapturedImage(file_name="receipt.png", file_content=png_base64)),
        )

        outcome = await control.on_capture_requested()

        assert outcome.status == OutcomeStatus.SUCCESS
        assert control.extracted_text == "Total 42.00"
        assert control.get_outputs() == {"extracted_text": "Total 42.00"}
        assert control.status_text == ""
        assert control.is_error is False
        assert control.is_busy is False
        assert control.preview_url == f"data:image/png;base64,{png_base64}"
        assert host.snapshots == [
            (OperationState.UPLOADING, MessageKey.IMAGE_PROCESSING.default_text, False, True),
            (OperationState.POLLING, MessageKey.TEXT_SUBMITTED.default_text, False, True),
            (OperationState.DONE, "", False, False),
        ]

    @pytest.mark.asyncio
    async def test_host_strings_are_used(self, config, recording_sleep, png_base64):
        """Test the localized lookup replaces the default text."""
        strings = {MessageKey.IMAGE_PROCESSING.key: "Bild wird verarbeitet"}
        control, host = make_control(
            config,
            recording_sleep,
            capture_returning(CapturedImage(file_name="a.jpg", file_content=png_base64)),
            get_string=strings.get,
        )

        await control.on_capture_requested()

        assert host.snapshots[0][1] == "Bild wird verarbeitet"
        assert host.snapshots[1][1] == MessageKey.TEXT_SUBMITTED.default_text

    @pytest.mark.asyncio
    async def test_nothing_to_be_parsed(self, config, recording_sleep, png_base64):
        """Test an empty result is shown as an error message."""
        control, _ = make_control(
            config,
            recording_sleep,
            capture_returning(CapturedImage(file_name="a.png", file_content=png_base64)),
            transport=read_api(poll_body={"recognitionResults": [{"lines": []}]}),
        )
        control.extracted_text = "stale"

        outcome = await control.on_capture_requested()

        assert outcome.status == OutcomeStatus.EMPTY_RESULT
        assert control.extracted_text == ""
        assert control.status_text == MessageKey.NOTHING_TO_BE_PARSED.default_text
        assert control.is_error is True

    @pytest.mark.asyncio
    async def test_unsupported_type(self, config, recording_sleep, png_base64):
        """Test an unsupported capture shows the not-supported message."""
        control, host = make_control(
            config,
            recording_sleep,
            capture_returning(CapturedImage(file_name="a.gif", file_content=png_base64)),
        )

        await control.on_capture_requested()

        assert control.status_text == MessageKey.IMAGE_TYPE_NOT_SUPPORTED.default_text
        assert control.is_error is True
        assert control.preview_url is None
        assert len(host.snapshots) == 1

    @pytest.mark.asyncio
    async def test_cancelled_capture_clears_error(self, config, recording_sleep):
        """Test a cancelled capture hides any previous error."""
        control, host = make_control(config, recording_sleep, capture_returning(None))
        control.status_text = "previous failure"
        control.is_error = True

        outcome = await control.on_capture_requested()

        assert outcome.status == OutcomeStatus.CANCELLED
        assert control.status_text == ""
        assert control.is_error is False
        assert control.preview_url is None
        assert recording_sleep.calls == []

    @pytest.mark.asyncio
    async def test_transport_error_message(self, config, recording_sleep, png_base64):
        """Test a poll failure shows the classified message."""
        control, _ = make_control(
            config,
            recording_sleep,
            capture_returning(CapturedImage(file_name="a.png", file_content=png_base64)),
            transport=read_api(poll_body={"error": {"message": "bad token"}}, poll_status=401),
        )

        await control.on_capture_requested()

        assert control.status_text == "Unauthorized (401): bad token"
        assert control.is_error is True
        assert control.state == OperationState.ERROR

    @pytest.mark.asyncio
    async def test_capture_failure(self, config, recording_sleep):
        """Test a failing device capture is shown and nothing is sent."""

        async def broken_capture():
            raise RuntimeError("Camera unavailable")

        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(500)

        control, host = make_control(
            config, recording_sleep, broken_capture, transport=httpx.MockTransport(handler)
        )

        outcome = await control.on_capture_requested()

        assert outcome is None
        assert control.status_text == "Camera unavailable"
        assert control.is_error is True
        assert requests == []
        assert len(host.snapshots) == 1

    @pytest.mark.asyncio
    async def test_ignored_while_busy(self, config, recording_sleep):
        """Test a second trigger during a run is ignored."""
        calls = []

        async def capture():
            calls.append(1)
            return None

        control, _ = make_control(config, recording_sleep, capture)
        control.state = OperationState.POLLING

        assert await control.on_capture_requested() is None
        assert calls == []

    @pytest.mark.asyncio
    async def test_preview_cleared_by_later_capture(self, config, recording_sleep, png_base64):
        """Test a cancelled or unsupported capture drops the previous preview."""
        captures = iter(
            [
                CapturedImage(file_name="first.png", file_content=png_base64),
                None,
                CapturedImage(file_name="first.png", file_content=png_base64),
                CapturedImage(file_name="clip.gif", file_content=png_base64),
            ]
        )

        async def capture():
            return next(captures)

        control, _ = make_control(config, recording_sleep, capture)

        await control.on_capture_requested()
        assert control.preview_url == f"data:image/png;base64,{png_base64}"

        await control.on_capture_requested()
        assert control.preview_url is None

        await control.on_capture_requested()
        assert control.preview_url is not None

        await control.on_capture_requested()
        assert control.preview_url is None
