import base64

import pytest

from imagetext.core.settings import ReadClientConfig

ENDPOINT = "https://vision.example.com/"
OPERATION_URL = "https://vision.example.com/vision/v2.0/read/operations/op-123"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16


@pytest.fixture
def config() -> ReadClientConfig:
    return ReadClientConfig(
        endpoint=ENDPOINT,
        subscription_key="test-key",
        poll_delay_seconds=3.0,
        timeout_seconds=5.0,
    )


@pytest.fixture
def png_base64() -> str:
    return base64.b64encode(PNG_BYTES).decode("ascii")


class RecordingSleep:
    """Stands in for asyncio.sleep; records waits into a shared event list."""

    def __init__(self, events: list):
        self.events = events
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.events.append(("sleep", seconds))


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def recording_sleep(events) -> RecordingSleep:
    return RecordingSleep(events)
