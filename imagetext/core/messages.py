"""
Registry of the status and error strings shown by the control.

The host platform normally supplies localized text for each key; the
English defaults below are used when no lookup is provided or when the
lookup has nothing for a key.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

StringLookup = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class MessageSpec:
    """Specification for a single user-facing message."""
    key: str
    default_text: str
    is_error: bool


class MessageKey(Enum):
    """Resource keys understood by the host string lookup."""

    IMAGE_PROCESSING = MessageSpec(
        "PCF_ImageToTextControl_ImageProcessing_Message",
        "Processing image...",
        False,
    )
    TEXT_SUBMITTED = MessageSpec(
        "PCF_ImageToTextControl_TextSubmitted_Message",
        "Image submitted. Waiting for the recognized text...",
        False,
    )
    NOTHING_TO_BE_PARSED = MessageSpec(
        "PCF_ImageToTextControl_NothingToBeParsed_Message",
        "No text was found in the image.",
        True,
    )
    IMAGE_TYPE_NOT_SUPPORTED = MessageSpec(
        "PCF_ImageToTextControl_ImageType_NotSupported_Error",
        "Only jpeg, jpg and png images are supported.",
        True,
    )

    @property
    def key(self) -> str:
        return self.value.key

    @property
    def default_text(self) -> str:
        return self.value.default_text


def resolve(message: MessageKey, lookup: Optional[StringLookup] = None) -> str:
    """Return the host's text for `message`, falling back to the default."""
    text = lookup(message.key) if lookup is not None else None
    return text or message.default_text
