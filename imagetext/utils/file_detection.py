"""
Image type checks and content decoding for captured images.

The declared media subtype comes from the captured file name's extension
and is the only thing that decides acceptance. Magic bytes are sniffed
for diagnostics only.

Magic bytes reference:
- JPEG: 0xFFD8FF
- PNG:  0x89504E47 (89 P N G)
"""

import base64
import binascii
import logging
from typing import Final, Literal
from urllib.parse import unquote_to_bytes

from imagetext.core.config import ACCEPTED_MEDIA_SUBTYPES, BASE64_MARKER
from imagetext.core.exceptions import InvalidImageContentError, UnsupportedMediaTypeError
from imagetext.models.dto import CapturedImage, ImagePayload

logger = logging.getLogger(__name__)

ImageType = Literal["jpeg", "png"]

MAGIC_BYTES_MAP: Final[dict[bytes, ImageType]] = {
    b"\xff\xd8\xff": "jpeg",
    b"\x89PNG": "png",
}


def detect_image_type_from_bytes(header: bytes) -> ImageType | None:
    """
    Detect image type from magic bytes header.

    Example:
        >>> detect_image_type_from_bytes(b"\\x89PNG\\r\\n\\x1a\\n")
        'png'
    """
    for signature, image_type in MAGIC_BYTES_MAP.items():
        if header.startswith(signature):
            return image_type
    return None


def media_subtype_from_name(file_name: str) -> str:
    """Return the text after the last dot, or "" when there is none."""
    _, dot, extension = file_name.rpartition(".")
    return extension if dot else ""


def is_supported_media_subtype(media_subtype: str) -> bool:
    return media_subtype.lower() in ACCEPTED_MEDIA_SUBTYPES


def validate_payload(payload: ImagePayload) -> None:
    """
    Raises:
        UnsupportedMediaTypeError: If the subtype is not jpeg, jpg or png
    """
    if not is_supported_media_subtype(payload.media_subtype):
        raise UnsupportedMediaTypeError(payload.media_subtype)


def decode_image_content(file_content: str) -> bytes:
    """
    Turn captured content into raw bytes.

    Accepts plain base64, a `data:` URL with a `;base64,` marker, or a
    `data:` URL with percent-encoded content.

    Raises:
        InvalidImageContentError: If the base64 text cannot be decoded
    """
    content = file_content.strip()

    if content.startswith("data:"):
        _, marker, data = content.partition(BASE64_MARKER)
        if not marker:
            _, _, raw = content.partition(",")
            return unquote_to_bytes(raw)
        content = data.strip()

    try:
        return base64.b64decode("".join(content.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageContentError(str(e)) from e


def build_preview_url(media_subtype: str, file_content: str) -> str:
    """Data URL suitable for an <img src=...> preview of the capture."""
    if file_content.startswith("data:"):
        return file_content
    return f"data:image/{media_subtype}{BASE64_MARKER}{file_content}"


def build_payload(capture: CapturedImage | None) -> ImagePayload | None:
    """
    Validate a capture and decode it into an upload payload.

    Returns:
        None when the capture was cancelled (no capture or no file name)

    Raises:
        UnsupportedMediaTypeError: Unsupported file extension
        InvalidImageContentError: Undecodable content
    """
    if capture is None or not capture.file_name:
        return None

    media_subtype = media_subtype_from_name(capture.file_name)
    if not is_supported_media_subtype(media_subtype):
        raise UnsupportedMediaTypeError(media_subtype)

    content = decode_image_content(capture.file_content)

    sniffed = detect_image_type_from_bytes(content[:8])
    declared = "jpeg" if media_subtype.lower() == "jpg" else media_subtype.lower()
    if sniffed is not None and sniffed != declared:
        logger.warning(
            "Declared image type does not match content (%s)",
            sniffed,
            extra={"file_name": capture.file_name, "media_subtype": media_subtype},
        )

    return ImagePayload(
        content=content,
        media_subtype=media_subtype,
        file_name=capture.file_name,
    )
