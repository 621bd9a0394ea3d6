"""Command-line entry point: recognize the text in one local image.

Example:
    $ VISION_ENDPOINT=https://westeurope.api.cognitive.microsoft.com/ \\
      VISION_SUBSCRIPTION_KEY=... imagetext receipt.jpg
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from imagetext.clients.read_async_client import recognize_image
from imagetext.core.logging_config import configure_structured_logging
from imagetext.core.settings import get_settings
from imagetext.models.dto import ImagePayload
from imagetext.utils.file_detection import media_subtype_from_name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract text from an image")
    parser.add_argument("image", type=Path, help="Path to a jpeg, jpg or png image")
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait before polling for the result",
    )
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Plain-text logs instead of JSON",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = get_settings()
    configure_structured_logging(
        level=settings.LOG_LEVEL,
        json_format=settings.LOG_JSON and not args.plain_logs,
    )

    payload = ImagePayload(
        content=args.image.read_bytes(),
        media_subtype=media_subtype_from_name(args.image.name),
        file_name=args.image.name,
    )

    outcome = asyncio.run(
        recognize_image(payload, settings.to_client_config(), delay=args.delay)
    )
    print(outcome.model_dump_json(indent=2))
    return 1 if outcome.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
