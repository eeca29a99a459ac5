"""
Command-line entry point.

    python -m docpress request.json [-o out.pdf] [--theme NAME]

License: MIT
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from docpress import config
from docpress.assets import resolve_assets
from docpress.errors import DocpressError
from docpress.models import DocumentRenderRequest
from docpress.pdf_backend import render_document

logger = logging.getLogger("docpress")


def load_request(path: Path, theme: Optional[str] = None) -> DocumentRenderRequest:
    """Read a render request from a JSON file, optionally overriding its theme."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if theme:
        payload["theme"] = theme
    return DocumentRenderRequest.model_validate(payload)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="docpress",
                                     description="Render a business document request to PDF")
    parser.add_argument("request", help="Path to the render request (.json)")
    parser.add_argument("-o", "--output", help="Output PDF path (defaults to the request name with .pdf)")
    parser.add_argument("--theme", help="Theme preset to use instead of the request's theme")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    request_path = Path(args.request)
    output_path = Path(args.output) if args.output else request_path.with_suffix(".pdf")

    try:
        request = resolve_assets(load_request(request_path, args.theme))
        pdf_bytes = render_document(request)
    except (OSError, json.JSONDecodeError, ValidationError, DocpressError) as e:
        logger.error(f"Could not render {request_path}: {e}")
        return 1

    output_path.write_bytes(pdf_bytes)
    logger.info(f"Wrote {output_path} ({len(pdf_bytes)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
