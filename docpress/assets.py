"""
Binary asset fetching.

Logos and signature images are resolved here, before the render request is
handed to the engine. Every failure resolves to ``None`` so that layout can
fall back to a placeholder instead of waiting or failing.

License: MIT
"""

import base64
import binascii
import logging
import os
import urllib.error
import urllib.request
from typing import TYPE_CHECKING, Optional
from urllib.parse import unquote_to_bytes

from docpress import config

if TYPE_CHECKING:
    from docpress.models import DocumentRenderRequest

logger = logging.getLogger(__name__)


def decode_data_url(value: str) -> Optional[bytes]:
    """
    Decode a ``data:`` URL or a bare base64 string.

    Args:
        value: ``data:image/png;base64,...`` or plain base64 text

    Returns:
        Decoded bytes, or None if the payload is not decodable
    """
    try:
        if value.startswith("data:"):
            header, _, payload = value.partition(",")
            if ";base64" in header:
                return base64.b64decode(payload, validate=True)
            return unquote_to_bytes(payload)
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not decode image payload: {e}")
        return None


def fetch_image(src: str, timeout: Optional[float] = None) -> Optional[bytes]:
    """
    Load image bytes from a URL, data URL or local path.

    Args:
        src: ``http(s)://`` URL, ``data:`` URL or file path
        timeout: Network timeout in seconds (defaults to configuration)

    Returns:
        Image bytes, or None when the asset is unavailable
    """
    if not src:
        return None
    if src.startswith("data:"):
        return decode_data_url(src)

    timeout = config.ASSET_TIMEOUT if timeout is None else timeout
    try:
        if src.startswith(("http://", "https://")):
            with urllib.request.urlopen(src, timeout=timeout) as response:
                data = response.read(config.MAX_ASSET_BYTES + 1)
        else:
            if os.path.getsize(src) > config.MAX_ASSET_BYTES:
                logger.warning(f"Asset {src} exceeds {config.MAX_ASSET_BYTES} bytes, skipping")
                return None
            with open(src, "rb") as f:
                data = f.read()
    except (urllib.error.URLError, OSError, ValueError) as e:
        logger.warning(f"Could not fetch asset {src}: {e}")
        return None

    if len(data) > config.MAX_ASSET_BYTES:
        logger.warning(f"Asset {src} exceeds {config.MAX_ASSET_BYTES} bytes, skipping")
        return None
    return data


def resolve_assets(request: "DocumentRenderRequest") -> "DocumentRenderRequest":
    """Return a copy of the request with the company logo loaded from ``logo_url``."""
    company = request.company
    if company is None or company.logo is not None or not company.logo_url:
        return request

    logo = fetch_image(company.logo_url)
    if logo is None:
        logger.info("Company logo unavailable; rendering without it")
        return request
    return request.model_copy(update={"company": company.model_copy(update={"logo": logo})})
