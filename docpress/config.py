"""
Runtime configuration read from the environment.

License: MIT
"""

import os

DEFAULT_THEME = os.getenv("DOCPRESS_DEFAULT_THEME", "branded")

CURRENCY_SYMBOL = os.getenv("DOCPRESS_CURRENCY_SYMBOL", "$")
CURRENCY_CODE = os.getenv("DOCPRESS_CURRENCY_CODE", "CAD")

LOG_LEVEL = os.getenv("DOCPRESS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Asset fetching (logos, signature images)
ASSET_TIMEOUT = float(os.getenv("DOCPRESS_ASSET_TIMEOUT", "10"))
MAX_ASSET_BYTES = int(os.getenv("DOCPRESS_MAX_ASSET_BYTES", str(5 * 1024 * 1024)))

HOST = os.getenv("DOCPRESS_HOST", "0.0.0.0")
PORT = int(os.getenv("DOCPRESS_PORT", "8000"))
