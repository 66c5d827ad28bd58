"""Configuration constants and .env loading.

WHY: Centralizes all configurable values (model path, REST service
location, log level) so they are easy to find, update, and override
without touching pipeline code.

HOW: python-dotenv loads the .env file on import. Defaults are plain
module-level strings read from the environment. load_model_path()
provides a clear error when no model is configured.

RULES:
- UDPIPE_MODEL_PATH points at a local .udpipe model file
- The REST service defaults to the public LINDAT UDPipe 2 endpoint
- Default document ids are "{prefix}1", "{prefix}2", ... with prefix "d"
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Local model
# ---------------------------------------------------------------------------

UDPIPE_MODEL_PATH = os.getenv("UDPIPE_MODEL_PATH", "").strip()

# ---------------------------------------------------------------------------
# REST service
# ---------------------------------------------------------------------------

UDPIPE_SERVICE_URL = os.getenv(
    "UDPIPE_SERVICE_URL", "https://lindat.mff.cuni.cz/services/udpipe/api"
)
UDPIPE_SERVICE_MODEL = os.getenv("UDPIPE_SERVICE_MODEL", "english")
UDPIPE_SERVICE_TIMEOUT_S = float(os.getenv("UDPIPE_SERVICE_TIMEOUT_S", "120"))

# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------

# "local" (UDPIPE_MODEL_PATH) or "service" (UDPipe REST service)
UDPIPE_API_ENGINE = os.getenv("UDPIPE_API_ENGINE", "local").strip().lower()
UDPIPE_API_HOST = os.getenv("UDPIPE_API_HOST", "0.0.0.0")
UDPIPE_API_PORT = int(os.getenv("UDPIPE_API_PORT", "8000"))

# ---------------------------------------------------------------------------
# Pipeline defaults
# ---------------------------------------------------------------------------

DEFAULT_DOC_ID_PREFIX = os.getenv("DEFAULT_DOC_ID_PREFIX", "d")
UDPIPE_LOG_LEVEL = os.getenv("UDPIPE_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def default_doc_ids(count: int) -> list[str]:
    """Generate ``count`` document ids: d1, d2, ..., dN."""
    return ["{}{}".format(DEFAULT_DOC_ID_PREFIX, i) for i in range(1, count + 1)]


def load_model_path() -> str:
    """Return the configured local model path.

    WHY: The CLI and HTTP API fall back to a configured model when no
    explicit path is given. Failing early with a readable message beats
    a cryptic FileNotFoundError on an empty string.

    RULES:
    - Raises ValueError if UDPIPE_MODEL_PATH is missing or empty
    - Reads the environment at call time so tests can override it
    """
    path = os.getenv("UDPIPE_MODEL_PATH", UDPIPE_MODEL_PATH).strip()
    if not path:
        raise ValueError(
            "UDPipe model not configured. "
            "Add UDPIPE_MODEL_PATH to the .env file or pass --model."
        )
    return path
