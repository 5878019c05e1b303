"""Fetch model and vocabulary resources from URLs or local paths."""
from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path
from typing import Optional

import requests

from pron_core.config import HTTP_TIMEOUT, TOKENS_FILENAME
from pron_core.errors import ModelLoadError

logger = logging.getLogger(__name__)

_LAST_SEGMENT = re.compile(r"[^/]+$")


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def resolve_tokens_location(model_url: str) -> str:
    """``tokens.txt`` next to the model (last path segment replaced)."""
    return _LAST_SEGMENT.sub(TOKENS_FILENAME, str(model_url), count=1)


def _get(url: str, timeout: Optional[float]) -> requests.Response:
    try:
        r = requests.get(url, timeout=timeout or HTTP_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        raise ModelLoadError(f"Could not fetch {url}: {e}") from e
    return r


def fetch_text(location: str, timeout: Optional[float] = None) -> str:
    """Read a UTF-8 text resource from an http(s) URL or a local path.

    Raises:
        ModelLoadError: If the resource cannot be read
    """
    if is_remote(location):
        r = _get(location, timeout)
        r.encoding = "utf-8"
        return r.text
    try:
        return Path(location).read_text(encoding="utf-8")
    except OSError as e:
        raise ModelLoadError(f"Could not read {location}: {e}") from e


def fetch_to_file(location: str, timeout: Optional[float] = None) -> Path:
    """Return a local path for the resource, downloading remote URLs to a temp file."""
    if not is_remote(location):
        path = Path(location)
        if not path.exists():
            raise ModelLoadError(f"Model file not found: {location}")
        return path

    r = _get(location, timeout)
    fd, tmp_path = tempfile.mkstemp(suffix=Path(location.split("?")[0]).suffix)
    with open(fd, "wb") as f:
        f.write(r.content)
    logger.info("Downloaded %s (%d bytes) to %s", location, len(r.content), tmp_path)
    return Path(tmp_path)
