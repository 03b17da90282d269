from __future__ import annotations

import logging
from pathlib import Path

import requests

from ..errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_file(url: str, dest: Path, *, session: requests.Session | None = None) -> Path:
    """Stream url into dest. HTTP and network failures raise DownloadError."""

    http = session or requests
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    logger.debug("GET %s -> %s", url, dest)
    try:
        with http.get(url, stream=True, allow_redirects=True) as response:
            response.raise_for_status()
            with dest.open("wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.RequestException as e:
        dest.unlink(missing_ok=True)
        raise DownloadError(f"Download failed: {url}: {e}") from e

    return dest
