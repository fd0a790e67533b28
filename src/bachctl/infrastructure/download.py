"""Download-and-cache of remote artifacts, keyed by file name.

A local copy is reused when its modification time and size match the
remote ``Last-Modified`` and ``Content-Length`` headers.  In offline mode
only an existing local copy is accepted.
"""

from __future__ import annotations

import logging
import os
from email.utils import parsedate_to_datetime
from pathlib import Path
from urllib.parse import urlsplit

import requests

from bachctl.domain.errors import BachError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class DownloadError(BachError):
    """A remote artifact could not be made available locally."""


def file_name(uri: str) -> str:
    """Extract the last path element of *uri*, ignoring query and fragment."""
    path = urlsplit(uri).path
    return path[path.rfind("/") + 1 :]


def _last_modified(response: requests.Response) -> float | None:
    header = response.headers.get("Last-Modified")
    if not header:
        return None
    try:
        return parsedate_to_datetime(header).timestamp()
    except (TypeError, ValueError):
        return None


def _is_current(target: Path, response: requests.Response, remote_mtime: float | None) -> bool:
    stat = target.stat()
    if remote_mtime is not None and int(stat.st_mtime) != int(remote_mtime):
        return False
    length = response.headers.get("Content-Length")
    return length is not None and stat.st_size == int(length)


def download(
    uri: str,
    destination: Path,
    *,
    offline: bool = False,
    session: requests.Session | None = None,
) -> Path:
    """Make the file at *uri* available in *destination* and return its path.

    Raises:
        DownloadError: Offline and no local copy exists, or the server
            answered with an error status.
    """
    target = destination / file_name(uri)
    logger.debug("Downloading %s...", uri)
    if offline:
        if target.exists():
            logger.debug("Offline mode is active and target already exists.")
            return target
        msg = f"Target is missing and being offline: {target}"
        raise DownloadError(msg)

    destination.mkdir(parents=True, exist_ok=True)
    get = session.get if session is not None else requests.get
    with get(uri, stream=True, timeout=60) as response:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise DownloadError(str(exc)) from exc

        remote_mtime = _last_modified(response)
        if target.exists():
            if _is_current(target, response, remote_mtime):
                logger.debug("Local and remote file attributes seem to match.")
                return target
            logger.debug("Local file differs from remote -- replacing it...")

        with target.open("wb") as fh:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                fh.write(chunk)
        if remote_mtime is not None:
            os.utime(target, (remote_mtime, remote_mtime))

    logger.info("Downloaded %s successfully.", target.name)
    logger.debug(" o Size -> %d bytes", target.stat().st_size)
    return target
