"""Download IERS Earth Orientation Parameter files.

Provides a helper to fetch the latest ``finals.data`` from the IERS data
centre. Network errors are propagated to the caller so that higher-level
code (e.g. :func:`load_cached_eop`) can decide on fallback behaviour.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

IERS_FINALS_URL: str = "https://datacenter.iers.org/data/latestVersion/finals.data"
"""Default URL for the IERS Bulletin A ``finals.data`` file (IAU1980)."""

FINALS_FILENAME: str = "finals.data"
"""Canonical filename used for cached EOP data."""

_DEFAULT_TIMEOUT: float = 60.0
"""Default HTTP timeout in seconds."""


def download_finals_file(
    filepath: str | Path,
    *,
    url: str = IERS_FINALS_URL,
    timeout: float = _DEFAULT_TIMEOUT,
) -> Path:
    """Download an IERS finals file to *filepath*.

    Creates parent directories if they do not exist. The text is written to
    a ``.part`` file next to *filepath* and moved into place, so an existing
    cached copy is only replaced by a complete download.

    Args:
        filepath: Destination path for the downloaded file.
        url: URL to fetch. Defaults to :data:`IERS_FINALS_URL`.
        timeout: HTTP timeout in seconds. Defaults to 60.

    Returns:
        Resolved :class:`~pathlib.Path` to the written file.

    Raises:
        httpx.HTTPStatusError: If the server returns a non-2xx status.
        httpx.TransportError: On network-level failures (DNS, timeout, etc.).
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Downloading EOP data from %s", url)
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()

    partial = filepath.with_name(filepath.name + ".part")
    partial.write_text(response.text, encoding="utf-8")
    partial.replace(filepath)
    logger.info("EOP data written to %s", filepath)
    return filepath.resolve()
