"""Downloader utilities for readtime-agent.

This module provides a small async PDF downloader that stages each
document under a unique file name.
"""
from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

import aiofiles
import httpx

logger = logging.getLogger(__name__)

STAGED_SUFFIX = ".pdf"


class DownloadError(Exception):
    pass


def staged_filename(now: Optional[datetime] = None) -> str:
    """Collision-resistant name: 8 hex chars of a uuid4 plus a timestamp."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{uuid.uuid4().hex[:8]}_{stamp}{STAGED_SUFFIX}"


async def download_pdf(url: str, staging_dir: Path, client: Optional[httpx.AsyncClient] = None) -> Path:
    """Download a PDF from `url` into a new file under `staging_dir`.

    - Creates `staging_dir` if it does not exist.
    - Writes to a temporary `.part` file and atomically renames it on success.
    - Does not retry; any failure raises DownloadError.
    """
    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=60.0, follow_redirects=True)
        close_client = True

    staging_dir = Path(staging_dir)
    dest = staging_dir / staged_filename()
    tmp = dest.with_suffix(dest.suffix + ".part")

    renamed = False
    try:
        staging_dir.mkdir(parents=True, exist_ok=True)

        async with client.stream("GET", url) as resp:
            resp.raise_for_status()
            async with aiofiles.open(tmp, "wb") as f:
                async for chunk in resp.aiter_bytes():
                    await f.write(chunk)

        os.replace(str(tmp), str(dest))
        renamed = True
        logger.debug(f"Staged {url} at {dest}")
        return dest

    except (httpx.HTTPError, OSError) as exc:
        raise DownloadError(f"failed to download {url}: {exc}") from exc

    finally:
        # also runs on cancellation, so a timed-out download leaves no .part behind
        if not renamed:
            tmp.unlink(missing_ok=True)
        if close_client:
            await client.aclose()
