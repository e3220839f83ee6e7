"""Input validation — upload size limit and endpoint sanity checks."""
import asyncio
import logging
from pathlib import Path

import httpx

from src.constants import MAX_UPLOAD_MB
from src.errors import FileTooLarge, InvalidEndpoint, NoData

logger = logging.getLogger(__name__)


async def measure_audio(path: Path) -> float:
    """Return the file size in MB. Raises NoData if the file can't be read."""
    try:
        stat = await asyncio.to_thread(path.stat)
    except OSError as exc:
        logger.error("Error checking file size for %s: %s", path, exc)
        raise NoData() from exc
    return stat.st_size / 1024 / 1024


def check_size(size_mb: float, limit_mb: float = MAX_UPLOAD_MB) -> None:
    match size_mb:
        case s if s > limit_mb:
            logger.error("File size (%.1fMB) exceeds the %.0fMB upload limit", s, limit_mb)
            raise FileTooLarge(s)
        case _:
            pass


def check_endpoint(url: str) -> None:
    """Raise InvalidEndpoint unless ``url`` is an absolute http(s) URL."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidEndpoint(url) from exc
    match (parsed.scheme, parsed.host):
        case ("http" | "https", str() as host) if host:
            pass
        case _:
            raise InvalidEndpoint(url)
