"""Status reporter — one-way, unacknowledged progress notifications."""
import asyncio
import logging

from src.constants import MSG_STATUS_SINK_FAILED
from src.models import StatusSink

logger = logging.getLogger(__name__)


class StatusReporter:

    def __init__(self, sink: StatusSink | None = None) -> None:
        self._sink = sink

    def emit(self, message: str) -> None:
        logger.debug(message)
        match self._sink:
            case None:
                pass
            case sink:
                try:
                    sink(message)
                except Exception as exc:
                    logger.debug(MSG_STATUS_SINK_FAILED, exc)


def queue_sink(queue: asyncio.Queue) -> StatusSink:
    """Adapt a (possibly bounded) queue as a sink; drops messages when full."""
    def _put(message: str) -> None:
        try:
            queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.debug("Status queue full, dropped: %s", message)

    return _put
