"""Error handling utilities for API endpoints."""

import asyncio
from typing import TypeVar

from fastapi import HTTPException, status

from core.exceptions import SchedulerStoppedError, TaskTimeoutError
from core.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

TIMEOUT_MESSAGE = "This is taking longer than usual. Please try again in a moment."
UNAVAILABLE_MESSAGE = "Data is temporarily unavailable. Please try again later."


async def await_task(
    handle: "asyncio.Future[T]",
    error_message: str = "Operation failed",
) -> T:
    """Wait for a scheduled task and map its failures to HTTP errors.

    Timeouts become 504. A stopped scheduler, a cancelled task or any error
    raised by the work become 503.
    """
    try:
        return await handle
    except TaskTimeoutError as e:
        logger.warning(f"{error_message}: {e}")
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=TIMEOUT_MESSAGE
        )
    except SchedulerStoppedError as e:
        logger.warning(f"{error_message}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_MESSAGE
        )
    except asyncio.CancelledError:
        # Cancellation of the waiting request propagates.
        current = asyncio.current_task()
        if not handle.cancelled() or (current is not None and current.cancelling()):
            raise
        logger.warning(f"{error_message}: task was cancelled")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_MESSAGE
        )
    except Exception as e:
        logger.error(f"{error_message}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_MESSAGE
        )
