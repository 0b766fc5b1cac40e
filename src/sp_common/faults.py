"""Fault boundary for store-backed operations.

Wraps one unit of work: applies the operation timeout, lets domain errors
(AppError) through untouched, and turns everything else into a logged
LedgerFaultError. The unit of work inside has already rolled back by the time
an exception reaches this boundary.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.sp_common.errors import AppError, LedgerFaultError, OperationTimeoutError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def fault_boundary(operation: str, timeout: float | None) -> AsyncIterator[None]:
    try:
        async with asyncio.timeout(timeout):
            yield
    except AppError:
        raise
    except TimeoutError:
        logger.warning("%s timed out after %ss, rolled back", operation, timeout)
        raise OperationTimeoutError(operation) from None
    except Exception as exc:
        logger.exception("%s failed, rolled back", operation)
        raise LedgerFaultError(operation) from exc
