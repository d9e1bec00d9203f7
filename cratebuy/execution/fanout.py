"""
Concurrent phase helpers shared by the quote and swap-build fan-outs.
"""

import asyncio
from typing import Any, Awaitable, List, Optional, Sequence

from cratebuy.shared.execution.errors import CrateError, ErrorCode, PhaseTimeout


async def gather_phase(phase: str, calls: Sequence[Awaitable[Any]], timeout: Optional[float] = None) -> List[Any]:
    """
    Await every call of a phase; exceptions come back as values, in input order.

    The optional timeout covers the whole phase, never a single call.
    """
    gathered = asyncio.gather(*calls, return_exceptions=True)
    if timeout is None:
        return await gathered
    try:
        return await asyncio.wait_for(gathered, timeout)
    except asyncio.TimeoutError as e:
        raise PhaseTimeout(details=f"{phase} phase exceeded {timeout:.1f}s") from e


def describe_failure(error: BaseException) -> str:
    if isinstance(error, CrateError):
        return error.details or error.message
    return f"{type(error).__name__}: {error}" if str(error) else type(error).__name__


def failure_code(error: BaseException, default: ErrorCode) -> ErrorCode:
    if isinstance(error, CrateError) and error.code in (ErrorCode.QUOTE_UNAVAILABLE, ErrorCode.TRANSACTION_BUILD_FAILED):
        return error.code
    return default
