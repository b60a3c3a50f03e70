"""Shared plumbing for tool handlers."""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable

from fpl_query.context import ToolContext
from fpl_query.errors import UPSTREAM_ERRORS, FPLError, classify, is_retryable
from fpl_query.responses import Result

logger = logging.getLogger(__name__)

Handler = Callable[[ToolContext, dict[str, Any]], Awaitable[Result]]


def guarded(fn: Handler) -> Handler:
    """Turn upstream and domain exceptions raised inside a handler into a Failure."""

    @functools.wraps(fn)
    async def wrapper(ctx: ToolContext, arguments: dict[str, Any]) -> Result:
        try:
            return await fn(ctx, arguments)
        except (FPLError, *UPSTREAM_ERRORS) as e:
            failure = classify(e)
            retry = " (retryable)" if is_retryable(failure.code) else ""
            logger.warning(f"{fn.__name__}: {failure.code.value}{retry}: {failure.message}")
            return failure

    return wrapper
