from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from reviewgate.requester.base import RequestOutcome, ReviewRequester

logger = logging.getLogger(__name__)

Flag = Union[bool, None, RequestOutcome]
CompletionHandler = Callable[[Optional[bool]], None]


class CallableRequester(ReviewRequester):
    """Wrap a plain or async callable returning True, False, None or a RequestOutcome."""

    def __init__(self, fn: Callable[[], Union[Flag, Awaitable[Flag]]]) -> None:
        self._fn = fn

    async def request_review(self) -> RequestOutcome:
        result: Any = self._fn()
        if inspect.isawaitable(result):
            result = await result
        return RequestOutcome.from_flag(result)


class CompletionHandlerRequester(ReviewRequester):
    """
    Adapt a completion-handler presenter onto a coroutine.

    ``present(done)`` must eventually call ``done`` with True, False or None.
    ``done`` may run synchronously inside ``present``, later on the event loop,
    or from another thread. Only the first call counts.
    """

    def __init__(self, present: Callable[[CompletionHandler], None]) -> None:
        self._present = present

    async def request_review(self) -> RequestOutcome:
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def _resolve(flag: Optional[bool]) -> None:
            if future.done():
                logger.debug("ignoring repeated review completion")
                return
            future.set_result(RequestOutcome.from_flag(flag))

        def done(flag: Optional[bool] = None) -> None:
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is loop:
                _resolve(flag)
            else:
                loop.call_soon_threadsafe(_resolve, flag)

        self._present(done)
        return await future


__all__ = ["CallableRequester", "CompletionHandlerRequester"]
