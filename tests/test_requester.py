import asyncio
import threading

import pytest

from reviewgate.requester import (
    CallableRequester,
    CompletionHandlerRequester,
    RequestOutcome,
)


class TestRequestOutcome:
    def test_from_flag(self):
        assert RequestOutcome.from_flag(True) is RequestOutcome.SHOWN
        assert RequestOutcome.from_flag(False) is RequestOutcome.NOT_SHOWN
        assert RequestOutcome.from_flag(None) is RequestOutcome.UNKNOWN
        assert RequestOutcome.from_flag(RequestOutcome.UNKNOWN) is RequestOutcome.UNKNOWN

    def test_unknown_counts_as_shown(self):
        assert RequestOutcome.SHOWN.counts_as_shown
        assert RequestOutcome.UNKNOWN.counts_as_shown
        assert not RequestOutcome.NOT_SHOWN.counts_as_shown


class TestCallableRequester:
    def test_sync_callable(self):
        requester = CallableRequester(lambda: False)
        assert asyncio.run(requester.request_review()) is RequestOutcome.NOT_SHOWN

    def test_async_callable(self):
        async def present():
            await asyncio.sleep(0)
            return None

        requester = CallableRequester(present)
        assert asyncio.run(requester.request_review()) is RequestOutcome.UNKNOWN

    def test_errors_propagate(self):
        def present():
            raise RuntimeError("store unavailable")

        with pytest.raises(RuntimeError):
            asyncio.run(CallableRequester(present).request_review())


class TestCompletionHandlerRequester:
    def test_synchronous_completion(self):
        requester = CompletionHandlerRequester(lambda done: done(True))
        assert asyncio.run(requester.request_review()) is RequestOutcome.SHOWN

    def test_deferred_completion_on_loop(self):
        def present(done):
            asyncio.get_running_loop().call_later(0.01, done, False)

        requester = CompletionHandlerRequester(present)
        assert asyncio.run(requester.request_review()) is RequestOutcome.NOT_SHOWN

    def test_completion_from_other_thread(self):
        def present(done):
            threading.Timer(0.01, done, args=(None,)).start()

        requester = CompletionHandlerRequester(present)
        assert asyncio.run(requester.request_review()) is RequestOutcome.UNKNOWN

    def test_only_first_completion_counts(self):
        def present(done):
            done(False)
            done(True)

        requester = CompletionHandlerRequester(present)
        assert asyncio.run(requester.request_review()) is RequestOutcome.NOT_SHOWN
