"""Tests for event lifetime extension and fetch responses."""

import asyncio

import pytest

from app.errors import InvalidStateError
from app.models.http import Request, Response
from app.services.worker.events import ExtendableEvent, FetchEvent, InstallEvent


async def _value(value, delay: float = 0):
    await asyncio.sleep(delay)
    return value


async def _fail(message: str):
    raise RuntimeError(message)


class TestExtendableEvent:
    @pytest.mark.asyncio
    async def test_wait_until_during_dispatch(self):
        event = InstallEvent()
        with event.dispatching():
            event.wait_until(_value(1))
        await event.settle()
        assert not event.active

    @pytest.mark.asyncio
    async def test_wait_until_after_finish(self):
        event = ExtendableEvent("install")
        coro = _value(1)
        with pytest.raises(InvalidStateError):
            event.wait_until(coro)
        coro.close()

    @pytest.mark.asyncio
    async def test_extension_added_while_pending(self):
        event = ExtendableEvent("activate")
        done = []

        async def chained():
            await asyncio.sleep(0)
            event.wait_until(_record(done))

        async def _record(target):
            target.append(True)

        with event.dispatching():
            event.wait_until(chained())
        await event.settle()
        assert done == [True]

    @pytest.mark.asyncio
    async def test_settle_raises_first_error(self):
        event = InstallEvent()
        with event.dispatching():
            event.wait_until(_value(1))
            event.wait_until(_fail("seed failed"))
        with pytest.raises(RuntimeError, match="seed failed"):
            await event.settle()

    @pytest.mark.asyncio
    async def test_settle_without_raising(self):
        event = ExtendableEvent("fetch")
        with event.dispatching():
            event.wait_until(_fail("store failed"))
        await event.settle(raise_errors=False)


class TestFetchEvent:
    @pytest.mark.asyncio
    async def test_respond_with(self):
        event = FetchEvent(Request("https://kilalo.test/"))
        with event.dispatching():
            event.respond_with(_value(Response(b"hi")))
        assert event.responded
        assert (await event.response()).read() == b"hi"

    @pytest.mark.asyncio
    async def test_no_response(self):
        event = FetchEvent(Request("https://kilalo.test/"))
        assert not event.responded
        assert await event.response() is None

    @pytest.mark.asyncio
    async def test_respond_with_twice(self):
        event = FetchEvent(Request("https://kilalo.test/"))
        with event.dispatching():
            event.respond_with(_value(Response()))
            coro = _value(Response())
            with pytest.raises(InvalidStateError):
                event.respond_with(coro)
            coro.close()
        await event.response()

    @pytest.mark.asyncio
    async def test_respond_with_outside_dispatch(self):
        event = FetchEvent(Request("https://kilalo.test/"))
        coro = _value(Response())
        with pytest.raises(InvalidStateError):
            event.respond_with(coro)
        coro.close()

    @pytest.mark.asyncio
    async def test_pending_response_keeps_event_alive(self):
        event = FetchEvent(Request("https://kilalo.test/"))
        with event.dispatching():
            event.respond_with(_value(Response(), delay=0.01))
        assert event.active
        event.wait_until(_value(None))
        await event.response()
        await event.settle()
        assert not event.active
