"""
Tests for last-request-wins session coordination.
"""

import asyncio

import pytest

from pitchplot.errors import NoJsonFound
from pitchplot.schemas.pitch import PitchRecord
from pitchplot.session import ExtractionSession


class GatedPipeline:
    """Fake pipeline: each call waits until the test releases its gate."""

    def __init__(self):
        self.gates = {}
        self.started = {}
        self.cancelled = []

    async def run(self, image_base64, usage_threshold=None):
        gate = self.gates.setdefault(image_base64, asyncio.Event())
        self.started.setdefault(image_base64, asyncio.Event()).set()
        try:
            await gate.wait()
        except asyncio.CancelledError:
            self.cancelled.append(image_base64)
            raise
        if image_base64 == "refusal":
            raise NoJsonFound("I cannot read this image.")
        return [PitchRecord(pitch_type=image_base64, usage=0.5, ivb=1.0, horz_brk=1.0)]

    def release(self, image_base64):
        self.gates.setdefault(image_base64, asyncio.Event()).set()

    async def wait_started(self, image_base64):
        await self.started.setdefault(image_base64, asyncio.Event()).wait()


class TestExtractionSession:

    @pytest.mark.asyncio
    async def test_single_request(self):
        pipeline = GatedPipeline()
        session = ExtractionSession(pipeline)
        pipeline.release("first")

        records = await session.submit("first")

        assert [r.pitch_type for r in records] == ["first"]
        assert session.latest == records
        assert not session.busy

    @pytest.mark.asyncio
    async def test_newer_request_supersedes_older(self):
        pipeline = GatedPipeline()
        session = ExtractionSession(pipeline)

        older = asyncio.create_task(session.submit("old"))
        await pipeline.wait_started("old")

        newer = asyncio.create_task(session.submit("new"))
        await pipeline.wait_started("new")
        pipeline.release("new")

        assert await older is None
        records = await newer
        assert [r.pitch_type for r in records] == ["new"]
        assert session.latest == records
        assert pipeline.cancelled == ["old"]

    @pytest.mark.asyncio
    async def test_stale_result_never_overwrites_latest(self):
        pipeline = GatedPipeline()
        session = ExtractionSession(pipeline)

        older = asyncio.create_task(session.submit("old"))
        await pipeline.wait_started("old")
        newer = asyncio.create_task(session.submit("new"))
        await pipeline.wait_started("new")

        # The old reply arrives after it was superseded
        pipeline.release("old")
        pipeline.release("new")
        await asyncio.gather(older, newer)

        assert [r.pitch_type for r in session.latest] == ["new"]

    @pytest.mark.asyncio
    async def test_explicit_cancel(self):
        pipeline = GatedPipeline()
        session = ExtractionSession(pipeline)

        pending = asyncio.create_task(session.submit("first"))
        await pipeline.wait_started("first")
        session.cancel()

        assert await pending is None
        assert session.latest is None

    @pytest.mark.asyncio
    async def test_current_request_error_propagates(self):
        pipeline = GatedPipeline()
        session = ExtractionSession(pipeline)
        pipeline.release("refusal")

        with pytest.raises(NoJsonFound):
            await session.submit("refusal")

    @pytest.mark.asyncio
    async def test_caller_cancellation_propagates(self):
        pipeline = GatedPipeline()
        session = ExtractionSession(pipeline)

        pending = asyncio.create_task(session.submit("first"))
        await pipeline.wait_started("first")
        pending.cancel()

        with pytest.raises(asyncio.CancelledError):
            await pending
