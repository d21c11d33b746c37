"""
Extraction Session: last-request-wins coordination for one UI session.

A new upload cancels whatever extraction is still in flight. A superseded
request resolves to `None` and never touches `latest`, so an old reply can
never overwrite a newer result.
"""

import asyncio
import logging
from typing import List, Optional

from pitchplot.pipeline import PitchPipeline
from pitchplot.schemas.pitch import PitchRecord

logger = logging.getLogger(__name__)


class ExtractionSession:
    def __init__(self, pipeline: Optional[PitchPipeline] = None):
        self.pipeline = pipeline or PitchPipeline()
        self.latest: Optional[List[PitchRecord]] = None
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        """Abandon the in-flight request, if any."""
        self._generation += 1
        if self.busy:
            logger.info("🛑 Cancelling in-flight extraction")
            self._task.cancel()

    async def submit(
        self,
        image_base64: Optional[str],
        usage_threshold: Optional[float] = None,
    ) -> Optional[List[PitchRecord]]:
        """
        Runs the pipeline for a new screenshot.

        Returns the records, or None when a newer submission superseded this one.
        Errors of the current request propagate to the caller.
        """
        self.cancel()
        generation = self._generation
        task = asyncio.ensure_future(self.pipeline.run(image_base64, usage_threshold))
        self._task = task

        try:
            records = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.info(f"Request #{generation} superseded; result discarded")
                return None
            raise
        except Exception:
            if generation != self._generation:
                logger.info(f"Request #{generation} superseded; error discarded")
                return None
            raise

        if generation != self._generation:
            logger.info(f"Request #{generation} superseded; result discarded")
            return None

        self.latest = records
        return records
