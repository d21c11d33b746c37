"""
Pitch Pipeline: screenshot in, display-ready records out.

    image -> ExtractionClient -> raw text -> extract_json_array
          -> validate_records -> UsageFilter -> List[PitchRecord]

`normalize_response` is the pure half (text -> records) and is what tests
and offline callers use. `PitchPipeline.run` adds the model call.
"""

import logging
from typing import List, Optional

from langsmith import traceable

from pitchplot.config import SystemConfig
from pitchplot.extraction.client import ExtractionClient
from pitchplot.extraction.filters import UsageFilter
from pitchplot.extraction.response_parser import extract_json_array
from pitchplot.errors import NoImageProvided
from pitchplot.schemas.pitch import PitchRecord, validate_records

logger = logging.getLogger(__name__)


def normalize_response(text: str, usage_threshold: float) -> List[PitchRecord]:
    """
    Raw model text -> validated, filtered records.

    Raises NoJsonFound / MalformedJson when no usable array exists.
    Bad rows are dropped; an empty list is a valid result.
    """
    usage_filter = UsageFilter(usage_threshold)
    items = extract_json_array(text)
    records = validate_records(items)
    return usage_filter.apply(records)


class PitchPipeline:
    def __init__(self, client: Optional[ExtractionClient] = None):
        self.client = client or ExtractionClient()

    @traceable(name="Pitch Pipeline", run_type="chain")
    async def run(
        self,
        image_base64: Optional[str],
        usage_threshold: Optional[float] = None,
    ) -> List[PitchRecord]:
        if not image_base64:
            raise NoImageProvided()

        if usage_threshold is None:
            usage_threshold = SystemConfig.DEFAULT_USAGE_THRESHOLD
        # Validate before spending a model call
        UsageFilter(usage_threshold)

        text = await self.client.extract_text(image_base64)
        records = normalize_response(text, usage_threshold)

        logger.info(f"📊 Pipeline complete: {len(records)} pitch type(s) ready for display")
        return records
