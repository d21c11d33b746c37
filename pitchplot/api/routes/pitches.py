"""
Pitch Routes: screenshot extraction and movement-plot rendering data.

POST    /api/parse-image    - Screenshot -> filtered pitch records
OPTIONS /api/parse-image    - Preflight no-op
POST    /api/movement-plot  - Records -> Vega-Lite spec, plot points, table rows
"""

import logging

from fastapi import APIRouter, HTTPException, Response
from langsmith import traceable

from pitchplot.config import SystemConfig
from pitchplot.errors import NoImageProvided
from pitchplot.pipeline import PitchPipeline
from pitchplot.presentation.plot import build_movement_spec, plot_points, points_as_dicts
from pitchplot.presentation.table import table_rows
from pitchplot.schemas.api import ParseImageRequest, PitchDataResponse, PlotRequest, PlotResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["pitches"])

# Module-level pipeline reference, set by main.py
_pipeline = None


def set_pipeline(pipeline: PitchPipeline):
    global _pipeline
    _pipeline = pipeline


def _get_pipeline() -> PitchPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialized")
    return _pipeline


@router.options("/parse-image")
async def parse_image_preflight():
    return Response(status_code=200)


@router.post("/parse-image", response_model=PitchDataResponse)
@traceable(name="Parse Image Endpoint", run_type="chain")
async def parse_image(body: ParseImageRequest):
    """
    Reads a pitch-statistics screenshot and returns the plottable pitch types.

    An explicit `usageThreshold` wins; otherwise `excludeLowUsage` picks
    between the two configured defaults.
    """
    if not body.image_base64:
        raise NoImageProvided()

    threshold = body.usage_threshold
    if threshold is None:
        threshold = SystemConfig.usage_threshold(body.exclude_low_usage)

    records = await _get_pipeline().run(body.image_base64, threshold)
    return {"pitchData": [r.to_dict() for r in records]}


@router.post("/movement-plot", response_model=PlotResponse)
async def movement_plot(body: PlotRequest):
    """Everything a client needs to draw the plot and table, in one call."""
    records = body.pitch_data
    return {
        "spec": build_movement_spec(records, body.title),
        "points": points_as_dicts(plot_points(records)),
        "table": table_rows(records),
    }
