"""
API Schemas: Request/Response models for the FastAPI endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pitchplot.schemas.pitch import PitchRecord


class ParseImageRequest(BaseModel):
    """Incoming screenshot. A missing image is reported by the route, not by validation."""
    model_config = ConfigDict(populate_by_name=True)

    image_base64: Optional[str] = Field(None, alias="imageBase64", description="Base64 PNG/JPEG, no data: prefix")
    usage_threshold: Optional[float] = Field(
        None, alias="usageThreshold", ge=0.0, le=1.0,
        description="Minimum usage fraction to keep a pitch. Defaults from config."
    )
    exclude_low_usage: bool = Field(
        False, alias="excludeLowUsage",
        description="Pick the stricter default when no explicit threshold is sent"
    )


class PitchDataResponse(BaseModel):
    """Success body: exactly one key."""
    pitchData: List[Dict[str, Any]]


class ErrorResponse(BaseModel):
    error: str


class PlotRequest(BaseModel):
    """Records previously returned by /api/parse-image, re-validated on the way in."""
    model_config = ConfigDict(populate_by_name=True)

    pitch_data: List[PitchRecord] = Field(..., alias="pitchData", max_length=50)
    title: Optional[str] = Field(None, max_length=120, description="Player name; falls back to a generic title")


class PlotResponse(BaseModel):
    spec: Dict[str, Any]
    points: List[Dict[str, Any]]
    table: List[Dict[str, str]]
