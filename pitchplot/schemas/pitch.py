"""
Pitch Record Schema: The Contract Between Model Output and Display
==================================================================

1. THE MISSION
--------------
The VLM returns best-effort JSON. This module is the boundary where that
untrusted output becomes a typed, immutable `PitchRecord`, or is dropped.

2. THE MECHANISM
----------------
A. **Soft Failures per Field:** `BeforeValidator` hooks turn any unusable
   numeric value into `None` instead of raising. A stray "52%" or "-" means
   "unknown", never a parsed number.
B. **Hard Failure per Record:** Only `pitchType` can reject a record. A bad
   row is dropped by `validate_record`; it never fails the batch.
C. **Wire Names:** Fields are snake_case in Python and camelCase on the wire
   (`pitchType`, `iVB`, `horzBrk`, ...).

3. THE CONTRACT
---------------
- Numeric fields are finite floats or `None`. Strings, booleans, objects,
  NaN and infinities are all `None`.
- `usage` is in `[0, 1]` or `None`. Percent-style values (52) are rejected,
  not rescaled.
- Records are frozen once built.
"""

import logging
import math
from typing import Annotated, Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# ==============================================================================
# 🛡️ RESILIENCE VALIDATORS (Soft Failures)
# ==============================================================================


def finite_number_or_none(v: Any) -> Optional[float]:
    """
    The 'Soft Fail' validator for model-supplied numbers.

    Inputs:  12.5, 3, None, "12.5", "-", "52%", True, NaN, inf, 10**400, {}
    Outputs: 12.5, 3.0, None, None, None, None, None, None, None, None, None
    """
    # bool is an int subclass; JSON true/false is never a measurement
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        try:
            f = float(v)
        except OverflowError:
            return None
        return f if math.isfinite(f) else None
    return None


def fraction_or_none(v: Any) -> Optional[float]:
    """Same as `finite_number_or_none`, plus a `[0, 1]` range gate."""
    f = finite_number_or_none(v)
    if f is None or not 0.0 <= f <= 1.0:
        return None
    return f


Measurement = Annotated[Optional[float], BeforeValidator(finite_number_or_none)]
Fraction = Annotated[Optional[float], BeforeValidator(fraction_or_none)]


# ==============================================================================
# 📊 PITCH RECORD
# ==============================================================================

class PitchRecord(BaseModel):
    """
    One row of a pitch-statistics table: a single pitch type for one pitcher.
    """
    # Ignore extra noise from the model; records never change after parsing
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    pitch_type: str = Field(..., alias="pitchType", description="Free-text pitch label, e.g. 'Slider'.")
    usage: Fraction = Field(None, description="Share of total pitches, as a fraction.")

    # Pitch shape
    velocity: Measurement = Field(None, description="mph")
    spin: Measurement = Field(None, description="rpm")
    ivb: Measurement = Field(None, alias="iVB", description="Induced vertical break, inches.")
    horz_brk: Measurement = Field(None, alias="horzBrk", description="Horizontal break, inches.")

    # Release
    extension: Measurement = Field(None, description="feet")
    rel_ht: Measurement = Field(None, alias="relHt", description="Release height, feet.")
    rel_side: Measurement = Field(None, alias="relSide", description="Release side, feet.")
    vaa: Measurement = Field(None, description="Vertical approach angle, degrees.")

    # Outcomes (plain percentages, 72.0 means 72%)
    strike_percent: Measurement = Field(None, alias="strikePercent")
    zone_percent: Measurement = Field(None, alias="zonePercent")
    swg_strk_percent: Measurement = Field(None, alias="swgStrkPercent")
    whiff_percent: Measurement = Field(None, alias="whiffPercent")
    chase_percent: Measurement = Field(None, alias="chasePercent")
    zone_whiff_percent: Measurement = Field(None, alias="zoneWhiffPercent")
    ground_ball_percent: Measurement = Field(None, alias="groundBallPercent")
    fly_ball_percent: Measurement = Field(None, alias="flyBallPercent")

    @field_validator("pitch_type", mode="before")
    @classmethod
    def _require_label(cls, v: Any) -> str:
        # Hard fail: no label, no record
        if not isinstance(v, str) or not v.strip():
            raise ValueError("pitchType must be a non-empty string")
        return v.strip()

    @property
    def has_movement(self) -> bool:
        """Both plot coordinates are known."""
        return self.ivb is not None and self.horz_brk is not None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase mapping with every field present (unknowns as None)."""
        return self.model_dump(by_alias=True)


# ==============================================================================
# ✅ VALIDATION ENTRY POINTS
# ==============================================================================

def validate_record(value: Any) -> Optional[PitchRecord]:
    """
    Decoded JSON value -> PitchRecord, or None when the row is unusable.
    Pure: no I/O, no shared state.
    """
    if not isinstance(value, dict):
        return None
    try:
        return PitchRecord.model_validate(value)
    except ValidationError:
        return None


def validate_records(items: Iterable[Any]) -> List[PitchRecord]:
    """Validate every item, dropping rejects, preserving order."""
    records = []
    rejected = 0
    for item in items:
        record = validate_record(item)
        if record is None:
            rejected += 1
            continue
        records.append(record)

    if rejected:
        logger.info(f"🧹 Dropped {rejected} unusable row(s); kept {len(records)}")
    return records
