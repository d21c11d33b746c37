"""
Pitch Table: display formatting for the data table under the plot.
"""

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from pitchplot.presentation.colors import display_name
from pitchplot.schemas.pitch import PitchRecord

MISSING = "-"


def round_half_up(value: float) -> int:
    # round() is banker's rounding; tables round 24.5 up
    return math.floor(value + 0.5)


def format_decimal(value: Optional[float], places: int) -> str:
    return MISSING if value is None else f"{value:.{places}f}"


def format_percent(value: Optional[float]) -> str:
    # Percent columns already hold 72.0 for 72%
    return MISSING if value is None else f"{round_half_up(value)}%"


def format_usage(value: Optional[float]) -> str:
    return MISSING if value is None else f"{round_half_up(value * 100)}%"


def format_spin(value: Optional[float]) -> str:
    return MISSING if value is None else str(round_half_up(value / 100) * 100)


# (header, formatter) in display order
COLUMNS: List[Tuple[str, Callable[[PitchRecord], str]]] = [
    ("Pitch Type", lambda r: display_name(r.pitch_type)),
    ("Usage", lambda r: format_usage(r.usage)),
    ("Velocity", lambda r: format_decimal(r.velocity, 1)),
    ("Spin", lambda r: format_spin(r.spin)),
    ("iVB", lambda r: format_decimal(r.ivb, 1)),
    ("HB", lambda r: format_decimal(r.horz_brk, 1)),
    ("Ext", lambda r: format_decimal(r.extension, 1)),
    ("Rel Ht", lambda r: format_decimal(r.rel_ht, 1)),
    ("Rel Side", lambda r: format_decimal(r.rel_side, 1)),
    ("VAA", lambda r: format_decimal(r.vaa, 2)),
    ("Strike%", lambda r: format_percent(r.strike_percent)),
    ("Zone%", lambda r: format_percent(r.zone_percent)),
    ("SwgStrk%", lambda r: format_percent(r.swg_strk_percent)),
    ("Whiff%", lambda r: format_percent(r.whiff_percent)),
    ("Chase%", lambda r: format_percent(r.chase_percent)),
    ("ZoneWhiff%", lambda r: format_percent(r.zone_whiff_percent)),
    ("GroundBall%", lambda r: format_percent(r.ground_ball_percent)),
    ("FlyBall%", lambda r: format_percent(r.fly_ball_percent)),
]

HEADERS = [header for header, _ in COLUMNS]


def table_rows(records: Sequence[PitchRecord]) -> List[Dict[str, str]]:
    """One {header: text} mapping per record, in record order."""
    return [{header: fmt(record) for header, fmt in COLUMNS} for record in records]
