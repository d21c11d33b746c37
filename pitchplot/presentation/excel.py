"""
Excel Builder: pitch table export.

Writes the filtered records as a .xlsx workbook with raw numeric cells
(so the sheet stays sortable) and the table's display precision applied as
number formats.

Sheets:
- Summary: Title and pitch count
- Pitches: One row per pitch type, colored swatch in the first column
"""

import io
import logging
from typing import List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from pitchplot.presentation.colors import display_name, pitch_color
from pitchplot.presentation.plot import DEFAULT_TITLE
from pitchplot.schemas.pitch import PitchRecord

logger = logging.getLogger(__name__)

# Styling constants
HEADER_FONT = Font(name="Calibri", bold=True, size=10, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4F46E5", end_color="4F46E5", fill_type="solid")
HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
ONE_DECIMAL = "0.0"
TWO_DECIMALS = "0.00"
WHOLE = "0"
PERCENT_FORMAT = "0%"

# (header, attribute, number format, width)
PITCH_COLUMNS: List[Tuple[str, str, Optional[str], int]] = [
    ("Pitch Type", "pitch_type", None, 24),
    ("Usage", "usage", PERCENT_FORMAT, 9),
    ("Velocity", "velocity", ONE_DECIMAL, 10),
    ("Spin", "spin", WHOLE, 9),
    ("iVB", "ivb", ONE_DECIMAL, 8),
    ("HB", "horz_brk", ONE_DECIMAL, 8),
    ("Ext", "extension", ONE_DECIMAL, 8),
    ("Rel Ht", "rel_ht", ONE_DECIMAL, 8),
    ("Rel Side", "rel_side", ONE_DECIMAL, 9),
    ("VAA", "vaa", TWO_DECIMALS, 8),
    ("Strike%", "strike_percent", WHOLE, 9),
    ("Zone%", "zone_percent", WHOLE, 9),
    ("SwgStrk%", "swg_strk_percent", WHOLE, 10),
    ("Whiff%", "whiff_percent", WHOLE, 9),
    ("Chase%", "chase_percent", WHOLE, 9),
    ("ZoneWhiff%", "zone_whiff_percent", WHOLE, 11),
    ("GroundBall%", "ground_ball_percent", WHOLE, 12),
    ("FlyBall%", "fly_ball_percent", WHOLE, 10),
]


def build_pitch_workbook(records: Sequence[PitchRecord], title: Optional[str] = None) -> io.BytesIO:
    """
    Generates a .xlsx workbook for one movement profile.

    Returns a BytesIO buffer ready for StreamingResponse.
    """
    wb = Workbook()
    title = (title or "").strip() or DEFAULT_TITLE

    # ── Sheet 1: Summary ─────────────────────────────────────────────
    ws_summary = wb.active
    ws_summary.title = "Summary"

    summary_data = [
        ("Title", title),
        ("Pitch Types", len(records)),
    ]
    for i, (key, val) in enumerate(summary_data, 1):
        ws_summary.cell(row=i, column=1, value=key).font = Font(bold=True, size=10)
        ws_summary.cell(row=i, column=2, value=val)

    ws_summary.column_dimensions["A"].width = 16
    ws_summary.column_dimensions["B"].width = 40

    # ── Sheet 2: Pitches ─────────────────────────────────────────────
    ws_pitches = wb.create_sheet("Pitches")

    for col_idx, (header, _, _, width) in enumerate(PITCH_COLUMNS, 1):
        cell = ws_pitches.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGN
        ws_pitches.column_dimensions[get_column_letter(col_idx)].width = width

    for row_idx, record in enumerate(records, 2):
        for col_idx, (_, attr, number_format, _) in enumerate(PITCH_COLUMNS, 1):
            value = getattr(record, attr)
            if attr == "pitch_type":
                value = display_name(value)
            cell = ws_pitches.cell(row=row_idx, column=col_idx, value=value)
            if value is not None and number_format:
                cell.number_format = number_format

        # Category swatch on the label cell
        color = pitch_color(record.pitch_type).lstrip("#").upper()
        ws_pitches.cell(row=row_idx, column=1).fill = PatternFill(
            start_color=color, end_color=color, fill_type="solid"
        )

    # Freeze top row + auto-filter
    ws_pitches.freeze_panes = "A2"
    ws_pitches.auto_filter.ref = f"A1:{get_column_letter(len(PITCH_COLUMNS))}{len(records) + 1}"

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    logger.info(f"Excel workbook built: {len(records)} pitch type(s) for '{title}'")
    return buffer
