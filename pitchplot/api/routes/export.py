"""
Export Routes: Excel workbook download.

POST /api/export/excel  - Pitch table as .xlsx
"""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from pitchplot.presentation.excel import build_pitch_workbook
from pitchplot.presentation.plot import DEFAULT_TITLE
from pitchplot.schemas.api import PlotRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["export"])


@router.post("/export/excel")
async def export_excel(body: PlotRequest):
    """
    Returns the pitch table as a .xlsx workbook.
    """
    try:
        buffer = build_pitch_workbook(body.pitch_data, body.title)
    except Exception as e:
        logger.error(f"Excel export failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Excel export failed")

    # Safe filename for Content-Disposition
    safe_name = (body.title or "").strip() or DEFAULT_TITLE
    safe_name = "".join(c for c in safe_name if c.isalnum() or c in "-_ ")[:50].strip() or "pitches"
    safe_name = safe_name.replace(" ", "_")

    return StreamingResponse(
        buffer,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={
            "Content-Disposition": f'attachment; filename="{safe_name}_pitches.xlsx"',
        },
    )
