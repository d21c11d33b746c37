"""
Movement Plot: horzBrk/iVB scatter geometry and Vega-Lite spec.

The pixel geometry (`PlotPoint`) serves renderers that draw their own SVG;
the Vega-Lite spec serves chart widgets. Both use the same fixed axes so a
pitch lands in the same place either way.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from pitchplot.presentation.colors import CATEGORY_COLORS, pitch_style
from pitchplot.schemas.pitch import PitchRecord

logger = logging.getLogger(__name__)

# Plot rectangle (px)
PLOT_SIZE = 480
PADDING = 50
INNER_SIZE = PLOT_SIZE - PADDING * 2

# Axis ranges (inches)
X_RANGE = (-20.0, 20.0)
Y_RANGE = (-22.0, 22.0)
GRID_TICKS = [-20, -15, -10, -5, 5, 10, 15, 20]
LABEL_TICKS = [-20, -10, 10, 20]

# Usage -> bubble radius (px)
MIN_RADIUS = 20.0
MAX_RADIUS = 38.0
RADIUS_BASE = 18.0
RADIUS_PER_USAGE = 38.0
CENTER_DOT_RADIUS = 6.0

DEFAULT_TITLE = "Pitch Movement Profile"


def scale_x(horz_brk: float) -> float:
    return PADDING + ((horz_brk - X_RANGE[0]) / (X_RANGE[1] - X_RANGE[0])) * INNER_SIZE


def scale_y(ivb: float) -> float:
    # SVG y grows downward; positive break plots upward
    return PADDING + ((Y_RANGE[1] - ivb) / (Y_RANGE[1] - Y_RANGE[0])) * INNER_SIZE


def scale_radius(usage: Optional[float]) -> float:
    usage = usage or 0.0
    return max(MIN_RADIUS, min(MAX_RADIUS, RADIUS_BASE + usage * RADIUS_PER_USAGE))


@dataclass(frozen=True)
class PlotPoint:
    pitch_type: str
    label: str
    category: str
    color: str
    x: float
    y: float
    r: float
    horz_brk: float
    ivb: float
    usage: Optional[float]


def plot_points(records: Sequence[PitchRecord]) -> List[PlotPoint]:
    """
    Positions every plottable record. Records without both breaks are skipped.
    """
    points = []
    for record in records:
        if not record.has_movement:
            continue
        style = pitch_style(record.pitch_type)
        points.append(PlotPoint(
            pitch_type=record.pitch_type,
            label=style["label"],
            category=style["category"],
            color=style["color"],
            x=round(scale_x(record.horz_brk), 2),
            y=round(scale_y(record.ivb), 2),
            r=round(scale_radius(record.usage), 2),
            horz_brk=record.horz_brk,
            ivb=record.ivb,
            usage=record.usage,
        ))
    return points


def points_as_dicts(points: Sequence[PlotPoint]) -> List[Dict[str, Any]]:
    return [asdict(p) for p in points]


def plot_frame() -> Dict[str, Any]:
    """Static SVG scaffolding: grid lines, zero axes and inch labels, in px."""
    far = PLOT_SIZE - PADDING
    return {
        "size": PLOT_SIZE,
        "inner": {"x": PADDING, "y": PADDING, "width": INNER_SIZE, "height": INNER_SIZE},
        "vertical_grid": [round(scale_x(v), 2) for v in GRID_TICKS],
        "horizontal_grid": [round(scale_y(v), 2) for v in GRID_TICKS],
        "axes": {
            "x0": round(scale_x(0), 2),
            "y0": round(scale_y(0), 2),
            "start": PADDING,
            "end": far,
        },
        "x_labels": [{"value": v, "text": f'{v}"', "x": round(scale_x(v), 2), "y": far + 18} for v in LABEL_TICKS],
        "y_labels": [{"value": v, "text": f'{v}"', "x": PADDING - 8, "y": round(scale_y(v) + 4, 2)} for v in LABEL_TICKS],
    }


def build_movement_spec(records: Sequence[PitchRecord], title: Optional[str] = None) -> Dict[str, Any]:
    """
    Deterministic Vega-Lite v5 spec for the movement profile.
    Data is inlined via "data.values"; colors follow the category table.
    """
    points = plot_points(records)
    values = [
        {
            "pitchType": p.label,
            "category": p.category,
            "horzBrk": p.horz_brk,
            "iVB": p.ivb,
            "usage": p.usage,
            "radius": p.r,
        }
        for p in points
    ]

    categories = sorted({p.category for p in points})
    color_scale = {"domain": categories, "range": [CATEGORY_COLORS[c] for c in categories]}
    spec = {
        "$schema": "https://vega.github.io/schema/vega-lite/v5.json",
        "title": (title or "").strip() or DEFAULT_TITLE,
        "width": INNER_SIZE,
        "height": INNER_SIZE,
        "background": "#0d1117",
        "data": {"values": values},
        "layer": [
            {
                "mark": {"type": "circle", "opacity": 0.25, "strokeWidth": 2},
                "encoding": {
                    "x": {
                        "field": "horzBrk", "type": "quantitative",
                        "title": "Horizontal Break (in)",
                        "scale": {"domain": list(X_RANGE)},
                        "axis": {"values": GRID_TICKS},
                    },
                    "y": {
                        "field": "iVB", "type": "quantitative",
                        "title": "Induced Vertical Break (in)",
                        "scale": {"domain": list(Y_RANGE)},
                        "axis": {"values": GRID_TICKS},
                    },
                    # Area encodes usage: size is px^2 for a circle mark
                    "size": {
                        "field": "radius", "type": "quantitative", "legend": None,
                        "scale": {
                            "type": "pow", "exponent": 2,
                            "domain": [MIN_RADIUS, MAX_RADIUS],
                            "range": [MIN_RADIUS ** 2 * math.pi, MAX_RADIUS ** 2 * math.pi],
                        },
                    },
                    "color": {
                        "field": "category", "type": "nominal", "title": "Pitch",
                        "scale": color_scale,
                    },
                    "stroke": {"field": "category", "type": "nominal", "legend": None, "scale": color_scale},
                    "tooltip": [
                        {"field": "pitchType", "type": "nominal"},
                        {"field": "usage", "type": "quantitative", "format": ".0%"},
                        {"field": "iVB", "type": "quantitative", "format": ".1f"},
                        {"field": "horzBrk", "type": "quantitative", "format": ".1f"},
                    ],
                },
            },
            {
                "mark": {"type": "circle", "size": CENTER_DOT_RADIUS ** 2 * math.pi, "opacity": 1},
                "encoding": {
                    "x": {"field": "horzBrk", "type": "quantitative"},
                    "y": {"field": "iVB", "type": "quantitative"},
                    "color": {"field": "category", "type": "nominal", "legend": None, "scale": color_scale},
                },
            },
        ],
    }

    logger.info(f"📈 Movement spec built with {len(values)} point(s)")
    return spec
