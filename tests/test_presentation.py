"""
Tests for colors, plot geometry, table formatting and Excel export.
"""

import pytest
from openpyxl import load_workbook

from pitchplot.presentation.colors import (
    UNKNOWN_CATEGORY,
    UNKNOWN_COLOR,
    display_name,
    pitch_category,
    pitch_color,
    pitch_style,
)
from pitchplot.presentation.excel import build_pitch_workbook
from pitchplot.presentation.plot import (
    DEFAULT_TITLE,
    PADDING,
    PLOT_SIZE,
    build_movement_spec,
    plot_frame,
    plot_points,
    scale_radius,
    scale_x,
    scale_y,
)
from pitchplot.presentation.table import HEADERS, format_spin, table_rows
from pitchplot.schemas.pitch import PitchRecord


@pytest.fixture
def records():
    return [
        PitchRecord(
            pitch_type="Fastball (4S)", usage=0.521, velocity=95.34, spin=2349.0,
            ivb=17.26, horz_brk=-8.04, extension=6.5, rel_ht=5.9, rel_side=-2.1,
            vaa=-4.567, strike_percent=66.6, whiff_percent=24.4,
        ),
        PitchRecord(pitch_type="Slider", usage=0.31, ivb=2.1, horz_brk=5.4),
        PitchRecord(pitch_type="Eephus", usage=0.02, ivb=-3.0, horz_brk=0.0),
    ]


class TestPitchColors:
    """Deterministic lookup with explicit fallback."""

    @pytest.mark.parametrize("label,category", [
        ("Fastball (4S)", "Four-Seam"),
        ("FOUR-SEAM", "Four-Seam"),
        ("  four   seam ", "Four-Seam"),
        ("Fastball (2S) / Sinker", "Sinker"),
        ("Slurve", "Slurve"),
        ("Slider", "Slider"),
        ("Change", "Changeup"),
        ("Split", "Splitter"),
    ])
    def test_known_labels(self, label, category):
        assert pitch_category(label) == category

    def test_no_substring_matching(self):
        assert pitch_category("Fastball (2S)") == "Sinker"
        assert pitch_category("Fastball (4S)") == "Four-Seam"
        assert pitch_category("Hard Slider") == UNKNOWN_CATEGORY

    def test_unknown_fallback(self):
        assert pitch_category("Eephus") == UNKNOWN_CATEGORY
        assert pitch_color("Eephus") == UNKNOWN_COLOR
        assert pitch_color("") == UNKNOWN_COLOR

    def test_colors(self):
        assert pitch_color("slider") == "#22C55E"
        assert pitch_color("Sinker") == "#F4722B"

    def test_display_names(self):
        assert display_name("Fastball (4S)") == "Four-Seam"
        assert display_name("Fastball (2S) / Sinker") == "Sinker"
        assert display_name("Slider") == "Slider"

    def test_style(self):
        assert pitch_style("Fastball (4S)") == {"category": "Four-Seam", "color": "#E63946", "label": "Four-Seam"}


class TestPlotGeometry:
    """Fixed plotting rectangle and usage-scaled radius."""

    def test_origin_is_center(self):
        assert scale_x(0) == PLOT_SIZE / 2
        assert scale_y(0) == PLOT_SIZE / 2

    def test_range_edges(self):
        assert scale_x(-20) == PADDING
        assert scale_x(20) == PLOT_SIZE - PADDING
        assert scale_y(22) == PADDING
        assert scale_y(-22) == PLOT_SIZE - PADDING

    @pytest.mark.parametrize("usage,radius", [(0.0, 20.0), (0.05, 20.0), (0.2, 25.6), (0.5, 37.0), (1.0, 38.0), (None, 20.0)])
    def test_radius(self, usage, radius):
        assert scale_radius(usage) == pytest.approx(radius)

    def test_points(self, records):
        points = plot_points(records)
        assert [p.label for p in points] == ["Four-Seam", "Slider", "Eephus"]
        assert points[0].color == "#E63946"
        assert points[2].color == UNKNOWN_COLOR
        assert 20.0 <= points[0].r <= 38.0

    def test_points_skip_missing_breaks(self):
        assert plot_points([PitchRecord(pitch_type="Slider", usage=0.3, ivb=None, horz_brk=1.0)]) == []

    def test_frame(self):
        frame = plot_frame()
        assert frame["axes"]["x0"] == PLOT_SIZE / 2
        assert len(frame["vertical_grid"]) == 8
        assert [label["text"] for label in frame["x_labels"]] == ['-20"', '-10"', '10"', '20"']


class TestMovementSpec:
    """Vega-Lite output."""

    def test_spec_shape(self, records):
        spec = build_movement_spec(records, "  Jane Doe ")
        assert spec["$schema"].endswith("vega-lite/v5.json")
        assert spec["title"] == "Jane Doe"
        assert len(spec["data"]["values"]) == 3
        enc = spec["layer"][0]["encoding"]
        assert enc["x"]["scale"]["domain"] == [-20.0, 20.0]
        assert enc["y"]["scale"]["domain"] == [-22.0, 22.0]

    def test_colors_follow_categories(self, records):
        scale = build_movement_spec(records)["layer"][0]["encoding"]["color"]["scale"]
        mapping = dict(zip(scale["domain"], scale["range"]))
        assert mapping["Four-Seam"] == "#E63946"
        assert mapping["Unknown"] == UNKNOWN_COLOR

    def test_default_title(self):
        assert build_movement_spec([])["title"] == DEFAULT_TITLE


class TestTableRows:
    """Display formatting."""

    def test_formatting(self, records):
        row = table_rows(records)[0]
        assert list(row) == HEADERS
        assert row["Pitch Type"] == "Four-Seam"
        assert row["Usage"] == "52%"
        assert row["Velocity"] == "95.3"
        assert row["Spin"] == "2300"
        assert row["iVB"] == "17.3"
        assert row["HB"] == "-8.0"
        assert row["VAA"] == "-4.57"
        assert row["Strike%"] == "67%"
        assert row["Chase%"] == "-"

    def test_spin_rounds_half_up(self):
        assert format_spin(2450.0) == "2500"

    def test_unknowns_dash(self, records):
        row = table_rows(records)[1]
        assert row["Velocity"] == "-"
        assert row["Spin"] == "-"


class TestExcelExport:

    def test_workbook(self, records):
        wb = load_workbook(build_pitch_workbook(records, "Jane Doe"))

        assert wb.sheetnames == ["Summary", "Pitches"]
        assert wb["Summary"]["B1"].value == "Jane Doe"
        assert wb["Summary"]["B2"].value == 3

        ws = wb["Pitches"]
        assert ws["A1"].value == "Pitch Type"
        assert ws["A2"].value == "Four-Seam"
        assert ws["B2"].value == pytest.approx(0.521)
        assert ws["C3"].value is None
        assert ws.freeze_panes == "A2"
        assert ws.max_row == 4
