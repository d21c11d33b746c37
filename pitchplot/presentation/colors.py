# pitchplot/presentation/colors.py

import re
from typing import Dict, TypedDict

UNKNOWN_CATEGORY = "Unknown"
UNKNOWN_COLOR = "#888888"


class PitchStyle(TypedDict):
    category: str
    color: str
    label: str


# Canonical category -> marker color
CATEGORY_COLORS: Dict[str, str] = {
    "Four-Seam": "#E63946",
    "Sinker": "#F4722B",
    "Cutter": "#8B4513",
    "Slider": "#22C55E",
    "Sweeper": "#EAB308",
    "Slurve": "#1D3557",
    "Curveball": "#7DD3FC",
    "Changeup": "#16A34A",
    "Splitter": "#A855F7",
    "Knuckleball": "#6D6875",
    "Screwball": "#B5838D",
    UNKNOWN_CATEGORY: UNKNOWN_COLOR,
}

# Normalized label -> canonical category. Exact keys only, so "Slurve" can
# never collide with "Slider" and "Fastball (2S)" never lands on "Fastball".
PITCH_ALIASES: Dict[str, str] = {
    # four-seam
    "fastball": "Four-Seam",
    "fastball (4s)": "Four-Seam",
    "four-seam": "Four-Seam",
    "four seam": "Four-Seam",
    "four-seam fastball": "Four-Seam",
    "4-seam": "Four-Seam",
    "4-seam fastball": "Four-Seam",
    "4s": "Four-Seam",
    "ff": "Four-Seam",
    # sinker / two-seam
    "sinker": "Sinker",
    "fastball (2s)": "Sinker",
    "fastball (2s) / sinker": "Sinker",
    "two-seam": "Sinker",
    "two-seam fastball": "Sinker",
    "2-seam": "Sinker",
    "2-seam fastball": "Sinker",
    "2s": "Sinker",
    "si": "Sinker",
    # breaking
    "cutter": "Cutter",
    "cut fastball": "Cutter",
    "fc": "Cutter",
    "slider": "Slider",
    "sl": "Slider",
    "sweeper": "Sweeper",
    "st": "Sweeper",
    "slurve": "Slurve",
    "sv": "Slurve",
    "curveball": "Curveball",
    "curve": "Curveball",
    "knuckle curve": "Curveball",
    "cu": "Curveball",
    "kc": "Curveball",
    # offspeed
    "changeup": "Changeup",
    "change": "Changeup",
    "change-up": "Changeup",
    "ch": "Changeup",
    "splitter": "Splitter",
    "split": "Splitter",
    "split-finger": "Splitter",
    "fs": "Splitter",
    "knuckleball": "Knuckleball",
    "knuckle": "Knuckleball",
    "kn": "Knuckleball",
    "screwball": "Screwball",
    "sc": "Screwball",
}

# Table labels that read better under a shorter name
DISPLAY_NAMES: Dict[str, str] = {
    "Fastball (4S)": "Four-Seam",
    "Fastball (2S) / Sinker": "Sinker",
}

_WS_RE = re.compile(r"\s+")


def normalize_label(pitch_type: str) -> str:
    """Case-folds and collapses whitespace: ' Four  Seam ' -> 'four seam'."""
    return _WS_RE.sub(" ", pitch_type or "").strip().casefold()


def pitch_category(pitch_type: str) -> str:
    return PITCH_ALIASES.get(normalize_label(pitch_type), UNKNOWN_CATEGORY)


def pitch_color(pitch_type: str) -> str:
    return CATEGORY_COLORS[pitch_category(pitch_type)]


def display_name(pitch_type: str) -> str:
    return DISPLAY_NAMES.get(pitch_type, pitch_type)


def pitch_style(pitch_type: str) -> PitchStyle:
    category = pitch_category(pitch_type)
    return PitchStyle(category=category, color=CATEGORY_COLORS[category], label=display_name(pitch_type))
