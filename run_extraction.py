import argparse
import asyncio
import base64
import logging
from pathlib import Path

from pitchplot.config import SystemConfig
from pitchplot.errors import PitchPlotError
from pitchplot.pipeline import PitchPipeline
from pitchplot.presentation.excel import build_pitch_workbook
from pitchplot.presentation.table import HEADERS, table_rows

# Configure logging to see what's happening
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger("PitchPlotRunner")


def _print_table(rows):
    widths = {h: max(len(h), *(len(r[h]) for r in rows)) if rows else len(h) for h in HEADERS}
    print("  ".join(h.ljust(widths[h]) for h in HEADERS))
    for row in rows:
        print("  ".join(row[h].ljust(widths[h]) for h in HEADERS))


async def main():
    """
    Manual trigger: reads one screenshot from disk and prints its pitch table.
    """
    parser = argparse.ArgumentParser(description="Extract a pitch movement table from a screenshot.")
    parser.add_argument("image", type=Path, help="PNG/JPEG screenshot of the pitch table")
    parser.add_argument("--threshold", type=float, default=None, help="Minimum usage fraction (0-1)")
    parser.add_argument("--exclude-low-usage", action="store_true", help="Use the stricter default threshold")
    parser.add_argument("--title", default="", help="Player name for the export")
    parser.add_argument("--xlsx", type=Path, default=None, help="Also write the table to this .xlsx file")
    args = parser.parse_args()

    if not args.image.is_file():
        logger.warning(f"⚠️ No such file: {args.image}")
        return 1

    threshold = args.threshold
    if threshold is None:
        threshold = SystemConfig.usage_threshold(args.exclude_low_usage)

    image_base64 = base64.b64encode(args.image.read_bytes()).decode("utf-8")
    pipeline = PitchPipeline()

    try:
        records = await pipeline.run(image_base64, threshold)
    except (PitchPlotError, ValueError) as e:
        print(f"❌ FAILED: {args.image.name}")
        print(f"   - Error: {e}")
        return 1

    print(f"\n✅ {len(records)} pitch type(s) at usage >= {threshold:.2f}\n")
    _print_table(table_rows(records))

    if args.xlsx:
        args.xlsx.write_bytes(build_pitch_workbook(records, args.title).getvalue())
        print(f"\n📄 Wrote {args.xlsx}")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
