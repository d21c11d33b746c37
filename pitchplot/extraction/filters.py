import logging
from typing import Iterable, List

from pitchplot.schemas.pitch import PitchRecord

logger = logging.getLogger(__name__)


class UsageFilter:
    """
    The 'Display Filter'.
    Keeps pitches that are thrown often enough and can actually be plotted.
    """

    def __init__(self, usage_threshold: float):
        if isinstance(usage_threshold, bool) or not isinstance(usage_threshold, (int, float)):
            raise ValueError(f"usage_threshold must be a number, got {usage_threshold!r}")
        if not 0.0 <= usage_threshold <= 1.0:
            raise ValueError(f"usage_threshold must be within [0, 1], got {usage_threshold}")
        self.usage_threshold = float(usage_threshold)

    def keep(self, record: PitchRecord) -> bool:
        """
        Decides if a record survives. Unknown usage never passes the cutoff.
        """
        if record.usage is None or record.usage < self.usage_threshold:
            return False
        return record.has_movement

    def apply(self, records: Iterable[PitchRecord]) -> List[PitchRecord]:
        """
        Stable filter: survivors keep their input order.
        """
        records = list(records)
        kept = [r for r in records if self.keep(r)]

        if len(kept) != len(records):
            logger.info(
                f"🔎 Usage filter (>= {self.usage_threshold:.2f}): "
                f"kept {len(kept)} of {len(records)} pitch type(s)"
            )
        return kept


def filter_records(records: Iterable[PitchRecord], usage_threshold: float) -> List[PitchRecord]:
    return UsageFilter(usage_threshold).apply(records)
