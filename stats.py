"""
Control statistics for the Koji Record Viewer

Summarises the control settings of the filtered batches so the operator can
see what was typically used: count, range, average, median and the most
frequent settings.

Known limitation: 0 is treated as "not recorded", so a real zero reading is
excluded from every statistic along with empty cells.
"""

import math
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from config import FULLY_CLOSED, FULLY_OPEN, STATS_CONFIG, SUMMARY_STATS_FIELDS
from extractors import parse_number
from models import ControlStats, FrequentValue, KojiRecord

STATE_LITERALS = (FULLY_OPEN, FULLY_CLOSED)


def round_half_up(value: float, digits: int = 2) -> float:
    """Round like a spreadsheet does (0.125 → 0.13), not banker's rounding"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def to_observation(value: Any) -> Optional[float]:
    """
    Numeric observation for a cell value, or None if it should not count.

    Excluded: None, '', 0, 全開 / 全閉, NaN, inf and text without a leading number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        if value in STATE_LITERALS:
            return None
        number = parse_number(value, default=None)
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return None

    if number is None or not math.isfinite(number) or number == 0:
        return None
    return number


def rank_frequencies(values: Iterable[Any], limit: Optional[int] = None) -> List[FrequentValue]:
    """
    Count occurrences and rank them, most frequent first.

    Ties keep the order in which values were first seen.
    """
    counts = Counter(values)
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    if limit is not None:
        ranked = ranked[:limit]
    return [FrequentValue(value=value, count=count) for value, count in ranked]


def calculate_stats(values: Iterable[Any]) -> ControlStats:
    """
    Descriptive statistics for one control item.

    Args:
        values: Raw field values (numbers, 全開/全閉, text or None)

    Returns:
        ControlStats; all numeric stats are 0 when there is no observation
    """
    values = list(values)

    numeric = [n for n in (to_observation(v) for v in values) if n is not None]
    states = [str(v) for v in values if isinstance(v, str) and v in STATE_LITERALS]

    digits = STATS_CONFIG['round_digits']
    frequent_values = rank_frequencies(
        (round_half_up(n, digits) for n in numeric),
        limit=STATS_CONFIG['top_n'],
    )
    frequent_state_values = rank_frequencies(states)

    if not numeric:
        return ControlStats(
            frequent_values=frequent_values,
            frequent_state_values=frequent_state_values,
        )

    series = pd.Series(numeric, dtype=float)
    return ControlStats(
        count=len(numeric),
        min=float(series.min()),
        max=float(series.max()),
        average=float(series.mean()),
        median=float(series.median()),
        frequent_values=frequent_values,
        frequent_state_values=frequent_state_values,
    )


def calculate_summary_stats(
    records: List[KojiRecord],
    field_map: Dict[str, Dict[str, str]] = None
) -> Dict[str, Dict[str, ControlStats]]:
    """
    Statistics for every phase/item in SUMMARY_STATS_FIELDS.

    Args:
        records: Filtered records
        field_map: Phase → {item: record field}; defaults to SUMMARY_STATS_FIELDS

    Returns:
        {'before_handling': {'ventilation': ControlStats, ...}, 'after_handling': {...}}
    """
    if field_map is None:
        field_map = SUMMARY_STATS_FIELDS

    return {
        phase: {
            item: calculate_stats(getattr(r, field_name) for r in records)
            for item, field_name in fields.items()
        }
        for phase, fields in field_map.items()
    }
