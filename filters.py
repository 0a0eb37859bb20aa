"""
Record filters for the Koji Record Viewer

All filters are pure: they return a new list and never touch the input.
"""

from typing import List

from models import FilterCriteria, KojiRecord


def matches_criteria(record: KojiRecord, criteria: FilterCriteria) -> bool:
    """Check one record against every active criterion (AND)"""
    if criteria.variety and record.variety != criteria.variety:
        return False

    if criteria.origin and record.origin != criteria.origin:
        return False

    # Polishing ratio: inclusive window around the selected ratio
    if criteria.polishing_ratio > 0:
        min_ratio = criteria.polishing_ratio - criteria.polishing_range
        max_ratio = criteria.polishing_ratio + criteria.polishing_range
        if record.polishing_ratio < min_ratio or record.polishing_ratio > max_ratio:
            return False

    if criteria.weight_min > 0 and record.weight < criteria.weight_min:
        return False
    if criteria.weight_max > 0 and record.weight > criteria.weight_max:
        return False

    # Empty selection = every sheet count allowed
    if criteria.sheets and record.sheets not in criteria.sheets:
        return False

    return True


def filter_records(records: List[KojiRecord], criteria: FilterCriteria) -> List[KojiRecord]:
    """
    Apply the sidebar filters to the loaded records.

    Args:
        records: Records in file order
        criteria: Filter selections; unset criteria are ignored

    Returns:
        Matching records, order preserved
    """
    return [r for r in records if matches_criteria(r, criteria)]


def filter_dehumidifier_unused(records: List[KojiRecord]) -> List[KojiRecord]:
    """Keep batches where both dehumidifier valves were 全閉 after handling"""
    return [r for r in records if r.dehumidifier_unused]
