"""
Brewing year grouping for the Koji Record Viewer

A brewing year (酒造年度, BY) runs from June 1 to May 31 and is labelled with
its Reiwa year: a batch made on 2024-07-01 belongs to R6BY (2024/6/1〜2025/5/31),
one made on 2024-03-01 to R5BY.
"""

import re
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from config import BREWING_YEAR, DATE_FORMATS
from models import KojiRecord, YearGroup

LABEL_PATTERN = re.compile(r'^R(\d+)BY$')


def parse_record_date(date_value) -> Optional[date]:
    """
    Parse the record's date cell.

    Accepts 2024-07-01, 2024/7/1, 2024.7.1 and 2024年7月1日.
    Returns None when the value cannot be parsed.
    """
    if date_value is None:
        return None
    if isinstance(date_value, datetime):
        return date_value.date()
    if isinstance(date_value, date):
        return date_value

    date_str = str(date_value).strip()
    if not date_str:
        return None

    # Datetime exports: keep the date part only
    date_str = date_str.split(' ')[0].split('T')[0]

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


def get_brewing_year(date_value) -> Optional[int]:
    """Reiwa brewing year number for a date, None if the date is unparseable"""
    parsed = parse_record_date(date_value)
    if parsed is None:
        return None

    offset = BREWING_YEAR['reiwa_offset']
    if parsed.month >= BREWING_YEAR['start_month']:
        return parsed.year - offset
    return parsed.year - offset - 1


def get_brewing_year_label(brewing_year: Optional[int]) -> str:
    if brewing_year is None:
        return BREWING_YEAR['unknown_label']
    return f"R{brewing_year}BY"


def get_year_period(label: str) -> str:
    """'R6BY' → '2024/6/1〜2025/5/31'; '' for labels that are not R<n>BY"""
    match = LABEL_PATTERN.match(label or '')
    if not match:
        return ''

    start_year = BREWING_YEAR['reiwa_offset'] + int(match.group(1))
    start = date(start_year, BREWING_YEAR['start_month'], 1)
    end = date(start_year + 1, BREWING_YEAR['start_month'], 1) - timedelta(days=1)

    return f"{start.year}/{start.month}/{start.day}〜{end.year}/{end.month}/{end.day}"


def group_by_brewing_year(records: List[KojiRecord], sort_by_date: bool = False) -> List[YearGroup]:
    """
    Partition records into brewing year groups.

    Args:
        records: Records to group (usually the filtered list)
        sort_by_date: Sort each group's records by date for display

    Returns:
        YearGroups, most recent brewing year first; undated records last
    """
    groups: Dict[Optional[int], List[KojiRecord]] = {}
    for record in records:
        groups.setdefault(get_brewing_year(record.date), []).append(record)

    years = sorted(groups.keys(), key=lambda y: (y is None, -(y or 0)))

    result = []
    for year in years:
        year_records = groups[year]
        if sort_by_date:
            year_records = sorted(year_records, key=lambda r: parse_record_date(r.date) or date.max)

        label = get_brewing_year_label(year)
        result.append(YearGroup(
            label=label,
            year=year,
            period=get_year_period(label),
            records=year_records,
        ))

    return result
