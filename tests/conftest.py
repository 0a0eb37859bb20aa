"""
Shared fixtures: build koji record CSV rows by field name instead of by
counting 46 columns by hand.
"""
import pytest

from columns import COLUMN_COUNT, COLUMN_SCHEMA
from models import KojiRecord

FIELD_INDEX = {field: index for index, field, _, _ in COLUMN_SCHEMA}

HEADER_ROWS = [
    ','.join(['基本情報'] * 8 + [''] * (COLUMN_COUNT - 8)),
    ','.join(label for _, _, _, label in COLUMN_SCHEMA),
]


def _make_row(**fields):
    cells = [''] * COLUMN_COUNT
    for name, value in fields.items():
        cells[FIELD_INDEX[name]] = str(value)
    return cells


def _make_csv(*rows, header_rows=HEADER_ROWS):
    lines = list(header_rows)
    for row in rows:
        lines.append(','.join(row))
    return '\n'.join(lines) + '\n'


@pytest.fixture
def make_row():
    """make_row(variety='山田錦', sheets=6) → list of 46 cell strings"""
    return _make_row


@pytest.fixture
def make_csv():
    """make_csv(row, row, ...) → CSV text with the two header rows"""
    return _make_csv


@pytest.fixture
def sample_records():
    return [
        KojiRecord(machine='1号機', date='2024/7/1', origin='兵庫', variety='山田錦',
                   polishing_ratio=70, sheets=6, weight=300),
        KojiRecord(machine='2号機', date='2024/3/1', origin='岡山', variety='雄町',
                   polishing_ratio=75, sheets=5, weight=250),
        KojiRecord(machine='1号機', date='2023/11/15', origin='兵庫', variety='山田錦',
                   polishing_ratio=76, sheets=6, weight=320),
        KojiRecord(machine='2号機', date='2025/1/10', origin='長野', variety='美山錦',
                   polishing_ratio=60, sheets=4, weight=180),
    ]
