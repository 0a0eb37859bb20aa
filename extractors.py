"""
Koji Record Extractors
Turns the 麹記録集計表 spreadsheet export (CSV) into KojiRecord objects

Cells are parsed best-effort: a bad cell becomes a sentinel (0, '' or None),
a row that cannot be mapped at all is dropped and logged.
"""

import logging
import math
import re
import warnings
from io import StringIO
from typing import Any, List, Optional

import pandas as pd

from columns import COLUMN_COUNT, COLUMN_SCHEMA, CONTROL, FLOAT, INT, TEXT
from config import DATA_SOURCE
from models import ControlState, ControlValue, KojiRecord

logger = logging.getLogger(__name__)

# Leading number, same idea as reading "75%" as 75
NUMBER_PREFIX = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
INTEGER_PREFIX = re.compile(r'^[+-]?\d+')


# =============================================================================
# DEBUG LOGGING (visible in Streamlit)
# =============================================================================
_debug_log = []

def debug_log(msg):
    """Add message to debug log"""
    _debug_log.append(msg)
    logger.debug(msg)

def get_debug_log():
    """Get and clear debug log"""
    global _debug_log
    log = _debug_log.copy()
    _debug_log = []
    return log


# =============================================================================
# CELL PARSERS
# =============================================================================
def _cell_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ''
    return str(value).strip()


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Best-effort float from a cell.

    Reads the leading number and ignores trailing text ("75%" → 75.0).
    Empty or non-numeric cells return the default.
    """
    match = NUMBER_PREFIX.match(_cell_text(value))
    if not match:
        return default
    number = float(match.group(0))
    # "1e999" overflows to inf
    if not math.isfinite(number):
        return default
    return number


def parse_integer(value: Any, default: int = 0) -> int:
    """Best-effort int from a cell ("6.5" → 6, "6枚" → 6)"""
    match = INTEGER_PREFIX.match(_cell_text(value))
    if not match:
        return default
    return int(match.group(0))


def parse_control(value: Any) -> ControlValue:
    """
    Parse a control reading cell.

    Returns ControlState for 全開 / 全閉, a float for numeric cells,
    the raw text for anything else and None for an empty cell.
    """
    text = _cell_text(value)
    if not text:
        return None

    if text == ControlState.FULLY_OPEN.value:
        return ControlState.FULLY_OPEN
    if text == ControlState.FULLY_CLOSED.value:
        return ControlState.FULLY_CLOSED

    match = NUMBER_PREFIX.match(text)
    if match:
        number = float(match.group(0))
        return number if math.isfinite(number) else None
    return text


CELL_PARSERS = {
    TEXT: _cell_text,
    FLOAT: parse_number,
    INT: parse_integer,
    CONTROL: parse_control,
}


# =============================================================================
# TEXT DECODING
# =============================================================================
def decode_csv_bytes(content: bytes, encodings: List[str] = None) -> str:
    """
    Decode raw file bytes, trying each configured encoding in turn.

    Excel exports of this sheet are usually Shift_JIS / CP932, newer ones UTF-8
    with a BOM.

    Raises:
        UnicodeDecodeError: if no encoding can decode the content
    """
    if isinstance(content, str):
        return content.lstrip('\ufeff')

    if encodings is None:
        encodings = DATA_SOURCE['encodings']

    last_error = None
    for encoding in encodings:
        try:
            text = content.decode(encoding)
            break
        except UnicodeDecodeError as e:
            last_error = e
            continue
    else:
        raise last_error

    return text.lstrip('\ufeff')


# =============================================================================
# ROW READING
# =============================================================================
def read_csv_rows(text: str) -> List[List[str]]:
    """
    Split CSV text into trimmed string rows of exactly COLUMN_COUNT cells.

    Blank lines are skipped. Header rows are NOT removed here. Cells beyond
    COLUMN_COUNT are dropped by pandas; that is logged once per read.
    """
    if not text or not text.strip():
        return []

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always', pd.errors.ParserWarning)
            df = pd.read_csv(
                StringIO(text),
                header=None,
                names=list(range(COLUMN_COUNT)),
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine='python',
            )
    except pd.errors.EmptyDataError:
        return []

    for warning in caught:
        if issubclass(warning.category, pd.errors.ParserWarning):
            debug_log(f"   → Rows with more than {COLUMN_COUNT} cells truncated to {COLUMN_COUNT}")
            logger.warning(f"CSV rows wider than {COLUMN_COUNT} cells were truncated")
        else:
            warnings.warn_explicit(warning.message, warning.category, warning.filename, warning.lineno)

    df = df.fillna('')
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    return df.values.tolist()


# =============================================================================
# RECORD MAPPING
# =============================================================================
def record_from_row(row: List[Any]) -> KojiRecord:
    """
    Map one data row onto a KojiRecord by fixed column position.

    Short rows are padded with empty cells; cells beyond the schema are ignored.
    """
    cells = list(row)
    if len(cells) < COLUMN_COUNT:
        cells += [''] * (COLUMN_COUNT - len(cells))

    values = {}
    for index, field_name, kind, _ in COLUMN_SCHEMA:
        values[field_name] = CELL_PARSERS[kind](cells[index])

    return KojiRecord(**values)


def parse_koji_csv(text: str, header_rows: Optional[int] = None) -> List[KojiRecord]:
    """
    Parse the koji record CSV into KojiRecords in source order.

    Args:
        text: Decoded CSV text
        header_rows: Leading rows to skip (default from DATA_SOURCE)

    Returns:
        List of KojiRecord, one per data row that could be mapped
    """
    global _debug_log
    _debug_log = []  # Clear log for this parse

    if header_rows is None:
        header_rows = DATA_SOURCE['header_rows']

    rows = read_csv_rows(text)
    # Rows of bare commas are spreadsheet padding and are dropped. The earlier
    # web viewer kept them as all-zero records, so its row counts are higher.
    data_rows = [row for row in rows[header_rows:] if any(row)]
    debug_log(f"📄 {len(rows)} rows read, {len(data_rows)} data rows after {header_rows} header rows")

    records = []
    dropped = 0
    for offset, row in enumerate(data_rows):
        row_no = offset + 1
        try:
            records.append(record_from_row(row))
        except Exception as e:
            dropped += 1
            debug_log(f"   → ❌ Data row {row_no} skipped: {e}")
            logger.warning(f"Data row {row_no} could not be parsed: {e}")
            continue

    debug_log(f"✅ {len(records)} records parsed, {dropped} dropped")
    logger.info(f"Parsed {len(records)} koji records ({dropped} rows dropped)")

    return records
