"""
Data source module for the koji record CSV
Handles locating, reading and parsing the record file for the Koji Record Viewer
"""

import streamlit as st
import logging
from typing import Any, Dict, List, Optional

from config import DATA_SOURCE
from extractors import decode_csv_bytes, get_debug_log, parse_koji_csv
from grouping import parse_record_date
from models import FilterOptions, KojiRecord

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """The record file could not be found, read or decoded"""


# =============================================================================
# LOCATION
# =============================================================================

def get_csv_path() -> str:
    """Resolve the CSV path from Streamlit secrets, falling back to config"""
    try:
        path = st.secrets["data"]["csv_path"]
        if path:
            return str(path)
    except Exception as e:
        logger.debug(f"No [data] csv_path in secrets, using default: {e}")
    return DATA_SOURCE['default_csv_path']


# =============================================================================
# LOAD FUNCTIONS
# =============================================================================

def read_csv_file(path: str) -> str:
    """
    Read and decode the record file.

    Args:
        path: Path to the CSV file

    Returns:
        Decoded CSV text

    Raises:
        DataLoadError: if the file is missing, unreadable or undecodable
    """
    try:
        with open(path, 'rb') as f:
            content = f.read()
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise DataLoadError(f"CSVファイルの読み込みに失敗しました: {path} ({e})") from e

    try:
        return decode_csv_bytes(content)
    except UnicodeDecodeError as e:
        logger.error(f"Failed to decode {path}: {e}")
        raise DataLoadError(f"CSVファイルの文字コードを判別できません: {path}") from e


def _parse_text(text: str, source: str) -> List[KojiRecord]:
    try:
        records = parse_koji_csv(text)
    except ValueError as e:
        # pandas ParserError (unterminated quotes etc.) is a ValueError
        logger.error(f"Failed to parse {source}: {e}")
        raise DataLoadError(f"CSVファイルの解析に失敗しました: {source} ({e})") from e

    logger.info(f"Loaded {len(records)} koji records from {source}")
    return records


def load_koji_records(path: Optional[str] = None) -> List[KojiRecord]:
    """
    Load every batch record from the configured CSV file.

    Args:
        path: CSV path (default from secrets / config)

    Returns:
        List of KojiRecord in file order

    Raises:
        DataLoadError: if the file cannot be loaded
    """
    if path is None:
        path = get_csv_path()

    logger.info(f"Loading koji records from {path}")
    text = read_csv_file(path)
    return _parse_text(text, path)


def load_uploaded_records(uploaded_file) -> List[KojiRecord]:
    """
    Load records from a Streamlit UploadedFile (same layout as the main file).

    Raises:
        DataLoadError: if the upload cannot be decoded or parsed
    """
    name = getattr(uploaded_file, 'name', 'upload')
    content = uploaded_file.read()
    uploaded_file.seek(0)

    try:
        text = decode_csv_bytes(content)
    except UnicodeDecodeError as e:
        logger.error(f"Failed to decode upload {name}: {e}")
        raise DataLoadError(f"CSVファイルの文字コードを判別できません: {name}") from e

    return _parse_text(text, name)


@st.cache_data(ttl=DATA_SOURCE['cache_ttl'])
def load_records_cached(path: str) -> tuple:
    """Load once per session; returns (records, parse debug log)"""
    records = load_koji_records(path)
    return records, get_debug_log()


def get_session_records() -> List[KojiRecord]:
    """
    Records for the current session: an uploaded file if one was loaded
    on the main page, otherwise the configured CSV file.

    Raises:
        DataLoadError: if the configured file cannot be loaded
    """
    uploaded = st.session_state.get('uploaded_records')
    if uploaded is not None:
        return uploaded

    records, log = load_records_cached(get_csv_path())
    if log:
        st.session_state['parse_log'] = log
    return records


# =============================================================================
# DERIVED INFO
# =============================================================================

def get_filter_options(records: List[KojiRecord]) -> FilterOptions:
    """
    Build sidebar choices from the loaded records.

    Returns:
        FilterOptions with sorted varieties and origins (blanks removed)
        and positive sheet counts, largest first
    """
    varieties = sorted({r.variety for r in records if r.variety})
    origins = sorted({r.origin for r in records if r.origin})
    sheets = sorted({r.sheets for r in records if r.sheets > 0}, reverse=True)

    return FilterOptions(varieties=varieties, origins=origins, sheets=sheets)


def get_data_summary(records: List[KojiRecord]) -> Dict[str, Any]:
    """Get record count, date span and machine list for the sidebar"""
    dates = [d for d in (parse_record_date(r.date) for r in records) if d is not None]

    return {
        'record_count': len(records),
        'min_date': min(dates) if dates else None,
        'max_date': max(dates) if dates else None,
        'undated_count': len(records) - len(dates),
        'machines': sorted({r.machine for r in records if r.machine}),
    }
