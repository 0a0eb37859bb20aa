"""
Utility Functions for the Koji Record Viewer

This file contains display helpers used across the application:
formatting of cell values and the DataFrames shown by app.py and pages/.
Data/configuration goes in config.py and columns.py
"""

import html
import re
from dataclasses import asdict
from typing import Any, Dict, List

import pandas as pd

from config import FIXED_HEATER_SETPOINTS, PHASE_LABELS, STAT_ITEM_LABELS
from grouping import get_brewing_year, get_brewing_year_label, parse_record_date
from models import ControlState, ControlStats, FrequentValue, KojiRecord

EMPTY = '-'


def format_value(value: Any, decimals: int = 2) -> str:
    """
    Format a record value for display.

    Args:
        value: Number, 全開/全閉, text or None
        decimals: Decimal places for numbers

    Returns:
        '-' for missing values (None, '' or 0), otherwise the formatted value
    """
    if value is None or value == '' or value == 0:
        return EMPTY

    if isinstance(value, ControlState):
        return value.value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:.{decimals}f}"

    return str(value)


def format_time(time_str: str) -> str:
    """Drop the seconds from a clock time ("12:30:00" → "12:30")"""
    if not time_str or time_str == EMPTY:
        return EMPTY

    return re.sub(r'^(\d{1,2}:\d{2}):\d{2}$', r'\1', str(time_str).strip())


def format_change_flag(flag: int) -> str:
    """1 on the form means the settings were left unchanged"""
    return '変更無' if flag == 1 else '変更有'


def format_per_sheet_weight(record: KojiRecord) -> str:
    weight = record.per_sheet_weight
    if weight is None:
        return EMPTY
    return f"{weight:.1f}kg"


def format_frequent_values(frequent: List[FrequentValue], unit: str = '回') -> str:
    """Format frequent values like '41.00(3回) 40.50(2回)'"""
    if not frequent:
        return EMPTY

    return ' '.join(f"{format_value(fv.value)}({fv.count}{unit})" for fv in frequent)


def format_range(stats: ControlStats) -> str:
    return f"{format_value(stats.min)} 〜 {format_value(stats.max)}"


# =============================================================================
# TABLE BUILDERS
# =============================================================================

def stats_to_dataframe(phase_stats: Dict[str, ControlStats]) -> pd.DataFrame:
    """
    Build the summary table for one phase.

    Args:
        phase_stats: Item → ControlStats (one phase of calculate_summary_stats)

    Returns:
        DataFrame with one row per control item
    """
    rows = []
    for item, stats in phase_stats.items():
        rows.append({
            '項目': STAT_ITEM_LABELS.get(item, item),
            '件数': stats.count,
            '頻出値(回数)': format_frequent_values(stats.frequent_values),
            '全開/全閉(回数)': format_frequent_values(stats.frequent_state_values),
            '範囲（最小〜最大）': format_range(stats),
            '平均値': format_value(stats.average),
            '中央値': format_value(stats.median),
        })

    return pd.DataFrame(rows)


def get_phase_label(phase: str) -> str:
    return PHASE_LABELS.get(phase, phase)


def records_to_dataframe(records: List[KojiRecord]) -> pd.DataFrame:
    """Build the record list table shown under each brewing year"""
    rows = []
    for r in records:
        rows.append({
            '日付': r.date,
            '製麹機': r.machine,
            '品種': r.variety,
            '精米歩合': f"{r.polishing_ratio:g}%" if r.polishing_ratio else EMPTY,
            '枚数': f"{r.sheets}枚" if r.sheets else EMPTY,
            '重量': f"{r.weight:g}kg" if r.weight else EMPTY,
            '盛り後品温': format_value(r.temp_after_steaming),
            '手入れ後-換気': format_value(r.ventilation_stage4),
            '手入れ後-排気': format_value(r.exhaust_stage4),
            '手入れ後-除湿機入り': format_value(r.dehumidifier_in_stage4),
            '手入れ後-除湿機戻り': format_value(r.dehumidifier_out_stage4),
            '手入れ後-風量': format_value(r.airflow_stage4),
        })

    return pd.DataFrame(rows)


def build_record_sheet(record: KojiRecord) -> pd.DataFrame:
    """
    Lay out one batch the way the paper record form does.

    Heater setpoints from 手入れ前 onward are fixed on the form and are
    filled in from FIXED_HEATER_SETPOINTS.
    """
    def row(time, operation, temp=None, ventilation=None, exhaust=None,
            dehumid_in=None, dehumid_out=None, heater1=None, heater2=None, airflow=None):
        return {
            '時刻': format_time(time) if time else EMPTY,
            '操作': operation,
            '品温': format_value(temp),
            '換気': format_value(ventilation),
            '排気': format_value(exhaust),
            '除湿機入り口': format_value(dehumid_in),
            '除湿機戻り': format_value(dehumid_out),
            '保温1': format_value(heater1, 1),
            '保温2': format_value(heater2, 1),
            '風量': format_value(airflow),
        }

    r = record
    rows = [
        row(None, '盛り後', temp=r.temp_after_steaming),
        row(r.time_2_3h_check, '2~3h後点検', temp=r.temp_2_3h_check,
            heater1=r.heater1_2_3h_check, heater2=r.heater2_2_3h_check),
        row(None, '制御2→3', ventilation=r.ventilation_stage3, exhaust=r.exhaust_stage3,
            dehumid_in=r.dehumidifier_in_stage3, dehumid_out=r.dehumidifier_out_stage3,
            heater1=r.heater1_stage3, heater2=r.heater2_stage3, airflow=r.airflow_stage3),
        row(r.time_before_handling, '手入れ前', temp=r.temp_before_handling,
            ventilation=r.ventilation_before_handling, exhaust=r.exhaust_before_handling,
            dehumid_in=r.dehumidifier_in_before_handling, dehumid_out=r.dehumidifier_out_before_handling,
            heater1=FIXED_HEATER_SETPOINTS['手入れ前'][0], heater2=FIXED_HEATER_SETPOINTS['手入れ前'][1],
            airflow=r.airflow_before_handling),
        row(None, '手入れ後', ventilation=r.ventilation_stage4, exhaust=r.exhaust_stage4,
            dehumid_in=r.dehumidifier_in_stage4, dehumid_out=r.dehumidifier_out_stage4,
            heater1=FIXED_HEATER_SETPOINTS['手入れ後'][0], heater2=FIXED_HEATER_SETPOINTS['手入れ後'][1],
            airflow=r.airflow_stage4),
        row(None, '制御4', ventilation=r.ventilation_stage5, exhaust=r.exhaust_stage5,
            heater1=FIXED_HEATER_SETPOINTS['制御4'][0], heater2=FIXED_HEATER_SETPOINTS['制御4'][1]),
        row(None, '朝から除湿', ventilation=r.ventilation_morning_dehumid, exhaust=r.exhaust_morning_dehumid,
            dehumid_in=r.dehumidifier_in_morning, dehumid_out=r.dehumidifier_out_morning,
            heater1=FIXED_HEATER_SETPOINTS['朝から除湿'][0], heater2=FIXED_HEATER_SETPOINTS['朝から除湿'][1],
            airflow=r.airflow_morning_dehumid),
    ]

    return pd.DataFrame(rows)


def records_to_frame(records: List[KojiRecord]) -> pd.DataFrame:
    """
    Full record DataFrame for charting.

    Control columns keep their mixed values; adds parsed_date and
    brewing_year (label) columns plus the numeric brewing_year_no for ordering.
    """
    if not records:
        return pd.DataFrame()

    df = pd.DataFrame([asdict(r) for r in records])
    df['parsed_date'] = pd.to_datetime([parse_record_date(r.date) for r in records])
    years = [get_brewing_year(r.date) for r in records]
    df['brewing_year'] = [get_brewing_year_label(y) for y in years]
    df['brewing_year_no'] = pd.array(years, dtype='Int64')
    return df


def numeric_control_series(df: pd.DataFrame, field_name: str) -> pd.Series:
    """
    Numeric view of a record column for charts.

    全開/全閉, text and the 0 "not recorded" sentinel become NaN.
    """
    values = pd.to_numeric(
        df[field_name].map(lambda v: v if isinstance(v, (int, float)) and not isinstance(v, bool) else None),
        errors='coerce'
    ).astype(float)
    return values.where(values != 0)



def brewing_year_table(df: pd.DataFrame, value_col: str = 'value') -> pd.DataFrame:
    """
    Per brewing year count / min / max / mean / median of a chart column.

    Newest year first, ordered by year number (R10BY before R9BY); records
    without a brewing year come last.
    """
    by_year = df.groupby('brewing_year').agg(
        year_no=('brewing_year_no', 'first'),
        count=(value_col, 'count'),
        minimum=(value_col, 'min'),
        maximum=(value_col, 'max'),
        mean=(value_col, 'mean'),
        median=(value_col, 'median'),
    ).reset_index()

    by_year = by_year.sort_values('year_no', ascending=False, na_position='last')
    by_year = by_year.drop(columns='year_no')
    by_year.columns = ['酒造年度', '件数', '最小', '最大', '平均値', '中央値']
    return by_year.reset_index(drop=True)


def format_error_box(message: Any) -> str:
    """HTML for the load-error box; the message is escaped (it may contain a file path)"""
    return f"""
        <div class="error-box">
            <h3>エラーが発生しました</h3>
            <p>{html.escape(str(message))}</p>
            <p>CSVファイルが正しく配置されているか確認してください。</p>
        </div>
        """
