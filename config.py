"""
Configuration for the Koji Record Viewer

This file contains ONLY static configuration that rarely changes:
- Data source defaults
- Control state literals
- Statistics settings
- Summary statistics field mapping
- Brewing year rule
- Filter defaults

NO COLUMN LAYOUT HERE - the CSV layout lives in columns.py
NO FUNCTIONS HERE - functions go in utils.py
"""

# =============================================================================
# DATA SOURCE
# Override the path with [data] csv_path = "..." in .streamlit/secrets.toml
# =============================================================================
DATA_SOURCE = {
    'default_csv_path': 'data/麹記録集計表.csv',
    'header_rows': 2,       # Two header rows in the spreadsheet export
    'encodings': ['utf-8', 'utf-8-sig', 'shift_jis', 'cp932'],
    'cache_ttl': 3600,      # Seconds before the loaded file is re-read
}

# =============================================================================
# CONTROL STATES - Literal cell values for dampers / dehumidifier valves
# =============================================================================
FULLY_OPEN = '全開'
FULLY_CLOSED = '全閉'

# =============================================================================
# STATISTICS
# =============================================================================
STATS_CONFIG = {
    'round_digits': 2,      # Numeric values are rounded before counting frequency
    'top_n': 3,             # Frequent numeric values to keep
}

# =============================================================================
# SUMMARY STATISTICS FIELDS
# Phase → { display item: KojiRecord field }
#
# before_handling = ③制御2→3 (settings in force up to 手入れ)
#   Heater setpoints are only recorded at stage 3, so they come from
#   heater1_stage3 / heater2_stage3.
# after_handling  = ⑤制御3→4 (settings changed at 手入れ)
# =============================================================================
SUMMARY_STATS_FIELDS = {
    'before_handling': {
        'ventilation': 'ventilation_before_handling',
        'exhaust': 'exhaust_before_handling',
        'dehumidifier_in': 'dehumidifier_in_before_handling',
        'dehumidifier_out': 'dehumidifier_out_before_handling',
        'heater1': 'heater1_stage3',
        'heater2': 'heater2_stage3',
        'airflow': 'airflow_before_handling',
    },
    'after_handling': {
        'ventilation': 'ventilation_stage4',
        'exhaust': 'exhaust_stage4',
        'dehumidifier_in': 'dehumidifier_in_stage4',
        'dehumidifier_out': 'dehumidifier_out_stage4',
        'airflow': 'airflow_stage4',
    },
}

PHASE_LABELS = {
    'before_handling': '手入れ前（③制御2→3）',
    'after_handling': '手入れ後（⑤制御3→4）',
}

STAT_ITEM_LABELS = {
    'ventilation': '換気',
    'exhaust': '排気',
    'dehumidifier_in': '除湿機入り',
    'dehumidifier_out': '除湿機戻り',
    'heater1': '保温1',
    'heater2': '保温2',
    'airflow': '風量',
}

# =============================================================================
# BREWING YEAR (酒造年度)
# A brewing year runs June 1 → May 31 and is labelled by its Reiwa year:
#   2024/6/1 〜 2025/5/31 → R6BY
# =============================================================================
BREWING_YEAR = {
    'start_month': 6,
    'reiwa_offset': 2018,   # Reiwa N starts in calendar year 2018 + N
    'unknown_label': '不明',
}

DATE_FORMATS = ['%Y-%m-%d', '%Y/%m/%d', '%Y.%m.%d', '%Y年%m月%d日']

# =============================================================================
# FILTER DEFAULTS
# =============================================================================
FILTER_DEFAULTS = {
    'variety': '',
    'origin': '',
    'polishing_ratio': 0,   # 0 = no polishing ratio filter
    'polishing_range': 5,   # ± percentage points around polishing_ratio
    'weight_min': 0,
    'weight_max': 0,
}

# =============================================================================
# RECORD SHEET - Heater setpoints printed on the paper record form
# These are fixed on the form and not part of the CSV export.
# =============================================================================
FIXED_HEATER_SETPOINTS = {
    '手入れ前': (41.0, 41.5),
    '手入れ後': (41.0, 41.5),
    '制御4': (41.5, 42.0),
    '朝から除湿': (41.5, 42.0),
}
