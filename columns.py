"""
CSV Column Layout for the Koji Record Viewer

This file contains ONLY the column layout of 麹記録集計表.csv.
One row per batch, 46 columns, two header rows.

To add a column:
1. Append a tuple with its position, the KojiRecord field name, its kind and label
2. Add the field to KojiRecord in models.py

NO FUNCTIONS HERE - parsing goes in extractors.py
"""

# Column kinds
TEXT = 'text'          # Kept as trimmed string
FLOAT = 'float'        # Best-effort number, 0 when missing
INT = 'int'            # Best-effort integer, 0 when missing
CONTROL = 'control'    # 全開 / 全閉 / number / raw text, None when missing

# =============================================================================
# COLUMN SCHEMA
# (column index, field name, kind, display label)
# =============================================================================
COLUMN_SCHEMA = [
    # ----- 基本情報 -----
    (0, 'machine', TEXT, '製麹機'),
    (1, 'date', TEXT, '月日'),
    (2, 'origin', TEXT, '産地'),
    (3, 'rice_age', TEXT, '新古'),
    (4, 'variety', TEXT, '品種'),
    (5, 'polishing_ratio', FLOAT, '精米歩合'),
    (6, 'sheets', INT, '枚数'),
    (7, 'weight', FLOAT, '盛り込み数量(kg)'),

    # ----- 温度データ -----
    (8, 'temp_after_steaming', FLOAT, '①盛り後品温'),
    (9, 'time_2_3h_check', TEXT, '②2-3h後点検時刻'),
    (10, 'time_2_3h_check_decimal', FLOAT, '②2-3h後点検時刻(時間)'),
    (11, 'temp_2_3h_check', FLOAT, '②2-3h後点検品温'),
    (12, 'heater1_2_3h_check', FLOAT, '②保温1'),
    (13, 'heater2_2_3h_check', FLOAT, '②保温2'),

    # ----- ③制御2→3 -----
    (14, 'ventilation_stage3', FLOAT, '③換気'),
    (15, 'exhaust_stage3', FLOAT, '③排気'),
    (16, 'dehumidifier_in_stage3', CONTROL, '③除湿機入り'),
    (17, 'dehumidifier_out_stage3', CONTROL, '③除湿機戻り'),
    (18, 'heater1_stage3', FLOAT, '③保温1'),
    (19, 'heater2_stage3', FLOAT, '③保温2'),
    (20, 'airflow_stage3', FLOAT, '③風量'),

    # ----- ④手入れ前 -----
    (21, 'time_before_handling', TEXT, '④手入れ前時刻'),
    (22, 'time_before_handling_decimal', FLOAT, '④手入れ前時刻(時間)'),
    (23, 'temp_before_handling', FLOAT, '④手入れ前品温'),
    (24, 'ventilation_before_handling', FLOAT, '④換気'),
    (25, 'exhaust_before_handling', FLOAT, '④排気'),
    (26, 'dehumidifier_in_before_handling', CONTROL, '④除湿機入り'),
    (27, 'dehumidifier_out_before_handling', CONTROL, '④除湿機戻り'),
    (28, 'airflow_before_handling', FLOAT, '④風量'),

    # ----- ⑤制御3→4 (手入れ後) -----
    (29, 'change_flag_stage4', INT, '⑤変更有無'),
    (30, 'ventilation_stage4', FLOAT, '⑤換気'),
    (31, 'exhaust_stage4', FLOAT, '⑤排気'),
    (32, 'dehumidifier_in_stage4', CONTROL, '⑤除湿機入り'),
    (33, 'dehumidifier_out_stage4', CONTROL, '⑤除湿機戻り'),
    (34, 'airflow_stage4', FLOAT, '⑤風量'),

    # ----- ⑥制御4 -----
    (35, 'change_flag_stage5', INT, '⑥変更有無'),
    (36, 'ventilation_stage5', FLOAT, '⑥換気'),
    (37, 'exhaust_stage5', FLOAT, '⑥排気'),

    # ----- ⑦朝から除湿 -----
    (38, 'ventilation_morning_dehumid', FLOAT, '⑦換気'),
    (39, 'exhaust_morning_dehumid', FLOAT, '⑦排気'),
    (40, 'dehumidifier_in_morning', CONTROL, '⑦除湿機入り'),
    (41, 'dehumidifier_out_morning', CONTROL, '⑦除湿機戻り'),
    (42, 'airflow_morning_dehumid', FLOAT, '⑦風量'),

    # ----- 計算値 -----
    (43, 'temp_rise_rate_1', FLOAT, '盛り後→2-3h後の品温上昇率(℃/h)'),
    (44, 'temp_rise_rate_2', FLOAT, '2-3h後→手入れ前の品温上昇率(℃/h)'),
    (45, 'time_to_41c', FLOAT, '41.0℃到達時間(時間)'),
]

COLUMN_COUNT = len(COLUMN_SCHEMA)

# Field name → display label
FIELD_LABELS = {field: label for _, field, _, label in COLUMN_SCHEMA}
