"""
Control Trends
Plots one control setting across the filtered batches:
over time (coloured by brewing year) and as a distribution
"""

import streamlit as st
import pandas as pd
import plotly.express as px
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from columns import COLUMN_SCHEMA, CONTROL, FIELD_LABELS, FLOAT
from config import FULLY_CLOSED, FULLY_OPEN
from data_source import DataLoadError, get_session_records
from filters import filter_records
from models import FilterCriteria
from utils import brewing_year_table, numeric_control_series, records_to_frame

st.set_page_config(page_title="制御設定の推移 | 麹製造参考データ", page_icon="📈", layout="wide")

st.title("📈 制御設定の推移 / Control Trends")
st.markdown("**メイン画面の絞り込み条件**で抽出したデータを表示します")

try:
    records = get_session_records()
except DataLoadError as e:
    st.error(f"エラーが発生しました: {e}")
    st.info("CSVファイルが正しく配置されているか確認してください。")
    st.stop()

criteria = st.session_state.get('filter_criteria', FilterCriteria())
filtered = filter_records(records, criteria)

df = records_to_frame(filtered)
if df.empty:
    st.warning("条件に合うデータがありません")
    st.stop()

# Plottable fields: numeric and control columns, in sheet order
plot_fields = [field for _, field, kind, _ in COLUMN_SCHEMA if kind in (FLOAT, CONTROL)]

with st.sidebar:
    st.header("📈 Chart Settings")
    st.caption(f"📊 {len(filtered)} / {len(records)}件")
    field = st.selectbox(
        "項目",
        options=plot_fields,
        index=plot_fields.index('ventilation_stage4'),
        format_func=lambda f: FIELD_LABELS.get(f, f)
    )
    nbins = st.slider("Histogram bins", min_value=5, max_value=50, value=20)

label = FIELD_LABELS.get(field, field)

df['value'] = numeric_control_series(df, field)
plot_df = df.dropna(subset=['value', 'parsed_date']).sort_values('parsed_date')

if plot_df.empty:
    st.info(f"{label}: 数値データがありません")
else:
    # =========================================================================
    # OVER TIME
    # =========================================================================
    st.subheader(f"🗓️ {label} の推移")
    fig = px.scatter(
        plot_df,
        x='parsed_date',
        y='value',
        color='brewing_year',
        hover_data=['machine', 'variety', 'polishing_ratio', 'sheets', 'weight'],
        labels={'parsed_date': '日付', 'value': label, 'brewing_year': '酒造年度'}
    )
    st.plotly_chart(fig, use_container_width=True)

    # =========================================================================
    # DISTRIBUTION
    # =========================================================================
    st.subheader(f"📊 {label} の分布")
    fig = px.histogram(
        plot_df,
        x='value',
        color='brewing_year',
        nbins=nbins,
        barmode='overlay',
        labels={'value': label, 'brewing_year': '酒造年度'}
    )
    st.plotly_chart(fig, use_container_width=True)

    # =========================================================================
    # PER BREWING YEAR
    # =========================================================================
    st.subheader("📋 酒造年度別")
    by_year = brewing_year_table(plot_df)
    st.dataframe(by_year.round(2), use_container_width=True, hide_index=True)

# 全開 / 全閉 counts for control columns
if any(f == field and kind == CONTROL for _, f, kind, _ in COLUMN_SCHEMA):
    state_counts = df[field].map(
        lambda v: str(v) if isinstance(v, str) and v in (FULLY_OPEN, FULLY_CLOSED) else None
    ).dropna().value_counts()

    if not state_counts.empty:
        st.subheader(f"🔘 {label} 全開 / 全閉")
        state_df = pd.DataFrame({'状態': state_counts.index, '件数': state_counts.values})
        fig = px.bar(state_df, x='状態', y='件数')
        st.plotly_chart(fig, use_container_width=True)
