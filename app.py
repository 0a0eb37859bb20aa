"""
Koji Production Reference Viewer (麹製造参考データ検索)
Browse past koji batches by rice metadata and see which control settings were used
"""

import streamlit as st

# Import our modules
from config import SUMMARY_STATS_FIELDS
from data_source import (
    DataLoadError, get_csv_path, get_data_summary, get_filter_options,
    get_session_records, load_uploaded_records
)
from filters import filter_dehumidifier_unused, filter_records
from grouping import group_by_brewing_year
from models import FilterCriteria, FilterOptions, KojiRecord
from stats import calculate_summary_stats
from utils import (
    build_record_sheet, format_change_flag, format_error_box, format_per_sheet_weight, format_value,
    get_phase_label, records_to_dataframe, stats_to_dataframe
)

st.set_page_config(
    page_title="麹製造参考データ検索",
    page_icon="🍶",
    layout="wide"
)

# Custom CSS
st.markdown("""
<style>
    .error-box {
        padding: 20px;
        background: #ffebee;
        border: 1px solid #ffcdd2;
        border-radius: 8px;
        color: #d32f2f;
        text-align: center;
    }
    .polishing-range {
        color: #1565c0;
        font-size: 0.9em;
    }
</style>
""", unsafe_allow_html=True)


def main():
    st.title("🍶 麹製造参考データ検索")
    st.markdown("*メタデータを選択して、過去のデータから参考となる制御設定を確認できます*")

    # Initialize session state
    if 'filter_criteria' not in st.session_state:
        st.session_state.filter_criteria = FilterCriteria()
    if 'filter_form_key' not in st.session_state:
        st.session_state.filter_form_key = 0

    with st.sidebar:
        st.header("🍶 データ")
        uploaded_file = st.file_uploader("麹記録CSV (任意)", type=['csv'],
                                         help="Leave empty to use the configured file")

    # Load data (fatal on failure)
    try:
        if uploaded_file is not None:
            st.session_state.uploaded_records = load_uploaded_records(uploaded_file)
        else:
            st.session_state.pop('uploaded_records', None)
        records = get_session_records()
    except DataLoadError as e:
        st.markdown(format_error_box(e), unsafe_allow_html=True)
        st.stop()

    options = get_filter_options(records)

    with st.sidebar:
        display_data_summary(records, uploaded_file)
        st.divider()
        criteria = display_filter_form(options)

    filtered = filter_records(records, criteria)

    display_summary_stats(filtered)
    st.divider()
    display_records(filtered)


def display_data_summary(records, uploaded_file):
    """Record count, date span and reload control"""
    summary = get_data_summary(records)
    source = uploaded_file.name if uploaded_file is not None else get_csv_path()

    st.caption(f"📄 {source}")
    st.caption(f"📊 {summary['record_count']}件")
    if summary['min_date'] and summary['max_date']:
        st.caption(f"📅 {summary['min_date']} ~ {summary['max_date']}")
    if summary['undated_count']:
        st.caption(f"⚠️ 日付不明: {summary['undated_count']}件")

    if st.button("🔄 再読み込み", use_container_width=True):
        st.cache_data.clear()
        st.session_state.pop('parse_log', None)
        st.rerun()

    parse_log = st.session_state.get('parse_log')
    if parse_log:
        with st.expander("🔧 Debug Log"):
            for line in parse_log:
                st.text(line)


def display_filter_form(options: FilterOptions) -> FilterCriteria:
    """
    Sidebar filters. Values are applied on submit so the tables are only
    recomputed once per change set.
    """
    st.subheader("🔍 絞り込み条件")
    current = st.session_state.filter_criteria

    variety_choices = [''] + options.varieties
    origin_choices = [''] + options.origins

    with st.form(key=f"filter_form_{st.session_state.filter_form_key}"):
        variety = st.selectbox(
            "品種",
            options=variety_choices,
            index=variety_choices.index(current.variety) if current.variety in variety_choices else 0,
            format_func=lambda v: v or "すべての品種"
        )
        origin = st.selectbox(
            "産地",
            options=origin_choices,
            index=origin_choices.index(current.origin) if current.origin in origin_choices else 0,
            format_func=lambda v: v or "すべての産地"
        )

        col1, col2 = st.columns(2)
        with col1:
            polishing_ratio = st.number_input("精米歩合 (%)", min_value=0, max_value=100,
                                              value=int(current.polishing_ratio), step=1,
                                              help="0 = 指定なし")
        with col2:
            polishing_range = st.number_input("± 範囲", min_value=0, max_value=50,
                                              value=int(current.polishing_range), step=1)

        col1, col2 = st.columns(2)
        with col1:
            weight_min = st.number_input("重量 最小 (kg)", min_value=0,
                                         value=int(current.weight_min), step=10)
        with col2:
            weight_max = st.number_input("重量 最大 (kg)", min_value=0,
                                         value=int(current.weight_max), step=10)

        sheets = st.multiselect(
            "枚数",
            options=options.sheets,
            default=[s for s in options.sheets if s in current.sheets],
            format_func=lambda s: f"{s}枚",
            help="未選択 = すべての枚数"
        )

        submitted = st.form_submit_button("適用", type="primary", use_container_width=True)

    if submitted:
        st.session_state.filter_criteria = FilterCriteria(
            variety=variety,
            origin=origin,
            polishing_ratio=polishing_ratio,
            polishing_range=polishing_range,
            weight_min=weight_min,
            weight_max=weight_max,
            sheets=frozenset(sheets),
        )

    if st.button("リセット", use_container_width=True):
        st.session_state.filter_criteria = FilterCriteria()
        st.session_state.filter_form_key += 1
        st.rerun()

    criteria = st.session_state.filter_criteria
    if criteria.polishing_ratio > 0:
        low = criteria.polishing_ratio - criteria.polishing_range
        high = criteria.polishing_ratio + criteria.polishing_range
        st.markdown(f'<span class="polishing-range">精米歩合 {low:g}% ～ {high:g}%</span>',
                    unsafe_allow_html=True)

    return criteria


def display_summary_stats(filtered):
    """Control statistics for the filtered batches, one table per phase"""
    st.header("📊 要約データ")
    st.caption(f"対象: {len(filtered)}件")

    stats = calculate_summary_stats(filtered)

    # Only after-handling shown by default
    default_visible = {'before_handling': False, 'after_handling': True}
    cols = st.columns(len(SUMMARY_STATS_FIELDS))
    visible = {}
    for col, phase in zip(cols, SUMMARY_STATS_FIELDS):
        with col:
            visible[phase] = st.checkbox(get_phase_label(phase),
                                         value=default_visible.get(phase, True),
                                         key=f"show_{phase}")

    for phase, phase_stats in stats.items():
        if not visible.get(phase):
            continue
        st.subheader(get_phase_label(phase))
        st.dataframe(stats_to_dataframe(phase_stats), use_container_width=True, hide_index=True)


def display_records(filtered):
    """Individual batches grouped by brewing year"""
    st.header("📋 個別データ一覧")

    col1, col2, col3 = st.columns([2, 2, 1])
    with col1:
        unused_only = st.checkbox("除湿機不使用時を表示", help="手入れ後の除湿機入り・戻りが両方全閉")
    with col2:
        sort_by_date = st.checkbox("日付順に並べる")

    shown = filter_dehumidifier_unused(filtered) if unused_only else filtered

    with col3:
        st.metric("件数", f"{len(shown)}件")

    if not shown:
        st.info("条件に合うデータがありません")
        return

    for group in group_by_brewing_year(shown, sort_by_date=sort_by_date):
        title = f"{group.label}"
        if group.period:
            title += f" ({group.period})"
        title += f" : {len(group.records)}件"

        with st.expander(title, expanded=True):
            st.dataframe(records_to_dataframe(group.records), use_container_width=True, hide_index=True)

            choices = [None] + list(range(len(group.records)))
            selected = st.selectbox(
                "詳細を表示",
                options=choices,
                format_func=lambda i: "選択してください" if i is None else
                    f"{group.records[i].date} {group.records[i].machine} {group.records[i].variety}",
                key=f"detail_{group.label}"
            )
            if selected is not None:
                display_record_detail(group.records[selected])


def display_record_detail(record: KojiRecord):
    """One batch laid out like the paper record form"""
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.markdown(f"**製麹機** {record.machine or '-'}")
        st.markdown(f"**月日** {record.date or '-'}")
    with col2:
        st.markdown(f"**産地** {record.origin or '-'} {record.rice_age}")
        st.markdown(f"**品種** {record.variety or '-'}")
    with col3:
        st.markdown(f"**精米歩合** {format_value(record.polishing_ratio, 0)}%")
        st.markdown(f"**枚数** {record.sheets}枚")
    with col4:
        st.markdown(f"**盛り込み数量** {record.weight:g}kg")
        st.markdown(f"**1枚当たり** {format_per_sheet_weight(record)}")

    st.dataframe(build_record_sheet(record), use_container_width=True, hide_index=True)

    st.caption(
        f"手入れ後: {format_change_flag(record.change_flag_stage4)} ・ "
        f"制御4: {format_change_flag(record.change_flag_stage5)} ・ "
        f"品温上昇率 {format_value(record.temp_rise_rate_1)} / {format_value(record.temp_rise_rate_2)} ℃/h ・ "
        f"41.0℃到達 {format_value(record.time_to_41c)} 時間"
    )


if __name__ == "__main__":
    main()
