# tabs/analyzer_tab.py
import streamlit as st

from analytics.consistency import (
    calculate_session_momentum, calculate_streak, get_session_dates, process_consistency,
)
from analytics.lift_records import (
    calculate_lift_types, calculate_total_stats, process_top_lifts_by_type_and_reps,
)
from analytics.tonnage import calculate_lifetime_tonnage
from data_model import aggregate_sessions_daily, records_to_frame


def render(records, preferred_unit: str, today=None):
    st.header("Analyzer")

    session_dates = get_session_dates(records)
    if not session_dates:
        st.info("No sessions logged yet.")
        return

    streak = calculate_streak(session_dates, today=today)
    momentum = calculate_session_momentum(session_dates, today=today)
    tonnage = calculate_lifetime_tonnage(records, preferred_unit, today=today)
    totals = calculate_total_stats(records)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Current streak (weeks)", streak.current_streak, help=f"Best: {streak.best_streak}")
    c2.metric("Sessions this week", streak.sessions_this_week)
    c3.metric(
        f"Sessions, last {momentum.window_days} days",
        momentum.recent_sessions,
        delta=f"{momentum.percentage_change}%",
    )
    c4.metric(
        f"Lifetime tonnage ({tonnage.primary_unit})",
        f"{tonnage.primary_total:,.0f}",
        help=f"{tonnage.average_per_session:,.0f} {tonnage.primary_unit} per session",
    )
    st.caption(f"{totals['total_sets']} sets, {totals['total_reps']} reps over {tonnage.session_count} sessions")

    st.subheader("Consistency")
    grades = process_consistency(records, today=today)
    cols = st.columns(len(grades))
    for col, g in zip(cols, grades):
        col.metric(g["label"], g["grade"], help=g["tooltip"])
        col.progress(g["percentage"] / 100)

    st.subheader("Lift types")
    st.dataframe(calculate_lift_types(records), use_container_width=True)

    st.subheader("Top lifts")
    top = process_top_lifts_by_type_and_reps(records, today=today)
    lift_type = st.selectbox("Lift type", list(top.all_time), key="analyzer_lift_type")
    reps = st.number_input("Reps", 1, 10, 1, 1)
    board = top.all_time.get(lift_type, {}).get(int(reps), [])
    st.dataframe(records_to_frame(board), use_container_width=True)

    with st.expander("Daily sessions"):
        st.dataframe(aggregate_sessions_daily(records_to_frame(records)), use_container_width=True)
