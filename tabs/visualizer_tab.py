# tabs/visualizer_tab.py
import streamlit as st
import pandas as pd

from analytics.e1rm import build_rep_projection_table
from analytics.lift_records import annotate_points, find_prs, rep_scheme_name
from analytics.lift_series import process_visualizer_data
from utils.lift_schema import VisualizerConfig


def render(records, config: VisualizerConfig):
    st.header("Strength Visualizer")

    data = process_visualizer_data(records, config)
    if not data.points:
        st.info("No lifts match the current filters.")
        return

    chart_df = pd.DataFrame(data.to_chart_rows())
    chart_df["date"] = pd.to_datetime(chart_df["date"])
    st.line_chart(chart_df.set_index("date")[data.lift_types])
    st.caption(
        f"Estimated one-rep max ({config.e1rm_formula}). "
        + ("Weekly bests shown." if config.decimate else "Every session shown.")
    )

    with st.expander("Debug: series points"):
        st.write({"points": len(data.points), "weight_max": data.weight_max, "weight_min": data.weight_min})
        st.dataframe(data.to_frame().head(20))

    lift_type = st.selectbox("Lift", data.lift_types)
    points = [p for p in annotate_points(data.points, records) if p.lift_type == lift_type]

    st.subheader(f"{lift_type} personal records")
    prs = find_prs(records, lift_type)
    for reps, board in prs.items():
        if board.empty:
            continue
        st.write(f"Best {rep_scheme_name(reps)}s")
        st.dataframe(board.head(5), use_container_width=True)

    achievements = [(p.date, a) for p in points for a in p.achievements if a.startswith("#1 ")]
    for date, text in achievements:
        st.write(f"- {date}: {text}")

    st.subheader("Rep projections")
    latest = points[-1]
    st.write(latest.label)
    st.dataframe(build_rep_projection_table(latest.e1rm, config.e1rm_formula), use_container_width=True)
