import logging
from datetime import date

import pandas as pd
import streamlit as st

# ---- Local modules ----
from analytics.e1rm import E1RM_FORMULAE, resolve_formula
from data_model import records_to_bespoke_csv, records_to_frame
from utils.lift_schema import UNIT_TYPES, VisualizerConfig, default_lift_selection
from utils.sample_data import SAMPLE_GRID
from utils.settings import E1RM_FORMULA_KEY, UNIT_KEY, configure_logging, get_setting
from utils.sheet_parsing import parse_data

logger = logging.getLogger(__name__)


def read_uploaded_grid(uploaded) -> list[list[str]]:
    """CSV upload to a grid of string cells, header row first."""
    df = pd.read_csv(uploaded, header=None, dtype=str, keep_default_na=False)
    return df.values.tolist()


@st.cache_data(show_spinner=False)
def parse_grid(grid: list[list[str]]):
    """Parse once per raw grid; returns (records, warnings)."""
    warnings: list[str] = []
    records = parse_data(grid, warn=warnings.append)
    return records, warnings


def load_records():
    """None until the user supplies data, then the parsed record list (possibly empty)."""
    uploaded = st.sidebar.file_uploader("Upload your lifting sheet (CSV)", type=["csv"])
    use_sample = st.sidebar.checkbox("Load sample data", value=False, key="use_sample")

    if uploaded is not None:
        try:
            grid = read_uploaded_grid(uploaded)
        except (pd.errors.ParserError, UnicodeDecodeError) as exc:
            st.error(f"Could not read that file as CSV: {exc}")
            return None
    elif use_sample:
        grid = SAMPLE_GRID
    else:
        return None

    records, warnings = parse_grid(grid)
    for msg in warnings:
        st.warning(msg)
    logger.info("Loaded %d lift records", len(records))
    return records


def build_config(records) -> VisualizerConfig:
    st.sidebar.header("Chart settings")

    default_formula = resolve_formula(get_setting(E1RM_FORMULA_KEY))
    formula = st.sidebar.selectbox("e1RM formula", E1RM_FORMULAE, index=E1RM_FORMULAE.index(default_formula))

    default_unit = get_setting(UNIT_KEY, UNIT_TYPES[0])
    unit = st.sidebar.radio(
        "Units",
        UNIT_TYPES,
        index=UNIT_TYPES.index(default_unit) if default_unit in UNIT_TYPES else 0,
        horizontal=True,
    )

    all_lift_types = sorted({r.lift_type for r in records})
    selected = st.sidebar.multiselect("Lift types", all_lift_types, default=default_lift_selection(all_lift_types))
    show_all = st.sidebar.checkbox("Show all data (no weekly bests)", value=False)

    limit_range = st.sidebar.checkbox("Limit time range", value=False)
    start = None
    if limit_range:
        start = st.sidebar.date_input("From", value=date(date.today().year, 1, 1))

    return VisualizerConfig.from_mapping(
        {
            "selectedLiftTypes": selected,
            "e1rmFormula": formula,
            "timeRange": start.isoformat() if start else None,
            "showAllData": show_all,
            "unitType": unit,
        }
    )


# =========================================================
# UI
# =========================================================
def main():
    configure_logging()
    st.title("Strength Journeys")

    records = load_records()
    if records is None:
        st.info(
            "Upload a CSV export of your lifting log (bespoke Strength Journeys sheet, "
            "BTWB or TurnKey) or tick **Load sample data** in the sidebar to get started."
        )
        return
    if not records:
        st.info("No lifts found in that sheet. Check it has Date, Lift Type, Reps and Weight columns.")
        return

    config = build_config(records)

    visualizer_tab, analyzer_tab, data_tab = st.tabs(["Visualizer", "Analyzer", "Data"])

    with visualizer_tab:
        from tabs.visualizer_tab import render as render_visualizer
        render_visualizer(records, config)

    with analyzer_tab:
        from tabs.analyzer_tab import render as render_analyzer
        render_analyzer(records, config.preferred_unit)

    with data_tab:
        st.header("Data")
        st.dataframe(records_to_frame(records), use_container_width=True)
        st.download_button(
            "Download as bespoke CSV",
            records_to_bespoke_csv(records),
            file_name="strength_journeys.csv",
            mime="text/csv",
        )


if __name__ == '__main__':
    main()
