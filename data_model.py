import pandas as pd
import numpy as np

from utils.lift_schema import LB_PER_KG, RECORD_COLS, UNIT_KG, LiftRecord

BESPOKE_EXPORT_COLS = ["Date", "Lift Type", "Reps", "Weight", "Notes", "URL"]


def records_to_frame(records) -> pd.DataFrame:
    """
    LiftRecord list to a DataFrame with RECORD_COLS, in input order.
    """
    if not records:
        return pd.DataFrame(columns=RECORD_COLS)

    df = pd.DataFrame([r.__dict__ for r in records], columns=RECORD_COLS)
    df["reps"] = pd.to_numeric(df["reps"], errors="coerce").fillna(0).astype(int)
    df["weight"] = pd.to_numeric(df["weight"], errors="coerce").fillna(0.0).astype(float)
    df["is_goal"] = df["is_goal"].astype(bool)
    return df


def aggregate_sessions_daily(df: pd.DataFrame) -> pd.DataFrame:
    """
    Roll a records frame up to one row per session date.
    Goal rows are not sessions and are dropped first.
    """
    cols = ["date", "sets", "reps", "tonnage_lb", "tonnage_kg"]
    if df is None or df.empty:
        return pd.DataFrame(columns=cols)

    df = df[~df["is_goal"].astype(bool)].copy()
    if df.empty:
        return pd.DataFrame(columns=cols)

    # 1) Volume per set, native unit
    df["volume"] = df["weight"] * df["reps"]
    is_kg = df["unit_type"] == UNIT_KG

    # 2) Same volume in both units
    df["tonnage_lb"] = np.where(is_kg, df["volume"] * LB_PER_KG, df["volume"])
    df["tonnage_kg"] = np.where(is_kg, df["volume"], df["volume"] / LB_PER_KG)

    # 3) Aggregate per date
    grouped = df.groupby("date").agg(
        sets=("reps", "size"),
        reps=("reps", "sum"),
        tonnage_lb=("tonnage_lb", "sum"),
        tonnage_kg=("tonnage_kg", "sum"),
    ).reset_index()

    return grouped.sort_values("date").reset_index(drop=True)


def records_to_bespoke_csv(records) -> str:
    """
    Export records as a bespoke Strength Journeys sheet (Date, Lift Type, Reps, Weight, Notes, URL).
    Weights carry their unit suffix, e.g. "100kg", so the export parses back unchanged.
    Goal rows are left out.
    """
    rows = [
        {
            "Date": r.date,
            "Lift Type": r.lift_type,
            "Reps": r.reps,
            "Weight": f"{r.weight:g}{r.unit_type}",
            "Notes": r.notes,
            "URL": r.url,
        }
        for r in (records or [])
        if isinstance(r, LiftRecord) and not r.is_goal
    ]
    return pd.DataFrame(rows, columns=BESPOKE_EXPORT_COLS).to_csv(index=False)
