"""Microbench UI: run a catalog set, browse saved runs."""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import streamlit as st
import pandas as pd

from microbench.artifacts import write_run_artifacts
from microbench.catalog import CATALOG, get_candidates, same_values
from microbench.errors import MicrobenchError
from microbench.experiment_config import ORDERS, UNITS, RunSettings
from microbench.logging_utils import configure_root_logging
from microbench.metrics import UNIT_NAMES
from microbench.plotting import boxplot_result
from microbench.reporting import summary_to_dataframe
from microbench.runner import run_benchmark, save_result
from app.ui.run_loader import list_run_ids_from_disk, load_result_from_disk, run_rows_from_disk

st.set_page_config(page_title="Microbench", layout="wide")
configure_root_logging()

if "current_result" not in st.session_state:
    st.session_state.current_result = None

DATA_DIR = ROOT / "data" / "runs"
DATA_DIR.mkdir(parents=True, exist_ok=True)


def _show_result(result, unit: str, key: str) -> None:
    df = summary_to_dataframe(result, unit)
    st.caption(f"Unit: {UNIT_NAMES[df.attrs['unit']]} · run {result.run_id} · {result.settings.times} runs per candidate")
    st.dataframe(df, use_container_width=True, hide_index=True)
    fig = boxplot_result(result, unit, log_scale=st.checkbox("Log scale", value=True, key=f"log_{key}"))
    st.pyplot(fig)


# ---------- Sidebar: run settings ----------
with st.sidebar:
    st.header("Run")
    name = st.selectbox(
        "Candidate set",
        list(CATALOG),
        format_func=lambda n: f"{n}: {CATALOG[n].description}",
        key="sb_set",
    )
    size = st.number_input("Input size", value=1000, min_value=1, step=100, key="sb_size")
    times = st.number_input("Runs per candidate", value=100, min_value=1, step=10, key="sb_times")
    with st.expander("Advanced", expanded=False):
        warmup = st.number_input("Warmup", value=2, min_value=0, step=1, key="sb_warmup")
        order = st.radio("Order", list(ORDERS), index=0, horizontal=True, key="sb_order",
                         help="random interleaves candidates; inorder is round-robin; block runs each candidate in turn.")
        seed_raw = st.text_input("Seed (blank = unseeded)", value="", key="sb_seed")
        check = st.checkbox("Check outputs agree", value=True, key="sb_check")
    unit = st.selectbox("Display unit", list(UNITS), index=0, key="sb_unit")

    if st.button("Run benchmark", type="primary"):
        try:
            settings = RunSettings(
                times=int(times), warmup=int(warmup), order=order, unit=unit,
                seed=int(seed_raw) if seed_raw.strip() else None,
            )
            with st.spinner("Measuring..."):
                result = run_benchmark(
                    get_candidates(name, size=int(size)), settings,
                    check=same_values if check else None, name=name,
                )
            save_result(result, str(DATA_DIR))
            write_run_artifacts(result, str(DATA_DIR / "runs" / result.run_id))
            st.session_state.current_result = result
        except (MicrobenchError, ValueError) as e:
            st.error(str(e))

tab_run, tab_history = st.tabs(["Latest run", "Saved runs"])

with tab_run:
    if st.session_state.current_result is None:
        st.info("Pick a candidate set and press **Run benchmark**.")
    else:
        _show_result(st.session_state.current_result, unit, "latest")

with tab_history:
    rows = run_rows_from_disk(str(DATA_DIR))
    if rows:
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    run_ids = list_run_ids_from_disk(str(DATA_DIR))
    if not run_ids:
        st.info("No saved runs yet.")
    else:
        chosen = st.selectbox("Run", run_ids, key="hist_run")
        res = load_result_from_disk(str(DATA_DIR), chosen)
        if res is not None:
            _show_result(res, unit, "history")
