from __future__ import annotations

import asyncio
import json

import httpx
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from loadprobe.config import ConfigurationError, RunConfig, RunMode, TargetConfig
from loadprobe.loadgen.client import http_operation, json_rpc_operation
from loadprobe.loadgen.runner import RunResult, run_load
from loadprobe.reporting import Report, build_report, compare_reports, exit_code, verdict

st.set_page_config(page_title="Load Probe", layout="wide")

if "history" not in st.session_state:
    st.session_state["history"] = []


def _render_header() -> None:
    st.title("Load Probe")
    st.caption("Rate-controlled load against request/response services, with latency and failure reporting.")


def _build_config() -> tuple[RunConfig, TargetConfig, str, str]:
    with st.sidebar:
        st.header("Run Configuration")
        target_url = st.text_input("Target URL", "http://localhost:8545")
        rpc_method = st.text_input("JSON-RPC method (blank for plain HTTP)", "eth_blockNumber")
        params_raw = st.text_input("JSON-RPC params", "[]")
        mode = RunMode(st.selectbox("Mode", [m.value for m in RunMode]))
        notes = st.text_input("Notes", "")

        st.subheader("Mode parameters")
        rate = duration = burst = count = None
        if mode is RunMode.SUSTAINED:
            rate = st.number_input("Target rate (ops/sec)", min_value=0.1, value=10.0)
            duration = st.slider("Duration (sec)", 1, 600, 10)
        elif mode is RunMode.BURST:
            burst = st.number_input("Burst size", min_value=1, value=100)
        else:
            rate = st.number_input("Target rate (ops/sec)", min_value=0.1, value=1.0)
            count = st.number_input("Operations", min_value=1, value=10)

    config = RunConfig(
        mode=mode,
        target_rate=rate,
        duration_sec=duration,
        burst_size=burst,
        count=count,
        notes=notes,
    )
    return config, TargetConfig(url=target_url), rpc_method.strip(), params_raw


async def _execute(config: RunConfig, target: TargetConfig, rpc_method: str, params: object) -> RunResult:
    async with httpx.AsyncClient() as client:
        if rpc_method:
            operation = json_rpc_operation(client, target, rpc_method, params)
        else:
            operation = http_operation(client, target)
        return await run_load(config, operation)


def _run_button(config: RunConfig, target: TargetConfig, rpc_method: str, params_raw: str) -> None:
    if not st.sidebar.button("Start run"):
        return
    try:
        params = json.loads(params_raw) if params_raw.strip() else None
    except json.JSONDecodeError as exc:
        st.sidebar.error(f"Params are not valid JSON: {exc}")
        return
    with st.spinner("Running..."):
        result = asyncio.run(_execute(config, target, rpc_method, params))
    st.session_state["history"].append((result, build_report(result.metrics)))
    st.sidebar.success(f"Run completed: {result.run_id}")


def _plot_latency_hist(result: RunResult) -> go.Figure:
    durations = pd.DataFrame({"latency_ms": result.metrics.request_durations})
    if durations.empty:
        return go.Figure()
    fig = px.histogram(durations, x="latency_ms", nbins=30, title="Latency distribution")
    fig.update_layout(height=300, margin=dict(l=10, r=10, t=30, b=10))
    return fig


def _plot_outcomes(report: Report) -> go.Figure:
    fig = go.Figure(
        go.Bar(
            x=["successful", "rate limited", "other errors"],
            y=[report.successful_requests, report.rate_limit_errors, report.other_errors],
        )
    )
    fig.update_layout(height=300, margin=dict(l=10, r=10, t=30, b=10), title="Outcomes")
    return fig


def _render_run_view(result: RunResult, report: Report) -> None:
    st.subheader(f"Run {result.run_id}")
    st.caption(result.config.notes)
    if exit_code(result.metrics) == 0:
        st.success(verdict(result.metrics))
    else:
        st.error(verdict(result.metrics))

    cols = st.columns(5)
    cols[0].metric("Requests", report.total_requests)
    cols[1].metric("Success rate", f"{report.success_rate_pct:.1f}%")
    cols[2].metric("Throughput", f"{report.throughput_per_sec:.2f} req/s")
    cols[3].metric("p95", f"{report.p95_ms:.2f} ms")
    cols[4].metric("p99", f"{report.p99_ms:.2f} ms")

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(_plot_latency_hist(result), use_container_width=True)
    with col2:
        st.plotly_chart(_plot_outcomes(report), use_container_width=True)

    if report.first_errors:
        st.markdown("**First errors**")
        st.dataframe(pd.DataFrame({"message": list(report.first_errors)}), use_container_width=True)


def _history_frame(history: list[tuple[RunResult, Report]]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "run_id": result.run_id,
                "mode": result.config.mode.value,
                "requests": report.total_requests,
                "failed": report.failed_requests,
                "rate_limited": report.rate_limit_errors,
                "avg_ms": report.avg_duration_ms,
                "p99_ms": report.p99_ms,
                "throughput": report.throughput_per_sec,
            }
            for result, report in history
        ]
    )


def _render_comparison(history: list[tuple[RunResult, Report]]) -> None:
    if len(history) < 2:
        return
    st.subheader("Run Comparison")
    st.dataframe(_history_frame(history), use_container_width=True)
    by_id = {result.run_id: report for result, report in history}
    run_ids = list(by_id)
    base = st.selectbox("Baseline run", run_ids, index=0)
    candidate = st.selectbox("Candidate run", run_ids, index=len(run_ids) - 1)
    if base == candidate:
        st.info("Select two different runs for comparison")
        return
    regressions = compare_reports(by_id[base], by_id[candidate])
    if not regressions:
        st.success("No regressions detected")
    else:
        for reg in regressions:
            st.error(f"{reg.message} ({reg.delta_pct:.1f}% on {reg.metric})")


def main() -> None:
    _render_header()
    try:
        config, target, rpc_method, params_raw = _build_config()
    except ConfigurationError as exc:
        st.sidebar.error(str(exc))
        return
    _run_button(config, target, rpc_method, params_raw)

    history = st.session_state["history"]
    if not history:
        st.info("No runs yet. Start one from the sidebar.")
        return
    selected = st.selectbox("Select run", [result.run_id for result, _ in reversed(history)])
    for result, report in history:
        if result.run_id == selected:
            _render_run_view(result, report)
    _render_comparison(history)


if __name__ == "__main__":
    main()
