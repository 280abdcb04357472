from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

from golf_flight import (
    SimulationConfig,
    SimulationResult,
    drag_coefficient,
    simulate,
)
from shot_inputs import (
    SIMULATION_MODES,
    ShotInputError,
    ShotInputs,
    max_display_meters,
    meters_to_yards,
    parse_shot_inputs,
    wind_display_value,
    wind_from_display,
)


st.set_page_config(page_title="Golf Drive Simulator", layout="wide")
st.title("Golf Drive Simulator")
st.caption(
    "Set the swing numbers, see carry, total and the flight path. "
    "Keep a shot to compare the next one against it."
)


PRESETS = {
    "baseline": {
        "label": "Baseline driver (45 m/s, 2500 rpm)",
        "head_speed": 45.0,
        "smash_factor": 1.45,
        "launch_angle_deg": 14.0,
        "spin_rate_rpm": 2500,
        "wind_display": 0.0,
    },
    "amateur": {
        "label": "Average amateur (40 m/s, 2900 rpm)",
        "head_speed": 40.0,
        "smash_factor": 1.42,
        "launch_angle_deg": 13.0,
        "spin_rate_rpm": 2900,
        "wind_display": 0.0,
    },
    "tour": {
        "label": "Tour player (51 m/s, 2600 rpm)",
        "head_speed": 51.0,
        "smash_factor": 1.49,
        "launch_angle_deg": 11.5,
        "spin_rate_rpm": 2600,
        "wind_display": 0.0,
    },
    "into_wind": {
        "label": "Baseline into a 6 m/s wind",
        "head_speed": 45.0,
        "smash_factor": 1.45,
        "launch_angle_deg": 14.0,
        "spin_rate_rpm": 2500,
        "wind_display": 6.0,
    },
}

SHOT_KEYS = ["head_speed", "smash_factor", "launch_angle_deg", "spin_rate_rpm", "wind_display"]


def ensure_session_defaults() -> None:
    p = PRESETS["baseline"]
    st.session_state.setdefault("mode", "standard")
    st.session_state.setdefault("preset_key", "baseline")
    st.session_state.setdefault("applied_preset_key", "baseline")
    for key in SHOT_KEYS:
        st.session_state.setdefault(key, p[key])
    st.session_state.setdefault("previous_result", None)
    st.session_state.setdefault("previous_label", "")


def clamp_session_value(key: str, lower: float, upper: float) -> None:
    value = st.session_state[key]
    st.session_state[key] = type(value)(max(lower, min(upper, value)))


def shot_label(inputs: ShotInputs) -> str:
    return (
        f"HS {inputs.head_speed:.1f} m/s, SF {inputs.smash_factor:.2f}, "
        f"{inputs.launch_angle_deg:.1f} deg, {inputs.spin_rate_rpm:.0f} rpm, "
        f"wind {wind_display_value(inputs.wind_speed):+.1f} m/s"
    )


def yd_delta(current_m: float, previous_m: float | None) -> str | None:
    if previous_m is None:
        return None
    return f"{meters_to_yards(current_m - previous_m):+.1f} yd"


def build_trajectory_frame(result: SimulationResult, shot: str) -> pd.DataFrame:
    """
    Long-format path for charting.
    One row per point; 'order' keeps bounce arcs drawn in time order.
    """
    rows = []
    order = 0
    for phase, points in (("Flight", result.trajectory), ("Run", result.run_trajectory)):
        for p in points:
            rows.append(
                {
                    "shot": shot,
                    "phase": phase,
                    "order": order,
                    "distance_yd": meters_to_yards(p.x),
                    "height_m": p.y,
                }
            )
            order += 1
    return pd.DataFrame(rows)


def build_drag_curve(config: SimulationConfig, num_points: int = 61) -> pd.DataFrame:
    rows = []
    for i in range(num_points):
        re = config.re_min + i * (config.re_max - config.re_min) / max(num_points - 1, 1)
        rows.append({"re": re, "cd": drag_coefficient(re, config.drag_table)})
    return pd.DataFrame(rows)


def build_wind_sweep(inputs: ShotInputs, config: SimulationConfig, num_points: int = 11) -> pd.DataFrame:
    """Carry and total across the allowed wind range, other inputs fixed."""
    lower, upper = config.ranges.wind_speed
    rows = []
    for i in range(num_points):
        wind = lower + i * (upper - lower) / max(num_points - 1, 1)
        r = simulate(
            inputs.head_speed,
            inputs.smash_factor,
            inputs.launch_angle_deg,
            inputs.spin_rate_rpm,
            wind,
            config,
        )
        rows.append(
            {
                "wind_display_mps": wind_display_value(wind),
                "carry_yd": meters_to_yards(r.carry_meters),
                "total_yd": meters_to_yards(r.total_meters),
            }
        )
    return pd.DataFrame(rows)


def build_formula_rows() -> list[dict[str, str]]:
    return [
        {
            "Quantity": "Ball speed",
            "Formula": "V = head speed * smash factor",
            "Meaning": "Launch speed of the ball.",
        },
        {
            "Quantity": "Reynolds number",
            "Formula": "Re = V * D / nu (clamped to 50,000-200,000)",
            "Meaning": "Airflow regime; selects the drag fit.",
        },
        {
            "Quantity": "Spin factor",
            "Formula": "S = omega * r / V",
            "Meaning": "Surface speed from spin relative to airspeed.",
        },
        {
            "Quantity": "Drag coefficient",
            "Formula": "Cd = Cd0(Re) + 0.35 * S, kept in [0.05, 1.2]",
            "Meaning": "Two quadratic Re fits blended over 75,000-100,000.",
        },
        {
            "Quantity": "Lift coefficient",
            "Formula": "Cl = max(0, -3.25 * S^2 + 1.99 * S)",
            "Meaning": "Magnus lift from backspin.",
        },
        {
            "Quantity": "Spin decay",
            "Formula": "spin(t) = spin0 * exp(-0.04 * t)",
            "Meaning": "About 4% of spin is lost per second.",
        },
        {
            "Quantity": "Bounce",
            "Formula": "vy' = e_n * |vy|, vx' = e_t * vx / (1 + k * tan^2(angle)) * spin term",
            "Meaning": "Steep, high-spin landings lose more speed.",
        },
        {
            "Quantity": "Roll",
            "Formula": "d = v0/k - (a0/k^2) * ln(1 + k * v0 / a0)",
            "Meaning": "Turf resistance with constant and speed-proportional parts.",
        },
    ]


ensure_session_defaults()

with st.sidebar:
    st.header("1) Shot settings")
    mode = st.selectbox(
        "Input ranges",
        options=list(SIMULATION_MODES.keys()),
        format_func=lambda key: SIMULATION_MODES[key].label,
        key="mode",
    )
    mode_cfg = SIMULATION_MODES[mode]
    config = mode_cfg.config
    ranges = config.ranges
    st.caption(mode_cfg.description)

    preset_key = st.selectbox(
        "Preset",
        options=list(PRESETS.keys()),
        format_func=lambda key: PRESETS[key]["label"],
        key="preset_key",
    )
    if st.session_state.get("applied_preset_key") != preset_key:
        p = PRESETS[preset_key]
        for key in SHOT_KEYS:
            st.session_state[key] = p[key]
        st.session_state["applied_preset_key"] = preset_key
        st.rerun()

    wind_lo = wind_display_value(ranges.wind_speed[1])
    wind_hi = wind_display_value(ranges.wind_speed[0])
    clamp_session_value("head_speed", *ranges.head_speed)
    clamp_session_value("smash_factor", *ranges.smash_factor)
    clamp_session_value("launch_angle_deg", *ranges.launch_angle_deg)
    clamp_session_value("spin_rate_rpm", *ranges.spin_rate_rpm)
    clamp_session_value("wind_display", wind_lo, wind_hi)

    head_speed = st.slider(
        "Head speed (m/s)",
        min_value=float(ranges.head_speed[0]),
        max_value=float(ranges.head_speed[1]),
        step=0.5,
        key="head_speed",
    )
    smash_factor = st.slider(
        "Smash factor",
        min_value=float(ranges.smash_factor[0]),
        max_value=float(ranges.smash_factor[1]),
        step=0.01,
        key="smash_factor",
    )
    launch_angle_deg = st.slider(
        "Launch angle (deg)",
        min_value=float(ranges.launch_angle_deg[0]),
        max_value=float(ranges.launch_angle_deg[1]),
        step=0.1,
        key="launch_angle_deg",
    )
    spin_rate_rpm = st.slider(
        "Spin rate (rpm)",
        min_value=int(ranges.spin_rate_rpm[0]),
        max_value=int(ranges.spin_rate_rpm[1]),
        step=50,
        key="spin_rate_rpm",
    )
    wind_display = st.slider(
        "Wind (m/s, + = into your face)",
        min_value=float(wind_lo),
        max_value=float(wind_hi),
        step=0.5,
        key="wind_display",
        help="Positive values are a headwind, negative values a tailwind.",
    )
    st.caption(f"Ball speed: {head_speed * smash_factor:.1f} m/s")

raw_inputs = {
    "head_speed": head_speed,
    "smash_factor": smash_factor,
    "launch_angle_deg": launch_angle_deg,
    "spin_rate_rpm": spin_rate_rpm,
    "wind_speed": wind_from_display(wind_display),
}
try:
    inputs = parse_shot_inputs(raw_inputs, ranges)
except ShotInputError as exc:
    st.error(str(exc))
    st.stop()

result = simulate(
    inputs.head_speed,
    inputs.smash_factor,
    inputs.launch_angle_deg,
    inputs.spin_rate_rpm,
    inputs.wind_speed,
    config,
)
previous: SimulationResult | None = st.session_state["previous_result"]

st.info(f"Current shot: **{shot_label(inputs)}**")

b1, b2 = st.columns(2)
if b1.button("Keep this shot for comparison", key="keep_previous"):
    st.session_state["previous_result"] = result
    st.session_state["previous_label"] = shot_label(inputs)
    previous = result
if b2.button("Clear comparison", key="clear_previous", disabled=previous is None):
    st.session_state["previous_result"] = None
    st.session_state["previous_label"] = ""
    previous = None

st.subheader("2) Result")
c1, c2, c3, c4 = st.columns(4)
c1.metric(
    "Carry",
    f"{meters_to_yards(result.carry_meters):.1f} yd",
    delta=yd_delta(result.carry_meters, previous.carry_meters if previous else None),
)
c2.metric(
    "Total",
    f"{meters_to_yards(result.total_meters):.1f} yd",
    delta=yd_delta(result.total_meters, previous.total_meters if previous else None),
)
c3.metric("Max height", f"{result.max_height_meters:.1f} m")
c4.metric("Flight time", f"{result.flight_time_sec:.2f} s")
st.caption(
    f"Carry {result.carry_meters:.1f} m | Run {result.run_meters:.1f} m | "
    f"Total {result.total_meters:.1f} m | Descent angle {result.landing_angle_deg:.1f} deg | "
    f"Landing spin {result.landing_spin_rpm:.0f} rpm"
)

st.subheader("3) Trajectory")
frames = [build_trajectory_frame(result, "Current")]
extent_m = [result.total_meters]
if previous is not None:
    frames.append(build_trajectory_frame(previous, "Previous"))
    extent_m.append(previous.total_meters)
    st.caption(f"Previous: {st.session_state['previous_label']}")
path_df = pd.concat(frames, ignore_index=True)
max_x_yd = meters_to_yards(max_display_meters(*extent_m))

trajectory_chart = (
    alt.Chart(path_df)
    .mark_line(strokeWidth=2)
    .encode(
        x=alt.X("distance_yd:Q", title="Distance (yd)", scale=alt.Scale(domain=[0, max_x_yd])),
        y=alt.Y("height_m:Q", title="Height (m)"),
        color=alt.Color(
            "shot:N",
            title="Shot",
            scale=alt.Scale(domain=["Current", "Previous"], range=["#2b78ff", "#9aa5b1"]),
        ),
        strokeDash=alt.StrokeDash("phase:N", title="Phase"),
        detail="phase:N",
        order="order:Q",
        tooltip=[
            alt.Tooltip("shot:N", title="Shot"),
            alt.Tooltip("phase:N", title="Phase"),
            alt.Tooltip("distance_yd:Q", title="Distance (yd)", format=".1f"),
            alt.Tooltip("height_m:Q", title="Height (m)", format=".2f"),
        ],
    )
    .properties(height=360)
    .interactive()
)
st.altair_chart(trajectory_chart, use_container_width=True)

st.subheader("4) Wind sensitivity")
sweep_df = build_wind_sweep(inputs, config)
sweep_long = sweep_df.melt(id_vars="wind_display_mps", var_name="metric", value_name="yards")
sweep_chart = (
    alt.Chart(sweep_long)
    .mark_line(point=True, strokeWidth=2)
    .encode(
        x=alt.X("wind_display_mps:Q", title="Wind (m/s, + = into your face)"),
        y=alt.Y("yards:Q", title="Distance (yd)", scale=alt.Scale(zero=False)),
        color=alt.Color("metric:N", title="Metric"),
        tooltip=[
            alt.Tooltip("metric:N", title="Metric"),
            alt.Tooltip("wind_display_mps:Q", title="Wind (m/s)", format=".1f"),
            alt.Tooltip("yards:Q", title="Yards", format=".1f"),
        ],
    )
    .properties(height=300)
)
st.altair_chart(sweep_chart, use_container_width=True)

with st.expander("Model: drag curve and formulas", expanded=False):
    drag_df = build_drag_curve(config)
    drag_chart = (
        alt.Chart(drag_df)
        .mark_line(strokeWidth=2)
        .encode(
            x=alt.X("re:Q", title="Reynolds number (Re)", axis=alt.Axis(format=".2e")),
            y=alt.Y("cd:Q", title="Base drag coefficient Cd0"),
            tooltip=[
                alt.Tooltip("re:Q", title="Re", format=".3e"),
                alt.Tooltip("cd:Q", title="Cd0", format=".4f"),
            ],
        )
        .properties(height=280)
    )
    st.altair_chart(drag_chart, use_container_width=True)
    st.dataframe(
        pd.DataFrame(build_formula_rows()),
        width="stretch",
        hide_index=True,
    )
