"""
Golf drive flight and ground-roll simulator.

This module:
1) Simulates 2-D ball flight with drag/lift forces (forward-Euler integrator).
2) Uses Reynolds-number Cd fits and a spin-factor Cl fit, with spin decay.
3) Models landing with a bounce phase and a closed-form roll phase.

Run:
    python golf_flight.py
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from math import atan, ceil, cos, degrees, exp, hypot, isfinite, log, pi, sin, tan
import logging


logger = logging.getLogger(__name__)


# -----------------------------
# Physical constants and setup
# -----------------------------

G = 9.80665  # m/s^2
RHO_AIR = 1.2  # kg/m^3
NU_AIR = 1.5e-5  # kinematic viscosity, m^2/s

BALL_MASS = 0.04593  # kg
BALL_DIAMETER = 0.04267  # m
BALL_RADIUS = BALL_DIAMETER / 2.0
BALL_AREA = pi * BALL_RADIUS**2  # projected area

EPSILON = 1e-6
RPM_TO_RAD_S = 2.0 * pi / 60.0

# Flight integration
FLIGHT_DT = 0.01  # s
FLIGHT_MAX_STEPS = 3000  # ~30 s of flight

# Reynolds clamp (valid domain of the Cd fits)
RE_MIN = 50_000.0
RE_MAX = 200_000.0

# Cd(Re, S) = Cd0(Re) + CD_SPIN_LINEAR * S, clamped
CD_SPIN_LINEAR = 0.35
CD_MIN = 0.05
CD_MAX = 1.2

# Cl(S) = max(0, CL_QUAD * S^2 + CL_LINEAR * S)
CL_QUAD = -3.25
CL_LINEAR = 1.99

# Spin decay, ~4%/s
SPIN_DECAY_RATE = 0.04  # 1/s

# Effective spin: inputs above the knee are compressed onto a narrower band.
EFFECTIVE_SPIN_KNEE_RPM = 3000.0
EFFECTIVE_SPIN_INPUT_MAX_RPM = 5000.0
EFFECTIVE_SPIN_OUTPUT_MAX_RPM = 3800.0


# -----------------------------
# Coefficient fit tables
# -----------------------------


@dataclass(frozen=True)
class QuadraticFit:
    a: float
    b: float
    c: float

    def __call__(self, x: float) -> float:
        return self.a * x * x + self.b * x + self.c


@dataclass(frozen=True)
class FitSegment:
    domain_start: float
    domain_end: float
    fit: QuadraticFit


# Sorted by domain_start. Where two neighbours overlap, the overlap is the blend band.
DRAG_FIT_TABLE: tuple[FitSegment, ...] = (
    FitSegment(50_000.0, 100_000.0, QuadraticFit(1.29e-10, -2.59e-5, 1.5)),
    FitSegment(75_000.0, 200_000.0, QuadraticFit(1.91e-11, -5.4e-6, 0.56)),
)


# -----------------------------
# Ground model parameters
# -----------------------------


@dataclass(frozen=True)
class GroundParameters:
    # Vertical restitution (first impact compresses the turf, so it is lower)
    e_n_first: float = 0.25
    e_n_after: float = 0.35
    # Tangential restitution
    e_t_first: float = 0.60
    e_t_after: float = 0.80
    # Horizontal loss grows with landing angle: 1 / (1 + k * tan^2(gamma))
    landing_angle_damping: float = 0.5
    # Backspin costs speed at impact, topspin gives a little back
    spin_ref_rpm: float = 3000.0
    spin_loss_gain: float = 0.15
    spin_factor_min: float = 0.70
    spin_factor_max: float = 1.10
    spin_retention: float = 0.5
    # Bounce termination
    stop_velocity: float = 0.5  # m/s
    min_bounce_height: float = 0.01  # m
    max_bounces: int = 4
    # Roll: dv/dt = -(roll_decel + roll_drag * v)
    roll_decel: float = 0.9  # m/s^2
    roll_drag: float = 0.15  # 1/s
    max_roll_meters: float = 120.0
    # Path sampling
    bounce_sample_dt: float = 0.05  # s
    bounce_min_samples: int = 3
    bounce_max_samples: int = 30
    roll_samples: int = 20


DEFAULT_GROUND = GroundParameters()


# -----------------------------
# Simulation configuration
# -----------------------------


@dataclass(frozen=True)
class InputRanges:
    """Inclusive bounds the validator enforces before a run."""

    head_speed: tuple[float, float] = (25.0, 60.0)  # m/s
    smash_factor: tuple[float, float] = (1.30, 1.56)
    launch_angle_deg: tuple[float, float] = (8.0, 25.0)
    spin_rate_rpm: tuple[float, float] = (1500.0, 5000.0)
    wind_speed: tuple[float, float] = (-10.0, 10.0)  # m/s, + = tailwind


@dataclass(frozen=True)
class SimulationConfig:
    dt: float = FLIGHT_DT
    max_steps: int = FLIGHT_MAX_STEPS
    re_min: float = RE_MIN
    re_max: float = RE_MAX
    cd_spin_linear: float = CD_SPIN_LINEAR
    cd_min: float = CD_MIN
    cd_max: float = CD_MAX
    spin_decay_rate: float = SPIN_DECAY_RATE
    effective_spin_knee_rpm: float = EFFECTIVE_SPIN_KNEE_RPM
    effective_spin_input_max_rpm: float = EFFECTIVE_SPIN_INPUT_MAX_RPM
    effective_spin_output_max_rpm: float = EFFECTIVE_SPIN_OUTPUT_MAX_RPM
    drag_table: tuple[FitSegment, ...] = DRAG_FIT_TABLE
    ground: GroundParameters = DEFAULT_GROUND
    ranges: InputRanges = field(default_factory=InputRanges)


DEFAULT_CONFIG = SimulationConfig()


# -----------------------------
# Result records
# -----------------------------


@dataclass
class KinematicState:
    x: float
    y: float
    vx: float
    vy: float


@dataclass(frozen=True)
class TrajectoryPoint:
    x: float
    y: float


@dataclass(frozen=True)
class FlightResult:
    carry_meters: float
    max_height_meters: float
    landing_vx: float
    landing_vy: float
    flight_time_sec: float
    trajectory: list[TrajectoryPoint]


@dataclass(frozen=True)
class RunResult:
    run_meters: float
    run_path: list[TrajectoryPoint]
    bounce_count: int = 0
    roll_meters: float = 0.0


@dataclass(frozen=True)
class SimulationResult:
    ball_speed: float
    carry_meters: float
    total_meters: float
    trajectory: list[TrajectoryPoint]
    run_trajectory: list[TrajectoryPoint]
    max_height_meters: float
    flight_time_sec: float
    run_meters: float
    landing_angle_deg: float
    landing_spin_rpm: float


# -----------------------------
# Small numeric helpers
# -----------------------------


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def blend_fit_segments(x: float, segments: tuple[FitSegment, ...]) -> float:
    """
    Evaluate a piecewise fit table.
    Inside a single segment its fit is used as-is. Where two neighbouring
    segments overlap, the fit outputs are linearly blended across the overlap
    so there is no kink at the boundary. Outside the table the nearest
    segment is extrapolated.
    """
    if not segments:
        raise ValueError("Fit table is empty.")
    if x <= segments[0].domain_start:
        return segments[0].fit(x)

    for i, segment in enumerate(segments):
        nxt = segments[i + 1] if i + 1 < len(segments) else None
        if nxt is not None and nxt.domain_start <= x <= segment.domain_end:
            band = segment.domain_end - nxt.domain_start
            if band < 1e-12:
                return nxt.fit(x)
            t = (x - nxt.domain_start) / band
            return lerp(segment.fit(x), nxt.fit(x), t)
        if x <= segment.domain_end:
            return segment.fit(x)

    return segments[-1].fit(x)


# -----------------------------
# Aerodynamic coefficients
# -----------------------------


def reynolds_number(airspeed: float) -> float:
    return max(airspeed, EPSILON) * BALL_DIAMETER / NU_AIR


def spin_factor(airspeed: float, spin_rpm: float) -> float:
    """S = omega * r / V."""
    omega = spin_rpm * RPM_TO_RAD_S
    return omega * BALL_RADIUS / max(airspeed, EPSILON)


def drag_coefficient(reynolds: float, table: tuple[FitSegment, ...] = DRAG_FIT_TABLE) -> float:
    """Base Cd0(Re). The caller clamps Re into the table's domain first."""
    return blend_fit_segments(reynolds, table)


def lift_coefficient(spin_factor_value: float) -> float:
    return max(0.0, CL_QUAD * spin_factor_value * spin_factor_value + CL_LINEAR * spin_factor_value)


def total_drag_coefficient(
    reynolds: float, spin_factor_value: float, config: SimulationConfig = DEFAULT_CONFIG
) -> float:
    """Cd(Re) plus the linear spin-drag term, kept inside a safe band."""
    cd0 = drag_coefficient(reynolds, config.drag_table)
    return clamp(cd0 + config.cd_spin_linear * spin_factor_value, config.cd_min, config.cd_max)


# -----------------------------
# Spin
# -----------------------------


def spin_at_time(spin0_rpm: float, t_sec: float, decay_rate: float = SPIN_DECAY_RATE) -> float:
    return spin0_rpm * exp(-decay_rate * t_sec)


def effective_spin_rate(spin_rpm: float, config: SimulationConfig = DEFAULT_CONFIG) -> float:
    """
    Input shaping for high nominal spin.
    Up to the knee the input is used as-is; above it the input range is
    squeezed linearly onto [knee, output_max].
    """
    knee = config.effective_spin_knee_rpm
    if spin_rpm <= knee:
        return spin_rpm
    span = max(config.effective_spin_input_max_rpm - knee, EPSILON)
    t = clamp((spin_rpm - knee) / span, 0.0, 1.0)
    return lerp(knee, config.effective_spin_output_max_rpm, t)


# -----------------------------
# Flight integrator
# -----------------------------


def interpolate_at_ground(previous: KinematicState, current: KinematicState) -> tuple[KinematicState, float]:
    """Linear crossing of y=0 between two states. Returns the state and the step fraction."""
    ratio = previous.y / max(previous.y - current.y, EPSILON)
    state = KinematicState(
        x=previous.x + (current.x - previous.x) * ratio,
        y=0.0,
        vx=previous.vx + (current.vx - previous.vx) * ratio,
        vy=previous.vy + (current.vy - previous.vy) * ratio,
    )
    return state, ratio


def aero_acceleration(
    state: KinematicState, spin_rpm: float, wind_speed: float, config: SimulationConfig
) -> tuple[float, float]:
    """
    Acceleration (ax, ay) from drag, lift and gravity.
    Wind is horizontal; positive wind_speed blows downrange (tailwind).
    """
    rel_vx = state.vx - wind_speed
    rel_vy = state.vy
    airspeed = max(hypot(rel_vx, rel_vy), EPSILON)

    re = clamp(reynolds_number(airspeed), config.re_min, config.re_max)
    s = spin_factor(airspeed, spin_rpm)
    cd = total_drag_coefficient(re, s, config)
    cl = lift_coefficient(s)

    q = 0.5 * RHO_AIR * airspeed * airspeed
    drag = q * BALL_AREA * cd
    lift = q * BALL_AREA * cl

    # Unit vectors of the relative air velocity
    ux = rel_vx / airspeed
    uy = rel_vy / airspeed

    # Drag opposite to relative velocity, lift perpendicular (backspin side)
    ax = (-drag * ux - lift * uy) / BALL_MASS
    ay = (-drag * uy + lift * ux) / BALL_MASS - G
    return ax, ay


def simulate_flight(
    ball_speed: float,
    launch_angle_deg: float,
    spin_rpm: float,
    wind_speed: float,
    config: SimulationConfig = DEFAULT_CONFIG,
) -> FlightResult:
    """
    Integrate the airborne phase until the ball crosses y=0.
    spin_rpm is the launch spin after any input shaping; it decays with time.
    """
    theta = launch_angle_deg * pi / 180.0
    dt = config.dt

    state = KinematicState(
        x=0.0,
        y=0.0,
        vx=ball_speed * cos(theta),
        vy=ball_speed * sin(theta),
    )
    landing = replace(state)
    trajectory = [TrajectoryPoint(0.0, 0.0)]
    max_h = 0.0
    t = 0.0
    landed = False

    for _ in range(config.max_steps):
        previous = replace(state)

        spin_now = spin_at_time(spin_rpm, t, config.spin_decay_rate)
        ax, ay = aero_acceleration(state, spin_now, wind_speed, config)

        state.vx += ax * dt
        state.vy += ay * dt
        state.x += state.vx * dt
        state.y += state.vy * dt

        max_h = max(max_h, state.y)

        if state.y < 0.0:
            landing, ratio = interpolate_at_ground(previous, state)
            t += dt * ratio
            trajectory.append(TrajectoryPoint(landing.x, 0.0))
            landed = True
            break

        trajectory.append(TrajectoryPoint(state.x, state.y))
        landing = replace(state)
        t += dt

    if not landed:
        trajectory[-1] = TrajectoryPoint(max(landing.x, 0.0), 0.0)
        logger.warning(
            "Flight did not reach the ground within %d steps (speed=%.2f, angle=%.2f, spin=%.0f, wind=%.2f)",
            config.max_steps,
            ball_speed,
            launch_angle_deg,
            spin_rpm,
            wind_speed,
        )

    return FlightResult(
        carry_meters=max(landing.x, 0.0),
        max_height_meters=max(max_h, 0.0),
        landing_vx=landing.vx,
        landing_vy=landing.vy,
        flight_time_sec=t,
        trajectory=trajectory,
    )


# -----------------------------
# Ground interaction
# -----------------------------


def landing_angle_deg(vx: float, vy: float) -> float:
    """Descent angle below the horizontal, in degrees."""
    return degrees(atan(abs(vy) / max(vx, EPSILON)))


def bounce_spin_modifier(spin_rpm: float, params: GroundParameters) -> float:
    ratio = spin_rpm / max(params.spin_ref_rpm, EPSILON)
    return clamp(1.0 - params.spin_loss_gain * ratio, params.spin_factor_min, params.spin_factor_max)


def roll_distance(v0: float, params: GroundParameters) -> float:
    """
    Stopping distance for dv/dt = -(a0 + k*v):
        d = v0/k - (a0/k^2) * ln(1 + k*v0/a0)
    """
    if v0 <= 0.0:
        return 0.0
    a0 = max(params.roll_decel, EPSILON)
    k = params.roll_drag
    if k < EPSILON:
        d = v0 * v0 / (2.0 * a0)
    else:
        d = v0 / k - (a0 / (k * k)) * log(1.0 + k * v0 / a0)
    return clamp(d, 0.0, params.max_roll_meters)


def roll_stop_time(v0: float, params: GroundParameters) -> float:
    if v0 <= 0.0:
        return 0.0
    a0 = max(params.roll_decel, EPSILON)
    k = params.roll_drag
    if k < EPSILON:
        return v0 / a0
    return log(1.0 + k * v0 / a0) / k


def roll_position(v0: float, t: float, params: GroundParameters) -> float:
    """Distance rolled after t seconds (closed form)."""
    a0 = max(params.roll_decel, EPSILON)
    k = params.roll_drag
    if k < EPSILON:
        return v0 * t - 0.5 * a0 * t * t
    return (v0 + a0 / k) * (1.0 - exp(-k * t)) / k - a0 * t / k


def _bounce_arc(
    x0: float, vx: float, vy: float, hang: float, params: GroundParameters
) -> list[TrajectoryPoint]:
    n = int(ceil(hang / max(params.bounce_sample_dt, EPSILON)))
    n = int(clamp(n, params.bounce_min_samples, params.bounce_max_samples))
    points = []
    for i in range(1, n + 1):
        t = hang * i / n
        y = vy * t - 0.5 * G * t * t
        points.append(TrajectoryPoint(x0 + vx * t, max(y, 0.0)))
    # Land exactly on the ground plane
    points[-1] = TrajectoryPoint(x0 + vx * hang, 0.0)
    return points


def compute_ground_run(
    landing_vx: float,
    landing_vy: float,
    landing_spin_rpm: float,
    params: GroundParameters = DEFAULT_GROUND,
) -> RunResult:
    """
    Bounce-and-roll model after first ground contact.

    Positions are relative to the landing point. Positive spin is backspin.
    Any non-finite input or a ball not moving downrange gives a zero run,
    as does a landing so violent that a bounce overflows to a non-finite value.
    The impact that ends the bounce phase still attenuates vx before the roll.
    """
    if not (isfinite(landing_vx) and isfinite(landing_vy) and isfinite(landing_spin_rpm)) or landing_vx <= 0.0:
        logger.debug(
            "Ground run short-circuit: vx=%r vy=%r spin=%r", landing_vx, landing_vy, landing_spin_rpm
        )
        return RunResult(run_meters=0.0, run_path=[TrajectoryPoint(0.0, 0.0)])

    path = [TrajectoryPoint(0.0, 0.0)]
    x = 0.0
    vx = landing_vx
    vy_in = abs(landing_vy)
    spin = landing_spin_rpm
    bounces = 0

    for i in range(params.max_bounces):
        first = i == 0
        e_n = params.e_n_first if first else params.e_n_after
        e_t = params.e_t_first if first else params.e_t_after

        gamma = atan(vy_in / max(vx, EPSILON))
        damping = 1.0 / (1.0 + params.landing_angle_damping * tan(gamma) ** 2)

        vy_out = vy_in * e_n
        vx = max(vx * e_t * damping * bounce_spin_modifier(spin, params), 0.0)
        spin *= params.spin_retention

        apex = vy_out * vy_out / (2.0 * G)
        if vx <= 0.0 or vy_out < params.stop_velocity or apex < params.min_bounce_height:
            break

        hang = 2.0 * vy_out / G
        x_next = x + vx * hang
        if not (isfinite(apex) and isfinite(x_next)):
            logger.debug("Ground run overflow at bounce %d: vx=%r vy=%r", i + 1, vx, vy_out)
            return RunResult(run_meters=0.0, run_path=[TrajectoryPoint(0.0, 0.0)])
        path.extend(_bounce_arc(x, vx, vy_out, hang, params))
        x = x_next
        vy_in = vy_out
        bounces += 1

    roll = roll_distance(vx, params)
    if roll > 0.0:
        t_stop = roll_stop_time(vx, params)
        n = max(params.roll_samples, 1)
        for i in range(1, n + 1):
            d = min(roll_position(vx, t_stop * i / n, params), roll)
            path.append(TrajectoryPoint(x + d, 0.0))
        path[-1] = TrajectoryPoint(x + roll, 0.0)

    return RunResult(
        run_meters=x + roll,
        run_path=path,
        bounce_count=bounces,
        roll_meters=roll,
    )


# -----------------------------
# Orchestrator
# -----------------------------


def simulate(
    head_speed: float,
    smash_factor: float,
    launch_angle_deg: float,
    spin_rate_rpm: float,
    wind_speed: float,
    config: SimulationConfig = DEFAULT_CONFIG,
) -> SimulationResult:
    """
    Full shot: flight, landing spin, bounce and roll.
    Distances are meters; wind_speed is signed with + = tailwind.
    """
    ball_speed = head_speed * smash_factor
    spin0 = effective_spin_rate(spin_rate_rpm, config)

    flight = simulate_flight(ball_speed, launch_angle_deg, spin0, wind_speed, config)
    spin_land = spin_at_time(spin0, flight.flight_time_sec, config.spin_decay_rate)
    run = compute_ground_run(flight.landing_vx, flight.landing_vy, spin_land, config.ground)

    run_trajectory = [TrajectoryPoint(flight.carry_meters + p.x, p.y) for p in run.run_path]

    return SimulationResult(
        ball_speed=ball_speed,
        carry_meters=flight.carry_meters,
        total_meters=flight.carry_meters + run.run_meters,
        trajectory=flight.trajectory,
        run_trajectory=run_trajectory,
        max_height_meters=flight.max_height_meters,
        flight_time_sec=flight.flight_time_sec,
        run_meters=run.run_meters,
        landing_angle_deg=landing_angle_deg(flight.landing_vx, flight.landing_vy),
        landing_spin_rpm=spin_land,
    )


# -----------------------------
# Command-line report
# -----------------------------

REFERENCE_SHOTS = [
    ("Calm", 45.0, 1.45, 14.0, 2500.0, 0.0),
    ("Tailwind 8 m/s", 45.0, 1.45, 14.0, 2500.0, 8.0),
    ("Headwind 8 m/s", 45.0, 1.45, 14.0, 2500.0, -8.0),
    ("High spin", 45.0, 1.45, 14.0, 4500.0, 0.0),
]


def main() -> None:
    print("Reference drives (head speed 45 m/s, smash 1.45, launch 14 deg)")
    for label, head_speed, smash, angle, spin, wind in REFERENCE_SHOTS:
        r = simulate(head_speed, smash, angle, spin, wind)
        print(
            f"- {label}: ball={r.ball_speed:.1f} m/s, carry={r.carry_meters:.1f} m, "
            f"total={r.total_meters:.1f} m, apex={r.max_height_meters:.1f} m, "
            f"time={r.flight_time_sec:.2f} s, descent={r.landing_angle_deg:.1f} deg"
        )
    print("Simulation completed.")


if __name__ == "__main__":
    main()
