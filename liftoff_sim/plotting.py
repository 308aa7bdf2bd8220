"""
Liftoff Flight Replay - Plotting

Four-panel kinematic views (position / velocity / acceleration / jerk) of
the replay and dynamics runs, plus profile conditioning and propulsion
diagnostics. All figures are written to PNG files with the non-interactive
Agg backend.
"""

import os
from dataclasses import dataclass
from typing import List

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for batch processing
import matplotlib.pyplot as plt
import numpy as np


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class TrajectoryData:
    """Container for trajectory arrays used in plotting.

    Attributes:
        time: Time array in seconds
        position: Position array [n x 2] in meters (downrange, altitude)
        velocity: Velocity array [n x 2] in m/s
        acceleration: Acceleration array [n x 2] in m/s^2
        jerk: Jerk array [n x 2] in m/s^3
        mass: Vehicle mass in kg
        throttle: Engine throttle (0.0 to 1.0)
        thrust: Thrust magnitude in N
        drag: Drag magnitude in N
    """
    time: np.ndarray
    position: np.ndarray
    velocity: np.ndarray
    acceleration: np.ndarray
    jerk: np.ndarray
    mass: np.ndarray
    throttle: np.ndarray
    thrust: np.ndarray
    drag: np.ndarray


# =============================================================================
# Configuration
# =============================================================================

def configure_plot_style() -> None:
    """Configure matplotlib defaults for report-quality plots."""
    plt.rcParams.update({
        'figure.figsize': (12, 8),
        'figure.dpi': 100,
        'savefig.dpi': 150,
        'axes.grid': True,
        'axes.axisbelow': True,
        'grid.alpha': 0.3,
        'font.size': 10,
        'axes.titlesize': 12,
        'axes.labelsize': 10,
        'legend.fontsize': 9,
        'lines.linewidth': 1.5,
    })


# =============================================================================
# Data Processing
# =============================================================================

def extract_log_data(log) -> TrajectoryData:
    """Convert a SimulationLog into numpy arrays."""
    def _pair(x, y):
        return np.column_stack([np.asarray(x, dtype=float), np.asarray(y, dtype=float)])

    return TrajectoryData(
        time=np.asarray(log.time, dtype=float),
        position=_pair(log.position_x, log.position_y),
        velocity=_pair(log.velocity_x, log.velocity_y),
        acceleration=_pair(log.acceleration_x, log.acceleration_y),
        jerk=_pair(log.jerk_x, log.jerk_y),
        mass=np.asarray(log.mass, dtype=float),
        throttle=np.asarray(log.throttle, dtype=float),
        thrust=np.asarray(log.thrust, dtype=float),
        drag=np.asarray(log.drag, dtype=float),
    )


# =============================================================================
# Plots
# =============================================================================

def plot_kinematics(data: TrajectoryData, output_dir: str, name: str, title: str) -> str:
    """Generate the position / velocity / acceleration / jerk panels.

    Args:
        data: TrajectoryData object
        output_dir: Directory to save the plot
        name: File name (without extension)
        title: Figure title

    Returns:
        Path to saved plot file
    """
    fig, axes = plt.subplots(2, 2, sharex=True)
    panels = [
        (axes[0, 0], data.position / 1000.0, 'Position (km)'),
        (axes[0, 1], data.velocity, 'Velocity (m/s)'),
        (axes[1, 0], data.acceleration, 'Acceleration (m/s²)'),
        (axes[1, 1], data.jerk, 'Jerk (m/s³)'),
    ]
    for ax, values, label in panels:
        ax.plot(data.time, values[:, 0], 'b-', label='Horizontal')
        ax.plot(data.time, values[:, 1], 'r-', label='Vertical')
        ax.set_ylabel(label)
        ax.legend(loc='best')
    for ax in axes[1]:
        ax.set_xlabel('Time (s)')

    fig.suptitle(title, fontweight='bold')
    plt.tight_layout()
    path = os.path.join(output_dir, f'{name}.png')
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


def plot_profile_conditioning(raw, conditioned, events, output_dir: str) -> str:
    """Raw against conditioned telemetry with the detected flight events."""
    fig, (ax_v, ax_h) = plt.subplots(2, 1, sharex=True)

    t_raw, v_raw = raw.velocity.to_arrays()
    t_fit, v_fit = conditioned.velocity.to_arrays()
    ax_v.plot(t_raw, v_raw, 'k.', markersize=3, label='Telemetry')
    ax_v.plot(t_fit, v_fit, 'b-', label='Conditioned')
    ax_v.set_ylabel('Velocity (m/s)')

    t_raw, h_raw = raw.altitude.to_arrays()
    t_fit, h_fit = conditioned.altitude.to_arrays()
    ax_h.plot(t_raw, h_raw / 1000.0, 'k.', markersize=3, label='Telemetry')
    ax_h.plot(t_fit, h_fit / 1000.0, 'r-', label='Conditioned')
    ax_h.set_ylabel('Altitude (km)')
    ax_h.set_xlabel('Time (s)')

    for name, t_event in zip(events._fields, events):
        for ax in (ax_v, ax_h):
            ax.axvline(t_event, color='gray', linestyle='--', linewidth=1)
        ax_v.annotate(name.upper(), (t_event, ax_v.get_ylim()[1]),
                      rotation=90, va='top', ha='right', fontsize=8)
    ax_v.legend(loc='best')
    ax_h.legend(loc='best')

    fig.suptitle('Telemetry Conditioning', fontweight='bold')
    plt.tight_layout()
    path = os.path.join(output_dir, '01_profile_conditioning.png')
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


def plot_velocity_tracking(velocity_profile, data: TrajectoryData, output_dir: str) -> str:
    """Replay velocity components against the rocket's velocity."""
    fig, ax = plt.subplots()

    t_x, vx = velocity_profile.vx.to_arrays()
    t_y, vy = velocity_profile.vy.to_arrays()
    ax.plot(t_x, vx, 'b--', label='Target vx')
    ax.plot(t_y, vy, 'r--', label='Target vy')
    ax.plot(data.time, data.velocity[:, 0], 'b-', label='Rocket vx')
    ax.plot(data.time, data.velocity[:, 1], 'r-', label='Rocket vy')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Velocity (m/s)')
    ax.set_title('Velocity Tracking', fontweight='bold')
    ax.legend(loc='best')

    plt.tight_layout()
    path = os.path.join(output_dir, '04_velocity_tracking.png')
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


def plot_propulsion(data: TrajectoryData, output_dir: str) -> str:
    """Mass, throttle, thrust and drag of the dynamics run."""
    fig, axes = plt.subplots(2, 2, sharex=True)

    axes[0, 0].plot(data.time, data.mass / 1000.0, 'k-')
    axes[0, 0].set_ylabel('Mass (t)')
    axes[0, 1].plot(data.time, data.throttle * 100.0, 'g-')
    axes[0, 1].set_ylabel('Throttle (%)')
    axes[0, 1].set_ylim(-5, 105)
    axes[1, 0].plot(data.time, data.thrust / 1000.0, 'r-')
    axes[1, 0].set_ylabel('Thrust (kN)')
    axes[1, 1].plot(data.time, data.drag / 1000.0, 'b-')
    axes[1, 1].set_ylabel('Drag (kN)')
    for ax in axes[1]:
        ax.set_xlabel('Time (s)')

    fig.suptitle('Propulsion', fontweight='bold')
    plt.tight_layout()
    path = os.path.join(output_dir, '05_propulsion.png')
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


def generate_all_plots(result, output_dir: str = "plots") -> List[str]:
    """Generate every plot for a completed mission.

    Args:
        result: MissionResult from run_mission()
        output_dir: Directory to save plots (created if doesn't exist)

    Returns:
        List of paths to saved plot files
    """
    os.makedirs(output_dir, exist_ok=True)
    configure_plot_style()

    replay = extract_log_data(result.replay_log)
    dynamics = extract_log_data(result.dynamics_log)

    saved = [plot_profile_conditioning(result.raw_profile, result.profile,
                                       result.conditioning.events, output_dir)]
    if len(replay.time):
        saved.append(plot_kinematics(replay, output_dir, '02_replay_kinematics',
                                     'Telemetry Replay'))
    if len(dynamics.time):
        saved.append(plot_kinematics(dynamics, output_dir, '03_dynamics_kinematics',
                                     'Rocket Dynamics'))
        saved.append(plot_velocity_tracking(result.velocity_profile, dynamics, output_dir))
        saved.append(plot_propulsion(dynamics, output_dir))
    return saved
