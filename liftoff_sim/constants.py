"""
Liftoff Flight Replay - Physical Constants and Vehicle Parameters

This module defines the physical constants, atmosphere band coefficients,
Falcon 9 / Merlin 1D vehicle values and mission timing used throughout the
simulation.

VALUES FROM: Falcon User's Guide (2019), NASA GRC Earth Atmosphere Model,
JCSAT-18/KACIFIC1 launch telemetry.
"""

import numpy as np

# =============================================================================
# EARTH PARAMETERS
# =============================================================================

# Standard gravitational acceleration at sea level (m/s^2)
G0 = 9.80665

# =============================================================================
# ATMOSPHERE MODEL (NASA GRC, metric)
# Temperatures in deg C, pressures in kPa, altitudes in m
# =============================================================================

TROPOSPHERE_CEILING = 11000.0
LOWER_STRATOSPHERE_CEILING = 25000.0

# Troposphere: T = T0 + LAPSE * h, p = P0 * ((T + K) / T_REF) ** EXP
TROPO_T0 = 15.04
TROPO_LAPSE = -0.00649
TROPO_P0 = 101.29
TROPO_T_REF = 288.08
TROPO_EXPONENT = 5.256

# Lower stratosphere: isothermal, p = P0 * exp(A - B * h)
LOWER_STRATO_T = -56.46
LOWER_STRATO_P0 = 22.65
LOWER_STRATO_A = 1.73
LOWER_STRATO_B = 0.000157

# Upper stratosphere: T = T0 + LAPSE * h, p = P0 * ((T + K) / T_REF) ** EXP
UPPER_STRATO_T0 = -131.21
UPPER_STRATO_LAPSE = 0.00299
UPPER_STRATO_P0 = 2.488
UPPER_STRATO_T_REF = 216.6
UPPER_STRATO_EXPONENT = -11.388

# Celsius to Kelvin offset used by the model
CELSIUS_OFFSET = 273.1

# Specific gas constant for air in kJ/(kg*K), pairs with kPa pressures
R_AIR = 0.2869

# =============================================================================
# AERODYNAMIC PARAMETERS
# =============================================================================

DRAG_COEFFICIENT = 0.25  # Cd at launch (subsonic)
REFERENCE_DIAMETER = 5.2  # m (fairing/interstage)
REFERENCE_AREA = np.pi * (REFERENCE_DIAMETER / 2.0) ** 2  # m^2

# =============================================================================
# VEHICLE MASSES (Falcon 9 Block 5)
# =============================================================================

STAGE1_DRY_MASS = 25600.0  # kg
STAGE1_PROPELLANT_MASS = 395700.0  # kg
STAGE2_DRY_MASS = 3900.0  # kg
STAGE2_PROPELLANT_MASS = 92670.0  # kg
PAYLOAD_MASS = 6800.0  # kg

# Everything above the interstage is carried by stage 1 until separation
UPPER_STAGE_MASS = STAGE2_DRY_MASS + STAGE2_PROPELLANT_MASS + PAYLOAD_MASS

INITIAL_MASS = STAGE1_DRY_MASS + STAGE1_PROPELLANT_MASS + UPPER_STAGE_MASS

# =============================================================================
# PROPULSION PARAMETERS (Merlin 1D)
# =============================================================================

NUM_ENGINES = 9
ENGINE_MAX_THRUST = 854000.0  # N at sea level
ENGINE_ISP = 282.0  # s at sea level

# =============================================================================
# MISSION PARAMETERS (JCSAT-18/KACIFIC1)
# =============================================================================

BALLISTIC_RANGE = 651000.0  # m
ENGINE_CUTOFF_TIME = 155.0  # s, MECO
STAGE_SEPARATION_TIME = 155.0  # s

# =============================================================================
# SIMULATION PARAMETERS
# =============================================================================

DT = 1.0  # s
REPLAY_MAX_TIME = 500.0  # s
DYNAMICS_DURATION = 400.0  # s
PROGRESS_INTERVAL = 10.0  # s of simulated time between progress logs

# Position, velocity, acceleration, jerk
DERIVATIVE_DEPTH = 4

# =============================================================================
# PROFILE CONDITIONING
# =============================================================================

# Base polynomial order for the legs before MECO and after SES
OUTER_LEG_ORDER = 4
# Base polynomial order for the MECO-SES leg (raised by its forced points)
MIDDLE_LEG_ORDER = 0
# Smoothness forced at each side of the MECO-SES leg (value + 2 derivatives)
MIDDLE_LEG_FORCE_TAG = 3
MAX_RECONCILE_PASSES = 1000

# =============================================================================
# CONTROL
# =============================================================================

KP_VELOCITY = 1.0
KI_VELOCITY = 0.0
KD_VELOCITY = 0.0
KF_VELOCITY = 0.0

# =============================================================================
# NUMERICAL TOLERANCES
# =============================================================================

ZERO_TOLERANCE = 1e-10
TIME_KEY_DECIMALS = 9
