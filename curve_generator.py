#!/usr/bin/env python3
"""
curve_generator.py — Step-indexed S-curve delay profile for a stepper motor.

Given a move of `total_steps` discrete steps, builds the delay between each
pair of step pulses:

    acceleration  : max_delay eases down to min_delay (cubic smoothstep)
    cruise        : constant min_delay
    deceleration  : min_delay eases back up to max_delay (mirrored ramp)

and derives cumulative time, step rate (1/delay) and a finite-difference
acceleration from it.

The calculation is pure: no I/O, no shared state, identical inputs give
bit-identical output.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from easing import cubic_acceleration_curve, cubic_deceleration_curve

logger = logging.getLogger("StepperCurve.Generator")

# Numerical-stability floor for the acceleration finite difference. Replaces a
# non-positive previous delay so the division is always defined; it is not a
# physical quantity.
DELAY_EPSILON = 0.001

# Decimal places of the emitted copies. Calculation runs unrounded.
DELAY_PRECISION = 6
RATE_PRECISION  = 4


@dataclass(frozen=True)
class CurveParameters:
    total_steps: int
    acc_steps:   int      # requested; re-derived by clamp_step_count if invalid
    dec_steps:   int
    min_delay:   float    # delay at cruise (fastest)
    max_delay:   float    # delay at start/end (slowest)


@dataclass(frozen=True)
class CurveResult:
    step_numbers:         Tuple[int, ...]
    delays:               Tuple[float, ...]
    time_points:          Tuple[float, ...]   # cumulative time before step i
    velocity_profile:     Tuple[float, ...]
    position_profile:     Tuple[int, ...]
    acceleration_profile: Tuple[float, ...]
    total_time:           float
    total_steps:          int
    acc_steps_used:       int
    dec_steps_used:       int
    min_delay:            float
    max_delay:            float


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (round() is banker's)."""
    return int(math.floor(value + 0.5))


def clamp_step_count(value: int, total_steps: int) -> int:
    """
    Replace an out-of-range ramp length with half the move.

    Each ramp is clamped on its own; two clamped ramps on an odd move add up
    to total_steps + 1. Callers rely on that, see compute_delays for how the
    overlap resolves.
    """
    if value <= 0 or value > total_steps // 2:
        return round_half_up(total_steps / 2.0)
    return value


def compute_delays(total_steps: int, acc_steps: int, dec_steps: int,
                   min_delay: float, max_delay: float) -> np.ndarray:
    """
    Fill the per-step delay array in three passes: acceleration, cruise,
    deceleration. Deceleration is written last and overwrites anything the
    earlier passes put at the same index.
    """
    delays = np.zeros(total_steps)
    span = min_delay - max_delay

    # 1. Acceleration ramp
    acc_curve = cubic_acceleration_curve(acc_steps)[:total_steps]
    delays[:len(acc_curve)] = max_delay + span * acc_curve

    # 2. Cruise (empty when the ramps meet or overlap)
    cruise_end = max(total_steps - dec_steps, 0)
    if cruise_end > acc_steps:
        delays[acc_steps:cruise_end] = min_delay

    # 3. Deceleration ramp
    dec_start = total_steps - dec_steps
    dec_curve = cubic_deceleration_curve(dec_steps)
    if dec_start < 0:
        dec_curve = dec_curve[-dec_start:]
        dec_start = 0
    delays[dec_start:] = max_delay + span * dec_curve

    return delays


def derive_time_points(delays: np.ndarray) -> np.ndarray:
    """Cumulative time before each step; the first step starts at 0."""
    return np.concatenate(([0.0], np.cumsum(delays[:-1])))


def derive_velocity(delays: np.ndarray) -> np.ndarray:
    """Step rate 1/delay, 0 where the delay is not positive."""
    return np.divide(1.0, delays, out=np.zeros_like(delays), where=delays > 0)


def derive_acceleration(velocity: np.ndarray, delays: np.ndarray) -> np.ndarray:
    """Change in step rate per previous delay; first entry is 0."""
    prev = delays[:-1]
    dt = np.where(prev > 0, prev, DELAY_EPSILON)
    return np.concatenate(([0.0], np.diff(velocity) / dt))


def _emit(arr: np.ndarray, decimals: int) -> Tuple[float, ...]:
    # + 0.0 folds -0.0 into 0.0
    return tuple((np.round(arr, decimals) + 0.0).tolist())


class CurveGenerator:
    """
    Computes the S-curve profile for one set of parameters.

    Stateless, so one instance can serve concurrent requests.
    """

    def compute(self, params: CurveParameters) -> CurveResult:
        total_steps = int(params.total_steps)
        if total_steps < 1:
            raise ValueError(f"total_steps must be >= 1, got {params.total_steps}")

        min_delay = float(params.min_delay)
        max_delay = float(params.max_delay)

        acc_steps = clamp_step_count(int(params.acc_steps), total_steps)
        dec_steps = clamp_step_count(int(params.dec_steps), total_steps)
        if acc_steps != params.acc_steps or dec_steps != params.dec_steps:
            logger.debug(
                f"Ramp lengths clamped: acc {params.acc_steps}->{acc_steps}, "
                f"dec {params.dec_steps}->{dec_steps} (total {total_steps})"
            )

        delays = compute_delays(total_steps, acc_steps, dec_steps, min_delay, max_delay)
        time_points = derive_time_points(delays)
        total_time = float(time_points[-1] + delays[-1])
        velocity = derive_velocity(delays)
        acceleration = derive_acceleration(velocity, delays)

        steps = tuple(range(total_steps))
        return CurveResult(
            step_numbers         = steps,
            delays               = _emit(delays, DELAY_PRECISION),
            time_points          = _emit(time_points, DELAY_PRECISION),
            velocity_profile     = _emit(velocity, RATE_PRECISION),
            position_profile     = steps,
            acceleration_profile = _emit(acceleration, RATE_PRECISION),
            total_time           = round(total_time, DELAY_PRECISION),
            total_steps          = total_steps,
            acc_steps_used       = acc_steps,
            dec_steps_used       = dec_steps,
            min_delay            = min_delay,
            max_delay            = max_delay,
        )
