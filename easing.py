#!/usr/bin/env python3
"""
easing.py — Cubic ease curves for the stepper S-curve calculator.

Generates the sampled smoothstep ramp that shapes the step delays during
acceleration and deceleration. Curves are normalized to [0, 1] so they can be
scaled between any pair of delays.

    s(t) = 3t² − 2t³

s(0) = 0, s(1) = 1 and the slope is zero at both ends, which is what gives the
delay profile its S shape.
"""

import numpy as np


# ----------------------------------------------------------------------
# Smoothstep
# ----------------------------------------------------------------------
def smoothstep(t):
    """Cubic ease (3t² − 2t³). Works on scalars and numpy arrays."""
    return 3.0 * t ** 2 - 2.0 * t ** 3


def sample_points(n):
    """
    Evenly spaced samples t_i = i / (n - 1) for i in 0..n-1.

    A single sample has no spacing to divide by; it is defined as t_0 = 0.
    """
    if n <= 0:
        return np.array([])
    if n == 1:
        return np.zeros(1)
    return np.arange(n, dtype=float) / (n - 1)


# ----------------------------------------------------------------------
# Ramp curves
# ----------------------------------------------------------------------
def cubic_acceleration_curve(n):
    """Smoothstep ramp rising 0 -> 1 over n samples."""
    return smoothstep(sample_points(n))


def cubic_deceleration_curve(n):
    """Mirror of the acceleration ramp: falls 1 -> 0 over n samples."""
    return cubic_acceleration_curve(n)[::-1]
