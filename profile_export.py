#!/usr/bin/env python3
"""
profile_export.py — JSON envelopes and CSV projection of a CurveResult.

Nothing here calculates; it only reshapes a finished result for transport.
"""

import csv
import io
from typing import Any, Dict

from curve_generator import CurveResult

CSV_FILENAME = "stepper_curve_profile.csv"
CSV_HEADERS = [
    "Step", "Delay (μs)", "Time (s)", "Velocity (steps/s)",
    "Position (steps)", "Acceleration",
]


def result_to_dict(result: CurveResult) -> Dict[str, Any]:
    """
    JSON-ready view of a result. The used ramp lengths go out as
    acc_steps / dec_steps, the names the browser client reads.
    """
    return {
        "step_numbers":         list(result.step_numbers),
        "delays":               list(result.delays),
        "time_points":          list(result.time_points),
        "velocity_profile":     list(result.velocity_profile),
        "position_profile":     list(result.position_profile),
        "acceleration_profile": list(result.acceleration_profile),
        "total_time":           result.total_time,
        "total_steps":          result.total_steps,
        "acc_steps":            result.acc_steps_used,
        "dec_steps":            result.dec_steps_used,
        "min_delay":            result.min_delay,
        "max_delay":            result.max_delay,
    }


def success_envelope(result: CurveResult, parameters: Any) -> Dict[str, Any]:
    return {"success": True, "data": result_to_dict(result), "parameters": parameters}


def failure_envelope(message: str) -> Dict[str, Any]:
    return {"success": False, "error": message}


def to_csv(result: CurveResult) -> str:
    """One row per step: step, delay, time, velocity, position, acceleration."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(zip(
        result.step_numbers,
        result.delays,
        result.time_points,
        result.velocity_profile,
        result.position_profile,
        result.acceleration_profile,
    ))
    return buf.getvalue()
