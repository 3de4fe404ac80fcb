#!/usr/bin/env python3
"""
validation.py — Request parameter checks for the S-curve calculator.

The browser posts a loose bag of values (numbers, numeric strings, sometimes
wrapped under "stepper_curve"). Every required field must be present and
coerce to a finite number greater than zero before a CurveParameters is built.
"""

import logging
import math
from typing import Any, Dict, Optional

from curve_generator import CurveParameters

logger = logging.getLogger("StepperCurve.Validation")

REQUIRED_FIELDS = ("total_steps", "acc_steps", "dec_steps", "min_delay", "max_delay")
STEP_FIELDS     = ("total_steps", "acc_steps", "dec_steps")

GENERIC_MESSAGE = "Missing or invalid parameters"


class InvalidParameter(ValueError):
    """One or more request fields are missing, non-numeric or not positive."""

    def __init__(self, fields, message: str = GENERIC_MESSAGE):
        self.fields = tuple(fields)
        super().__init__(message)


def unwrap(payload: Any) -> Dict[str, Any]:
    """Accept either {"stepper_curve": {...}} or the bare parameter object."""
    if not isinstance(payload, dict):
        raise InvalidParameter(REQUIRED_FIELDS, "Request body must be a JSON object")
    inner = payload.get("stepper_curve")
    if isinstance(inner, dict):
        return inner
    return payload


def coerce_positive(value: Any) -> Optional[float]:
    """Float value of `value` if it is a finite number > 0, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        f = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(f) or f <= 0:
        return None
    return f


def parse_parameters(payload: Any, max_total_steps: Optional[int] = None) -> CurveParameters:
    """
    Build CurveParameters from a request body.

    Step counts are truncated to whole steps; a count that truncates to 0 is
    rejected like any other non-positive value.
    """
    data = unwrap(payload)

    values = {}
    bad = []
    for name in REQUIRED_FIELDS:
        v = coerce_positive(data.get(name))
        if v is not None and name in STEP_FIELDS:
            v = int(v)
            if v <= 0:
                v = None
        if v is None:
            bad.append(name)
        else:
            values[name] = v

    if bad:
        logger.warning(f"Rejected parameters: {', '.join(bad)}")
        raise InvalidParameter(bad)

    if max_total_steps is not None and values["total_steps"] > max_total_steps:
        logger.warning(f"Rejected total_steps={values['total_steps']} (limit {max_total_steps})")
        raise InvalidParameter(
            ["total_steps"], f"total_steps must not exceed {max_total_steps}"
        )

    return CurveParameters(**values)
