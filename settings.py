#!/usr/bin/env python3
"""
settings.py — Service configuration for the stepper S-curve calculator.

Defaults below are overlaid by a JSON file (path in STEPPER_CURVE_CONFIG,
otherwise ~/.stepper_curve.json) and then by a few environment variables.
A missing or unreadable file is not fatal: the defaults are kept.
"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger("StepperCurve.Settings")

CONFIG_ENV   = "STEPPER_CURVE_CONFIG"
CONFIG_FILE  = Path.home() / ".stepper_curve.json"

_DEFAULTS = {
    "host":            "0.0.0.0",
    "port":            8000,
    "log_level":       "INFO",
    "max_total_steps": 100000,   # upper bound on a single request
    # Values the browser form starts with (delays in microseconds)
    "default_parameters": {
        "total_steps": 100,
        "acc_steps":   20,
        "dec_steps":   20,
        "min_delay":   500,
        "max_delay":   5000,
    },
}

_ENV_OVERRIDES = {
    "STEPPER_CURVE_HOST":      ("host", str),
    "STEPPER_CURVE_PORT":      ("port", int),
    "STEPPER_CURVE_LOG_LEVEL": ("log_level", str),
}


def config_path() -> Path:
    env = os.environ.get(CONFIG_ENV)
    return Path(env).expanduser() if env else CONFIG_FILE


def load_settings(path=None) -> dict:
    """Return a fresh settings dict: defaults <- JSON file <- environment."""
    s = json.loads(json.dumps(_DEFAULTS))   # deep copy
    path = Path(path) if path is not None else config_path()

    if path.exists():
        try:
            saved = json.loads(path.read_text())
            if not isinstance(saved, dict):
                raise ValueError("top-level JSON value is not an object")
            for k in _DEFAULTS:
                if k not in saved:
                    continue
                if k == "default_parameters" and isinstance(saved[k], dict):
                    s[k].update({p: v for p, v in saved[k].items() if p in s[k]})
                else:
                    s[k] = saved[k]
            logger.info(f"Settings loaded from {path}")
        except Exception as e:
            logger.warning(f"Settings load failed ({path}): {e}")

    for env, (key, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env)
        if raw is None:
            continue
        try:
            s[key] = cast(raw)
        except ValueError:
            logger.warning(f"Ignoring {env}={raw!r}: not a valid {cast.__name__}")

    return s
