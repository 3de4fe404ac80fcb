#!/usr/bin/env python3
"""
app.py — Stepper S-Curve Calculator web service.

Routes:
  POST /api/v1/stepper_curves/calculate  → JSON envelope with the full profile
  POST /api/v1/stepper_curves/export     → same profile as a CSV download
  GET  /api/v1/stepper_curves/defaults   → starting values for the form
  GET  /health

Request body (flat, or wrapped under "stepper_curve"):
  total_steps, acc_steps, dec_steps, min_delay, max_delay — all required, > 0.

Responses:
  200 {"success": true,  "data": {...}, "parameters": {...}}
  400 {"success": false, "error": "Missing or invalid parameters"}
  500 {"success": false, "error": "<underlying message>"}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from curve_generator import CurveGenerator, CurveResult
from profile_export import CSV_FILENAME, failure_envelope, success_envelope, to_csv
from settings import load_settings
from validation import REQUIRED_FIELDS, InvalidParameter, parse_parameters, unwrap

settings = load_settings()

logging.basicConfig(level=getattr(logging, str(settings["log_level"]).upper(), logging.INFO))
logger = logging.getLogger("StepperCurve")

app       = FastAPI(title="Stepper S-Curve Calculator")
generator = CurveGenerator()


class ComputationError(RuntimeError):
    """Unexpected fault while computing a profile from validated parameters."""


# ─── CALCULATION ──────────────────────────────────────────────────────────────
def calculate_profile(payload) -> CurveResult:
    """Validate a request body and run the generator. Blocking; CPU only."""
    params = parse_parameters(payload, max_total_steps=settings.get("max_total_steps"))
    try:
        result = generator.compute(params)
    except Exception as e:
        raise ComputationError(str(e)) from e
    logger.info(
        f"Profile: {result.total_steps} steps, acc={result.acc_steps_used} "
        f"dec={result.dec_steps_used}, total_time={result.total_time}"
    )
    return result


def echo_parameters(payload) -> dict:
    """Required fields exactly as the client sent them."""
    data = unwrap(payload)
    return {k: data.get(k) for k in REQUIRED_FIELDS}


async def _read_body(request: Request):
    try:
        return await request.json()
    except ValueError:
        # JSONDecodeError, UnicodeDecodeError and the int-digit limit all land here
        raise InvalidParameter(REQUIRED_FIELDS, "Request body is not valid JSON")


def _bad_request(e: InvalidParameter) -> JSONResponse:
    logger.warning(f"Bad request: {e} ({', '.join(e.fields)})")
    return JSONResponse(failure_envelope(str(e)), status_code=400)


def _server_error(e: ComputationError) -> JSONResponse:
    logger.error(f"Computation failed: {e}", exc_info=True)
    return JSONResponse(failure_envelope(str(e)), status_code=500)


# ─── ROUTES ───────────────────────────────────────────────────────────────────
@app.post("/api/v1/stepper_curves/calculate")
async def calculate(request: Request):
    try:
        payload = await _read_body(request)
        result = await run_in_threadpool(calculate_profile, payload)
    except InvalidParameter as e:
        return _bad_request(e)
    except ComputationError as e:
        return _server_error(e)
    return JSONResponse(success_envelope(result, echo_parameters(payload)))


@app.post("/api/v1/stepper_curves/export")
async def export_csv(request: Request):
    try:
        payload = await _read_body(request)
        result = await run_in_threadpool(calculate_profile, payload)
    except InvalidParameter as e:
        return _bad_request(e)
    except ComputationError as e:
        return _server_error(e)
    return Response(
        content=to_csv(result),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@app.get("/api/v1/stepper_curves/defaults")
async def defaults():
    return JSONResponse(settings["default_parameters"])


@app.get("/health")
async def health():
    return JSONResponse({"status": "ok"})


def main():
    import uvicorn
    uvicorn.run(app, host=settings["host"], port=int(settings["port"]))


if __name__ == "__main__":
    main()
