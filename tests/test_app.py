import csv
import io

import pytest
from fastapi.testclient import TestClient

import app as app_module

CALCULATE = "/api/v1/stepper_curves/calculate"
EXPORT = "/api/v1/stepper_curves/export"

BODY = {
    "stepper_curve": {
        "total_steps": 100,
        "acc_steps": 20,
        "dec_steps": 20,
        "min_delay": 500,
        "max_delay": 5000,
    }
}


@pytest.fixture
def client():
    return TestClient(app_module.app)


def test_calculate_success(client):
    resp = client.post(CALCULATE, json=BODY)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["parameters"] == BODY["stepper_curve"]
    data = body["data"]
    assert len(data["delays"]) == 100
    assert data["delays"][0] == 5000
    assert data["delays"][50] == 500
    assert data["acc_steps"] == 20
    assert data["time_points"][0] == 0


def test_calculate_flat_body(client):
    resp = client.post(CALCULATE, json=BODY["stepper_curve"])
    assert resp.status_code == 200
    assert resp.json()["data"]["total_steps"] == 100


def test_calculate_rejects_missing_field(client):
    params = dict(BODY["stepper_curve"])
    del params["max_delay"]
    resp = client.post(CALCULATE, json={"stepper_curve": params})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Missing or invalid parameters"}


def test_calculate_rejects_non_positive(client):
    params = dict(BODY["stepper_curve"], min_delay=0)
    resp = client.post(CALCULATE, json=params)
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_calculate_rejects_invalid_json(client):
    resp = client.post(CALCULATE, content=b"{nope",
                       headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_calculate_reports_internal_fault(client, monkeypatch):
    def boom(params):
        raise ZeroDivisionError("division by zero")

    monkeypatch.setattr(app_module.generator, "compute", boom)
    resp = client.post(CALCULATE, json=BODY)
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "division by zero"}


def test_export_csv(client):
    resp = client.post(EXPORT, json=BODY)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "stepper_curve_profile.csv" in resp.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0][0] == "Step"
    assert len(rows) == 101


def test_export_rejects_bad_body(client):
    resp = client.post(EXPORT, json={"total_steps": 5})
    assert resp.status_code == 400


def test_defaults_and_health(client):
    defaults = client.get("/api/v1/stepper_curves/defaults").json()
    assert set(defaults) == {"total_steps", "acc_steps", "dec_steps", "min_delay", "max_delay"}
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("digits", [400, 5000])
def test_calculate_rejects_oversized_integer_literal(client, digits):
    raw = ('{"total_steps": 1' + "0" * digits +
           ', "acc_steps": 20, "dec_steps": 20, "min_delay": 500, "max_delay": 5000}')
    resp = client.post(CALCULATE, content=raw.encode(),
                       headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_export_reports_internal_fault(client, monkeypatch):
    def boom(params):
        raise ArithmeticError("overflow in cumulative time")

    monkeypatch.setattr(app_module.generator, "compute", boom)
    resp = client.post(EXPORT, json=BODY)
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "overflow in cumulative time"}
