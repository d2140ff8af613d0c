from __future__ import annotations

import importlib
import warnings

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from negachess.config import Settings
from negachess.protocol.http import error
from negachess.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app(Settings())

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    body = r.json()
    err = body["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"] == r.headers["x-request-id"]


def test_validation_error_envelope() -> None:
    client = TestClient(create_app(Settings()))
    game_id = client.post("/api/games").json()["game_id"]
    r = client.post(f"/api/games/{game_id}/search", json={"depth": 0})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert any(fe["field"].endswith("depth") for fe in err["field_errors"])


def test_status_table_loads_without_deprecation_warnings() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        module = importlib.reload(error)
    assert module.STATUS_CODES[422] == "unprocessable_entity"
