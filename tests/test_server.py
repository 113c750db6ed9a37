"""Tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient
from fastapi.exceptions import HTTPException
from httpx import HTTPStatusError, Request, Response

from client.ip_control_client import IpControl
from database.db import DataBase
from routers.base_router import BaseRouter
from server.server import AppServer

from conftest import ProviderStub, make_resolver

ADDR = "203.0.113.10"


@pytest.fixture
def stub():
    return ProviderStub({"lookup-one.test": Response(200, json={"ip": ADDR})})


@pytest.fixture
def client(db_url, stub):
    control = IpControl(database=DataBase(db_url), resolver=make_resolver(stub), max_accounts=1)
    app = AppServer(ip_control=control).build()
    with TestClient(app) as test_client:
        yield test_client


class TestHome:
    def test_welcome(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["docs"] == "/docs"

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "OK"
        assert resp.json()["db_ready"] is True

    def test_config(self, client):
        resp = client.get("/config")
        assert resp.status_code == 200
        assert resp.json()["ip_max_accounts"] == 1
        assert resp.json()["lookup_providers"][0] == "https://lookup-one.test/?format=json"

    def test_metrics(self, client):
        client.get("/health")
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert "fastapi_requests_total" in resp.text


class TestIpRoutes:
    def test_resolve(self, client):
        resp = client.get("/ip/resolve")
        assert resp.status_code == 200
        assert resp.json()["addr"] == ADDR
        assert resp.json()["available"] is True

    def test_resolve_unavailable(self, db_url, down_stub):
        control = IpControl(database=DataBase(db_url), resolver=make_resolver(down_stub))
        with TestClient(AppServer(ip_control=control).build()) as test_client:
            resp = test_client.get("/ip/resolve")

        assert resp.status_code == 200
        assert resp.json()["available"] is False
        assert resp.json()["addr"] is None
        assert len(resp.json()["failed_providers"]) == 3

    def test_check_empty(self, client):
        resp = client.get("/ip/check", params={"addr": ADDR})
        assert resp.status_code == 200
        assert resp.json() == {"addr": ADDR, "exists": False, "count": 0, "failed": False, "accounts": []}

    def test_check_invalid_address(self, client):
        resp = client.get("/ip/check", params={"addr": "not-an-ip"})
        assert resp.status_code == 422

    def test_record_and_check(self, client):
        client.post("/accounts", json={"id": "acc-1", "full_name": "Jane Doe", "addr": "198.51.100.7"})

        resp = client.put("/ip/record", json={"account_id": "acc-1", "addr": ADDR})
        assert resp.status_code == 200
        assert resp.json() == {"result": True}

        check = client.get("/ip/check", params={"addr": ADDR}).json()
        assert check["exists"] is True
        assert check["count"] == 1
        assert check["accounts"][0]["id"] == "acc-1"

    def test_record_unknown_account(self, client):
        resp = client.put("/ip/record", json={"account_id": "nobody", "addr": ADDR})
        assert resp.status_code == 200
        assert resp.json() == {"result": False}

    def test_screen(self, client):
        resp = client.post("/ip/screen", json={})
        assert resp.status_code == 200
        assert resp.json() == {"verdict": "allow", "allowed": True, "addr": ADDR, "count": 0}


class TestAccountsRoutes:
    def test_register(self, client):
        resp = client.post("/accounts", json={"id": "acc-1", "full_name": "Jane Doe"})

        assert resp.status_code == 201
        body = resp.json()
        assert body["account"]["id"] == "acc-1"
        assert body["account"]["signup_ip"] == ADDR
        assert body["screening"]["verdict"] == "allow"

    def test_generated_id(self, client):
        resp = client.post("/accounts", json={"full_name": "Jane Doe"})
        assert resp.status_code == 201
        assert resp.json()["account"]["id"]

    def test_second_signup_from_same_address(self, client):
        assert client.post("/accounts", json={"id": "acc-1"}).status_code == 201

        resp = client.post("/accounts", json={"id": "acc-2"})

        assert resp.status_code == 409
        assert resp.json()["error"] == "CONFLICT"
        assert client.get("/accounts/acc-2").status_code == 404

    def test_existing_id(self, client):
        client.post("/accounts", json={"id": "acc-1", "addr": "198.51.100.7"})
        resp = client.post("/accounts", json={"id": "acc-1", "addr": "192.0.2.1"})
        assert resp.status_code == 409

    def test_get_account(self, client):
        client.post("/accounts", json={"id": "acc-1", "full_name": "Jane Doe"})
        resp = client.get("/accounts/acc-1")

        assert resp.status_code == 200
        assert resp.json()["full_name"] == "Jane Doe"
        assert resp.json()["signup_ip"] == ADDR

    def test_get_missing_account(self, client):
        resp = client.get("/accounts/nobody")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NOT_FOUND"


class TestErrorResponses:
    def test_httpx_status_error_keeps_status(self):
        request = Request("GET", "https://lookup-one.test/")
        response = Response(503, content=b"provider down", request=request)
        err = HTTPStatusError("Service Unavailable", request=request, response=response)

        resp = BaseRouter.errorResp(err)

        assert resp.status_code == 503
        assert json.loads(resp.body) == {"error": "provider down"}

    def test_http_exception_keeps_status(self):
        resp = BaseRouter.errorResp(HTTPException(status_code=404, detail="missing"))
        assert resp.status_code == 404
        assert json.loads(resp.body) == {"error": "missing"}

    def test_other_errors_give_500(self):
        resp = BaseRouter.errorResp(RuntimeError("boom"))
        assert resp.status_code == 500
        assert json.loads(resp.body) == {"error": "boom"}
