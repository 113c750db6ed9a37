"""Fixtures for IP control tests: stubbed lookup providers and a temporary accounts store."""

from __future__ import annotations

from typing import Callable

import pytest
from httpx import AsyncClient, MockTransport, Request, Response

from client.address_resolver_client import AddressResolver
from client.ip_control_client import IpControl
from database.db import DataBase
from models.dto.lookup_provider_dto import LookupProviderDto

PROVIDERS = [
    LookupProviderDto(endpoint_url="https://lookup-one.test/?format=json"),
    LookupProviderDto(endpoint_url="https://lookup-two.test/ip.json"),
    LookupProviderDto(endpoint_url="https://lookup-three.test/json/"),
]


class ProviderStub:
    """MockTransport handler answering per provider host and recording calls.

    An answer is a Response, an exception instance (raised) or a callable
    taking the request.
    """

    def __init__(self, answers: dict[str, Response | Exception | Callable[[Request], Response]]):
        self.answers = answers
        self.calls: list[str] = []
        self.requests: list[Request] = []

    def __call__(self, request: Request) -> Response:
        host = request.url.host
        self.calls.append(host)
        self.requests.append(request)
        answer = self.answers.get(host, Response(404))
        if isinstance(answer, Exception):
            raise answer
        if callable(answer) and not isinstance(answer, Response):
            return answer(request)
        # fresh copy, a provider may be asked again by a later resolution
        return Response(answer.status_code, headers=answer.headers, content=answer.content)


def make_resolver(
    stub, providers: list[LookupProviderDto] | None = None, timeout: float | None = None
) -> AddressResolver:
    client = AsyncClient(transport=MockTransport(stub), timeout=5.0)
    return AddressResolver(
        providers=providers if providers is not None else PROVIDERS, client=client, timeout=timeout
    )


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'ipc-test.sqlite'}"


@pytest.fixture
async def database(db_url):
    """Accounts store on a temporary SQLite file, tables created."""
    store = DataBase(db_url)
    await store.setup()
    yield store
    await store.close()


@pytest.fixture
def ok_stub():
    return ProviderStub({"lookup-one.test": Response(200, json={"ip": "203.0.113.10"})})


@pytest.fixture
def down_stub():
    return ProviderStub({
        "lookup-one.test": Response(503),
        "lookup-two.test": Response(500),
        "lookup-three.test": Response(502),
    })


@pytest.fixture
def ip_control(database, ok_stub):
    return IpControl(database=database, resolver=make_resolver(ok_stub), max_accounts=1)
