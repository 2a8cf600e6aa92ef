"""Shared fixtures: a fresh store and an engine client over a mock transport."""

import json
from typing import Callable, List

import httpx
import pytest

from tritan.workflow.engine_client import EngineClient
from tritan.workflow.graph_store import GraphStore

ENGINE_URL = "http://engine.test"


class RecordingEngine:
    """Mock transport handler that records requests and replays a responder."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self) -> EngineClient:
        return EngineClient(ENGINE_URL, timeout=5.0, transport=httpx.MockTransport(self))


def refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


@pytest.fixture
def store():
    return GraphStore()


@pytest.fixture
def engine_factory():
    def _make(responder):
        return RecordingEngine(responder)
    return _make


@pytest.fixture
def offline_engine():
    return RecordingEngine(refuse)
