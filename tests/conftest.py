import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketState

from backend import SignalingBackend


class FakeWebSocket:
    """Stand-in for a FastAPI WebSocket that records every frame sent to it."""

    def __init__(self, fail_on_send: bool = False):
        self.sent = []
        self.application_state = WebSocketState.CONNECTED
        self.fail_on_send = fail_on_send

    async def send_json(self, data):
        if self.fail_on_send:
            raise RuntimeError("Cannot call send once a close message has been sent")
        self.sent.append(data)

    def go_away(self):
        self.application_state = WebSocketState.DISCONNECTED

    def received(self, event):
        return [message["data"] for message in self.sent if message["event"] == event]

    def snapshots(self, kind):
        return [payload["data"] for payload in self.received("broadcast") if payload["event"] == kind]

    def clear(self):
        self.sent.clear()


@pytest.fixture
def make_socket():
    return FakeWebSocket


@pytest.fixture
def backend():
    return SignalingBackend()


@pytest.fixture
def client(monkeypatch):
    import app as app_module

    monkeypatch.setattr(app_module, "signaling_backend", SignalingBackend())
    with TestClient(app_module.app) as test_client:
        yield test_client
    app_module.app.dependency_overrides.clear()
