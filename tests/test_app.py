import httpx

import app as app_module

from credentials import TurnCredentialsClient, get_credentials_client


def receive_broadcast(ws, kind):
    message = ws.receive_json()
    assert message["event"] == "broadcast"
    assert message["data"]["event"] == kind
    return message["data"]["data"]


def test_api_info(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"api": "video-talker-api"}


def test_websocket_register_and_disconnect(client):
    with client.websocket_connect("/ws") as alice:
        ack = alice.receive_json()
        assert ack["event"] == "connection"
        alice_id = ack["data"]["socketId"]

        with client.websocket_connect("/ws") as bob:
            bob_id = bob.receive_json()["data"]["socketId"]

            alice.send_json({"event": "register-new-user", "data": {"username": "alice", "peerId": "p1"}})
            expected = [{"username": "alice", "peerId": "p1", "socketId": alice_id}]
            assert receive_broadcast(alice, "ACTIVE_USERS") == expected
            assert receive_broadcast(alice, "GROUP_CALL_ROOMS") == []
            assert receive_broadcast(bob, "ACTIVE_USERS") == expected
            assert receive_broadcast(bob, "GROUP_CALL_ROOMS") == []

            alice.send_json({
                "event": "pre-offer",
                "data": {"callee": {"socketId": bob_id}, "caller": {"username": "alice"}},
            })
            assert bob.receive_json() == {
                "event": "pre-offer",
                "data": {"callerSocketId": alice_id, "callerUserName": "alice"},
            }

        # bob's teardown is published to alice
        assert receive_broadcast(alice, "ACTIVE_USERS") == expected
        assert receive_broadcast(alice, "GROUP_CALL_ROOMS") == []


def test_websocket_survives_malformed_frames(client):
    with client.websocket_connect("/ws") as ws:
        connection_id = ws.receive_json()["data"]["socketId"]

        ws.send_text("this is not json")
        ws.send_json({"event": "no-such-event", "data": {}})
        ws.send_json({"event": "webRTC-offer", "data": {"offer": {}}})
        ws.send_json({"event": "register-new-user", "data": {"username": "alice"}})

        assert receive_broadcast(ws, "ACTIVE_USERS") == [
            {"username": "alice", "peerId": None, "socketId": connection_id},
        ]


def test_websocket_group_call(client):
    with client.websocket_connect("/ws") as host, client.websocket_connect("/ws") as guest:
        host.receive_json()
        guest.receive_json()

        host.send_json({"event": "group-call-register", "data": {"peerId": "p1", "username": "alice"}})
        rooms = receive_broadcast(host, "GROUP_CALL_ROOMS")
        assert receive_broadcast(guest, "GROUP_CALL_ROOMS") == rooms
        room_id = rooms[0]["roomId"]

        guest.send_json({
            "event": "group-call-join-request",
            "data": {"roomId": room_id, "peerId": "p2", "streamId": "s1"},
        })
        assert host.receive_json() == {
            "event": "group-call-join-request",
            "data": {"peerId": "p2", "streamId": "s1"},
        }

        guest.send_json({"event": "group-call-user-left", "data": {"roomId": room_id, "streamId": "s1"}})
        assert host.receive_json() == {"event": "group-call-user-left", "data": {"streamId": "s1"}}


def test_turn_credentials_returned_in_sdk_shape(client):
    ice_servers = [{"urls": "turn:global.turn.twilio.com:3478", "username": "abc", "credential": "xyz"}]
    body = {
        "account_sid": "AC123",
        "date_created": "Fri, 24 Jul 2015 18:58:19 +0000",
        "date_updated": "Fri, 24 Jul 2015 18:58:19 +0000",
        "ice_servers": ice_servers,
        "password": "xyz",
        "ttl": "86400",
        "username": "abc",
    }
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json=body)

    app_module.app.dependency_overrides[get_credentials_client] = lambda: TurnCredentialsClient(
        "AC123", "secret", base_url="https://turn.test", transport=httpx.MockTransport(handler)
    )

    response = client.get("/api/get-turn-credentials")

    assert response.status_code == 200
    assert response.json() == {
        "token": {
            "accountSid": "AC123",
            "dateCreated": "Fri, 24 Jul 2015 18:58:19 +0000",
            "dateUpdated": "Fri, 24 Jul 2015 18:58:19 +0000",
            "iceServers": ice_servers,
            "password": "xyz",
            "ttl": "86400",
            "username": "abc",
        }
    }
    assert seen[0].method == "POST"
    assert seen[0].url == "https://turn.test/2010-04-01/Accounts/AC123/Tokens.json"
    assert seen[0].headers["authorization"].startswith("Basic ")


def test_turn_credentials_upstream_failure(client):
    app_module.app.dependency_overrides[get_credentials_client] = lambda: TurnCredentialsClient(
        "AC123", "secret", transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"code": 20003}))
    )

    response = client.get("/api/get-turn-credentials")

    assert response.status_code == 502


def test_turn_credentials_not_configured(client):
    app_module.app.dependency_overrides[get_credentials_client] = lambda: TurnCredentialsClient(None, None)

    response = client.get("/api/get-turn-credentials")

    assert response.status_code == 500


def test_websocket_drops_binary_frames(client):
    with client.websocket_connect("/ws") as ws:
        connection_id = ws.receive_json()["data"]["socketId"]

        ws.send_bytes(b"\x00\x01garbage")
        ws.send_json({"event": "register-new-user", "data": {"username": "alice", "peerId": "p1"}})

        assert receive_broadcast(ws, "ACTIVE_USERS") == [
            {"username": "alice", "peerId": "p1", "socketId": connection_id},
        ]
