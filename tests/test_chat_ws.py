import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from conftest import make_token
from pairchat.fastapi_app import create_fastapi_app


def auth(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "sessions": 0}


def test_metrics_endpoint(client):
    res = client.get("/metrics")
    assert res.status_code == 200
    assert "chat_active_sessions" in res.text
    assert "chat_messages_total" in res.text


def test_expired_token_is_refused_at_handshake(client):
    token = make_token("u1", expires_in=-30)
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws", headers={"Authorization": f"Bearer {token}"}):
            pass
    assert exc.value.code == 1008


def test_missing_token_is_refused_at_handshake(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws"):
            pass
    assert exc.value.code == 1008


def test_two_party_chat_flow(client):
    with client.websocket_connect("/ws", headers=auth("u1")) as ws1:
        ws1.send_json({"event": "joinRoom", "data": "u2"})
        joined = ws1.receive_json()
        assert joined["event"] == "joinedRoom"
        room = joined["data"]["roomId"]
        assert ws1.receive_json() == {"event": "chatHistory", "data": {"history": []}}

        # Browsers pass the token in the query string
        with client.websocket_connect(f"/ws?token={make_token('u2')}") as ws2:
            ws2.send_json({"event": "joinRoom", "data": "u1"})
            assert ws2.receive_json()["data"]["roomId"] == room
            assert ws2.receive_json()["event"] == "chatHistory"
            assert ws1.receive_json()["event"] == "chatHistory"

            ws1.send_json({"event": "chatToServer", "data": {"room": room, "message": "hi"}})
            expected = {
                "event": "chatToClient",
                "data": {"room": room, "message": "hi", "sender": "u1"},
            }
            assert ws1.receive_json() == expected
            assert ws2.receive_json() == expected

            ws2.send_json({"event": "getChatHistory", "data": {"room": room}})
            history = ws2.receive_json()
            assert history["event"] == "chatHistory"
            assert history["data"]["room"] == room
            [message] = history["data"]["history"]
            assert message["message"] == "hi"
            assert message["senderId"] == "u1"
            assert message["receiverId"] == "u2"
            assert message["seq"] == 1


def test_history_of_foreign_room_closes_connection(client):
    with client.websocket_connect("/ws", headers=auth("u1")) as ws1:
        ws1.send_json({"event": "joinRoom", "data": "u2"})
        room = ws1.receive_json()["data"]["roomId"]
        ws1.receive_json()

        with client.websocket_connect("/ws", headers=auth("u3")) as ws3:
            ws3.send_json({"event": "getChatHistory", "data": {"room": room}})
            with pytest.raises(WebSocketDisconnect) as exc:
                ws3.receive_json()
            assert exc.value.code == 1008


def test_malformed_frame_closes_with_protocol_error(client):
    with client.websocket_connect("/ws", headers=auth("u1")) as ws:
        ws.send_text("this is not json")
        with pytest.raises(WebSocketDisconnect) as exc:
            ws.receive_json()
        assert exc.value.code == 1002


def test_unknown_event_gets_error_reply(client):
    with client.websocket_connect("/ws", headers=auth("u1")) as ws:
        ws.send_json({"event": "dance", "data": None})
        reply = ws.receive_json()
        assert reply == {"event": "chatError", "data": {"event": "dance", "detail": "Unknown event"}}


def test_prebuilt_services_survive_app_shutdown(app):
    with TestClient(app) as first:
        services = first.app.state.services

    shared = create_fastapi_app(services=services)
    with TestClient(shared) as second:
        assert second.get("/health").json()["sessions"] == 0
    assert shared.state.services is services
