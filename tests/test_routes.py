import json

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from construct_chat.routes import constructs, llm as llm_routes


def kobold_handler(request):
    return httpx.Response(200, json={"results": [{"text": "Hello\nBob: again\nYou: no"}]})


@pytest.fixture
def client_for(make_gateway):
    def factory(handler=kobold_handler, **values):
        llm_routes.set_gateway(make_gateway(handler, **values))
        app = FastAPI()
        app.include_router(llm_routes.router)
        app.include_router(constructs.router)
        return TestClient(app)

    return factory


def test_generate_text(client_for):
    client = client_for(endpoint="localhost:5001", endpointType="Kobold")
    response = client.post("/api/generate-text", json={"prompt": "Hi", "configuredName": "Alice"})

    assert response.status_code == 200
    assert response.json() == {"results": ["Hello\nBob: again\nYou: no"], "prompt": "Hi"}


def test_generate_text_soft_failure(client_for):
    client = client_for(endpoint="", endpointType="Kobold")
    response = client.post("/api/generate-text", json={"prompt": "Hi"})

    assert response.status_code == 200
    assert response.json() == {"results": None, "error": "Invalid endpoint.", "prompt": "Hi"}


def test_generate_text_transport_error(client_for):
    client = client_for(lambda request: httpx.Response(503), endpoint="localhost:5001", endpointType="Kobold")
    response = client.post("/api/generate-text", json={"prompt": "Hi"})

    assert response.status_code == 502
    assert "HTTPStatusError" in response.json()["error"]


def test_instruct_prompt(client_for):
    client = client_for()
    response = client.post("/api/get-instruct-prompt", json={"instruction": "Say hi"})
    assert response.json() == "### Instruction:\nSay hi\n\n### Response:\n"


def test_connection_information_round_trip(client_for):
    client = client_for()
    client.post(
        "/api/llm/connection-information",
        json={"endpoint": "localhost:5000", "endpointType": "Ooba", "password": "pw"},
    )
    info = client.get("/api/llm/connection-information").json()

    assert info["endpoint"] == "localhost:5000"
    assert info["endpointType"] == "Ooba"
    assert info["password"] == "pw"
    assert info["settings"]["max_length"] == 350


def test_connection_presets(client_for):
    client = client_for()
    client.post("/api/connections/presets", json={"preset": {"_id": "p1", "name": "Local", "endpoint": "x"}})
    presets = client.get("/api/connections/presets").json()
    assert [p["_id"] for p in presets] == ["p1"]

    client.post("/api/connections/current-preset", json={"preset": "p1"})
    assert client.get("/api/connections/current-preset").json() == "p1"

    response = client.request("DELETE", "/api/connections/presets", json={"preset": "p1"})
    assert response.json() == []


def test_settings_preset_without_id(client_for):
    client = client_for()
    response = client.post("/api/settings/presets", json={"preset": {"name": "No id"}})
    assert response.status_code == 400


def test_palm_model(client_for):
    client = client_for()
    client.post("/api/palm/model", json={"model": "models/text-bison-002"})
    assert client.get("/api/palm/model").json() == {"model": "models/text-bison-002"}


def test_break_up_commands_follows_multi_line(client_for):
    client = client_for()
    body = {"charName": "Bob", "commandString": "Hello\nBob: again\nYou: no", "user": "You"}

    assert client.post("/api/constructs/break-up-commands", json=body).json() == "Hello"

    client.post("/api/constructs/multi-line", json={"doMultiLine": True})
    assert client.get("/api/constructs/multi-line").json() is True
    assert client.post("/api/constructs/break-up-commands", json=body).json() == "Hello\nagain"


def test_continue_chat(client_for):
    client = client_for(endpoint="localhost:5001", endpointType="Kobold", doMultiLine=True)
    response = client.post(
        "/api/constructs/continue-chat",
        json={
            "construct": {"_id": "bob-1", "name": "Bob", "background": "B"},
            "chatLog": {"_id": "c1", "messages": [{"user": "You", "text": "hi"}]},
            "currentUser": "You",
        },
    )
    assert response.json() == {"reply": "Hello\nagain"}


def test_character_prompt(client_for):
    client = client_for()
    response = client.post(
        "/api/constructs/character-prompt",
        json={"construct": {"name": "Bob", "background": "B", "personality": "P"}},
    )
    assert response.json() == "B\nP\n"


def test_status_apology(client_for):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = client_for(handler)
    response = client.post("/api/get-status", json={"endpoint": "", "endpointType": "Horde"})
    assert response.json() == "There was an issue checking the endpoint status. Please try again."


def test_tokenizer_setting(client_for):
    client = client_for()
    assert client.get("/api/settings/tokenizer").json() == {"tokenizer": "LLaMA"}

    response = client.post("/api/settings/tokenizer", json={"tokenizer": "GPT"})
    assert response.json() == {"tokenizer": "GPT"}
    assert client.get("/api/settings/tokenizer").json() == {"tokenizer": "GPT"}

    assert client.post("/api/settings/tokenizer", json={"tokenizer": "BPE"}).status_code == 422


def test_generate_text_with_empty_stop_list(client_for):
    payloads = []

    def handler(request):
        payloads.append(json.loads(request.content))
        return kobold_handler(request)

    client = client_for(handler, endpoint="localhost:5001", endpointType="Kobold", stopBrackets=False)
    client.post("/api/generate-text", json={"prompt": "Hi", "configuredName": "Alice", "stopList": []})

    assert payloads[0]["stop_sequence"] == ["You:"]
