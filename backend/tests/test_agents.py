from conftest import create_plan

from career_transition.services.personas import PERSONAS, get_persona


def test_list_and_get_agents(client):
    response = client.get("/api/agents")
    assert response.status_code == 200
    ids = [agent["id"] for agent in response.json()["agents"]]
    assert ids == [persona.id for persona in PERSONAS]
    assert "systemPrompt" not in response.json()["agents"][0]

    response = client.get("/api/agents/morgan")
    assert response.status_code == 200
    assert response.json()["name"] == "Morgan"

    response = client.get("/api/agents/nobody")
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Agent not found"


def test_chat_uses_plan_context_and_persists_interaction(client, auth, db, fake_llm):
    create_plan(db, auth["user_id"])
    fake_llm.queue("You've got this!")

    response = client.post(
        "/api/agents/alex/chat",
        json={"message": "I'm nervous about switching."},
        headers=auth["headers"],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["conversationId"] == "alex"
    assert body["message"]["role"] == "assistant"
    assert body["message"]["content"] == "You've got this!"
    system = fake_llm.calls[0]["system"]
    assert system.startswith(get_persona("alex").system_prompt)
    assert "Target Role: Data Analyst" in system


def test_explicit_context_replaces_plan_context(client, auth, db, fake_llm):
    create_plan(db, auth["user_id"])
    fake_llm.queue("Noted.")

    client.post(
        "/api/agents/jordan/chat",
        json={"message": "Check my numbers", "context": {"salary": 90000}},
        headers=auth["headers"],
    )

    system = fake_llm.calls[0]["system"]
    assert "Additional Context" in system
    assert '"salary": 90000' in system
    assert "Target Role" not in system


def test_chat_replays_recent_history(client, auth, fake_llm):
    fake_llm.queue("First answer", "Second answer")
    client.post("/api/agents/sam/chat", json={"message": "First question"}, headers=auth["headers"])
    client.post("/api/agents/sam/chat", json={"message": "Second question"}, headers=auth["headers"])

    assert fake_llm.calls[1]["messages"] == [
        {"role": "user", "content": "First question"},
        {"role": "assistant", "content": "First answer"},
        {"role": "user", "content": "Second question"},
    ]

    response = client.get("/api/agents/sam/conversation", headers=auth["headers"])
    body = response.json()
    assert body["agent"] == {"id": "sam", "name": "Sam", "role": get_persona("sam").role}
    assert [item["message"] for item in body["interactions"]] == ["First question", "Second question"]


def test_chat_validation(client, auth, fake_llm):
    response = client.post("/api/agents/alex/chat", json={"message": ""}, headers=auth["headers"])
    assert response.status_code == 400

    response = client.post("/api/agents/nobody/chat", json={"message": "hi"}, headers=auth["headers"])
    assert response.status_code == 404
    assert fake_llm.calls == []
