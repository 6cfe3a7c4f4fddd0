from rule_based import classify
from user_store import UserStore


def test_index(client):
    assert b"HealthBuddy" in client.get("/").data


def test_advice_without_providers_matches_classifier(client):
    resp = client.post("/api/symptom-advice", json={"symptomDescription": "I have a headache"})
    assert resp.status_code == 200
    assert resp.get_json() == classify("I have a headache").to_json()


def test_advice_with_image(client):
    resp = client.post("/api/symptom-advice", json={"symptomDescription": "chest pain", "imageData": "aGk="})
    assert resp.get_json() == classify("", True).to_json()


def test_advice_from_provider(make_client, fake_provider):
    client = make_client(providers=[fake_provider(reply=RuntimeError("x")), fake_provider(reply="Rest well.")])
    data = client.post("/api/symptom-advice", json={"symptomDescription": "tummy"}).get_json()
    assert data["explanation"] == "Rest well."
    assert data["severity"] == "moderate"


def test_missing_description(client):
    for body in [{}, {"symptomDescription": ""}, {"symptomDescription": "   "}]:
        resp = client.post("/api/symptom-advice", json=body)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Symptom description is required"}


def test_invalid_json(client):
    resp = client.post("/api/symptom-advice", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid JSON format"


def test_too_large(client):
    resp = client.post("/api/symptom-advice",
                       json={"symptomDescription": "rash", "imageData": "a" * (1024 * 1024 + 1)})
    assert resp.status_code == 413
    assert "too large" in resp.get_json()["error"]


def test_rate_limited_per_ip(client):
    headers = {"X-Forwarded-For": "10.0.0.1"}
    for _ in range(100):
        assert client.post("/api/symptom-advice", json={"symptomDescription": "cough"},
                           headers=headers).status_code == 200
    resp = client.post("/api/symptom-advice", json={"symptomDescription": "cough"}, headers=headers)
    assert resp.status_code == 429
    other = client.post("/api/symptom-advice", json={"symptomDescription": "cough"},
                        headers={"X-Forwarded-For": "10.0.0.2"})
    assert other.status_code == 200


def test_chain_crash_still_returns_advice(make_client, monkeypatch):
    import app as app_module

    def boom(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(app_module, "get_advice", boom)
    client = make_client()
    resp = client.post("/api/symptom-advice", json={"symptomDescription": "nausea"})
    assert resp.status_code == 200
    assert resp.get_json() == classify("nausea").to_json()


def test_auth_flow(make_client):
    store = UserStore()
    client = make_client(user_store=store)

    assert client.get("/api/auth").get_json() == {"authenticated": False}

    resp = client.post("/api/auth", json={"action": "register", "username": "sam", "password": "pw"})
    assert resp.get_json() == {"success": True, "message": "Account created successfully"}
    assert client.get("/api/auth").get_json() == {"authenticated": True, "username": "sam", "historyCount": 0}

    client.post("/api/symptom-advice", json={"symptomDescription": "chest pain"})
    assert client.get("/api/auth").get_json()["historyCount"] == 1
    assert store.history("sam")[0]["severity"] == "emergency"

    assert client.post("/api/auth", json={"action": "logout"}).get_json()["success"] is True
    assert client.get("/api/auth").get_json() == {"authenticated": False}

    resp = client.post("/api/auth", json={"action": "login", "username": "sam", "password": "nope"})
    assert resp.status_code == 401
    resp = client.post("/api/auth", json={"action": "login", "username": "sam", "password": "pw"})
    assert resp.get_json()["message"] == "Logged in successfully"
    assert client.get("/api/auth").get_json()["username"] == "sam"


def test_auth_errors(client):
    client.post("/api/auth", json={"action": "register", "username": "sam", "password": "pw"})
    resp = client.post("/api/auth", json={"action": "register", "username": "sam", "password": "pw"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Username already exists"

    assert client.post("/api/auth", json={"action": "dance"}).status_code == 400
    assert client.post("/api/auth", json={}).status_code == 400
    assert client.post("/api/auth", json={"action": "register", "username": "x"}).status_code == 400


def test_delete_account(make_client):
    store = UserStore()
    client = make_client(user_store=store)
    client.post("/api/auth", json={"action": "register", "username": "sam", "password": "pw"})

    resp = client.post("/api/auth", json={"action": "delete"})
    assert resp.get_json() == {"success": True, "message": "Account deleted"}
    assert not store.exists("sam")
    assert client.get("/api/auth").get_json() == {"authenticated": False}

    resp = client.post("/api/auth", json={"action": "login", "username": "sam", "password": "pw"})
    assert resp.status_code == 401
    resp = client.post("/api/auth", json={"action": "delete"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Not logged in"


def test_unknown_session_user_is_logged_out(make_client):
    client = make_client()
    with client.session_transaction() as sess:
        sess["username"] = "ghost"
    assert client.get("/api/auth").get_json() == {"authenticated": False}


def test_next_questions(client):
    data = client.post("/api/next-questions", json={"answers": {"symptom-type": "Fever"}}).get_json()
    assert [q["id"] for q in data["questions"]] == ["fever-severity", "duration", "additional"]

    data = client.post("/api/next-questions", data="junk", content_type="application/json").get_json()
    assert data["questions"][0]["id"] == "location"
