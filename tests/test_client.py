import json
from datetime import date
from unittest.mock import MagicMock

import requests

from client import HealthBuddyClient, export_history
from pydantic_models import Severity
from quiz_rules import FEVER_QUESTIONS
from rule_based import classify


def make_response(payload, status=200):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status
    resp.ok = status < 400
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


def make_client(*responses):
    session = MagicMock(spec=requests.Session)
    session.post.side_effect = list(responses)
    return HealthBuddyClient("http://api.test/", session=session), session


def test_get_symptom_advice_from_api():
    payload = classify("headache").to_json()
    api, session = make_client(make_response(payload))

    advice = api.get_symptom_advice("headache", image_data="aGk=")

    assert advice == classify("headache")
    url = session.post.call_args.args[0]
    assert url == "http://api.test/api/symptom-advice"
    assert session.post.call_args.kwargs["json"] == {"symptomDescription": "headache", "imageData": "aGk="}


def test_get_symptom_advice_falls_back_locally():
    api, _ = make_client(requests.ConnectionError("offline"))
    assert api.get_symptom_advice("I have chest pain").severity == Severity.EMERGENCY

    api, _ = make_client(make_response({"error": "Too many requests"}, status=429))
    assert api.get_symptom_advice("tummy") == classify("tummy")

    api, _ = make_client(make_response({"severity": "unknown"}))
    assert api.get_symptom_advice("rash", image_data="x") == classify("rash", True)


def test_fetch_next_questions():
    payload = {"questions": [q.model_dump() for q in FEVER_QUESTIONS]}
    api, _ = make_client(make_response(payload))
    assert api.fetch_next_questions({"symptom-type": "Fever"}) == FEVER_QUESTIONS

    api, _ = make_client(requests.Timeout("slow"))
    assert api.fetch_next_questions({"symptom-type": "Fever"}) == FEVER_QUESTIONS


def test_auth_calls():
    api, session = make_client(
        make_response({"success": True, "message": "Account created successfully"}),
        make_response({"error": "Invalid credentials"}, status=401),
    )
    assert api.register("sam", "pw")["success"] is True
    assert api.login("sam", "bad") == {"success": False, "error": "Invalid credentials"}
    assert session.post.call_args.kwargs["json"] == {"action": "login", "username": "sam", "password": "bad"}


def test_status_when_api_down():
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("offline")
    api = HealthBuddyClient(session=session)
    assert api.status() == {"authenticated": False}


def test_delete_account():
    api, session = make_client(
        make_response({"success": True, "message": "Account deleted"}),
        make_response({"error": "Not logged in"}, status=401),
    )
    assert api.delete_account() == {"success": True, "message": "Account deleted"}
    assert session.post.call_args.kwargs["json"] == {"action": "delete", "username": "", "password": ""}
    assert api.delete_account() == {"success": False, "error": "Not logged in"}


def test_export_history():
    history = [{"timestamp": "2024-05-01 09:30", "symptoms": "sore throat", "severity": "mild",
                "explanation": "Sip warm drinks."}]
    file_name, data = export_history(history, today=date(2024, 5, 1))
    assert file_name == "health-history-2024-05-01.json"
    assert json.loads(data) == history

    assert export_history([])[0] == f"health-history-{date.today().isoformat()}.json"
    assert json.loads(export_history([])[1]) == []
