# client.py — HTTP client used by the Streamlit front-end
import json
from datetime import date
from typing import Dict, List, Optional, Tuple

import requests
from pydantic import ValidationError

from logger import get_logger
from pydantic_models import NextQuestionsResponse, QuizQuestion, SymptomAdvice
from quiz_rules import rule_based_next_questions
from rule_based import classify

logger = get_logger(__name__)

API_LOCAL = "http://127.0.0.1:5000"


class HealthBuddyClient:
    """Talks to the Flask API; keeps the session cookie between calls."""

    def __init__(self, base_url: str = API_LOCAL, timeout: int = 60, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, path: str, payload: dict) -> requests.Response:
        return self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)

    def get_symptom_advice(self, description: str, image_data: Optional[str] = None) -> SymptomAdvice:
        """Advice from the API, or from the local classifier if the API is unreachable."""
        payload = {"symptomDescription": description}
        if image_data:
            payload["imageData"] = image_data
        try:
            resp = self._post("/api/symptom-advice", payload)
            resp.raise_for_status()
            return SymptomAdvice.model_validate(resp.json())
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.warning("Symptom advice API failed, using local advice: %s", e)
            return classify(description, bool(image_data))

    def fetch_next_questions(self, answers: Dict[str, str]) -> List[QuizQuestion]:
        try:
            resp = self._post("/api/next-questions", {"answers": answers})
            resp.raise_for_status()
            return NextQuestionsResponse.model_validate(resp.json()).questions
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.warning("Next-questions API failed, using local questions: %s", e)
            return rule_based_next_questions(answers)

    def _auth(self, action: str, username: str = "", password: str = "") -> dict:
        try:
            resp = self._post("/api/auth", {"action": action, "username": username, "password": password})
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Auth API failed: %s", e)
            return {"success": False, "error": "Authentication service unavailable"}
        if not resp.ok:
            return {"success": False, "error": data.get("error", "Authentication failed")}
        return data

    def register(self, username: str, password: str) -> dict:
        return self._auth("register", username, password)

    def login(self, username: str, password: str) -> dict:
        return self._auth("login", username, password)

    def logout(self) -> dict:
        return self._auth("logout")

    def delete_account(self) -> dict:
        return self._auth("delete")

    def status(self) -> dict:
        try:
            resp = self.session.get(f"{self.base_url}/api/auth", timeout=self.timeout)
            return resp.json()
        except (requests.RequestException, ValueError):
            return {"authenticated": False}


def export_history(history: List[dict], today: Optional[date] = None) -> Tuple[str, str]:
    """File name and pretty-printed JSON for downloading the local history."""
    today = today or date.today()
    return f"health-history-{today.isoformat()}.json", json.dumps(history, indent=2, ensure_ascii=False)
