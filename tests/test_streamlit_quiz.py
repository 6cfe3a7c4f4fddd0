from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).resolve().parent.parent / "app_streamlit.py")


@pytest.fixture
def app(monkeypatch):
    # Nothing listens here, so the page uses its local fallbacks
    monkeypatch.setenv("HEALTHBUDDY_API_URL", "http://127.0.0.1:9")
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    return at.run()


def quiz_radio(at):
    return next(r for r in at.radio if r.key and r.key.startswith("quiz-"))


def click(at, label):
    return next(b for b in at.button if b.label == label).click().run()


def answer_quiz(at, first_answer, max_steps=10):
    asked = []
    quiz_radio(at).set_value(first_answer)
    for _ in range(max_steps):
        if any(b.label == "Start over" for b in at.button):
            return asked
        radio = quiz_radio(at)
        asked.append(radio.key.split("-", 2)[2])
        at = click(at, "Next")
        assert not at.exception
    pytest.fail(f"quiz did not finish after {max_steps} steps: {asked}")


@pytest.mark.parametrize("symptom, expected", [
    ("Other", ["symptom-type", "location", "severity", "duration", "additional"]),
    ("Fever", ["symptom-type", "fever-severity", "duration", "additional"]),
    ("Injury", ["symptom-type", "location", "injury-mechanism", "injury-signs"]),
])
def test_quiz_reaches_advice(app, symptom, expected):
    asked = answer_quiz(app, symptom)
    assert asked == expected
    assert app.session_state["quiz_advice"] is not None
    assert app.session_state["history"][0]["symptoms"].startswith(f"I have {symptom.lower()}")


def test_start_over_resets_quiz(app):
    answer_quiz(app, "Other")
    at = click(app, "Start over")
    assert at.session_state["quiz_step"] == 0
    assert at.session_state["quiz_answers"] == {}
    assert quiz_radio(at).key == "quiz-0-symptom-type"
