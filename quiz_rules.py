# quiz_rules.py — quiz question flow and description builder
from typing import Dict, List, Optional, Sequence

from llm_wrapper import Provider, generate_next_questions
from logger import get_logger
from pydantic_models import QuizQuestion

logger = get_logger(__name__)

BASE_QUESTION = QuizQuestion(
    id="symptom-type",
    question="What type of problem are you experiencing?",
    options=["Pain", "Fever", "Cough/Cold", "Stomach Issues", "Skin Problems", "Injury", "Other"],
    category="symptom",
)

FEVER_QUESTIONS = [
    QuizQuestion(
        id="fever-severity",
        question="How high is the fever?",
        options=[
            "Low (99–100.4°F / 37.2–38°C)",
            "Moderate (100.4–102.2°F / 38–39°C)",
            "High (102.2–104°F / 39–40°C)",
            "Very High (>104°F / >40°C)",
        ],
        category="severity",
    ),
    QuizQuestion(
        id="duration",
        question="How long has the fever been present?",
        options=["Less than 24 hours", "1–2 days", "3–4 days", "5+ days"],
        category="duration",
    ),
    QuizQuestion(
        id="additional",
        question="Any of these with the fever?",
        options=["Stiff neck", "Severe headache", "Rash", "Trouble breathing", "None of these"],
        category="additional",
    ),
]

COUGH_QUESTIONS = [
    QuizQuestion(
        id="cough-type",
        question="What best describes the cough/cold?",
        options=["Dry cough", "Wet/productive cough", "Sore throat", "Runny or stuffy nose"],
        category="symptom-detail",
    ),
    QuizQuestion(
        id="duration",
        question="How long have you had these symptoms?",
        options=["< 24 hours", "1–3 days", "4–7 days", "Over a week"],
        category="duration",
    ),
    QuizQuestion(
        id="additional",
        question="Any of these additional symptoms?",
        options=["Fever", "Chest pain", "Wheezing", "None of these"],
        category="additional",
    ),
]

STOMACH_QUESTIONS = [
    QuizQuestion(
        id="gi-symptoms",
        question="Which of these do you have?",
        options=["Nausea", "Vomiting", "Diarrhea", "Constipation", "Loss of appetite"],
        category="symptom-detail",
    ),
    QuizQuestion(
        id="gi-pain-type",
        question="What type of stomach discomfort?",
        options=["Cramping", "Sharp pain", "Dull ache", "Burning", "No pain"],
        category="symptom-detail",
    ),
    QuizQuestion(
        id="duration",
        question="How long have you had these symptoms?",
        options=["Just started", "A few hours", "A day or two", "Several days", "A week or more"],
        category="duration",
    ),
    QuizQuestion(
        id="additional",
        question="Any of these additional symptoms?",
        options=["Fever", "Dizziness", "Blood in stool", "Severe dehydration", "None of these"],
        category="additional",
    ),
]

# Pain, injury, skin and anything else start with body location
DEFAULT_QUESTIONS = [
    QuizQuestion(
        id="location",
        question="Where on your body is the problem?",
        options=["Head", "Throat", "Chest", "Stomach", "Arm/Hand", "Leg/Foot", "Back", "All over"],
        category="location",
    ),
    QuizQuestion(
        id="severity",
        question="How bad is it?",
        options=[
            "Mild - annoying but manageable",
            "Moderate - uncomfortable",
            "Severe - very painful",
            "Emergency - can't function",
        ],
        category="severity",
    ),
    QuizQuestion(
        id="duration",
        question="How long have you had this problem?",
        options=["Just started (less than 1 hour)", "A few hours", "A day or two", "Several days",
                 "A week or more"],
        category="duration",
    ),
    QuizQuestion(
        id="additional",
        question="Are you experiencing any of these additional symptoms?",
        options=["Fever", "Nausea/Vomiting", "Dizziness", "Difficulty breathing", "None of these"],
        category="additional",
    ),
]

QUESTIONS_BY_SYMPTOM = {
    "fever": FEVER_QUESTIONS,
    "cough/cold": COUGH_QUESTIONS,
    "stomach issues": STOMACH_QUESTIONS,
}


def _location_follow_ups(symptom: str, location: str) -> List[QuizQuestion]:
    if symptom == "pain":
        return [
            QuizQuestion(
                id="pain-character",
                question=f"What does the {location or 'pain'} feel like?",
                options=["Sharp", "Dull/aching", "Throbbing", "Burning", "Cramping"],
            ),
            QuizQuestion(
                id="pain-onset",
                question="How did it start?",
                options=["Suddenly", "Gradually", "After an injury", "Unsure"],
            ),
            QuizQuestion(
                id="pain-aggravators",
                question="What makes it worse?",
                options=["Movement", "Touch/pressure", "Eating", "Breathing", "Nothing specific"],
            ),
        ]
    if symptom == "injury":
        return [
            QuizQuestion(
                id="injury-mechanism",
                question="How did the injury happen?",
                options=["Fall", "Twisted", "Hit by object", "Sports", "Other"],
            ),
            QuizQuestion(
                id="injury-signs",
                question="Do you notice any of these?",
                options=["Swelling", "Bruising", "Deformity", "Can't bear weight", "None of these"],
            ),
        ]
    if symptom == "skin problems":
        return [
            QuizQuestion(
                id="skin-appearance",
                question="What does the skin look like?",
                options=["Red rash", "Hives", "Blister", "Peeling", "Warm/red area"],
            ),
            QuizQuestion(
                id="skin-symptoms",
                question="Any of these with it?",
                options=["Itchy", "Painful", "Spreading quickly", "Pus/drainage", "None of these"],
            ),
        ]
    return []


def rule_based_next_questions(answers: Dict[str, str]) -> List[QuizQuestion]:
    """Questions to ask after the answers given so far, chosen by symptom type."""
    symptom = (answers.get("symptom-type") or "").lower()
    location = (answers.get("location") or "").lower()

    if location:
        follow_ups = _location_follow_ups(symptom, location)
        if follow_ups:
            return follow_ups
    questions = QUESTIONS_BY_SYMPTOM.get(symptom, DEFAULT_QUESTIONS)
    return [q for q in questions if q.id not in answers]


def get_next_questions(answers: Dict[str, str],
                       providers: Optional[Sequence[Provider]] = None) -> List[QuizQuestion]:
    questions = generate_next_questions(answers, providers or [])
    if questions:
        return questions
    logger.info("Using rule-based quiz questions")
    return rule_based_next_questions(answers)


def build_symptom_description(answers: Dict[str, str]) -> str:
    """Turn quiz answers into the sentence sent to /api/symptom-advice."""
    description = "I have "
    if answers.get("symptom-type"):
        description += answers["symptom-type"].lower()
    if answers.get("location"):
        description += f" in my {answers['location'].lower()}"

    if answers.get("fever-severity"):
        description += f". The fever level is {answers['fever-severity'].lower()}"
    elif answers.get("severity"):
        description += f". The severity is {answers['severity'].lower()}"

    if answers.get("duration"):
        description += f". This has been going on for {answers['duration'].lower()}"

    additional = answers.get("additional")
    if additional and additional != "None of these":
        description += f". I also have {additional.lower()}"
    return description
