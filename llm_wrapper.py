"""
LLM providers and the escalation chain for the HealthBuddy symptom checker.

Provides:
- HuggingFaceProvider / GeminiProvider / OpenAIProvider: one generate(prompt) contract
- normalize_*: per-provider translation of the native response into plain text
- get_advice: tries providers in priority order, falls back to rule_based.classify
- extract_json / generate_next_questions: quiz questions from the same chain
"""

import json
import re
from typing import Dict, List, Optional, Sequence

import google.generativeai as genai
from huggingface_hub import InferenceClient
from openai import OpenAI
from pydantic import ValidationError

from config import PLACEHOLDER_KEYS, Settings
from logger import get_logger
from pydantic_models import NextQuestionsResponse, QuizQuestion, Severity, SymptomAdvice
from rule_based import classify, is_emergency

logger = get_logger(__name__)

# Text some providers return when they have nothing useful to say
PLACEHOLDER_TEXTS = {"I understand your concern."}

GENERIC_RECOMMENDATIONS = [
    "Rest and take it easy",
    "Drink plenty of water",
    "Tell an adult about your symptoms",
    "See a doctor if symptoms don't improve",
]
GENERIC_DOCTOR_REASONS = [
    "To get proper medical advice",
    "To rule out serious conditions",
    "To help you feel better faster",
]
GENERIC_FOLLOW_UPS = [
    "How are you feeling now?",
    "Have you told an adult about this?",
    "Do you have any other symptoms?",
]
GENERIC_SAFETY_NOTE = ("Remember, I'm here to help, but a real doctor can give you the best advice "
                       "for your specific situation.")

SYSTEM_PROMPT = ("You are a helpful health assistant for children ages 8-15. Provide brief, reassuring advice "
                 "in simple language. Always mention seeing a doctor if needed. Keep responses under 200 words.")

PROMPT_TEMPLATE = """Context: {context}
A child says: "{description}"
Provide brief, reassuring advice in simple language. Always mention seeing a doctor if needed.
If the context is EMERGENCY, tell the child to get an adult and call emergency services right away.
Keep your response under 200 words and be encouraging."""

QUESTIONS_PROMPT_TEMPLATE = """You are building a pediatric symptom checker quiz. Based on prior answers, propose the next 2-4 most relevant questions.
Return JSON with fields: questions: [{"id": "", "question": "", "options": [".."], "category": ""}].
Prior answers JSON: {answers}
Constraints:
- Do NOT ask for body location if the symptom is fever or generalized
- Tailor options to the chosen symptom
- Use simple, easy-to-understand wording
Respond with JSON only, no markdown."""


class ProviderError(Exception):
    """Raised when a provider cannot produce usable text."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


# ------------------------------------------------------------
# Native response -> text
# ------------------------------------------------------------
def normalize_huggingface(raw) -> str:
    # InferenceClient returns a str; the raw HTTP API returns [{"generated_text": ...}]
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, list):
        raw = raw[0] if raw else {}
    if isinstance(raw, dict):
        return str(raw.get("generated_text") or "").strip()
    text = getattr(raw, "generated_text", None)
    if text is None:
        raise ProviderError("huggingface", f"unexpected response type {type(raw).__name__}")
    return str(text).strip()


def normalize_gemini(response) -> str:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        raise ProviderError("gemini", "response has no candidates")
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return "".join(getattr(p, "text", "") or "" for p in parts).strip()


def normalize_openai(response) -> str:
    choices = getattr(response, "choices", None) or []
    if not choices:
        raise ProviderError("openai", "response has no choices")
    message = getattr(choices[0], "message", None)
    return (getattr(message, "content", None) or "").strip()


# ------------------------------------------------------------
# Providers
# ------------------------------------------------------------
class Provider:
    name = "provider"

    def __init__(self, api_key: str = "", model: str = "", timeout: int = 30):
        self.api_key = api_key or ""
        self.model = model
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key) and self.api_key not in PLACEHOLDER_KEYS

    def _call(self, prompt: str):
        raise NotImplementedError

    def normalize(self, raw) -> str:
        raise NotImplementedError

    def generate(self, prompt: str) -> str:
        """Return generated text or raise ProviderError; never retries."""
        try:
            text = self.normalize(self._call(prompt))
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(self.name, str(e)) from e
        if not text or text in PLACEHOLDER_TEXTS:
            raise ProviderError(self.name, "empty or placeholder response")
        return text

    def __repr__(self):
        return f"{type(self).__name__}(model={self.model!r}, configured={self.is_configured()})"


class HuggingFaceProvider(Provider):
    name = "huggingface"

    def _call(self, prompt: str):
        client = InferenceClient(model=self.model, token=self.api_key, timeout=self.timeout)
        return client.text_generation(f"{SYSTEM_PROMPT}\n\n{prompt}", max_new_tokens=200, temperature=0.7)

    def normalize(self, raw) -> str:
        return normalize_huggingface(raw)


class GeminiProvider(Provider):
    name = "gemini"

    def _call(self, prompt: str):
        genai.configure(api_key=self.api_key)
        model = genai.GenerativeModel(self.model, system_instruction=SYSTEM_PROMPT)
        return model.generate_content(
            prompt,
            generation_config={"temperature": 0.7, "max_output_tokens": 200},
            request_options={"timeout": self.timeout},
        )

    def normalize(self, raw) -> str:
        return normalize_gemini(raw)


class OpenAIProvider(Provider):
    name = "openai"

    def _call(self, prompt: str):
        client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return client.chat.completions.create(
            model=self.model,
            messages=[{"role": "system", "content": SYSTEM_PROMPT}, {"role": "user", "content": prompt}],
            temperature=0.7,
            max_tokens=200,
        )

    def normalize(self, raw) -> str:
        return normalize_openai(raw)


def build_providers(settings: Settings) -> List[Provider]:
    """Providers in priority order: Hugging Face, Gemini, OpenAI."""
    return [
        HuggingFaceProvider(settings.huggingface_token, settings.huggingface_model, settings.api_timeout),
        GeminiProvider(settings.gemini_api_key, settings.gemini_model, settings.api_timeout),
        OpenAIProvider(settings.openai_api_key, settings.openai_model, settings.api_timeout),
    ]


# ------------------------------------------------------------
# Advice chain
# ------------------------------------------------------------
def build_prompt(description: str, emergency: bool) -> str:
    # PROMPT_TEMPLATE has literal quotes; keep str.replace rather than .format
    context = "EMERGENCY" if emergency else "NON-EMERGENCY"
    return PROMPT_TEMPLATE.replace("{context}", context).replace("{description}", description)


def advice_from_text(text: str) -> SymptomAdvice:
    # Severity is not read from provider text; always moderate
    return SymptomAdvice(
        severity=Severity.MODERATE,
        recommendations=GENERIC_RECOMMENDATIONS,
        explanation=text,
        doctor_reasons=GENERIC_DOCTOR_REASONS,
        follow_up_questions=GENERIC_FOLLOW_UPS,
        safety_notes=GENERIC_SAFETY_NOTE,
    )


def _try_providers(prompt: str, providers: Sequence[Provider]):
    """Yield (provider, text) for each configured provider that answers."""
    for provider in providers:
        if not provider.is_configured():
            logger.debug("Skipping %s: not configured", provider.name)
            continue
        logger.info("Trying %s", provider.name)
        try:
            yield provider, provider.generate(prompt)
        except ProviderError as e:
            logger.warning("Provider failed, trying next: %s", e)
        except Exception:
            logger.exception("Unexpected error from %s, trying next", getattr(provider, "name", provider))


def get_advice(description: str, has_image: bool = False,
               providers: Optional[Sequence[Provider]] = None) -> SymptomAdvice:
    """
    Primary orchestration:
    - try each configured provider once, in order
    - wrap the first usable text into a moderate advice record
    - otherwise fall back to the rule-based classifier
    """
    emergency = is_emergency(description)
    prompt = build_prompt(description, emergency)

    for provider, text in _try_providers(prompt, providers or []):
        logger.info("%s response received", provider.name)
        if emergency:
            logger.warning("Emergency keywords matched but %s answered; severity reported as moderate",
                           provider.name)
        return advice_from_text(text)

    logger.info("No provider available, using rule-based advice")
    return classify(description, has_image)


# ------------------------------------------------------------
# Quiz questions
# ------------------------------------------------------------
def _try_load(s: str):
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        s2 = re.sub(r",\s*([}\]])", r"\1", s)  # remove trailing commas
        try:
            return json.loads(s2)
        except json.JSONDecodeError:
            return json.loads(s2.replace("'", '"'))


def extract_json(raw_text: str):
    """Find the largest JSON object in LLM output, tolerating fences and prose."""
    raw = raw_text.strip()
    if raw.startswith("```"):
        raw = "\n".join(l for l in raw.splitlines() if not l.strip().startswith("```")).strip()

    candidates = []
    for m in re.finditer(r"\{", raw):
        depth = 0
        for j in range(m.start(), len(raw)):
            if raw[j] == "{":
                depth += 1
            elif raw[j] == "}":
                depth -= 1
                if depth == 0:
                    candidates.append(raw[m.start():j + 1])
                    break
    if not candidates:
        raise ValueError("Could not locate JSON in LLM output")
    return _try_load(max(candidates, key=len))


def generate_next_questions(answers: Dict[str, str],
                            providers: Sequence[Provider]) -> Optional[List[QuizQuestion]]:
    prompt = QUESTIONS_PROMPT_TEMPLATE.replace("{answers}", json.dumps(answers))
    for provider, text in _try_providers(prompt, providers):
        try:
            parsed = NextQuestionsResponse(**extract_json(text))
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning("%s returned unusable questions: %s", provider.name, e)
            continue
        if parsed.questions:
            return parsed.questions
    return None
