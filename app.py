# app.py — Flask backend
from datetime import timedelta

from flask import Flask, jsonify, request, session
from flask_cors import CORS
from pydantic import ValidationError

from config import Settings
from llm_wrapper import build_providers, get_advice
from logger import configure_logging, get_logger
from pydantic_models import AuthRequest, NextQuestionsRequest, SymptomAdviceRequest
from quiz_rules import get_next_questions
from rate_limiter import FixedWindowRateLimiter
from rule_based import classify
from user_store import InvalidCredentialsError, UserExistsError, UserStore

logger = get_logger(__name__)


def _client_ip():
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def create_app(settings=None, providers=None, user_store=None, rate_limiter=None):
    settings = settings or Settings.from_env()
    configure_logging(settings.log_file)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=7)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Strict"
    app.config["SESSION_COOKIE_SECURE"] = settings.session_cookie_secure
    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    providers = build_providers(settings) if providers is None else list(providers)
    users = user_store if user_store is not None else UserStore()
    limiter = rate_limiter or FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        max_clients=settings.rate_limit_max_clients,
    )
    app.config["SETTINGS"] = settings
    logger.info("Provider chain: %s", providers)

    @app.errorhandler(413)
    def too_large(_e):
        return jsonify({"error": "Request too large (max 1MB)"}), 413

    @app.route("/", methods=["GET"])
    def index():
        return "HealthBuddy symptom checker — POST /api/symptom-advice with {'symptomDescription':'...'}"

    @app.route("/api/symptom-advice", methods=["POST"])
    def symptom_advice():
        ip = _client_ip()
        if not limiter.allow(ip):
            return jsonify({"error": "Too many requests. Please try again later."}), 429

        if request.content_length and request.content_length > settings.max_content_length:
            logger.error("Request too large: %s", request.content_length)
            return jsonify({"error": "Request too large (max 1MB)"}), 413

        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid JSON format"}), 400
        try:
            req = SymptomAdviceRequest.model_validate(data)
        except ValidationError:
            return jsonify({"error": "Invalid JSON format"}), 400
        if not (req.symptom_description or "").strip():
            return jsonify({"error": "Symptom description is required"}), 400

        logger.info("Advice requested (%d chars, image=%s)", len(req.symptom_description), req.has_image)
        try:
            advice = get_advice(req.symptom_description, req.has_image, providers)
        except Exception:
            # Children always get some advice rather than an error page
            logger.exception("Advice chain failed, returning rule-based advice")
            advice = classify(req.symptom_description, req.has_image)

        username = session.get("username")
        if username:
            users.add_history(username, advice.severity.value)
        return jsonify(advice.to_json())

    @app.route("/api/auth", methods=["POST"])
    def auth():
        try:
            req = AuthRequest.model_validate(request.get_json(silent=True) or {})
        except ValidationError:
            return jsonify({"error": "Invalid action"}), 400

        if req.action == "register":
            if not req.username or not req.password:
                return jsonify({"error": "Username and password are required"}), 400
            try:
                users.register(req.username, req.password)
            except UserExistsError:
                return jsonify({"error": "Username already exists"}), 400
            session.permanent = True
            session["username"] = req.username
            return jsonify({"success": True, "message": "Account created successfully"})

        if req.action == "login":
            try:
                users.authenticate(req.username, req.password)
            except InvalidCredentialsError:
                return jsonify({"error": "Invalid credentials"}), 401
            session.permanent = True
            session["username"] = req.username
            return jsonify({"success": True, "message": "Logged in successfully"})

        if req.action == "logout":
            session.pop("username", None)
            return jsonify({"success": True, "message": "Logged out successfully"})

        if req.action == "delete":
            username = session.pop("username", None)
            if not username or not users.delete(username):
                return jsonify({"error": "Not logged in"}), 401
            return jsonify({"success": True, "message": "Account deleted"})

        return jsonify({"error": "Invalid action"}), 400

    @app.route("/api/auth", methods=["GET"])
    def auth_status():
        username = session.get("username")
        if not username:
            return jsonify({"authenticated": False})
        if not users.exists(username):
            session.pop("username", None)
            return jsonify({"authenticated": False})
        return jsonify({
            "authenticated": True,
            "username": username,
            "historyCount": users.history_count(username),
        })

    @app.route("/api/next-questions", methods=["POST"])
    def next_questions():
        try:
            answers = NextQuestionsRequest.model_validate(request.get_json(silent=True) or {}).answers
        except ValidationError:
            answers = {}
        questions = get_next_questions(answers, providers)
        return jsonify({"questions": [q.model_dump() for q in questions]})

    return app


app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["SETTINGS"].port, debug=app.config["SETTINGS"].debug)
