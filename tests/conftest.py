import pytest

from app import create_app
from config import Settings
from llm_wrapper import Provider


class FakeProvider(Provider):
    """Provider returning canned text, or raising when text is an exception."""

    def __init__(self, name="fake", reply="Drink water and rest.", api_key="key"):
        super().__init__(api_key=api_key, model="fake-model")
        self.name = name
        self.reply = reply
        self.prompts = []

    def _call(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply

    def normalize(self, raw):
        return raw.strip()


@pytest.fixture
def settings():
    return Settings(secret_key="test-secret")


@pytest.fixture
def make_client(settings):
    def _make(**kwargs):
        kwargs.setdefault("providers", [])
        app = create_app(settings, **kwargs)
        app.testing = True
        return app.test_client()
    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def fake_provider():
    return FakeProvider
