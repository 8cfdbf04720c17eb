import json
import os
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

# Set env before importing app components
os.environ["QUOTA_POLICY"] = "block"
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("API_KEY", None)
os.environ.pop("OPENAI_API_KEY", None)

from ledger import LeaveLedger
from planning_service import PlanningAdvisor


class MemoryStore:
    """Dict-backed stand-in for db_service with the same get_value/put_value surface."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.writes = []

    def get_value(self, key):
        value = self.data.get(key)
        # hand out a copy, like a real round trip through the database
        return json.loads(json.dumps(value)) if value is not None else None

    def put_value(self, key, value):
        self.writes.append(key)
        self.data[key] = json.loads(json.dumps(value))


@pytest.fixture(scope="function")
def store():
    return MemoryStore()


@pytest.fixture(scope="function")
def ledger(store):
    """A ledger with no holidays so day counts are pure weekday counts."""
    store.data["holidays"] = []
    return LeaveLedger.load(store)


def make_completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


SAMPLE_ADVICE = {
    "summary": "You still have plenty of vacation left.",
    "suggestions": [
        {
            "title": "Christmas bridge",
            "description": "Take the Friday after Christmas.",
            "dates": "Dec 26",
            "benefit": "4-day weekend",
        }
    ],
}


@pytest.fixture(scope="function")
def openai_client():
    """Mocked OpenAI client whose chat completion returns SAMPLE_ADVICE."""
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion(json.dumps(SAMPLE_ADVICE))
    return client


@pytest.fixture(scope="function")
def advisor(openai_client):
    return PlanningAdvisor(client=openai_client, model="test-model")


@pytest.fixture(scope="function")
def client(ledger, advisor):
    """Flask test client bound to the in-memory ledger."""
    from flask_main import create_app

    app = create_app(ledger, advisor)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
