"""
Shared fixtures.

Settings are read once at import time, so the environment is prepared
before anything from `app` is imported.
"""

import json
import os
import tempfile

os.environ["USE_MOCK_DB"] = "true"
os.environ["AI_ENABLED"] = "false"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="buurtveilig-uploads-"))

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_oracle, get_prompt_settings_service, get_report_repository
from app.main import app
from app.services.moderation.base import OracleError, TextOracle
from app.services.prompt_settings_service import PromptSettingsService
from app.services.report_repository import InMemoryReportRepository


class FakeOracle(TextOracle):
    """
    Scripted oracle: answers with queued texts, raises queued exceptions,
    and records every prompt and token limit it was sent.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []
        self.max_tokens = []

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    def is_enabled(self):
        return True

    def get_model_info(self):
        return {"name": "fake-oracle", "version": "test"}

    def get_timeout_seconds(self):
        return 0.0

    def generate(self, prompt, max_tokens=1000):
        self.prompts.append(prompt)
        self.max_tokens.append(max_tokens)
        if not self.responses:
            raise OracleError("No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def call_count(self):
        return len(self.prompts)


def filter_json(approved=True, spam=False, inappropriate=False, pii=False, reason=None):
    payload = {
        "isApproved": approved,
        "isSpam": spam,
        "hasInappropriateContent": inappropriate,
        "hasPII": pii,
    }
    if reason is not None:
        payload["reason"] = reason
    return json.dumps(payload)


def formalized_json(title, description):
    return json.dumps({"formalizedTitle": title, "formalizedDescription": description})


def submission_form(**overrides):
    form = {
        "title": "Mijn fiets is gejat!",
        "description": "bij de supermarkt",
        "category": "theft",
        "involvementType": "victim",
    }
    form.update(overrides)
    return form


@pytest.fixture
def fake_oracle():
    return FakeOracle()


@pytest.fixture
def repository():
    return InMemoryReportRepository()


@pytest.fixture
def prompt_settings():
    return PromptSettingsService(use_memory=True)


@pytest.fixture
def client(fake_oracle, repository, prompt_settings):
    app.dependency_overrides[get_oracle] = lambda: fake_oracle
    app.dependency_overrides[get_report_repository] = lambda: repository
    app.dependency_overrides[get_prompt_settings_service] = lambda: prompt_settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
