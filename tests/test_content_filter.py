"""
Tests for the content filter stage and its safety-reject policy.
"""

import json

import pytest
import requests

from app.services.moderation.base import DisabledOracle, OracleError, OracleUnavailableError
from app.services.moderation.content_filter import ContentFilter, FilterResponseError
from app.services.moderation.prompts import DEFAULT_CONTENT_FILTER_PROMPT
from tests.conftest import FakeOracle, filter_json


def assert_safety_rejected(result):
    assert result.is_approved is False
    assert result.is_spam is True
    assert result.has_inappropriate_content is True
    assert result.is_rejected
    assert "temporarily unavailable" in result.reason


class TestContentFilterParsing:

    def test_approved_result(self):
        oracle = FakeOracle(filter_json())
        result = ContentFilter(oracle).filter("Fietsdiefstal", "bij het station")

        assert result.is_approved is True
        assert result.is_rejected is False
        assert result.reason is None

    def test_spam_result_keeps_reason(self):
        oracle = FakeOracle(filter_json(approved=False, spam=True, reason="Testbericht"))
        result = ContentFilter(oracle).filter("test123", "test")

        assert result.is_spam is True
        assert result.is_rejected
        assert result.reason == "Testbericht"

    def test_fenced_and_prefixed_output_is_accepted(self):
        raw = "Analyse:\n```json\n" + filter_json(pii=True, approved=False, reason="Bevat telefoonnummer") + "\n```"
        result = ContentFilter(FakeOracle(raw)).filter("Auto bekrast", "Bel 0470 12 34 56")

        assert result.has_pii is True
        assert result.reason == "Bevat telefoonnummer"

    def test_unclosed_brace_before_verdict_still_approves(self):
        raw = "Analyse {stap 1: controle op spam\n" + filter_json()
        result = ContentFilter(FakeOracle(raw)).filter("Fietsdiefstal", "bij het station")

        assert result.is_approved is True
        assert result.is_rejected is False

    def test_not_approved_without_flags_is_still_rejected(self):
        result = ContentFilter(FakeOracle(filter_json(approved=False))).filter("Mooi park", "echt geweldig")
        assert result.is_rejected

    def test_blank_reason_becomes_none(self):
        result = ContentFilter(FakeOracle(filter_json(reason="   "))).filter("a", "b")
        assert result.reason is None

    def test_parse_result_requires_boolean_flags(self):
        raw = json.dumps({"isApproved": "true", "isSpam": False, "hasInappropriateContent": False, "hasPII": False})
        with pytest.raises(FilterResponseError):
            ContentFilter.parse_result(raw)


class TestContentFilterFailSafe:

    def test_oracle_error_rejects(self):
        result = ContentFilter(FakeOracle(OracleError("connection reset"))).filter("a", "b")
        assert_safety_rejected(result)

    def test_network_exception_rejects(self):
        result = ContentFilter(FakeOracle(requests.ConnectionError("down"))).filter("a", "b")
        assert_safety_rejected(result)

    def test_unexpected_exception_rejects(self):
        result = ContentFilter(FakeOracle(RuntimeError("boom"))).filter("a", "b")
        assert_safety_rejected(result)

    def test_disabled_oracle_rejects(self):
        result = ContentFilter(DisabledOracle()).filter("a", "b")
        assert_safety_rejected(result)

    @pytest.mark.parametrize("raw", [
        "",
        "Ik kan deze melding niet beoordelen.",
        '{"isApproved": true}',
        '{"isApproved": true, "isSpam": false, "hasInappropriateContent": false}',
        '{"isApproved": 1, "isSpam": 0, "hasInappropriateContent": 0, "hasPII": 0}',
        '{"isApproved": true, "isSpam": false,',
    ])
    def test_malformed_output_rejects(self, raw):
        result = ContentFilter(FakeOracle(raw)).filter("a", "b")
        assert_safety_rejected(result)

    def test_disabled_oracle_raises_unavailable(self):
        with pytest.raises(OracleUnavailableError):
            DisabledOracle().generate("prompt")


class TestContentFilterPrompt:

    def test_default_rubric_and_submission_are_sent(self):
        oracle = FakeOracle(filter_json())
        ContentFilter(oracle).filter("Mijn titel", "Mijn beschrijving")

        prompt = oracle.prompts[0]
        assert prompt.startswith(DEFAULT_CONTENT_FILTER_PROMPT)
        assert 'Titel: "Mijn titel"' in prompt
        assert 'Beschrijving: "Mijn beschrijving"' in prompt
        assert "hasPII" in prompt

    def test_custom_instructions_replace_rubric_but_keep_contract(self):
        oracle = FakeOracle(filter_json())
        ContentFilter(oracle).filter("t", "d", custom_instructions="Alleen fietsmeldingen toestaan.")

        prompt = oracle.prompts[0]
        assert prompt.startswith("Alleen fietsmeldingen toestaan.")
        assert DEFAULT_CONTENT_FILTER_PROMPT not in prompt
        assert "isApproved" in prompt

    def test_blank_custom_instructions_fall_back_to_default(self):
        oracle = FakeOracle(filter_json())
        ContentFilter(oracle).filter("t", "d", custom_instructions="  ")
        assert oracle.prompts[0].startswith(DEFAULT_CONTENT_FILTER_PROMPT)
