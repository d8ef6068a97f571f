"""
Tests for the text formalizer stage and its pass-through policy.
"""

import json

import pytest

from app.services.moderation.base import OracleError
from app.services.moderation.prompts import DEFAULT_TEXT_FORMALIZATION_PROMPT
from app.services.moderation.text_formalizer import FormalizationError, FormalizedText, TextFormalizer
from tests.conftest import FakeOracle, formalized_json


class TestFormalize:

    def test_returns_rewritten_text(self):
        oracle = FakeOracle(formalized_json("Fietsdiefstal gemeld", "Diefstal nabij supermarkt"))
        result = TextFormalizer(oracle).formalize("Mijn fiets is gejat!", "bij de supermarkt")

        assert result == FormalizedText("Fietsdiefstal gemeld", "Diefstal nabij supermarkt")

    def test_strips_surrounding_whitespace(self):
        oracle = FakeOracle(formalized_json("  Titel  ", "\nBeschrijving\n"))
        result = TextFormalizer(oracle).formalize("a", "b")
        assert result == FormalizedText("Titel", "Beschrijving")

    @pytest.mark.parametrize("raw", [
        formalized_json("", "Beschrijving"),
        formalized_json("Titel", "   "),
        json.dumps({"formalizedTitle": "Titel"}),
        json.dumps({"formalizedTitle": 3, "formalizedDescription": "x"}),
        "geen json",
    ])
    def test_malformed_output_raises_validation_error(self, raw):
        with pytest.raises(FormalizationError):
            TextFormalizer(FakeOracle(raw)).formalize("a", "b")

    def test_oracle_error_propagates(self):
        with pytest.raises(OracleError):
            TextFormalizer(FakeOracle(OracleError("timeout"))).formalize("a", "b")

    def test_custom_instructions_are_passed_through(self):
        oracle = FakeOracle(formalized_json("T", "D"))
        TextFormalizer(oracle).formalize("a", "b", custom_instructions="Schrijf in het Engels.")

        assert oracle.prompts[0].startswith("Schrijf in het Engels.")
        assert "formalizedTitle" in oracle.prompts[0]

    def test_default_rubric(self):
        oracle = FakeOracle(formalized_json("T", "D"))
        TextFormalizer(oracle).formalize("a", "b")
        assert oracle.prompts[0].startswith(DEFAULT_TEXT_FORMALIZATION_PROMPT)


class TestFormalizeOrPassthrough:

    def test_success_reports_applied(self):
        oracle = FakeOracle(formalized_json("T", "D"))
        text, applied = TextFormalizer(oracle).formalize_or_passthrough("a", "b")

        assert text == FormalizedText("T", "D")
        assert applied is True

    @pytest.mark.parametrize("response", [
        OracleError("down"),
        RuntimeError("unexpected"),
        formalized_json("", ""),
        "```json\n{broken\n```",
    ])
    def test_failure_passes_original_through(self, response):
        text, applied = TextFormalizer(FakeOracle(response)).formalize_or_passthrough("Origineel", "Tekst")

        assert text == FormalizedText("Origineel", "Tekst")
        assert applied is False
