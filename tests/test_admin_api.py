"""
HTTP tests for the admin surface: audit listing, bulk reset, prompts.
"""

from app.services.moderation.prompts import DEFAULT_CONTENT_FILTER_PROMPT, DEFAULT_TEXT_FORMALIZATION_PROMPT
from tests.conftest import filter_json, formalized_json, submission_form


def submit(client, fake_oracle, approved=True, **overrides):
    if approved:
        fake_oracle.queue(filter_json(), formalized_json("Titel", "Beschrijving"))
    else:
        fake_oracle.queue(filter_json(approved=False, inappropriate=True, reason="Ongepast"))
    return client.post("/reports", data=submission_form(**overrides)).json()


class TestAdminReports:

    def test_lists_approved_and_rejected(self, client, fake_oracle):
        approved = submit(client, fake_oracle)
        rejected = submit(client, fake_oracle, approved=False)

        reports = client.get("/admin/reports").json()

        assert {r["id"] for r in reports} == {approved["id"], rejected["reportId"]}

    def test_category_filter_includes_rejected(self, client, fake_oracle):
        submit(client, fake_oracle)
        rejected = submit(client, fake_oracle, approved=False, category="cyber")

        reports = client.get("/admin/reports", params={"category": "cyber"}).json()

        assert [r["id"] for r in reports] == [rejected["reportId"]]

    def test_delete_all_reports(self, client, fake_oracle):
        submit(client, fake_oracle)
        submit(client, fake_oracle, approved=False)

        response = client.delete("/admin/reports")

        assert response.json() == {"success": True, "message": "All reports deleted"}
        assert client.get("/admin/reports").json() == []
        assert client.get("/reports").json() == []

    def test_delete_all_reports_failure(self, client, repository, monkeypatch):
        monkeypatch.setattr(repository, "delete_all_reports", lambda: False)

        response = client.delete("/admin/reports")

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": "Failed to delete reports"}


class TestModerationPrompts:

    def test_defaults_are_returned_when_nothing_saved(self, client):
        body = client.get("/admin/moderation-prompts").json()

        assert body["contentFilter"] == DEFAULT_CONTENT_FILTER_PROMPT
        assert body["textFormalization"] == DEFAULT_TEXT_FORMALIZATION_PROMPT

    def test_save_and_read_back(self, client):
        response = client.post("/admin/moderation-prompts", json={
            "contentFilter": "Nieuwe filterregels",
            "textFormalization": "Nieuwe herschrijfregels",
        })

        assert response.status_code == 200
        assert response.json()["success"] is True
        body = client.get("/admin/moderation-prompts").json()
        assert body == {"contentFilter": "Nieuwe filterregels", "textFormalization": "Nieuwe herschrijfregels"}

    def test_non_string_prompts_are_rejected(self, client):
        response = client.post("/admin/moderation-prompts", json={"contentFilter": 42, "textFormalization": "x"})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_missing_prompt_is_rejected(self, client):
        response = client.post("/admin/moderation-prompts", json={"contentFilter": "x"})
        assert response.status_code == 400
