"""
Tests for report storage backends.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app.models.report import ReportRecord
from app.services.report_repository import FirestoreReportRepository, InMemoryReportRepository


def make_record(public=True, category="theft", **overrides):
    fields = dict(
        title="Fietsdiefstal gemeld",
        description="Diefstal nabij supermarkt",
        original_title="Mijn fiets is gejat!",
        original_description="bij de supermarkt",
        category=category,
        involvement_type="victim",
        moderation_status="approved" if public else "rejected",
        moderation_reason=None if public else "Testbericht",
        is_public=public,
    )
    fields.update(overrides)
    return ReportRecord(**fields)


class TestInMemoryReportRepository:

    @pytest.fixture
    def repo(self):
        return InMemoryReportRepository()

    def test_create_assigns_identity(self, repo):
        report = repo.create_with_moderation(make_record())

        assert report.id
        assert report.created_at.tzinfo is not None
        assert repo.get_report(report.id) == report

    def test_ids_are_unique(self, repo):
        ids = {repo.create_with_moderation(make_record()).id for _ in range(5)}
        assert len(ids) == 5

    def test_public_views_exclude_rejected(self, repo):
        approved = repo.create_with_moderation(make_record())
        rejected = repo.create_with_moderation(make_record(public=False))

        assert [r.id for r in repo.get_all_public_reports()] == [approved.id]
        assert {r.id for r in repo.get_all_reports()} == {approved.id, rejected.id}
        assert repo.get_public_report(rejected.id) is None
        assert repo.get_public_report(approved.id) == approved

    def test_category_views(self, repo):
        theft = repo.create_with_moderation(make_record())
        cyber = repo.create_with_moderation(make_record(category="cyber"))
        hidden_cyber = repo.create_with_moderation(make_record(public=False, category="cyber"))

        assert [r.id for r in repo.get_public_reports_by_category("cyber")] == [cyber.id]
        assert {r.id for r in repo.get_reports_by_category("cyber")} == {cyber.id, hidden_cyber.id}
        assert [r.id for r in repo.get_public_reports_by_category("theft")] == [theft.id]

    def test_listing_is_newest_first(self, repo):
        first = repo.create_with_moderation(make_record())
        second = repo.create_with_moderation(make_record())
        # Force distinct timestamps regardless of clock resolution
        repo._reports[first.id] = first.model_copy(update={"created_at": second.created_at - timedelta(seconds=5)})

        assert [r.id for r in repo.get_all_public_reports()] == [second.id, first.id]

    def test_returned_reports_are_copies(self, repo):
        created = repo.create_with_moderation(make_record())
        created.is_public = False

        fetched = repo.get_report(created.id)
        fetched.title = "Bewerkt"
        repo.get_all_public_reports()[0].description = "Bewerkt"

        stored = repo.get_report(created.id)
        assert stored.is_public is True
        assert stored.title == "Fietsdiefstal gemeld"
        assert stored.description == "Diefstal nabij supermarkt"

    def test_delete_report(self, repo):
        report = repo.create_with_moderation(make_record())

        assert repo.delete_report(report.id) is True
        assert repo.get_report(report.id) is None
        assert repo.delete_report(report.id) is False

    def test_delete_all_reports(self, repo):
        repo.create_with_moderation(make_record())
        repo.create_with_moderation(make_record(public=False))

        assert repo.delete_all_reports() is True
        assert repo.get_all_reports() == []
        assert repo.get_all_public_reports() == []

    def test_ping(self, repo):
        repo.create_with_moderation(make_record())
        assert repo.ping() == {"database": "memory", "connected": True, "reports_count": 1}


def make_doc(doc_id, record, created_at):
    doc = MagicMock()
    doc.id = doc_id
    doc.exists = True
    data = record.model_dump()
    data["created_at"] = created_at
    doc.to_dict.return_value = data
    return doc


class TestFirestoreReportRepository:

    @pytest.fixture
    def db(self):
        return MagicMock()

    @pytest.fixture
    def repo(self, db):
        return FirestoreReportRepository(db=db, collection_name="reports")

    def test_create_writes_snake_case_document(self, repo, db):
        doc_ref = db.collection.return_value.document.return_value
        doc_ref.id = "abc123"

        report = repo.create_with_moderation(make_record(public=False))

        db.collection.assert_called_with("reports")
        written = doc_ref.set.call_args[0][0]
        assert written["is_public"] is False
        assert written["moderation_status"] == "rejected"
        assert written["original_title"] == "Mijn fiets is gejat!"
        assert "created_at" in written
        assert report.id == "abc123"

    def test_create_propagates_write_failure(self, repo, db):
        db.collection.return_value.document.return_value.set.side_effect = RuntimeError("unavailable")

        with pytest.raises(RuntimeError):
            repo.create_with_moderation(make_record())

    def test_public_listing_filters_and_sorts(self, repo, db):
        now = datetime.now(timezone.utc)
        older = make_doc("old", make_record(), now - timedelta(hours=1))
        newer = make_doc("new", make_record(), now)
        query = db.collection.return_value.where.return_value
        query.stream.return_value = [older, newer]

        reports = repo.get_all_public_reports()

        db.collection.return_value.where.assert_called_once_with("is_public", "==", True)
        assert [r.id for r in reports] == ["new", "old"]

    def test_public_category_listing_applies_both_filters(self, repo, db):
        first = db.collection.return_value.where.return_value
        second = first.where.return_value
        second.stream.return_value = []

        assert repo.get_public_reports_by_category("cyber") == []
        first.where.assert_called_once_with("category", "==", "cyber")

    def test_get_missing_report(self, repo, db):
        db.collection.return_value.document.return_value.get.return_value.exists = False
        assert repo.get_report("missing") is None

    def test_delete_missing_report(self, repo, db):
        doc_ref = db.collection.return_value.document.return_value
        doc_ref.get.return_value.exists = False

        assert repo.delete_report("missing") is False
        doc_ref.delete.assert_not_called()

    def test_delete_all_in_batches(self, repo, db):
        docs = [MagicMock(), MagicMock()]
        db.collection.return_value.limit.return_value.stream.side_effect = [docs, []]

        assert repo.delete_all_reports() is True
        batch = db.batch.return_value
        assert batch.delete.call_count == 2
        batch.commit.assert_called_once()

    def test_delete_all_reports_failure_returns_false(self, repo, db):
        db.collection.return_value.limit.return_value.stream.side_effect = RuntimeError("boom")
        assert repo.delete_all_reports() is False
