"""
Report Repository - storage contract for moderated reports.

Two read surfaces that must never be interchanged:
- admin view  (get_all_reports / get_reports_by_category): every report
- public view (get_all_public_reports / get_public_reports_by_category /
  get_public_report): only reports with is_public == True

Backends:
- FirestoreReportRepository (production, firebase-admin)
- InMemoryReportRepository (USE_MOCK_DB=true, tests)
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
import logging
import uuid

from app.core.settings import settings
from app.models.report import Report, ReportRecord
from app.utils.firestore_helpers import where_filter

logger = logging.getLogger(__name__)


def _newest_first(reports: List[Report]) -> List[Report]:
    return sorted(reports, key=lambda report: report.created_at, reverse=True)


class ReportRepository(ABC):
    """Abstract report storage. Writes either fully succeed or raise."""

    @abstractmethod
    def create_with_moderation(self, record: ReportRecord) -> Report:
        """Persist a report that already carries its moderation decision."""
        pass

    @abstractmethod
    def get_report(self, report_id: str) -> Optional[Report]:
        """Admin lookup, regardless of visibility."""
        pass

    @abstractmethod
    def get_all_reports(self) -> List[Report]:
        pass

    @abstractmethod
    def get_reports_by_category(self, category: str) -> List[Report]:
        pass

    @abstractmethod
    def get_all_public_reports(self) -> List[Report]:
        pass

    @abstractmethod
    def get_public_reports_by_category(self, category: str) -> List[Report]:
        pass

    @abstractmethod
    def delete_report(self, report_id: str) -> bool:
        """True iff a report existed and was removed."""
        pass

    @abstractmethod
    def delete_all_reports(self) -> bool:
        pass

    @abstractmethod
    def ping(self) -> Dict:
        """Lightweight connectivity check for /health/db."""
        pass

    def get_public_report(self, report_id: str) -> Optional[Report]:
        report = self.get_report(report_id)
        if report is None or not report.is_public:
            return None
        return report


class InMemoryReportRepository(ReportRepository):
    """Process-local storage guarded by a lock."""

    def __init__(self):
        self._reports: Dict[str, Report] = {}
        self._lock = Lock()

    def create_with_moderation(self, record: ReportRecord) -> Report:
        report = Report(
            **record.model_dump(),
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._reports[report.id] = report
        logger.info(f"Report saved to memory store: {report.id} (public: {report.is_public})")
        return report.model_copy(deep=True)

    def get_report(self, report_id: str) -> Optional[Report]:
        with self._lock:
            report = self._reports.get(report_id)
        return report.model_copy(deep=True) if report is not None else None

    def _snapshot(self) -> List[Report]:
        """Copies, so callers cannot edit stored reports in place."""
        with self._lock:
            return [report.model_copy(deep=True) for report in self._reports.values()]

    def get_all_reports(self) -> List[Report]:
        return _newest_first(self._snapshot())

    def get_reports_by_category(self, category: str) -> List[Report]:
        return _newest_first([r for r in self._snapshot() if r.category == category])

    def get_all_public_reports(self) -> List[Report]:
        return _newest_first([r for r in self._snapshot() if r.is_public])

    def get_public_reports_by_category(self, category: str) -> List[Report]:
        return _newest_first([r for r in self._snapshot() if r.is_public and r.category == category])

    def delete_report(self, report_id: str) -> bool:
        with self._lock:
            return self._reports.pop(report_id, None) is not None

    def delete_all_reports(self) -> bool:
        with self._lock:
            self._reports.clear()
        return True

    def ping(self) -> Dict:
        with self._lock:
            count = len(self._reports)
        return {"database": "memory", "connected": True, "reports_count": count}


class FirestoreReportRepository(ReportRepository):
    """
    One Firestore document per report, snake_case fields.

    Filtered queries are sorted in Python so no composite index is needed.
    """

    DELETE_BATCH_SIZE = 400

    def __init__(self, db=None, collection_name: Optional[str] = None):
        self._db = db
        self.collection_name = collection_name or settings.REPORTS_COLLECTION

    @property
    def db(self):
        if self._db is None:
            from app.config.firebase import get_db
            self._db = get_db()
        return self._db

    def _collection(self):
        return self.db.collection(self.collection_name)

    @staticmethod
    def _to_report(doc) -> Report:
        data = doc.to_dict()
        data["id"] = doc.id
        return Report(**data)

    def _stream(self, query) -> List[Report]:
        return _newest_first([self._to_report(doc) for doc in query.stream()])

    def create_with_moderation(self, record: ReportRecord) -> Report:
        doc_ref = self._collection().document()  # Auto-generate unique ID
        data = record.model_dump()
        data["created_at"] = datetime.now(timezone.utc)

        try:
            doc_ref.set(data)
        except Exception as e:
            logger.error(f"❌ Failed to save report to Firestore: {e}", exc_info=True)
            raise

        logger.info(f"Report saved to Firestore: {doc_ref.id} (public: {record.is_public})")
        return Report(**data, id=doc_ref.id)

    def get_report(self, report_id: str) -> Optional[Report]:
        doc = self._collection().document(report_id).get()
        if not doc.exists:
            return None
        return self._to_report(doc)

    def get_all_reports(self) -> List[Report]:
        return self._stream(self._collection())

    def get_reports_by_category(self, category: str) -> List[Report]:
        return self._stream(where_filter(self._collection(), "category", "==", category))

    def get_all_public_reports(self) -> List[Report]:
        return self._stream(where_filter(self._collection(), "is_public", "==", True))

    def get_public_reports_by_category(self, category: str) -> List[Report]:
        query = where_filter(self._collection(), "is_public", "==", True)
        query = where_filter(query, "category", "==", category)
        return self._stream(query)

    def delete_report(self, report_id: str) -> bool:
        doc_ref = self._collection().document(report_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        logger.info(f"Report deleted: {report_id}")
        return True

    def delete_all_reports(self) -> bool:
        try:
            deleted = 0
            while True:
                docs = list(self._collection().limit(self.DELETE_BATCH_SIZE).stream())
                if not docs:
                    break
                batch = self.db.batch()
                for doc in docs:
                    batch.delete(doc.reference)
                batch.commit()
                deleted += len(docs)
            logger.info(f"✅ Deleted all reports ({deleted})")
            return True
        except Exception as e:
            logger.error(f"❌ Error deleting all reports: {e}", exc_info=True)
            return False

    def ping(self) -> Dict:
        list(self._collection().limit(1).stream())
        return {"database": "firestore", "connected": True, "collection": self.collection_name}


# Global repository instance (singleton)
_repository: Optional[ReportRepository] = None


def get_report_repository() -> ReportRepository:
    """
    Get the configured repository (FastAPI dependency).
    """
    global _repository
    if _repository is None:
        if settings.USE_MOCK_DB:
            logger.info("[STORAGE] USING IN-MEMORY REPORT STORE")
            _repository = InMemoryReportRepository()
        else:
            _repository = FirestoreReportRepository()
    return _repository
