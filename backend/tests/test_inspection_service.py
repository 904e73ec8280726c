"""Unit tests for ProjectInspector."""

from __future__ import annotations

from unittest.mock import MagicMock

from firebase_admin import exceptions

from conftest import FakeFirestore, make_documents, make_user
from firemigrate.repositories.firestore_repo import FirestoreRepository
from firemigrate.services.inspection_service import IAM_HINT, ProjectInspector

SERVICE_ACCOUNT = {
    "project_id": "prayforo",
    "client_email": "migrator@prayforo.iam.gserviceaccount.com",
}


def make_auth(users=None, error=None):
    auth_service = MagicMock()
    if error is not None:
        auth_service.list_page.side_effect = error
    else:
        page = MagicMock()
        page.users = users or []
        auth_service.list_page.return_value = page
    return auth_service


class TestProjectInspector:
    """Tests for the read-only project overview."""

    def test_reports_collections_and_users(self):
        db = FakeFirestore({"users": make_documents(8, prefix="u"), "prayers": make_documents(2, prefix="p")})
        users = [make_user("a"), make_user("b"), make_user("c"), make_user("d")]
        inspector = ProjectInspector(
            FirestoreRepository(db), make_auth(users), SERVICE_ACCOUNT, ["users", "prayers", "miracle"]
        )

        report = inspector.inspect()

        assert report.project_id == "prayforo"
        assert report.client_email == "migrator@prayforo.iam.gserviceaccount.com"
        assert report.connection_ok
        samples = {s.collection: s for s in report.collections}
        assert samples["users"].sample_size == 5
        assert samples["users"].first_document_id == "u0000"
        assert samples["prayers"].sample_size == 2
        assert samples["miracle"].sample_size == 0
        assert samples["miracle"].first_document_id is None
        assert report.user_count == 4
        assert [u.uid for u in report.users] == ["a", "b", "c"]
        assert report.users[0].creation_timestamp == 1700000000000

    def test_collection_read_error_recorded(self):
        db = FakeFirestore({"prayers": make_documents(1)})
        db.failing_collections.add("users")
        inspector = ProjectInspector(FirestoreRepository(db), make_auth(), SERVICE_ACCOUNT, ["users", "prayers"])

        report = inspector.inspect()

        assert "read failed" in report.collections[0].error
        assert report.collections[1].sample_size == 1

    def test_permission_error_adds_hint(self):
        error = exceptions.PermissionDeniedError("insufficient permission")
        inspector = ProjectInspector(
            FirestoreRepository(FakeFirestore()), make_auth(error=error), SERVICE_ACCOUNT, []
        )

        report = inspector.inspect()

        assert report.auth_error == "insufficient permission"
        assert report.auth_hint == IAM_HINT

    def test_connection_failure(self):
        repository = MagicMock()
        repository.get_document.side_effect = RuntimeError("unavailable")
        repository.sample_documents.return_value = []
        inspector = ProjectInspector(repository, make_auth(), SERVICE_ACCOUNT, ["users"])

        report = inspector.inspect()

        assert not report.connection_ok
        assert report.connection_error == "unavailable"
        assert report.user_count == 0
