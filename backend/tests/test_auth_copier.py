"""Unit tests for AuthCopier."""

from __future__ import annotations

from conftest import FakeAuthService, make_user
from firemigrate.services.auth_copier import AuthCopier


class TestCopyUsers:
    """Tests for paging and per-user outcomes."""

    def test_pages_until_token_exhausted(self):
        source = FakeAuthService([
            [make_user("a"), make_user("b")],
            [make_user("c"), make_user("d")],
            [make_user("e")],
        ])
        target = FakeAuthService()

        result = AuthCopier(source, target).copy_users()

        assert source.pages_listed == 3
        assert result.created == 5
        assert result.total == 5
        assert set(target.created) == {"a", "b", "c", "d", "e"}

    def test_rerun_creates_nothing(self):
        source = FakeAuthService([[make_user("a"), make_user("b")], [make_user("c")]])
        target = FakeAuthService()
        copier = AuthCopier(source, target)

        copier.copy_users()
        second = copier.copy_users()

        assert second.created == 0
        assert second.skipped == 3
        assert second.failed == 0
        assert second.total == 3

    def test_preserves_uid_and_profile(self):
        source = FakeAuthService([[make_user("uid-123", email="ann@example.com")]])
        target = FakeAuthService()

        AuthCopier(source, target).copy_users()

        payload = target.created["uid-123"]
        assert payload["email"] == "ann@example.com"
        assert payload["display_name"] == "User uid-123"
        assert payload["email_verified"] is True

    def test_other_errors_skip_user_and_continue(self):
        source = FakeAuthService([[make_user("a"), make_user("bad"), make_user("c")]])
        target = FakeAuthService()
        original = target.create_user

        def create_user(payload):
            if payload["uid"] == "bad":
                raise ValueError("invalid photo URL")
            original(payload)

        target.create_user = create_user

        result = AuthCopier(source, target).copy_users()

        assert result.created == 2
        assert result.failed == 1
        assert result.failed_uids == ["bad"]
        assert result.total == 3

    def test_listing_error_stops_paging(self):
        source = FakeAuthService([[make_user("a")], [make_user("b")], [make_user("c")]])
        source.fail_listing_at = 1
        target = FakeAuthService()

        result = AuthCopier(source, target).copy_users()

        assert result.created == 1
        assert result.listing_error == "listing failed"
        assert set(target.created) == {"a"}

    def test_empty_project(self):
        result = AuthCopier(FakeAuthService([[]]), FakeAuthService()).copy_users()
        assert result.total == 0
