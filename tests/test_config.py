"""
Tests for configuration, exceptions and token validation.
"""

import time
from uuid import uuid4

import pytest
from jose import jwt


class TestFeatureFlags:
    """Feature flags tests."""

    def test_default_features_enabled(self):
        from medida.config import FeatureFlags

        flags = FeatureFlags()
        assert flags.tables is True
        assert flags.search is True
        assert flags.users is True

    def test_to_dict(self):
        from medida.config import FeatureFlags

        result = FeatureFlags().to_dict()
        assert result == {"tables": True, "search": True, "users": True}

    def test_env_override(self, monkeypatch):
        from medida.config import get_settings

        monkeypatch.setenv("FEATURE_USERS", "false")
        monkeypatch.setenv("SEARCH_TEXT_SEARCH_CONFIG", "portuguese")
        get_settings.cache_clear()

        settings = get_settings()
        assert settings.features.users is False
        assert settings.search.text_search_config == "portuguese"
        assert settings.search.debounce_seconds == 0.5


class TestExceptions:
    """Exception tests."""

    def test_unauthorized_exception(self):
        from medida.exceptions import UnauthorizedException

        exc = UnauthorizedException()
        assert exc.status_code == 401
        assert exc.code == "UNAUTHORIZED"

    def test_forbidden_exception(self):
        from medida.exceptions import ForbiddenException

        exc = ForbiddenException(required_role="admin")
        assert exc.status_code == 403
        assert exc.details == {"required_role": "admin"}

    def test_not_found_exception(self):
        from medida.exceptions import NotFoundException

        exc = NotFoundException("table", "123")
        assert exc.status_code == 404
        assert "table" in exc.message

    def test_transport_exception(self):
        from medida.exceptions import TransportException

        exc = TransportException("table_rows.list", "connection refused", store_code="08006")
        assert exc.status_code == 502
        assert exc.code == "TRANSPORT_ERROR"
        assert exc.details == {"operation": "table_rows.list", "store_code": "08006"}

    def test_feature_disabled_exception(self):
        from medida.exceptions import FeatureDisabledException

        exc = FeatureDisabledException("search")
        assert exc.status_code == 503
        assert "search" in exc.message


class TestVerifyJwt:
    """Supabase access token validation."""

    SECRET = "test-secret"

    def _token(self, **claims):
        now = int(time.time())
        payload = {"sub": str(uuid4()), "aud": "authenticated", "iat": now, "exp": now + 60, **claims}
        return jwt.encode(payload, self.SECRET, algorithm="HS256")

    def test_role_from_app_metadata(self):
        from medida.auth import Role, verify_jwt

        payload = verify_jwt(self._token(app_metadata={"role": "admin"}), self.SECRET, audience="authenticated")
        assert payload.role is Role.ADMIN

    def test_unknown_role_defaults_to_viewer(self):
        from medida.auth import Role, verify_jwt

        payload = verify_jwt(self._token(user_role="owner"), self.SECRET, audience="authenticated")
        assert payload.role is Role.VIEWER

    def test_wrong_secret(self):
        from medida.auth import verify_jwt
        from medida.exceptions import UnauthorizedException

        with pytest.raises(UnauthorizedException):
            verify_jwt(self._token(), "other-secret", audience="authenticated")

    def test_missing_subject(self):
        from medida.auth import verify_jwt
        from medida.exceptions import UnauthorizedException

        token = jwt.encode({"aud": "authenticated"}, self.SECRET, algorithm="HS256")
        with pytest.raises(UnauthorizedException) as exc_info:
            verify_jwt(token, self.SECRET, audience="authenticated")
        assert "Malformed" in exc_info.value.message


class TestUserRoles:
    """Role helpers on User."""

    def test_editor_can_edit_but_is_not_admin(self):
        from medida.auth import Role, User

        user = User(id=uuid4(), role=Role.EDITOR)
        assert user.can_edit is True
        assert user.is_admin is False
        assert user.has_role("editor") is True
        assert user.has_role(Role.ADMIN) is False

    def test_viewer_cannot_edit(self):
        from medida.auth import User

        assert User(id=uuid4()).can_edit is False

    def test_admin_has_every_role(self):
        from medida.auth import Role, User

        assert User(id=uuid4(), role=Role.ADMIN).has_role(Role.VIEWER) is True
