"""
Medida - Dependency Injection.

FastAPI dependencies for feature flags and role guards.
"""

from typing import Annotated

from fastapi import Depends

from medida.auth import Role, User, get_current_user
from medida.config import FeatureFlags, Settings, get_settings
from medida.exceptions import FeatureDisabledException, ForbiddenException


# =============================================================================
# Settings Dependencies
# =============================================================================


def get_features(settings: Annotated[Settings, Depends(get_settings)]) -> FeatureFlags:
    """Get feature flags from settings."""
    return settings.features


# =============================================================================
# Feature Flag Guards
# =============================================================================


def require_feature(feature_name: str):
    """Create a dependency that requires a specific feature to be enabled."""

    def check_feature(features: Annotated[FeatureFlags, Depends(get_features)]) -> bool:
        if not getattr(features, feature_name, False):
            raise FeatureDisabledException(feature_name)
        return True

    return check_feature


require_tables = Depends(require_feature("tables"))
require_search = Depends(require_feature("search"))
require_users = Depends(require_feature("users"))


# =============================================================================
# Role Guards
# =============================================================================


def require_role(*allowed_roles: Role):
    """Create a dependency that requires specific roles. Admin always passes."""

    async def check_role(user: Annotated[User, Depends(get_current_user)]) -> bool:
        if user.is_admin:
            return True

        if allowed_roles and user.role not in allowed_roles:
            raise ForbiddenException(
                "Insufficient permissions",
                required_role=", ".join(role.value for role in allowed_roles),
            )

        return True

    return Depends(check_role)


require_admin = require_role(Role.ADMIN)
require_editor = require_role(Role.ADMIN, Role.EDITOR)
