"""
Medida Auth - Supabase JWT Validation.

Validates access tokens issued by Supabase Auth and turns them into Users.
"""

from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from medida.auth.schemas import Role, TokenPayload, User
from medida.config import Settings, get_settings
from medida.exceptions import UnauthorizedException

# Security scheme
security = HTTPBearer(auto_error=False)


def _claimed_role(payload: dict[str, Any]) -> Role:
    """Pick the console role out of Supabase metadata claims."""
    candidates = [
        (payload.get("app_metadata") or {}).get("role"),
        (payload.get("user_metadata") or {}).get("role"),
        payload.get("user_role"),
    ]
    for candidate in candidates:
        try:
            return Role(candidate)
        except ValueError:
            continue
    return Role.VIEWER


def verify_jwt(
    token: str,
    secret: str,
    audience: str | None = None,
    algorithms: list[str] | None = None,
) -> TokenPayload:
    """
    Verify and decode a JWT token.

    Args:
        token: The JWT token string
        secret: The secret key for verification
        audience: Expected audience, skipped when None
        algorithms: List of allowed algorithms (default: HS256)

    Returns:
        Decoded token payload

    Raises:
        UnauthorizedException: If token is invalid or expired
    """
    if algorithms is None:
        algorithms = ["HS256"]

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=algorithms,
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except ExpiredSignatureError:
        raise UnauthorizedException("Token has expired")
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {e}")

    try:
        return TokenPayload(
            sub=payload["sub"],
            email=payload.get("email"),
            role=_claimed_role(payload),
            name=(payload.get("user_metadata") or {}).get("name"),
            aud=payload.get("aud"),
            exp=payload.get("exp"),
            iat=payload.get("iat"),
        )
    except (KeyError, ValueError) as e:
        raise UnauthorizedException(f"Malformed token payload: {e}")


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """
    Get the current authenticated user from the request.

    This is a FastAPI dependency that extracts and validates the JWT
    from the Authorization header.

    Raises:
        UnauthorizedException: If no token or invalid token
    """
    if not credentials:
        raise UnauthorizedException("Missing authentication token")

    token_payload = verify_jwt(
        token=credentials.credentials,
        secret=settings.supabase.jwt_secret,
        audience=settings.supabase.jwt_audience,
    )

    user = User(
        id=token_payload.sub,
        email=token_payload.email,
        display_name=token_payload.name,
        role=token_payload.role,
    )

    # Store user in request state for access in other dependencies
    request.state.user = user.model_dump()

    return user
