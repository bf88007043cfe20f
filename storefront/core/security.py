from typing import Optional

from jose import JWTError, jwt

from storefront.core.config import get_settings

ALGORITHM = "HS256"
AUDIENCE = "authenticated"


class TokenError(Exception):
    pass


def decode_token(token: str, secret: Optional[str] = None) -> dict:
    """
    Verify a Supabase access token and return its claims. Supabase signs
    session tokens with the project's JWT secret and the `authenticated`
    audience; `sub` is the auth user id.
    """
    secret = secret or get_settings().SUPABASE_JWT_SECRET
    if not secret:
        raise TokenError("JWT secret not configured")
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM], audience=AUDIENCE)
    except JWTError as e:
        raise TokenError(str(e)) from e
    if not payload.get("sub"):
        raise TokenError("Token has no subject")
    return payload


def create_token(subject: str, email: str, secret: str, expires_at: int) -> str:
    """Mint a token shaped like a Supabase session token (used by tests and local tooling)."""
    to_encode = {"sub": subject, "email": email, "aud": AUDIENCE, "role": AUDIENCE, "exp": expires_at}
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)
