import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import httpx
import jwt
from fastapi import Depends, Header, HTTPException, Request
from supabase import AuthError

from app.services.supabase import BaasClient

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"


class InvalidToken(Exception):
    pass


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: UUID


def _decode_segment(segment: str) -> bytes:
    # JWT segments are unpadded base64url; some clients send standard base64
    try:
        if "=" in segment:
            raise ValueError("padding in unpadded segment")
        padded = segment + "=" * (-len(segment) % 4)
        return base64.b64decode(padded.translate(str.maketrans("-_", "+/")), validate=True)
    except (binascii.Error, ValueError) as url_error:
        try:
            return base64.b64decode(segment, validate=True)
        except (binascii.Error, ValueError) as std_error:
            raise InvalidToken(f"Both base64 decoders failed: {url_error} and {std_error}")


def decode_unverified_subject(token: str) -> UUID:
    """
    Read `sub` from a JWT payload WITHOUT checking signature, expiry,
    issuer or audience.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise InvalidToken("Invalid JWT format")

    payload = _decode_segment(parts[1])
    try:
        claims = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidToken(f"JSON parse error: {e}")

    if not isinstance(claims, dict) or not isinstance(claims.get("sub"), str):
        raise InvalidToken("Missing 'sub' field in token")

    try:
        return UUID(claims["sub"])
    except ValueError as e:
        raise InvalidToken(f"Invalid UUID: {e}")


class TokenVerifier:
    """
    Turns a bearer token into a user id.

    mode "verify": HS256 check with the project JWT secret when configured,
    otherwise the Supabase Auth user endpoint decides.
    mode "unverified": trusts the payload as is (local development only).
    """

    def __init__(self, mode: str, baas: BaasClient, jwt_secret: Optional[str] = None):
        self.mode = mode
        self.baas = baas
        self.jwt_secret = jwt_secret

    def verify(self, token: str) -> UUID:
        subject = decode_unverified_subject(token)
        if self.mode == "unverified":
            return subject
        if self.jwt_secret:
            return self._verify_signature(token)
        return self._verify_with_supabase(token)

    def _verify_signature(self, token: str) -> UUID:
        try:
            claims = jwt.decode(token, self.jwt_secret, algorithms=[JWT_ALGORITHM], audience=JWT_AUDIENCE)
        except jwt.ExpiredSignatureError:
            raise InvalidToken("Session expired")
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Signature check failed: {e}")
        try:
            return UUID(str(claims.get("sub")))
        except ValueError as e:
            raise InvalidToken(f"Invalid UUID: {e}")

    def _verify_with_supabase(self, token: str) -> UUID:
        try:
            user_res = self.baas.auth_client().auth.get_user(token)
        except (AuthError, httpx.HTTPError) as e:
            raise InvalidToken(f"Supabase token validation error: {str(e)}")
        if not user_res or not user_res.user:
            raise InvalidToken("User not found")
        try:
            return UUID(str(user_res.user.id))
        except ValueError as e:
            raise InvalidToken(f"Invalid UUID: {e}")


def get_token_verifier(request: Request) -> TokenVerifier:
    return request.app.state.token_verifier


def _authenticate(authorization: str, verifier: TokenVerifier) -> AuthenticatedUser:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid auth header format")

    token = authorization[len("Bearer "):].strip()
    try:
        user_id = verifier.verify(token)
    except InvalidToken as e:
        logger.warning(f"Rejected bearer token: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token")

    return AuthenticatedUser(user_id=user_id)


def get_current_user(
    authorization: Optional[str] = Header(None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AuthenticatedUser:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    return _authenticate(authorization, verifier)


def get_optional_user(
    authorization: Optional[str] = Header(None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Optional[AuthenticatedUser]:
    # A bad token on an optional route means an anonymous viewer
    if not authorization:
        return None
    try:
        return _authenticate(authorization, verifier)
    except HTTPException:
        return None
