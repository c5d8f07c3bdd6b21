"""
Cookie based JWT authentication and role guards.

The token is issued by POST /jwt, carried in the httpOnly "token" cookie
and checked by verify_token. The role guards look the caller up in the
users collection on every request.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from fastapi import Depends, HTTPException, Request, Response
from pymongo.database import Database

import config
from database import USERS, get_db

logger = logging.getLogger(__name__)

COOKIE_NAME = "token"
ALGORITHM = "HS256"


class AuthNotConfigured(Exception):
    """Raised when a token must be issued but ACCESS_TOKEN_SECRET is unset."""


def _cookie_policy() -> Dict[str, Any]:
    if config.IS_PRODUCTION:
        return {"secure": True, "samesite": "none"}
    return {"secure": False, "samesite": "strict"}


def issue_token(identity: Dict[str, Any]) -> str:
    if not config.ACCESS_TOKEN_SECRET:
        raise AuthNotConfigured("ACCESS_TOKEN_SECRET is not set")
    claims = dict(identity)
    claims["exp"] = datetime.now(timezone.utc) + timedelta(days=config.TOKEN_TTL_DAYS)
    return jwt.encode(claims, config.ACCESS_TOKEN_SECRET, algorithm=ALGORITHM)


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=config.TOKEN_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        **_cookie_policy(),
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(COOKIE_NAME, httponly=True, **_cookie_policy())


def verify_token(request: Request) -> Dict[str, Any]:
    """Decode the auth cookie or fail with 401."""
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="unauthorized access")
    if not config.ACCESS_TOKEN_SECRET:
        logger.error("ACCESS_TOKEN_SECRET is not set, rejecting token")
        raise HTTPException(status_code=401, detail="unauthorized access")
    try:
        return jwt.decode(token, config.ACCESS_TOKEN_SECRET, algorithms=[ALGORITHM])
    except jwt.PyJWTError as e:
        logger.info("Rejected auth cookie: %s", e)
        raise HTTPException(status_code=401, detail="unauthorized access")


def _require_role(role: str, claims: Dict[str, Any], database: Database) -> Dict[str, Any]:
    email = claims.get("email")
    user = database[USERS].find_one({"email": email}) if email else None
    if not user or user.get("role") != role:
        logger.warning("Denied %s route to %s", role, email)
        raise HTTPException(status_code=401, detail="unauthorized access!")
    return claims


def verify_admin(claims: Dict[str, Any] = Depends(verify_token), database: Database = Depends(get_db)) -> Dict[str, Any]:
    return _require_role("admin", claims, database)


def verify_host(claims: Dict[str, Any] = Depends(verify_token), database: Database = Depends(get_db)) -> Dict[str, Any]:
    return _require_role("host", claims, database)
