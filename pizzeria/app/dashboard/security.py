import base64
import binascii
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from pizzeria.infra.settings import settings

security = HTTPBasic()


def check_credentials(username: str, password: str) -> bool:
    # zonder wachtwoord is het dashboard dicht
    if not settings.ADMIN_PASS:
        return False
    ok_user = secrets.compare_digest(username.encode(), settings.ADMIN_USER.encode())
    ok_pass = secrets.compare_digest(password.encode(), settings.ADMIN_PASS.encode())
    return ok_user and ok_pass


def require_admin(credentials: HTTPBasicCredentials = Depends(security)):
    if not check_credentials(credentials.username, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )


def is_admin_header(authorization: Optional[str]) -> bool:
    """Basic-auth header controleren buiten de dependency om (websockets)."""
    if not authorization or not authorization.lower().startswith("basic "):
        return False
    try:
        raw = base64.b64decode(authorization[6:].strip()).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return False
    user, _, pwd = raw.partition(":")
    return check_credentials(user, pwd)
