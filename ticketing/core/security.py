from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel
from ticketing.core.config import settings

http_bearer = HTTPBearer(auto_error=False)
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ADMIN_ROLE = "Admin"

class Principal(BaseModel):
    user_id: int
    email: str | None = None
    roles: list[str] = []

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def create_access_token(user) -> tuple[str, datetime]:
    """Issue a signed access token for ``user`` (roles must be loaded).

    Returns the encoded token and its expiry.
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    roles = sorted({ur.role.name for ur in user.user_roles})
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "name": f"{user.first_name} {user.last_name}",
        "roles": roles,
        # scoped role context
        "departments": sorted({ur.department_id for ur in user.user_roles if ur.department_id is not None}),
        "teams": sorted({ur.team_id for ur in user.user_roles if ur.team_id is not None}),
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    if settings.JWT_ISSUER:
        claims["iss"] = settings.JWT_ISSUER
    if settings.REQUIRED_AUDIENCE:
        claims["aud"] = settings.REQUIRED_AUDIENCE
    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    return token, expires_at

def _decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            audience=settings.REQUIRED_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
        return payload
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}")

async def get_principal(creds: HTTPAuthorizationCredentials | None = Depends(http_bearer)) -> Principal:
    if creds is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    data = _decode_token(creds.credentials)
    try:
        user_id = int(data["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: missing subject")
    return Principal(user_id=user_id, email=data.get("email"), roles=data.get("roles", []))

def require_roles(*needed: str):
    def dep(principal: Principal = Depends(get_principal)) -> Principal:
        if ADMIN_ROLE in principal.roles:
            return principal
        if not set(needed) & set(principal.roles):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return principal
    return dep
