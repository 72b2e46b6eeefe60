# eom/core/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from eom.database import get_db
from eom.models.employee import Employee, ROLE_UNIT_ADMIN, ROLE_CENTRAL_ADMIN
from eom.config import settings

reusable_oauth2 = HTTPBearer()

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: HTTPAuthorizationCredentials = Depends(reusable_oauth2)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(
            token.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        user_id = int(user_id)
    except (JWTError, ValueError):
        raise credentials_exception

    user = await db.get(Employee, user_id)
    if user is None:
        raise credentials_exception
    return user


async def get_current_evaluator(
    current_user = Depends(get_current_user)
):
    if current_user.role not in (ROLE_UNIT_ADMIN, ROLE_CENTRAL_ADMIN):
        raise HTTPException(403, "Unit or central admin access required")
    return current_user


async def get_current_admin(
    current_user = Depends(get_current_user)
):
    if current_user.role != ROLE_CENTRAL_ADMIN:
        raise HTTPException(403, "Central admin access required")
    return current_user
