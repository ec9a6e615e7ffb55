# -*- coding: utf-8 -*-
"""
Password hashing, JWT tokens and the authorization dependencies used by the routes.
"""
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.orm import Session

from backoffice import database
from backoffice.config import Config
from backoffice.enums import UserRole
from backoffice.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=Config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, Config.SECRET_KEY, algorithm=Config.ALGORITHM)


def get_user(db: Session, login: str):
    """Finds a user by username or e-mail."""
    return db.query(User).filter(or_(User.username == login, User.email == login)).first()


def authenticate_user(db: Session, login: str, password: str):
    user = get_user(db, login)
    if not user or not user.hashed_password or not verify_password(password, user.hashed_password):
        return None
    return user


# --- AUTHENTICATION AND AUTHORIZATION DEPENDENCIES ---
async def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(database.get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials", headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, Config.SECRET_KEY, algorithms=[Config.ALGORITHM])
        username = payload.get("sub")
        if username is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        raise credentials_exception
    return user


async def get_current_active_user(current_user: User = Depends(get_current_user)):
    """
    Rejects disabled accounts and accounts still waiting for approval.
    """
    if not current_user.is_active or current_user.role == UserRole.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is pending approval by an administrator.",
        )
    return current_user


async def get_staff_user(current_user: User = Depends(get_current_active_user)):
    if current_user.role not in (UserRole.ADMIN.value, UserRole.STAFF.value):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Restricted to administrators and staff.")
    return current_user


async def get_admin_user(current_user: User = Depends(get_current_active_user)):
    if current_user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Restricted to administrators.")
    return current_user


async def get_current_teacher(current_user: User = Depends(get_current_active_user)):
    """
    Returns the Teacher linked to the logged-in user.
    """
    if current_user.role != UserRole.TEACHER.value or current_user.teacher is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Restricted to teachers.")
    return current_user.teacher
