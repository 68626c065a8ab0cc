from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from salon.config import settings
from salon.db import SessionLocal
from salon.store.base import DocumentStore
from salon.store.sql import SqlDocumentStore
from salon.util.security import decode_token

auth_scheme = HTTPBearer(auto_error=False)

_store: DocumentStore | None = None

def get_store() -> DocumentStore:
    global _store
    if _store is None:
        _store = SqlDocumentStore(SessionLocal, settings.TENANT_ID)
    return _store

def _claims(creds: HTTPAuthorizationCredentials | None) -> dict:
    if not creds:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        return decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

def require_auth(creds: HTTPAuthorizationCredentials | None = Depends(auth_scheme)) -> str:
    return _claims(creds)["sub"]

def require_owner(creds: HTTPAuthorizationCredentials | None = Depends(auth_scheme)) -> str:
    data = _claims(creds)
    if data.get("role") != "owner":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Owner role required")
    return data["sub"]
