import jwt
from datetime import datetime, timedelta, timezone
from argon2 import PasswordHasher
from salon.config import settings

ph = PasswordHasher()

def hash_pin(p: str) -> str:
    return ph.hash(p)

def create_token(sub: str, role: str = "staff") -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=settings.JWT_EXP_MIN)
    payload = {"sub": sub, "role": role, "iss": settings.JWT_ISS, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, settings.APP_SECRET, algorithm="HS256")

def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.APP_SECRET, algorithms=["HS256"], issuer=settings.JWT_ISS, options={"verify_aud": False})
