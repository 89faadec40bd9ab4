# backend/utils/session.py
import secrets
from fastapi import Request

CART_SESSION_KEY = "cart_id"


# Opaque cart token kept in the signed session cookie, created on first use
def get_cart_session_id(request: Request) -> str:
    session_id = request.session.get(CART_SESSION_KEY)
    if not session_id:
        session_id = secrets.token_urlsafe(16)
        request.session[CART_SESSION_KEY] = session_id
    return session_id
