# /classroom-backend/app/core/deps.py

"""
Request-scoped identity of the acting user.

Authentication happens in front of this service; by the time a request
arrives, the gateway has resolved the caller and forwards their ID in the
`X-User-Id` header.
"""

from fastapi import Header, HTTPException, status


def get_current_user_id(x_user_id: str = Header(default="", alias="X-User-Id")) -> str:
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return user_id
