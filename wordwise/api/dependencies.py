from __future__ import annotations

from fastapi import Header, HTTPException, Request

from wordwise.bootstrap import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def current_user(x_user_id: str | None = Header(default=None)) -> str:
    """Opaque learner id from the identity layer in front of the API."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()
