"""Caller identity and admin key dependencies.

Authentication itself happens at the identity provider in front of the
API; requests arrive with the authenticated user id in a header.
"""

from fastapi import Header, HTTPException, Request


async def require_api_key(
    request: Request,
    x_ophelia_api_key: str = Header(..., alias="X-Ophelia-Api-Key"),
) -> str:
    """FastAPI dependency that validates the admin API key from header."""
    settings = request.app.state.services.settings
    if x_ophelia_api_key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid API key")
    return x_ophelia_api_key


async def require_user(
    x_ophelia_user_id: str = Header(..., alias="X-Ophelia-User-Id"),
) -> str:
    """FastAPI dependency returning the calling user's id."""
    user_id = x_ophelia_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    return user_id
