"""Request-scoped dependencies."""

from fastapi import Header, HTTPException

from academy.utils.logging import add_context


async def current_user_id(x_user_id: str = Header(default="")) -> str:
    """Return the learner id asserted by the upstream authentication layer."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing authenticated user")
    add_context(user_id=x_user_id)
    return x_user_id
