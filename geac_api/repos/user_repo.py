"""
Repository layer for User lookups.

Used by the authentication layer to resolve a login name into a principal
and to check email availability during sign-up. Nothing here is exposed
over HTTP.

Matching is exact: no case folding and no whitespace trimming is applied
to the arguments, so the result depends on the stored value only.
"""

import logging

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from geac_api.api.schemas.user import UserPrincipal
from geac_api.core.errors import UserNotFoundError
from geac_api.db.models import User

logger = logging.getLogger(__name__)


async def find_user_by_username(db: AsyncSession, username: str) -> UserPrincipal | None:
    """
    Look up a user by username.

    Args:
        db: Database session
        username: Login name, compared exactly

    Returns:
        The user's principal, or None if no row matches
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()

    if user is None:
        logger.debug(f"No user with username: {username}")
        return None

    return UserPrincipal.model_validate(user)


async def load_user_by_username(db: AsyncSession, username: str) -> UserPrincipal:
    """
    Resolve a username into a principal for authentication.

    Raises:
        UserNotFoundError: If no user has that username
    """
    principal = await find_user_by_username(db, username)
    if principal is None:
        logger.warning("Authentication lookup failed", extra={"username": username})
        raise UserNotFoundError(username)
    return principal


async def exists_user_by_email(db: AsyncSession, email: str) -> bool:
    """
    Check whether any user is registered with the given email.

    Args:
        db: Database session
        email: Email address, compared exactly

    Returns:
        True if a row has that email, False otherwise
    """
    result = await db.execute(select(exists().where(User.email == email)))
    return bool(result.scalar())
