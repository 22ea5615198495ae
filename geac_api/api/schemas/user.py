"""
Authentication principal handed to the authentication layer.

Not exposed over HTTP: it carries the password hash.
"""

import uuid

from pydantic import BaseModel, computed_field

from geac_api.domain.enums import UserRole


class UserPrincipal(BaseModel):
    """Identity and credentials of a user, as read from storage."""

    id: uuid.UUID
    username: str
    email: str
    password_hash: str
    role: UserRole
    is_active: bool = True

    model_config = {"from_attributes": True, "frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def authorities(self) -> list[str]:
        """Authorities granted to the user, e.g. ``["ROLE_ADMIN"]``."""
        return [self.role.authority]
