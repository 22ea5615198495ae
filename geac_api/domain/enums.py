"""
Domain enums matching the database enum types.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role granted to a user account - matches the user_role enum."""

    STUDENT = "STUDENT"
    PROFESSOR = "PROFESSOR"
    ORGANIZER = "ORGANIZER"
    ADMIN = "ADMIN"

    @property
    def authority(self) -> str:
        """Authority string checked by the authentication layer."""
        return f"ROLE_{self.value}"
