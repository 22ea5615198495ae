"""
Pydantic schemas for API responses.

This package contains schema definitions for the catalog entities
and the authentication principal.
"""

# Re-export schemas for convenient imports.
from .category import CategoryResponse as CategoryResponse
from .location import LocationResponse as LocationResponse
from .requirement import RequirementResponse as RequirementResponse
from .user import UserPrincipal as UserPrincipal
