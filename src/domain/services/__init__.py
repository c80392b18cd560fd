"""Domain services."""

from src.domain.services.auth_service import AuthService
from src.domain.services.catalog import CourseService, ProviderService
from src.domain.services.user_import import UserImportService
from src.domain.services.users import UserService

__all__ = [
    "AuthService",
    "CourseService",
    "ProviderService",
    "UserImportService",
    "UserService",
]
