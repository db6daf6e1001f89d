"""REST API for the course catalog."""

from coursecatalog.api.app import app, create_app
from coursecatalog.api.models import (
    APIResponse,
    CourseRequest,
    CourseResponse,
    UserCreate,
    UserResponse,
)

__all__ = [
    "APIResponse",
    "CourseRequest",
    "CourseResponse",
    "UserCreate",
    "UserResponse",
    "app",
    "create_app",
]
