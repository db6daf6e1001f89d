"""User endpoints."""

from fastapi import APIRouter, status

from coursecatalog.api.dependencies import CallerDep, ServiceDep
from coursecatalog.api.models import (
    APIResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
    user_to_response,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=APIResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_user(user: UserCreate, service: ServiceDep) -> APIResponse[UserResponse]:
    """Register a new provider or learner."""
    created = service.register_user(
        email=user.email,
        password=user.password,
        name=user.name,
        kind=user.kind,
    )
    return APIResponse(data=user_to_response(created))


@router.post("/login", response_model=APIResponse[UserResponse])
def login(credentials: UserLogin, service: ServiceDep) -> APIResponse[UserResponse]:
    """Check credentials and return the account."""
    user = service.authenticate(credentials.email, credentials.password)
    return APIResponse(data=user_to_response(user))


@router.get("/me", response_model=APIResponse[UserResponse])
def get_me(service: ServiceDep, caller: CallerDep) -> APIResponse[UserResponse]:
    """Get the caller's account."""
    user = service.get_user(caller.user_id)
    return APIResponse(data=user_to_response(user))


@router.put("/me", response_model=APIResponse[UserResponse])
def update_me(
    update: UserUpdate, service: ServiceDep, caller: CallerDep
) -> APIResponse[UserResponse]:
    """Update the caller's account (partial update)."""
    user = service.update_profile(
        caller,
        name=update.name,
        email=update.email,
        password=update.password,
    )
    return APIResponse(data=user_to_response(user))


@router.get("/{user_id}", response_model=APIResponse[UserResponse])
def get_user(user_id: str, service: ServiceDep, _caller: CallerDep) -> APIResponse[UserResponse]:
    """Get a user by external id."""
    user = service.get_user_by_external_id(user_id)
    return APIResponse(data=user_to_response(user))
