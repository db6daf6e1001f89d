"""Course endpoints."""

from datetime import date

from fastapi import APIRouter, Query, status

from coursecatalog.api.dependencies import CallerDep, ServiceDep
from coursecatalog.api.models import (
    APIResponse,
    CoursePageResponse,
    CourseRequest,
    CourseResponse,
    course_page_to_response,
    course_to_response,
)
from coursecatalog.catalog import SearchFilters
from coursecatalog.store import CourseCategory, CourseMode, Pagination, SortDirection

router = APIRouter(prefix="/courses", tags=["courses"])


def _caller_external_id(service: ServiceDep, caller: CallerDep) -> str:
    return service.get_user(caller.user_id).external_id


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(
    course: CourseRequest, service: ServiceDep, caller: CallerDep
) -> APIResponse[CourseResponse]:
    """Create a course, or update it if it already exists for the caller."""
    candidate = course.to_candidate(_caller_external_id(service, caller))
    saved = service.create_or_update_course(candidate, caller)
    return APIResponse(data=course_to_response(saved))


@router.get("/mine", response_model=APIResponse[list[CourseResponse]])
def list_my_courses(service: ServiceDep, caller: CallerDep) -> APIResponse[list[CourseResponse]]:
    """List the caller's courses."""
    courses = service.list_my_courses(caller)
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.get("/search", response_model=APIResponse[CoursePageResponse])
def search_courses(
    service: ServiceDep,
    pin_code: str | None = None,
    filter_pin_code: str | None = None,
    category: CourseCategory | None = None,
    mode: CourseMode | None = None,
    is_free: bool | None = None,
    start_from: date | None = None,
    start_to: date | None = None,
    page: int = Query(default=0, ge=0),
    size: int | None = Query(default=None, ge=1),
    direction: SortDirection = SortDirection.ASC,
) -> APIResponse[CoursePageResponse]:
    """Search published courses. Public; no caller identity needed."""
    filters = SearchFilters(
        pin_code=filter_pin_code,
        category=category,
        mode=mode,
        is_free=is_free,
        start_from=start_from,
        start_to=start_to,
    )
    pagination = Pagination(
        page=page,
        size=size if size is not None else service.default_page_size,
        direction=direction,
    )
    result = service.search_courses(pin_code, filters, pagination)
    return APIResponse(data=course_page_to_response(result))


@router.get("/{course_id}", response_model=APIResponse[CourseResponse])
def get_course(
    course_id: str, service: ServiceDep, caller: CallerDep
) -> APIResponse[CourseResponse]:
    """Get one of the caller's courses."""
    course = service.get_course(course_id, caller)
    return APIResponse(data=course_to_response(course))


@router.put("/{course_id}", response_model=APIResponse[CourseResponse])
def update_course(
    course_id: str, course: CourseRequest, service: ServiceDep, caller: CallerDep
) -> APIResponse[CourseResponse]:
    """Replace the mutable fields of one of the caller's courses."""
    candidate = course.to_candidate(_caller_external_id(service, caller))
    updated = service.update_course(course_id, candidate, caller)
    return APIResponse(data=course_to_response(updated))


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(course_id: str, service: ServiceDep, caller: CallerDep) -> None:
    """Delete one of the caller's courses."""
    service.delete_course(course_id, caller)


@router.post("/{course_id}/publish", response_model=APIResponse[CourseResponse])
def publish_course(
    course_id: str, service: ServiceDep, caller: CallerDep
) -> APIResponse[CourseResponse]:
    """Publish one of the caller's courses."""
    course = service.publish_course(course_id, caller)
    return APIResponse(data=course_to_response(course))


@router.post("/{course_id}/unpublish", response_model=APIResponse[CourseResponse])
def unpublish_course(
    course_id: str, service: ServiceDep, caller: CallerDep
) -> APIResponse[CourseResponse]:
    """Unpublish one of the caller's courses."""
    course = service.unpublish_course(course_id, caller)
    return APIResponse(data=course_to_response(course))
