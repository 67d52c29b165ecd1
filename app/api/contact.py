"""
Contact API endpoints
"""
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from json import JSONDecodeError
from typing import Any, Dict

from app.core.dependencies import (
    get_contact_service, get_current_admin, get_health_service, rate_limit
)
from app.core.exceptions import ValidationError
from app.schemas import ApiResponse, ContactStatusUpdate
from app.services import ContactService, HealthService
from app.utils.validation import FieldError

router = APIRouter(prefix="/contact", tags=["Contact"])
admin_router = APIRouter(
    prefix="/contact/admin",
    tags=["Contact Admin"],
    dependencies=[Depends(get_current_admin)]
)


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Request body as a flat mapping, from JSON or a regular form post

    Raises:
        ValidationError: If the body is not a JSON object
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        try:
            return {key: value for key, value in form.items() if isinstance(value, str)}
        finally:
            await form.close()

    try:
        payload = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        payload = None
    if not isinstance(payload, dict):
        raise ValidationError([FieldError("body", "Request body must be a JSON object")])
    return payload


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("contact"))]
)
async def create_contact(
    request: Request,
    service: ContactService = Depends(get_contact_service)
):
    """
    Submit the contact form

    Body: { fullName, email, contact, message }

    Returns:
        201 envelope with id, submittedAt and reference
    """
    payload = await read_payload(request)
    submitted = await service.submit(payload)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=ApiResponse.ok(
            "Thank you for contacting Africure Pharma! We will get back to you soon.",
            submitted.model_dump()
        )
    )


@router.get("/health")
async def contact_health(service: HealthService = Depends(get_health_service)):
    """Health check for the contact service and its database"""
    status_code, report = await service.check()
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(
            success=status_code == 200,
            message=f"Service is {report['status']}",
            data=report
        ).to_content()
    )


@router.get("/test")
async def test_connection(service: HealthService = Depends(get_health_service)):
    """Test the Supabase connection"""
    result = await service.test_connection()
    message = "Database connection successful" if result["connected"] else "Database connection failed"
    return ApiResponse.ok(message, result)


@admin_router.get("/all")
async def get_all_contacts(
    page: int = Query(1, description="Page number"),
    limit: int = Query(10, description="Items per page"),
    sortBy: str = Query("created_at", description="Column to sort by"),
    sortOrder: str = Query("desc", description="asc or desc"),
    service: ContactService = Depends(get_contact_service)
):
    """Paginated contact submissions (admin only)"""
    result = await service.list_contacts(page, limit, sortBy, sortOrder)
    content = ApiResponse.ok("Contacts retrieved successfully", result.rows)
    content["pagination"] = result.pagination()
    return content


@admin_router.get("/stats")
async def get_contact_stats(service: ContactService = Depends(get_contact_service)):
    """Submission counts (admin only)"""
    stats = await service.get_stats()
    return ApiResponse.ok("Contact statistics retrieved successfully", stats)


@admin_router.get("/{contact_id}")
async def get_contact(
    contact_id: int,
    service: ContactService = Depends(get_contact_service)
):
    """One contact submission (admin only)"""
    contact = await service.get_contact(contact_id)
    return ApiResponse.ok("Contact retrieved successfully", contact)


@admin_router.put("/{contact_id}/status")
async def update_contact_status(
    contact_id: int,
    update: ContactStatusUpdate,
    service: ContactService = Depends(get_contact_service)
):
    """Mark a contact submission as read, replied or archived (admin only)"""
    contact = await service.update_status(contact_id, update.status)
    return ApiResponse.ok("Contact status updated successfully", contact)
