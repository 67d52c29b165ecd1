"""
Career application API endpoints
"""
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from typing import Optional

from app.core.dependencies import get_career_service, get_current_admin, rate_limit
from app.schemas import ApiResponse, ApplicationStatusUpdate
from app.services import CareerService
from app.utils.file_handler import select_single_file

router = APIRouter(prefix="/careers", tags=["Careers"])
admin_router = APIRouter(
    prefix="/careers/admin",
    tags=["Careers Admin"],
    dependencies=[Depends(get_current_admin)]
)

RESUME_FIELD = "resume"


@router.post(
    "/apply",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("career"))]
)
async def submit_application(
    request: Request,
    service: CareerService = Depends(get_career_service)
):
    """
    Submit a career application (multipart form)

    Fields: fullName, email, phone, location, position, experience,
    qualification, coverLetter?, consent, resume (PDF/DOC/DOCX, max 5MB)

    Returns:
        201 envelope with applicationNumber, id, submittedAt, position, status
    """
    form = await request.form()
    try:
        fields = {
            key: value for key, value in form.items()
            if key != RESUME_FIELD and isinstance(value, str)
        }
        resume = select_single_file(form.getlist(RESUME_FIELD))
        submitted = await service.submit(fields, resume)
    finally:
        await form.close()

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=ApiResponse.ok(
            "Thank you for your application! We have received your details and will get back to you soon.",
            submitted.model_dump()
        )
    )


@router.get("/positions")
async def get_positions(service: CareerService = Depends(get_career_service)):
    """Positions open for applications"""
    positions = [p.model_dump() for p in service.get_positions()]
    return ApiResponse.ok("Available positions retrieved successfully", positions)


@admin_router.get("/applications")
async def get_all_applications(
    page: int = Query(1, description="Page number"),
    limit: int = Query(10, description="Items per page"),
    sortBy: str = Query("application_date", description="Column to sort by"),
    sortOrder: str = Query("desc", description="asc or desc"),
    status: Optional[str] = Query(None, description="Filter by application status"),
    position: Optional[str] = Query(None, description="Filter by position code"),
    service: CareerService = Depends(get_career_service)
):
    """Paginated career applications (admin only)"""
    result = await service.list_applications(page, limit, sortBy, sortOrder, status, position)
    content = ApiResponse.ok("Applications retrieved successfully", result.rows)
    content["pagination"] = result.pagination()
    return content


@admin_router.get("/applications/{application_id}")
async def get_application(
    application_id: int,
    service: CareerService = Depends(get_career_service)
):
    """One career application (admin only)"""
    application = await service.get_application(application_id)
    return ApiResponse.ok("Application retrieved successfully", application)


@admin_router.put("/applications/{application_id}/status")
async def update_application_status(
    application_id: int,
    update: ApplicationStatusUpdate,
    service: CareerService = Depends(get_career_service)
):
    """Move an application through the hiring pipeline (admin only)"""
    application = await service.update_status(application_id, update.status, update.notes)
    return ApiResponse.ok("Application status updated successfully", application)


@admin_router.get("/stats")
async def get_application_stats(service: CareerService = Depends(get_career_service)):
    """Application counts and status breakdown (admin only)"""
    stats = await service.get_stats()
    return ApiResponse.ok("Application statistics retrieved successfully", stats)
