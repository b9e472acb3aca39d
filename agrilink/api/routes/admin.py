"""Admin Routes — stats, moderation, verification review, complaints, maintenance.

Invariants:
    - Every route depends on require_admin (403 for non-admins)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.api.dependencies import require_admin
from agrilink.infrastructure.database import get_db
from agrilink.models.user import User
from agrilink.schemas.admin import ComplaintUpdate, ProductActiveUpdate
from agrilink.schemas.maintenance import MaintenanceActiveUpdate, MaintenanceCreate
from agrilink.schemas.verification import VerificationDecision
from agrilink.services.admin_service import AdminService
from agrilink.services.maintenance_service import MaintenanceService
from agrilink.services.offer_service import OfferService
from agrilink.services.verification_service import VerificationService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/stats")
async def stats(
    admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    return {"stats": await AdminService(db).stats()}


@router.get("/users")
async def list_users(
    search: str | None = None,
    user_type: str | None = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    users = await AdminService(db).list_users(search, user_type)
    return {"users": [serializers.admin_user(u) for u in users]}


@router.patch("/users/{user_id}/restriction")
async def toggle_restriction(
    user_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await AdminService(db).toggle_restriction(admin, user_id)
    return {"user": serializers.admin_user(user)}


@router.get("/products")
async def list_products(
    admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    items = await AdminService(db).list_products()
    return {"products": [serializers.product_listing(p, available) for p, available in items]}


@router.patch("/products/{product_id}")
async def set_product_active(
    product_id: UUID,
    body: ProductActiveUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    product = await AdminService(db).set_product_active(product_id, body.is_active)
    return {"id": str(product.id), "is_active": product.is_active}


@router.get("/verification-requests")
async def list_verification_requests(
    status: str | None = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    requests = await VerificationService(db).list_requests(status)
    return {
        "requests": [
            serializers.verification_request(r, include_user=True) for r in requests
        ],
    }


@router.post("/verification-requests/{request_id}/approve")
async def approve_verification(
    request_id: UUID,
    body: VerificationDecision | None = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    notes = body.notes if body else None
    request = await VerificationService(db).approve(admin, request_id, notes)
    return {
        "request": serializers.verification_request(request),
        "message": "Verification request approved",
    }


@router.post("/verification-requests/{request_id}/reject")
async def reject_verification(
    request_id: UUID,
    body: VerificationDecision | None = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    notes = body.notes if body else None
    request = await VerificationService(db).reject(admin, request_id, notes)
    return {
        "request": serializers.verification_request(request),
        "message": "Verification request rejected",
    }


@router.get("/complaints")
async def list_complaints(
    status: str | None = None,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    complaints, summary = await AdminService(db).list_complaints(status)
    return {
        "complaints": [serializers.admin_complaint(c) for c in complaints],
        "stats": summary,
    }


@router.patch("/complaints/{complaint_id}")
async def update_complaint(
    complaint_id: UUID,
    body: ComplaintUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    complaint = await AdminService(db).update_complaint(
        complaint_id, body.status, body.admin_notes,
    )
    return {"complaint": serializers.admin_complaint(complaint)}


@router.get("/user-reports")
async def list_user_reports(
    admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    reports = await AdminService(db).list_user_reports()
    return {"reports": [serializers.user_report(r) for r in reports]}


@router.post("/offers/expire")
async def expire_offers(
    admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    expired = await OfferService(db).expire_stale_offers()
    return {"expired": expired}


@router.get("/maintenance")
async def list_maintenance(
    admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db),
):
    schedules = await MaintenanceService(db).list_schedules()
    return {"schedules": [serializers.maintenance_schedule(s) for s in schedules]}


@router.post("/maintenance", status_code=status.HTTP_201_CREATED)
async def create_maintenance(
    body: MaintenanceCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    schedule = await MaintenanceService(db).create(body)
    return {
        "schedule": serializers.maintenance_schedule(schedule),
        "message": "Maintenance scheduled",
    }


@router.patch("/maintenance/{schedule_id}")
async def set_maintenance_active(
    schedule_id: UUID,
    body: MaintenanceActiveUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    schedule = await MaintenanceService(db).set_active(schedule_id, body.is_active)
    return {
        "schedule": serializers.maintenance_schedule(schedule),
        "message": "Maintenance activated" if schedule.is_active else "Maintenance cancelled",
    }


@router.delete("/maintenance/{schedule_id}")
async def delete_maintenance(
    schedule_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await MaintenanceService(db).delete(schedule_id)
    return {"message": "Maintenance schedule deleted"}
