"""Donation API: any signed-in user can donate; reporting is admin-only."""

from datetime import datetime

from fastapi import APIRouter, Query

from app.api.dependencies import AdminDep, ContainerDep, CurrentUserDep
from app.schemas.donations import DonationCreate

router = APIRouter()


@router.post("", status_code=201)
async def create_donation(body: DonationCreate, user: CurrentUserDep, container: ContainerDep):
    return await container.donations.create(
        amount=body.amount,
        type=body.type,
        payment_method=body.payment_method,
        message=body.message,
        is_anonymous=body.is_anonymous,
        user=user,
    )


@router.get("")
async def list_donations(
    admin: AdminDep,
    container: ContainerDep,
    type: str | None = None,
    payment_method: str | None = Query(None, alias="paymentMethod"),
    user_id: str | None = Query(None, alias="userId"),
    page: int = Query(1),
    limit: int | None = Query(None),
):
    return await container.donations.list_all(
        type=type, payment_method=payment_method, user_id=user_id, page=page, limit=limit
    )


@router.get("/stats")
async def donation_stats(
    admin: AdminDep,
    container: ContainerDep,
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    type: str | None = None,
):
    return await container.donations.stats(start_date=start_date, end_date=end_date, type=type)


@router.get("/top-donors")
async def top_donors(
    admin: AdminDep,
    container: ContainerDep,
    limit: int = Query(10),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
):
    return await container.donations.top_donors(
        limit=limit, start_date=start_date, end_date=end_date
    )


@router.get("/{donation_id}")
async def get_donation(donation_id: str, admin: AdminDep, container: ContainerDep):
    return await container.donations.get(donation_id)


@router.delete("/{donation_id}")
async def delete_donation(donation_id: str, admin: AdminDep, container: ContainerDep):
    return await container.donations.delete(donation_id)
