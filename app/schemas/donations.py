"""Donation schemas."""

from pydantic import Field

from app.schemas._base import CamelModel


class DonationCreate(CamelModel):
    """Request body for POST /admin/donations.

    Amount, type and payment method are checked by DonationService so the
    error messages stay the same for every caller.
    """

    amount: float
    type: str
    payment_method: str
    message: str | None = None
    is_anonymous: bool = False
