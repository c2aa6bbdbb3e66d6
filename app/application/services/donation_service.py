"""Donation service: record donations and aggregate them for admins."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.application.dtos.user import CurrentUser
from app.application.services.content_service import ContentService, snapshot_to_dict
from app.core.constants import COLLECTION_DONATIONS, DESCENDING
from app.domain.enums import DonationType, PaymentMethod
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import utc_now
from app.shared.utils.sanitization import sanitize_text

ANONYMOUS_NAME = "Anonyme"
MAX_MESSAGE_LENGTH = 500
MAX_LIST_LIMIT = 1000
MAX_TOP_DONORS = 100


class DonationService(ContentService):
    """Owns the `donations` collection."""

    collection_name = COLLECTION_DONATIONS
    resource_name = "Donation"

    def _date_filtered(self, start_date: datetime | None, end_date: datetime | None):
        query = self.collection
        if start_date is not None:
            query = query.where("createdAt", ">=", start_date)
        if end_date is not None:
            query = query.where("createdAt", "<=", end_date)
        return query

    async def create(
        self,
        *,
        amount: float,
        type: str,
        payment_method: str,
        message: str | None = None,
        is_anonymous: bool = False,
        user: CurrentUser,
    ) -> dict[str, Any]:
        """Record a donation made by the caller."""
        if amount is None or amount <= 0:
            raise ValidationException("Amount must be greater than 0", field="amount")
        if type not in DonationType.values():
            raise ValidationException("Type must be either oneTime or monthly", field="type")
        if payment_method not in PaymentMethod.values():
            raise ValidationException("Invalid payment method", field="paymentMethod")
        clean_message = sanitize_text(message) or None
        if clean_message and len(clean_message) > MAX_MESSAGE_LENGTH:
            raise ValidationException(
                f"Message must be less than {MAX_MESSAGE_LENGTH} characters", field="message"
            )

        donation_id = await self.collection.add(
            {
                "userId": user.uid,
                "userName": ANONYMOUS_NAME if is_anonymous else user.display_name,
                "amount": float(amount),
                "type": type,
                "paymentMethod": payment_method,
                "message": clean_message,
                "isAnonymous": bool(is_anonymous),
                "createdAt": utc_now(),
            }
        )
        return {
            "success": True,
            "message": "Donation created successfully",
            "donationId": donation_id,
        }

    async def list_all(
        self,
        *,
        type: str | None = None,
        payment_method: str | None = None,
        user_id: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> dict[str, Any]:
        req = self.page_request(page, limit, max_limit=MAX_LIST_LIMIT)
        query = self.collection
        if type:
            query = query.where("type", "==", type)
        if payment_method:
            query = query.where("paymentMethod", "==", payment_method)
        if user_id:
            query = query.where("userId", "==", user_id)
        donations, pagination = await self._paginate(
            query.order_by("createdAt", DESCENDING), req, count_query=query
        )
        return {"success": True, "donations": donations, "pagination": pagination}

    async def get(self, donation_id: str) -> dict[str, Any]:
        snap = await self._get_snapshot(donation_id)
        return {"success": True, "donation": snapshot_to_dict(snap)}

    async def delete(self, donation_id: str) -> dict[str, Any]:
        await self._get_snapshot(donation_id)
        await self.collection.document(donation_id).delete()
        return {"success": True, "message": "Donation deleted successfully"}

    async def stats(
        self,
        *,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        type: str | None = None,
    ) -> dict[str, Any]:
        """Totals plus per-payment-method and per-type breakdowns.

        Every known method and type is present in the breakdown, even at zero.
        """
        query = self._date_filtered(start_date, end_date)
        if type:
            query = query.where("type", "==", type)

        by_method = {m: {"count": 0, "amount": 0.0} for m in PaymentMethod.values()}
        by_type = {t: {"count": 0, "amount": 0.0} for t in DonationType.values()}
        total_donations = 0
        total_amount = 0.0
        async for snap in query.stream():
            data = snap.to_dict()
            amount = data.get("amount") or 0
            total_donations += 1
            total_amount += amount
            if data.get("paymentMethod") in by_method:
                by_method[data["paymentMethod"]]["count"] += 1
                by_method[data["paymentMethod"]]["amount"] += amount
            if data.get("type") in by_type:
                by_type[data["type"]]["count"] += 1
                by_type[data["type"]]["amount"] += amount

        return {
            "success": True,
            "stats": {
                "totalDonations": total_donations,
                "totalAmount": total_amount,
                "averageDonation": total_amount / total_donations if total_donations else 0,
                "byPaymentMethod": by_method,
                "byType": by_type,
            },
        }

    async def top_donors(
        self,
        *,
        limit: int = 10,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> dict[str, Any]:
        """Named donors ranked by total amount; anonymous gifts are excluded."""
        if not 1 <= limit <= MAX_TOP_DONORS:
            raise ValidationException(
                f"Limit must be between 1 and {MAX_TOP_DONORS}", field="limit"
            )
        donors: dict[str, dict[str, Any]] = {}
        async for snap in self._date_filtered(start_date, end_date).stream():
            data = snap.to_dict()
            if data.get("isAnonymous"):
                continue
            donor = donors.setdefault(
                data.get("userId"),
                {
                    "userId": data.get("userId"),
                    "userName": data.get("userName"),
                    "totalAmount": 0.0,
                    "donationCount": 0,
                },
            )
            donor["totalAmount"] += data.get("amount") or 0
            donor["donationCount"] += 1

        ranked = sorted(donors.values(), key=lambda d: d["totalAmount"], reverse=True)
        return {"success": True, "topDonors": ranked[:limit]}
