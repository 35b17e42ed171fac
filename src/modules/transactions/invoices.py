"""Invoice numbering and snapshot building.

Numbers look like ``PL-2025-000123``: prefix, issue year, then a global
sequence drawn from the ``invoice`` counter and zero-padded to six digits.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from django.conf import settings

INVOICE_COUNTER = "invoice"
INVOICE_SEQUENCE_DIGITS = 6


def format_invoice_number(year: int, sequence: int, prefix: str | None = None) -> str:
    prefix = prefix or settings.INVOICE_NUMBER_PREFIX
    return f"{prefix}-{year}-{sequence:0{INVOICE_SEQUENCE_DIGITS}d}"


def invoice_fields(transaction: Any, number: str, issued_at: datetime) -> dict[str, Any]:
    """Snapshot of the parties and amounts at the moment escrow was funded."""
    seller = transaction.seller
    buyer = transaction.buyer
    return {
        "transaction_id": transaction.id,
        "number": number,
        "issued_at": issued_at,
        "seller_name": seller.name or str(seller),
        "seller_phone": seller.phone,
        "seller_city": seller.city,
        "buyer_name": transaction.buyer_name or (buyer.name if buyer else ""),
        "buyer_phone": transaction.buyer_phone or (buyer.phone if buyer else ""),
        "buyer_city": transaction.buyer_city or (buyer.city if buyer else ""),
        "item_title": transaction.product_name,
        "item_price": transaction.price,
        "delivery_fee": transaction.delivery_fee,
        "total": transaction.total,
        "is_pre_order": transaction.is_pre_order,
    }
