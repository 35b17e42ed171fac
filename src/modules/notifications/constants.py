"""Notification types, the admin broadcast recipient and message texts."""

from __future__ import annotations

from django.db import models


class NotificationType(models.TextChoices):
    SELLER = "seller", "Seller"
    BUYER = "buyer", "Buyer"
    ADMIN = "admin", "Admin"
    AGENT = "agent", "Agent"


# Stored as the recipient of notifications meant for every admin.
ADMIN_BROADCAST_RECIPIENT = "__ADMIN__"

ESCROW_HELD_MESSAGE = "Secure payment received — prepare for delivery."
AT_HUB_MESSAGE = "Item received at ProList Hub."
COMPLETED_MESSAGE = "Buyer confirmed delivery — payment released securely."
OUT_FOR_DELIVERY_MESSAGE = "Your item is out for delivery."
DELIVERED_MESSAGE = "Item delivered — please confirm you received it."
IN_TRANSIT_MESSAGE = "New item in transit — update when received at hub."
AGENT_ASSIGNED_MESSAGE = "New delivery assigned to you."
REFUNDED_MESSAGE = "Transaction refunded — funds returned to the buyer."
CANCELLED_MESSAGE = "Transaction cancelled."
