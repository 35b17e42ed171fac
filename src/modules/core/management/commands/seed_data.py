from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.accounts.actor import Actor
from modules.accounts.constants import Role, VerificationStatus
from modules.accounts.models import Profile
from modules.accounts.repositories.django_repository import ProfileDjangoRepository
from modules.listings.constants import ListingCategory
from modules.listings.models import Listing
from modules.listings.repositories.django_repository import ListingDjangoRepository
from modules.transactions.dtos import (
    AssignAgentDTO,
    CreateTransactionDTO,
    RecordPaymentDTO,
    ShipDTO,
)
from modules.transactions.models import Transaction
from modules.transactions.repositories.django_repository import (
    TransactionDjangoRepository,
)
from modules.transactions.services import TransactionService

DEMO_PASSWORD = "prolist123"

# username, name, phone, city, roles, verified
DEMO_USERS = [
    ("seller", "Abena Tech", "+237600000001", "Yaoundé", [Role.SELLER], True),
    ("buyer", "Paul Buyer", "+237600000002", "Douala", [Role.BUYER], False),
    ("admin", "Admin Boss", "+237600000003", "Douala", [Role.ADMIN], True),
    ("agent", "Kemi Agent", "+237600000004", "Bamenda", [Role.AGENT], True),
]

DEMO_LISTINGS = [
    (
        "iPhone 14 Pro Max 256GB",
        "Factory unlocked, battery health 92%, box and cable included.",
        450_000,
        ListingCategory.ELECTRONICS,
        "Like new",
    ),
    (
        "Samsung Galaxy S24 Ultra",
        "Brand new, sealed. Titanium grey.",
        520_000,
        ListingCategory.ELECTRONICS,
        "New",
    ),
]

DEMO_DELIVERY_FEE = 5_000


class Command(BaseCommand):
    help = "Seed the database with demo users, listings and transactions."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding demo data...")

        profiles = self._seed_users()
        listings = self._seed_listings(profiles["seller"])
        transactions_created = self._seed_transactions(profiles, listings)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"profiles={len(profiles)}, "
                f"listings={len(listings)}, "
                f"transactions={transactions_created}"
            )
        )

    def _seed_users(self) -> dict[str, Profile]:
        self.stdout.write("Creating users...")
        User = get_user_model()
        repository = ProfileDjangoRepository()
        profiles: dict[str, Profile] = {}

        for username, name, phone, city, roles, verified in DEMO_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                is_admin = Role.ADMIN in roles
                user = User.objects.create_user(
                    username,
                    password=DEMO_PASSWORD,
                    is_staff=is_admin,
                    is_superuser=is_admin,
                )
            profile = repository.get_or_create_for_user(user)
            profile.name = name
            profile.phone = phone
            profile.city = city
            if verified:
                profile.verification_status = VerificationStatus.VERIFIED
                profile.full_name = name
                profile.verification_city = city
            repository.save(profile)
            for role in roles:
                repository.add_role(profile, role)
            profiles[username] = profile

        self.stdout.write(self.style.SUCCESS("Creating users... Done!"))
        return profiles

    def _seed_listings(self, seller: Profile) -> list[Listing]:
        self.stdout.write("Creating listings...")
        listings: list[Listing] = []
        for title, description, price, category, condition in DEMO_LISTINGS:
            listing, _ = Listing.objects.get_or_create(
                seller=seller,
                title=title,
                defaults={
                    "description": description,
                    "price": price,
                    "delivery_fee": DEMO_DELIVERY_FEE,
                    "category": category,
                    "condition": condition,
                },
            )
            listings.append(listing)

        pre_order, _ = Listing.objects.get_or_create(
            seller=seller,
            title="MacBook Air M3 13-inch",
            defaults={
                "description": "Arriving with the next shipment from Dubai.",
                "price": 780_000,
                "delivery_fee": DEMO_DELIVERY_FEE,
                "category": ListingCategory.ELECTRONICS,
                "condition": "New",
                "is_pre_order": True,
                "expected_arrival": timezone.localdate() + timedelta(days=21),
                "pre_order_note": "Deposit refunded if the shipment is delayed.",
            },
        )
        listings.append(pre_order)
        self.stdout.write(self.style.SUCCESS("Creating listings... Done!"))
        return listings

    def _seed_transactions(
        self, profiles: dict[str, Profile], listings: list[Listing]
    ) -> int:
        self.stdout.write("Creating transactions...")
        if Transaction.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping transactions (already seeded)."))
            return 0

        service = TransactionService(
            transaction_repository=TransactionDjangoRepository(),
            profile_repository=ProfileDjangoRepository(),
            listing_repository=ListingDjangoRepository(),
        )
        actors = {
            key: Actor.from_profile(ProfileDjangoRepository().get_by_id(str(p.id)) or p)
            for key, p in profiles.items()
        }
        buyer, seller, admin = actors["buyer"], actors["seller"], actors["admin"]
        iphone, samsung, macbook = listings

        def open_request(listing: Listing) -> Transaction:
            return service.create_transaction(
                buyer,
                CreateTransactionDTO(
                    listing_id=listing.id,
                    buyer_name=profiles["buyer"].name,
                    delivery_city="Douala",
                    delivery_address="Rue Joss, Bonanjo",
                ),
            )

        # Waiting for the buyer to pay.
        awaiting = open_request(macbook)
        service.request_payment(str(awaiting.id), buyer)

        # Paid, waiting for the seller to ship.
        paid = open_request(iphone)
        service.request_payment(str(paid.id), buyer)
        service.record_payment(str(paid.id), buyer, RecordPaymentDTO(reference="MOMO-DEMO-001"))

        # Out for delivery with the demo agent.
        delivering = open_request(samsung)
        tx_id = str(delivering.id)
        service.request_payment(tx_id, buyer)
        service.record_payment(tx_id, admin, RecordPaymentDTO(reference="OM-DEMO-002"))
        service.ship(
            tx_id,
            seller,
            ShipDTO(dropoff_company="Touristique Express", dropoff_city="Yaoundé"),
        )
        service.receive_at_hub(tx_id, admin)
        service.assign_agent(tx_id, admin, AssignAgentDTO(agent_id=actors["agent"].id))

        self.stdout.write(self.style.SUCCESS("Creating transactions... Done!"))
        return 3
