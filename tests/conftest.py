import pytest

from rest_framework.test import APIClient

from modules.accounts.actor import Actor
from modules.accounts.constants import Role, VerificationStatus
from modules.accounts.models import Profile, RoleAssignment
from modules.accounts.repositories.django_repository import ProfileDjangoRepository
from modules.listings.models import Listing
from modules.listings.repositories.django_repository import ListingDjangoRepository
from modules.transactions.constants import AGENT_REQUIRED_STATES, TransactionStatus
from modules.transactions.models import Transaction
from modules.transactions.repositories.django_repository import (
    TransactionDjangoRepository,
)
from modules.transactions.services import TransactionService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


def pytest_collection_modifyitems(items):
    # Request the database through the marker so pytest-django sets it up
    # before ``monkeypatch`` and tears it down after patches are undone.
    for item in items:
        item.add_marker(pytest.mark.django_db)


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# People
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_profile(django_user_model):
    """Factory: Django user + profile holding ``roles``."""

    def _make(
        username: str,
        roles=(Role.BUYER,),
        phone: str = "",
        name: str = "",
        city: str = "",
        verified: bool = False,
    ) -> Profile:
        user = django_user_model.objects.create_user(username=username, password="pass")
        profile = Profile.objects.create(
            user=user,
            name=name or username.title(),
            phone=phone,
            city=city,
            verification_status=(
                VerificationStatus.VERIFIED if verified else VerificationStatus.UNVERIFIED
            ),
        )
        for role in roles:
            RoleAssignment.objects.create(profile=profile, role=role)
        return profile

    return _make


@pytest.fixture()
def seller(make_profile):
    return make_profile(
        "abena",
        roles=(Role.SELLER,),
        phone="+237600000001",
        name="Abena Tech",
        city="Yaoundé",
        verified=True,
    )


@pytest.fixture()
def buyer(make_profile):
    return make_profile("paul", phone="+237600000002", name="Paul Buyer", city="Douala")


@pytest.fixture()
def admin(make_profile):
    return make_profile("boss", roles=(Role.ADMIN,), name="Admin Boss")


@pytest.fixture()
def agent(make_profile):
    return make_profile("kemi", roles=(Role.AGENT,), name="Kemi Agent", city="Bamenda")


@pytest.fixture()
def other_agent(make_profile):
    return make_profile("tabi", roles=(Role.AGENT,), name="Tabi Agent")


@pytest.fixture()
def actor_of():
    """Build the acting-user snapshot for a profile."""

    def _actor(profile: Profile) -> Actor:
        return Actor.from_profile(ProfileDjangoRepository().get_by_id(str(profile.id)))

    return _actor


# ---------------------------------------------------------------------------
# Marketplace data
# ---------------------------------------------------------------------------


@pytest.fixture()
def listing(seller):
    return Listing.objects.create(
        seller=seller,
        title="iPhone 14 Pro Max 256GB",
        price=450_000,
        delivery_fee=5_000,
    )


@pytest.fixture()
def make_transaction(seller, buyer, listing, agent):
    """Factory: a transaction already sitting in ``status``.

    Agent-required statuses get ``agent`` assigned unless one is given.
    """

    def _make(status: str = TransactionStatus.PENDING_SETUP, **overrides) -> Transaction:
        data = {
            "listing": listing,
            "product_name": listing.title,
            "price": listing.price,
            "delivery_fee": listing.delivery_fee,
            "seller": seller,
            "buyer": buyer,
            "buyer_phone": "600000002",
            "status": status,
        }
        if status in AGENT_REQUIRED_STATES:
            data["assigned_agent"] = agent
        data.update(overrides)
        return Transaction.objects.create(**data)

    return _make


@pytest.fixture()
def transaction_service():
    return TransactionService(
        transaction_repository=TransactionDjangoRepository(),
        profile_repository=ProfileDjangoRepository(),
        listing_repository=ListingDjangoRepository(),
    )
