import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_payment_gateway, get_repository
from app.core.permissions import Identity, UserRole
from app.core.security import create_access_token
from app.gateways.manual import ManualGateway
from app.main import app
from app.repositories.memory import InMemoryRepository
from app.services.availability_service import AvailabilityService
from app.services.booking_service import BookingService
from app.services.negotiation_service import NegotiationService
from app.services.payment_bridge import PaymentBridge


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def gateway():
    return ManualGateway(app_url="http://localhost:3000")


@pytest.fixture
def hotel(repository):
    return repository.add_hotel("Hotel du Port", city="Marseille")


@pytest.fixture
def other_hotel(repository):
    return repository.add_hotel("Grand Hotel", city="Lyon")


@pytest.fixture
def room(repository, hotel):
    return repository.add_room(hotel, "Sea view double", price="120.00")


@pytest.fixture
def guest_user(repository):
    return repository.add_user("alice@example.com", first_name="Alice")


@pytest.fixture
def other_guest_user(repository):
    return repository.add_user("bob@example.com", first_name="Bob")


@pytest.fixture
def manager_user(repository, hotel):
    user = repository.add_user("manager@hotelduport.fr", role="manager")
    repository.add_manager(user, hotel)
    return user


@pytest.fixture
def other_manager_user(repository, other_hotel):
    user = repository.add_user("manager@grandhotel.fr", role="manager")
    repository.add_manager(user, other_hotel)
    return user


@pytest.fixture
def guest(guest_user):
    return Identity(user_id=guest_user.id)


@pytest.fixture
def other_guest(other_guest_user):
    return Identity(user_id=other_guest_user.id)


@pytest.fixture
def manager(manager_user, hotel):
    return Identity(
        user_id=manager_user.id,
        role=UserRole.MANAGER,
        managed_hotel_ids=frozenset({hotel.id}),
    )


@pytest.fixture
def other_manager(other_manager_user, other_hotel):
    return Identity(
        user_id=other_manager_user.id,
        role=UserRole.MANAGER,
        managed_hotel_ids=frozenset({other_hotel.id}),
    )


@pytest.fixture
def availability(repository):
    return AvailabilityService(repository)


@pytest.fixture
def booking_service(repository, availability, gateway):
    return BookingService(repository, availability, PaymentBridge(gateway))


@pytest.fixture
def negotiation_service(repository, availability, booking_service):
    return NegotiationService(repository, availability, booking_service)


@pytest.fixture
def client(repository, gateway):
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def make(user) -> dict[str, str]:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return make
