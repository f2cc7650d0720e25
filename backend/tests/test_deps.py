from tutorhub.api.deps import Services, get_services
from tutorhub.services.booking_service import BookingService


def test_get_services_defaults_to_memory() -> None:
    services = get_services()
    assert isinstance(services, Services)
    assert isinstance(services.bookings, BookingService)


def test_memory_services_share_state_between_requests() -> None:
    from tutorhub.infra.repositories.user_repository import Role

    get_services().users.register("deps-teacher", role=Role.TEACHER, timezone="UTC")
    assert get_services().users.get("deps-teacher").timezone == "UTC"
