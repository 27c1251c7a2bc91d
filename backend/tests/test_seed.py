"""Development sample data."""

from conftest import NOW
from shuttle.models.enums import BookingStatus, PaymentStatus
from shuttle.services.seed import seed_sample_data


async def test_seed_loads_sample_data_once(service):
    assert await seed_sample_data(service) is True
    assert await seed_sample_data(service) is False

    properties = await service.list_properties()
    assert [p.slug for p in properties] == ["greenacres", "sunnydale"]

    trips = await service.list_available_trips_by_slug("sunnydale")
    assert len(trips) == 2
    assert all(t.departure_date > NOW for t in trips)
    assert trips[0].seats_available == 27
    assert trips[1].seats_available == 30

    manifest = await service.get_manifest(trips[0].id)
    assert [(row.name, row.seats) for row in manifest] == [("John Smith", 2), ("Jane Doe", 1)]
    assert {row.payment_status for row in manifest} == {PaymentStatus.PAID}
    assert await service.ledger.count_by_status(BookingStatus.CONFIRMED) == 2
