"""Tests for services."""
import asyncio
from datetime import date

import pytest

from gym_booking.errors import BookingConflictError, BookingNotFoundError, GymNotFoundError
from gym_booking.models import BookingStatus, GymCreate, OrderRequest
from gym_booking.services.booking_service import BookingService
from gym_booking.services.gym_service import GymService, haversine_km
from gym_booking.services.storage_service import GYMS

from conftest import make_gym_document, make_order_document


@pytest.fixture
def gym_service(storage):
    """Create a gym service instance."""
    return GymService(storage=storage)


@pytest.fixture
def booking_service(storage):
    """Create a booking service instance."""
    return BookingService(storage=storage)


def order_for(gym_id="g1", **overrides) -> OrderRequest:
    return OrderRequest.model_validate(make_order_document(gym_id, **overrides))


class TestStorageService:
    """Tests for StorageService."""

    def test_generate_id(self, storage):
        """Test document ID generation."""
        doc_id = storage.generate_id()
        assert isinstance(doc_id, str)
        assert len(doc_id) == 24
        # Should start with a timestamp
        assert doc_id[:14].isdigit()

    def test_save_and_load_document(self, storage):
        """Test saving and loading JSON documents."""
        data = {"gymName": "Iron Temple", "symbol": "₹"}
        path = storage.save_document(GYMS, "doc_1", data)

        assert path.exists()
        assert not path.with_suffix(".json.tmp").exists()
        assert storage.load_document(GYMS, "doc_1") == data

    def test_load_missing_document(self, storage):
        assert storage.load_document(GYMS, "missing") is None

    def test_invalid_ids(self, storage):
        with pytest.raises(ValueError):
            storage.save_document(GYMS, "../escape", {})
        assert storage.load_document(GYMS, "../escape") is None
        assert not storage.document_exists(GYMS, "")

    def test_list_documents(self, storage):
        """Test listing documents newest first."""
        for doc_id in ["doc_1", "doc_2", "doc_3"]:
            storage.save_document(GYMS, doc_id, {"id": doc_id})

        documents = storage.list_documents(GYMS)
        assert [doc["id"] for doc in documents] == ["doc_3", "doc_2", "doc_1"]

    def test_delete_document(self, storage):
        """Test deleting a document."""
        storage.save_document(GYMS, "doc_1", {"data": "test"})

        assert storage.delete_document(GYMS, "doc_1")
        assert not storage.document_exists(GYMS, "doc_1")
        assert not storage.delete_document(GYMS, "doc_1")


class TestGymService:
    """Tests for GymService."""

    @pytest.mark.asyncio
    async def test_create_and_get_gym(self, gym_service, gym_document):
        gym = await gym_service.create_gym(GymCreate.model_validate(gym_document))

        assert gym.id
        loaded = await gym_service.get_gym(gym.id)
        assert loaded.gym_name == "Iron Temple"
        assert loaded.timings.evening.slots[0].id == "e1"

    @pytest.mark.asyncio
    async def test_get_missing_gym(self, gym_service):
        with pytest.raises(GymNotFoundError):
            await gym_service.get_gym("missing")

    @pytest.mark.asyncio
    async def test_update_gym(self, gym_service, gym_document):
        gym = await gym_service.create_gym(GymCreate.model_validate(gym_document))

        updated = await gym_service.update_gym(
            gym.id, GymCreate.model_validate(make_gym_document(gymName="Iron Temple 2"))
        )
        assert updated.id == gym.id
        assert updated.gym_name == "Iron Temple 2"
        assert updated.created_at == gym.created_at

    @pytest.mark.asyncio
    async def test_soft_delete(self, gym_service, storage, gym_document):
        """Test that deleted gyms are hidden but kept on disk."""
        gym = await gym_service.create_gym(GymCreate.model_validate(gym_document))
        await gym_service.soft_delete_gym(gym.id)

        with pytest.raises(GymNotFoundError):
            await gym_service.get_gym(gym.id)
        assert await gym_service.list_gyms() == []

        assert storage.document_exists(GYMS, gym.id)
        deleted = await gym_service.get_gym(gym.id, include_deleted=True)
        assert deleted.is_deleted

    @pytest.mark.asyncio
    async def test_find_near(self, gym_service):
        """Test location search sorted by distance."""
        bengaluru = await gym_service.create_gym(
            GymCreate.model_validate(make_gym_document())
        )
        mysuru = await gym_service.create_gym(
            GymCreate.model_validate(
                make_gym_document(gymName="Palace Fitness", coordinates={"lat": 12.2958, "lng": 76.6394})
            )
        )

        nearby = await gym_service.find_near(12.97, 77.59, radius_km=10)
        assert [gym.id for gym, _ in nearby] == [bengaluru.id]

        wide = await gym_service.find_near(12.97, 77.59, radius_km=200)
        assert [gym.id for gym, _ in wide] == [bengaluru.id, mysuru.id]
        assert wide[0][1] < wide[1][1]

    def test_haversine(self):
        assert haversine_km(12.9716, 77.5946, 12.9716, 77.5946) == 0
        # Bengaluru to Mysuru is roughly 128 km as the crow flies
        assert 120 < haversine_km(12.9716, 77.5946, 12.2958, 76.6394) < 135


class TestBookingService:
    """Tests for BookingService."""

    @pytest.mark.asyncio
    async def test_reserve_creates_pending_booking(self, booking_service):
        booking = await booking_service.reserve(order_for(), "order_1")

        assert booking.status == BookingStatus.PENDING
        assert booking.order_id == "order_1"
        assert booking.gym_name == "Iron Temple"
        assert booking.amount == 600
        assert len(booking.booking_time_slots) == 3

        loaded = await booking_service.get_by_order_id("order_1")
        assert loaded.id == booking.id

    @pytest.mark.asyncio
    async def test_reserve_stores_given_gym_name(self, booking_service):
        booking = await booking_service.reserve(
            order_for(gymNames="Other Gym"), "order_1", gym_name="Iron Temple"
        )
        assert booking.gym_name == "Iron Temple"
        assert (await booking_service.get_booking(booking.id)).gym_name == "Iron Temple"

    @pytest.mark.asyncio
    async def test_overlapping_reserve_rejected(self, booking_service):
        """Test that a second overlapping reservation is rejected."""
        first = await booking_service.reserve(
            order_for(
                selectedPlan="Weekly Plan",
                amount=3000,
                baseAmount=1000,
                startDate="2030-01-01",
                endDate="2030-01-07",
            ),
            "order_1",
        )

        with pytest.raises(BookingConflictError) as exc_info:
            await booking_service.reserve(
                order_for(startDate="2030-01-07", endDate="2030-01-07"), "order_2"
            )
        assert exc_info.value.booking.id == first.id

    @pytest.mark.asyncio
    async def test_adjacent_and_other_gym_allowed(self, booking_service):
        await booking_service.reserve(order_for(), "order_1")

        await booking_service.reserve(
            order_for(startDate="2030-01-02", endDate="2030-01-02"), "order_2"
        )
        await booking_service.reserve(order_for(gym_id="g2"), "order_3")

        assert len(await booking_service.list_user_bookings("user_1")) == 3

    @pytest.mark.asyncio
    async def test_cancelled_booking_does_not_block(self, booking_service):
        booking = await booking_service.reserve(order_for(), "order_1")
        await booking_service.cancel_booking(booking.id)

        again = await booking_service.reserve(order_for(), "order_2")
        assert again.status == BookingStatus.PENDING

    @pytest.mark.asyncio
    async def test_concurrent_reserve_admits_one(self, booking_service):
        """Test that simultaneous reservations for the same dates admit exactly one."""
        results = await asyncio.gather(
            booking_service.reserve(order_for(), "order_1"),
            booking_service.reserve(order_for(), "order_2"),
            return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, BookingConflictError)]
        assert len(conflicts) == 1
        assert len(await booking_service.list_user_bookings("user_1")) == 1

    @pytest.mark.asyncio
    async def test_find_active_booking_without_range(self, booking_service):
        await booking_service.reserve(order_for(), "order_1")

        active = await booking_service.find_active_booking(
            "user_1", "g1", today=date(2029, 12, 31)
        )
        assert active is not None

        expired = await booking_service.find_active_booking(
            "user_1", "g1", today=date(2030, 1, 2)
        )
        assert expired is None

    @pytest.mark.asyncio
    async def test_find_active_booking_with_range(self, booking_service):
        await booking_service.reserve(order_for(), "order_1")

        assert await booking_service.find_active_booking(
            "user_1", "g1", date(2030, 1, 1), date(2030, 1, 31)
        )
        assert await booking_service.find_active_booking(
            "user_1", "g1", date(2030, 2, 1), date(2030, 2, 7)
        ) is None
        assert await booking_service.find_active_booking(
            "user_2", "g1", date(2030, 1, 1), date(2030, 1, 31)
        ) is None

    @pytest.mark.asyncio
    async def test_update_status(self, booking_service):
        booking = await booking_service.reserve(order_for(), "order_1")

        booking = await booking_service.update_status(booking.id, BookingStatus.ACTIVE)
        assert booking.status == BookingStatus.ACTIVE

        booking = await booking_service.attach_payment_session(booking.id, "session_1")
        assert booking.payment_session_id == "session_1"
        assert (await booking_service.get_booking(booking.id)).status == BookingStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_missing_booking(self, booking_service):
        with pytest.raises(BookingNotFoundError):
            await booking_service.get_booking("missing")
        with pytest.raises(BookingNotFoundError):
            await booking_service.get_by_order_id("missing")
