"""Gym record management on top of the document store."""
from datetime import datetime
from math import asin, cos, radians, sin, sqrt
from typing import List, Optional, Tuple
import asyncio

from ..errors import GymNotFoundError
from ..models import Gym, GymCreate
from ..utils.logger import logger
from .storage_service import GYMS, StorageService, storage_service

EARTH_RADIUS_KM = 6371.0088


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    d_lat = radians(lat2 - lat1)
    d_lng = radians(lng2 - lng1)
    a = sin(d_lat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * asin(sqrt(a))


class GymService:
    """Service for creating, reading and soft-deleting gyms."""

    def __init__(self, storage: Optional[StorageService] = None):
        """Initialize the gym service.

        Args:
            storage: Storage service instance. Defaults to global storage_service
        """
        self.storage = storage or storage_service
        self._lock = asyncio.Lock()

    async def create_gym(self, data: GymCreate) -> Gym:
        """Persist a new gym.

        Args:
            data: Validated gym fields

        Returns:
            The stored gym with its generated id and timestamps
        """
        async with self._lock:
            now = datetime.now()
            gym = Gym(
                **data.model_dump(),
                id=self.storage.generate_id(),
                created_at=now,
                updated_at=now,
            )
            self.storage.save_document(GYMS, gym.id, gym.to_document())
            logger.info(f"Gym created: {gym.id} ({gym.gym_name})")
            return gym

    async def get_gym(self, gym_id: str, include_deleted: bool = False) -> Gym:
        """Load a gym.

        Raises:
            GymNotFoundError: If the gym is missing or soft-deleted
        """
        document = self.storage.load_document(GYMS, gym_id)
        if not document:
            raise GymNotFoundError(gym_id)

        gym = Gym.model_validate(document)
        if gym.is_deleted and not include_deleted:
            raise GymNotFoundError(gym_id)
        return gym

    async def list_gyms(self, include_deleted: bool = False) -> List[Gym]:
        """List gyms, newest first."""
        gyms = [Gym.model_validate(doc) for doc in self.storage.list_documents(GYMS)]
        if include_deleted:
            return gyms
        return [gym for gym in gyms if not gym.is_deleted]

    async def update_gym(self, gym_id: str, data: GymCreate) -> Gym:
        """Replace a gym's fields, keeping its id and creation time.

        Raises:
            GymNotFoundError: If the gym is missing or soft-deleted
        """
        async with self._lock:
            current = await self.get_gym(gym_id)
            gym = Gym(
                **data.model_dump(),
                id=current.id,
                created_at=current.created_at,
                updated_at=datetime.now(),
            )
            self.storage.save_document(GYMS, gym.id, gym.to_document())
            logger.info(f"Gym updated: {gym.id}")
            return gym

    async def soft_delete_gym(self, gym_id: str) -> Gym:
        """Flag a gym as deleted; it stays on disk.

        Raises:
            GymNotFoundError: If the gym is missing or already deleted
        """
        async with self._lock:
            gym = await self.get_gym(gym_id)
            gym.is_deleted = True
            gym.updated_at = datetime.now()
            self.storage.save_document(GYMS, gym.id, gym.to_document())
            logger.info(f"Gym soft-deleted: {gym.id}")
            return gym

    async def find_near(
        self, lat: float, lng: float, radius_km: float = 10.0
    ) -> List[Tuple[Gym, float]]:
        """Find gyms within ``radius_km`` of a point.

        Args:
            lat: Latitude of the search centre
            lng: Longitude of the search centre
            radius_km: Search radius in kilometres

        Returns:
            List of (gym, distance_km) sorted nearest first
        """
        results = []
        for gym in await self.list_gyms():
            distance = haversine_km(lat, lng, gym.coordinates.lat, gym.coordinates.lng)
            if distance <= radius_km:
                results.append((gym, distance))

        results.sort(key=lambda item: item[1])
        return results


# Global gym service instance
gym_service = GymService()
