"""Gym record API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..auth import require_bearer_token
from ..errors import GymNotFoundError
from ..models import Gym, GymCreate, GymListResponse, NearbyGym, NearbyGymsResponse
from ..services import gym_service
from ..utils.logger import logger

router = APIRouter(
    prefix="/api", tags=["gyms"], dependencies=[Depends(require_bearer_token)]
)


@router.post("/addGym", response_model=Gym, status_code=201)
async def add_gym(gym: GymCreate) -> Gym:
    """Create a gym.

    Args:
        gym: Gym fields; timings, rates and currency are validated on parse

    Returns:
        The stored gym
    """
    try:
        logger.info(f"Adding gym: {gym.gym_name}")
        return await gym_service.create_gym(gym)

    except Exception as e:
        logger.error(f"Error adding gym: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/gyms", response_model=GymListResponse)
async def list_gyms() -> GymListResponse:
    """List all gyms that are not soft-deleted."""
    try:
        gyms = await gym_service.list_gyms()
        return GymListResponse(gyms=gyms, total=len(gyms))

    except Exception as e:
        logger.error(f"Error listing gyms: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/gyms/near", response_model=NearbyGymsResponse)
async def gyms_near(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(10.0, gt=0, le=20000),
) -> NearbyGymsResponse:
    """Find gyms around a point, nearest first."""
    try:
        matches = await gym_service.find_near(lat, lng, radius_km)
        results = [
            NearbyGym(gym=gym, distance_km=round(distance, 3)) for gym, distance in matches
        ]
        return NearbyGymsResponse(results=results, total=len(results))

    except Exception as e:
        logger.error(f"Error searching gyms near ({lat}, {lng}): {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/getSingleGym/{gym_id}", response_model=Gym)
async def get_single_gym(gym_id: str = Path(..., description="Gym identifier")) -> Gym:
    """Get a single gym.

    Args:
        gym_id: Gym identifier

    Returns:
        Gym details
    """
    try:
        logger.info(f"Getting gym: {gym_id}")
        return await gym_service.get_gym(gym_id)

    except GymNotFoundError:
        raise HTTPException(status_code=404, detail="Gym not found")
    except Exception as e:
        logger.error(f"Error getting gym {gym_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/gyms/{gym_id}", response_model=Gym)
async def update_gym(
    gym: GymCreate, gym_id: str = Path(..., description="Gym identifier")
) -> Gym:
    """Replace a gym's fields."""
    try:
        logger.info(f"Updating gym: {gym_id}")
        return await gym_service.update_gym(gym_id, gym)

    except GymNotFoundError:
        raise HTTPException(status_code=404, detail="Gym not found")
    except Exception as e:
        logger.error(f"Error updating gym {gym_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/gyms/{gym_id}")
async def delete_gym(gym_id: str = Path(..., description="Gym identifier")) -> dict:
    """Soft-delete a gym."""
    try:
        logger.info(f"Deleting gym: {gym_id}")
        await gym_service.soft_delete_gym(gym_id)
        return {"message": f"Gym {gym_id} deleted successfully"}

    except GymNotFoundError:
        raise HTTPException(status_code=404, detail="Gym not found")
    except Exception as e:
        logger.error(f"Error deleting gym {gym_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
