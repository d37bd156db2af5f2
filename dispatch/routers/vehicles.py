"""
Vehicles API router.
Handles the fleet that appointments are booked on.

Renaming or recolouring a vehicle is reflected on every appointment that
references it; deleting one leaves its appointments with their snapshot.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.database import get_db
from dispatch.exceptions import NotFoundError
from dispatch.middleware.auth import SessionUser, get_current_user, require_admin
from dispatch.models.vehicle import Vehicle
from dispatch.schemas.vehicle import VehicleCreate, VehicleResponse, VehicleUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def build_vehicle_response(vehicle: Vehicle) -> dict:
    """Build vehicle response dict."""
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "color": vehicle.color,
        "created_at": vehicle.created_at,
    }


async def get_vehicle_or_404(db: AsyncSession, vehicle_id: int) -> Vehicle:
    result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    vehicle = result.scalar_one_or_none()
    if not vehicle:
        raise NotFoundError("Vehicle", vehicle_id)
    return vehicle


@router.get("/vehicles", response_model=List[VehicleResponse])
async def get_vehicles(
    db: AsyncSession = Depends(get_db),
    user: SessionUser = Depends(get_current_user),
):
    """Get all vehicles ordered by name."""
    result = await db.execute(select(Vehicle).order_by(Vehicle.name, Vehicle.id))
    return [build_vehicle_response(v) for v in result.scalars().all()]


@router.get("/vehicles/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    user: SessionUser = Depends(get_current_user),
):
    """Get a specific vehicle by ID."""
    vehicle = await get_vehicle_or_404(db, vehicle_id)
    return build_vehicle_response(vehicle)


@router.post("/vehicles", response_model=VehicleResponse, status_code=201)
async def create_vehicle(
    data: VehicleCreate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Create a new vehicle.

    Requires admin authentication.
    """
    vehicle = Vehicle(name=data.name, color=data.color)

    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)

    return build_vehicle_response(vehicle)


@router.put("/vehicles/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: int,
    data: VehicleUpdate,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Update a vehicle.

    Requires admin authentication.
    """
    vehicle = await get_vehicle_or_404(db, vehicle_id)

    if data.name is not None:
        vehicle.name = data.name
    if data.color is not None:
        vehicle.color = data.color

    await db.commit()
    await db.refresh(vehicle)

    return build_vehicle_response(vehicle)


@router.delete("/vehicles/{vehicle_id}")
async def delete_vehicle(
    vehicle_id: int,
    db: AsyncSession = Depends(get_db),
    admin: SessionUser = Depends(require_admin),
):
    """
    Delete a vehicle.

    Requires admin authentication.
    """
    vehicle = await get_vehicle_or_404(db, vehicle_id)

    await db.delete(vehicle)
    await db.commit()

    logger.info("Deleted vehicle %s (%s)", vehicle_id, vehicle.name)
    return {"success": True}
