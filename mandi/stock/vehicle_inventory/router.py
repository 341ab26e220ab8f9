from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from mandi.database import get_db
from mandi.stock.vehicle_inventory import schemas, service
from mandi.vehicle import service as vehicle_service

router = APIRouter()


@router.get("/{vehicle_id}", response_model=List[schemas.VehicleInventoryOut])
def get_vehicle_inventory(vehicle_id: int, db: Session = Depends(get_db)):
    vehicle_service.get_vehicle_or_404(db, vehicle_id)
    return service.get_vehicle_inventory(db, vehicle_id)


@router.get("/{vehicle_id}/movements", response_model=List[schemas.VehicleInventoryMovementOut])
def list_vehicle_movements(
    vehicle_id: int,
    skip: int = 0,
    limit: int = 500,
    db: Session = Depends(get_db),
):
    vehicle_service.get_vehicle_or_404(db, vehicle_id)
    return service.list_vehicle_movements(db, vehicle_id, skip=skip, limit=limit)


@router.post("/{vehicle_id}/load", response_model=schemas.VehicleInventoryOut, status_code=status.HTTP_201_CREATED)
def load_vehicle(vehicle_id: int, data: schemas.VehicleLoadCreate, db: Session = Depends(get_db)):
    vehicle_service.get_vehicle_or_404(db, vehicle_id)
    return service.manual_load(db, vehicle_id, data)


@router.post("/{vehicle_id}/adjust", response_model=schemas.VehicleInventoryOut)
def adjust_vehicle(vehicle_id: int, data: schemas.VehicleAdjustCreate, db: Session = Depends(get_db)):
    vehicle_service.get_vehicle_or_404(db, vehicle_id)
    return service.manual_adjust(db, vehicle_id, data)
