from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from mandi.database import get_db
from mandi.vehicle import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.VehicleOut, status_code=201)
def create_vehicle(vehicle: schemas.VehicleCreate, db: Session = Depends(get_db)):
    return service.create_vehicle(db, vehicle)


@router.get("/", response_model=list[schemas.VehicleOut])
def list_vehicles(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return service.get_vehicles(db, skip, limit)


@router.get("/{vehicle_id}", response_model=schemas.VehicleOut)
def read_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    vehicle = service.get_vehicle(db, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.patch("/{vehicle_id}", response_model=schemas.VehicleOut)
def update_vehicle(vehicle_id: int, vehicle_update: schemas.VehicleUpdate, db: Session = Depends(get_db)):
    vehicle = service.update_vehicle(db, vehicle_id, vehicle_update)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.delete("/{vehicle_id}")
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    result = service.delete_vehicle(db, vehicle_id)
    if not result:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return result
