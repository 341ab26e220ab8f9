from sqlalchemy.orm import Session
from fastapi import HTTPException

from mandi.vehicle import models, schemas
from mandi.stock.vehicle_inventory import models as vi_models


def create_vehicle(db: Session, vehicle: schemas.VehicleCreate):
    new_vehicle = models.Vehicle(**vehicle.model_dump())
    db.add(new_vehicle)
    db.commit()
    db.refresh(new_vehicle)
    return new_vehicle


def get_vehicle(db: Session, vehicle_id: int):
    return db.query(models.Vehicle).filter(models.Vehicle.id == vehicle_id).first()


def get_vehicle_or_404(db: Session, vehicle_id: int):
    vehicle = get_vehicle(db, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail=f"Vehicle {vehicle_id} not found")
    return vehicle


def get_vehicles(db: Session, skip: int = 0, limit: int = 100):
    return db.query(models.Vehicle).order_by(models.Vehicle.id).offset(skip).limit(limit).all()


def update_vehicle(db: Session, vehicle_id: int, vehicle_update: schemas.VehicleUpdate):
    vehicle = get_vehicle(db, vehicle_id)
    if not vehicle:
        return None
    for key, value in vehicle_update.model_dump(exclude_unset=True).items():
        setattr(vehicle, key, value)
    db.commit()
    db.refresh(vehicle)
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int):
    vehicle = get_vehicle(db, vehicle_id)
    if not vehicle:
        return None

    loaded = (
        db.query(vi_models.VehicleInventory)
        .filter(
            vi_models.VehicleInventory.vehicle_id == vehicle_id,
            vi_models.VehicleInventory.quantity > 0,
        )
        .count()
    )
    if loaded:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot delete vehicle '{vehicle.number}'. It still carries {loaded} product(s)."
        )

    # Empty rows go with the vehicle
    db.query(vi_models.VehicleInventory).filter(
        vi_models.VehicleInventory.vehicle_id == vehicle_id
    ).delete(synchronize_session=False)

    db.delete(vehicle)
    db.commit()
    return {"message": "Vehicle deleted successfully"}
