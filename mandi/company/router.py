from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from mandi.database import get_db
from mandi.company import schemas, service

router = APIRouter()


@router.get("/", response_model=Optional[schemas.CompanySettingsOut])
def get_company_settings(db: Session = Depends(get_db)):
    # null until the first save
    return service.get_company_settings(db)


@router.post("/", response_model=schemas.CompanySettingsOut, status_code=status.HTTP_201_CREATED)
def save_company_settings(data: schemas.CompanySettingsIn, db: Session = Depends(get_db)):
    return service.upsert_company_settings(db, data)
