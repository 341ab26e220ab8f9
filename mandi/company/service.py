from sqlalchemy.orm import Session
from loguru import logger

from mandi.company import models, schemas


def get_company_settings(db: Session):
    return db.query(models.CompanySettings).order_by(models.CompanySettings.id).first()


def upsert_company_settings(db: Session, data: schemas.CompanySettingsIn):
    """There is only ever one settings row; create it on first save."""
    company = get_company_settings(db)

    if company:
        for key, value in data.model_dump().items():
            setattr(company, key, value)
    else:
        company = models.CompanySettings(**data.model_dump())
        db.add(company)

    db.commit()
    db.refresh(company)

    logger.info(f"Company settings saved for '{company.name}'")
    return company
