# backend/routes/settings.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.setting import SiteSetting
from schemas.setting import SiteSettingOut

router = APIRouter(prefix="/api/settings", tags=["Settings"])


@router.get("", response_model=List[SiteSettingOut])
def list_settings(db: Session = Depends(get_db)):
    return db.query(SiteSetting).order_by(SiteSetting.id).all()


@router.get("/group/{group}", response_model=List[SiteSettingOut])
def settings_by_group(group: str, db: Session = Depends(get_db)):
    return db.query(SiteSetting).filter(SiteSetting.group == group).order_by(SiteSetting.id).all()


@router.get("/{key}", response_model=SiteSettingOut)
def get_setting(key: str, db: Session = Depends(get_db)):
    setting = db.query(SiteSetting).filter(SiteSetting.key == key).first()
    if not setting:
        raise HTTPException(status_code=404, detail="Setting not found")
    return setting
