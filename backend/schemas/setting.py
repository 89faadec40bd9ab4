# backend/schemas/setting.py
from typing import Literal, Optional

from pydantic import Field

from schemas.base import CamelModel

# Rendering hint for the admin settings editor
SettingType = Literal["text", "textarea", "url", "email", "json", "image"]


class SiteSettingCreate(CamelModel):
    key: str = Field(min_length=1)
    value: Optional[str] = None
    group: str = Field(min_length=1)
    label: str = Field(min_length=1)
    type: SettingType = "text"


class SiteSettingUpdate(CamelModel):
    key: Optional[str] = Field(None, min_length=1)
    value: Optional[str] = None
    group: Optional[str] = Field(None, min_length=1)
    label: Optional[str] = Field(None, min_length=1)
    type: Optional[SettingType] = None


class SiteSettingOut(SiteSettingCreate):
    id: int
