# backend/models/setting.py
from sqlalchemy import Column, Integer, String, Text
from database import Base

# Editable site content: marketing copy, contact data, shipping/payment tables
class SiteSetting(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, unique=True, nullable=False, index=True)
    value = Column(Text, nullable=True)
    group = Column(String, nullable=False, index=True)
    label = Column(String, nullable=False)
    type = Column(String, nullable=False, default="text") # text/textarea/url/email/json/image
