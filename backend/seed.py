import json
import logging
import os

from dotenv import load_dotenv
from sqlalchemy.orm import Session

from database import SessionLocal, init_db
from models.users import User
from models.catalog import Category
from models.setting import SiteSetting
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

load_dotenv()

# Configuration
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "password")

CATEGORIES = [
    {"name": "All Women", "slug": "all-women", "description": "All women's fashion collections"},
    {"name": "Casual", "slug": "casual", "description": "Comfortable and stylish casual wear"},
    {"name": "Formal", "slug": "formal", "description": "Elegant formal attire for professional settings"},
    {"name": "Soiree", "slug": "soiree", "description": "Glamorous evening wear for special occasions"},
    {"name": "Designed Wedding Dresses", "slug": "wedding-dresses", "description": "Bespoke and luxurious wedding dresses"},
    {"name": "Accessories", "slug": "accessories", "description": "Complete your look with our accessories"},
]

SHIPPING_METHODS = [
    {"id": "standard", "name": "Standard Shipping", "description": "3-5 business days", "price": 10},
    {"id": "express", "name": "Express Shipping", "description": "1-2 business days", "price": 15},
    {"id": "overnight", "name": "Overnight Shipping", "description": "Next business day", "price": 25},
]

PAYMENT_METHODS = [
    {"id": "cod", "name": "Cash on Delivery", "description": "Pay when you receive your order", "enabled": True},
    {"id": "paymob", "name": "Credit/Debit Card (Paymob)", "description": "Secure online payment with Paymob", "enabled": True},
]

SETTINGS = [
    # SEO
    {"key": "site_title", "value": "Storefront - Women's Fashion", "group": "seo", "label": "Site Title", "type": "text"},
    {"key": "site_description", "value": "Casual, formal, soiree and wedding dresses.", "group": "seo", "label": "Site Description", "type": "textarea"},
    # Contact
    {"key": "contact_email", "value": "info@example.com", "group": "contact", "label": "Contact Email", "type": "email"},
    {"key": "contact_phone", "value": "+20 1234567890", "group": "contact", "label": "Contact Phone", "type": "text"},
    # Social
    {"key": "social_instagram", "value": "https://instagram.com/", "group": "social", "label": "Instagram URL", "type": "url"},
    # Homepage
    {"key": "hero_title", "value": "Elegance Redefined", "group": "homepage", "label": "Hero Title", "type": "text"},
    {"key": "hero_image", "value": "", "group": "homepage", "label": "Hero Background Image", "type": "image"},
    # Checkout tables
    {"key": "shipping_methods", "value": json.dumps(SHIPPING_METHODS), "group": "shipping", "label": "Shipping Methods", "type": "json"},
    {"key": "payment_methods", "value": json.dumps(PAYMENT_METHODS), "group": "payment", "label": "Payment Methods", "type": "json"},
]
# End Configuration


def seed(session: Session) -> dict:
    """Insert whatever is missing; existing rows are left alone. Returns counts of inserted rows."""
    inserted = {"users": 0, "categories": 0, "settings": 0}

    if not session.query(User).filter(User.is_admin.is_(True)).first():
        session.add(User(
            email=ADMIN_EMAIL.lower(),
            password_hash=get_password_hash(ADMIN_PASSWORD),
            first_name="Admin",
            last_name="User",
            is_admin=True,
        ))
        inserted["users"] += 1

    existing_slugs = {slug for (slug,) in session.query(Category.slug).all()}
    for data in CATEGORIES:
        if data["slug"] not in existing_slugs:
            session.add(Category(**data))
            inserted["categories"] += 1

    existing_keys = {key for (key,) in session.query(SiteSetting.key).all()}
    for data in SETTINGS:
        if data["key"] not in existing_keys:
            session.add(SiteSetting(**data))
            inserted["settings"] += 1

    session.commit()
    return inserted


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        counts = seed(session)
        logger.info("Seeding complete: %s", counts)
    finally:
        session.close()
