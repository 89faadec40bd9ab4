import json
import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PAYMENT_PROVIDER"] = "stub"
os.environ["PAYMENT_SIMULATED_DELAY_SECONDS"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from models.catalog import Category, Product
from models.setting import SiteSetting
from models.users import User
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token

SHOPPER_EMAIL = "shopper@example.com"
ADMIN_EMAIL = "admin@example.com"
PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def _create_user(db, email, is_admin=False):
    user = User(
        email=email,
        password_hash=get_password_hash(PASSWORD),
        first_name="Test",
        last_name="Admin" if is_admin else "Shopper",
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _auth(email):
    return {"Authorization": f"Bearer {create_access_token({'sub': email})}"}


@pytest.fixture()
def shopper(db):
    return _create_user(db, SHOPPER_EMAIL)


@pytest.fixture()
def admin(db):
    return _create_user(db, ADMIN_EMAIL, is_admin=True)


@pytest.fixture()
def user_headers(shopper):
    return _auth(shopper.email)


@pytest.fixture()
def admin_headers(admin):
    return _auth(admin.email)


@pytest.fixture()
def catalog(db):
    """Two categories and three products; returns the product rows by slug."""
    dresses = Category(name="Soiree", slug="soiree", description="Evening wear")
    accessories = Category(name="Accessories", slug="accessories")
    db.add_all([dresses, accessories])
    db.commit()

    products = [
        Product(name="Dress", slug="dress", description="Long dress", price=100.0,
                image_url="/img/dress.jpg", category_id=dresses.id, is_new=True, is_featured=True),
        Product(name="Gown", slug="gown", description="Ball gown", price=300.0, sale_price=250.0,
                image_url="/img/gown.jpg", category_id=dresses.id, is_new=True),
        Product(name="Clutch", slug="clutch", description="Beaded clutch", price=40.0,
                image_url="/img/clutch.jpg", category_id=accessories.id, in_stock=False),
    ]
    db.add_all(products)
    db.commit()
    return {p.slug: p for p in products}


@pytest.fixture()
def shipping_settings(db):
    methods = [
        {"id": "standard", "name": "Standard Shipping", "description": "3-5 business days", "price": 12},
        {"id": "express", "name": "Express Shipping", "description": "1-2 business days", "price": 20},
    ]
    db.add(SiteSetting(key="shipping_methods", value=json.dumps(methods), group="shipping",
                       label="Shipping Methods", type="json"))
    db.commit()
    return methods


def cart_line(product_id, name="Dress", price=100.0, quantity=1, image_url="/img/dress.jpg"):
    return {"id": product_id, "name": name, "price": price, "quantity": quantity, "imageUrl": image_url}


def checkout_payload(**overrides):
    payload = {
        "firstName": "Layla",
        "lastName": "Hassan",
        "email": "Layla@Example.com",
        "phone": "+20 100 000 0000",
        "address": "12 Nile St",
        "city": "Cairo",
        "state": "Cairo",
        "postalCode": "11511",
        "country": "Egypt",
        "shippingMethod": "express",
        "paymentMethod": "paymob",
    }
    payload.update(overrides)
    return payload
