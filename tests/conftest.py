"""
Pytest configuration and shared fixtures.
"""
import itertools
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from food_ordering.core.database import Base, get_db
from food_ordering.core.security import create_access_token, get_password_hash
from food_ordering.main import app
from food_ordering.models import Food, Restaurant, Role, User
from food_ordering.services.image_storage import ImageStorage, get_image_storage

DEFAULT_PASSWORD = "secret123"


class FakeImageStorage(ImageStorage):
    """Records calls instead of talking to S3"""

    def __init__(self):
        self.bucket_name = "test-bucket"
        self.folder = "tests"
        self.uploaded = []
        self.destroyed = []
        self._ids = itertools.count(1)

    def upload(self, file):
        public_id = f"{self.folder}/image-{next(self._ids)}"
        self.uploaded.append(file.filename)
        return {"public_id": public_id, "url": self.url_for(public_id)}

    def destroy(self, public_id):
        self.destroyed.append(public_id)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def image_storage():
    return FakeImageStorage()


@pytest.fixture
def client(db, image_storage):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def create_user(db):
    counter = itertools.count(1)

    def _create_user(name=None, role=Role.USER, email=None, password=DEFAULT_PASSWORD, address=None):
        n = next(counter)
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@foodmail.com",
            hashed_password=get_password_hash(password),
            role=Role(role).value,
            address=address,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _create_user


@pytest.fixture
def create_restaurant(db):
    def _create_restaurant(owner, name=None, location="1 Market Street"):
        restaurant = Restaurant(owner_id=owner.id, name=name or f"{owner.name}'s Restaurant", location=location)
        db.add(restaurant)
        db.commit()
        db.refresh(restaurant)
        return restaurant

    return _create_restaurant


@pytest.fixture
def create_food(db):
    def _create_food(restaurant, name="Margherita", price=10.0, is_available=True, images=None):
        food = Food(
            restaurant_id=restaurant.id,
            name=name,
            price=price,
            is_available=is_available,
            images=images or [],
        )
        db.add(food)
        db.commit()
        db.refresh(food)
        return food

    return _create_food


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def customer(create_user):
    return create_user(name="Carol", role=Role.USER)


@pytest.fixture
def owner(create_user):
    return create_user(name="Oscar", role=Role.RESTAURANT)


@pytest.fixture
def other_owner(create_user):
    return create_user(name="Rita", role=Role.RESTAURANT)


@pytest.fixture
def admin(create_user):
    return create_user(name="Ada", role=Role.ADMIN)


@pytest.fixture
def restaurant(owner, create_restaurant):
    return create_restaurant(owner)


@pytest.fixture
def other_restaurant(other_owner, create_restaurant):
    return create_restaurant(other_owner)


@pytest.fixture
def food(restaurant, create_food):
    return create_food(restaurant, name="Margherita", price=10.0)
