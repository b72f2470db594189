"""Shared pytest fixtures: mocked Mongo collections and authenticated clients."""

from datetime import datetime, timezone
from typing import Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from core.dependencies import CurrentUser, get_current_user
from db.db_operation import get_db
from main import create_app


def make_cursor(docs: Optional[list] = None) -> MagicMock:
    """Motor-like cursor: chainable sort/skip/limit and an awaitable to_list."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=list(docs or []))
    return cursor


def make_collection(name: str) -> MagicMock:
    collection = MagicMock()
    collection.name = name
    collection.find.return_value = make_cursor()
    collection.find_one = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.update_one = AsyncMock()
    collection.update_many = AsyncMock(return_value=MagicMock(modified_count=0))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    return collection


@pytest.fixture
def mock_db() -> MagicMock:
    """Stand-in for MongoConnection with mocked collections."""
    db = MagicMock()
    db.users_collection = make_collection("users")
    db.restaurants_collection = make_collection("restaurants")
    db.dishes_collection = make_collection("dishes")
    return db


@pytest.fixture
def owner_user() -> CurrentUser:
    return CurrentUser(id=str(ObjectId()), email="owner@example.com", name="Owner", role="owner")


@pytest.fixture
def other_owner() -> CurrentUser:
    return CurrentUser(id=str(ObjectId()), email="other@example.com", name="Other", role="owner")


@pytest.fixture
def admin_user() -> CurrentUser:
    return CurrentUser(id=str(ObjectId()), email="admin@example.com", name="Admin", role="admin")


@pytest.fixture
def plain_user() -> CurrentUser:
    return CurrentUser(id=str(ObjectId()), email="user@example.com", name="User", role="user")


@pytest.fixture
def client_factory(mock_db: MagicMock) -> Callable[[Optional[CurrentUser]], TestClient]:
    """Build a TestClient whose store is ``mock_db``, optionally logged in as ``user``."""

    def _build(user: Optional[CurrentUser] = None) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_db] = lambda: mock_db
        if user is not None:
            app.dependency_overrides[get_current_user] = lambda: user
        return TestClient(app)

    return _build


@pytest.fixture
def restaurant_doc(owner_user: CurrentUser) -> dict:
    now = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
    return {
        "_id": ObjectId(),
        "name": "Restaurant Paris",
        "address": "123 Paris Street",
        "location": {"type": "Point", "coordinates": [2.3522, 48.8566]},
        "cuisine": ["française"],
        "owner": ObjectId(owner_user.id),
        "createdAt": now,
        "updatedAt": now,
    }


@pytest.fixture
def dish_doc(restaurant_doc: dict) -> dict:
    now = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)
    return {
        "_id": ObjectId(),
        "name": "Plat Test",
        "price": 12.99,
        "restaurant": restaurant_doc["_id"],
        "availableDate": now,
        "dietaryOptions": ["vegetarian"],
        "isAvailable": True,
        "weeklySchedule": [],
        "createdAt": now,
        "updatedAt": now,
    }
