"""HTTP tests for /api/restaurants with a mocked store."""

from typing import Callable

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from core.dependencies import CurrentUser
from core.geo import center_sphere_filter
from tests.conftest import make_cursor

NEW_RESTAURANT = {
    "name": "Chez Lyon",
    "address": "1 Place Bellecour",
    "location": {"type": "Point", "coordinates": [4.8357, 45.7640]},
    "cuisine": ["lyonnaise"],
}


@pytest.mark.unit
class TestListRestaurants:
    """Public listing and proximity search."""

    def test_pagination_envelope(self, client_factory: Callable, mock_db, restaurant_doc: dict) -> None:
        mock_db.restaurants_collection.find.return_value = make_cursor([restaurant_doc])
        mock_db.restaurants_collection.count_documents.return_value = 3

        response = client_factory().get("/api/restaurants", params={"page": 2, "limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 1
        assert body["pagination"] == {"next": {"page": 3, "limit": 1}, "prev": {"page": 1, "limit": 1}}
        assert body["data"][0]["id"] == str(restaurant_doc["_id"])
        assert body["data"][0]["owner"] == str(restaurant_doc["owner"])

    def test_query_params_add_radius(self, client_factory: Callable, mock_db) -> None:
        client_factory().get("/api/restaurants", params={"lat": "48.8566", "lng": "2.3522", "maxDistance": "5", "cuisine": "française"})

        filter_arg = mock_db.restaurants_collection.find.call_args[0][0]
        assert filter_arg == {"cuisine": "française", **center_sphere_filter(48.8566, 2.3522, 5)}

    def test_query_params_bad_latitude(self, client_factory: Callable, mock_db) -> None:
        response = client_factory().get("/api/restaurants", params={"lat": "x", "lng": "2.3522", "maxDistance": "5"})

        assert response.status_code == 400
        mock_db.restaurants_collection.find.assert_not_called()

    def test_radius_path_form(self, client_factory: Callable, mock_db, restaurant_doc: dict) -> None:
        lyon = dict(restaurant_doc, _id=ObjectId(), location={"type": "Point", "coordinates": [4.8357, 45.7640]})
        mock_db.restaurants_collection.find.return_value = make_cursor([lyon, restaurant_doc])

        response = client_factory().get("/api/restaurants/radius/48.8566,2.3522/500")

        assert response.status_code == 200
        mock_db.restaurants_collection.find.assert_called_once_with(center_sphere_filter(48.8566, 2.3522, 500))
        body = response.json()
        assert body["count"] == 2
        # nearest first
        assert body["data"][0]["id"] == str(restaurant_doc["_id"])
        assert body["data"][0]["distance"] == 0
        assert body["data"][1]["distance"] == pytest.approx(392, abs=5)

    @pytest.mark.parametrize("path", ["/api/restaurants/radius/abc/10", "/api/restaurants/radius/48.85,2.35/far"])
    def test_radius_bad_input(self, client_factory: Callable, mock_db, path: str) -> None:
        response = client_factory().get(path)

        assert response.status_code == 400
        assert response.json()["success"] is False
        mock_db.restaurants_collection.find.assert_not_called()

    def test_get_unknown_and_invalid_id(self, client_factory: Callable) -> None:
        client = client_factory()
        for rid in (str(ObjectId()), "not-an-id"):
            response = client.get(f"/api/restaurants/{rid}")
            assert response.status_code == 404
            assert response.json() == {"success": False, "error": "Restaurant non trouvé"}


@pytest.mark.unit
class TestWriteRestaurants:
    """Creation, update and deletion rules."""

    def test_create_requires_login(self, client_factory: Callable) -> None:
        response = client_factory().post("/api/restaurants", json=NEW_RESTAURANT)

        assert response.status_code == 401
        assert response.json()["error"] == "Non autorisé à accéder à cette route"

    def test_plain_user_cannot_create(self, client_factory: Callable, mock_db, plain_user: CurrentUser) -> None:
        response = client_factory(plain_user).post("/api/restaurants", json=NEW_RESTAURANT)

        assert response.status_code == 403
        mock_db.restaurants_collection.insert_one.assert_not_awaited()

    def test_owner_creates_and_owns(self, client_factory: Callable, mock_db, owner_user: CurrentUser) -> None:
        response = client_factory(owner_user).post("/api/restaurants", json=dict(NEW_RESTAURANT, owner=str(ObjectId())))

        assert response.status_code == 201
        inserted = mock_db.restaurants_collection.insert_one.call_args[0][0]
        assert inserted["owner"] == ObjectId(owner_user.id)
        assert inserted["location"]["coordinates"] == [4.8357, 45.7640]
        assert response.json()["data"]["owner"] == owner_user.id

    def test_create_validation_error(self, client_factory: Callable, mock_db, owner_user: CurrentUser) -> None:
        payload = dict(NEW_RESTAURANT, location={"type": "Point", "coordinates": [4.8357]})

        response = client_factory(owner_user).post("/api/restaurants", json=payload)

        assert response.status_code == 400
        assert "location.coordinates" in response.json()["error"]
        mock_db.restaurants_collection.insert_one.assert_not_awaited()

    def test_other_owner_cannot_update(self, client_factory: Callable, mock_db, restaurant_doc: dict, other_owner: CurrentUser) -> None:
        mock_db.restaurants_collection.find_one.return_value = restaurant_doc

        response = client_factory(other_owner).put(f"/api/restaurants/{restaurant_doc['_id']}", json={"name": "Volé"})

        assert response.status_code == 403
        mock_db.restaurants_collection.find_one_and_update.assert_not_awaited()

    def test_owner_updates(self, client_factory: Callable, mock_db, restaurant_doc: dict, owner_user: CurrentUser) -> None:
        mock_db.restaurants_collection.find_one.return_value = restaurant_doc
        mock_db.restaurants_collection.find_one_and_update.return_value = dict(restaurant_doc, name="Nouveau nom")

        response = client_factory(owner_user).put(f"/api/restaurants/{restaurant_doc['_id']}", json={"name": "Nouveau nom"})

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Nouveau nom"
        update = mock_db.restaurants_collection.find_one_and_update.call_args[0][1]["$set"]
        assert update["name"] == "Nouveau nom"
        assert "owner" not in update

    def test_update_missing_is_404_before_ownership(self, client_factory: Callable, other_owner: CurrentUser) -> None:
        response = client_factory(other_owner).put(f"/api/restaurants/{ObjectId()}", json={"name": "X"})

        assert response.status_code == 404

    def test_plain_user_cannot_delete(self, client_factory: Callable, mock_db, restaurant_doc: dict, plain_user: CurrentUser) -> None:
        response = client_factory(plain_user).delete(f"/api/restaurants/{restaurant_doc['_id']}")

        assert response.status_code == 403
        mock_db.restaurants_collection.delete_one.assert_not_awaited()

    def test_admin_deletes_any(self, client_factory: Callable, mock_db, restaurant_doc: dict, admin_user: CurrentUser) -> None:
        mock_db.restaurants_collection.find_one.return_value = restaurant_doc

        response = client_factory(admin_user).delete(f"/api/restaurants/{restaurant_doc['_id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": None}
        mock_db.restaurants_collection.delete_one.assert_awaited_once_with({"_id": restaurant_doc["_id"]})


@pytest.mark.unit
class TestPartialRestaurantUpdate:
    """Only sent top-level fields are written; nested values are stored whole."""

    @staticmethod
    def _set_document(mock_db) -> dict:
        update = dict(mock_db.restaurants_collection.find_one_and_update.call_args[0][1]["$set"])
        update.pop("updatedAt")
        return update

    def test_location_keeps_point_type(self, client_factory: Callable, mock_db, restaurant_doc: dict, owner_user: CurrentUser) -> None:
        mock_db.restaurants_collection.find_one.return_value = restaurant_doc
        mock_db.restaurants_collection.find_one_and_update.return_value = restaurant_doc

        response = client_factory(owner_user).put(
            f"/api/restaurants/{restaurant_doc['_id']}", json={"location": {"coordinates": [4.8, 45.7]}}
        )

        assert response.status_code == 200
        assert self._set_document(mock_db) == {"location": {"type": "Point", "coordinates": [4.8, 45.7]}}

    def test_opening_hours_stored_for_every_day(self, client_factory: Callable, mock_db, restaurant_doc: dict, owner_user: CurrentUser) -> None:
        mock_db.restaurants_collection.find_one.return_value = restaurant_doc
        mock_db.restaurants_collection.find_one_and_update.return_value = restaurant_doc
        closed = {"open": None, "close": None}

        client_factory(owner_user).put(
            f"/api/restaurants/{restaurant_doc['_id']}", json={"openingHours": {"monday": {"open": "09:00"}}}
        )

        assert self._set_document(mock_db) == {
            "openingHours": {
                "monday": {"open": "09:00", "close": None},
                "tuesday": closed,
                "wednesday": closed,
                "thursday": closed,
                "friday": closed,
                "saturday": closed,
                "sunday": closed,
            }
        }

    def test_scalar_fields_only(self, client_factory: Callable, mock_db, restaurant_doc: dict, owner_user: CurrentUser) -> None:
        mock_db.restaurants_collection.find_one.return_value = restaurant_doc
        mock_db.restaurants_collection.find_one_and_update.return_value = restaurant_doc

        client_factory(owner_user).put(f"/api/restaurants/{restaurant_doc['_id']}", json={"phone": "0102030405"})

        assert self._set_document(mock_db) == {"phone": "0102030405"}
