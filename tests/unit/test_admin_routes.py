"""HTTP tests for the admin-only user management and dish reset."""

from typing import Callable

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from core.dependencies import CurrentUser
from services.daily_reset import RESET_SUCCESS_MESSAGE
from tests.conftest import make_cursor


@pytest.mark.unit
class TestUserAdministration:
    """/api/users is admin only."""

    def test_owner_is_refused(self, client_factory: Callable, mock_db, owner_user: CurrentUser) -> None:
        response = client_factory(owner_user).get("/api/users")

        assert response.status_code == 403
        assert response.json()["error"] == "Le rôle owner n'est pas autorisé à accéder à cette route"
        mock_db.users_collection.find.assert_not_called()

    def test_list_hides_passwords(self, client_factory: Callable, mock_db, admin_user: CurrentUser) -> None:
        mock_db.users_collection.find.return_value = make_cursor([{"_id": ObjectId(), "email": "a@example.com"}])
        mock_db.users_collection.count_documents.return_value = 1

        response = client_factory(admin_user).get("/api/users", params={"role": "owner"})

        assert response.status_code == 200
        mock_db.users_collection.find.assert_called_once_with({"role": "owner"}, {"password": 0})

    def test_admin_creates_owner(self, client_factory: Callable, mock_db, admin_user: CurrentUser) -> None:
        payload = {"name": "Ana", "email": "ana@example.com", "password": "secret123", "role": "owner"}

        response = client_factory(admin_user).post("/api/users", json=payload)

        assert response.status_code == 201
        assert response.json()["data"]["role"] == "owner"

    def test_get_invalid_id(self, client_factory: Callable, admin_user: CurrentUser) -> None:
        response = client_factory(admin_user).get("/api/users/xyz")

        assert response.status_code == 404
        assert response.json()["error"] == "Utilisateur non trouvé"

    def test_update_rehashes_password(self, client_factory: Callable, mock_db, admin_user: CurrentUser) -> None:
        uid = ObjectId()
        mock_db.users_collection.find_one_and_update.return_value = {"_id": uid, "email": "a@example.com"}

        response = client_factory(admin_user).put(f"/api/users/{uid}", json={"password": "brandnew1"})

        assert response.status_code == 200
        update = mock_db.users_collection.find_one_and_update.call_args[0][1]["$set"]
        assert update["password"] != "brandnew1"

    def test_delete_missing(self, client_factory: Callable, mock_db, admin_user: CurrentUser) -> None:
        mock_db.users_collection.delete_one.return_value.deleted_count = 0

        response = client_factory(admin_user).delete(f"/api/users/{ObjectId()}")

        assert response.status_code == 404


@pytest.mark.unit
class TestManualReset:
    """POST /api/admin/reset-dishes."""

    def test_admin_runs_reset(self, client_factory: Callable, mock_db, admin_user: CurrentUser) -> None:
        mock_db.dishes_collection.update_many.return_value.modified_count = 4

        response = client_factory(admin_user).post("/api/admin/reset-dishes")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": RESET_SUCCESS_MESSAGE, "modifiedCount": 4}

    def test_storage_failure(self, client_factory: Callable, mock_db, admin_user: CurrentUser) -> None:
        mock_db.dishes_collection.update_many.side_effect = PyMongoError("write failed")

        response = client_factory(admin_user).post("/api/admin/reset-dishes")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "write failed"}

    def test_owner_is_refused(self, client_factory: Callable, mock_db, owner_user: CurrentUser) -> None:
        response = client_factory(owner_user).post("/api/admin/reset-dishes")

        assert response.status_code == 403
        mock_db.dishes_collection.update_many.assert_not_awaited()


@pytest.mark.unit
class TestApplication:
    """App-level behavior."""

    def test_health_check(self, client_factory: Callable) -> None:
        response = client_factory().get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_unknown_route(self, client_factory: Callable) -> None:
        response = client_factory().get("/api/nowhere")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Route non trouvée"}
