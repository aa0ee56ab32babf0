"""
Integration tests for fitment set routes.

Verifies auth enforcement, request validation, service delegation and the
mapping of domain errors to HTTP status codes.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from fitment_hub.core.exceptions import FitmentSetNotFoundError, PersistenceError, ValidationError
from fitment_hub.schemas.fitment import (
    FitmentSetEditorState,
    FitmentSetPage,
    FitmentSetRow,
    SaveFitmentSetResponse,
)


@pytest.fixture
def fitment_service():
    service = MagicMock()
    service.list_page = AsyncMock(return_value=FitmentSetPage(
        items=[FitmentSetRow(fitment_set_id=1, product_count=2, display_values={1: "2015-2021"})],
        next_cursor=1, has_more=True,
    ))
    service.load_set = AsyncMock(return_value=FitmentSetEditorState(fitment_set_id=5, existing_tags=["honda"]))
    service.save = AsyncMock(return_value=SaveFitmentSetResponse(
        success=True, message="Saved fitment data", persisted=True, fitment_set_id=9, tags=["honda"],
    ))
    service.delete_sets = AsyncMock(return_value=2)
    service.delete_set = AsyncMock(return_value=1)
    service.duplicate_set = AsyncMock(return_value=11)
    service.clear_all = AsyncMock(return_value=1200)
    service.has_fitment_sets = AsyncMock(return_value=True)
    return service


@pytest.fixture
def client(fitment_service):
    """Create a test client with auth and service dependencies overridden."""
    from fitment_hub.main import app
    from fitment_hub.container import get_fitment_service
    from fitment_hub.core.auth import get_current_shop, get_current_store_id

    app.dependency_overrides[get_current_shop] = lambda: {"shop": "test-store.myshopify.com", "user_id": "1"}
    app.dependency_overrides[get_current_store_id] = lambda: 7
    app.dependency_overrides[get_fitment_service] = lambda: fitment_service
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def unauthenticated_client():
    """Create a test client WITHOUT auth override to test 401/403."""
    from fitment_hub.main import app
    app.dependency_overrides.clear()
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.mark.integration
class TestListAndLoad:

    def test_list_page(self, client, fitment_service):
        response = client.get("/api/v1/fitment-sets", params={"after_id": 40, "limit": 25})
        assert response.status_code == 200
        data = response.json()
        assert data["next_cursor"] == 1
        assert data["has_more"] is True
        assert data["items"][0]["display_values"] == {"1": "2015-2021"}
        fitment_service.list_page.assert_awaited_once_with(7, 40, 25)

    def test_list_default_limit(self, client, fitment_service):
        client.get("/api/v1/fitment-sets")
        fitment_service.list_page.assert_awaited_once_with(7, None, 50)

    def test_exists(self, client, fitment_service):
        response = client.get("/api/v1/fitment-sets/exists")
        assert response.status_code == 200
        assert response.json() == {"shop": "test-store.myshopify.com", "has_fitment_sets": True}
        fitment_service.has_fitment_sets.assert_awaited_once_with("test-store.myshopify.com")

    def test_load(self, client, fitment_service):
        response = client.get("/api/v1/fitment-sets/5")
        assert response.status_code == 200
        assert response.json()["existing_tags"] == ["honda"]
        fitment_service.load_set.assert_awaited_once_with(7, 5)

    def test_load_not_found(self, client, fitment_service):
        fitment_service.load_set.side_effect = FitmentSetNotFoundError("Set not found")
        response = client.get("/api/v1/fitment-sets/404")
        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Set not found"

    def test_requires_auth(self, unauthenticated_client):
        response = unauthenticated_client.get("/api/v1/fitment-sets")
        assert response.status_code in (401, 403)


@pytest.mark.integration
class TestSave:

    def test_create(self, client, fitment_service):
        body = {
            "universal_fit": False,
            "values": {"1": {"from": "2015", "to": "2020"}, "2": {"select": "Honda"}},
            "products": [{"id": "1", "variants": [{"shopify_variant_id": 10}]}],
        }
        response = client.post("/api/v1/fitment-sets", json=body)
        assert response.status_code == 200
        assert response.json()["fitment_set_id"] == 9
        store_id, request = fitment_service.save.await_args.args
        assert store_id == 7
        assert request.values[1].from_ == "2015"
        assert request.products[0].variants[0].shopify_variant_id == 10

    def test_update(self, client, fitment_service):
        response = client.put("/api/v1/fitment-sets/5", json={"universal_fit": True})
        assert response.status_code == 200
        assert fitment_service.save.await_args.kwargs == {"fitment_set_id": 5}

    def test_validation_error_is_422(self, client, fitment_service):
        fitment_service.save.side_effect = ValidationError('Enter value for "Make"')
        response = client.post("/api/v1/fitment-sets", json={})
        assert response.status_code == 422
        assert response.json()["detail"] == {"code": "VALIDATION_ERROR", "message": 'Enter value for "Make"'}

    def test_persistence_error_is_500(self, client, fitment_service):
        fitment_service.save.side_effect = PersistenceError("Save failed: boom")
        response = client.post("/api/v1/fitment-sets", json={})
        assert response.status_code == 500
        assert response.json()["detail"]["message"] == "Save failed: boom"


@pytest.mark.integration
class TestDeleteAndDuplicate:

    def test_delete_one(self, client, fitment_service):
        response = client.delete("/api/v1/fitment-sets/3")
        assert response.status_code == 200
        assert response.json()["deleted"] == 1
        fitment_service.delete_set.assert_awaited_once_with(7, 3)

    def test_delete_selected(self, client, fitment_service):
        response = client.post("/api/v1/fitment-sets/delete", json={"set_ids": [1, 2]})
        assert response.status_code == 200
        assert response.json()["deleted"] == 2
        fitment_service.delete_sets.assert_awaited_once_with(7, [1, 2])

    def test_delete_selected_requires_ids(self, client):
        response = client.post("/api/v1/fitment-sets/delete", json={"set_ids": []})
        assert response.status_code == 422

    def test_duplicate(self, client, fitment_service):
        response = client.post("/api/v1/fitment-sets/3/duplicate")
        assert response.status_code == 200
        assert response.json()["result"] == 11

    def test_clear_all(self, client, fitment_service):
        response = client.delete("/api/v1/fitment-sets")
        assert response.status_code == 200
        assert response.json()["deleted"] == 1200
        fitment_service.clear_all.assert_awaited_once_with(7)
