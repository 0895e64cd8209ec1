import pytest
from fastapi.testclient import TestClient

from src.dependencies.services import get_item_service, get_rating_service
from src.main import create_app


@pytest.fixture
def app(item_service, rating_service):
    application = create_app(use_lifespan=False)
    application.dependency_overrides[get_item_service] = lambda: item_service
    application.dependency_overrides[get_rating_service] = lambda: rating_service
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id="rater-a", roles=None):
        return {"Authorization": f"Bearer {make_token(user_id, roles)}"}
    return _headers
