"""
test_api.py - HTTP surface

Runs the FastAPI app in-process against a temporary data directory with
both providers offline, so every test starts from the 7 fallback reviews.
"""

import pytest
from datetime import timedelta
import sys
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent))

from api.auth import create_access_token
from api.main import create_app
from api.services import build_services
from src.settings import Settings
from tests.sample_reviews import fallback_adapters


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def services(tmp_path):
    return build_services(Settings(data_dir=tmp_path), adapters=fallback_adapters())


@pytest.fixture
def client(services):
    with TestClient(create_app(services=services)) as test_client:
        yield test_client


def bearer(services, email: str, expires_delta=None) -> dict:
    manager = services.managers.find_by_email(email)
    token = create_access_token(manager, services.settings, expires_delta)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def manager_headers(services):
    return bearer(services, 'manager@flexliving.com')


@pytest.fixture
def admin_headers(services):
    return bearer(services, 'admin@flexliving.com')


# =============================================================================
# AUTHORIZATION
# =============================================================================

class TestAuthorization:
    """Tests for token checks on manager endpoints."""

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/reviews"),
        ("get", "/api/reviews/dashboard-stats"),
        ("patch", "/api/reviews/7454/approve"),
        ("patch", "/api/reviews/7454/reject"),
        ("post", "/api/reviews/refresh"),
    ])
    def test_missing_token_is_401(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.json() == {'success': False, 'message': 'Access token required'}

    def test_garbage_token_is_403(self, client):
        response = client.get("/api/reviews", headers={'Authorization': 'Bearer nope'})
        assert response.status_code == 403
        assert response.json()['message'] == 'Invalid or expired token'

    def test_expired_token_is_403(self, client, services):
        headers = bearer(services, 'manager@flexliving.com', timedelta(seconds=-1))
        assert client.get("/api/reviews", headers=headers).status_code == 403

    def test_refresh_requires_admin(self, client, manager_headers, admin_headers):
        assert client.post("/api/reviews/refresh", headers=manager_headers).status_code == 403

        response = client.post("/api/reviews/refresh", headers=admin_headers)
        assert response.status_code == 200
        assert '7' in response.json()['message']

    def test_public_endpoints_need_no_token(self, client):
        for path in ("/api/reviews/approved", "/api/properties",
                     "/api/reviews/properties", "/api/health"):
            assert client.get(path).status_code == 200, path


# =============================================================================
# REVIEWS
# =============================================================================

class TestReviews:
    """Tests for listing and filtering."""

    def test_list_all_newest_first(self, client, manager_headers):
        response = client.get("/api/reviews", headers=manager_headers)
        assert response.status_code == 200

        body = response.json()
        assert body['success'] is True
        assert len(body['data']) == 7
        assert body['data'][0]['id'] == 7454
        dates = [r['submittedAt'] for r in body['data']]
        assert dates == sorted(dates, reverse=True)

    def test_wire_shape(self, client, manager_headers):
        review = client.get("/api/reviews", headers=manager_headers).json()['data'][0]
        assert review['type'] == 'guest-to-host'
        assert review['status'] == 'pending'
        assert review['isApproved'] is False
        assert review['propertyId'] == 'luxury-loft-manhattan'
        assert set(review['categories']) == {
            'cleanliness', 'communication', 'respect_house_rules',
            'check_in', 'value', 'location',
        }

    def test_filters(self, client, manager_headers):
        response = client.get(
            "/api/reviews",
            params={'channel': 'google', 'rating': '9'},
            headers=manager_headers,
        )
        data = response.json()['data']
        assert [r['guestName'] for r in data] == ['Jennifer Martinez']

    def test_property_filter(self, client, manager_headers):
        response = client.get(
            "/api/reviews", params={'propertyId': 'modern-studio-brooklyn'},
            headers=manager_headers,
        )
        assert {r['propertyId'] for r in response.json()['data']} == {'modern-studio-brooklyn'}
        assert len(response.json()['data']) == 2

    @pytest.mark.parametrize("params", [
        {'rating': 'high'},
        {'category': 'wifi'},
        {'isApproved': 'maybe'},
        {'dateFrom': 'soon'},
    ])
    def test_bad_filter_is_400(self, client, manager_headers, params):
        response = client.get("/api/reviews", params=params, headers=manager_headers)
        assert response.status_code == 400
        assert response.json()['success'] is False


class TestModerationEndpoints:
    """Tests for approve/reject."""

    def test_approve_then_public(self, client, manager_headers):
        assert client.get("/api/reviews/approved").json()['data'] == []

        response = client.patch("/api/reviews/7454/approve", headers=manager_headers)
        assert response.status_code == 200
        assert response.json() == {'success': True, 'message': 'Review approved successfully'}

        approved = client.get("/api/reviews/approved").json()['data']
        assert [r['id'] for r in approved] == [7454]
        assert approved[0]['status'] == 'published'

    def test_approved_by_property(self, client, manager_headers):
        client.patch("/api/reviews/7454/approve", headers=manager_headers)
        client.patch("/api/reviews/7455/approve", headers=manager_headers)

        response = client.get(
            "/api/reviews/approved", params={'propertyId': 'modern-studio-brooklyn'}
        )
        assert [r['id'] for r in response.json()['data']] == [7455]

    def test_reject(self, client, manager_headers):
        client.patch("/api/reviews/7454/approve", headers=manager_headers)
        response = client.patch("/api/reviews/7454/reject", headers=manager_headers)
        assert response.status_code == 200

        data = client.get(
            "/api/reviews", params={'status': 'rejected'}, headers=manager_headers
        ).json()['data']
        assert [r['id'] for r in data] == [7454]
        assert client.get("/api/reviews/approved").json()['data'] == []

    def test_unknown_review_is_404(self, client, manager_headers):
        response = client.patch("/api/reviews/999999/approve", headers=manager_headers)
        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Review not found'}

    def test_non_integer_id_is_400(self, client, manager_headers):
        response = client.patch("/api/reviews/abc/reject", headers=manager_headers)
        assert response.status_code == 400


class TestDashboardAndProperties:
    """Tests for aggregate endpoints."""

    def test_dashboard(self, client, manager_headers):
        data = client.get("/api/reviews/dashboard-stats", headers=manager_headers).json()['data']
        assert data['totalReviews'] == 7
        assert data['pendingReviews'] == 7
        assert data['approvedReviews'] == 0
        assert data['propertiesCount'] == 5
        assert len(data['recentReviews']) == 5
        assert sum(data['ratingDistribution'].values()) == 7

    def test_dashboard_follows_moderation(self, client, manager_headers):
        client.patch("/api/reviews/7453/approve", headers=manager_headers)
        data = client.get("/api/reviews/dashboard-stats", headers=manager_headers).json()['data']
        assert data['approvedReviews'] == 1
        assert data['pendingReviews'] == 6

    def test_properties_with_stats(self, client):
        data = client.get("/api/properties").json()['data']
        by_id = {p['id']: p for p in data}

        assert len(data) == 5
        assert by_id['luxury-loft-manhattan']['averageRating'] == 9.7
        assert by_id['luxury-loft-manhattan']['totalReviews'] == 2
        assert by_id['modern-studio-brooklyn']['averageRating'] == 8.1
        assert by_id['penthouse-city-views']['price']['perNight'] == 850

    def test_single_property(self, client, manager_headers):
        client.patch("/api/reviews/7455/approve", headers=manager_headers)
        response = client.get("/api/properties/modern-studio-brooklyn")
        assert response.status_code == 200

        data = response.json()['data']
        assert data['name'] == 'Modern Studio in Brooklyn'
        assert data['totalReviews'] == 2
        assert data['approvedReviews'] == 1
        assert data['averageRating'] == 8.1

    def test_unknown_property_is_404(self, client):
        response = client.get("/api/properties/castle")
        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Property not found'}

    def test_review_properties_alias(self, client):
        assert client.get("/api/reviews/properties").json() == \
            client.get("/api/properties").json()


# =============================================================================
# AUTH
# =============================================================================

class TestAuthEndpoints:
    """Tests for login, registration and profile."""

    def test_login(self, client):
        response = client.post(
            "/api/auth/login",
            json={'email': 'admin@flexliving.com', 'password': 'admin123'},
        )
        assert response.status_code == 200
        data = response.json()['data']
        assert data['user']['role'] == 'admin'
        assert 'createdAt' not in data['user']

        headers = {'Authorization': f"Bearer {data['token']}"}
        assert client.get("/api/reviews", headers=headers).status_code == 200

    def test_wrong_password_is_401(self, client):
        response = client.post(
            "/api/auth/login",
            json={'email': 'admin@flexliving.com', 'password': 'wrong'},
        )
        assert response.status_code == 401
        assert response.json()['message'] == 'Invalid credentials'

    def test_missing_fields_is_400(self, client):
        response = client.post("/api/auth/login", json={'email': 'admin@flexliving.com'})
        assert response.status_code == 400

    def test_register_and_duplicate(self, client):
        body = {'email': 'new@flexliving.com', 'password': 'pw123456', 'name': 'New'}
        response = client.post("/api/auth/register", json=body)
        assert response.status_code == 201
        assert response.json()['data']['user']['role'] == 'manager'

        response = client.post("/api/auth/register", json=body)
        assert response.status_code == 409

    def test_register_bad_role(self, client):
        response = client.post("/api/auth/register", json={
            'email': 'x@flexliving.com', 'password': 'pw', 'name': 'X', 'role': 'owner',
        })
        assert response.status_code == 400

    def test_profile(self, client, manager_headers):
        response = client.get("/api/auth/profile", headers=manager_headers)
        assert response.status_code == 200
        data = response.json()['data']
        assert data['email'] == 'manager@flexliving.com'
        assert 'createdAt' in data

    def test_profile_requires_token(self, client):
        assert client.get("/api/auth/profile").status_code == 401


# =============================================================================
# MISC
# =============================================================================

class TestMisc:
    """Tests for health, unknown routes and Google passthrough."""

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body['success'] is True
        assert 'timestamp' in body

    def test_unknown_route(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Route not found'}

    def test_google_search_requires_query(self, client):
        assert client.get("/api/google/places/search").status_code == 400

    def test_google_search_without_key_is_empty(self, client):
        response = client.get("/api/google/places/search", params={'query': 'loft'})
        assert response.json() == {'success': True, 'data': []}

    def test_google_place_not_found(self, client):
        assert client.get("/api/google/places/abc").status_code == 404
        assert client.get("/api/google/places/abc/reviews").status_code == 404

    def test_google_review_search(self, client):
        assert client.get("/api/google/reviews/search").status_code == 400
        response = client.get(
            "/api/google/reviews/search", params={'propertyName': 'Luxury Loft'}
        )
        assert response.json() == {'success': True, 'data': []}

    def test_state_survives_restart(self, tmp_path, manager_headers, services):
        with TestClient(create_app(services=services)) as first:
            first.patch("/api/reviews/7456/approve", headers=manager_headers)

        restarted = build_services(Settings(data_dir=tmp_path), adapters=fallback_adapters())
        with TestClient(create_app(services=restarted)) as second:
            data = second.get("/api/reviews/approved").json()['data']
        assert [r['id'] for r in data] == [7456]
