"""API tests for network, relationship detection and health endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from temporalio.exceptions import WorkflowAlreadyStartedError

from warmpath.api.v1.endpoints.network import get_network_service
from warmpath.core.exceptions import OrganizationNotFoundError
from warmpath.core.temporal_client import get_temporal_client
from warmpath.main import app
from warmpath.schemas.network import IntroPath, NetworkOverviewItem, NetworkPath
from warmpath.schemas.relationships import RelationshipType, StrengthLabel


@pytest.fixture
def test_client() -> TestClient:
    """FastAPI test client; the lifespan (database init) is not triggered."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def network_service() -> MagicMock:
    service = MagicMock()
    app.dependency_overrides[get_network_service] = lambda: service
    return service


def make_intro_path(**overrides) -> IntroPath:
    values = dict(
        contact_id=uuid4(),
        contact_name="Jane Doe",
        contact_company="Sequoia Capital",
        contact_position="Partner",
        team_member_name="Todd",
        linkedin_url=None,
        relationship_type=RelationshipType.WORKS_AT,
        path_strength=1.0,
        strength_label=StrengthLabel.STRONG,
        path_description="Jane Doe (Partner) at Sequoia Capital - currently works at Sequoia Capital.",
    )
    values.update(overrides)
    return IntroPath(**values)


class TestNetworkEndpoints:

    def test_overview(self, test_client, network_service):
        organization_id = uuid4()
        network_service.get_network_overview = AsyncMock(
            return_value=[
                NetworkOverviewItem(
                    organization_id=organization_id,
                    organization_name="Sequoia Capital",
                    total_connections=3,
                    strong_connections=2,
                )
            ]
        )

        response = test_client.get("/api/v1/network/overview")

        assert response.status_code == 200
        assert response.json() == [
            {
                "organization_id": str(organization_id),
                "organization_name": "Sequoia Capital",
                "total_connections": 3,
                "strong_connections": 2,
            }
        ]

    def test_organization_network(self, test_client, network_service):
        organization_id = uuid4()
        network_service.get_network_graph = AsyncMock(
            return_value=NetworkPath(
                organization_id=organization_id,
                organization_name="Sequoia Capital",
                connections=[make_intro_path()],
                total_paths=1,
                strong_paths=1,
            )
        )

        response = test_client.get(f"/api/v1/network/organizations/{organization_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["total_paths"] == 1
        assert body["connections"][0]["relationship_type"] == "works_at"
        assert body["connections"][0]["strength_label"] == "strong"
        network_service.get_network_graph.assert_awaited_once_with(organization_id)

    def test_unknown_organization_is_404(self, test_client, network_service):
        network_service.get_network_graph = AsyncMock(
            side_effect=OrganizationNotFoundError("Organization not found")
        )

        response = test_client.get(f"/api/v1/network/organizations/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Organization not found"

    def test_malformed_organization_id_is_422(self, test_client, network_service):
        response = test_client.get("/api/v1/network/organizations/not-a-uuid")

        assert response.status_code == 422

    def test_best_path(self, test_client, network_service):
        network_service.get_best_intro_path = AsyncMock(return_value=make_intro_path())

        response = test_client.get(f"/api/v1/network/organizations/{uuid4()}/best-path")

        assert response.status_code == 200
        assert response.json()["contact_name"] == "Jane Doe"

    def test_best_path_absent(self, test_client, network_service):
        network_service.get_best_intro_path = AsyncMock(return_value=None)

        response = test_client.get(f"/api/v1/network/organizations/{uuid4()}/best-path")

        assert response.status_code == 200
        assert response.json() is None


class TestDetectionEndpoint:

    @pytest.fixture(autouse=True)
    def temporal_client(self):
        client = MagicMock()
        app.dependency_overrides[get_temporal_client] = lambda: client
        return client

    def test_starts_workflow(self, test_client, temporal_client):
        handle = MagicMock(id="relationship-detection", result_run_id="run-1")
        with patch(
            "warmpath.api.v1.endpoints.relationships.start_relationship_detection",
            AsyncMock(return_value=handle),
        ) as start:
            response = test_client.post(
                "/api/v1/relationships/detect", json={"as_of": "2026-10-19"}
            )

        assert response.status_code == 202
        assert response.json() == {
            "workflow_id": "relationship-detection",
            "run_id": "run-1",
            "status": "started",
        }
        start.assert_awaited_once_with(
            temporal_client, {"as_of": "2026-10-19", "replace_existing": True}
        )

    def test_run_in_flight_is_409(self, test_client):
        with patch(
            "warmpath.api.v1.endpoints.relationships.start_relationship_detection",
            AsyncMock(
                side_effect=WorkflowAlreadyStartedError(
                    "relationship-detection", "RelationshipDetectionWorkflow"
                )
            ),
        ):
            response = test_client.post("/api/v1/relationships/detect", json={})

        assert response.status_code == 409


class TestHealthEndpoint:

    @pytest.mark.parametrize(
        "db_status,expected",
        [("healthy", "healthy"), ("unhealthy", "degraded")],
    )
    def test_reports_database_state(self, test_client, db_status, expected):
        with patch(
            "warmpath.api.v1.endpoints.health.db_client.health_check",
            AsyncMock(return_value={"status": db_status}),
        ):
            response = test_client.get("/health/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == expected
        assert body["database"] == db_status
        assert body["version"] == "0.1.0"
