"""Integration tests for the REST API over a mocked engine socket."""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import container_payload, engine_router, image_payload, volume_payload
from container_panel.adapters.inbound.rest_api import create_app
from container_panel.application.panel_service import PanelService
from container_panel.domain.entities.resources import Container, ContainerStatus

API = "/v1.41"


@pytest.fixture
def make_client(make_gateway, test_config, metrics_registry):
    """Build a TestClient whose engine answers through the given handler."""

    def factory(handler):
        gateway = make_gateway(handler)
        app = create_app(PanelService(gateway), config=test_config, metrics=metrics_registry)
        return TestClient(app)

    return factory


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 2] No such file or directory", request=request)


@pytest.mark.integration
class TestContainersEndpoint:
    """GET /api/containers."""

    def test_end_to_end_container(self, make_client):
        client = make_client(engine_router({
            ("GET", f"{API}/containers/json"): [container_payload()],
        }))

        response = client.get("/api/containers")

        assert response.status_code == 200
        assert response.json() == [
            {
                "id": "abc123",
                "name": "db",
                "image": "postgres:14",
                "status": "running",
                "ports": ["5432/tcp"],
                "created": "2023-11-14T22:13:20.000Z",
                "labels": {},
            }
        ]

    def test_engine_unreachable(self, make_client, metrics_registry):
        client = make_client(unreachable)

        response = client.get("/api/containers")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list containers"}
        assert metrics_registry._registry.get_sample_value(
            "api_errors_total", {"endpoint": "list_containers"}
        ) == 1.0

    def test_malformed_payload_collapses(self, make_client):
        client = make_client(engine_router({
            ("GET", f"{API}/containers/json"): [container_payload(Names=[])],
        }))

        response = client.get("/api/containers")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list containers"}

    @pytest.mark.parametrize(
        "overrides",
        [{"Labels": {"a": 1}}, {"Id": 123}],
        ids=["non-string-label", "numeric-id"],
    )
    def test_mistyped_fields_collapse(self, make_client, metrics_registry, overrides):
        client = make_client(engine_router({
            ("GET", f"{API}/containers/json"): [container_payload(**overrides)],
        }))

        response = client.get("/api/containers")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list containers"}
        assert metrics_registry._registry.get_sample_value(
            "api_errors_total", {"endpoint": "list_containers"}
        ) == 1.0

    def test_unserializable_record_collapses(self, test_config, metrics_registry):
        class StubService:
            async def list_containers(self):
                return [
                    Container(
                        id="abc123",
                        name="db",
                        image="postgres:14",
                        status=ContainerStatus.RUNNING,
                        labels={"a": 1},
                    )
                ]

        app = create_app(StubService(), config=test_config, metrics=metrics_registry)

        response = TestClient(app).get("/api/containers")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list containers"}


@pytest.mark.integration
class TestControlEndpoints:
    """POST /api/containers/{id}/start|stop."""

    def test_start(self, make_client):
        client = make_client(engine_router({
            ("POST", f"{API}/containers/abc123/start"): httpx.Response(204),
        }))

        response = client.post("/api/containers/abc123/start")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Container started successfully"}

    def test_stop(self, make_client):
        client = make_client(engine_router({
            ("POST", f"{API}/containers/abc123/stop"): httpx.Response(204),
        }))

        response = client.post("/api/containers/abc123/stop")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Container stopped successfully"}

    def test_start_unknown_container(self, make_client):
        client = make_client(engine_router({
            ("POST", f"{API}/containers/nope/start"): httpx.Response(
                404, json={"message": "No such container: nope"}
            ),
        }))

        response = client.post("/api/containers/nope/start")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to start container"}

    def test_stop_timeout(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        response = make_client(handler).post("/api/containers/abc123/stop")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to stop container"}


@pytest.mark.integration
class TestImagesEndpoint:
    """GET /api/images."""

    def test_list_images(self, make_client):
        client = make_client(engine_router({
            ("GET", f"{API}/images/json"): [image_payload(), image_payload(Id="sha256:ff", RepoTags=[], Size=0)],
        }))

        response = client.get("/api/images")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["repository"] == "myapp"
        assert body[0]["tag"] == "latest"
        assert body[0]["size"] == "5 GB"
        assert body[1] == {
            "id": "ff",
            "repository": "<none>",
            "tag": "<none>",
            "size": "0 Bytes",
            "created": "2023-11-14T22:13:20.000Z",
            "labels": {},
        }

    def test_engine_error(self, make_client):
        client = make_client(engine_router({
            ("GET", f"{API}/images/json"): httpx.Response(500, json={"message": "boom"}),
        }))

        response = client.get("/api/images")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list images"}


@pytest.mark.integration
class TestVolumesEndpoint:
    """GET /api/volumes."""

    def test_list_volumes_with_users(self, make_client):
        mount = {
            "Type": "volume",
            "Name": "pgdata",
            "Source": "/var/lib/docker/volumes/pgdata/_data",
            "Destination": "/var/lib/postgresql/data",
        }
        client = make_client(engine_router({
            ("GET", f"{API}/volumes"): {"Volumes": [volume_payload()], "Warnings": []},
            ("GET", f"{API}/containers/json"): [
                container_payload(Mounts=[mount]),
                container_payload(Id="web", Names=["/web"], State="exited"),
            ],
        }))

        response = client.get("/api/volumes")

        assert response.status_code == 200
        assert response.json() == [
            {
                "id": "pgdata",
                "name": "pgdata",
                "driver": "local",
                "mountpoint": "/var/lib/docker/volumes/pgdata/_data",
                "usedBy": [{"id": "abc123", "name": "db", "state": "running"}],
                "size": "1 MB",
                "createdAt": "2023-11-14T22:13:20Z",
                "labels": {},
            }
        ]

    def test_container_fetch_failure_fails_whole_request(self, make_client):
        client = make_client(engine_router({
            ("GET", f"{API}/volumes"): {"Volumes": [volume_payload()], "Warnings": []},
            ("GET", f"{API}/containers/json"): httpx.Response(500, json={"message": "boom"}),
        }))

        response = client.get("/api/volumes")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list volumes"}

    def test_mistyped_volume_collapses(self, make_client):
        client = make_client(engine_router({
            ("GET", f"{API}/volumes"): {"Volumes": [volume_payload(Labels={"tier": 2})]},
            ("GET", f"{API}/containers/json"): [],
        }))

        response = client.get("/api/volumes")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to list volumes"}


@pytest.mark.integration
class TestSystemEndpoints:
    """Health and CORS."""

    def test_health(self, make_client):
        response = make_client(engine_router({})).get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_cors_allows_any_origin(self, make_client):
        client = make_client(engine_router({("GET", f"{API}/images/json"): []}))
        response = client.get("/api/images", headers={"Origin": "http://localhost:5173"})
        assert response.headers["access-control-allow-origin"] == "*"
