import asyncio
import io
import re
import time
import zipfile
from collections.abc import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

from initializr.application import Application, ApplicationBuilder
from initializr.config import Environment
from initializr.http import HttpClientFactory
from initializr.metadata import InitializrMetadataProvider
from initializr.web import MainController, UiController, create_web_app
from initializr.web.main import archive_name


@pytest.fixture
def application(app_builder: ApplicationBuilder) -> Application:
    return app_builder.build()


@pytest.fixture
def client(application: Application) -> Iterator[TestClient]:
    with TestClient(create_web_app(application)) as test_client:
        yield test_client


def test_home_page(client: TestClient):
    response = client.get("/")

    assert response.status_code == 200
    assert "<title>Spring Initializr</title>" in response.text
    assert 'value="1.5.4.RELEASE" selected' in response.text


def test_home_page_links_fingerprinted_stylesheet(client: TestClient):
    html = client.get("/").text
    stylesheet = re.search(r'href="(/static/css/initializr\.css\?v=[0-9a-f]{8})"', html)

    assert stylesheet is not None
    assert client.get(stylesheet.group(1)).status_code == 200


def test_client_metadata(client: TestClient):
    body = client.get("/metadata/client").json()

    assert body["bootVersion"]["default"] == "1.5.4.RELEASE"
    assert body["type"]["default"] == "maven-project"
    assert body["groupId"] == {"type": "text", "default": "com.example"}
    assert [g["name"] for g in body["dependencies"]["values"]] == ["Web", "SQL"]


def test_config_metadata(client: TestClient):
    body = client.get("/metadata/config").json()

    assert body["defaults"]["artifact_id"] == "demo"
    assert [g["name"] for g in body["dependencies"]] == ["Web", "SQL"]


def test_dependencies_for_boot_version(client: TestClient):
    body = client.get("/dependencies", params={"bootVersion": "1.5.2.RELEASE"}).json()

    assert body["bootVersion"] == "1.5.2.RELEASE"
    assert sorted(body["dependencies"]) == ["h2", "jpa", "web"]
    assert body["dependencies"]["h2"] == {
        "groupId": "com.h2database",
        "artifactId": "h2",
        "version": None,
        "scope": "runtime",
    }


def test_dependencies_default_to_current_boot_version(client: TestClient):
    body = client.get("/dependencies").json()

    assert body["bootVersion"] == "1.5.4.RELEASE"


def test_dependencies_with_invalid_boot_version(client: TestClient):
    response = client.get("/dependencies", params={"bootVersion": "latest"})

    assert response.status_code == 400
    assert "latest" in response.json()["message"]


def test_starter_zip(client: TestClient):
    response = client.get("/starter.zip", params={"artifactId": "orders", "dependencies": "web,h2"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == 'attachment; filename="orders.zip"'
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        pom = archive.read("pom.xml").decode()
    assert "spring-boot-starter-web" in pom


def test_starter_zip_accepts_repeated_style(client: TestClient):
    response = client.post("/starter.zip?style=web&style=jpa&baseDir=demo")

    assert response.status_code == 200
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert "demo/pom.xml" in archive.namelist()


@pytest.mark.parametrize(
    ("params", "message"),
    [
        ({"dependencies": "unknown"}, "Unknown dependency 'unknown'"),
        ({"dependencies": "webflux"}, "not compatible"),
        ({"type": "ant-project"}, "Unknown type"),
    ],
)
def test_starter_zip_rejects_invalid_requests(client: TestClient, params: dict, message: str):
    response = client.get("/starter.zip", params=params)

    assert response.status_code == 400
    assert message in response.json()["message"]


def test_ui_dependencies(client: TestClient):
    body = client.get("/ui/dependencies").json()

    assert [d["id"] for d in body["dependencies"]] == ["web", "webflux", "jpa", "h2"]
    assert body["dependencies"][0] == {
        "id": "web",
        "name": "Web",
        "description": "Full-stack web development",
        "group": "Web",
    }


def test_ui_dependencies_for_version(client: TestClient):
    body = client.get("/ui/dependencies", params={"version": "1.5.2.RELEASE"}).json()

    assert "webflux" not in [d["id"] for d in body["dependencies"]]


def test_ui_dependencies_with_invalid_version(client: TestClient):
    assert client.get("/ui/dependencies", params={"version": "next"}).status_code == 400


def test_application_is_shut_down_with_the_web_app(application: Application):
    with TestClient(create_web_app(application)) as test_client:
        test_client.get("/")

    assert application.resolve(InitializrMetadataProvider).http_client.is_closed


@pytest.mark.parametrize(
    ("artifact_id", "filename"),
    [("orders", "orders.zip"), ('ord"ers', "orders.zip"), ("../..", "demo.zip"), (None, "demo.zip")],
)
def test_archive_name_is_safe_to_quote(artifact_id, filename: str):
    assert archive_name(artifact_id) == filename


def test_starter_zip_header_with_quote_in_artifact_id(client: TestClient):
    response = client.get("/starter.zip", params={"artifactId": 'my"app'})

    assert response.headers["content-disposition"] == 'attachment; filename="myapp.zip"'


@pytest.fixture
def slow_application(environment: Environment, metadata_payload: dict) -> Application:
    def slow_remote(request: httpx.Request) -> httpx.Response:
        time.sleep(0.3)
        return httpx.Response(200, json=metadata_payload)

    return (
        ApplicationBuilder(environment)
        .register_dependency(
            HttpClientFactory, lambda: HttpClientFactory(transport=httpx.MockTransport(slow_remote))
        )
        .build()
    )


async def _longest_pause_while(awaitable) -> float:
    gaps = []

    async def ticker():
        last = time.monotonic()
        for _ in range(8):
            await asyncio.sleep(0.02)
            now = time.monotonic()
            gaps.append(now - last)
            last = now

    await asyncio.gather(ticker(), awaitable)
    return max(gaps)


@pytest.mark.asyncio
async def test_metadata_refresh_does_not_block_main_controller(slow_application: Application):
    controller = slow_application.resolve(MainController)

    assert await _longest_pause_while(controller.metadata_client()) < 0.2


@pytest.mark.asyncio
async def test_metadata_refresh_does_not_block_ui_controller(slow_application: Application):
    controller = slow_application.resolve(UiController)

    assert await _longest_pause_while(controller.dependencies(version=None)) < 0.2
