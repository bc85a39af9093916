"""Central test fixtures."""

import httpx
import pytest

from initializr.application import ApplicationBuilder
from initializr.config import Environment
from initializr.http import HttpClientFactory
from initializr.metadata import InitializrMetadataBuilder, InitializrProperties

METADATA_URL = "https://metadata.test/project_metadata/spring-boot"


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def initializr_properties() -> dict:
    """Properties as they would appear in an application.yml."""
    return {
        "initializr": {
            "env": {"spring-boot-metadata-url": METADATA_URL},
            "bootVersions": [
                {"id": "1.5.2.RELEASE", "default": True},
                {"id": "2.0.0.M1"},
            ],
            "dependencies": [
                {
                    "name": "Web",
                    "content": [
                        {"id": "web", "name": "Web", "description": "Full-stack web development"},
                        {
                            "id": "webflux",
                            "name": "Reactive Web",
                            "versionRange": "2.0.0.M1",
                        },
                    ],
                },
                {
                    "name": "SQL",
                    "content": [
                        {"id": "jpa", "name": "JPA"},
                        {
                            "id": "h2",
                            "name": "H2",
                            "groupId": "com.h2database",
                            "artifactId": "h2",
                            "scope": "runtime",
                            "starter": False,
                        },
                    ],
                },
            ],
        }
    }


@pytest.fixture
def environment(initializr_properties: dict) -> Environment:
    return Environment(initializr_properties)


@pytest.fixture
def metadata(environment: Environment):
    properties = environment.bind(InitializrProperties, "initializr")
    return InitializrMetadataBuilder.from_initializr_properties(properties).build()


@pytest.fixture
def metadata_payload() -> dict:
    return {
        "projectReleases": [
            {
                "version": "2.0.0.BUILD-SNAPSHOT",
                "versionDisplayName": "2.0.0",
                "current": False,
                "releaseStatus": "SNAPSHOT",
                "snapshot": True,
            },
            {
                "version": "2.0.0.M2",
                "versionDisplayName": "2.0.0.M2",
                "current": False,
                "releaseStatus": "PRERELEASE",
                "snapshot": False,
            },
            {
                "version": "1.5.4.RELEASE",
                "versionDisplayName": "1.5.4",
                "current": True,
                "releaseStatus": "GENERAL_AVAILABILITY",
                "snapshot": False,
            },
        ]
    }


class RecordingTransport(httpx.MockTransport):
    """Mock transport remembering the requests it served."""

    def __init__(self, payload: dict | None = None, status_code: int = 200):
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status_code, json=payload or {})

        super().__init__(handler)


@pytest.fixture
def metadata_transport(metadata_payload: dict) -> RecordingTransport:
    return RecordingTransport(metadata_payload)


@pytest.fixture
def app_builder(environment: Environment, metadata_transport: RecordingTransport) -> ApplicationBuilder:
    """Builder whose outbound HTTP goes to the mock transport."""
    return ApplicationBuilder(environment).register_dependency(
        HttpClientFactory, lambda: HttpClientFactory(transport=metadata_transport)
    )
