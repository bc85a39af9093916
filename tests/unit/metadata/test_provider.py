import logging
from datetime import timedelta

import httpx
import pytest

from initializr.cache import CacheConfiguration, CacheManager, ExpiryPolicy
from initializr.metadata import (
    DefaultDependencyMetadataProvider,
    DefaultInitializrMetadataProvider,
    InitializrMetadata,
)
from initializr.metadata.provider import parse_boot_versions


def _failing_client(status_code: int = 500, **response) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(status_code, **response)))


def test_parse_boot_versions(metadata_payload: dict):
    versions = parse_boot_versions(metadata_payload)

    assert [(v.id, v.name, v.default) for v in versions] == [
        ("2.0.0.BUILD-SNAPSHOT", "2.0.0 (SNAPSHOT)", False),
        ("2.0.0.M2", "2.0.0.M2 (M2)", False),
        ("1.5.4.RELEASE", "1.5.4", True),
    ]


def test_boot_versions_are_refreshed_once_without_cache(metadata: InitializrMetadata, metadata_transport):
    provider = DefaultInitializrMetadataProvider(metadata, httpx.Client(transport=metadata_transport))

    provider.get()
    refreshed = provider.get()

    assert len(metadata_transport.requests) == 1
    assert refreshed.default_boot_version() == "1.5.4.RELEASE"
    assert [v.id for v in refreshed.boot_versions] == ["2.0.0.BUILD-SNAPSHOT", "2.0.0.M2", "1.5.4.RELEASE"]


def test_failed_refresh_keeps_previous_versions(metadata: InitializrMetadata, caplog: pytest.LogCaptureFixture):
    provider = DefaultInitializrMetadataProvider(metadata, _failing_client(503))

    with caplog.at_level(logging.WARNING, logger="initializr.metadata.provider"):
        result = provider.get()

    assert [v.id for v in result.boot_versions] == ["1.5.2.RELEASE", "2.0.0.M1"]
    assert "Failed to fetch boot versions" in caplog.text


@pytest.mark.parametrize(
    "response",
    [
        {"json": {"projectReleases": "not-a-list"}},
        {"content": b"<html>maintenance</html>"},
    ],
)
def test_malformed_payload_keeps_previous_versions(metadata: InitializrMetadata, response: dict):
    provider = DefaultInitializrMetadataProvider(metadata, _failing_client(200, **response))

    assert provider.get().default_boot_version() == "1.5.2.RELEASE"


def test_empty_release_list_keeps_previous_versions(metadata: InitializrMetadata):
    provider = DefaultInitializrMetadataProvider(metadata, _failing_client(200, json={"projectReleases": []}))

    assert provider.get().default_boot_version() == "1.5.2.RELEASE"


def test_no_request_without_metadata_url(metadata: InitializrMetadata, metadata_transport):
    metadata.env.spring_boot_metadata_url = ""
    provider = DefaultInitializrMetadataProvider(metadata, httpx.Client(transport=metadata_transport))

    provider.get()

    assert metadata_transport.requests == []


def test_cached_metadata_is_refreshed_when_entry_expires(
    metadata: InitializrMetadata, metadata_transport, clock
):
    cache = CacheManager.in_memory(clock).create_cache(
        "initializr",
        CacheConfiguration(
            store_by_value=False, expiry_policy=ExpiryPolicy.created(timedelta(minutes=10))
        ),
    )
    provider = DefaultInitializrMetadataProvider(
        metadata, httpx.Client(transport=metadata_transport), cache=cache
    )

    first = provider.get()
    clock.advance(599)
    second = provider.get()

    assert first is second
    assert len(metadata_transport.requests) == 1

    clock.advance(1)
    provider.get()

    assert len(metadata_transport.requests) == 2


def test_close_closes_http_client(metadata: InitializrMetadata, metadata_transport):
    client = httpx.Client(transport=metadata_transport)

    DefaultInitializrMetadataProvider(metadata, client).close()

    assert client.is_closed


def test_dependency_metadata_filters_by_boot_version(metadata: InitializrMetadata):
    provider = DefaultDependencyMetadataProvider()

    stable = provider.get(metadata, "1.5.2.RELEASE")
    milestone = provider.get(metadata, "2.0.0.M1")

    assert sorted(stable.dependencies) == ["h2", "jpa", "web"]
    assert sorted(milestone.dependencies) == ["h2", "jpa", "web", "webflux"]


def test_dependency_metadata_is_cached_per_boot_version(metadata: InitializrMetadata):
    cache = CacheManager.in_memory().create_cache(
        "dependency-metadata", CacheConfiguration(store_by_value=False)
    )
    provider = DefaultDependencyMetadataProvider(cache=cache)

    first = provider.get(metadata, "1.5.2.RELEASE")

    assert provider.get(metadata, "1.5.2.RELEASE") is first
    assert provider.get(metadata, "2.0.0.M1") is not first


def test_dependency_metadata_rejects_invalid_boot_version(metadata: InitializrMetadata):
    with pytest.raises(ValueError):
        DefaultDependencyMetadataProvider().get(metadata, "latest")
