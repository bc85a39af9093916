from pathlib import Path

import pytest

from initializr.cache import CacheConfiguration, CacheManager
from initializr.generator import ProjectResourceLocator


def test_reads_packaged_resource():
    content = ProjectResourceLocator().get_text_resource("classpath:templates/project/gitignore")

    assert "target/" in content


def test_reads_filesystem_resource(tmp_path: Path):
    resource = tmp_path / "banner.txt"
    resource.write_bytes(b"hello")

    assert ProjectResourceLocator().get_binary_resource(str(resource)) == b"hello"


@pytest.mark.parametrize("location", ["classpath:templates/project/missing", "/does/not/exist"])
def test_missing_resource_raises(location: str):
    with pytest.raises(FileNotFoundError):
        ProjectResourceLocator().get_binary_resource(location)


def test_resources_are_cached_by_location(tmp_path: Path):
    resource = tmp_path / "banner.txt"
    resource.write_bytes(b"hello")
    cache = CacheManager.in_memory().create_cache("project-resources", CacheConfiguration())
    locator = ProjectResourceLocator(cache=cache)

    locator.get_binary_resource(str(resource))
    resource.write_bytes(b"changed")

    assert locator.get_binary_resource(str(resource)) == b"hello"
