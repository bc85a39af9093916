import pytest

from initializr.metadata.version import Version, VersionRange


def test_parse():
    assert Version.parse("1.5.2.RELEASE") == Version(1, 5, 2, "RELEASE")
    assert Version.parse("2.0.0") == Version(2, 0, 0, "RELEASE")
    assert Version.parse("2.0.0-m1") == Version(2, 0, 0, "M1")


@pytest.mark.parametrize("text", ["", "2", "2.0", "two.zero.zero", "2.0.0."])
def test_parse_rejects_invalid_versions(text: str):
    with pytest.raises(ValueError):
        Version.parse(text)


@pytest.mark.parametrize(
    ("lower", "higher"),
    [
        ("2.0.0.BUILD-SNAPSHOT", "2.0.0.M1"),
        ("2.0.0.M1", "2.0.0.M2"),
        ("2.0.0.M2", "2.0.0.RC1"),
        ("2.0.0.RC1", "2.0.0.RELEASE"),
        ("1.5.10.RELEASE", "2.0.0.M1"),
        ("1.5.2.RELEASE", "1.5.10.RELEASE"),
    ],
)
def test_ordering(lower: str, higher: str):
    assert Version.parse(lower) < Version.parse(higher)


def test_bare_version_is_a_lower_bound():
    version_range = VersionRange.parse("2.0.0.M1")

    assert not version_range.match(Version.parse("1.5.2.RELEASE"))
    assert version_range.match(Version.parse("2.0.0.M1"))
    assert version_range.match(Version.parse("3.0.0.RELEASE"))


def test_interval():
    version_range = VersionRange.parse("[1.5.0.RELEASE,2.0.0.M1)")

    assert version_range.match(Version.parse("1.5.0.RELEASE"))
    assert version_range.match(Version.parse("1.5.9.RELEASE"))
    assert not version_range.match(Version.parse("2.0.0.M1"))
    assert not version_range.match(Version.parse("1.4.7.RELEASE"))


def test_exclusive_lower_and_inclusive_upper():
    version_range = VersionRange.parse("(1.5.0.RELEASE,1.5.9.RELEASE]")

    assert not version_range.match(Version.parse("1.5.0.RELEASE"))
    assert version_range.match(Version.parse("1.5.9.RELEASE"))


@pytest.mark.parametrize("text", ["[1.5.0.RELEASE", "[1.5.0.RELEASE]", "[1.5.0.RELEASE,next)"])
def test_invalid_ranges(text: str):
    with pytest.raises(ValueError):
        VersionRange.parse(text)


def test_unknown_qualifier_sorts_after_release():
    release = Version.parse("1.0.0.RELEASE")
    custom = Version.parse("1.0.0.FOO")

    assert release < custom
    assert release != custom
    assert not VersionRange.parse("[0.9.0.RELEASE,1.0.0.RELEASE]").match(custom)
    assert VersionRange.parse("(1.0.0.RELEASE,1.0.0.FOO]").match(custom)


def test_snapshot_spellings_are_equal():
    snapshot = Version.parse("2.0.0.BUILD-SNAPSHOT")

    assert snapshot == Version.parse("2.0.0-SNAPSHOT")
    assert hash(snapshot) == hash(Version.parse("2.0.0-SNAPSHOT"))
