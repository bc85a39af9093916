"""Version ordering and ranges for boot version compatibility checks.

Versions look like ``1.5.3.RELEASE`` or ``2.0.0.M1``; the numeric part is
compared first, then the qualifier, where snapshots and milestones sort
before releases. Ranges use interval notation: ``[1.5.0.RELEASE,2.0.0.M1)``,
or a bare version meaning "this version or later".
"""

import re
from dataclasses import dataclass
from functools import total_ordering

_VERSION = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:[.-](.+))?$")

# Lower rank sorts first. Unknown qualifiers sort after RELEASE, by name.
_QUALIFIER_RANK = {"BUILD-SNAPSHOT": 0, "SNAPSHOT": 0, "M": 1, "RC": 2, "RELEASE": 3}
_UNKNOWN_RANK = 4


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    major: int
    minor: int
    patch: int
    qualifier: str = "RELEASE"

    @classmethod
    def parse(cls, text: str) -> "Version":
        match = _VERSION.match(text.strip())
        if match is None:
            raise ValueError(f"Invalid version {text!r}")
        major, minor, patch, qualifier = match.groups()
        return cls(int(major), int(minor), int(patch), (qualifier or "RELEASE").upper())

    def _qualifier_key(self) -> tuple[int, str, int]:
        name = self.qualifier.rstrip("0123456789")
        number = int(self.qualifier[len(name) :] or 0)
        if name in _QUALIFIER_RANK:
            return _QUALIFIER_RANK[name], "", number
        return _UNKNOWN_RANK, name, number

    def _key(self) -> tuple:
        return (self.major, self.minor, self.patch, self._qualifier_key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: "Version") -> bool:
        return self._key() < other._key()

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}.{self.qualifier}"


@dataclass(frozen=True)
class VersionRange:
    lower: Version
    lower_inclusive: bool = True
    upper: Version | None = None
    upper_inclusive: bool = False

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        text = text.strip()
        if text[:1] not in "[(":
            return cls(Version.parse(text))

        if text[-1:] not in "])" or "," not in text:
            raise ValueError(f"Invalid version range {text!r}")
        lower, upper = text[1:-1].split(",", 1)
        return cls(
            lower=Version.parse(lower),
            lower_inclusive=text[0] == "[",
            upper=Version.parse(upper),
            upper_inclusive=text[-1] == "]",
        )

    def match(self, version: Version) -> bool:
        if version < self.lower or (version == self.lower and not self.lower_inclusive):
            return False
        if self.upper is None:
            return True
        return version < self.upper or (version == self.upper and self.upper_inclusive)
