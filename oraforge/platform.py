"""
Oracle platform versions and the capabilities that differ between them.

Everything version dependent in the generators and the reconstructor is read
from a PlatformCapabilities instance instead of being spread over subclasses.
"""

import re
from dataclasses import dataclass
from typing import Union

from oraforge.exceptions import InvalidPlatformVersionError

_VERSION_PATTERN = re.compile(r'^(?P<major>\d+)(?:\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?)?')


@dataclass(frozen=True, order=True)
class OracleVersion:
    major: int
    minor: int = 0
    patch: int = 0

    def __str__(self):
        return f"{self.major}.{self.minor}.{self.patch}"


ORACLE_12_1 = OracleVersion(12, 1)
ORACLE_12_2 = OracleVersion(12, 2)


def parse_version(version: Union[str, OracleVersion]) -> OracleVersion:
    """
    Parses '12', '12.2' or '12.2.0.1.0' into an OracleVersion.

    Raises:
        InvalidPlatformVersionError: when the text does not start with a version number
    """
    if isinstance(version, OracleVersion):
        return version
    match = _VERSION_PATTERN.match(str(version).strip())
    if not match:
        raise InvalidPlatformVersionError(str(version))
    return OracleVersion(
        int(match.group('major')),
        int(match.group('minor') or 0),
        int(match.group('patch') or 0),
    )


@dataclass(frozen=True)
class PlatformCapabilities:
    """
    Feature switches for one Oracle release.

    Attributes:
        version: The Oracle release these switches were derived from
        supports_identity_columns: GENERATED ... AS IDENTITY instead of sequence/trigger pairs (12.1+)
        supports_column_collation: Column level COLLATE clauses (12.2+)
        timestamp_tz_fractional_digits: Fractional seconds rendered for TIMESTAMP WITH TIME ZONE
        treat_number_1_0_as_boolean: Reconstruct NUMBER(1,0) columns as boolean instead of decimal
    """
    version: OracleVersion = OracleVersion(11, 2)
    supports_identity_columns: bool = False
    supports_column_collation: bool = False
    timestamp_tz_fractional_digits: int = 0
    treat_number_1_0_as_boolean: bool = False

    @classmethod
    def for_version(cls, version: Union[str, OracleVersion],
                    treat_number_1_0_as_boolean: bool = False) -> "PlatformCapabilities":
        parsed = parse_version(version)
        is_12_1 = parsed >= ORACLE_12_1
        return cls(
            version=parsed,
            supports_identity_columns=is_12_1,
            supports_column_collation=parsed >= ORACLE_12_2,
            timestamp_tz_fractional_digits=6 if is_12_1 else 0,
            treat_number_1_0_as_boolean=treat_number_1_0_as_boolean,
        )


def capabilities_for_version(version: Union[str, OracleVersion, PlatformCapabilities],
                             treat_number_1_0_as_boolean: bool = False) -> PlatformCapabilities:
    """Accepts a version string, an OracleVersion or ready-made capabilities."""
    if isinstance(version, PlatformCapabilities):
        return version
    return PlatformCapabilities.for_version(version, treat_number_1_0_as_boolean)


DEFAULT_CAPABILITIES = PlatformCapabilities.for_version("12.2")
