"""Application version."""

from ptc_schemas.version import VersionInfo

VERSION = VersionInfo(major=1, minor=0, patch=0)
