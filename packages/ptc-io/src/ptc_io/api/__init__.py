"""PTC API client."""

from ptc_io.api.client import PtcApiClient, build_status_check_command

__all__ = ["PtcApiClient", "build_status_check_command"]
