"""ptc-io: HTTP client, archive handling and config loading for ptc."""

from ptc_io.api import PtcApiClient
from ptc_io.archive import ScratchSpace, get_scratch_space, unpack_translations
from ptc_io.config_loader import load_config_file

__all__ = [
    "PtcApiClient",
    "ScratchSpace",
    "get_scratch_space",
    "load_config_file",
    "unpack_translations",
]
