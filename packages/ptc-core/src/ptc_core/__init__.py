"""ptc-core: Discovery and orchestration logic for ptc."""

from ptc_core.orchestrator import TranslationOrchestrator
from ptc_core.paths import (
    derive_output_pattern,
    detect_git_branch,
    discover_base_directory,
    relative_path,
)
from ptc_core.ports import (
    ConfigValidationError,
    DiscoveryError,
    MissingTokenError,
    NoFilesFoundError,
    NoProcessingSucceededError,
    NoUploadsSucceededError,
    OrchestrationError,
    ProgressSinkProtocol,
    TransferClientProtocol,
    TransferError,
    TransferErrorCode,
)
from ptc_core.resolver import build_jobs
from ptc_core.version import VERSION

__all__ = [
    "VERSION",
    "ConfigValidationError",
    "DiscoveryError",
    "MissingTokenError",
    "NoFilesFoundError",
    "NoProcessingSucceededError",
    "NoUploadsSucceededError",
    "OrchestrationError",
    "ProgressSinkProtocol",
    "TransferClientProtocol",
    "TransferError",
    "TransferErrorCode",
    "TranslationOrchestrator",
    "build_jobs",
    "derive_output_pattern",
    "detect_git_branch",
    "discover_base_directory",
    "relative_path",
]
