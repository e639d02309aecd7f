"""Ports: protocols and structured errors shared by ptc-core and adapters."""

from ptc_core.ports.discovery import (
    ConfigValidationError,
    DiscoveryError,
    DiscoveryErrorCode,
    DiscoveryErrorDetails,
    DiscoveryErrorInfo,
    NoFilesFoundError,
)
from ptc_core.ports.orchestrator import (
    MissingTokenError,
    NoopProgressSink,
    NoProcessingSucceededError,
    NoUploadsSucceededError,
    OrchestrationError,
    OrchestrationErrorCode,
    OrchestrationErrorDetails,
    OrchestrationErrorInfo,
    ProgressSinkProtocol,
)
from ptc_core.ports.transfer import (
    TransferClientProtocol,
    TransferError,
    TransferErrorCode,
    TransferErrorDetails,
    TransferErrorInfo,
    build_transfer_error,
)

__all__ = [
    "ConfigValidationError",
    "DiscoveryError",
    "DiscoveryErrorCode",
    "DiscoveryErrorDetails",
    "DiscoveryErrorInfo",
    "MissingTokenError",
    "NoProcessingSucceededError",
    "NoUploadsSucceededError",
    "NoopProgressSink",
    "OrchestrationError",
    "OrchestrationErrorCode",
    "OrchestrationErrorDetails",
    "OrchestrationErrorInfo",
    "ProgressSinkProtocol",
    "TransferClientProtocol",
    "TransferError",
    "TransferErrorCode",
    "TransferErrorDetails",
    "TransferErrorInfo",
    "build_transfer_error",
]
