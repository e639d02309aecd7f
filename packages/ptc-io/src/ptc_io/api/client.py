"""HTTP client for the PTC translation API."""

from __future__ import annotations

import json
from pathlib import Path
from types import TracebackType
from urllib.parse import urlencode

import httpx
from ptc_core.ports.orchestrator import MissingTokenError
from ptc_core.ports.transfer import (
    TransferClientProtocol,
    TransferError,
    TransferErrorCode,
    build_transfer_error,
)
from ptc_core.util.logging import get_logger
from ptc_io.archive import ScratchSpace, unpack_translations
from ptc_schemas.api import StatusCheck, TranslationStatusPayload
from ptc_schemas.job import Job
from ptc_schemas.primitives import (
    DEFAULT_API_URL,
    RESPONSE_SNIPPET_LIMIT,
    RemoteStatus,
    RunPhase,
    StatusOutcome,
)

logger = get_logger(__name__)

DEFAULT_TIMEOUT_S = 30.0

SOURCE_FILES_ENDPOINT = "source_files"
PROCESS_ENDPOINT = "source_files/process"
STATUS_ENDPOINT = "source_files/translation_status"
DOWNLOAD_ENDPOINT = "source_files/download_translations"


class PtcApiClient(TransferClientProtocol):
    """Stateless request operations against the PTC API.

    Every call goes through one ``httpx.AsyncClient``. An injected client is
    never closed by this class.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        token: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        scratch: ScratchSpace | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: API base URL, a trailing slash is added when missing.
            token: Bearer token, or None to send unauthenticated requests.
            http_client: Optional pre-configured HTTP client for dependency
                injection. If None, the client creates and owns one.
            timeout: Per-request timeout in seconds for an owned client.
            scratch: Scratch space for downloaded archives.
        """
        self.api_url = api_url if api_url.endswith("/") else f"{api_url}/"
        self._token = token or None
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._scratch = scratch

    async def __aenter__(self) -> PtcApiClient:
        """Enter the async context."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """Close the owned HTTP client on exit."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._http_client.aclose()

    def status_check_command(self, job: Job) -> str:
        """Return a curl command that checks *job*'s status manually."""
        return build_status_check_command(self.api_url, job)

    async def upload(self, job: Job) -> None:
        """Upload the job's source file.

        Raises:
            TransferError: With ``upload_failed`` unless the service answers 201.
        """
        if self._token is None:
            logger.warning(
                "No API token configured, uploading %s without authentication",
                job.relative_path,
            )
        data = {
            "file_path": job.relative_path,
            "output_file_path": job.output_pattern,
            "file_tag_name": job.tag,
        }
        if job.additional_translation_files:
            data["additional_translation_files"] = json.dumps(
                job.additional_translation_files
            )
        logger.debug(
            "Uploading %s with output %s", job.relative_path, job.output_pattern
        )
        response = await self._send(
            "POST",
            SOURCE_FILES_ENDPOINT,
            job,
            TransferErrorCode.UPLOAD_FAILED,
            data=data,
            files=self._source_file(job, TransferErrorCode.UPLOAD_FAILED),
        )
        if response.status_code != httpx.codes.CREATED:
            raise build_transfer_error(
                TransferErrorCode.UPLOAD_FAILED,
                f"Upload failed: {job.relative_path}",
                job,
                http_status=response.status_code,
                body=response.text,
            )

    async def start_processing(self, job: Job) -> None:
        """Ask the service to start translating an uploaded file.

        Raises:
            MissingTokenError: If no API token is configured.
            TransferError: With ``processing_failed`` unless the service
                answers 200.
        """
        self._require_token("file processing", RunPhase.PROCESS)
        response = await self._send(
            "PUT",
            PROCESS_ENDPOINT,
            job,
            TransferErrorCode.PROCESSING_FAILED,
            data={"file_path": job.relative_path, "file_tag_name": job.tag},
            files=self._source_file(job, TransferErrorCode.PROCESSING_FAILED),
        )
        if response.status_code != httpx.codes.OK:
            raise build_transfer_error(
                TransferErrorCode.PROCESSING_FAILED,
                f"Failed to start processing: {job.relative_path}",
                job,
                http_status=response.status_code,
                body=response.text,
            )

    async def get_status(self, job: Job) -> StatusCheck:
        """Poll the translation status of *job* once.

        Returns:
            StatusCheck: READY, PENDING, NOT_FOUND or FAILED outcome.

        Raises:
            MissingTokenError: If no API token is configured.
        """
        self._require_token("status checks", RunPhase.MONITOR)
        try:
            response = await self._send(
                "GET",
                STATUS_ENDPOINT,
                job,
                TransferErrorCode.STATUS_CHECK_FAILED,
                params=_params(job),
            )
        except TransferError as exc:
            return StatusCheck(
                outcome=StatusOutcome.FAILED, error=exc.info.to_error_response()
            )

        if response.status_code == httpx.codes.NOT_FOUND:
            error = build_transfer_error(
                TransferErrorCode.NOT_FOUND,
                f"File not found on the server: {job.relative_path}",
                job,
                http_status=response.status_code,
                body=response.text,
            )
            return StatusCheck(
                outcome=StatusOutcome.NOT_FOUND,
                http_status=response.status_code,
                error=error.info.to_error_response(),
            )
        if response.status_code != httpx.codes.OK:
            return _failed_check(job, response, "Status check failed")

        try:
            body = response.json()
        except ValueError:
            logger.debug(
                "Status response for %s is not JSON: %s",
                job.relative_path,
                response.text[:RESPONSE_SNIPPET_LIMIT],
            )
            body = None
        payload = TranslationStatusPayload.from_body(body)
        outcome = (
            StatusOutcome.READY
            if payload.remote_status == RemoteStatus.COMPLETED
            else StatusOutcome.PENDING
        )
        return StatusCheck(
            outcome=outcome,
            status=payload.display_status,
            completeness=payload.completeness,
            http_status=response.status_code,
        )

    async def download(self, job: Job, base_dir: Path) -> list[Path]:
        """Download and unpack completed translations for *job*.

        Returns:
            list[Path]: Translation files placed in the project.

        Raises:
            MissingTokenError: If no API token is configured.
            TransferError: If download, extraction or relocation fails.
        """
        self._require_token("translation download", RunPhase.MONITOR)
        response = await self._send(
            "GET",
            DOWNLOAD_ENDPOINT,
            job,
            TransferErrorCode.DOWNLOAD_FAILED,
            params=_params(job),
        )
        if response.status_code != httpx.codes.OK:
            raise build_transfer_error(
                TransferErrorCode.DOWNLOAD_FAILED,
                f"Failed to download translations: {job.relative_path}",
                job,
                http_status=response.status_code,
                body=response.text,
            )
        logger.info("Translations downloaded: %s", job.relative_path)
        return unpack_translations(response.content, job, base_dir, self._scratch)

    async def _send(
        self,
        method: str,
        endpoint: str,
        job: Job,
        error_code: TransferErrorCode,
        **kwargs: object,
    ) -> httpx.Response:
        url = f"{self.api_url}{endpoint}"
        logger.debug("%s %s", method, url)
        try:
            return await self._http_client.request(
                method, url, headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as exc:
            raise build_transfer_error(
                error_code, f"Request to {url} failed: {exc}", job
            ) from exc

    def _headers(self) -> dict[str, str]:
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def _require_token(self, operation: str, phase: RunPhase) -> None:
        if self._token is None:
            raise MissingTokenError(operation, phase)

    @staticmethod
    def _source_file(
        job: Job, error_code: TransferErrorCode
    ) -> dict[str, tuple[str, bytes]]:
        try:
            content = job.source_path.read_bytes()
        except OSError as exc:
            raise build_transfer_error(
                error_code, f"Cannot read source file {job.source_path}: {exc}", job
            ) from exc
        return {"file": (job.source_path.name, content)}


def build_status_check_command(api_url: str, job: Job) -> str:
    """Return a curl command that checks the status of *job* by hand.

    The token is written as the ``$TOKEN`` shell variable.
    """
    base = api_url if api_url.endswith("/") else f"{api_url}/"
    url = f"{base}{STATUS_ENDPOINT}?{_query(job)}"
    return f'curl -H "Authorization: Bearer $TOKEN" "{url}"'


def _params(job: Job) -> dict[str, str]:
    return {"file_path": job.relative_path, "file_tag_name": job.tag}


def _query(job: Job) -> str:
    return urlencode(_params(job), safe="/")


def _failed_check(job: Job, response: httpx.Response, message: str) -> StatusCheck:
    error = build_transfer_error(
        TransferErrorCode.STATUS_CHECK_FAILED,
        f"{message}: {job.relative_path}",
        job,
        http_status=response.status_code,
        body=response.text,
    )
    return StatusCheck(
        outcome=StatusOutcome.FAILED,
        http_status=response.status_code,
        error=error.info.to_error_response(),
    )
