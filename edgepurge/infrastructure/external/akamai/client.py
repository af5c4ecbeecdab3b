"""Fast Purge v3 API client (httpx).

Builds and sends purge and credential-check requests and normalizes
every outcome into a PurgeResponse. Transport failures, API errors and
malformed responses are returned, never raised. Only configuration
errors (URL purge without hostname) raise, before any network attempt.
No retries: a failed purge is reported once.
"""

from __future__ import annotations

import json
import logging
import platform
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from edgepurge.application.interfaces.services import IRequestSigner
from edgepurge.core.constants import (
    CREDENTIALS_CHECK_PATH,
    ERR_API,
    ERR_BAD_CLIENT,
    ERR_HTTP,
    ERR_UNEXPECTED_RESPONSE,
    ERR_URL_WITHOUT_HOSTNAME,
)
from edgepurge.domain.entities.content import SiteInfo
from edgepurge.domain.exceptions import ConfigurationException
from edgepurge.domain.value_objects.core import PurgeResponse

logger = logging.getLogger(__name__)


def build_user_agent(site: SiteInfo, product: str, version: str) -> str:
    """'<product>/<version> <platform>/<version> Python/<version>'."""
    return (
        f"{product}/{version} "
        f"{site.platform_name}/{site.platform_version} "
        f"Python/{platform.python_version()}"
    )


def _is_empty(raw: Any) -> bool:
    if raw is None:
        return True
    return isinstance(raw, (Mapping, str, bytes)) and not raw


def _api_detail(body: Any) -> str | None:
    """Return the API-supplied 'detail' message from a decoded error body."""
    if isinstance(body, Mapping) and body.get("detail"):
        return str(body["detail"])
    return None


def _decode_body(raw: Any) -> Any:
    """Decoded JSON body of raw, or None when it is not JSON."""
    if isinstance(raw, httpx.Response):
        try:
            return raw.json()
        except ValueError:
            return None
    body = raw.get("body")
    if isinstance(body, (str, bytes)):
        try:
            return json.loads(body) if body else None
        except ValueError:
            return None
    return body


def _status_and_reason(raw: Any) -> tuple[int, str]:
    """Status code and reason phrase of an httpx response or response mapping."""
    if isinstance(raw, httpx.Response):
        return raw.status_code, raw.reason_phrase
    return int(raw["status_code"]), str(raw.get("reason_phrase", ""))


def normalize_response(
    raw: Any, success: bool = True, error: str | None = None
) -> PurgeResponse:
    """Classify a transport outcome into a PurgeResponse.

    Order: transport error value -> failure with its message; absent/empty
    raw -> the given success/error unchanged; 2xx -> success; other status
    -> API 'detail' message, else '{code} – {reason}'. Any structural
    problem while inspecting raw maps to an internal error.

    Args:
        raw: httpx.Response, a mapping with 'status_code' (and optional
            'reason_phrase', 'body'), an exception, or None.
        success: Outcome to report when raw is absent.
        error: Error to report when raw is absent.
    """
    if isinstance(raw, BaseException):
        return PurgeResponse.failure(str(raw) or raw.__class__.__name__, raw)
    if _is_empty(raw):
        return PurgeResponse(success=success, raw_response=None, error=error)
    try:
        code, reason = _status_and_reason(raw)
        if 200 <= code < 300:
            return PurgeResponse(success=True, raw_response=raw)
        message = _api_detail(_decode_body(raw))
        if message:
            return PurgeResponse.failure(ERR_API.format(message=message), raw)
        return PurgeResponse.failure(ERR_HTTP.format(code=code, reason=reason), raw)
    except (AttributeError, KeyError, TypeError, ValueError):
        logger.warning("Unexpected purge response shape: %r", raw)
        return PurgeResponse.failure(ERR_UNEXPECTED_RESPONSE, raw)


class PurgeClient:
    """Sends signed requests to the Fast Purge v3 API."""

    def __init__(
        self,
        signer: IRequestSigner | None,
        user_agent: str,
        http_client: httpx.Client,
        log_requests: bool = False,
    ) -> None:
        """Initialize.

        Args:
            signer: Request signer for the configured credentials; None or an
                object that is not a signer makes every call fail fast.
            user_agent: User-Agent header value.
            http_client: Transport; timeouts and connection reuse live there.
            log_requests: Default for the per-call log flag.
        """
        self._signer = signer
        self._user_agent = user_agent
        self._http = http_client
        self._log_requests = log_requests

    def has_valid_signer(self) -> bool:
        return isinstance(self._signer, IRequestSigner) and bool(self._signer.host)

    def _base_url(self) -> str:
        host = self._signer.host
        if host.startswith(("http://", "https://")):
            return host.rstrip("/")
        return f"https://{host}"

    def purge(
        self,
        method: str,
        path: str,
        objects: Sequence[str],
        hostname: str = "",
        log: bool | None = None,
    ) -> PurgeResponse:
        """POST a purge of objects to path.

        Objects are de-duplicated (first occurrence wins) before sending.

        Raises:
            ConfigurationException: method is 'url' and hostname is empty.
        """
        if not self.has_valid_signer():
            return normalize_response(None, success=False, error=ERR_BAD_CLIENT)

        body: dict[str, Any] = {"objects": list(dict.fromkeys(objects))}
        if method == "url":
            if not hostname:
                raise ConfigurationException(ERR_URL_WITHOUT_HOSTNAME, setting="hostname")
            body["hostname"] = hostname
        payload = json.dumps(body, separators=(",", ":")).encode()
        return self._send("POST", path, payload, log, "purge")

    def test_creds(self, log: bool | None = None) -> PurgeResponse:
        """GET the grants introspection path to check the credentials."""
        if not self.has_valid_signer():
            return normalize_response(None, success=False, error=ERR_BAD_CLIENT)
        return self._send("GET", CREDENTIALS_CHECK_PATH, b"", log, "creds_verify")

    def _send(
        self,
        method: str,
        path: str,
        payload: bytes,
        log: bool | None,
        label: str,
    ) -> PurgeResponse:
        log = self._log_requests if log is None else log
        url = f"{self._base_url()}{path}"
        headers = {"User-Agent": self._user_agent}
        if payload:
            headers["Content-Type"] = "application/json"
        try:
            headers["Authorization"] = self._signer.sign(method, url, headers, payload)
        except Exception as exc:
            logger.warning("Signing %s %s failed: %s", method, path, exc)
            return normalize_response(None, success=False, error=ERR_BAD_CLIENT)

        if log:
            logger.info(
                "%s_request %s %s headers=%s body=%s",
                label,
                method,
                url,
                {k: ("<redacted>" if k == "Authorization" else v) for k, v in headers.items()},
                payload.decode() or "-",
            )
        try:
            raw: Any = self._http.request(method, url, headers=headers, content=payload or None)
        except httpx.HTTPError as exc:
            raw = exc
        response = normalize_response(raw)
        if log:
            logger.info(
                "%s_response success=%s status=%s error=%s body=%s",
                label,
                response.success,
                response.status_code,
                response.error,
                raw.text if isinstance(raw, httpx.Response) else "-",
            )
        return response
