from __future__ import annotations

import http.client
import json
import ssl
import time
import urllib.error
import urllib.request
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple

import certifi
from pydantic import ValidationError as ModelValidationError

from ytreporting.config import DEFAULT_BASE_URL, ServiceConfig
from ytreporting.request import Request

EventLogger = Callable[[Dict[str, Any]], None]


class TransportError(Exception):
    def __init__(
        self,
        *,
        status_code: Optional[int],
        code: str,
        message: str,
        request_id: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.request_id = request_id
        self.details = details


class Transport(Protocol):
    def execute(self, request: Request) -> Any:
        ...


def emit_event(logger: Optional[EventLogger], event: Dict[str, Any]) -> None:
    if not logger:
        return
    try:
        logger(event)
    except Exception:
        pass


def decode_response(request: Request, raw: bytes) -> Any:
    if request.response_type is bytes:
        return raw
    try:
        text = raw.decode("utf-8") if raw else ""
        parsed = json.loads(text) if text.strip() else {}
        if request.response_type is dict:
            return parsed
        return request.response_type.model_validate(parsed)
    except (UnicodeDecodeError, json.JSONDecodeError, ModelValidationError) as exc:
        raise TransportError(
            status_code=None,
            code="DECODE_ERROR",
            message=f"{request.operation_id}: response body could not be decoded: {exc}",
        ) from exc


def _header(headers: Any, name: str) -> Optional[str]:
    if not headers:
        return None
    value = headers.get(name)
    return str(value) if value else None


class HttpTransport:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        access_token: Optional[str] = None,
        *,
        timeout: float = 30,
        max_retries: int = 3,
        backoff_base_seconds: float = 0.25,
        user_agent: str = "ytreporting-client/0.1",
        logger: Optional[EventLogger] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.access_token = access_token
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base_seconds = backoff_base_seconds
        self.user_agent = user_agent
        self.logger = logger

    @classmethod
    def from_config(cls, config: ServiceConfig, *, logger: Optional[EventLogger] = None) -> HttpTransport:
        return cls(
            config.base_url,
            config.access_token,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
            backoff_base_seconds=config.backoff_base_seconds,
            logger=logger,
        )

    @staticmethod
    def _ssl_context() -> ssl.SSLContext:
        return ssl.create_default_context(cafile=certifi.where())

    def _should_retry_status(self, status_code: int) -> bool:
        return status_code == 429 or 500 <= status_code < 600

    def _sleep_backoff(self, attempt: int) -> None:
        time.sleep(self.backoff_base_seconds * (2 ** attempt))

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        payload: Optional[bytes],
    ) -> Tuple[int, Mapping[str, str], bytes]:
        req = urllib.request.Request(url=url, data=payload, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context()) as resp:
                return int(getattr(resp, "status", 200) or 200), resp.headers, resp.read()
        except urllib.error.HTTPError as exc:
            try:
                raw = exc.read()
            except Exception:
                raw = b""
            return exc.code, exc.headers, raw or b""

    def _error_from_response(self, status_code: int, raw: bytes, request_id: Optional[str]) -> TransportError:
        code = "HTTP_ERROR"
        message = f"HTTP {status_code}"
        details: Optional[Any] = None
        text = raw.decode("utf-8", errors="replace") if raw else ""
        if text:
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                parsed = None
            err = parsed.get("error") if isinstance(parsed, dict) else None
            if isinstance(err, dict):
                code = str(err.get("status") or code)
                message = str(err.get("message") or message)
                details = err.get("details") or err.get("errors")
            else:
                message = text[:500]
        return TransportError(status_code=status_code, code=code, message=message, request_id=request_id, details=details)

    def execute(self, request: Request) -> Any:
        url = request.url(self.base_url)
        payload = json.dumps(request.body_data()).encode("utf-8") if request.body is not None else None
        headers = self._headers(payload is not None)
        base_event = {
            "method": request.http_method,
            "operation_id": request.operation_id,
            "path": request.path,
            "query_keys": sorted(key for key, _ in request.query),
            "has_body": payload is not None,
        }
        last_request_id: Optional[str] = None
        attempts = max(self.max_retries, 0) + 1
        for attempt in range(attempts):
            attempt_start = time.perf_counter()
            try:
                status_code, response_headers, raw = self._send(request.http_method, url, headers, payload)
            except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
                reason = getattr(exc, "reason", None)
                err = TransportError(
                    status_code=None,
                    code="NETWORK_ERROR",
                    message=str(reason) if reason is not None else str(exc),
                    request_id=last_request_id,
                )
                emit_event(self.logger, {
                    **base_event,
                    "event": "network_error",
                    "status_code": None,
                    "duration_ms": round((time.perf_counter() - attempt_start) * 1000, 2),
                    "attempt": attempt + 1,
                    "error_code": err.code,
                })
                if attempt + 1 < attempts:
                    self._sleep_backoff(attempt)
                    continue
                raise err from exc

            request_id = _header(response_headers, "X-Request-Id")
            last_request_id = request_id or last_request_id
            duration_ms = round((time.perf_counter() - attempt_start) * 1000, 2)
            if status_code >= 400:
                err = self._error_from_response(status_code, raw, last_request_id)
                emit_event(self.logger, {
                    **base_event,
                    "event": "http_error",
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                    "attempt": attempt + 1,
                    "request_id": request_id,
                    "error_code": err.code,
                })
                if attempt + 1 < attempts and self._should_retry_status(status_code):
                    self._sleep_backoff(attempt)
                    continue
                raise err

            emit_event(self.logger, {
                **base_event,
                "event": "http_request",
                "status_code": status_code,
                "duration_ms": duration_ms,
                "attempt": attempt + 1,
                "request_id": request_id,
            })
            return decode_response(request, raw)
        raise TransportError(
            status_code=None,
            code="REQUEST_FAILED",
            message=f"{request.operation_id}: request failed without a response",
            request_id=last_request_id,
        )
