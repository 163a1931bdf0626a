"""Request logging with access-token redaction."""

import hashlib
import logging
import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, List, Any, Pattern
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse

LOGGER_NAME = "readwise"


class MaskStyle(str, Enum):
    """Masking styles for sensitive data."""
    FULL = "full"
    PARTIAL = "partial"
    HASH = "hash"


@dataclass
class LogConfig:
    """Configuration for logging behavior."""

    log_request_headers: bool = True
    log_response_headers: bool = False
    log_request_body: bool = False
    log_response_body: bool = False
    log_timing: bool = True
    redact_headers: List[str] = field(
        default_factory=lambda: [
            "authorization",
            "cookie",
            "set-cookie",
            "x-csrf-token",
        ]
    )
    redact_patterns: List[str] = field(
        default_factory=lambda: [
            r"\bToken\s+([^\s\"']+)",
            r"\bBearer\s+([^\s\"']+)",
            r"access_token[\"\']?\s*[:=]\s*[\"\']?([^\s\"\'&,}]+)",
            r"password[\"\']?\s*[:=]\s*[\"\']?([^\s\"\'&,}]+)",
        ]
    )
    redact_query_params: List[str] = field(
        default_factory=lambda: [
            "token",
            "access_token",
            "password",
        ]
    )
    mask_style: MaskStyle = MaskStyle.PARTIAL
    partial_mask_chars: int = 4


class RequestLogger:
    """Logs Readwise requests and responses without leaking the access token."""

    REDACTION_PLACEHOLDER = "***REDACTED***"

    def __init__(self, config: Optional[LogConfig] = None) -> None:
        self.config = config or LogConfig()
        self.logger = logging.getLogger(LOGGER_NAME)
        self._compiled_patterns: List[Pattern] = [
            re.compile(pattern, re.IGNORECASE)
            for pattern in self.config.redact_patterns
        ]

    def mask_value(self, value: str) -> str:
        """Mask a sensitive value according to the configured style."""
        if self.config.mask_style == MaskStyle.FULL:
            return self.REDACTION_PLACEHOLDER

        if self.config.mask_style == MaskStyle.PARTIAL:
            chars = self.config.partial_mask_chars
            if len(value) <= chars * 2:
                return "****"
            return f"{value[:chars]}...{value[-chars:]}"

        if self.config.mask_style == MaskStyle.HASH:
            return f"[HASH:{hashlib.sha256(value.encode()).hexdigest()[:8]}]"

        return self.REDACTION_PLACEHOLDER

    def _mask_credentials(self, value: str) -> str:
        # "Token abc" keeps its scheme so the log still shows how we signed
        scheme, sep, credential = value.partition(" ")
        if sep and credential:
            return f"{scheme} {self.mask_value(credential)}"
        return self.mask_value(value)

    def redact_headers(self, headers: Dict[str, str]) -> Dict[str, str]:
        """Return a copy of ``headers`` with credentials masked."""
        redacted = {}
        redact_set = {h.lower() for h in self.config.redact_headers}

        for key, value in headers.items():
            if key.lower() in redact_set:
                redacted[key] = self._mask_credentials(value)
            else:
                redacted[key] = self.redact_text(value)

        return redacted

    def redact_text(self, value: str) -> str:
        """Mask every credential-looking substring of ``value``."""
        result = value

        for pattern in self._compiled_patterns:
            def replacer(match):
                full_match = match.group(0)
                sensitive_part = match.group(1) if match.lastindex else full_match
                return full_match.replace(sensitive_part, self.mask_value(sensitive_part))

            result = pattern.sub(replacer, result)

        return result

    def redact_url(self, url: str) -> str:
        """Mask sensitive query parameters in ``url``."""
        parsed = urlparse(url)
        if not parsed.query:
            return url

        params = parse_qs(parsed.query, keep_blank_values=True)
        redact_set = {p.lower() for p in self.config.redact_query_params}

        redacted_params = {}
        for key, values in params.items():
            if key.lower() in redact_set:
                redacted_params[key] = [self.mask_value(v) for v in values]
            else:
                redacted_params[key] = values

        new_query = urlencode(redacted_params, doseq=True)
        return urlunparse(parsed._replace(query=new_query))

    def log_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> str:
        """Log an outgoing request and return its correlation id."""
        request_id = request_id or str(uuid.uuid4())[:8]
        redacted_url = self.redact_url(url)

        self.logger.info(
            "Request started: %s %s",
            method,
            redacted_url,
            extra={"request_id": request_id, "method": method, "url": redacted_url},
        )

        if self.config.log_request_headers and headers:
            self.logger.debug(
                "Request headers: %s",
                self.redact_headers(headers),
                extra={"request_id": request_id},
            )

        if self.config.log_request_body and body:
            self.logger.debug(
                "Request body: %s",
                self.redact_text(body),
                extra={"request_id": request_id},
            )

        return request_id

    def log_response(
        self,
        status_code: int,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
        duration: Optional[float] = None,
        request_id: Optional[str] = None,
    ) -> None:
        """Log a response. Statuses of 400 and above are logged as warnings."""
        extra: Dict[str, Any] = {
            "request_id": request_id,
            "status_code": status_code,
        }

        message = f"Response: {status_code}"
        if self.config.log_timing and duration is not None:
            extra["duration_seconds"] = duration
            message += f" ({duration:.3f}s)"

        log_level = logging.INFO if status_code < 400 else logging.WARNING
        self.logger.log(log_level, message, extra=extra)

        if self.config.log_response_headers and headers:
            self.logger.debug(
                "Response headers: %s",
                self.redact_headers(headers),
                extra={"request_id": request_id},
            )

        if self.config.log_response_body and body:
            self.logger.debug(
                "Response body: %s",
                self.redact_text(body[:500]),
                extra={"request_id": request_id},
            )

    def log_error(
        self,
        error: Exception,
        request_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a failed request."""
        extra: Dict[str, Any] = {
            "request_id": request_id,
            "error_type": type(error).__name__,
        }
        if context:
            extra.update(context)

        self.logger.error(
            "Request error: %s",
            self.redact_text(str(error)),
            extra=extra,
        )


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
) -> None:
    """Set up basic logging for scripts using the client.

    Args:
        level: Log level name.
        format_string: Custom format string.
    """
    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
    )
