"""Shared HTTP helpers used by the registry clients.

Encapsulates request/timeout handling so the registry modules avoid
duplicating try/except blocks. Transport failures are reported as status
``0`` rather than raised, so each caller decides whether a failure is
fatal, recoverable or silent.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from ..constants import Constants
from .logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

# Status reported when no HTTP response was received at all.
TRANSPORT_FAILURE = 0


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> Tuple[int, Dict[str, str], str]:
    """Perform GET request with timeout and bounded retries, with DEBUG traces.

    Args:
        url: Target URL
        headers: Optional request headers
        params: Optional query parameters
        timeout: Per-attempt timeout in seconds, defaults to Constants.REQUEST_TIMEOUT

    Returns:
        Tuple of (status_code, headers_dict, text). On transport failure the
        status is TRANSPORT_FAILURE and the text describes the last error.
    """
    safe_target = safe_url(url)
    effective_timeout = timeout if timeout is not None else Constants.REQUEST_TIMEOUT
    attempts = max(1, int(Constants.HTTP_RETRY_MAX))
    last_exception = None

    for attempt in range(attempts):
        with Timer() as t:
            try:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1
                        )
                    )

                response = requests.get(
                    url,
                    timeout=effective_timeout,
                    headers=headers,
                    params=params,
                )

                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP response",
                        extra=extra_context(
                            event="http_response",
                            component="http_client",
                            action="GET",
                            status_code=response.status_code,
                            duration_ms=t.duration_ms(),
                            target=safe_target
                        )
                    )
                return response.status_code, dict(response.headers), response.text

            except requests.Timeout:
                last_exception = f"timed out after {effective_timeout} seconds"
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP timeout",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="timeout",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                continue
            except requests.RequestException as exc:  # includes ConnectionError
                last_exception = str(exc)
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request exception",
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="GET",
                            outcome="request_exception",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                continue

    return TRANSPORT_FAILURE, {}, f"Request failed after {attempts} attempts: {last_exception}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Tuple[int, Dict[str, str], Optional[Any], str]:
    """Perform GET request and parse a JSON body.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none, raw_text).
        The raw text is kept so callers can fall back to pattern matching
        when the body is not valid JSON.
    """
    status_code, response_headers, text = robust_get(url, headers=headers, params=params)

    if 200 <= status_code < 300 and text:
        try:
            return status_code, response_headers, json.loads(text), text
        except json.JSONDecodeError:
            if is_debug_enabled(logger):
                logger.debug(
                    "JSON decode error",
                    extra=extra_context(
                        event="parse",
                        component="http_client",
                        action="get_json",
                        outcome="json_decode_error",
                        status_code=status_code,
                        target=safe_url(url)
                    )
                )

    return status_code, response_headers, None, text
