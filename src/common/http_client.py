"""Shared HTTP helpers used across registry and repository clients.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. ``safe_get`` is for requests the run cannot
proceed without and exits on transport failure; ``robust_get``, ``get_json``
and ``post_json`` are best-effort and report failure as status 0.
"""
from __future__ import annotations

import json
import logging
import sys
import threading
import time
from typing import Any, Optional, Dict, Tuple

import requests

from constants import Constants, ExitCodes
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces."""
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response ok",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        outcome="success",
                        status_code=res.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                        context=context
                    )
                )
            return res
        except requests.Timeout:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            sys.exit(ExitCodes.CONNECTION_ERROR.value)
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            sys.exit(ExitCodes.CONNECTION_ERROR.value)


# Simple in-memory cache for GET responses; shared by the fan-out worker threads
_http_cache: Dict[str, Tuple[Any, float]] = {}
_http_cache_lock = threading.Lock()


def clear_cache() -> None:
    """Drop all cached responses."""
    with _http_cache_lock:
        _http_cache.clear()


def _get_cache_key(method: str, url: str, headers: Optional[Dict[str, str]] = None) -> str:
    """Generate cache key from request parameters."""
    headers_str = str(sorted(headers.items())) if headers else ""
    return f"{method}:{url}:{headers_str}"


def _is_cache_valid(cache_entry: Tuple[Any, float]) -> bool:
    """Check if cache entry is still valid."""
    _, cached_time = cache_entry
    return time.time() - cached_time < Constants.HTTP_CACHE_TTL_SEC


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform a single GET attempt with timeout and caching.

    Returns:
        Tuple of (status_code, headers_dict, text); status_code is 0 when the
        request could not be completed.
    """
    cache_key = _get_cache_key('GET', url, headers)
    safe_target = safe_url(url)

    with _http_cache_lock:
        entry = _http_cache.get(cache_key)
    if entry is not None and _is_cache_valid(entry):
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP cache hit",
                extra=extra_context(
                    event="cache_hit",
                    component="http_client",
                    action="GET",
                    target=safe_target
                )
            )
        return entry[0]

    with Timer() as t:
        try:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request",
                        component="http_client",
                        action="GET",
                        target=safe_target
                    )
                )
            response = requests.get(
                url,
                timeout=Constants.REQUEST_TIMEOUT,
                headers=headers,
                **kwargs
            )
        except requests.Timeout:
            logger.debug(
                "HTTP timeout",
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="timeout",
                    target=safe_target
                )
            )
            return 0, {}, "Request timed out"
        except requests.RequestException as exc:
            logger.debug(
                "HTTP request exception",
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="request_exception",
                    target=safe_target
                )
            )
            return 0, {}, f"Request failed: {exc}"

        result = (response.status_code, dict(response.headers), response.text)
        # Don't cache server errors
        if response.status_code < 500:
            with _http_cache_lock:
                _http_cache[cache_key] = (result, time.time())

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success",
                    status_code=response.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target
                )
            )
        return result


def _parse_json(status_code: int, text: str, url: str, action: str) -> Optional[Any]:
    """Decode a JSON body, returning None when it is not valid JSON."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action=action,
                    outcome="json_decode_error",
                    status_code=status_code,
                    target=safe_url(url)
                )
            )
        return None


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response with DEBUG traces.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)

    if status_code == 200 and text:
        return status_code, response_headers, _parse_json(status_code, text, url, "get_json")

    return status_code, response_headers, None


def post_json(
    url: str,
    *,
    payload: Any,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a single POST with a JSON body and parse the JSON response.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none); status_code
        is 0 when the request could not be completed.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="POST",
                    target=safe_target
                )
            )
        try:
            response = requests.post(
                url,
                data=json.dumps(payload),
                timeout=Constants.REQUEST_TIMEOUT,
                headers=headers,
                **kwargs
            )
        except requests.Timeout:
            logger.warning("POST %s timed out after %s seconds", safe_target, Constants.REQUEST_TIMEOUT)
            return 0, {}, None
        except requests.RequestException as exc:
            logger.warning("POST %s connection error: %s", safe_target, exc)
            return 0, {}, None

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response ok",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="POST",
                    outcome="success",
                    status_code=response.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target
                )
            )

    if response.status_code == 200 and response.text:
        return (
            response.status_code,
            dict(response.headers),
            _parse_json(response.status_code, response.text, url, "post_json"),
        )
    return response.status_code, dict(response.headers), None
