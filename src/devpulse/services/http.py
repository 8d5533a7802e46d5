"""
Shared HTTP session for the dashboard API.

``create_session`` returns a ``requests.Session`` whose adapter retries
transient failures (429, 502/503/504, connection resets) with a short
exponential backoff and applies a default timeout to every request. Retries
are kept few because a failed fetch already has a fallback path.

Usage::

    from devpulse.services.http import session

    resp = session.get("http://localhost:5000/api/cities")
"""

from __future__ import annotations

from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from devpulse import __version__
from devpulse.config import REQUEST_TIMEOUT_SECONDS

#: Two quick retries (0s, 1s) for GET-like requests only.
DEFAULT_RETRY = Retry(
    total=2,
    backoff_factor=0.5,
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD", "OPTIONS"],
    raise_on_status=False,  # envelope parsing decides what a failure is
)

DEFAULT_TIMEOUT = REQUEST_TIMEOUT_SECONDS

DEFAULT_HEADERS = {
    "User-Agent": f"devpulse/{__version__}",
    "Accept": "application/json",
}


class TimeoutHTTPAdapter(HTTPAdapter):
    """``HTTPAdapter`` that fills in ``timeout`` when the caller leaves it out."""

    def __init__(self, *args: Any, timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> None:
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(  # type: ignore[override]
        self, request: requests.PreparedRequest, **kwargs: Any
    ) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a session for JSON APIs.

    Args:
        retry: Retry strategy for the mounted adapter (``DEFAULT_RETRY`` if None).
        timeout: Seconds applied to requests that do not pass ``timeout=``.
    """
    s = requests.Session()
    adapter = TimeoutHTTPAdapter(max_retries=retry or DEFAULT_RETRY, timeout=timeout)
    for prefix in ("https://", "http://"):
        s.mount(prefix, adapter)
    s.headers.update(DEFAULT_HEADERS)
    return s


#: Process-wide session, used by clients that are not given their own.
session: requests.Session = create_session()
