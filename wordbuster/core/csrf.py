"""CSRF token pre-flight for fuzz mode.

The token is fetched once, before the worker pool starts:
  1. GET the configured URL (with optional extra headers)
  2. Apply the configured regex to the body and keep capture group 1
The resulting CsrfToken is read-only for the rest of the run and is
substituted wherever the CSRF marker appears in URL, body or headers.
"""

import re
from typing import Iterable, Tuple

import httpx

from wordbuster.core.errors import CsrfError
from wordbuster.core.models import CsrfToken

CSRF_MARKER = "CSRFCSRF"


def compile_csrf_pattern(pattern: str) -> "re.Pattern":
    """Compile *pattern* and make sure it captures something."""
    try:
        rx = re.compile(pattern)
    except re.error as exc:
        raise CsrfError(f"Invalid CSRF regex {pattern!r}: {exc}") from exc
    if rx.groups < 1:
        raise CsrfError(f"CSRF regex {pattern!r} has no capture group")
    return rx


def fetch_csrf_token(
    client: httpx.Client,
    url: str,
    pattern: str,
    headers: Iterable[Tuple[str, str]] = (),
    logger=None,
) -> CsrfToken:
    """Fetch *url* and extract the CSRF token with *pattern*.

    Args:
        client: httpx.Client to use for the request
        url: URL returning the token
        pattern: regex whose first capture group is the token
        headers: extra headers for the GET request

    Raises:
        CsrfError: on any network failure or when the pattern does not match
    """
    rx = compile_csrf_pattern(pattern)

    try:
        resp = client.get(url, headers=dict(headers))
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise CsrfError(f"CSRF fetch failed: {url}: {exc}") from exc

    if logger:
        logger.debug(f"CSRF GET {url} -> HTTP {resp.status_code}")

    match = rx.search(resp.text or "")
    if match is None or match.group(1) is None:
        raise CsrfError(
            f"CSRF regex {pattern!r} did not match the response of {url} "
            f"(HTTP {resp.status_code})")

    token = CsrfToken(match.group(1))
    if logger:
        logger.info(f"CSRF token captured: {token.raw_value}")
    return token
