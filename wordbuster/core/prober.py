"""Probe executor: one Candidate in, one ProbeOutcome out."""

import time
from typing import Dict, Optional

import dns.exception
import dns.resolver
import httpx

from wordbuster.core.models import Candidate, ProbeOutcome

_STOP_HDRS = {"content-length", "transfer-encoding"}

# Lookups that simply mean "this name does not exist"
_NEGATIVE_DNS = (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer)

# Network failures plus whatever building the request from a substituted
# template can raise (a non-ASCII word in a header value, a broken URL)
_SEND_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError)


class Prober:
    """Executes candidates against the network.

    Failures never escape this class: they end up in ProbeOutcome.error.
    Candidates arrive fully substituted, CSRF token included.
    """

    def __init__(self, client: Optional[httpx.Client] = None, resolver=None, logger=None):
        self.client = client
        self.resolver = resolver
        self.logger = logger

    # ---------- HTTP ----------
    @staticmethod
    def _headers(candidate: Candidate) -> Dict[str, str]:
        return {k: v for k, v in candidate.headers if k.lower() not in _STOP_HDRS}

    def send(self, candidate: Candidate, keep_body: bool = False) -> ProbeOutcome:
        url = candidate.request_url

        if self.logger and self.logger.verbose >= 2:
            self.logger.debug(f"→ {candidate.method} {url}")

        started = time.perf_counter()
        try:
            resp = self.client.request(method=candidate.method, url=url,
                                       headers=self._headers(candidate),
                                       content=candidate.body.encode() if candidate.body else None)
        except _SEND_ERRORS as exc:
            return ProbeOutcome.failed(candidate, exc, time.perf_counter() - started)

        extra = ""
        if resp.is_redirect:
            extra = resp.headers.get("location", "")

        return ProbeOutcome(
            candidate=candidate,
            status=resp.status_code,
            reason=resp.reason_phrase,
            elapsed=time.perf_counter() - started,
            body=resp.text if keep_body else None,
            extra=extra,
        )

    # ---------- DNS ----------
    def resolve(self, candidate: Candidate) -> ProbeOutcome:
        """Look up A and AAAA records for the candidate's absolute name."""
        name = candidate.target
        addresses = []
        error = None

        started = time.perf_counter()
        for rtype in ("A", "AAAA"):
            try:
                answer = self.resolver.resolve(name, rtype)
            except _NEGATIVE_DNS:
                continue
            except dns.exception.DNSException as exc:
                error = f"{type(exc).__name__}: {exc}"
                continue
            addresses.extend(str(rdata) for rdata in answer)

        return ProbeOutcome(
            candidate=candidate,
            status=bool(addresses),
            elapsed=time.perf_counter() - started,
            addresses=tuple(addresses),
            error=None if addresses else error,
        )
