"""Custom fuzzing over URL, body and headers.

Wordlist N is bound to the marker FUZZ (N = 1) or FUZZ<N>; the candidate
space is the cartesian product of all wordlists. The optional CSRF
pre-flight captures a token replayed wherever CSRFCSRF appears; it is bound
in the same substitution pass as the words.
"""

import math
from typing import Dict, Hashable, Iterator, List, Optional, Sequence

import httpx

from wordbuster.core.csrf import fetch_csrf_token
from wordbuster.core.models import Candidate, CsrfToken, Mode, ProbeOutcome
from wordbuster.core.wordlist import expand_product, has_placeholder, substitute
from wordbuster.modes.base import BaseMode, status_tabs


class FuzzMode(BaseMode):

    name = "fuzz"

    def __init__(self, config, wordlists: Sequence):
        super().__init__(config)
        self.wordlists = list(wordlists)
        self.csrf: Optional[CsrfToken] = None

    def has_placeholder(self) -> bool:
        cfg = self.config
        templates = [cfg.url, cfg.http_body]
        for k, v in cfg.http_headers:
            templates.extend((k, v))
        return any(has_placeholder(t) for t in templates)

    def candidates(self) -> Iterator[Candidate]:
        cfg = self.config
        token = self.csrf.raw_value if self.csrf is not None else None
        for words in expand_product(self.wordlists):
            headers = tuple((substitute(k, words, token), substitute(v, words, token))
                            for k, v in cfg.http_headers)
            yield Candidate(Mode.FUZZ, target=substitute(cfg.url, words, token),
                            method=cfg.http_method,
                            body=substitute(cfg.http_body, words, token),
                            headers=headers, payload=words)

    def count(self) -> int:
        return math.prod(len(wl) for wl in self.wordlists)

    def prepare(self, client: httpx.Client, logger=None) -> Optional[CsrfToken]:
        cfg = self.config
        if not cfg.csrf_url:
            return None
        self.csrf = fetch_csrf_token(client, cfg.csrf_url, cfg.csrf_regex,
                                     cfg.csrf_headers, logger=logger)
        return self.csrf

    def probe(self, prober, candidate: Candidate) -> ProbeOutcome:
        return prober.send(candidate, keep_body=self.config.filters.wants_body)

    def accept(self, outcome: ProbeOutcome) -> bool:
        return self.config.filters.accepts(outcome.status, outcome.body)

    def identity(self, outcome: ProbeOutcome) -> Hashable:
        c = outcome.candidate
        return (c.method, outcome.status, c.target, c.body)

    def describe(self, outcome: ProbeOutcome) -> List[str]:
        c = outcome.candidate
        status = outcome.status_text
        line = f"{c.method}\t{status}{status_tabs(status)}{c.target}"
        line += f"\n\t\t\t\t\t\t=> PAYLOAD: {', '.join(c.payload)}"
        if c.body:
            line += f"\n\t\t\t\t\t\t=> BODY: {c.body}"
        return [line]

    def to_record(self, outcome: ProbeOutcome) -> Dict:
        c = outcome.candidate
        return {
            "method": c.method,
            "url": c.target,
            "body": c.body,
            "status": outcome.status,
            "payload": list(c.payload),
        }
