"""Virtual hosts enumeration.

Every request goes to the original URL with a different Host header.
Responses containing any of the ignore strings are considered the
default site and are dropped.
"""

from dataclasses import replace
from typing import Dict, Hashable, Iterator, List

from wordbuster.core.models import Candidate, Mode, ProbeOutcome
from wordbuster.core.wordlist import expand_vhosts
from wordbuster.modes.base import BaseMode, status_tabs


class VhostMode(BaseMode):

    name = "vhost"

    def __init__(self, config, wordlist):
        super().__init__(config)
        self.wordlist = wordlist
        self.ignore_strings = sorted(config.filters.exclude_strings)

    def candidates(self) -> Iterator[Candidate]:
        cfg = self.config
        base_headers = tuple((k, v) for k, v in cfg.http_headers if k.lower() != "host")
        for vhost in expand_vhosts(self.wordlist, cfg.domain):
            yield Candidate(Mode.VHOST, target=vhost, url=cfg.url,
                            method=cfg.http_method, body=cfg.http_body,
                            headers=base_headers + (("Host", vhost),))

    def probe(self, prober, candidate: Candidate) -> ProbeOutcome:
        outcome = prober.send(candidate, keep_body=True)
        if outcome.error:
            return outcome
        body = outcome.body or ""
        ignored = any(s in body for s in self.ignore_strings)
        return replace(outcome, ignored=ignored, body=None)

    def accept(self, outcome: ProbeOutcome) -> bool:
        return not outcome.ignored

    def identity(self, outcome: ProbeOutcome) -> Hashable:
        return outcome.candidate.target

    def describe(self, outcome: ProbeOutcome) -> List[str]:
        status = outcome.status_text
        return [f"{outcome.candidate.method}\t{status}{status_tabs(status)}{outcome.candidate.target}"]

    def to_record(self, outcome: ProbeOutcome) -> Dict:
        return {
            "method": outcome.candidate.method,
            "vhost": outcome.candidate.target,
            "status": outcome.status,
        }
