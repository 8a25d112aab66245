"""A/AAAA subdomain enumeration."""

import ipaddress
from typing import Dict, Hashable, Iterator, List

from wordbuster.core.models import Candidate, Mode, ProbeOutcome
from wordbuster.core.wordlist import expand_domains
from wordbuster.modes.base import BaseMode


class DnsMode(BaseMode):

    name = "dns"

    def __init__(self, config, wordlist):
        super().__init__(config)
        self.wordlist = wordlist

    def candidates(self) -> Iterator[Candidate]:
        for domain in expand_domains(self.wordlist, self.config.url):
            yield Candidate(Mode.DNS, target=domain)

    def probe(self, prober, candidate: Candidate) -> ProbeOutcome:
        return prober.resolve(candidate)

    def accept(self, outcome: ProbeOutcome) -> bool:
        return outcome.status is True

    def identity(self, outcome: ProbeOutcome) -> Hashable:
        return outcome.candidate.target

    def describe(self, outcome: ProbeOutcome) -> List[str]:
        lines = [f"OK\t{outcome.candidate.target.rstrip('.')}"]
        for addr in outcome.addresses:
            family = "IPv4" if ipaddress.ip_address(addr).version == 4 else "IPv6"
            lines.append(f"\t\t{family}: {addr}")
        return lines

    def to_record(self, outcome: ProbeOutcome) -> Dict:
        return {
            "domain": outcome.candidate.target.rstrip("."),
            "addresses": list(outcome.addresses),
        }
