"""Scan configuration and the parsing helpers used to build it."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlsplit

from wordbuster.core.errors import ConfigError
from wordbuster.core.models import FilterPolicy, Mode

DEFAULT_THREADS = 10
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "wordbuster"
DEFAULT_IGNORE_CODES = ("404",)


def split_http_header(raw: str) -> Tuple[str, str]:
    """'Name: value' → ('Name', 'value')."""
    if ":" not in raw:
        raise ConfigError(f"Invalid HTTP header {raw!r}, expected 'Name: value'")
    k, v = raw.split(":", 1)
    if not k.strip():
        raise ConfigError(f"Invalid HTTP header {raw!r}, empty name")
    return k.strip(), v.strip()


def split_list(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten repeated and comma separated option values."""
    out = []
    for value in values or ():
        out.extend(part.strip() for part in value.split(","))
    return [v for v in out if v]


def is_valid_status_code(code: str) -> bool:
    return code.isdigit() and len(code) == 3 and 100 <= int(code) <= 999


def parse_status_codes(values: Iterable[str], flag: str = "", logger=None) -> List[str]:
    """Keep syntactically valid status codes, warn about the others."""
    codes = []
    for code in split_list(values):
        if not is_valid_status_code(code):
            if logger:
                logger.warn(f"Ignoring invalid status code for '{flag}' param: {code}")
            continue
        codes.append(code)
    return codes


def validate_url(url: str):
    parts = urlsplit(url)
    if not parts.scheme:
        raise ConfigError(
            f"Invalid URL {url!r}: missing protocol, consider adding http:// or https://")
    if parts.scheme not in ("http", "https"):
        raise ConfigError(
            f"Invalid URL {url!r}: invalid protocol, only http:// or https:// are supported")
    if not parts.netloc:
        raise ConfigError(f"Invalid URL {url!r}: missing host")


@dataclass
class ScanConfig:
    mode: Mode
    url: str
    wordlists: List[str]
    threads: int = DEFAULT_THREADS
    timeout: float = DEFAULT_TIMEOUT
    ignore_certificate: bool = False
    exit_on_error: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    http_method: str = "GET"
    http_body: str = ""
    http_headers: List[Tuple[str, str]] = field(default_factory=list)
    filters: FilterPolicy = field(default_factory=lambda: FilterPolicy.build(exclude_codes=DEFAULT_IGNORE_CODES))
    output: str = ""
    proxy: Optional[str] = None
    no_progress_bar: bool = False
    # dir
    extensions: List[str] = field(default_factory=list)
    append_slash: bool = False
    # vhost
    domain: str = ""
    # fuzz
    csrf_url: Optional[str] = None
    csrf_regex: Optional[str] = None
    csrf_headers: List[Tuple[str, str]] = field(default_factory=list)

    def validate(self):
        """Raise ConfigError on anything that must stop the run up front."""
        if self.threads < 1:
            raise ConfigError("threads must be a positive number")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        if not self.wordlists:
            raise ConfigError("at least one wordlist is required")

        if self.mode is Mode.DNS:
            if not self.url.strip("."):
                raise ConfigError("domain not specified (-u)")
        else:
            validate_url(self.url)

        if self.mode is Mode.VHOST:
            if not self.domain:
                raise ConfigError("domain not specified (-d)")
            if self.filters.include_strings:
                raise ConfigError("include strings (-i) are not supported in vhost mode, use -x")
            if not self.filters.exclude_strings:
                raise ConfigError("ignore strings not specified (-x)")

        if self.mode is Mode.FUZZ:
            if bool(self.csrf_url) != bool(self.csrf_regex):
                raise ConfigError("--csrf-url and --csrf-regex must be used together")
            if self.csrf_headers and not self.csrf_url:
                raise ConfigError("--csrf-header requires --csrf-url")
            if self.csrf_url:
                validate_url(self.csrf_url)
        return self
