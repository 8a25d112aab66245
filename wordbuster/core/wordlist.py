"""Wordlist streaming and candidate expansion helpers."""

import os
import re
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from wordbuster.core.csrf import CSRF_MARKER
from wordbuster.core.errors import WordlistError

FUZZ_MARKER = "FUZZ"

_MARKER_RX = re.compile(rf"{CSRF_MARKER}|{FUZZ_MARKER}\d*")


class Wordlist:
    """A line-delimited wordlist read lazily from disk.

    Every iteration re-opens the file, so the same object can be walked
    several times (the fuzz cartesian product relies on this).
    """

    def __init__(self, path: str):
        self.path = path
        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            raise WordlistError(f"Specified wordlist does not exist: {path}")

    def __iter__(self) -> Iterator[str]:
        try:
            with open(self.path, "r", encoding="utf-8", errors="ignore") as f:
                for line in f:
                    word = line.rstrip("\r\n")
                    if not word.strip():
                        continue
                    yield word
        except OSError as exc:
            raise WordlistError(f"Unable to read wordlist {self.path}: {exc}") from exc

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self):
        return f"Wordlist({self.path!r})"


def load_wordlists(paths: Iterable[str]) -> List[Wordlist]:
    wordlists = [Wordlist(p) for p in paths]
    if not wordlists:
        raise WordlistError("No wordlist specified")
    return wordlists


def join_url(base_url: str, word: str) -> str:
    if base_url.endswith("/") or word.startswith("/"):
        return f"{base_url}{word}"
    return f"{base_url}/{word}"


def expand_paths(words: Iterable[str], base_url: str, extensions: Sequence[str] = (),
                 append_slash: bool = False) -> Iterator[str]:
    exts = [e for e in extensions if e]
    for word in words:
        yield join_url(base_url, word)
        for ext in exts:
            yield join_url(base_url, f"{word}.{ext}")
        if append_slash:
            yield join_url(base_url, f"{word}/")


def expand_domains(words: Iterable[str], domain: str) -> Iterator[str]:
    domain = domain.strip(".")
    for word in words:
        yield f"{word}.{domain}."


def expand_vhosts(words: Iterable[str], domain: str) -> Iterator[str]:
    domain = domain.strip(".")
    for word in words:
        yield f"{word}.{domain}"


# ── Fuzz placeholders ──────────────────────────────────────────

def placeholder(index: int) -> str:
    """Marker bound to the wordlist at *index*: FUZZ, FUZZ2, FUZZ3, ..."""
    return FUZZ_MARKER if index == 0 else f"{FUZZ_MARKER}{index + 1}"


def substitute(template: str, words: Sequence[str], csrf: Optional[str] = None) -> str:
    """Replace every bound marker of *template* in a single pass.

    Inserted words and the CSRF token are never scanned again, so a word
    that itself contains FUZZ or CSRFCSRF is sent as is. Markers with no
    bound value (FUZZ3 with two wordlists, CSRFCSRF without a token) are
    left untouched.
    """
    bound = {placeholder(i): word for i, word in enumerate(words)}
    if csrf is not None:
        bound[CSRF_MARKER] = csrf
    return _MARKER_RX.sub(lambda m: bound.get(m.group(0), m.group(0)), template)


def has_placeholder(template: str) -> bool:
    return FUZZ_MARKER in template


def expand_product(wordlists: Sequence[Iterable[str]]) -> Iterator[Tuple[str, ...]]:
    """Cartesian product over wordlists, first wordlist outermost.

    Inner wordlists are re-iterated for every outer word instead of
    being materialised like itertools.product would do.
    """
    if not wordlists:
        return
    head, rest = wordlists[0], wordlists[1:]
    for word in head:
        if not rest:
            yield (word,)
            continue
        for tail in expand_product(rest):
            yield (word,) + tail
