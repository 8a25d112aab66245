"""Bounded worker pool feeding probe outcomes to a single consumer."""

import queue
import threading
from typing import Callable, Iterable, Iterator, List, Optional

from wordbuster.core.models import Candidate, ProbeOutcome

_DONE = object()    # end-of-stream, one per worker


class Dispatcher:
    """
    Runs exactly ``n_workers`` threads over a shared candidate iterator.

    Workers pull candidates one at a time, so the source is never
    enumerated up front. Every pulled candidate yields exactly one
    outcome on the result queue. ``cancel()`` stops further pulls;
    probes already running still finish and are delivered.

    Usage:
        dispatcher = Dispatcher(mode.candidates(), probe, n_workers=10)
        dispatcher.start()
        for outcome in dispatcher.outcomes():
            ...
    """

    def __init__(self, candidates: Iterable[Candidate],
                 probe: Callable[[Candidate], ProbeOutcome],
                 n_workers: int = 10, logger=None):
        if n_workers < 1:
            raise ValueError("n_workers must be at least 1")
        self.n_workers = n_workers
        self.logger = logger
        self._probe = probe
        self._source = iter(candidates)
        self._source_lock = threading.Lock()
        self._results: "queue.Queue" = queue.Queue()
        self._cancel = threading.Event()
        self._dispatched = 0
        self._exhausted = False
        self.source_error: Optional[BaseException] = None
        self._workers: List[threading.Thread] = []

    @property
    def dispatched(self) -> int:
        return self._dispatched

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self):
        self._cancel.set()

    def start(self):
        if self._workers:
            raise RuntimeError("dispatcher already started")
        for i in range(self.n_workers):
            t = threading.Thread(target=self._work, name=f"wordbuster-worker-{i}", daemon=True)
            self._workers.append(t)
            t.start()

    def join(self, timeout: Optional[float] = None):
        for t in self._workers:
            t.join(timeout)

    # ── worker side ────────────────────────────────────────────

    def _next(self) -> Optional[Candidate]:
        with self._source_lock:
            if self._exhausted or self._cancel.is_set():
                return None
            try:
                candidate = next(self._source)
            except StopIteration:
                self._exhausted = True
                return None
            except Exception as exc:
                # no more pulls; the consumer turns this into a stop reason
                self._exhausted = True
                self.source_error = exc
                if self.logger:
                    self.logger.fail(f"Candidate generation stopped: {exc}")
                return None
            self._dispatched += 1
            return candidate

    def _work(self):
        try:
            while True:
                candidate = self._next()
                if candidate is None:
                    break
                try:
                    outcome = self._probe(candidate)
                except Exception as exc:
                    outcome = ProbeOutcome.failed(candidate, exc)
                self._results.put(outcome)
        finally:
            self._results.put(_DONE)

    # ── consumer side ──────────────────────────────────────────

    def outcomes(self) -> Iterator[ProbeOutcome]:
        """Yield outcomes in completion order until every worker is done."""
        finished = 0
        while finished < len(self._workers):
            item = self._results.get()
            if item is _DONE:
                finished += 1
                continue
            yield item
