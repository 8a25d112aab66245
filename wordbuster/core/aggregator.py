"""Single-consumer result aggregation: filter, dedup, stats, early stop."""

from typing import List, Optional, Set

from wordbuster.core.models import (AcceptedResult, ProbeOutcome, RunReport,
                                    RunStats, StopReason)


class ResultAggregator:
    """
    Drains a Dispatcher and keeps the accepted results in arrival order.

    The mode strategy decides acceptance (``accept``), the dedup key
    (``identity``) and how a result is displayed (``describe``). Only the
    thread calling ``consume`` touches ``results`` and ``stats``.
    """

    def __init__(self, mode, exit_on_error: bool = False, logger=None, progress=None):
        self.mode = mode
        self.exit_on_error = exit_on_error
        self.logger = logger
        self.progress = progress
        self.results: List[AcceptedResult] = []
        self.stats = RunStats()
        self.stop_reason = StopReason.COMPLETED
        self._seen: Set = set()

    def consume(self, dispatcher) -> RunReport:
        drained = 0
        for outcome in dispatcher.outcomes():
            if dispatcher.cancelled:
                # in-flight probes after an early stop: count, don't report
                self._tick()
                drained += 1
                continue
            reason = self.process(outcome)
            if reason is not None:
                self.stop_reason = reason
                dispatcher.cancel()

        if dispatcher.source_error is not None and self.stop_reason is StopReason.COMPLETED:
            self.stop_reason = StopReason.SOURCE_ERROR
        self.stats.dispatched_count = dispatcher.dispatched
        if drained and self.logger:
            self.logger.debug(f"Drained {drained} in-flight results after stop")
        return RunReport(results=self.results, stats=self.stats, stop_reason=self.stop_reason)

    def _tick(self):
        self.stats.completed_count += 1
        if self.progress is not None:
            self.progress.advance()
            self.progress.set_throughput(self.stats.throughput_label())

    def process(self, outcome: ProbeOutcome) -> Optional[StopReason]:
        """Handle one outcome; return a StopReason if the run must stop."""
        self._tick()

        if outcome.error:
            if self.logger:
                self.logger.fail(f"{outcome.candidate.target}: {outcome.error}")
            if self.stats.completed_count == 1:
                if self.logger:
                    self.logger.warn("Check connectivity to the target")
                return StopReason.UNREACHABLE
            if self.exit_on_error:
                if self.logger:
                    self.logger.warn("Check connectivity to the target")
                return StopReason.EXIT_ON_ERROR
            return None

        if not self.mode.accept(outcome):
            return None

        self.add(outcome)
        if self.logger:
            for line in self.mode.describe(outcome):
                self.logger.result(line)
        return None

    def add(self, outcome: ProbeOutcome) -> bool:
        """Record *outcome* unless its identity key was already seen."""
        key = self.mode.identity(outcome)
        if key in self._seen:
            return False
        self._seen.add(key)
        self.results.append(AcceptedResult(key=key, outcome=outcome))
        return True
