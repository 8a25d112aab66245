from functools import partial

import dns.resolver
import httpx

from wordbuster.core.aggregator import ResultAggregator
from wordbuster.core.config import ScanConfig
from wordbuster.core.dispatcher import Dispatcher
from wordbuster.core.models import Mode, RunReport
from wordbuster.core.prober import Prober
from wordbuster.core.wordlist import load_wordlists
from wordbuster.modes.base import BaseMode
from wordbuster.modes.dir import DirMode
from wordbuster.modes.dns import DnsMode
from wordbuster.modes.fuzz import FuzzMode
from wordbuster.modes.vhost import VhostMode


def build_mode(config: ScanConfig) -> BaseMode:
    """Instantiate the mode strategy; wordlists are checked here."""
    wordlists = load_wordlists(config.wordlists)
    if config.mode is Mode.DIR:
        return DirMode(config, wordlists[0])
    if config.mode is Mode.DNS:
        return DnsMode(config, wordlists[0])
    if config.mode is Mode.VHOST:
        return VhostMode(config, wordlists[0])
    return FuzzMode(config, wordlists)


class Engine:
    def __init__(self, config: ScanConfig, logger=None, client: httpx.Client | None = None,
                 resolver=None):
        self.name = "wordbuster"
        self.config = config
        self.logger = logger
        self.client = client or httpx.Client(
            verify=not config.ignore_certificate,
            proxy=config.proxy,
            follow_redirects=False,
            timeout=config.timeout,
            headers={"User-Agent": config.user_agent},
            limits=httpx.Limits(max_connections=config.threads,
                                max_keepalive_connections=config.threads),
        )
        if resolver is None:
            resolver = dns.resolver.Resolver()
            resolver.timeout = config.timeout
            resolver.lifetime = config.timeout
        self.resolver = resolver

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def scan(self, mode: BaseMode, progress=None) -> RunReport:
        cfg = self.config

        if self.logger:
            self.logger.info(f"Enumerating {cfg.url} ({mode.name} mode, {cfg.threads} threads)")
            if cfg.ignore_certificate:
                self.logger.debug("TLS certificate validation disabled")

        # CSRF pre-flight: blocks dispatch, raises CsrfError on failure
        mode.prepare(self.client, logger=self.logger)
        prober = Prober(self.client, self.resolver, logger=self.logger)

        if progress is not None:
            progress.start(mode.count())

        dispatcher = Dispatcher(mode.candidates(), partial(mode.probe, prober),
                                n_workers=cfg.threads, logger=self.logger)
        aggregator = ResultAggregator(mode, exit_on_error=cfg.exit_on_error,
                                      logger=self.logger, progress=progress)
        dispatcher.start()
        try:
            report = aggregator.consume(dispatcher)
        except KeyboardInterrupt:
            dispatcher.cancel()
            raise
        finally:
            if progress is not None:
                progress.close()

        if self.logger:
            if report.cancelled:
                self.logger.warn(
                    f"Scan stopped early ({report.stop_reason.value}): "
                    f"{report.stats.completed_count} of {report.stats.dispatched_count} probes completed")
            elif not report.results:
                self.logger.fail(f"No results for {cfg.url}")
            else:
                self.logger.ok(f"{len(report.results)} results in {report.stats.completed_count} probes")
        return report
