import argparse
import sys
from datetime import datetime

from wordbuster.core.config import (DEFAULT_IGNORE_CODES, DEFAULT_THREADS, DEFAULT_TIMEOUT,
                                    DEFAULT_USER_AGENT, ScanConfig, parse_status_codes,
                                    split_http_header, split_list)
from wordbuster.core.engine import Engine, build_mode
from wordbuster.core.errors import WordbusterError
from wordbuster.core.models import FilterPolicy, Mode
from wordbuster.parsers.request import Request
from wordbuster.reporters.console import Log
from wordbuster.reporters.output import save_results
from wordbuster.reporters.progress import TqdmProgress, terminal_fits

EXAMPLES = """examples:
  wordbuster dir -u http://localhost:3000/ -w examples/wordlist -e php
  wordbuster dns -u google.com -w examples/wordlist
  wordbuster vhost -u http://localhost:3000/ -w examples/wordlist -d test.local -x "Hello"
  wordbuster fuzz -u http://localhost:3000/login -X POST \\
      -H "Content-Type: application/json" \\
      -b '{"user":"FUZZ","password":"FUZZ2","csrf":"CSRFCSRF"}' \\
      -w users.txt -w passwords.txt -s 200 \\
      --csrf-url http://localhost:3000/csrf --csrf-regex '\\{"csrf":"(\\w+)"\\}'
"""


def add_common_args(p: argparse.ArgumentParser, url_required: bool = True):
    p.add_argument("-u", "--url", required=url_required,
                   help="Target URL (domain in dns mode)")
    p.add_argument("-w", "--wordlist", action="append", required=True,
                   help="Wordlist path, repeatable or comma separated")
    p.add_argument("-t", "--threads", "--workers", type=int, default=DEFAULT_THREADS,
                   help="Amount of concurrent requests")
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                   help="Per-request timeout in seconds")
    p.add_argument("-k", "--ignore-certificate", "--no-check-certificate",
                   action="store_true", help="Disables TLS certificate validation")
    p.add_argument("-K", "--exit-on-error", action="store_true",
                   help="Exits on connection errors")
    p.add_argument("-o", "--output", default="", help="Saves the results in the specified file")
    p.add_argument("--no-progress-bar", action="store_true", help="Disables the progress bar")
    p.add_argument("-X", "--http-method", help="Uses the specified HTTP method (default: GET)")
    p.add_argument("-b", "--http-body", default="", help="Uses the specified HTTP body")
    p.add_argument("-H", "--http-header", action="append", default=[],
                   help="Appends the specified HTTP header")
    p.add_argument("-a", "--user-agent", default=DEFAULT_USER_AGENT,
                   help="Uses the specified User-Agent")
    p.add_argument("-s", "--include-status-codes", action="append",
                   help="Status codes to include")
    p.add_argument("-S", "--ignore-status-codes", action="append",
                   help="Status codes to ignore (default: 404)")
    p.add_argument("-i", "--include-string", action="append", default=[],
                   help="Includes results with specified string in the HTTP body")
    p.add_argument("-x", "--ignore-string", action="append", default=[],
                   help="Ignores results with specified string in the HTTP body")
    p.add_argument("--proxy", help="Proxy (e.g. http://127.0.0.1:8080)")
    p.add_argument("-v", "--verbose", action="count", default=1, help="-v, -vv")
    return p


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="wordbuster", description="Wordlist based web enumeration",
                                epilog=EXAMPLES, formatter_class=argparse.RawDescriptionHelpFormatter)
    sub = p.add_subparsers(dest="mode", required=True)

    d = add_common_args(sub.add_parser("dir", help="Directories and files enumeration mode"))
    d.add_argument("-e", "--extensions", action="append", default=[], help="Sets the extensions")
    d.add_argument("-f", "--append-slash", action="store_true",
                   help="Tries to also append / to the base request")

    add_common_args(sub.add_parser("dns", help="A/AAAA entries enumeration mode"))

    v = add_common_args(sub.add_parser("vhost", help="Virtual hosts enumeration mode"))
    v.add_argument("-d", "--domain", default="", help="Uses the specified domain to bruteforce")

    f = add_common_args(sub.add_parser("fuzz", help="Custom fuzzing enumeration mode"),
                        url_required=False)
    f.add_argument("--csrf-url", help="Grabs the CSRF token via GET to csrf-url")
    f.add_argument("--csrf-regex", help="Grabs the CSRF token applying the specified RegEx")
    f.add_argument("--csrf-header", action="append", default=[],
                   help="Adds the specified headers to CSRF GET request")
    f.add_argument("-r", "--request", help="Raw HTTP request file used as template")
    f.add_argument("--request-proto", default="https", choices=["http", "https"])
    return p


def build_config(args: argparse.Namespace, log: Log) -> ScanConfig:
    mode = Mode(args.mode)

    include_codes = parse_status_codes(args.include_status_codes, "-s", log)
    if args.ignore_status_codes is None:
        exclude_codes = [] if include_codes else list(DEFAULT_IGNORE_CODES)
    else:
        exclude_codes = parse_status_codes(args.ignore_status_codes, "-S", log)
    filters = FilterPolicy.build(include_codes, exclude_codes,
                                 args.include_string, args.ignore_string)
    if mode is Mode.VHOST and (args.include_status_codes or args.ignore_status_codes):
        log.warn("Status code filters are not used in vhost mode, only -x applies")

    url = args.url or ""
    method = args.http_method or "GET"
    body = args.http_body
    headers = [split_http_header(h) for h in args.http_header]

    request_file = getattr(args, "request", None)
    if request_file:
        req = Request(request_file)
        try:
            req.parse()
        except (OSError, ValueError) as exc:
            raise WordbusterError(f"Unable to load request file {request_file}: {exc}") from exc
        url = url or req.url(args.request_proto)
        # explicit -u, -X and -b win over the request file
        method = args.http_method or req.method
        body = body or req.body
        headers = req.headers + headers

    return ScanConfig(
        mode=mode,
        url=url,
        wordlists=split_list(args.wordlist),
        threads=args.threads,
        timeout=args.timeout,
        ignore_certificate=args.ignore_certificate,
        exit_on_error=args.exit_on_error,
        user_agent=args.user_agent,
        http_method=method,
        http_body=body,
        http_headers=headers,
        filters=filters,
        output=args.output,
        proxy=args.proxy,
        no_progress_bar=args.no_progress_bar,
        extensions=split_list(getattr(args, "extensions", [])),
        append_slash=getattr(args, "append_slash", False),
        domain=getattr(args, "domain", ""),
        csrf_url=getattr(args, "csrf_url", None),
        csrf_regex=getattr(args, "csrf_regex", None),
        csrf_headers=[split_http_header(h) for h in getattr(args, "csrf_header", [])],
    ).validate()


def run(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log = Log(verbose=args.verbose)

    try:
        config = build_config(args, log)
        mode = build_mode(config)
    except WordbusterError as exc:
        log.fail(str(exc))
        return 1

    if config.mode is Mode.FUZZ and not mode.has_placeholder():
        log.warn("No FUZZ placeholder found in URL, body or headers")

    no_progress_bar = config.no_progress_bar
    if not no_progress_bar and not terminal_fits():
        log.warn("Terminal too narrow, disabling progress bar")
        no_progress_bar = True
    progress = None if no_progress_bar else TqdmProgress(logger=log)

    log.info(f"Started at {datetime.now():%Y-%m-%d %H:%M:%S}")
    try:
        with Engine(config, logger=log) as engine:
            report = engine.scan(mode, progress=progress)
    except WordbusterError as exc:
        log.fail(str(exc))
        return 1
    except KeyboardInterrupt:
        log.warn("Interrupted by user")
        return 130
    log.info(f"Ended at {datetime.now():%Y-%m-%d %H:%M:%S}")

    if config.output:
        try:
            save_results(config.output, [mode.to_record(r.outcome) for r in report.results])
        except OSError as exc:
            log.fail(f"Unable to save results to {config.output}: {exc}")
            return 1
        log.info(f"Results saved to {config.output}")

    return 1 if report.cancelled else 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
