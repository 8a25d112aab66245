import json

import httpx
import pytest

from wordbuster import main as cli
from wordbuster.core.engine import Engine


@pytest.fixture
def mock_engine(monkeypatch):
    """Route every Engine built by the CLI through a MockTransport."""
    handlers = {}

    original_init = Engine.__init__

    def patched_init(self, config, logger=None, client=None, resolver=None):
        client = httpx.Client(transport=httpx.MockTransport(handlers["http"]))
        original_init(self, config, logger=logger, client=client, resolver=resolver)

    monkeypatch.setattr(Engine, "__init__", patched_init)
    return handlers


def test_missing_wordlist_exits_non_zero(tmp_path, capsys):
    code = cli.run(["dir", "-u", "http://t/", "-w", str(tmp_path / "missing.txt"),
                    "--no-progress-bar"])
    assert code == 1
    assert "does not exist" in capsys.readouterr().out


def test_invalid_scheme_exits_non_zero(make_wordlist, capsys):
    code = cli.run(["dir", "-u", "ftp://t/", "-w", make_wordlist(["a"]), "--no-progress-bar"])
    assert code == 1
    assert "invalid protocol" in capsys.readouterr().out


def test_conflicting_status_filters(make_wordlist, capsys):
    code = cli.run(["dir", "-u", "http://t/", "-w", make_wordlist(["a"]),
                    "-s", "200", "-S", "404", "--no-progress-bar"])
    assert code == 1
    assert "cannot be combined" in capsys.readouterr().out


def test_include_codes_replace_default_ignore(make_wordlist):
    args = cli.build_parser().parse_args(["dir", "-u", "http://t/", "-w", make_wordlist(["a"]),
                                          "-s", "200,bogus"])
    config = cli.build_config(args, log=None)
    assert config.filters.include_codes == frozenset({"200"})
    assert config.filters.exclude_codes == frozenset()


def test_vhost_requires_ignore_string(make_wordlist, capsys):
    code = cli.run(["vhost", "-u", "http://t/", "-w", make_wordlist(["a"]), "-d", "example.com",
                    "--no-progress-bar"])
    assert code == 1


def test_dir_run_saves_results(make_wordlist, mock_engine, tmp_path, capsys):
    mock_engine["http"] = lambda request: httpx.Response(
        200 if request.url.path == "/admin" else 404)
    out = tmp_path / "results.json"

    code = cli.run(["dir", "-u", "http://t/", "-w", make_wordlist(["admin", "login"]),
                    "-e", "php", "-o", str(out), "--no-progress-bar"])

    assert code == 0
    assert json.loads(out.read_text()) == [
        {"method": "GET", "url": "http://t/admin", "status": 200, "extra": ""}]
    assert "http://t/admin" in capsys.readouterr().out


def test_fuzz_from_request_file(make_wordlist, mock_engine, tmp_path):
    posted = []

    def handler(request):
        if request.url.path == "/csrf":
            return httpx.Response(200, text='{"csrf":"tok"}')
        posted.append((str(request.url), request.content.decode()))
        return httpx.Response(200)

    mock_engine["http"] = handler
    req = tmp_path / "login.req"
    req.write_text('POST /login HTTP/1.1\nHost: t\nContent-Type: application/json\n\n'
                   '{"user":"FUZZ","csrf":"CSRFCSRF"}\n', encoding="utf-8")

    code = cli.run(["fuzz", "-r", str(req), "--request-proto", "http",
                    "-w", make_wordlist(["bob"]), "--csrf-url", "http://t/csrf",
                    "--csrf-regex", r'"csrf":"(\w+)"', "--no-progress-bar"])

    assert code == 0
    assert posted == [("http://t/login", '{"user":"bob","csrf":"tok"}')]


def test_unreachable_target_exits_non_zero(make_wordlist, mock_engine):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    mock_engine["http"] = handler
    code = cli.run(["dir", "-u", "http://t/", "-w", make_wordlist(["a", "b"]),
                    "-t", "1", "--no-progress-bar"])
    assert code == 1


def test_explicit_method_wins_over_request_file(make_wordlist, tmp_path):
    req = tmp_path / "search.req"
    req.write_text("POST /search HTTP/1.1\nHost: t\n\nq=FUZZ\n", encoding="utf-8")
    wordlist = make_wordlist(["a"])

    parser = cli.build_parser()
    from_file = cli.build_config(parser.parse_args(
        ["fuzz", "-r", str(req), "-w", wordlist]), log=None)
    explicit = cli.build_config(parser.parse_args(
        ["fuzz", "-r", str(req), "-X", "PUT", "-w", wordlist]), log=None)

    assert from_file.http_method == "POST"
    assert explicit.http_method == "PUT"
    assert explicit.http_body == "q=FUZZ"


def test_vhost_rejects_include_strings(make_wordlist, capsys):
    code = cli.run(["vhost", "-u", "http://t/", "-w", make_wordlist(["a"]), "-d", "example.com",
                    "-i", "Welcome", "--no-progress-bar"])
    assert code == 1
    assert "-i" in capsys.readouterr().out


def test_vhost_warns_about_status_filters(make_wordlist, log):
    args = cli.build_parser().parse_args(["vhost", "-u", "http://t/", "-w", make_wordlist(["a"]),
                                          "-d", "example.com", "-x", "Hello", "-s", "200"])
    cli.build_config(args, log)
    assert any("not used in vhost mode" in line for line in log.lines)
