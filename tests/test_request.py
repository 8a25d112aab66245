import pytest

from wordbuster.parsers.request import Request

RAW = (
    "POST /login?next=FUZZ2 HTTP/1.1\r\n"
    "Host: example.com\r\n"
    "Content-Type: application/json\r\n"
    "Content-Length: 42\r\n"
    "\r\n"
    '{"user":"FUZZ","csrf":"CSRFCSRF"}\r\n'
)


def test_parse_raw_request(tmp_path):
    path = tmp_path / "login.req"
    path.write_text(RAW, encoding="utf-8")

    req = Request(str(path))
    parsed = req.parse()

    assert parsed["method"] == "POST"
    assert parsed["host"] == "example.com"
    assert req.url("http") == "http://example.com/login?next=FUZZ2"
    assert req.headers == [("Content-Type", "application/json")]
    assert req.body == '{"user":"FUZZ","csrf":"CSRFCSRF"}'


def test_request_without_host(tmp_path):
    path = tmp_path / "nohost.req"
    path.write_text("GET / HTTP/1.1\nAccept: */*\n\n", encoding="utf-8")
    with pytest.raises(ValueError):
        Request(str(path)).parse()


def test_empty_request(tmp_path):
    path = tmp_path / "empty.req"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        Request(str(path)).parse()
