import httpx
import pytest

from wordbuster.core.csrf import compile_csrf_pattern, fetch_csrf_token
from wordbuster.core.errors import CsrfError
from wordbuster.core.models import CsrfToken

CSRF_REGEX = r'\{"csrf":"(\w+)"\}'


def test_fetch_csrf_token(make_client, log):
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["cookie"] = request.headers.get("cookie")
        return httpx.Response(200, text='{"csrf":"abc123"}')

    token = fetch_csrf_token(make_client(handler), "http://t/csrf", CSRF_REGEX,
                             headers=[("Cookie", "session=1")], logger=log)
    assert token == CsrfToken("abc123")
    assert seen == {"method": "GET", "cookie": "session=1"}


def test_no_match_is_fatal(make_client):
    client = make_client(lambda request: httpx.Response(200, text="no token here"))
    with pytest.raises(CsrfError):
        fetch_csrf_token(client, "http://t/csrf", CSRF_REGEX)


def test_fetch_failure_is_fatal(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CsrfError):
        fetch_csrf_token(make_client(handler), "http://t/csrf", CSRF_REGEX)


@pytest.mark.parametrize("pattern", [r"csrf", r"(unclosed"])
def test_pattern_must_compile_and_capture(pattern):
    with pytest.raises(CsrfError):
        compile_csrf_pattern(pattern)
