"""Tests for HelpScoutAdapter — httpx.MockTransport, no network."""

from urllib.parse import parse_qs

import httpx
import pytest

from response_evaluator.adapters.helpscout.helpscout_adapter import HelpScoutAdapter
from response_evaluator.domain.value_objects.enums import AuthorKind

BASE_URL = "https://api.helpscout.test/v2"


class FakeHelpScout:
    """Routes requests the way the Mailbox API does and records them."""

    def __init__(self, threads_pages=None, token_status=200, threads_status=200, token_body=None):
        self.threads_pages = threads_pages or [[]]
        self.token_status = token_status
        self.threads_status = threads_status
        self.token_body = token_body if token_body is not None else {
            "access_token": "oauth-token", "expires_in": 7200,
        }
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/oauth2/token"):
            return httpx.Response(self.token_status, json=self.token_body)
        if "/threads" in request.url.path:
            if self.threads_status != 200:
                return httpx.Response(self.threads_status, json={"message": "nope"})
            page = int(request.url.params.get("page", "1"))
            return httpx.Response(200, json={
                "_embedded": {"threads": self.threads_pages[page - 1]},
                "page": {"number": page, "totalPages": len(self.threads_pages)},
            })
        return httpx.Response(404)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def _adapter(fake: FakeHelpScout, **kwargs) -> HelpScoutAdapter:
    params = {
        "access_token": "", "app_id": "app", "app_secret": "secret",
        "base_url": BASE_URL, "timeout": 1.0, "max_pages": 5,
    }
    params.update(kwargs)
    return HelpScoutAdapter(transport=httpx.MockTransport(fake), **params)


# ─── Token handling ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_static_token_skips_oauth(team_reply_payload):
    fake = FakeHelpScout(threads_pages=[[team_reply_payload]])
    threads = await _adapter(fake, access_token="static-token").fetch_threads("42")

    assert len(threads) == 1
    assert fake.paths() == ["/v2/conversations/42/threads"]
    assert fake.requests[0].headers["Authorization"] == "Bearer static-token"


@pytest.mark.asyncio
async def test_client_credentials_exchange(team_reply_payload):
    fake = FakeHelpScout(threads_pages=[[team_reply_payload]])
    await _adapter(fake).fetch_threads("42")

    assert fake.paths() == ["/v2/oauth2/token", "/v2/conversations/42/threads"]
    form = parse_qs(fake.requests[0].content.decode())
    assert form["grant_type"] == ["client_credentials"]
    assert form["client_id"] == ["app"]
    assert fake.requests[1].headers["Authorization"] == "Bearer oauth-token"


@pytest.mark.asyncio
async def test_oauth_token_reused_until_expiry():
    fake = FakeHelpScout()
    adapter = _adapter(fake)
    await adapter.fetch_threads("1")
    await adapter.fetch_threads("2")
    assert fake.paths().count("/v2/oauth2/token") == 1


@pytest.mark.asyncio
async def test_token_failure_is_unavailable():
    fake = FakeHelpScout(token_status=401)
    assert await _adapter(fake).fetch_threads("42") is None
    assert fake.paths() == ["/v2/oauth2/token"]


@pytest.mark.asyncio
async def test_token_response_without_token_is_unavailable():
    fake = FakeHelpScout(token_body={"error": "invalid_client"})
    assert await _adapter(fake).fetch_threads("42") is None
    assert len(fake.requests) == 1


@pytest.mark.asyncio
async def test_no_credentials_is_unavailable():
    fake = FakeHelpScout()
    assert await _adapter(fake, app_id="", app_secret="").fetch_threads("42") is None
    assert fake.requests == []


# ─── Thread reads ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_threads_are_normalized(team_reply_payload, customer_message_payload):
    customer_message_payload["createdBy"] = "customer"
    fake = FakeHelpScout(threads_pages=[[customer_message_payload, team_reply_payload]])
    threads = await _adapter(fake, access_token="t").fetch_threads("42")

    assert [t.author for t in threads] == [AuthorKind.CUSTOMER, AuthorKind.TEAM]
    assert threads[1].author_name == "Dana Lee"


@pytest.mark.asyncio
async def test_follows_pages(team_reply_payload, customer_message_payload):
    fake = FakeHelpScout(threads_pages=[[customer_message_payload], [team_reply_payload]])
    threads = await _adapter(fake, access_token="t").fetch_threads("42")
    assert [t.id for t in threads] == ["201", "202"]


@pytest.mark.asyncio
async def test_page_cap(team_reply_payload):
    fake = FakeHelpScout(threads_pages=[[team_reply_payload]] * 4)
    threads = await _adapter(fake, access_token="t", max_pages=2).fetch_threads("42")
    assert len(threads) == 2


@pytest.mark.asyncio
async def test_not_found_is_unavailable():
    fake = FakeHelpScout(threads_status=404)
    assert await _adapter(fake, access_token="t").fetch_threads("42") is None


@pytest.mark.asyncio
async def test_network_error_is_unavailable():
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    adapter = HelpScoutAdapter(
        access_token="t", base_url=BASE_URL, transport=httpx.MockTransport(boom),
    )
    assert await adapter.fetch_threads("42") is None


@pytest.mark.asyncio
async def test_empty_id_makes_no_request():
    fake = FakeHelpScout()
    assert await _adapter(fake, access_token="t").fetch_threads("") is None
    assert fake.requests == []


@pytest.mark.asyncio
async def test_unauthorized_drops_cached_oauth_token():
    fake = FakeHelpScout(threads_status=401)
    adapter = _adapter(fake)
    assert await adapter.fetch_threads("42") is None
    await adapter.fetch_threads("42")
    assert fake.paths().count("/v2/oauth2/token") == 2
