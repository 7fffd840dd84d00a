import json

import httpx
import pytest

from complaint_desk.clients.complaints_api import ComplaintsApiClient, ComplaintsApiError
from complaint_desk.schemas.filters import ComplaintQuery

QUERY = ComplaintQuery(page=2, limit=10, priority=("HIGH", "CRITICAL"), wardId="W1", search="pot hole")


def _row(n):
    return {
        "id": f"cmp-{n}",
        "complaintId": f"KSC{n:04d}",
        "description": "Broken streetlight",
        "status": "REGISTERED",
        "priority": "HIGH",
        "unknownField": "ignored",
    }


def _client(handler):
    return ComplaintsApiClient("http://upstream/api/", transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_list_sends_server_parameters_and_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = request.url.params
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": {
                    "complaints": [_row(1), _row(2)],
                    "pagination": {"totalItems": 12, "totalPages": 2},
                },
            },
        )

    client = _client(handler)
    page = await client.list_complaints(QUERY, token="tok-123")
    await client.aclose()

    assert seen["path"] == "/api/complaints"
    assert seen["params"].get_list("priority") == ["HIGH", "CRITICAL"]
    assert seen["params"]["wardId"] == "W1"
    assert seen["params"]["page"] == "2"
    assert seen["params"]["search"] == "pot hole"
    assert "status" not in seen["params"]
    assert seen["auth"] == "Bearer tok-123"
    assert [c.complaint_id for c in page.items] == ["KSC0001", "KSC0002"]
    assert page.total_items == 12
    assert page.total_pages == 2


@pytest.mark.anyio
async def test_unwrapped_body_and_missing_total_pages():
    def handler(request):
        return httpx.Response(
            200, json={"complaints": [_row(1)], "pagination": {"totalItems": 31}}
        )

    client = _client(handler)
    page = await client.list_complaints(QUERY)
    await client.aclose()

    assert page.total_pages == 4


@pytest.mark.anyio
async def test_missing_pagination_counts_items():
    def handler(request):
        return httpx.Response(200, json={"data": {"complaints": []}})

    client = _client(handler)
    page = await client.list_complaints(QUERY)
    await client.aclose()

    assert page.total_items == 0
    assert page.total_pages == 1


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"message": "db down"}),
        httpx.Response(200, content=b"<html>gateway</html>"),
        httpx.Response(200, json={"data": {"items": []}}),
        httpx.Response(200, json={"data": {"complaints": [{"id": "x"}]}}),
    ],
)
async def test_unusable_responses_raise(response):
    client = _client(lambda request: response)

    with pytest.raises(ComplaintsApiError):
        await client.list_complaints(QUERY)
    await client.aclose()


@pytest.mark.anyio
async def test_http_status_is_kept_on_error():
    client = _client(lambda request: httpx.Response(403, json={"message": "forbidden"}))

    with pytest.raises(ComplaintsApiError) as excinfo:
        await client.list_complaints(QUERY)
    await client.aclose()

    assert excinfo.value.status_code == 403


@pytest.mark.anyio
async def test_transport_failure_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)

    with pytest.raises(ComplaintsApiError) as excinfo:
        await client.list_complaints(QUERY)
    await client.aclose()

    assert excinfo.value.status_code is None


@pytest.mark.anyio
async def test_public_config_entries():
    entries = [
        {"key": "COMPLAINT_PRIORITIES", "value": json.dumps(["LOW", "HIGH"])},
        {"value": "no key"},
    ]

    def handler(request):
        assert request.url.path == "/api/system-config/public"
        return httpx.Response(200, json={"success": True, "data": entries})

    client = _client(handler)
    result = await client.get_public_system_config()
    await client.aclose()

    assert result == entries[:1]


@pytest.mark.anyio
async def test_public_config_must_be_a_list():
    client = _client(lambda request: httpx.Response(200, json={"data": {"key": "x"}}))

    with pytest.raises(ComplaintsApiError):
        await client.get_public_system_config()
    await client.aclose()
