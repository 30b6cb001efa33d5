"""Tests for the shared Supabase request layer."""

import httpx
import pytest

from app.services.supabase_client import SupabaseClient, SupabaseError


def _client(handler) -> SupabaseClient:
    return SupabaseClient(
        base_url="http://supabase.test/",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


class TestHeaders:
    @pytest.mark.asyncio
    async def test_anon_key_used_without_user_token(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json={})

        await _client(handler)._request("GET", "/rest/v1/todos")
        assert seen["apikey"] == "anon-key"
        assert seen["authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    async def test_user_token_forwarded(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json={})

        await _client(handler)._request("GET", "/rest/v1/todos", access_token="user-jwt")
        assert seen["apikey"] == "anon-key"
        assert seen["authorization"] == "Bearer user-jwt"

    def test_trailing_slash_stripped(self):
        assert _client(lambda r: None).base_url == "http://supabase.test"


class TestErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"message": "relation \"todos\" does not exist", "code": "42P01"}, 'relation "todos" does not exist'),
            ({"msg": "User already registered"}, "User already registered"),
            ({"error": "invalid_grant", "error_description": "Invalid login credentials"}, "Invalid login credentials"),
            ({"statusCode": "404", "error": "Bucket not found"}, "Bucket not found"),
        ],
    )
    async def test_service_message_extracted(self, body, expected):
        client = _client(lambda request: httpx.Response(400, json=body))

        with pytest.raises(SupabaseError) as exc_info:
            await client._request("GET", "/anything")
        assert exc_info.value.message == expected
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_non_json_error_uses_reason(self):
        client = _client(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))

        with pytest.raises(SupabaseError) as exc_info:
            await client._request("GET", "/anything")
        assert exc_info.value.message == "Bad Gateway"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_supabase_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SupabaseError) as exc_info:
            await _client(handler)._request("GET", "/anything")
        assert "connection refused" in exc_info.value.message
        assert exc_info.value.status_code is None
