"""Tests for the HTTP transport."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest
from pytest_httpx import HTTPXMock

from silasign import (
    GatewayConfig,
    GatewayError,
    GatewayResponse,
    GatewayTransport,
    KeyMaterial,
    authenticate_request,
    build_message,
    recover_address,
)

APP_ADDR = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
USER_PRIV_HEX = "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

CONFIG = GatewayConfig(
    gateway="https://gateway.test",
    app_handle="app.silamoney.eth",
    app_address=APP_ADDR,
    app_private_key="0x" + "00" * 31 + "01",
    timeout=5.0,
)
URL = "https://gateway.test/issue_sila"


def _request(user_signed: bool = True):
    msg = build_message("user.silamoney.eth", CONFIG.app_handle, {"amount": 100}, message="issue_msg")
    user_key = KeyMaterial.from_private_key(USER_PRIV_HEX) if user_signed else None
    return asyncio.run(authenticate_request(msg, CONFIG.app_key(), user_key))


def _send(request, **kwargs) -> GatewayResponse:
    async def run() -> GatewayResponse:
        async with GatewayTransport(CONFIG, **kwargs) as transport:
            return await transport.send("issue_sila", request)

    return asyncio.run(run())


def test_send_posts_signed_bytes(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(
        url=URL, method="POST", json={"success": True, "status": "SUCCESS", "reference": "r"}
    )
    request = _request()
    response = _send(request)

    assert response.ok
    assert response.reference == "r"
    sent = httpx_mock.get_request()
    assert sent.content == request.body
    assert sent.headers["content-type"] == "application/json"
    assert sent.headers["authsignature"] == request.signatures.app_signature
    assert sent.headers["usersignature"] == request.signatures.user_signature
    assert recover_address(request.message.digest(), sent.headers["authsignature"]) == APP_ADDR


def test_send_omits_user_signature_header(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, json={"success": True})
    _send(_request(user_signed=False))
    sent = httpx_mock.get_request()
    assert "authsignature" in sent.headers
    assert "usersignature" not in sent.headers


def test_send_extra_headers(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, json={"success": True})
    _send(_request(), headers={"User-Agent": "silasign-tests"})
    assert httpx_mock.get_request().headers["user-agent"] == "silasign-tests"


def test_send_keeps_extra_response_fields(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(
        url=URL, json={"success": True, "status": "SUCCESS", "transaction_id": "tx-1"}
    )
    response = _send(_request())
    assert response.model_extra == {"transaction_id": "tx-1"}


def test_send_failure_response_is_returned_and_logged(
    httpx_mock: HTTPXMock, caplog: pytest.LogCaptureFixture
) -> None:
    httpx_mock.add_response(
        url=URL,
        status_code=400,
        json={"success": False, "status": "FAILURE", "message": "bad amount"},
    )
    with caplog.at_level(logging.ERROR, logger="silasign.transport"):
        response = _send(_request())
    assert not response.ok
    assert response.message == "bad amount"
    assert "bad amount" in caplog.text


def test_send_timeout(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.ReadTimeout("timed out"))
    with pytest.raises(GatewayError) as excinfo:
        _send(_request())
    assert excinfo.value.error_code == "TIMEOUT"
    assert excinfo.value.details["timeout"] == 5.0


def test_send_connection_failed(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.ConnectError("refused"))
    with pytest.raises(GatewayError) as excinfo:
        _send(_request())
    assert excinfo.value.error_code == "CONNECTION_FAILED"
    assert excinfo.value.details["url"] == URL


def test_send_other_http_error(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_exception(httpx.RemoteProtocolError("peer closed"))
    with pytest.raises(GatewayError) as excinfo:
        _send(_request())
    assert excinfo.value.error_code == "HTTP_ERROR"


def test_send_http_error_without_json(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, status_code=502, text="Bad Gateway")
    with pytest.raises(GatewayError) as excinfo:
        _send(_request())
    assert excinfo.value.error_code == "HTTP_ERROR"
    assert excinfo.value.details["status_code"] == 502
    assert excinfo.value.details["body_preview"] == "Bad Gateway"


def test_send_invalid_json(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, status_code=200, text="<html>")
    with pytest.raises(GatewayError) as excinfo:
        _send(_request())
    assert excinfo.value.error_code == "INVALID_JSON"


def test_send_non_object_json(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, json=[1, 2, 3])
    with pytest.raises(GatewayError) as excinfo:
        _send(_request())
    assert excinfo.value.error_code == "INVALID_JSON"


def test_send_malformed_response_fields(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, json={"success": "perhaps"})
    with pytest.raises(GatewayError) as excinfo:
        _send(_request())
    assert excinfo.value.error_code == "INVALID_JSON"


def test_post_unsigned(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url="https://gateway.test/get_sila_balance", json={"sila_balance": 10})

    async def run() -> GatewayResponse:
        async with GatewayTransport(CONFIG) as transport:
            return await transport.post_unsigned("get_sila_balance", {"blockchain_address": "0xabc"})

    response = asyncio.run(run())
    assert response.model_extra == {"sila_balance": 10}
    sent = httpx_mock.get_request()
    assert json.loads(sent.content) == {"blockchain_address": "0xabc"}
    assert "authsignature" not in sent.headers


def test_shared_client_is_not_closed(httpx_mock: HTTPXMock) -> None:
    httpx_mock.add_response(url=URL, json={"success": True})
    request = _request()

    async def run() -> bool:
        async with httpx.AsyncClient() as client:
            async with GatewayTransport(CONFIG, client=client) as transport:
                await transport.send("issue_sila", request)
            return client.is_closed

    assert asyncio.run(run()) is False
