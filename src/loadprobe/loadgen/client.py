from __future__ import annotations

import itertools
from typing import Any

import httpx

from loadprobe.config import TargetConfig
from loadprobe.loadgen.operations import Operation

BODY_PREVIEW_CHARS = 200


class OperationError(Exception):
    """The remote side answered, but with a failure."""


def http_operation(client: httpx.AsyncClient, target: TargetConfig) -> Operation:
    """One plain HTTP request per call; non-2xx responses raise ``OperationError``."""

    async def call() -> httpx.Response:
        return await _send(client, target, target.json_body)

    return call


def json_rpc_operation(
    client: httpx.AsyncClient,
    target: TargetConfig,
    method: str,
    params: Any = None,
) -> Operation:
    ids = itertools.count(1)

    async def call() -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(ids),
            "method": method,
            "params": [] if params is None else params,
        }
        resp = await _send(client, target, payload)
        try:
            body = resp.json()
        except ValueError as exc:
            msg = f"malformed JSON-RPC response: {resp.text[:BODY_PREVIEW_CHARS]}"
            raise OperationError(msg) from exc
        if not isinstance(body, dict):
            msg = f"unexpected JSON-RPC response: {str(body)[:BODY_PREVIEW_CHARS]}"
            raise OperationError(msg)
        error = body.get("error")
        if error is not None:
            raise OperationError(_rpc_error_message(error))
        return body.get("result")

    return call


async def _send(client: httpx.AsyncClient, target: TargetConfig, payload: Any) -> httpx.Response:
    kwargs: dict[str, Any] = {"headers": dict(target.headers)}
    if payload is not None:
        kwargs["json"] = payload
    if target.timeout_sec is not None:
        kwargs["timeout"] = target.timeout_sec
    resp = await client.request(target.method, target.url, **kwargs)
    if not resp.is_success:
        msg = f"{resp.status_code} {resp.reason_phrase}: {resp.text[:BODY_PREVIEW_CHARS]}"
        raise OperationError(msg)
    return resp


def _rpc_error_message(error: Any) -> str:
    if isinstance(error, dict):
        return f"JSON-RPC error {error.get('code')}: {error.get('message', '')}"
    return f"JSON-RPC error: {error}"
