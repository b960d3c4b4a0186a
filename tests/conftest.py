"""Shared fixtures: an in-process fake JSON-RPC node on httpx.MockTransport."""

from __future__ import annotations

import itertools
import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from rpcprobe.transport.rpc import RpcTransport

RPC_URL = "https://rpc.example.org/v1"

Handler = Callable[[list], Union[dict, httpx.Response]]


def result(value: Any) -> dict:
    return {"result": value}


def error(message: str, code: int = -32000) -> dict:
    return {"error": {"code": code, "message": message}}


HEALTHY_FEE_HISTORY = {
    "oldestBlock": "0x12a05f0",
    "baseFeePerGas": ["0x3b9aca00", "0x77359400", "0xb2d05e00"],
    "gasUsedRatio": [0.5, 0.25],
    "reward": [
        ["0x5f5e100", "0xbebc200", "0x11e1a300"],
        ["0x3b9aca00", "0x77359400", "0xb2d05e00"],
    ],
}


class FakeNode:
    """
    Minimal JSON-RPC node: method name -> handler(params).

    Unknown methods answer with the geth-style "method not found" error.
    Every decoded request is kept in ``calls`` in arrival order.
    """

    def __init__(
        self,
        handlers: Optional[dict[str, Handler]] = None,
        http_version: str = "HTTP/1.1",
    ) -> None:
        blocks = itertools.count(100)
        self.handlers: dict[str, Handler] = {
            "eth_chainId": lambda params: result("0x1"),
            "eth_blockNumber": lambda params: result(hex(next(blocks))),
            "eth_getBalance": lambda params: result("0xde0b6b3a7640000"),
            "eth_feeHistory": lambda params: result(HEALTHY_FEE_HISTORY),
            "eth_gasPrice": lambda params: result("0x4a817c800"),
        }
        self.handlers.update(handlers or {})
        self.http_version = http_version
        self.calls: list[dict] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)
        handler = self.handlers.get(payload["method"])
        if handler is None:
            body = error(f"the method {payload['method']} does not exist/is not available", -32601)
        else:
            body = handler(payload["params"])
            if isinstance(body, httpx.Response):
                return body
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": payload["id"], **body},
            extensions={"http_version": self.http_version.encode("ascii")},
        )

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handle))

    def transport(self, url: str = RPC_URL) -> RpcTransport:
        return RpcTransport(url, client=self.client())

    def methods(self) -> list[str]:
        return [c["method"] for c in self.calls]


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def transport(node: FakeNode) -> RpcTransport:
    return node.transport()
