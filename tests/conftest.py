import json
from contextlib import asynccontextmanager
from typing import List, Optional

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from kubeapi.client import ApiClient
from kubeapi.transport import (
    HttpRequest,
    HttpResponse,
    StreamingHttpResponse,
    Transport,
)

BASE_URL = "https://kube.example.com:6443"


def make_headers(content_type: Optional[str]) -> CIMultiDictProxy:
    headers = CIMultiDict()
    if content_type is not None:
        headers["Content-Type"] = content_type
    return CIMultiDictProxy(headers)


def encode_body(body) -> bytes:
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    return json.dumps(body).encode()


class FakeStreamingResponse(StreamingHttpResponse):
    def __init__(self, *, status, headers, chunks, error=None) -> None:
        super().__init__(status=status, headers=headers)

        self.chunks = chunks
        self.error = error
        self.chunks_read = 0

    async def _iter(self):
        for chunk in self.chunks:
            self.chunks_read += 1
            yield chunk

        if self.error is not None:
            raise self.error

    def iter_chunks(self):
        return self._iter()


class FakeTransport(Transport):
    "Replays canned responses in order and records what was sent"

    def __init__(self) -> None:
        self.requests: List[HttpRequest] = []
        self.responses: list = []
        self.streams_opened = 0
        self.streams_closed = 0

    def add_response(
        self, body=None, *, status=200, content_type="application/json"
    ) -> None:
        self.responses.append(
            HttpResponse(
                status=status,
                headers=make_headers(content_type),
                body=encode_body(body),
            )
        )

    def add_stream(
        self, chunks, *, status=200, content_type="application/json", error=None
    ) -> None:
        self.responses.append(
            FakeStreamingResponse(
                status=status,
                headers=make_headers(content_type),
                chunks=chunks,
                error=error,
            )
        )

    def add_lines(self, objs, **kwargs) -> None:
        chunks = [json.dumps(obj).encode() + b"\n" for obj in objs]
        self.add_stream(chunks, **kwargs)

    async def request(self, req: HttpRequest) -> HttpResponse:
        self.requests.append(req)
        response = self.responses.pop(0)
        assert isinstance(response, HttpResponse)
        return response

    @asynccontextmanager
    async def stream(self, req: HttpRequest):
        self.requests.append(req)
        response = self.responses.pop(0)
        assert isinstance(response, FakeStreamingResponse)

        self.streams_opened += 1
        try:
            yield response
        finally:
            self.streams_closed += 1

    @property
    def paths(self) -> List[str]:
        return [req.url[len(BASE_URL) :] for req in self.requests]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def api_client(transport):
    return ApiClient(transport=transport, base_url=BASE_URL)


def pod_json(name, namespace="default", resource_version="1", **extra):
    obj = {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": resource_version,
        },
    }
    obj.update(extra)
    return obj


@pytest.fixture
def make_pod():
    return pod_json
