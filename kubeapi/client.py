import json
import logging
from typing import Any, AsyncGenerator, Callable, Optional, TypeVar

from aiohttp import ClientSession, ClientTimeout

from kubeapi.auth import AuthProvider
from kubeapi.config import Context
from kubeapi.errors import DecodeError
from kubeapi.events.objects import WatchEvent, parse_watch_event
from kubeapi.model.api_resource import Pods, Resource
from kubeapi.pods import PodResourceClient
from kubeapi.request import CONTENT_TYPE_JSON, Request, join_url
from kubeapi.resource_client import ResourceClient
from kubeapi.response import (
    Decoder,
    Response,
    decode_http_response,
    decode_response,
    decode_value,
)
from kubeapi.tools.resplit import split_lines
from kubeapi.tools.streams import AsyncStream
from kubeapi.transport import AiohttpTransport, HttpRequest, Transport

T = TypeVar("T")


def identity(value: Any) -> Any:
    return value


class ApiClient:
    """
    A handle on one api server: its base url and the transport to reach it.
    Holds no per-call state, so one instance can be shared by any number of
    concurrent tasks.
    """

    def __init__(self, *, transport: Transport, base_url: str, logger=None) -> None:
        self.transport = transport
        self.base_url = base_url
        self.logger = logger or logging.getLogger("client")

    def __repr__(self) -> str:
        return "<%s base_url=%r>" % (self.__class__.__name__, self.base_url)

    @classmethod
    def create(
        cls,
        *,
        context: Context,
        session: ClientSession,
        timeout: Optional[ClientTimeout] = None,
        stream_timeout: Optional[ClientTimeout] = None,
        logger=None,
    ) -> "ApiClient":
        transport = AiohttpTransport(
            session=session,
            ssl_context=context.create_ssl_context(),
            auth_provider=AuthProvider(context),
            timeout=timeout,
            stream_timeout=stream_timeout,
        )

        return cls(transport=transport, base_url=context.cluster.server, logger=logger)

    def resource(self, res: Resource) -> ResourceClient:
        return ResourceClient(api_client=self, resource=res)

    def pods(self) -> PodResourceClient:
        return PodResourceClient(api_client=self, resource=Pods)

    async def request(self, req: Request, decode: Decoder = identity) -> Response:
        http_request = req.to_http_request(self.base_url)

        self.logger.debug("Sending %s %s", http_request.method, http_request.url)
        http_response = await self.transport.request(http_request)

        return decode_http_response(http_response, decode)

    async def get_path(self, path: str, decode: Decoder = identity) -> Response:
        "GET on an arbitrary path of the server, e.g. /apis for discovery"

        http_request = HttpRequest(
            method="GET",
            url=join_url(self.base_url, path),
            headers={"Accept": CONTENT_TYPE_JSON},
        )

        self.logger.debug("Sending GET %s", http_request.url)
        http_response = await self.transport.request(http_request)

        return decode_http_response(http_response, decode)

    async def _iter_lines(
        self, http_request: HttpRequest
    ) -> AsyncGenerator[bytes, None]:
        async with self.transport.stream(http_request) as response:
            if not 200 <= response.status < 300:
                body = await response.read()
                # always raises for a failed status
                decode_response(response.status, response.headers, body, identity)

            lines = split_lines(response.iter_chunks())
            try:
                async for line in lines:
                    yield line
            finally:
                await lines.aclose()

        self.logger.debug("Stream %s ended", http_request.url)

    def stream_lines(self, req: Request) -> AsyncStream[bytes]:
        "Streams the response body line by line, e.g. followed pod logs"

        http_request = req.to_http_request(self.base_url)
        return AsyncStream(self._iter_lines(http_request), name=req.url_path())

    async def _iter_events(
        self, http_request: HttpRequest, decode_item: Callable[[Any], T]
    ) -> AsyncGenerator[WatchEvent[T], None]:
        lines = self._iter_lines(http_request)

        # closing the line stream is what releases the connection
        try:
            async for line in lines:
                if not line.strip():
                    continue

                text = line.decode("utf-8", errors="replace")
                try:
                    dct = json.loads(text)
                except ValueError as exc:
                    raise DecodeError.from_json_error(exc, text) from exc

                event = decode_value(
                    dct, lambda value: parse_watch_event(value, decode_item), line
                )

                self.logger.debug(
                    "Received %s event on %s", event.type.value, http_request.url
                )
                yield event
        finally:
            await lines.aclose()

    def watch(
        self, req: Request, decode_item: Callable[[Any], T] = identity
    ) -> AsyncStream[WatchEvent[T]]:
        http_request = req.to_http_request(self.base_url)
        gen = self._iter_events(http_request, decode_item)
        return AsyncStream(gen, name=req.url_path())
