import logging
from contextlib import asynccontextmanager
from ssl import SSLContext
from typing import AsyncIterator, Mapping, Optional, Union

from aiohttp import ClientResponse, ClientSession, ClientTimeout
from multidict import CIMultiDict, CIMultiDictProxy

from kubeapi.auth import AuthProvider

Headers = Union[CIMultiDict, CIMultiDictProxy]


class HttpRequest:
    def __init__(
        self,
        *,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
    ) -> None:
        self.method = method
        self.url = url
        self.headers = CIMultiDict(headers or {})
        self.body = body

    def __repr__(self) -> str:
        return "<%s method=%r, url=%r, body=[%s bytes]>" % (
            self.__class__.__name__,
            self.method,
            self.url,
            len(self.body),
        )


class HttpResponse:
    def __init__(self, *, status: int, headers: Headers, body: bytes) -> None:
        self.status = status
        self.headers = headers
        self.body = body

    def __repr__(self) -> str:
        return "<%s status=%r, content_type=%r, body=[%s bytes]>" % (
            self.__class__.__name__,
            self.status,
            self.headers.get("Content-Type"),
            len(self.body),
        )


class StreamingHttpResponse:
    "A response whose body is consumed as it arrives"

    def __init__(self, *, status: int, headers: Headers) -> None:
        self.status = status
        self.headers = headers

    def __repr__(self) -> str:
        return "<%s status=%r, content_type=%r>" % (
            self.__class__.__name__,
            self.status,
            self.headers.get("Content-Type"),
        )

    def iter_chunks(self) -> AsyncIterator[bytes]:
        raise NotImplementedError

    async def read(self) -> bytes:
        "Reads the remaining body in one go"

        chunks = [chunk async for chunk in self.iter_chunks()]
        return b"".join(chunks)


class Transport:
    """
    Sends rendered requests. `request` buffers the whole response body,
    `stream` hands out the body chunk by chunk and is meant for watches and
    followed logs:

        async with transport.stream(req) as response:
            async for chunk in response.iter_chunks():
                ...

    The connection is released when the context exits, whether or not the
    body was read to the end.

    Subclasses must override both methods.
    """

    async def request(self, req: HttpRequest) -> HttpResponse:
        raise NotImplementedError

    def stream(self, req: HttpRequest):
        raise NotImplementedError


class AiohttpStreamingResponse(StreamingHttpResponse):
    def __init__(self, response: ClientResponse) -> None:
        super().__init__(status=response.status, headers=response.headers)

        self._response = response

    def iter_chunks(self) -> AsyncIterator[bytes]:
        return self._response.content.iter_any()


class AiohttpTransport(Transport):
    """
    Transport on top of a caller owned aiohttp session. Transport level
    errors (aiohttp.ClientError, asyncio.TimeoutError) are raised unchanged.
    """

    def __init__(
        self,
        *,
        session: ClientSession,
        ssl_context: Optional[SSLContext] = None,
        auth_provider: Optional[AuthProvider] = None,
        timeout: Optional[ClientTimeout] = None,
        stream_timeout: Optional[ClientTimeout] = None,
        logger=None,
    ) -> None:
        self.session = session
        self.ssl_context = ssl_context
        self.auth_provider = auth_provider
        self.logger = logger or logging.getLogger("transport")

        # no total deadline by default: list pages can be large and watches
        # are meant to stay open until the server closes them
        self.timeout = timeout or ClientTimeout(sock_connect=3, total=None)
        self.stream_timeout = stream_timeout or ClientTimeout(
            sock_connect=3, total=None
        )

    def get_kwargs(self, req: HttpRequest, timeout: ClientTimeout):
        headers = CIMultiDict(req.headers)

        if self.auth_provider is not None:
            headers.update(self.auth_provider.get_headers())

        kwargs = dict(
            headers=headers,
            timeout=timeout,
            allow_redirects=True,
        )

        if self.ssl_context is not None:
            kwargs["ssl"] = self.ssl_context

        if req.body:
            kwargs["data"] = req.body

        return kwargs

    async def request(self, req: HttpRequest) -> HttpResponse:
        kwargs = self.get_kwargs(req, self.timeout)

        self.logger.debug("Sending %s %s", req.method, req.url)
        async with self.session.request(req.method, req.url, **kwargs) as response:
            body = await response.read()

            self.logger.debug(
                "Received %s [len: %s] for %s %s",
                response.status,
                len(body),
                req.method,
                req.url,
            )
            return HttpResponse(
                status=response.status, headers=response.headers, body=body
            )

    @asynccontextmanager
    async def stream(self, req: HttpRequest):
        kwargs = self.get_kwargs(req, self.stream_timeout)

        self.logger.debug("Opening stream %s %s", req.method, req.url)
        async with self.session.request(req.method, req.url, **kwargs) as response:
            self.logger.debug(
                "Stream %s %s opened: %s", req.method, req.url, response.status
            )

            try:
                yield AiohttpStreamingResponse(response)
            finally:
                # abort rather than drain whatever the server still has to send
                if not response.content.at_eof():
                    response.close()

        self.logger.debug("Stream %s %s closed", req.method, req.url)
