import asyncio
import json

import pytest
from aiohttp import ClientSession, test_utils, web

from kubeapi.auth import AuthProvider
from kubeapi.client import ApiClient
from kubeapi.config import Cluster, Context, User
from kubeapi.errors import ApiError, HttpStatusError
from kubeapi.events.objects import EventType
from kubeapi.model.api_resource import Pods
from kubeapi.model.object_model.kinds import Pod
from kubeapi.model.options import PodLogOptions
from kubeapi.model.scope import NamespaceScope
from kubeapi.transport import AiohttpTransport, HttpRequest, Transport


def pod_json(name):
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": name, "namespace": "default", "resourceVersion": "1"},
    }


class FakeApiServer:
    "Just enough of an api server to exercise the aiohttp transport"

    def __init__(self) -> None:
        self.seen_headers = []
        self.watch_finished = asyncio.Event()

        self.app = web.Application()
        self.app.router.add_get("/api/v1/namespaces/default/pods", self.list_pods)
        self.app.router.add_get("/api/v1/namespaces/default/pods/{name}", self.get_pod)
        self.app.router.add_get(
            "/api/v1/namespaces/default/pods/{name}/log", self.get_log
        )

    async def get_pod(self, request):
        self.seen_headers.append(request.headers.copy())

        name = request.match_info["name"]
        if name == "gateway":
            return web.Response(status=502, text="<html>Bad Gateway</html>")

        if name != "web":
            status = {
                "kind": "Status",
                "apiVersion": "v1",
                "status": "Failure",
                "message": 'pods "%s" not found' % name,
                "reason": "NotFound",
                "code": 404,
            }
            return web.json_response(status, status=404)

        return web.json_response(pod_json("web"))

    async def list_pods(self, request):
        assert request.query["watch"] == "true"

        response = web.StreamResponse()
        response.content_type = "application/json"
        await response.prepare(request)

        for name in ("web", "db"):
            event = {"type": "ADDED", "object": pod_json(name)}
            await response.write(json.dumps(event).encode() + b"\n")

        # keep the watch open with blank lines until the client goes away
        try:
            for _ in range(100):
                await asyncio.sleep(0.02)
                await response.write(b"\n")
        except ConnectionResetError:
            pass
        finally:
            self.watch_finished.set()

        return response

    async def get_log(self, request):
        response = web.StreamResponse()
        response.content_type = "text/plain"
        await response.prepare(request)

        # line boundaries deliberately do not match write boundaries
        for chunk in (b"first li", b"ne\nsecond line\nthi", b"rd line"):
            await response.write(chunk)
            await asyncio.sleep(0.01)

        await response.write_eof()
        return response


def make_context(server: test_utils.TestServer) -> Context:
    url = "http://%s:%s" % (server.host, server.port)
    return Context(
        name="test",
        user=User(name="robot", token="s3cret"),
        cluster=Cluster(name="test", server=url),
    )


async def run_with_client(coro_fn):
    api_server = FakeApiServer()

    async with test_utils.TestServer(api_server.app) as server:
        context = make_context(server)

        async with ClientSession() as session:
            transport = AiohttpTransport(
                session=session, auth_provider=AuthProvider(context)
            )
            api_client = ApiClient(transport=transport, base_url=context.cluster.server)

            await coro_fn(api_server, api_client)


@pytest.mark.asyncio
async def test_get():
    async def check(api_server, api_client):
        pods = api_client.resource(Pods)
        pod = await pods.get(NamespaceScope.named("default", "web"))

        assert isinstance(pod, Pod)
        assert pod.meta.name == "web"

        headers = api_server.seen_headers[0]
        assert headers["Authorization"] == "Bearer s3cret"
        assert headers["Accept"] == "application/json"

    await run_with_client(check)


@pytest.mark.asyncio
async def test_error_status():
    async def check(api_server, api_client):
        pods = api_client.resource(Pods)

        with pytest.raises(ApiError) as exc_info:
            await pods.get(NamespaceScope.named("default", "nope"))
        assert exc_info.value.is_not_found()

        with pytest.raises(HttpStatusError) as exc_info:
            await pods.get(NamespaceScope.named("default", "gateway"))
        assert exc_info.value.status == 502
        assert "Bad Gateway" in exc_info.value.snippet

    await run_with_client(check)


@pytest.mark.asyncio
async def test_watch_closed_early():
    async def check(api_server, api_client):
        stream = api_client.resource(Pods).watch(NamespaceScope.in_namespace("default"))

        async with stream:
            async for event in stream:
                assert event.type == EventType.ADDED
                assert event.object.meta.name == "web"
                break

        # the server notices the connection went away long before its
        # heartbeats run out
        await asyncio.wait_for(api_server.watch_finished.wait(), timeout=1.5)

        # the session is still usable
        pods = api_client.resource(Pods)
        pod = await pods.get(NamespaceScope.named("default", "web"))
        assert pod.meta.name == "web"

    await run_with_client(check)


@pytest.mark.asyncio
async def test_read_log():
    async def check(api_server, api_client):
        stream = api_client.pods().read_log(
            NamespaceScope.named("default", "web"), PodLogOptions(follow=True)
        )

        lines = await stream.collect()

        assert lines == [b"first line\n", b"second line\n", b"third line"]

    await run_with_client(check)


@pytest.mark.asyncio
async def test_base_transport_must_be_overridden():
    req = HttpRequest(method="GET", url="https://kube.example.com/api/v1")

    with pytest.raises(NotImplementedError):
        await Transport().request(req)
    with pytest.raises(NotImplementedError):
        Transport().stream(req)
