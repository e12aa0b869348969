from typing import Optional

from kubeapi.model.api_status import Status
from kubeapi.model.object_model.kinds import Eviction
from kubeapi.model.options import CreateOptions, PodLogOptions
from kubeapi.model.scope import NamespaceScope
from kubeapi.resource_client import ResourceClient
from kubeapi.tools.streams import AsyncStream


def decode_eviction_result(value):
    # the server answers with a Status, older ones with nothing at all
    if value is None:
        return None

    if isinstance(value, dict) and value.get("kind") == "Status":
        return Status.from_dict(value)

    return Eviction(value)


class PodResourceClient(ResourceClient):
    "Pods plus their log and eviction subresources"

    def read_log(
        self, scope: NamespaceScope, opts: Optional[PodLogOptions] = None
    ) -> AsyncStream[bytes]:
        """
        Streams the pod's log line by line. With follow=True the stream stays
        open until the container exits or the stream is closed.
        """

        self.check_named(scope, "read_log")
        log = self.get_ctx_logger(scope)

        req = (
            self.request_builder(scope)
            .subresource("log")
            .opts(opts or PodLogOptions())
            .build()
        )

        log.info("Streaming pod logs on %s", req.url_path())
        return self.api_client.stream_lines(req)

    async def create_eviction(
        self,
        scope: NamespaceScope,
        eviction: Optional[Eviction] = None,
        opts: Optional[CreateOptions] = None,
    ):
        "Evicts the pod unless a disruption budget forbids it"

        self.check_named(scope, "create_eviction")
        log = self.get_ctx_logger(scope)

        if eviction is None:
            eviction = Eviction.create(namespace=scope.namespace, name=scope.name)

        req = (
            self.request_builder(scope)
            .subresource("eviction")
            .method("POST")
            .opts(opts or CreateOptions())
            .body(eviction.to_dict())
            .build()
        )

        log.info("Evicting pod on %s", req.url_path())
        response = await self.api_client.request(req, decode_eviction_result)
        return response.body
