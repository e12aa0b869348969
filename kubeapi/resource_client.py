import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Optional

from kubeapi.errors import ScopeError
from kubeapi.events.objects import WatchEvent
from kubeapi.model.api_resource import Resource
from kubeapi.model.api_status import Status
from kubeapi.model.options import (
    CreateOptions,
    DeleteOptions,
    GetOptions,
    ListOptions,
    PatchOptions,
    UpdateOptions,
)
from kubeapi.model.scope import ResourceScope
from kubeapi.request import Patch, Request, RequestBuilder
from kubeapi.tools.logs import CtxLogger
from kubeapi.tools.streams import AsyncStream

if TYPE_CHECKING:
    from kubeapi.client import ApiClient


class ResourceClient:
    """
    get/create/update/patch/delete/list/iterate/watch for one kind of
    resource. Typed resources hand out ObjectWrapper instances, dynamic ones
    plain dicts.

    Nothing is retried here: errors reach the caller as they happened and it
    is up to the caller to decide whether a retry is safe.
    """

    def __init__(
        self, *, api_client: "ApiClient", resource: Resource, logger=None
    ) -> None:
        self.api_client = api_client
        self.resource = resource
        self.logger = logger or logging.getLogger("resource-client")

    def __repr__(self) -> str:
        return "<%s resource=%r>" % (self.__class__.__name__, self.resource)

    # Logging

    def get_ctx_logger(self, scope: ResourceScope) -> CtxLogger:
        return CtxLogger(
            logger=self.logger,
            extra={"resource": self.resource.qualified_name, "scope": scope.pretty()},
            prefix="[%(resource)s] [%(scope)s] ",
        )

    # Scope checks

    def check_named(self, scope: ResourceScope, verb: str) -> None:
        self.resource.check_scope(scope)

        if scope.is_collection():
            raise ScopeError("%s needs a named scope, got %r" % (verb, scope))

    def check_collection(self, scope: ResourceScope, verb: str) -> None:
        self.resource.check_scope(scope)

        if not scope.is_collection():
            raise ScopeError("%s needs a collection scope, got %r" % (verb, scope))

    def scope_of(self, item: Any, *, named: bool) -> ResourceScope:
        "Works out where an item lives from its own metadata"

        meta = self.resource.item_metadata(item)

        if named and not meta.name:
            raise ScopeError("%s has no metadata.name" % self.resource.kind)

        name = meta.name if named else None
        namespaced = self.resource.namespaced

        if namespaced and not meta.namespace:
            raise ScopeError("%s has no metadata.namespace" % self.resource.kind)

        if namespaced is False and meta.namespace:
            raise ScopeError(
                "%s is not namespaced but has metadata.namespace %r"
                % (self.resource.kind, meta.namespace)
            )

        # scope types are picked by what the item carries for dynamic kinds
        for scope_cls in self.resource.scope_types:
            if scope_cls.namespaced == bool(meta.namespace):
                if scope_cls.namespaced:
                    return scope_cls(namespace=meta.namespace, name=name)
                return scope_cls(name=name)

        raise ScopeError("No scope for %s" % self.resource.kind)

    def request_builder(self, scope: ResourceScope) -> RequestBuilder:
        return Request.builder(self.resource.gvr).scope(scope)

    # Decoding

    def decode_deleted(self, value: Any) -> Any:
        # nothing, a Status or the object that is now being deleted
        if value is None:
            return None

        if isinstance(value, dict) and value.get("kind") == "Status":
            return Status.from_dict(value)

        return self.resource.decode_item(value)

    # Operations

    async def get(self, scope: ResourceScope, opts: Optional[GetOptions] = None):
        self.check_named(scope, "get")
        log = self.get_ctx_logger(scope)

        req = self.request_builder(scope).opts(opts or GetOptions()).build()

        log.info("Getting %s on %s", self.resource.kind, req.url_path())
        response = await self.api_client.request(req, self.resource.decode_item)
        return response.body

    async def create(self, item: Any, opts: Optional[CreateOptions] = None):
        scope = self.scope_of(item, named=False)
        log = self.get_ctx_logger(scope)

        req = (
            self.request_builder(scope)
            .method("POST")
            .opts(opts or CreateOptions())
            .body(self.resource.encode_item(item))
            .build()
        )

        log.info("Creating %s on %s", self.resource.kind, req.url_path())
        response = await self.api_client.request(req, self.resource.decode_item)
        return response.body

    async def update(self, item: Any, opts: Optional[UpdateOptions] = None):
        scope = self.scope_of(item, named=True)
        log = self.get_ctx_logger(scope)

        req = (
            self.request_builder(scope)
            .method("PUT")
            .opts(opts or UpdateOptions())
            .body(self.resource.encode_item(item))
            .build()
        )

        log.info("Updating %s on %s", self.resource.kind, req.url_path())
        response = await self.api_client.request(req, self.resource.decode_item)
        return response.body

    async def patch(
        self,
        scope: ResourceScope,
        patch: Patch,
        opts: Optional[PatchOptions] = None,
    ):
        self.check_named(scope, "patch")
        log = self.get_ctx_logger(scope)

        req = (
            self.request_builder(scope)
            .method("PATCH")
            .opts(opts or PatchOptions())
            .patch(patch)
            .build()
        )

        log.info(
            "Patching %s on %s with %s",
            self.resource.kind,
            req.url_path(),
            patch.content_type,
        )
        response = await self.api_client.request(req, self.resource.decode_item)
        return response.body

    async def delete(
        self, scope: ResourceScope, opts: Optional[DeleteOptions] = None
    ):
        self.check_named(scope, "delete")
        log = self.get_ctx_logger(scope)

        req = (
            self.request_builder(scope)
            .method("DELETE")
            .opts(opts or DeleteOptions())
            .build()
        )

        log.info("Deleting %s on %s", self.resource.kind, req.url_path())
        response = await self.api_client.request(req, self.decode_deleted)
        return response.body

    async def list(self, scope: ResourceScope, opts: Optional[ListOptions] = None):
        self.check_collection(scope, "list")
        log = self.get_ctx_logger(scope)

        req = self.request_builder(scope).opts(opts or ListOptions()).build()

        log.info("Listing %s objects on %s", self.resource.kind, req.url_path())
        response = await self.api_client.request(req, self.resource.decode_list)
        return response.body

    async def _iterate(
        self, scope: ResourceScope, opts: ListOptions
    ) -> AsyncIterator[Any]:
        log = self.get_ctx_logger(scope)

        page_opts = opts
        pages = 0

        while True:
            page = await self.list(scope, page_opts)
            pages += 1

            items = self.resource.list_items(page)
            log.debug("Returning %s items from page %s", len(items), pages)
            for item in items:
                yield item

            # only the token decides, an empty page may still have a successor
            token = self.resource.list_metadata(page).continue_
            if not token:
                log.debug("No continue token after page %s, done", pages)
                return

            page_opts = opts.replace(continue_=token)

    def iterate(
        self, scope: ResourceScope, opts: Optional[ListOptions] = None
    ) -> AsyncStream[Any]:
        "Every item of the collection, fetched page by page as they are consumed"

        self.check_collection(scope, "iterate")

        gen = self._iterate(scope, opts or ListOptions())
        return AsyncStream(gen, name=f"iterate {self.resource.qualified_name}")

    def watch(
        self, scope: ResourceScope, opts: Optional[ListOptions] = None
    ) -> AsyncStream[WatchEvent[Any]]:
        """
        Change events for the collection until the server closes the stream.
        Pass the resourceVersion of a previous list (or of the last event seen)
        to pick up from there.
        """

        self.check_collection(scope, "watch")
        log = self.get_ctx_logger(scope)

        opts = (opts or ListOptions()).replace(watch=True)
        req = self.request_builder(scope).opts(opts).build()

        log.info("Watching %s objects on %s", self.resource.kind, req.url_path())
        return self.api_client.watch(req, self.resource.decode_item)
