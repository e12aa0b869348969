import json
from typing import Any, Optional
from urllib.parse import urlsplit

from kubeapi.errors import RequestBuildError
from kubeapi.model.group_version import GroupVersionResource
from kubeapi.model.options import QueryParams, encode_query
from kubeapi.model.scope import ResourceScope
from kubeapi.transport import HttpRequest

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_JSON_PATCH = "application/json-patch+json"
CONTENT_TYPE_MERGE_PATCH = "application/merge-patch+json"
CONTENT_TYPE_STRATEGIC_MERGE_PATCH = "application/strategic-merge-patch+json"


class Patch:
    "A patch document together with the dialect it is written in"

    content_type: str

    def __init__(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return "%s(%r)" % (self.__class__.__name__, self.value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Patch):
            return NotImplemented
        return (self.content_type, self.value) == (other.content_type, other.value)


class JsonPatch(Patch):
    """
    RFC 6902, a list of operations:

        JsonPatch([{"op": "replace", "path": "/spec/replicas", "value": 3}])
    """

    content_type = CONTENT_TYPE_JSON_PATCH


class MergePatch(Patch):
    "RFC 7386, a partial object where null deletes a key"

    content_type = CONTENT_TYPE_MERGE_PATCH


class StrategicMergePatch(Patch):
    content_type = CONTENT_TYPE_STRATEGIC_MERGE_PATCH


def url_path(
    gvr: GroupVersionResource,
    namespace: Optional[str] = None,
    name: Optional[str] = None,
    subresource: Optional[str] = None,
    opts: QueryParams = None,
) -> str:
    """
    /api[s][/group]/version[/namespaces/ns]/resource[/name][/sub][?query]
    """

    segments = [gvr.url_prefix()]

    if namespace is not None:
        segments.extend(["namespaces", namespace])

    segments.append(gvr.resource)

    if name is not None:
        segments.append(name)

    if subresource is not None:
        segments.append(subresource)

    path = "/".join(segments)

    query = encode_query(opts)
    if query:
        path = f"{path}?{query}"

    return path


def join_url(base_url: str, path: str) -> str:
    parts = urlsplit(base_url)
    if (
        parts.scheme not in ("http", "https")
        or not parts.netloc
        or parts.query
        or parts.fragment
    ):
        raise RequestBuildError("Cannot build request on base url %r" % base_url)

    return base_url.rstrip("/") + path


class Request:
    def __init__(
        self,
        *,
        gvr: GroupVersionResource,
        namespace: Optional[str] = None,
        name: Optional[str] = None,
        subresource: Optional[str] = None,
        method: str = "GET",
        opts: QueryParams = None,
        content_type: Optional[str] = None,
        body: Any = None,
    ) -> None:
        self.gvr = gvr
        self.namespace = namespace
        self.name = name
        self.subresource = subresource
        self.method = method
        self.opts = opts
        self.content_type = content_type
        self.body = body

    def __repr__(self) -> str:
        return "<%s method=%r, path=%r, content_type=%r>" % (
            self.__class__.__name__,
            self.method,
            self.url_path(),
            self.content_type,
        )

    @classmethod
    def builder(cls, gvr: GroupVersionResource) -> "RequestBuilder":
        return RequestBuilder(gvr)

    def url_path(self) -> str:
        return url_path(
            self.gvr, self.namespace, self.name, self.subresource, self.opts
        )

    def encode_body(self) -> bytes:
        # without a content type there is no body, whatever was set
        if self.content_type is None:
            return b""

        return json.dumps(self.body, separators=(",", ":")).encode()

    def to_http_request(self, base_url: str) -> HttpRequest:
        url = join_url(base_url, self.url_path())

        headers = {"Accept": CONTENT_TYPE_JSON}
        if self.content_type is not None:
            headers["Content-Type"] = self.content_type

        try:
            body = self.encode_body()
        except (TypeError, ValueError) as exc:
            raise RequestBuildError("Cannot encode request body: %s" % exc) from exc

        return HttpRequest(
            method=self.method,
            url=url,
            headers=headers,
            body=body,
        )


class RequestBuilder:
    """
    Accumulates the parts of a Request. The methods can be chained in any
    order:

        req = (
            Request.builder(Pods.gvr)
            .scope(NamespaceScope.named("default", "nginx"))
            .subresource("eviction")
            .method("POST")
            .body(eviction.to_dict())
            .build()
        )
    """

    def __init__(self, gvr: GroupVersionResource) -> None:
        self._gvr = gvr
        self._namespace: Optional[str] = None
        self._name: Optional[str] = None
        self._subresource: Optional[str] = None
        self._method = "GET"
        self._opts: QueryParams = None
        self._content_type: Optional[str] = None
        self._body: Any = None

    def scope(self, scope: ResourceScope) -> "RequestBuilder":
        self._namespace = scope.namespace
        self._name = scope.name
        return self

    def namespace(self, namespace: Optional[str]) -> "RequestBuilder":
        self._namespace = namespace
        return self

    def name(self, name: Optional[str]) -> "RequestBuilder":
        self._name = name
        return self

    def subresource(self, subresource: Optional[str]) -> "RequestBuilder":
        self._subresource = subresource
        return self

    def method(self, method: str) -> "RequestBuilder":
        self._method = method
        return self

    def opts(self, opts: QueryParams) -> "RequestBuilder":
        self._opts = opts
        return self

    def body(
        self, value: Any, content_type: str = CONTENT_TYPE_JSON
    ) -> "RequestBuilder":
        self._body = value
        self._content_type = content_type
        return self

    def patch(self, patch: Patch) -> "RequestBuilder":
        return self.body(patch.value, patch.content_type)

    def build(self) -> Request:
        return Request(
            gvr=self._gvr,
            namespace=self._namespace,
            name=self._name,
            subresource=self._subresource,
            method=self._method,
            opts=self._opts,
            content_type=self._content_type,
            body=self._body,
        )
