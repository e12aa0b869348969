from typing import Any, List, Optional, Tuple, Type

from kubeapi.errors import DecodeError, ScopeError, TypeMetaError
from kubeapi.model.api_group import ApiGroup, AppsV1, CoreV1
from kubeapi.model.group_version import GroupVersionResource
from kubeapi.model.object_model import unstructured
from kubeapi.model.object_model.base import ItemList, ObjectWrapper
from kubeapi.model.object_model.kinds import (
    ConfigMap,
    ConfigMapList,
    Deployment,
    DeploymentList,
    Namespace,
    NamespaceList,
    Node,
    NodeList,
    Pod,
    PodList,
    Service,
    ServiceList,
)
from kubeapi.model.object_model.meta import ListMeta, ObjectMeta
from kubeapi.model.scope import ClusterScope, NamespaceScope, ResourceScope


class Resource:
    """
    Everything the resource client needs to know about a kind: where it lives
    (gvr), which scopes are legal for it and how its items and lists are
    decoded and encoded.

    Subclasses must override every method that raises NotImplementedError.
    """

    group: ApiGroup
    kind: str
    name: str
    singular: str
    namespaced: Optional[bool]

    @property
    def plural(self) -> str:
        return self.name

    @property
    def gvr(self) -> GroupVersionResource:
        return self.group.resource(self.name)

    @property
    def qualified_name(self) -> str:
        return f"{self.name}.{self.group.name}"

    @property
    def scope_types(self) -> Tuple[Type[ResourceScope], ...]:
        if self.namespaced is None:
            return (NamespaceScope, ClusterScope)
        if self.namespaced:
            return (NamespaceScope,)
        return (ClusterScope,)

    def check_scope(self, scope: ResourceScope) -> None:
        if not isinstance(scope, self.scope_types):
            raise ScopeError(
                "%s is not a valid scope for %s" % (scope, self.qualified_name)
            )

    def decode_item(self, value: Any) -> Any:
        raise NotImplementedError

    def encode_item(self, item: Any) -> Any:
        raise NotImplementedError

    def decode_list(self, value: Any) -> Any:
        raise NotImplementedError

    def item_metadata(self, item: Any) -> ObjectMeta:
        raise NotImplementedError

    def list_metadata(self, lst: Any) -> ListMeta:
        raise NotImplementedError

    def list_items(self, lst: Any) -> List[Any]:
        raise NotImplementedError


class ApiResource(Resource):
    """Represents a REST resource with a typed object model."""

    def __init__(
        self,
        *,
        group: ApiGroup,
        kind: str,
        name: str,
        namespaced: bool,
        verbs: List[str],
        item_cls: Type[ObjectWrapper],
        list_cls: Type[ItemList],
    ) -> None:
        self.group = group
        self.kind = kind
        self.name = name
        self.singular = kind.lower()
        self.namespaced = namespaced
        self.verbs = verbs
        self.item_cls = item_cls
        self.list_cls = list_cls

    def __repr__(self) -> str:
        return "<%s group=%r, kind=%r, name=%r, namespaced=%r, verbs=%r>" % (
            self.__class__.__name__,
            self.group,
            self.kind,
            self.name,
            self.namespaced,
            self.verbs,
        )

    def decode_item(self, value: Any) -> ObjectWrapper:
        obj = unstructured.ensure_object(value, self.kind)
        try:
            return self.item_cls(obj)
        except TypeMetaError as exc:
            raise DecodeError(snippet=str(exc)) from exc

    def encode_item(self, item: ObjectWrapper) -> Any:
        if not isinstance(item, self.item_cls):
            raise TypeError("Expected %s, got %r" % (self.item_cls.__name__, item))
        return item.to_dict()

    def decode_list(self, value: Any) -> ItemList:
        obj = unstructured.ensure_object(value, self.list_cls.type_meta.kind)
        for item in unstructured.get_items(obj):
            unstructured.ensure_object(item, self.kind)
        try:
            return self.list_cls(obj)
        except TypeMetaError as exc:
            raise DecodeError(snippet=str(exc)) from exc

    def item_metadata(self, item: ObjectWrapper) -> ObjectMeta:
        return item.meta

    def list_metadata(self, lst: ItemList) -> ListMeta:
        return lst.metadata

    def list_items(self, lst: ItemList) -> List[ObjectWrapper]:
        return lst.items


class DynamicResource(Resource):
    """
    A resource only known at runtime, e.g. a custom resource or something
    found through discovery. Items and lists stay plain json dicts.
    """

    def __init__(
        self,
        *,
        group: ApiGroup,
        kind: str,
        name: str,
        singular: Optional[str] = None,
        namespaced: Optional[bool] = None,
        verbs: Optional[List[str]] = None,
    ) -> None:
        self.group = group
        self.kind = kind
        self.name = name
        self.singular = singular or kind.lower()
        # None means unknown, in which case any scope is accepted
        self.namespaced = namespaced
        self.verbs = verbs or []

    def __repr__(self) -> str:
        return "<%s group=%r, kind=%r, name=%r, namespaced=%r>" % (
            self.__class__.__name__,
            self.group,
            self.kind,
            self.name,
            self.namespaced,
        )

    def decode_item(self, value: Any) -> dict:
        obj = unstructured.ensure_object(value, self.kind)

        # list items may leave out their kind
        kind = unstructured.get_kind(obj)
        if kind is not None and kind != self.kind:
            raise DecodeError(
                snippet="expected %s %s, got %s %s"
                % (
                    self.group.api_version,
                    self.kind,
                    unstructured.get_api_version(obj),
                    kind,
                )
            )

        return obj

    def encode_item(self, item: dict) -> Any:
        return unstructured.ensure_object(item, self.kind)

    def decode_list(self, value: Any) -> dict:
        obj = unstructured.ensure_object(value, "%sList" % self.kind)
        unstructured.get_items(obj)
        return obj

    def item_metadata(self, item: dict) -> ObjectMeta:
        return unstructured.get_metadata(item)

    def list_metadata(self, lst: dict) -> ListMeta:
        return unstructured.get_list_metadata(lst)

    def list_items(self, lst: dict) -> List[dict]:
        return [self.decode_item(item) for item in unstructured.get_items(lst)]


Namespaces = ApiResource(
    group=CoreV1,
    kind="Namespace",
    name="namespaces",
    namespaced=False,
    verbs=["create", "delete", "get", "list", "patch", "update", "watch"],
    item_cls=Namespace,
    list_cls=NamespaceList,
)
Nodes = ApiResource(
    group=CoreV1,
    kind="Node",
    name="nodes",
    namespaced=False,
    verbs=["create", "delete", "get", "list", "patch", "update", "watch"],
    item_cls=Node,
    list_cls=NodeList,
)
Pods = ApiResource(
    group=CoreV1,
    kind="Pod",
    name="pods",
    namespaced=True,
    verbs=[
        "create",
        "delete",
        "deletecollection",
        "get",
        "list",
        "patch",
        "update",
        "watch",
    ],
    item_cls=Pod,
    list_cls=PodList,
)
Services = ApiResource(
    group=CoreV1,
    kind="Service",
    name="services",
    namespaced=True,
    verbs=["create", "delete", "get", "list", "patch", "update", "watch"],
    item_cls=Service,
    list_cls=ServiceList,
)
ConfigMaps = ApiResource(
    group=CoreV1,
    kind="ConfigMap",
    name="configmaps",
    namespaced=True,
    verbs=[
        "create",
        "delete",
        "deletecollection",
        "get",
        "list",
        "patch",
        "update",
        "watch",
    ],
    item_cls=ConfigMap,
    list_cls=ConfigMapList,
)
Deployments = ApiResource(
    group=AppsV1,
    kind="Deployment",
    name="deployments",
    namespaced=True,
    verbs=[
        "create",
        "delete",
        "deletecollection",
        "get",
        "list",
        "patch",
        "update",
        "watch",
    ],
    item_cls=Deployment,
    list_cls=DeploymentList,
)
