import copy
from typing import Any, ClassVar, Generic, List, NamedTuple, Optional, Type, TypeVar

from kubeapi.errors import TypeMetaError
from kubeapi.model.object_model.meta import ListMeta, ObjectMeta
from kubeapi.model.object_model.types import RawObject


class TypeMeta(NamedTuple):
    api_version: str
    kind: str


def check_type_meta(obj: RawObject, expected: TypeMeta) -> None:
    """
    Both apiVersion and kind present: they must match. Neither present: the
    object is assumed to be of the expected type. Only one of them: error.
    """

    api_version = obj.get("apiVersion")
    kind = obj.get("kind")

    if api_version is None and kind is None:
        return

    if api_version is None:
        raise TypeMetaError("missing field `apiVersion` on %s" % expected.kind)

    if kind is None:
        raise TypeMetaError("missing field `kind` on %s" % expected.kind)

    if (api_version, kind) != (expected.api_version, expected.kind):
        raise TypeMetaError(
            "expected %s %s, got %s %s"
            % (expected.api_version, expected.kind, api_version, kind)
        )


class ObjectWrapper:
    """
    Wraps the json of a single kube object. The raw dict stays the source of
    truth, the attributes below are views built from it on access.
    """

    type_meta: ClassVar[TypeMeta]

    _meta_cls = ObjectMeta
    _status_cls: Optional[Type[Any]] = None

    def __init__(self, obj: Optional[RawObject] = None) -> None:
        obj = dict(obj or {})

        # make sure we are wrapping what we think we're wrapping
        check_type_meta(obj, self.type_meta)

        obj["apiVersion"] = self.type_meta.api_version
        obj["kind"] = self.type_meta.kind
        self.raw: RawObject = obj

    def __repr__(self) -> str:
        return "<%s namespace=%r, name=%r>" % (
            self.__class__.__name__,
            self.meta.namespace,
            self.meta.name,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, ObjectWrapper):
            return NotImplemented
        return self.raw == other.raw

    @property
    def apiVersion(self) -> str:
        return self.type_meta.api_version

    @property
    def kind(self) -> str:
        return self.type_meta.kind

    @property
    def meta(self) -> ObjectMeta:
        return self._meta_cls(self.raw)

    @property
    def status(self):
        if self._status_cls is None or "status" not in self.raw:
            return None
        return self._status_cls(self.raw)

    @classmethod
    def from_dict(cls, obj: RawObject):
        return cls(obj)

    def to_dict(self) -> RawObject:
        return copy.deepcopy(self.raw)


T = TypeVar("T", bound=ObjectWrapper)


class ItemList(Generic[T]):
    """
    A list response, e.g. PodList. Subclasses only name their item class,
    the list's TypeMeta is derived from it once when the class is defined.
    """

    item_cls: ClassVar[Type[ObjectWrapper]]
    type_meta: ClassVar[TypeMeta]

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)

        item_meta = cls.item_cls.type_meta
        cls.type_meta = TypeMeta(
            api_version=item_meta.api_version, kind=f"{item_meta.kind}List"
        )

    def __init__(self, obj: Optional[RawObject] = None) -> None:
        obj = dict(obj or {})

        check_type_meta(obj, self.type_meta)

        obj["apiVersion"] = self.type_meta.api_version
        obj["kind"] = self.type_meta.kind
        self.raw: RawObject = obj

        self.metadata = ListMeta(obj)
        self.items: List[T] = [
            self.item_cls(item) for item in obj.get("items") or []  # type: ignore
        ]

    def __repr__(self) -> str:
        return "<%s items=%s, continue=%r>" % (
            self.__class__.__name__,
            len(self.items),
            self.metadata.continue_,
        )

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @property
    def kind(self) -> str:
        return self.type_meta.kind
