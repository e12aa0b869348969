"""
Accessors for objects whose schema is only known at runtime. These work on
the plain json dicts and rely on the well known keys every kube object and
list carries: kind, apiVersion, metadata and items.
"""

from typing import List, Optional

from kubeapi.errors import SNIPPET_LENGTH, DecodeError
from kubeapi.model.object_model.meta import ListMeta, ObjectMeta
from kubeapi.model.object_model.types import RawObject


def ensure_object(value, what: str = "object") -> RawObject:
    if not isinstance(value, dict):
        snippet = "expected json %s, got %r" % (what, value)
        raise DecodeError(snippet=snippet[:SNIPPET_LENGTH])
    return value


def get_kind(obj: RawObject) -> Optional[str]:
    return obj.get("kind")


def get_api_version(obj: RawObject) -> Optional[str]:
    return obj.get("apiVersion")


def get_metadata(obj: RawObject) -> ObjectMeta:
    return ObjectMeta(obj)


def get_list_metadata(obj: RawObject) -> ListMeta:
    return ListMeta(obj)


def get_items(obj: RawObject) -> List[RawObject]:
    items = obj.get("items") or []
    if not isinstance(items, list):
        snippet = "expected json array for items, got %r" % (items,)
        raise DecodeError(snippet=snippet[:SNIPPET_LENGTH])
    return items
