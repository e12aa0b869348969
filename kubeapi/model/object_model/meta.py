from datetime import datetime
from typing import Any, Dict, List, Optional

from kubeapi.model.object_model.helpers import maybe_parse_date
from kubeapi.model.object_model.types import RawObject


class ObjectMeta:
    """
    Read-only view of an object's `metadata`. The resourceVersion is kept as
    the opaque string the server sent.
    """

    def __init__(self, obj: RawObject) -> None:
        self._meta: RawObject = obj.get("metadata") or {}

        self.name: Optional[str] = self._meta.get("name")
        self.generateName: Optional[str] = self._meta.get("generateName")
        self.namespace: Optional[str] = self._meta.get("namespace")
        self.uid: Optional[str] = self._meta.get("uid")
        self.resourceVersion: Optional[str] = self._meta.get("resourceVersion")
        self.generation: Optional[int] = self._meta.get("generation")
        self.selfLink: Optional[str] = self._meta.get("selfLink")

        self.labels: Dict[str, str] = self._meta.get("labels") or {}
        self.annotations: Dict[str, str] = self._meta.get("annotations") or {}
        self.finalizers: List[str] = self._meta.get("finalizers") or []
        self.ownerReferences: List[RawObject] = self._meta.get("ownerReferences") or []

        self.creationTimestamp: Optional[datetime] = maybe_parse_date(
            self._meta.get("creationTimestamp")
        )
        self.deletionTimestamp: Optional[datetime] = maybe_parse_date(
            self._meta.get("deletionTimestamp")
        )
        self.deletionGracePeriodSeconds: Optional[int] = self._meta.get(
            "deletionGracePeriodSeconds"
        )

    def __repr__(self) -> str:
        return "<%s namespace=%r, name=%r, resourceVersion=%r>" % (
            self.__class__.__name__,
            self.namespace,
            self.name,
            self.resourceVersion,
        )

    def is_terminating(self) -> bool:
        return self.deletionTimestamp is not None


class ListMeta:
    def __init__(self, obj: RawObject) -> None:
        self._meta: RawObject = obj.get("metadata") or {}

        self.resourceVersion: Optional[str] = self._meta.get("resourceVersion")
        self.selfLink: Optional[str] = self._meta.get("selfLink")
        self.remainingItemCount: Optional[int] = self._meta.get("remainingItemCount")

        # "continue" is a keyword
        self.continue_: Optional[str] = self._meta.get("continue")

    def __repr__(self) -> str:
        return "<%s resourceVersion=%r, continue=%r>" % (
            self.__class__.__name__,
            self.resourceVersion,
            self.continue_,
        )

    def has_more(self) -> bool:
        return bool(self.continue_)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._meta)
