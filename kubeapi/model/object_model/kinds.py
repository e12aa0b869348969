from typing import Dict, Optional

from kubeapi.model.object_model.base import ItemList, ObjectWrapper, TypeMeta
from kubeapi.model.object_model.status import (
    DeploymentStatus,
    NamespaceStatus,
    ObjectStatus,
    PodStatus,
)
from kubeapi.model.object_model.types import RawObject
from kubeapi.model.options import DeleteOptions


class Namespace(ObjectWrapper):
    type_meta = TypeMeta(api_version="v1", kind="Namespace")
    _status_cls = NamespaceStatus


class Node(ObjectWrapper):
    type_meta = TypeMeta(api_version="v1", kind="Node")
    _status_cls = ObjectStatus

    @property
    def unschedulable(self) -> bool:
        return bool((self.raw.get("spec") or {}).get("unschedulable"))


class Pod(ObjectWrapper):
    type_meta = TypeMeta(api_version="v1", kind="Pod")
    _status_cls = PodStatus

    # help mypy a bit here
    status: Optional[PodStatus]

    @property
    def node_name(self) -> Optional[str]:
        return (self.raw.get("spec") or {}).get("nodeName")

    @property
    def container_names(self):
        containers = (self.raw.get("spec") or {}).get("containers") or []
        return [cont["name"] for cont in containers]


class Service(ObjectWrapper):
    type_meta = TypeMeta(api_version="v1", kind="Service")


class ConfigMap(ObjectWrapper):
    type_meta = TypeMeta(api_version="v1", kind="ConfigMap")

    @property
    def data(self) -> Dict[str, str]:
        return self.raw.get("data") or {}


class DeploymentSpec:
    """
    View of a deployment's spec with the server side defaults applied to the
    fields that were left out.
    """

    def __init__(self, obj: RawObject) -> None:
        self._spec: RawObject = obj.get("spec") or {}

        self.replicas: int = self._spec.get("replicas", 1)
        self.revisionHistoryLimit: int = self._spec.get("revisionHistoryLimit", 10)
        self.progressDeadlineSeconds: int = self._spec.get(
            "progressDeadlineSeconds", 600
        )
        self.minReadySeconds: int = self._spec.get("minReadySeconds", 0)
        self.paused: bool = self._spec.get("paused", False)
        self.selector: RawObject = self._spec.get("selector") or {}
        self.template: RawObject = self._spec.get("template") or {}
        self.strategy: RawObject = self._spec.get("strategy") or {
            "type": "RollingUpdate",
            "rollingUpdate": {"maxSurge": "25%", "maxUnavailable": "25%"},
        }


class Deployment(ObjectWrapper):
    type_meta = TypeMeta(api_version="apps/v1", kind="Deployment")
    _status_cls = DeploymentStatus

    @property
    def spec(self) -> DeploymentSpec:
        return DeploymentSpec(self.raw)


class Eviction(ObjectWrapper):
    """
    Posted to a pod's eviction subresource to delete it while honouring its
    disruption budget.
    """

    type_meta = TypeMeta(api_version="policy/v1", kind="Eviction")

    @classmethod
    def create(
        cls,
        *,
        namespace: str,
        name: str,
        delete_options: Optional[DeleteOptions] = None,
    ) -> "Eviction":
        obj: RawObject = {"metadata": {"namespace": namespace, "name": name}}
        if delete_options is not None:
            obj["deleteOptions"] = delete_options.to_body()
        return cls(obj)


class NamespaceList(ItemList[Namespace]):
    item_cls = Namespace


class NodeList(ItemList[Node]):
    item_cls = Node


class PodList(ItemList[Pod]):
    item_cls = Pod


class ServiceList(ItemList[Service]):
    item_cls = Service


class ConfigMapList(ItemList[ConfigMap]):
    item_cls = ConfigMap


class DeploymentList(ItemList[Deployment]):
    item_cls = Deployment
