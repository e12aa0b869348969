from datetime import datetime
from typing import List, Optional

from kubeapi.model.object_model.helpers import maybe_parse_date
from kubeapi.model.object_model.types import RawObject


class ContainerState:
    key: str

    def __init__(self, obj: RawObject) -> None:
        self._obj = obj


class ContainerStateRunning(ContainerState):
    key = "running"

    def __init__(self, obj: RawObject) -> None:
        super().__init__(obj)
        self.startedAt: Optional[datetime] = maybe_parse_date(obj.get("startedAt"))


class ContainerStateTerminated(ContainerState):
    key = "terminated"

    def __init__(self, obj: RawObject) -> None:
        super().__init__(obj)
        self.startedAt: Optional[datetime] = maybe_parse_date(obj.get("startedAt"))
        self.finishedAt: Optional[datetime] = maybe_parse_date(obj.get("finishedAt"))
        self.exitCode: Optional[int] = obj.get("exitCode")
        self.message: Optional[str] = obj.get("message")
        self.reason: Optional[str] = obj.get("reason")


class ContainerStateWaiting(ContainerState):
    key = "waiting"

    def __init__(self, obj: RawObject) -> None:
        super().__init__(obj)
        self.message: Optional[str] = obj.get("message")
        self.reason: Optional[str] = obj.get("reason")


def parse_container_state(obj: RawObject) -> Optional[ContainerState]:
    for cls in (ContainerStateRunning, ContainerStateTerminated, ContainerStateWaiting):
        if obj.get(cls.key) is not None:
            return cls(obj[cls.key])

    return None


class ContainerStatus:
    def __init__(self, obj: RawObject) -> None:
        self.name: str = obj["name"]
        self.ready: bool = obj.get("ready", False)
        self.restartCount: int = obj.get("restartCount", 0)
        self.image: Optional[str] = obj.get("image")
        self.imageID: Optional[str] = obj.get("imageID")
        self.started: Optional[bool] = obj.get("started")

        self.state = parse_container_state(obj.get("state") or {})
        self.lastState = parse_container_state(obj.get("lastState") or {})


class ObjectStatus:
    def __init__(self, obj: RawObject) -> None:
        self._status: RawObject = obj.get("status") or {}

        self.conditions: List[RawObject] = self._status.get("conditions") or []

    def get_condition(self, type: str) -> Optional[RawObject]:
        for cond in self.conditions:
            if cond.get("type") == type:
                return cond
        return None


class NamespaceStatus(ObjectStatus):
    def __init__(self, obj: RawObject) -> None:
        super().__init__(obj)

        self.phase: Optional[str] = self._status.get("phase")


class PodStatus(ObjectStatus):
    def __init__(self, obj: RawObject) -> None:
        super().__init__(obj)

        self.phase: Optional[str] = self._status.get("phase")
        self.startTime: Optional[datetime] = maybe_parse_date(
            self._status.get("startTime")
        )
        self.message: Optional[str] = self._status.get("message")
        self.reason: Optional[str] = self._status.get("reason")
        self.podIP: Optional[str] = self._status.get("podIP")
        self.containerStatuses: List[ContainerStatus] = [
            ContainerStatus(cont)
            for cont in self._status.get("containerStatuses") or []
        ]


class DeploymentStatus(ObjectStatus):
    def __init__(self, obj: RawObject) -> None:
        super().__init__(obj)

        self.observedGeneration: Optional[int] = self._status.get("observedGeneration")
        self.replicas: int = self._status.get("replicas", 0)
        self.readyReplicas: int = self._status.get("readyReplicas", 0)
        self.updatedReplicas: int = self._status.get("updatedReplicas", 0)
        self.availableReplicas: int = self._status.get("availableReplicas", 0)
