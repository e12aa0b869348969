from typing import NamedTuple

from kubeapi.errors import InvalidGroupVersionError


class GroupVersion(NamedTuple):
    group: str
    version: str

    @classmethod
    def parse(cls, value: str) -> "GroupVersion":
        # "v1" -> core group, "apps/v1" -> ("apps", "v1")
        parts = value.split("/")

        if len(parts) == 1:
            return cls(group="", version=parts[0])

        if len(parts) == 2:
            return cls(group=parts[0], version=parts[1])

        raise InvalidGroupVersionError(value)

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def api_prefix(self) -> str:
        if not self.group and self.version == "v1":
            return "api"
        return "apis"

    def url_prefix(self) -> str:
        "/api/v1 or /apis/apps/v1"

        segments = ["", self.api_prefix()]
        if self.group:
            segments.append(self.group)
        segments.append(self.version)
        return "/".join(segments)

    def with_kind(self, kind: str) -> "GroupVersionKind":
        return GroupVersionKind(group=self.group, version=self.version, kind=kind)

    def with_resource(self, resource: str) -> "GroupVersionResource":
        return GroupVersionResource(
            group=self.group, version=self.version, resource=resource
        )


class GroupVersionKind(NamedTuple):
    group: str
    version: str
    kind: str

    @property
    def group_version(self) -> GroupVersion:
        return GroupVersion(group=self.group, version=self.version)

    @property
    def group_kind(self) -> "GroupKind":
        return GroupKind(group=self.group, kind=self.kind)

    @property
    def api_version(self) -> str:
        return str(self.group_version)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Kind={self.kind}"


class GroupVersionResource(NamedTuple):
    group: str
    version: str
    resource: str

    @property
    def group_version(self) -> GroupVersion:
        return GroupVersion(group=self.group, version=self.version)

    @property
    def group_resource(self) -> "GroupResource":
        return GroupResource(group=self.group, resource=self.resource)

    def api_prefix(self) -> str:
        return self.group_version.api_prefix()

    def url_prefix(self) -> str:
        return self.group_version.url_prefix()

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


class GroupKind(NamedTuple):
    group: str
    kind: str

    @classmethod
    def parse(cls, value: str) -> "GroupKind":
        # "Deployment.apps" -> ("apps", "Deployment")
        kind, _, group = value.partition(".")
        return cls(group=group, kind=kind)

    def __str__(self) -> str:
        if not self.group:
            return self.kind
        return f"{self.kind}.{self.group}"


class GroupResource(NamedTuple):
    group: str
    resource: str

    @classmethod
    def parse(cls, value: str) -> "GroupResource":
        # "deployments.apps" -> ("apps", "deployments")
        resource, _, group = value.partition(".")
        return cls(group=group, resource=resource)

    def __str__(self) -> str:
        if not self.group:
            return self.resource
        return f"{self.resource}.{self.group}"
