from kubeapi.model.group_version import GroupVersion, GroupVersionResource


class ApiGroup:
    """
    The kube object:

    {
      "name": "apiregistration.k8s.io",
      "versions": [
        {
          "groupVersion": "apiregistration.k8s.io/v1",
          "version": "v1"
        },
        {
          "groupVersion": "apiregistration.k8s.io/v1beta1",
          "version": "v1beta1"
        }
      ],
      "preferredVersion": {
        "groupVersion": "apiregistration.k8s.io/v1",
        "version": "v1"
      }
    }

    We treat each version as an ApiGroup. The legacy core group has an empty
    group name and is served under /api instead of /apis.
    """

    def __init__(self, *, group: str, version: str, preferred: bool = True) -> None:
        self.group_version = GroupVersion(group=group, version=version)
        self.preferred = preferred

        self.name = group or "core"
        self.endpoint = self.group_version.url_prefix()

    def __repr__(self) -> str:
        return "<%s name=%r, endpoint=%r, version=%r>" % (
            self.__class__.__name__,
            self.name,
            self.endpoint,
            self.version,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, ApiGroup):
            return NotImplemented
        return self.group_version == other.group_version

    def __hash__(self) -> int:
        return hash(self.group_version)

    @property
    def group(self) -> str:
        return self.group_version.group

    @property
    def version(self) -> str:
        return self.group_version.version

    @property
    def api_version(self) -> str:
        return str(self.group_version)

    def resource(self, name: str) -> GroupVersionResource:
        return self.group_version.with_resource(name)


CoreV1 = ApiGroup(group="", version="v1")
AppsV1 = ApiGroup(group="apps", version="v1")
