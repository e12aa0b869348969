from typing import List, Optional

from kubeapi.errors import ScopeError


class ResourceScope:
    """
    Where in a resource's collection an operation is aimed: the whole
    collection, one namespace of it or a single named object.
    """

    # does this scope family carry namespaces
    namespaced: bool

    def __init__(
        self, *, namespace: Optional[str] = None, name: Optional[str] = None
    ) -> None:
        if namespace == "" or name == "":
            raise ScopeError("Namespace and name must not be empty strings")

        self.namespace = namespace
        self.name = name

    def __repr__(self) -> str:
        return "<%s namespace=%r, name=%r>" % (
            self.__class__.__name__,
            self.namespace,
            self.name,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, ResourceScope):
            return NotImplemented
        return (self.__class__, self.namespace, self.name) == (
            other.__class__,
            other.namespace,
            other.name,
        )

    def __hash__(self) -> int:
        return hash((self.__class__, self.namespace, self.name))

    def is_collection(self) -> bool:
        return self.name is None

    def url_segments(self) -> List[str]:
        segments = []

        if self.namespace is not None:
            segments.extend(["namespaces", self.namespace])

        if self.name is not None:
            segments.append(self.name)

        return segments

    def pretty(self) -> str:
        if self.namespace is None and self.name is None:
            return "*"

        return "/".join(seg for seg in (self.namespace, self.name) if seg)


class NamespaceScope(ResourceScope):
    "Scope of namespaced resources like pods"

    namespaced = True

    def __init__(
        self, *, namespace: Optional[str] = None, name: Optional[str] = None
    ) -> None:
        if name is not None and namespace is None:
            raise ScopeError("Cannot address %r without a namespace" % name)

        super().__init__(namespace=namespace, name=name)

    @classmethod
    def cluster(cls) -> "NamespaceScope":
        return cls()

    @classmethod
    def in_namespace(cls, namespace: str) -> "NamespaceScope":
        return cls(namespace=namespace)

    @classmethod
    def named(cls, namespace: str, name: str) -> "NamespaceScope":
        return cls(namespace=namespace, name=name)


class ClusterScope(ResourceScope):
    "Scope of resources that live outside namespaces, like nodes"

    namespaced = False

    def __init__(self, *, name: Optional[str] = None) -> None:
        super().__init__(name=name)

    @classmethod
    def cluster(cls) -> "ClusterScope":
        return cls()

    @classmethod
    def named(cls, name: str) -> "ClusterScope":
        return cls(name=name)
