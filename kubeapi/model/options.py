import copy
import enum
from datetime import datetime
from typing import (
    Any,
    Callable,
    ClassVar,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)
from urllib.parse import urlencode

from kubeapi.model.object_model.helpers import format_date


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


def encode_dry_run(value: bool) -> str:
    return "All"


class Field(NamedTuple):
    attname: str
    key: str
    default: Any = None
    encode: Optional[Callable[[Any], Any]] = None


class ClientOperationParams:
    """
    Base for the per-operation option objects. Each option maps an attribute
    to its camelCase query parameter, fields still at their default are left
    out of the query.
    """

    fields: ClassVar[Tuple[Field, ...]] = ()

    def __repr__(self) -> str:
        args = ", ".join(
            "%s=%r" % (field.attname, getattr(self, field.attname))
            for field in self.fields
        )
        return "%s(%s)" % (self.__class__.__name__, args)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ClientOperationParams):
            return NotImplemented
        return (self.__class__, self.values()) == (other.__class__, other.values())

    def values(self) -> Tuple[Any, ...]:
        return tuple(getattr(self, field.attname) for field in self.fields)

    def replace(self, **changes):
        "Returns a copy with `changes` applied"

        params = copy.copy(self)
        known = {field.attname for field in self.fields}

        for attname, value in changes.items():
            if attname not in known:
                raise TypeError(
                    "%s has no option %r" % (self.__class__.__name__, attname)
                )
            setattr(params, attname, value)

        return params

    def to_query(self) -> List[Tuple[str, Any]]:
        pairs = []

        for field in self.fields:
            value = getattr(self, field.attname)
            if value is None or value == field.default:
                continue

            # empty strings and lists carry nothing
            if isinstance(value, (str, list)) and not value:
                continue

            if field.encode is not None:
                value = field.encode(value)
            elif isinstance(value, bool):
                value = encode_bool(value)
            elif isinstance(value, enum.Enum):
                value = value.value

            pairs.append((field.key, value))

        return pairs


QueryParams = Union[ClientOperationParams, Mapping[str, Any], None]


def encode_query(params: QueryParams) -> str:
    if params is None:
        return ""

    if isinstance(params, ClientOperationParams):
        pairs = params.to_query()
    else:
        pairs = []
        for key, value in params.items():
            if value is None or value == "":
                continue
            if isinstance(value, bool):
                value = encode_bool(value)
            pairs.append((key, value))

    return urlencode(pairs, doseq=True)


class GetOptions(ClientOperationParams):
    fields = (
        Field("pretty", "pretty", False),
        Field("resource_version", "resourceVersion"),
    )

    def __init__(
        self, *, pretty: bool = False, resource_version: Optional[str] = None
    ) -> None:
        self.pretty = pretty
        self.resource_version = resource_version


class ListOptions(ClientOperationParams):
    fields = (
        Field("resource_version", "resourceVersion"),
        Field("timeout_seconds", "timeoutSeconds"),
        Field("watch", "watch", False),
        Field("pretty", "pretty", False),
        Field("field_selector", "fieldSelector", ""),
        Field("label_selector", "labelSelector", ""),
        Field("limit", "limit", 0),
        Field("continue_", "continue", ""),
    )

    def __init__(
        self,
        *,
        resource_version: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
        watch: bool = False,
        pretty: bool = False,
        field_selector: str = "",
        label_selector: str = "",
        limit: int = 0,
        continue_: str = "",
    ) -> None:
        # the server closes the request after this many seconds, there is
        # no client side deadline
        self.timeout_seconds = timeout_seconds
        self.resource_version = resource_version
        self.watch = watch
        self.pretty = pretty
        self.field_selector = field_selector
        self.label_selector = label_selector
        # max items per page, the server may return fewer
        self.limit = limit
        # opaque token from the previous page's metadata
        self.continue_ = continue_


class CreateOptions(ClientOperationParams):
    fields = (
        Field("dry_run", "dryRun", False, encode_dry_run),
        Field("field_manager", "fieldManager"),
        Field("pretty", "pretty", False),
    )

    def __init__(
        self,
        *,
        dry_run: bool = False,
        field_manager: Optional[str] = None,
        pretty: bool = False,
    ) -> None:
        self.dry_run = dry_run
        self.field_manager = field_manager
        self.pretty = pretty


class UpdateOptions(CreateOptions):
    pass


class PatchOptions(ClientOperationParams):
    fields = (
        Field("dry_run", "dryRun", False, encode_dry_run),
        Field("field_manager", "fieldManager"),
        Field("force", "force", False),
        Field("pretty", "pretty", False),
    )

    def __init__(
        self,
        *,
        dry_run: bool = False,
        field_manager: Optional[str] = None,
        force: bool = False,
        pretty: bool = False,
    ) -> None:
        self.dry_run = dry_run
        self.field_manager = field_manager
        # only meaningful for server side apply patches
        self.force = force
        self.pretty = pretty


class PropagationPolicy(enum.Enum):
    ORPHAN = "Orphan"
    BACKGROUND = "Background"
    FOREGROUND = "Foreground"


class DeleteOptions(ClientOperationParams):
    fields = (
        Field("grace_period_seconds", "gracePeriodSeconds"),
        Field("orphan_dependents", "orphanDependents"),
        Field("propagation_policy", "propagationPolicy"),
        Field("dry_run", "dryRun", False, encode_dry_run),
        Field("pretty", "pretty", False),
    )

    def __init__(
        self,
        *,
        grace_period_seconds: Optional[int] = None,
        orphan_dependents: Optional[bool] = None,
        propagation_policy: Optional[PropagationPolicy] = None,
        dry_run: bool = False,
        pretty: bool = False,
    ) -> None:
        # 0 means delete immediately, None leaves it to the object's default
        self.grace_period_seconds = grace_period_seconds
        self.orphan_dependents = orphan_dependents
        self.propagation_policy = propagation_policy
        self.dry_run = dry_run
        self.pretty = pretty

    def to_body(self):
        "The json form, as embedded in an Eviction"

        body = {}

        if self.grace_period_seconds is not None:
            body["gracePeriodSeconds"] = self.grace_period_seconds
        if self.orphan_dependents is not None:
            body["orphanDependents"] = self.orphan_dependents
        if self.propagation_policy is not None:
            body["propagationPolicy"] = self.propagation_policy.value
        if self.dry_run:
            body["dryRun"] = ["All"]

        return body


class PodLogOptions(ClientOperationParams):
    fields = (
        Field("container", "container"),
        Field("follow", "follow", False),
        Field("previous", "previous", False),
        Field("since_seconds", "sinceSeconds"),
        Field("since_time", "sinceTime", None, format_date),
        Field("timestamps", "timestamps", False),
        Field("tail_lines", "tailLines"),
        Field("limit_bytes", "limitBytes"),
        Field("pretty", "pretty", False),
    )

    def __init__(
        self,
        *,
        container: Optional[str] = None,
        follow: bool = False,
        previous: bool = False,
        since_seconds: Optional[int] = None,
        since_time: Optional[datetime] = None,
        timestamps: bool = False,
        tail_lines: Optional[int] = None,
        limit_bytes: Optional[int] = None,
        pretty: bool = False,
    ) -> None:
        self.container = container
        self.follow = follow
        # logs of the previous, terminated instance of the container
        self.previous = previous
        self.since_seconds = since_seconds
        self.since_time = since_time
        self.timestamps = timestamps
        # how many log lines from the past to fetch, None means all of them
        self.tail_lines = tail_lines
        self.limit_bytes = limit_bytes
        self.pretty = pretty
