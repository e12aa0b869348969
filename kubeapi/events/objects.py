import enum
import time
from typing import Any, Callable, Generic, TypeVar, Union

from kubeapi.errors import SNIPPET_LENGTH, DecodeError
from kubeapi.model.api_status import Status

T = TypeVar("T")


class EventType(enum.Enum):
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    ERROR = "ERROR"


class WatchEvent(Generic[T]):
    """
    One line of a watch stream. ERROR events carry a Status (e.g. "too old
    resource version") instead of an item, they are delivered like any other
    event and it is up to the caller to stop or restart the watch.
    """

    def __init__(self, *, type: EventType, object: Union[T, Status]) -> None:
        self.type = type
        self.object = object

        self.time_created = time.time()

    def __repr__(self) -> str:
        return "<%s type=%s, object=%r>" % (
            self.__class__.__name__,
            self.type.value,
            self.object,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, WatchEvent):
            return NotImplemented
        return (self.type, self.object) == (other.type, other.object)

    def is_error(self) -> bool:
        return self.type == EventType.ERROR


def parse_event_type(value: Any) -> EventType:
    try:
        return EventType(value)
    except ValueError as exc:
        raise DecodeError(snippet="unknown watch event type: %r" % (value,)) from exc


def parse_watch_event(dct: Any, decode_item: Callable[[Any], T]) -> WatchEvent[T]:
    if not isinstance(dct, dict) or "type" not in dct or "object" not in dct:
        raise DecodeError(snippet=repr(dct)[:SNIPPET_LENGTH])

    event_type = parse_event_type(dct["type"])

    if event_type == EventType.ERROR:
        return WatchEvent(type=event_type, object=Status.from_dict(dct["object"]))

    return WatchEvent(type=event_type, object=decode_item(dct["object"]))
