import enum
from typing import Any, Dict, List, Optional

from kubeapi.errors import SNIPPET_LENGTH, ApiError, DecodeError, TypeMetaError
from kubeapi.model.object_model.base import TypeMeta, check_type_meta
from kubeapi.model.object_model.meta import ListMeta
from kubeapi.model.object_model.types import RawObject


class StatusStatus(enum.Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"


class StatusReason(enum.Enum):
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    ALREADY_EXISTS = "AlreadyExists"
    CONFLICT = "Conflict"
    GONE = "Gone"
    INVALID = "Invalid"
    SERVER_TIMEOUT = "ServerTimeout"
    TIMEOUT = "Timeout"
    TOO_MANY_REQUESTS = "TooManyRequests"
    BAD_REQUEST = "BadRequest"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    NOT_ACCEPTABLE = "NotAcceptable"
    REQUEST_ENTITY_TOO_LARGE = "RequestEntityTooLarge"
    UNSUPPORTED_MEDIA_TYPE = "UnsupportedMediaType"
    INTERNAL_ERROR = "InternalError"
    EXPIRED = "Expired"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    UNKNOWN = "Unknown"

    @classmethod
    def _missing_(cls, value):
        # servers add reasons over time, don't choke on the new ones
        return cls.UNKNOWN


class StatusCause:
    def __init__(
        self,
        *,
        field: Optional[str] = None,
        message: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.field = field
        self.message = message
        self.reason = reason

    def __repr__(self) -> str:
        return "<%s field=%r, reason=%r, message=%r>" % (
            self.__class__.__name__,
            self.field,
            self.reason,
            self.message,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, StatusCause):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @classmethod
    def from_dict(cls, dct: RawObject) -> "StatusCause":
        return cls(
            field=dct.get("field"),
            message=dct.get("message"),
            reason=dct.get("reason"),
        )

    def to_dict(self) -> RawObject:
        dct = {"field": self.field, "message": self.message, "reason": self.reason}
        return {key: value for key, value in dct.items() if value is not None}


class StatusDetails:
    def __init__(
        self,
        *,
        causes: Optional[List[StatusCause]] = None,
        group: Optional[str] = None,
        kind: Optional[str] = None,
        name: Optional[str] = None,
        retry_after_seconds: Optional[int] = None,
        uid: Optional[str] = None,
    ) -> None:
        self.causes = causes or []
        self.group = group
        self.kind = kind
        self.name = name
        self.retry_after_seconds = retry_after_seconds
        self.uid = uid

    def __repr__(self) -> str:
        return "<%s kind=%r, name=%r, causes=%r>" % (
            self.__class__.__name__,
            self.kind,
            self.name,
            self.causes,
        )

    @classmethod
    def from_dict(cls, dct: RawObject) -> "StatusDetails":
        return cls(
            causes=[StatusCause.from_dict(cause) for cause in dct.get("causes") or []],
            group=dct.get("group"),
            kind=dct.get("kind"),
            name=dct.get("name"),
            retry_after_seconds=dct.get("retryAfterSeconds"),
            uid=dct.get("uid"),
        )

    def to_dict(self) -> RawObject:
        dct: Dict[str, Any] = {
            "group": self.group,
            "kind": self.kind,
            "name": self.name,
            "retryAfterSeconds": self.retry_after_seconds,
            "uid": self.uid,
        }
        dct = {key: value for key, value in dct.items() if value is not None}
        if self.causes:
            dct["causes"] = [cause.to_dict() for cause in self.causes]
        return dct


class Status:
    """
    The api server's outcome object, most often seen as the body of a failed
    request or inside an ERROR watch event:

    {
      "kind": "Status",
      "apiVersion": "v1",
      "metadata": {},
      "status": "Failure",
      "message": "pods \\"nginx\\" not found",
      "reason": "NotFound",
      "details": {"name": "nginx", "kind": "pods"},
      "code": 404
    }
    """

    type_meta = TypeMeta(api_version="v1", kind="Status")

    def __init__(
        self,
        *,
        code: int = 0,
        status: Optional[StatusStatus] = None,
        message: Optional[str] = None,
        reason: Optional[StatusReason] = None,
        details: Optional[StatusDetails] = None,
        metadata: Optional[ListMeta] = None,
    ) -> None:
        self.code = code
        self.status = status
        self.message = message
        self.reason = reason
        self.details = details
        self.metadata = metadata or ListMeta({})

    def __repr__(self) -> str:
        return "<%s code=%r, status=%r, reason=%r, message=%r>" % (
            self.__class__.__name__,
            self.code,
            self.status,
            self.reason,
            self.message,
        )

    def __str__(self) -> str:
        if self.reason is not None:
            text = self.reason.value
        elif self.status is not None:
            text = self.status.value
        else:
            text = "Unknown"

        if self.message is not None:
            text = f"{text}: {self.message}"

        for cause in self.details.causes if self.details else []:
            if cause.message is not None:
                text = f"{text}, caused by {cause.message}"
            elif cause.reason is not None:
                text = f"{text}, caused by {cause.reason}"

        return text

    def __eq__(self, other) -> bool:
        if not isinstance(other, Status):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def is_failure(self) -> bool:
        return self.status == StatusStatus.FAILURE

    @classmethod
    def from_dict(cls, dct: Any) -> "Status":
        "Raises DecodeError when `dct` is not shaped like a Status"

        if not isinstance(dct, dict):
            raise DecodeError(snippet=repr(dct)[:SNIPPET_LENGTH])

        try:
            check_type_meta(dct, cls.type_meta)
        except TypeMetaError as exc:
            raise DecodeError(snippet=str(exc)) from exc

        code = dct.get("code", 0)
        message = dct.get("message")
        if not isinstance(code, int) or not isinstance(message, (str, type(None))):
            raise DecodeError(snippet=repr(dct)[:SNIPPET_LENGTH])

        # nested values may be of any json type
        try:
            status = StatusStatus(dct["status"]) if dct.get("status") else None
            reason = StatusReason(dct["reason"]) if dct.get("reason") else None
            details = (
                StatusDetails.from_dict(dct["details"]) if dct.get("details") else None
            )
            metadata = ListMeta(dct)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise DecodeError(snippet=repr(dct)[:SNIPPET_LENGTH]) from exc

        return cls(
            code=code,
            status=status,
            message=message,
            reason=reason,
            details=details,
            metadata=metadata,
        )

    def to_dict(self) -> RawObject:
        dct: Dict[str, Any] = {
            "apiVersion": self.type_meta.api_version,
            "kind": self.type_meta.kind,
            "metadata": self.metadata.to_dict(),
            "code": self.code,
        }
        if self.status is not None:
            dct["status"] = self.status.value
        if self.message is not None:
            dct["message"] = self.message
        if self.reason is not None:
            dct["reason"] = self.reason.value
        if self.details is not None:
            dct["details"] = self.details.to_dict()
        return dct

    def to_error(self) -> ApiError:
        return ApiError(self)
