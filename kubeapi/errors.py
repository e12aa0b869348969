import re
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from kubeapi.model.api_status import Status, StatusCause


# how much of the offending input is kept for diagnostics
SNIPPET_LENGTH = 1024


class ClientError(Exception):
    "Base class for everything raised by this library (transport errors excepted)"


class RequestBuildError(ClientError):
    pass


class ScopeError(ClientError, ValueError):
    pass


class InvalidGroupVersionError(ClientError, ValueError):
    def __init__(self, value: str) -> None:
        super().__init__("Invalid group version: %r" % value)

        self.value = value


class TypeMetaError(ClientError, ValueError):
    pass


class DecodeError(ClientError):
    def __init__(
        self,
        *,
        snippet: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(f"unable to parse: {snippet}")

        self.snippet = snippet
        self.line = line
        self.column = column

    def __repr__(self) -> str:
        return "%s(line=%r, column=%r, snippet=%r)" % (
            self.__class__.__name__,
            self.line,
            self.column,
            self.snippet,
        )

    @classmethod
    def from_json_error(cls, exc: ValueError, text: str) -> "DecodeError":
        lineno = getattr(exc, "lineno", None)
        colno = getattr(exc, "colno", None)

        if lineno is None or colno is None:
            return cls(snippet=text[:SNIPPET_LENGTH])

        # the snippet is the part of the offending line leading up to the error
        lines = text.splitlines()
        line = lines[lineno - 1] if lineno <= len(lines) else ""
        start = max(0, colno - SNIPPET_LENGTH)
        return cls(snippet=line[start:colno], line=lineno, column=colno)


class UnknownContentTypeError(ClientError):
    def __init__(self, value: str) -> None:
        super().__init__("Unknown content type: %r" % value)

        self.value = value


class HttpStatusError(ClientError):
    def __init__(self, status: int, snippet: str = "") -> None:
        super().__init__("Unexpected HTTP response status: %s" % status)

        self.status = status
        self.snippet = snippet

    def __repr__(self) -> str:
        return "%s(status=%r, snippet=%r)" % (
            self.__class__.__name__,
            self.status,
            self.snippet,
        )


class ApiError(ClientError):
    # too old resource version: 355452234 (358305898)
    rx = re.compile(r"too old resource version: \d+ \((\d+)\)")

    def __init__(self, status: "Status") -> None:
        super().__init__(str(status))

        self.status = status

    @property
    def code(self) -> int:
        return self.status.code

    @property
    def reason(self) -> Optional[str]:
        return self.status.reason.value if self.status.reason else None

    @property
    def message(self) -> str:
        return self.status.message or ""

    @property
    def causes(self) -> List["StatusCause"]:
        if self.status.details is None:
            return []
        return self.status.details.causes

    def __repr__(self) -> str:
        return "%s(code=%r, reason=%r, message=%r)" % (
            self.__class__.__name__,
            self.code,
            self.reason,
            self.message,
        )

    def is_not_found(self) -> bool:
        return self.code == 404

    def is_conflict(self) -> bool:
        return self.code == 409

    def is_retryable(self) -> bool:
        return self.code in (429, 500, 502, 503, 504)

    def is_resource_version_too_old(self) -> bool:
        return self.rx.search(self.message) is not None

    def extract_resource_version(self) -> str:
        match = self.rx.search(self.message)
        if match is None:
            raise ValueError("No resource version in message: %r" % self.message)
        return match.group(1)


class ConfigError(ClientError):
    pass
