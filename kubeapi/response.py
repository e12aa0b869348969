import json
import logging
from typing import Any, Callable, Generic, Optional, TypeVar

from kubeapi.errors import (
    SNIPPET_LENGTH,
    DecodeError,
    HttpStatusError,
    UnknownContentTypeError,
)
from kubeapi.model.api_status import Status
from kubeapi.transport import Headers, HttpResponse

T = TypeVar("T")

# turns a parsed json value (None for an empty response) into the result
Decoder = Callable[[Any], T]

logger = logging.getLogger("response")


class Response(Generic[T]):
    def __init__(self, *, status: int, body: T) -> None:
        self.status = status
        self.body = body

    def __repr__(self) -> str:
        return "<%s status=%r, body=%r>" % (
            self.__class__.__name__,
            self.status,
            self.body,
        )


def is_success(status: int) -> bool:
    return 200 <= status < 300


def get_media_type(headers: Headers) -> Optional[str]:
    # "application/json; charset=utf-8" -> "application/json"
    value = headers.get("Content-Type")
    if value is None:
        return None

    return value.split(";")[0].strip().lower()


def parse_json(body: bytes) -> Any:
    text = body.decode("utf-8", errors="replace")

    try:
        return json.loads(text)
    except ValueError as exc:
        raise DecodeError.from_json_error(exc, text) from exc


def decode_value(value: Any, decode: Decoder, body: bytes) -> Any:
    "Runs a decoder, making schema errors look like any other decode error"

    try:
        return decode(value)
    except DecodeError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        snippet = body[:SNIPPET_LENGTH].decode("utf-8", errors="replace")
        raise DecodeError(snippet=snippet) from exc


def parse_error_status(status: int, body: bytes) -> Status:
    """
    Parses the body of a failed request as a Status. Raises HttpStatusError
    when the body is not one.
    """

    snippet = body[:SNIPPET_LENGTH].decode("utf-8", errors="replace")

    try:
        err = Status.from_dict(parse_json(body))
    except DecodeError as exc:
        logger.debug("Failed to parse error Status (%s)", exc)
        raise HttpStatusError(status, snippet) from exc

    if not err.code:
        err.code = status

    return err


def decode_response(
    status: int, headers: Headers, body: bytes, decode: Decoder
) -> Response:
    if not is_success(status):
        raise parse_error_status(status, body).to_error()

    media_type = get_media_type(headers)

    if media_type is None:
        # nothing to parse, e.g. some DELETEs
        return Response(status=status, body=decode_value(None, decode, body))

    if media_type != "application/json":
        raise UnknownContentTypeError(headers["Content-Type"])

    value = parse_json(body)
    return Response(status=status, body=decode_value(value, decode, body))


def decode_http_response(response: HttpResponse, decode: Decoder) -> Response:
    return decode_response(response.status, response.headers, response.body, decode)
