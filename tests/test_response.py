import pytest
from multidict import CIMultiDict

from kubeapi.errors import (
    ApiError,
    DecodeError,
    HttpStatusError,
    UnknownContentTypeError,
)
from kubeapi.model.api_status import StatusReason, StatusStatus
from kubeapi.response import decode_response


def headers(content_type=None):
    dct = CIMultiDict()
    if content_type is not None:
        dct["Content-Type"] = content_type
    return dct


def identity(value):
    return value


def test_json_success():
    response = decode_response(
        200, headers("application/json"), b'{"a": [1, 2]}', identity
    )

    assert response.status == 200
    assert response.body == {"a": [1, 2]}


def test_content_type_parameters_are_ignored():
    response = decode_response(
        201, headers("application/json; charset=utf-8"), b"[]", identity
    )

    assert response.body == []


def test_missing_content_type_decodes_none():
    response = decode_response(200, headers(), b"", identity)

    assert response.body is None


def test_unknown_content_type():
    with pytest.raises(UnknownContentTypeError) as exc_info:
        decode_response(200, headers("text/html"), b"<html/>", identity)

    assert exc_info.value.value == "text/html"


def test_malformed_json_carries_position_and_bounded_snippet():
    body = b'{"name": "' + b"x" * 3000 + b'", oops}'

    with pytest.raises(DecodeError) as exc_info:
        decode_response(200, headers("application/json"), body, identity)

    exc = exc_info.value
    assert exc.line == 1
    assert exc.column is not None
    assert len(exc.snippet) <= 1024
    assert str(exc).startswith("unable to parse: ")


def test_schema_errors_are_decode_errors():
    def decode(value):
        return value["missing"]

    with pytest.raises(DecodeError) as exc_info:
        decode_response(200, headers("application/json"), b"{}", decode)

    assert isinstance(exc_info.value.__cause__, KeyError)


def test_error_status_round_trip():
    body = b'{"code":404,"message":"double-plus unfound","status":"Failure"}'

    with pytest.raises(ApiError) as exc_info:
        decode_response(404, headers("application/json"), body, identity)

    exc = exc_info.value
    assert exc.status.code == 404
    assert exc.status.status == StatusStatus.FAILURE
    assert exc.status.message == "double-plus unfound"
    assert "double-plus unfound" in str(exc)
    assert exc.is_not_found()


def test_error_status_with_reason_and_causes():
    body = (
        b'{"kind":"Status","apiVersion":"v1","metadata":{},"status":"Failure",'
        b'"message":"Pod is invalid","reason":"Invalid","code":422,'
        b'"details":{"name":"web","kind":"Pod","causes":['
        b'{"reason":"FieldValueRequired","message":"Required value",'
        b'"field":"spec.containers"}]}}'
    )

    with pytest.raises(ApiError) as exc_info:
        decode_response(422, headers("application/json"), body, identity)

    exc = exc_info.value
    assert exc.status.reason == StatusReason.INVALID
    assert exc.causes[0].field == "spec.containers"
    assert str(exc) == "Invalid: Pod is invalid, caused by Required value"


def test_status_code_is_taken_from_http_when_missing():
    with pytest.raises(ApiError) as exc_info:
        decode_response(503, headers("application/json"), b"{}", identity)

    assert exc_info.value.code == 503
    assert exc_info.value.is_retryable()


@pytest.mark.parametrize(
    "body",
    [
        b"<html>Bad Gateway</html>",
        b"",
        b'"just a string"',
        b'{"status": "Maybe"}',
        b'{"code": 500, "details": "oops"}',
        b'{"code": 500, "metadata": "oops"}',
        b'{"code": 500, "details": {"causes": ["bad"]}}',
    ],
)
def test_malformed_error_body(body):
    with pytest.raises(HttpStatusError) as exc_info:
        decode_response(502, headers("text/html"), body, identity)

    assert exc_info.value.status == 502
    assert "502" in str(exc_info.value)
