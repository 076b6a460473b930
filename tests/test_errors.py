from bodyfilter.errors import (
    BindingError,
    DecodeError,
    ErrorResponse,
    ReconstructionError,
    ShapeError,
    UnknownMemberError,
    UnsupportedMediaTypeError,
    error_response,
    status_for,
)


def test_error_response_serializes_details():
    error = ErrorResponse(code="DECODE_ERROR", message="Nope", details={"shape": "Account"})

    assert error.to_dict() == {
        "code": "DECODE_ERROR",
        "message": "Nope",
        "details": {"shape": "Account"},
    }


def test_binding_error_defaults_details():
    exc = DecodeError("Bad body")

    assert exc.error.to_dict() == {
        "code": "DECODE_ERROR",
        "message": "Bad body",
        "details": {},
    }
    assert error_response(exc.error)["ok"] is False


def test_client_errors_map_to_bad_request_statuses():
    assert status_for(DecodeError("bad")) == 400
    assert status_for(UnsupportedMediaTypeError("bad")) == 415


def test_contract_errors_map_to_server_faults():
    assert status_for(ReconstructionError("broken")) == 500
    assert status_for(ShapeError("broken")) == 500
    assert status_for(UnknownMemberError("broken")) == 500
    assert status_for(BindingError("broken")) == 500


def test_status_follows_subclasses():
    class EmptyBodyError(DecodeError):
        code = "EMPTY_BODY"

    exc = EmptyBodyError("empty")

    assert status_for(exc) == 400
    assert exc.error.code == "EMPTY_BODY"
