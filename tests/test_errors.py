import pytest

from app.services import errors
from app.services.errors import ERROR_MESSAGES, ErrorCode, error_detail


def test_every_code_has_a_message():
    assert set(ERROR_MESSAGES) == set(ErrorCode)


@pytest.mark.parametrize(
    "exc_type, code",
    [
        (errors.SelfFollowError, ErrorCode.SELF_FOLLOW),
        (errors.AlreadyFollowing, ErrorCode.ALREADY_FOLLOWING),
        (errors.RequestAlreadyPending, ErrorCode.REQUEST_ALREADY_PENDING),
        (errors.DuplicateRequest, ErrorCode.DUPLICATE_REQUEST),
        (errors.FollowNotFound, ErrorCode.FOLLOW_NOT_FOUND),
        (errors.RequestNotFound, ErrorCode.REQUEST_NOT_FOUND),
        (errors.Unauthorized, ErrorCode.UNAUTHORIZED),
        (errors.NotPending, ErrorCode.NOT_PENDING),
        (errors.RequestNotPending, ErrorCode.REQUEST_NOT_PENDING),
        (errors.NotFollowing, ErrorCode.NOT_FOLLOWING),
    ],
)
def test_error_detail_is_one_to_one(exc_type, code):
    assert error_detail(exc_type()) == {"error": code.value, "message": ERROR_MESSAGES[code]}


def test_hierarchy():
    assert issubclass(errors.FollowNotFound, errors.NotFound)
    assert issubclass(errors.RequestNotFound, errors.NotFound)
    assert issubclass(errors.RequestNotPending, errors.NotPending)
    assert issubclass(errors.StoreConflict, errors.StoreError)


def test_context_is_kept_out_of_the_message():
    exc = errors.Unauthorized(follow_id=3, user_id=9)
    assert exc.context == {"follow_id": 3, "user_id": 9}
    assert str(exc) == "You are not authorized to perform this action."


@pytest.mark.parametrize(
    "exc",
    [errors.StoreError(action="commit"), errors.StoreConflict(), RuntimeError("connection refused on 10.0.0.5")],
)
def test_store_and_unknown_errors_are_generic(exc):
    assert error_detail(exc) == {
        "error": "STORE_ERROR",
        "message": "Something went wrong. Please try again.",
    }
