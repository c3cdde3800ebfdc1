"""
Errors raised by the social graph services.

Every failure a service can report is one of the classes below. Each carries
an `ErrorCode` and a caller-facing message; callers translate them with
`error_detail()` into the `{"error": ..., "message": ...}` body shape used
for API errors elsewhere in the backend.
"""
import enum
from typing import Any, Dict


class ErrorCode(str, enum.Enum):
    SELF_FOLLOW = "SELF_FOLLOW"
    SELF_FRIEND_REQUEST = "SELF_FRIEND_REQUEST"
    ALREADY_FOLLOWING = "ALREADY_FOLLOWING"
    REQUEST_ALREADY_PENDING = "REQUEST_ALREADY_PENDING"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    FOLLOW_NOT_FOUND = "FOLLOW_NOT_FOUND"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_PENDING = "NOT_PENDING"
    REQUEST_NOT_PENDING = "REQUEST_NOT_PENDING"
    NOT_FOLLOWING = "NOT_FOLLOWING"
    EMAIL_IN_USE = "EMAIL_IN_USE"
    USERNAME_IN_USE = "USERNAME_IN_USE"
    STORE_ERROR = "STORE_ERROR"
    STORE_CONFLICT = "STORE_CONFLICT"


ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.SELF_FOLLOW: "You cannot follow yourself.",
    ErrorCode.SELF_FRIEND_REQUEST: "You cannot send a friend request to yourself.",
    ErrorCode.ALREADY_FOLLOWING: "You are already following this user.",
    ErrorCode.REQUEST_ALREADY_PENDING: "You have already sent a follow request to this user.",
    ErrorCode.DUPLICATE_REQUEST: "A friend request to this user already exists.",
    ErrorCode.FOLLOW_NOT_FOUND: "Follow request not found.",
    ErrorCode.REQUEST_NOT_FOUND: "Friend request not found.",
    ErrorCode.USER_NOT_FOUND: "User not found.",
    ErrorCode.UNAUTHORIZED: "You are not authorized to perform this action.",
    ErrorCode.NOT_PENDING: "Follow request is not pending.",
    ErrorCode.REQUEST_NOT_PENDING: "Friend request is not pending.",
    ErrorCode.NOT_FOLLOWING: "You are not following this user.",
    ErrorCode.EMAIL_IN_USE: "Email already in use.",
    ErrorCode.USERNAME_IN_USE: "Username already in use.",
    ErrorCode.STORE_ERROR: "Something went wrong. Please try again.",
    ErrorCode.STORE_CONFLICT: "Something went wrong. Please try again.",
}


class SocialError(Exception):
    code: ErrorCode = ErrorCode.STORE_ERROR

    def __init__(self, message: str | None = None, **context: Any):
        self.message = message or ERROR_MESSAGES[self.code]
        self.context = context
        super().__init__(self.message)


class SelfFollowError(SocialError):
    code = ErrorCode.SELF_FOLLOW


class SelfFriendRequest(SocialError):
    code = ErrorCode.SELF_FRIEND_REQUEST


class AlreadyFollowing(SocialError):
    code = ErrorCode.ALREADY_FOLLOWING


class RequestAlreadyPending(SocialError):
    code = ErrorCode.REQUEST_ALREADY_PENDING


class DuplicateRequest(SocialError):
    code = ErrorCode.DUPLICATE_REQUEST


class NotFound(SocialError):
    code = ErrorCode.FOLLOW_NOT_FOUND


class FollowNotFound(NotFound):
    code = ErrorCode.FOLLOW_NOT_FOUND


class RequestNotFound(NotFound):
    code = ErrorCode.REQUEST_NOT_FOUND


class UserNotFound(NotFound):
    code = ErrorCode.USER_NOT_FOUND


class Unauthorized(SocialError):
    code = ErrorCode.UNAUTHORIZED


class NotPending(SocialError):
    code = ErrorCode.NOT_PENDING


class RequestNotPending(NotPending):
    code = ErrorCode.REQUEST_NOT_PENDING


class NotFollowing(SocialError):
    code = ErrorCode.NOT_FOLLOWING


class EmailInUse(SocialError):
    code = ErrorCode.EMAIL_IN_USE


class UsernameInUse(SocialError):
    code = ErrorCode.USERNAME_IN_USE


class StoreError(SocialError):
    """Underlying storage failure. The message never carries driver details."""
    code = ErrorCode.STORE_ERROR


class StoreConflict(StoreError):
    """A write violated a uniqueness or integrity constraint."""
    code = ErrorCode.STORE_CONFLICT


def error_detail(exc: BaseException) -> Dict[str, str]:
    """
    Caller-facing body for any exception raised out of a service.
    Unclassified errors, and all store errors, get the generic message.
    """
    if isinstance(exc, StoreError) or not isinstance(exc, SocialError):
        return {
            "error": ErrorCode.STORE_ERROR.value,
            "message": ERROR_MESSAGES[ErrorCode.STORE_ERROR],
        }
    return {"error": exc.code.value, "message": exc.message}
