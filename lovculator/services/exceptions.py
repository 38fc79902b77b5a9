"""Errors raised by the follow-graph services.

Every public error carries the HTTP status and the message clients see.
The API layer turns them into ``{"error": message}`` responses.
"""
from typing import Optional
from fastapi import status


class FollowServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UnauthenticatedError(FollowServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Login required"


class SelfReferenceError(FollowServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "You cannot follow yourself"


class ActorNotFoundError(UnauthenticatedError):
    """The caller's token is valid but their user row is gone."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__()


class TargetNotFoundError(FollowServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"

    def __init__(self, user_id: Optional[int] = None, message: Optional[str] = None):
        self.user_id = user_id
        super().__init__(message)


class StoreUnavailableError(FollowServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Follow service unavailable"


class UniquenessRaceError(Exception):
    """A concurrent request inserted the same edge first.

    Internal only: the toggle treats it as "already following".
    """

    def __init__(self, follower_id: int, target_id: int):
        self.follower_id = follower_id
        self.target_id = target_id
        super().__init__(f"Edge ({follower_id}, {target_id}) already exists")
