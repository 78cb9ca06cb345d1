"""Domain exceptions raised by request intake and submission."""

from uuid import UUID


class QuotaExceededError(Exception):
    """User has used up this month's request allowance."""

    def __init__(self, user_id: UUID, limit: int, used: int) -> None:
        super().__init__(f"Monthly request limit reached ({used}/{limit})")
        self.user_id = user_id
        self.limit = limit
        self.used = used


class UnknownUserError(Exception):
    """Identity collaborator has no such user."""

    pass


class RequestNotFoundError(Exception):
    """Request does not exist or belongs to someone else."""

    pass


class RequestAlreadySubmittedError(Exception):
    """Request has already been delivered to its office."""

    pass
