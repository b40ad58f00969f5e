"""
Error taxonomy for match lifecycle operations.

Every error is scoped to one match or one request; nothing here is fatal to the
process. Routers never catch these: the handlers registered in app.main turn
them into JSON responses with the status code carried by each class.
"""


class LifecycleError(Exception):
    status_code = 500
    code = "LIFECYCLE_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class NotFound(LifecycleError):
    """Entity missing, or not owned by the caller."""

    status_code = 404
    code = "NOT_FOUND"


class NotAuthenticated(LifecycleError):
    status_code = 401
    code = "NOT_AUTHENTICATED"


class InvalidTransition(LifecycleError):
    """Mutation attempted on a match in a terminal status."""

    status_code = 409
    code = "INVALID_TRANSITION"


class RemoteUnavailable(LifecycleError):
    """Store or pipeline function unreachable, timed out, or erroring."""

    status_code = 503
    code = "REMOTE_UNAVAILABLE"


class ValidationFailed(LifecycleError):
    status_code = 422
    code = "VALIDATION_FAILED"


class MutationInProgress(LifecycleError):
    """Another save/approve/skip on the same match has not finished yet."""

    status_code = 409
    code = "MUTATION_IN_PROGRESS"


class OnboardingIncomplete(LifecycleError):
    """Pipeline trigger refused to run because the profile is incomplete."""

    status_code = 409
    code = "ONBOARDING_INCOMPLETE"

    def __init__(self, message: str = "", missing: list[str] | None = None):
        super().__init__(message or "Onboarding incomplete")
        self.missing = list(missing or [])

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["missing"] = self.missing
        return out
