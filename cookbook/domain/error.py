"""Domain layer errors."""

from cookbook.domain.value import CommentId, RecipeId, ValidationIssue


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Comment input failed validation.

    Carries every issue found so callers can report them all at once.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(
            "Invalid comment: " + ", ".join(issue.value for issue in self.issues)
        )


class PolicyError(DomainError):
    """Business rule rejected the write."""

    pass


class OwnerCannotRateError(PolicyError):
    """Raised when a recipe owner attaches a rating to their own recipe."""

    def __init__(self, recipe_id: RecipeId):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe owners cannot rate recipe {recipe_id}")


class DuplicateRatingError(PolicyError):
    """Raised when a user already holds a rated review on the recipe."""

    def __init__(self, recipe_id: RecipeId, existing_id: CommentId):
        self.recipe_id = recipe_id
        self.existing_id = existing_id
        super().__init__(
            f"Recipe {recipe_id} already rated by this user (comment {existing_id})"
        )


class ReplyCannotRateError(PolicyError):
    """Raised when a rating is attached to a reply."""

    def __init__(self, comment_id: CommentId | None = None):
        self.comment_id = comment_id
        super().__init__("Replies cannot carry a rating")


class NestedReplyError(PolicyError):
    """Raised when replying to a reply."""

    def __init__(self, parent_id: CommentId):
        self.parent_id = parent_id
        super().__init__(f"Comment {parent_id} is a reply and cannot be replied to")


class NotAuthorizedError(DomainError):
    """Raised when a user attempts to change content they don't own."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        super().__init__(
            f"User {user_id} is not authorized to change {resource} {resource_id}"
        )


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class StoreUnavailableError(DomainError):
    """The comment store could not be reached or failed mid-operation.

    Reads are safe to retry. Writes only when the caller can rule out a
    duplicate (``create`` has no idempotency key).
    """

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        message = f"Comment store unavailable during {operation}"
        super().__init__(f"{message}: {reason}" if reason else message)


class RatingWriteError(DomainError):
    """Writing the aggregate onto the recipe record failed."""

    def __init__(self, recipe_id: RecipeId, reason: str = ""):
        self.recipe_id = recipe_id
        message = f"Failed to write rating for recipe {recipe_id}"
        super().__init__(f"{message}: {reason}" if reason else message)


class StaleRatingError(DomainError):
    """The comment mutation succeeded but the recipe rating was not refreshed.

    ``result`` is what the mutation produced: the saved comment, or the
    list of deleted ids after a delete. ``__cause__`` is either a
    :class:`StoreUnavailableError` (re-read failed) or a
    :class:`RatingWriteError` (write failed).
    """

    def __init__(self, recipe_id: RecipeId, result=None):
        self.recipe_id = recipe_id
        self.result = result
        super().__init__(f"Rating for recipe {recipe_id} may be stale")


class PartialCascadeFailureError(DomainError):
    """Cascade delete stopped after removing part of a thread.

    Re-running the cascade on ``root_id`` is safe: ids that are already
    gone are skipped.
    """

    def __init__(
        self,
        root_id: CommentId,
        deleted: list[CommentId],
        remaining: list[CommentId],
    ):
        self.root_id = root_id
        self.deleted = list(deleted)
        self.remaining = list(remaining)
        super().__init__(
            f"Cascade delete of comment {root_id} incomplete: "
            f"{len(self.deleted)} deleted, {len(self.remaining)} remaining"
        )
