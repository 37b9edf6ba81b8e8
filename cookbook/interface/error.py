"""Interface layer errors."""


class InterfaceError(Exception):
    """Base interface error."""

    pass


class IdentityError(InterfaceError):
    """The caller's identity headers are missing or malformed."""

    pass
