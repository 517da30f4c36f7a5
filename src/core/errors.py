class ConflictError(ValueError):
    """A write collides with an existing row or a forbidden state transition."""


class NotFoundError(LookupError):
    """The row does not exist or is not visible to the caller."""


class DeviceNotActiveError(PermissionError):
    """The submitting device is unknown, unapproved or switched off."""
