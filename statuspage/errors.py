class StatusPageError(Exception):
    """Base class for status page errors."""


class DataIntegrityError(StatusPageError):
    """An enumerated field carries a value outside its closed set, or a record breaks a model invariant."""

    def __init__(self, message: str, field: str = "", value=None):
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidStatusError(DataIntegrityError):
    pass


class InvalidArgumentError(StatusPageError, ValueError):
    pass


class OrganizationNotFoundError(StatusPageError, LookupError):
    def __init__(self, key: str):
        super().__init__(f"Organization not found: {key}")
        self.key = key
