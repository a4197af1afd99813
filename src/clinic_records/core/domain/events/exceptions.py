class EntityAccessError(Exception):
    """Base class for every error raised by the entity access core."""

    code = "entity_access_error"

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(EntityAccessError):
    """
    Client supplied input that can never succeed as sent.

    Examples:
    - pagination out of range
    - unknown property, field or sort names
    - payload failing the entity constraints
    """
    code = "validation_error"


class FilterParseError(ValidationError):
    """The `filters` parameter is not a JSON array of filter criteria."""
    code = "invalid_filters"


class PatchError(ValidationError):
    """A patch document is malformed or one of its operations cannot apply."""
    code = "invalid_patch"


class NotFoundError(EntityAccessError):
    """No entity with the given id exists inside the caller's tenant."""
    code = "not_found"


class UnknownEntityError(EntityAccessError):
    """Entity name is not registered in the schema registry."""
    code = "unknown_entity"
