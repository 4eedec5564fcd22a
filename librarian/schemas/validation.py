from typing import TypeVar

from pydantic import BaseModel, ValidationError

from librarian.errors import DomainRangeError, DomainValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Pydantic error types that describe an out-of-range number rather than bad data.
_RANGE_ERROR_TYPES = {"greater_than", "greater_than_equal"}


def validate_fields(schema: type[SchemaT], **values) -> SchemaT:
    """
    Validate a field set against a schema, translating pydantic errors.

    Raises:
        DomainRangeError: If an identifier is not a positive integer
        DomainValidationError: For any other malformed field
    """
    try:
        return schema(**values)
    except ValidationError as exc:
        errors = exc.errors()
        detail = "; ".join(
            f"'{'.'.join(str(part) for part in err['loc']) or schema.__name__}': {err['msg']}"
            for err in errors
        )
        if any(err["type"] in _RANGE_ERROR_TYPES for err in errors):
            raise DomainRangeError(detail) from exc
        raise DomainValidationError(detail) from exc
