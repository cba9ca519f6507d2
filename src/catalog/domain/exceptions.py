"""Errors surfaced by the catalog core.

Every failure is a subclass of CatalogError so the boundary layers (CLI,
HTTP) can catch them uniformly. The ``kind`` attribute tells them apart
without isinstance ladders when mapping to exit messages or status codes.
"""


class CatalogError(Exception):
    """Base class for every error the catalog core raises."""

    kind = "internal"


class DomainException(CatalogError):
    """Base class for business errors."""

    kind = "domain"


class ValidationError(DomainException):
    """Input rejected by a value-object or aggregate factory."""

    kind = "validation"


class DomainRuleViolation(DomainException):
    """A state-machine guard refused the operation in the current state."""

    kind = "domain_rule"


class EntityNotFoundError(CatalogError):
    """A requested entity does not exist."""

    kind = "not_found"


class VersionConflictError(CatalogError):
    """The caller's view of the aggregate is stale."""

    kind = "version_conflict"

    def __init__(
        self,
        product_id: str,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        self.product_id = product_id
        self.expected = expected
        self.actual = actual
        if expected is not None and actual is not None:
            message = (
                f"Product '{product_id}' has been modified by another process "
                f"(expected version {expected}, found {actual})"
            )
        else:
            message = f"Product '{product_id}' has been modified by another process"
        super().__init__(message)


class StorageError(CatalogError):
    """The persistence layer failed for reasons unrelated to the domain."""

    kind = "storage"
