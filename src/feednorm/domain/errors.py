# src/feednorm/domain/errors.py


class NormalizationError(Exception):
    """Base class for every failure surfaced by ``normalize``."""


class SourceUnreadable(NormalizationError):
    def __init__(self, location: str | None, reason: str) -> None:
        super().__init__(
            f"Cannot read feed source {location or '<stream>'}: {reason}")
        self.location = location
        self.reason = reason


class MalformedDocument(NormalizationError):
    def __init__(self, reason: str, location: str | None = None) -> None:
        super().__init__(
            f"Not a usable feed document ({location or '<stream>'}): {reason}")
        self.reason = reason
        self.location = location


class RequiredFieldMissing(NormalizationError):
    """A required canonical field had no value in the source node."""

    def __init__(self, entity: str, field: str, path: str | None = None) -> None:
        where = f" at {path}" if path else ""
        super().__init__(f"{entity}.{field} is required but absent{where}")
        self.entity = entity
        self.field = field
        self.path = path

    def at(self, prefix: str) -> "RequiredFieldMissing":
        path = f"{prefix}.{self.path}" if self.path else prefix
        return RequiredFieldMissing(self.entity, self.field, path)


class SchemaValidationFailure(NormalizationError):
    def __init__(self, entity: str, violations: list[str]) -> None:
        super().__init__(
            f"{entity} violates its contract: {'; '.join(violations)}")
        self.entity = entity
        self.violations = violations
