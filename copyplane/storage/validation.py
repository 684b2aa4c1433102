"""
Mandatory-field validation for object-storage location descriptors.
"""

from dataclasses import dataclass, field

from copyplane.storage.schema import LocationDescriptor, S3BucketSchema


@dataclass(frozen=True)
class Violation:
    """A single failed check."""

    message: str
    path: str
    value: str | None = None


@dataclass
class ValidationResult:
    violations: list[Violation] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.violations

    @property
    def failed(self) -> bool:
        return bool(self.violations)

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]

    def merge(self, *others: "ValidationResult") -> "ValidationResult":
        merged = list(self.violations)
        for other in others:
            merged.extend(other.violations)
        return ValidationResult(merged)


def _mandatory(location: LocationDescriptor, *names: str) -> list[Violation]:
    return [
        Violation(f"'{name}' is a mandatory attribute", name, location.properties.get(name))
        for name in names
        if location.get(name) is None
    ]


def validate_source(location: LocationDescriptor) -> ValidationResult:
    """Source needs a bucket, a region and something naming the object(s)."""
    violations = _mandatory(location, S3BucketSchema.BUCKET_NAME, S3BucketSchema.REGION)

    selectors = (
        S3BucketSchema.OBJECT_NAME,
        S3BucketSchema.KEY_NAME,
        S3BucketSchema.OBJECT_PREFIX,
        S3BucketSchema.KEY_PREFIX,
    )
    if all(location.get(name) is None for name in selectors):
        violations.append(
            Violation(
                f"Either the '{S3BucketSchema.OBJECT_NAME}' or '{S3BucketSchema.OBJECT_PREFIX}' "
                "attribute must be provided.",
                S3BucketSchema.OBJECT_NAME,
            )
        )
    return ValidationResult(violations)


def validate_destination(location: LocationDescriptor) -> ValidationResult:
    return ValidationResult(
        _mandatory(location, S3BucketSchema.BUCKET_NAME, S3BucketSchema.REGION)
    )


def validate_credentials(location: LocationDescriptor) -> ValidationResult:
    """Embedded credentials must come as a complete key pair."""
    return ValidationResult(
        _mandatory(location, S3BucketSchema.ACCESS_KEY_ID, S3BucketSchema.SECRET_ACCESS_KEY)
    )
