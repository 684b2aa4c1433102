"""
S3 bucket schema and the location descriptor passed in by the orchestrator.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


class S3BucketSchema:
    """Property names of an object-storage location descriptor."""

    TYPE = "AmazonS3"
    REGION = "region"
    BUCKET_NAME = "bucketName"
    KEY_PREFIX = "keyPrefix"
    FOLDER_NAME = "folderName"
    OBJECT_NAME = "objectName"
    OBJECT_PREFIX = "objectPrefix"
    KEY_NAME = "keyName"
    ACCESS_KEY_ID = "accessKeyId"
    SECRET_ACCESS_KEY = "secretAccessKey"
    ENDPOINT_OVERRIDE = "endpointOverride"


@dataclass(frozen=True)
class LocationDescriptor:
    """
    A storage endpoint as described by the orchestrator.

    Attributes:
        type: Descriptor type, ``S3BucketSchema.TYPE`` for object storage
        properties: Read-only string properties (bucket, region, keys...)
    """

    type: str
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __hash__(self) -> int:
        return hash((self.type, frozenset(self.properties.items())))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocationDescriptor):
            return NotImplemented
        return self.type == other.type and dict(self.properties) == dict(other.properties)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return a property, treating blank values as absent."""
        value = self.properties.get(name)
        if value is None or not str(value).strip():
            return default
        return value

    @property
    def key_name(self) -> str | None:
        """Name of the secret holding this location's credentials."""
        return self.get(S3BucketSchema.KEY_NAME)

    @property
    def endpoint_override(self) -> str | None:
        return self.get(S3BucketSchema.ENDPOINT_OVERRIDE)

    def describe(self) -> str:
        """Short ``type:bucket/object`` label for logs and errors."""
        bucket = self.get(S3BucketSchema.BUCKET_NAME, "?")
        obj = self.get(S3BucketSchema.OBJECT_NAME) or self.get(S3BucketSchema.OBJECT_PREFIX, "")
        return f"{self.type}:{bucket}/{obj}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LocationDescriptor":
        """
        Build a descriptor from ``{"type": ..., "properties": {...}}``.

        Any other top-level keys are folded into the properties, so a flat
        mapping such as ``{"type": "AmazonS3", "bucketName": "b"}`` also works.
        """
        data = dict(data)
        type_ = data.pop("type", None)
        if not type_:
            msg = "Location descriptor requires a 'type'"
            raise ValueError(msg)
        properties = dict(data.pop("properties", None) or {})
        properties.update(data)
        return cls(type=str(type_), properties={k: str(v) for k, v in properties.items()})

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "properties": dict(self.properties)}
