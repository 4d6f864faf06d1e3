"""
rkebridge/models/settings.py

Defines the ConversionSettings model: which Terraform resource to read, how
to write the flat representation back, and the CLI log level.
"""

from __future__ import annotations

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from rkebridge.models.terraform import RKE_CLUSTER_RESOURCE_TYPE

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ConversionSettings(BaseModel):
    """
    Options for converting between Terraform state and the typed cluster.

    Attributes:
        resource_type: Terraform resource type holding the cluster.
        resource_name: Resource name or address; required when the state
            holds several resources of resource_type.
        resource_id: Identifier handed to the sink's set_id on export.
        sort_certificates: Write certificate bundles ordered by id.
        log_level: Root log level used by the CLI.
    """

    resource_type: str = Field(default=RKE_CLUSTER_RESOURCE_TYPE)
    resource_name: Optional[str] = None
    resource_id: Optional[str] = None
    sort_certificates: bool = True
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, val: object) -> object:
        """Accept log levels in any case."""
        return val.upper() if isinstance(val, str) else val

    @field_validator("resource_type")
    @classmethod
    def validate_resource_type(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("resource_type must be a non-empty string")
        return value
