"""
Shared Pydantic base models.

Layering:
- StrictModel: values this package constructs itself (extra='forbid')
- PermissiveModel: GitHub API payloads, which carry many fields we do not model
"""

from __future__ import annotations

import pydantic


class StrictModel(pydantic.BaseModel):
    """Base model with strict validation settings."""

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Raise error on unexpected fields
        strict=True,  # Strict type validation
        frozen=True,  # Immutable (cannot modify after creation)
    )


class PermissiveModel(pydantic.BaseModel):
    """
    Base model for GitHub API responses.

    Symmetry with StrictModel:
    - StrictModel: extra='forbid' (rejects unknown fields)
    - PermissiveModel: extra='allow' (accepts unknown fields)

    GitHub adds fields to gist payloads over time; unknown fields are kept
    on the instance (model_extra) instead of failing validation.
    """

    model_config = pydantic.ConfigDict(
        extra='allow',  # Accept unknown fields (graceful fallback)
        strict=True,  # Strict type coercion for known fields
        frozen=True,  # Immutable after creation
    )
