"""Payload classification: types, sub-format parsers and the classifier."""

from .types import (
    FILTER_ALL,
    FILTER_CHOICES,
    TYPE_LABELS,
    ClassifiedPayload,
    ScanPayloadType,
)
from .classifier import classify, truncate
from .actions import action_target, contact_name_parts, copy_value

__all__ = [
    "FILTER_ALL",
    "FILTER_CHOICES",
    "TYPE_LABELS",
    "ClassifiedPayload",
    "ScanPayloadType",
    "classify",
    "truncate",
    "action_target",
    "contact_name_parts",
    "copy_value",
]
