"""Services package."""
from services.body_merge import BodyOperation, merge_body
from services.update_payload import (
    CanonicalPayload,
    FeatureToggle,
    NoOpVerdict,
    NormalizerConfig,
    UpdateInstruction,
    build_entity_update,
    build_update_payload,
)

__all__ = [
    "BodyOperation",
    "CanonicalPayload",
    "FeatureToggle",
    "NoOpVerdict",
    "NormalizerConfig",
    "UpdateInstruction",
    "build_entity_update",
    "build_update_payload",
    "merge_body",
]
