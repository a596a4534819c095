"""idiolect.core -- Configuration, logging setup and rule type definitions."""

from idiolect.core.config import Config
from idiolect.core.types import (
    RULE_DESCRIPTORS,
    Dimension,
    InferredRule,
    Provenance,
    RuleDescriptor,
    RuleStatus,
    Thresholds,
)

__all__ = [
    "Config",
    "Dimension",
    "InferredRule",
    "Provenance",
    "RULE_DESCRIPTORS",
    "RuleDescriptor",
    "RuleStatus",
    "Thresholds",
]
