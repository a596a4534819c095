"""idiolect.inference -- Rule inference, profiles and external augmentation."""

from idiolect.inference.augment import augment_rules, request_suggestions
from idiolect.inference.profile import StyleProfile, infer_profile
from idiolect.inference.rules import (
    binary_rule,
    density_rule,
    infer_indent_unit,
    infer_line_width,
    infer_rules,
)

__all__ = [
    "StyleProfile",
    "augment_rules",
    "binary_rule",
    "density_rule",
    "infer_indent_unit",
    "infer_line_width",
    "infer_profile",
    "infer_rules",
    "request_suggestions",
]
