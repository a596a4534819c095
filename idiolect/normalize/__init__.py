"""idiolect.normalize -- Rewrite source text toward a learned profile."""

from idiolect.normalize.braces import normalize_single_line_if
from idiolect.normalize.calls import normalize_call_arguments
from idiolect.normalize.declarations import normalize_declaration_commas
from idiolect.normalize.inline_comments import normalize_inline_comments
from idiolect.normalize.member_chains import normalize_member_chains
from idiolect.normalize.pipeline import normalize_file, normalize_source, safe_only
from idiolect.normalize.replacements import (
    TextReplacement,
    apply_replacements,
    indent_for_column,
)
from idiolect.normalize.switch_breaks import normalize_switch_breaks
from idiolect.normalize.ternaries import normalize_ternaries

__all__ = [
    "TextReplacement",
    "apply_replacements",
    "indent_for_column",
    "normalize_call_arguments",
    "normalize_declaration_commas",
    "normalize_file",
    "normalize_inline_comments",
    "normalize_member_chains",
    "normalize_single_line_if",
    "normalize_source",
    "normalize_switch_breaks",
    "normalize_ternaries",
    "safe_only",
]
