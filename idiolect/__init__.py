"""
Idiolect -- Learn a codebase's JavaScript/TypeScript style and apply it.

    from idiolect import Config, learn_from_paths, normalize_file

    profile = learn_from_paths(["src/app.js", "src/util.js"], Config(min_evidence=10))
    fixed = normalize_file(new_text, profile, reference=old_text, path="src/app.js")
"""

from idiolect.core.config import Config
from idiolect.core.types import Dimension, InferredRule, RuleStatus, Thresholds
from idiolect.inference.profile import StyleProfile
from idiolect.learn import learn_from_paths, learn_from_sources
from idiolect.normalize.pipeline import normalize_file, normalize_source

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Dimension",
    "InferredRule",
    "RuleStatus",
    "StyleProfile",
    "Thresholds",
    "learn_from_paths",
    "learn_from_sources",
    "normalize_file",
    "normalize_source",
]
