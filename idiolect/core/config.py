"""
idiolect.core.config -- Configuration for style learning and normalization.

Supports loading from YAML, environment variables, and programmatic
construction.  Only the orchestration layer (``idiolect.learn`` and
``idiolect.normalize.pipeline``) reads configuration; the extraction,
inference and normalization cores take plain arguments.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from idiolect.core.types import Thresholds

SAMPLING_MODES = frozenset({"compact", "full"})
LANGUAGES = frozenset({"javascript", "typescript", "tsx"})


@dataclass
class Config:
    """
    Central configuration object.

    Construct directly or via ``Config.from_yaml(path)``.
    """

    # -- inference thresholds -----------------------------------------------
    min_evidence: int = 30
    min_confidence: float = 0.75

    # -- sampling -----------------------------------------------------------
    max_files_per_repo: int = 400
    skip_test_like_paths: bool = True  # zero naming counters for tests/fixtures

    # -- external augmentation ----------------------------------------------
    # Shell command that receives {"profile", "sampledFiles"} as JSON on
    # stdin and prints rule suggestions as JSON on stdout.
    augmenter_command: Optional[str] = field(
        default_factory=lambda: os.environ.get("IDIOLECT_AUGMENTER_CMD") or None
    )
    sampling_mode: str = "compact"  # "compact" | "full"

    # -- normalization ------------------------------------------------------
    default_language: str = "javascript"
    safe_only: bool = False  # only apply rules marked auto-fix safe

    # -- structured logging -------------------------------------------------
    structured_logging: bool = False
    log_level: str = "INFO"

    # -----------------------------------------------------------------------
    # Derived values
    # -----------------------------------------------------------------------

    @property
    def thresholds(self) -> Thresholds:
        return Thresholds(
            min_evidence=self.min_evidence, min_confidence=self.min_confidence
        )

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ``ValueError`` when a setting is out of range."""
        if (
            isinstance(self.min_evidence, bool)
            or not isinstance(self.min_evidence, int)
            or self.min_evidence < 1
        ):
            raise ValueError(
                f"Invalid min_evidence: {self.min_evidence!r}. "
                "Expected a positive integer."
            )
        confidence = self.min_confidence
        if (
            not isinstance(confidence, (int, float))
            or not math.isfinite(confidence)
            or confidence < 0
            or confidence > 1
        ):
            raise ValueError(
                f"Invalid min_confidence: {confidence!r}. "
                "Expected a number between 0 and 1."
            )
        if (
            isinstance(self.max_files_per_repo, bool)
            or not isinstance(self.max_files_per_repo, int)
            or self.max_files_per_repo < 1
        ):
            raise ValueError(
                f"Invalid max_files_per_repo: {self.max_files_per_repo!r}. "
                "Expected a positive integer."
            )
        if self.sampling_mode not in SAMPLING_MODES:
            raise ValueError(
                f"Invalid sampling_mode: {self.sampling_mode!r}. Use compact or full."
            )
        if self.default_language not in LANGUAGES:
            raise ValueError(
                f"Invalid default_language: {self.default_language!r}; "
                f"expected one of {sorted(LANGUAGES)}"
            )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file.

        Any key in the YAML that matches a Config field is applied.
        Unknown keys are silently ignored so the file can carry
        tool-level settings alongside idiolect config.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as fh:
            raw: Dict[str, Any] = yaml.safe_load(fh) or {}

        # pull the idiolect section if nested, else use top-level
        data = raw.get("idiolect", raw)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} does not contain a mapping")

        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}

        return cls(**filtered)

    # -----------------------------------------------------------------------
    # Serialisation
    # -----------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dict (YAML/JSON-safe)."""
        return {
            "min_evidence": self.min_evidence,
            "min_confidence": self.min_confidence,
            "max_files_per_repo": self.max_files_per_repo,
            "skip_test_like_paths": self.skip_test_like_paths,
            "augmenter_command": self.augmenter_command,
            "sampling_mode": self.sampling_mode,
            "default_language": self.default_language,
            "safe_only": self.safe_only,
            "structured_logging": self.structured_logging,
            "log_level": self.log_level,
        }
