"""
idiolect.inference.augment -- Merge externally suggested rules.

An outside collaborator (typically a model behind a shell command) can
look at the profile plus a sample of files and propose
``{value, confidence, evidenceCount}`` per dimension name.  Suggestions
are validated against the dimension table, gated by the same
thresholds as deterministic rules, and only win when they are clearly
better than what inference already found.
"""

from __future__ import annotations

import json
import logging
import math
import subprocess
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from idiolect.core.types import (
    RULE_DESCRIPTORS,
    Dimension,
    InferredRule,
    Provenance,
    RuleDescriptor,
    RuleStatus,
    Thresholds,
)

log = logging.getLogger(__name__)

MAX_COMPACT_FILES = 12
MAX_COMPACT_CHARS = 5000
TRUNCATION_MARKER = "\n/* ...truncated... */\n"

# A suggestion must beat an enforced rule by more than this margin.
REPLACEMENT_MARGIN = 0.05


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _clamp01(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return min(1.0, max(0.0, number))


def normalize_suggested_value(value: Any, descriptor: RuleDescriptor) -> Any:
    """Return a valid value for ``descriptor`` or None when rejected."""
    if descriptor.numeric:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value) or value < 0:
            return None
        return int(round(value))
    return value if descriptor.accepts(value) else None


def _suggestion_map(suggestions: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(suggestions, Mapping):
        return None
    nested = suggestions.get("rules")
    if isinstance(nested, Mapping):
        return nested
    return suggestions


def _should_replace(current: Optional[InferredRule], candidate: InferredRule) -> bool:
    if current is None:
        return True
    if not current.enforced:
        return candidate.enforced
    return candidate.enforced and candidate.confidence > current.confidence + REPLACEMENT_MARGIN


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


def augment_rules(
    rules: Mapping[Dimension, InferredRule],
    suggestions: Any,
    thresholds: Optional[Thresholds] = None,
    default_evidence: int = 0,
) -> Tuple[Dict[Dimension, InferredRule], int]:
    """Apply valid suggestions; returns ``(new_rules, applied_count)``.

    ``suggestions`` maps dimension names to ``{value, confidence,
    evidenceCount}``; a ``{"rules": {...}}`` wrapper is accepted.
    Unknown names and invalid values are ignored.  The input mapping is
    not modified.
    """
    t = thresholds or Thresholds()
    merged = dict(rules)
    entries = _suggestion_map(suggestions)
    if not entries:
        return merged, 0

    applied = 0
    for name, raw in entries.items():
        dimension = Dimension.lookup(name) if isinstance(name, str) else None
        if dimension is None or not isinstance(raw, Mapping):
            continue
        descriptor = RULE_DESCRIPTORS[dimension]
        value = normalize_suggested_value(raw.get("value"), descriptor)
        if value is None:
            log.debug("Rejected suggestion for %s: %r", name, raw.get("value"))
            continue

        confidence = _clamp01(raw.get("confidence", 0))
        evidence = raw.get("evidenceCount")
        if isinstance(evidence, bool) or not isinstance(evidence, int):
            evidence = default_evidence
        evidence = max(0, evidence)

        enforced = evidence >= t.min_evidence and confidence >= t.min_confidence
        candidate = InferredRule(
            value=value if enforced else None,
            status=RuleStatus.ENFORCED if enforced else RuleStatus.UNDETERMINED,
            confidence=confidence,
            evidence_count=evidence,
            provenance=Provenance.EXTERNALLY_AUGMENTED,
            auto_fix_safe=descriptor.auto_fix_safe,
        )
        if not _should_replace(merged.get(dimension), candidate):
            continue

        merged[dimension] = candidate
        applied += 1

    if applied:
        log.info("Applied %d external rule suggestion(s)", applied)
    return merged, applied


# ---------------------------------------------------------------------------
# External command
# ---------------------------------------------------------------------------


def select_sampled_files(
    files: Sequence[Dict[str, str]], sampling_mode: str = "compact"
) -> List[Dict[str, str]]:
    """Pick the files sent to the augmenter.

    Compact mode keeps the first few files and truncates long ones.
    """
    if sampling_mode == "full":
        return [dict(f) for f in files]
    selected = []
    for entry in list(files)[:MAX_COMPACT_FILES]:
        source = entry.get("source", "")
        if len(source) > MAX_COMPACT_CHARS:
            source = source[:MAX_COMPACT_CHARS] + TRUNCATION_MARKER
        selected.append({"path": entry.get("path", ""), "source": source})
    return selected


def request_suggestions(
    command: str,
    profile: Mapping[str, Any],
    sampled_files: Sequence[Dict[str, str]],
    sampling_mode: str = "compact",
) -> Any:
    """Run ``command`` with the JSON payload on stdin and parse its stdout.

    Raises ``RuntimeError`` when the command fails or prints something
    that is not JSON.  Empty output means no suggestions.
    """
    payload = json.dumps(
        {"profile": profile, "sampledFiles": select_sampled_files(sampled_files, sampling_mode)}
    )
    try:
        completed = subprocess.run(
            command,
            shell=True,
            input=payload,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip()
        raise RuntimeError(
            f"Augmenter command failed with exit code {exc.returncode}"
            + (f": {detail}" if detail else "")
        ) from exc

    stdout = completed.stdout.strip()
    if not stdout:
        return None
    try:
        return json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Augmenter command printed invalid JSON: {exc}") from exc
