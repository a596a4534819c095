"""
idiolect.learn -- Learn a style profile from a set of source files.

    from idiolect import Config, learn_from_sources

    profile = learn_from_sources([("src/app.js", text)], Config(min_evidence=5))
    profile.value(Dimension.QUOTES)

File discovery is the caller's job; this module only parses, extracts,
aggregates and infers.  When ``Config.augmenter_command`` is set the
deterministic profile is handed to that command and its suggestions
are merged in.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from idiolect.core.config import Config
from idiolect.extraction.extractor import extract_file_signals
from idiolect.extraction.parser import language_for_path, parse_source
from idiolect.extraction.signals import FileSignals, aggregate_signals
from idiolect.inference.augment import augment_rules, request_suggestions
from idiolect.inference.profile import StyleProfile, infer_profile

log = logging.getLogger(__name__)

# Directories and file names whose code does not reflect the author's
# usual habits (tests favour short anonymous callbacks, for one).
_TEST_LIKE_DIR_RE = re.compile(
    r"(?:^|/)(?:tests?|examples?|fixtures?|bench(?:mark)?|__tests__|__mocks__"
    r"|__fixtures__|specs?|demos?|samples?|scripts?|docs?|dist)(?:/|$)"
)
_TEST_LIKE_BASE_RE = re.compile(
    r"^(?:test|example|bench)[.\-]|\.(?:test|spec)\.[^.]+$"
)


def is_test_like_path(path: str) -> bool:
    normalized = path.replace("\\", "/").lower()
    base = normalized.rsplit("/", 1)[-1]
    return bool(_TEST_LIKE_DIR_RE.search(normalized) or _TEST_LIKE_BASE_RE.search(base))


def _signals_for(path: str, text: str, config: Config) -> Optional[FileSignals]:
    parsed = parse_source(text, language_for_path(path))
    if parsed is None:
        log.debug("Skipping unparsable file %s", path)
        return None
    signals = extract_file_signals(parsed)
    if config.skip_test_like_paths and is_test_like_path(path):
        signals = dataclasses.replace(signals, function_expr_named=0, function_expr_anonymous=0)
    return signals


def learn_from_sources(
    files: Iterable[Tuple[str, str]],
    config: Optional[Config] = None,
) -> StyleProfile:
    """Build a profile from ``(path, text)`` pairs.

    Only the first ``config.max_files_per_repo`` files are read.  Raises
    ``ValueError`` when none of them could be parsed, and
    ``RuntimeError`` when the augmenter command fails.
    """
    config = config or Config()
    records: List[FileSignals] = []
    sampled: List[Dict[str, str]] = []

    for index, (path, text) in enumerate(files):
        if index >= config.max_files_per_repo:
            log.info("File limit of %d reached; ignoring the rest", config.max_files_per_repo)
            break
        signals = _signals_for(path, text, config)
        if signals is None:
            continue
        records.append(signals)
        sampled.append({"path": path, "source": text})

    if not records:
        raise ValueError(
            "No parsable source files were found. "
            "Check the file list and extensions."
        )

    profile = infer_profile(
        aggregate_signals(records),
        config.thresholds,
        sampled_files=[entry["path"] for entry in sampled],
    )
    log.info(
        "Learned %d enforced rule(s) from %d file(s)",
        len(profile.enforced()),
        profile.files_analyzed,
    )

    if config.augmenter_command:
        profile = _augment(profile, sampled, config)
    return profile


def _augment(profile: StyleProfile, sampled: Sequence[Dict[str, str]], config: Config) -> StyleProfile:
    suggestions = request_suggestions(
        config.augmenter_command,
        profile.to_dict(),
        sampled,
        config.sampling_mode,
    )
    if suggestions is None:
        log.info("Augmenter returned no suggestions")
        return profile
    rules, applied = augment_rules(
        profile.rules,
        suggestions,
        config.thresholds,
        default_evidence=len(sampled),
    )
    return dataclasses.replace(profile, rules=rules, augmented_rules=applied)


def learn_from_paths(paths: Iterable[str | Path], config: Optional[Config] = None) -> StyleProfile:
    """Read each file as UTF-8 and learn from the readable ones."""
    config = config or Config()

    def _read() -> Iterable[Tuple[str, str]]:
        for path in paths:
            try:
                text = Path(path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                log.warning("Skipping unreadable file %s: %s", path, exc)
                continue
            yield str(path), text

    return learn_from_sources(_read(), config)
