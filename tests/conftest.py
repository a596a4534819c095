"""Shared fixtures for idiolect tests."""

import pytest

from idiolect.core.config import Config
from idiolect.core.types import InferredRule, RuleStatus
from idiolect.extraction.extractor import extract_file_signals
from idiolect.extraction.parser import parse_source


@pytest.fixture(autouse=True)
def no_augmenter_env(monkeypatch):
    """Keep a developer's augmenter command out of the default Config."""
    monkeypatch.delenv("IDIOLECT_AUGMENTER_CMD", raising=False)


@pytest.fixture
def parse():
    """Parse JavaScript (or another grammar) and fail loudly on no tree."""

    def _parse(source, language="javascript"):
        parsed = parse_source(source, language)
        assert parsed is not None
        return parsed

    return _parse


@pytest.fixture
def signals(parse):
    """Extract FileSignals straight from source text."""

    def _signals(source, language="javascript"):
        return extract_file_signals(parse(source, language))

    return _signals


@pytest.fixture
def config():
    """Low thresholds so small test corpora produce enforced rules."""
    return Config(min_evidence=2, min_confidence=0.6)


@pytest.fixture
def enforced():
    """Build an enforced rule for a value."""

    def _enforced(value, confidence=1.0, evidence=50, auto_fix_safe=False):
        return InferredRule(
            value=value,
            status=RuleStatus.ENFORCED,
            confidence=confidence,
            evidence_count=evidence,
            auto_fix_safe=auto_fix_safe,
        )

    return _enforced
