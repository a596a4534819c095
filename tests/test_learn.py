"""Tests for idiolect.learn -- end-to-end profile learning."""

import pytest

from idiolect.core.config import Config
from idiolect.core.types import Dimension, Provenance, RuleStatus
from idiolect.learn import is_test_like_path, learn_from_paths, learn_from_sources

APP_SOURCE = (
    "import a from 'a';\n"
    "import b from 'b';\n"
    "\n"
    "const greeting = 'hello';\n"
    "const target = 'world';\n"
    "\n"
    "setTimeout(function () {\n"
    "  run(greeting, target);\n"
    "}, 10);\n"
    "\n"
    "items.forEach(function () {\n"
    "  run('x');\n"
    "});\n"
)


class TestTestLikePaths:
    """Recognising tests, fixtures and scripts."""

    def test_directories(self):
        assert is_test_like_path("tests/app.js")
        assert is_test_like_path("src/__tests__/app.js")
        assert is_test_like_path("packages/core/fixtures/a.js")
        assert is_test_like_path("scripts/build.js")

    def test_file_names(self):
        assert is_test_like_path("src/app.test.js")
        assert is_test_like_path("src/app.spec.ts")
        assert is_test_like_path("test-utils.js")

    def test_windows_separators(self):
        assert is_test_like_path("src\\tests\\app.js")

    def test_source_files(self):
        assert not is_test_like_path("src/app.js")
        assert not is_test_like_path("src/contest.js")
        assert not is_test_like_path("lib/testing.js")


class TestLearnFromSources:
    """Learning from in-memory sources."""

    def test_learns_quotes(self, config):
        profile = learn_from_sources([("src/app.js", APP_SOURCE)], config)
        assert profile.files_analyzed == 1
        assert profile.sampled_files == ["src/app.js"]
        assert profile.value(Dimension.QUOTES) == "single"
        assert profile.rule(Dimension.QUOTES).provenance == Provenance.DETERMINISTIC

    def test_nothing_to_learn_from(self, config):
        with pytest.raises(ValueError, match="No parsable source files"):
            learn_from_sources([], config)

    def test_file_limit(self):
        config = Config(min_evidence=2, min_confidence=0.6, max_files_per_repo=1)
        files = [("a.js", APP_SOURCE), ("b.js", APP_SOURCE)]
        profile = learn_from_sources(files, config)
        assert profile.files_analyzed == 1

    def test_test_like_paths_skip_expression_naming(self, config):
        source_profile = learn_from_sources([("src/app.js", APP_SOURCE)], config)
        test_profile = learn_from_sources([("tests/app.test.js", APP_SOURCE)], config)
        assert source_profile.evidence["functionExpressions"] == 2
        assert test_profile.evidence["functionExpressions"] == 0
        assert test_profile.evidence["strings"] == source_profile.evidence["strings"]

    def test_test_like_paths_kept_when_disabled(self):
        config = Config(min_evidence=2, min_confidence=0.6, skip_test_like_paths=False)
        profile = learn_from_sources([("tests/app.test.js", APP_SOURCE)], config)
        assert profile.evidence["functionExpressions"] == 2

    def test_typescript_by_extension(self, config):
        source = "const a: string = 'x';\nconst b: string = 'y';\n"
        profile = learn_from_sources([("src/a.ts", source)], config)
        assert profile.evidence["strings"] == 2

    def test_default_config(self):
        profile = learn_from_sources([("src/app.js", APP_SOURCE)])
        assert profile.value(Dimension.QUOTES) is None


class TestAugmentation:
    """Augmenter command wired into learning."""

    def test_suggestions_merged(self, config):
        config.augmenter_command = (
            "cat > /dev/null; printf '%s' "
            "'{\"rules\": {\"syntax.yodaConditions\": "
            "{\"value\": \"never\", \"confidence\": 0.99, \"evidenceCount\": 500}}}'"
        )
        profile = learn_from_sources([("src/app.js", APP_SOURCE)], config)
        assert profile.augmented_rules == 1
        rule = profile.rule(Dimension.YODA_CONDITIONS)
        assert rule.value == "never"
        assert rule.provenance == Provenance.EXTERNALLY_AUGMENTED

    def test_empty_output_keeps_profile(self, config):
        config.augmenter_command = "cat > /dev/null"
        profile = learn_from_sources([("src/app.js", APP_SOURCE)], config)
        assert profile.augmented_rules == 0

    def test_failed_augmenter(self, config):
        config.augmenter_command = "cat > /dev/null; exit 1"
        with pytest.raises(RuntimeError):
            learn_from_sources([("src/app.js", APP_SOURCE)], config)


class TestLearnFromPaths:
    """Reading files from disk."""

    def test_reads_files(self, tmp_path, config):
        path = tmp_path / "app.js"
        path.write_text(APP_SOURCE, encoding="utf-8")
        profile = learn_from_paths([path], config)
        assert profile.sampled_files == [str(path)]
        assert profile.rule(Dimension.QUOTES).status == RuleStatus.ENFORCED

    def test_skips_unreadable(self, tmp_path, config):
        good = tmp_path / "app.js"
        good.write_text(APP_SOURCE, encoding="utf-8")
        binary = tmp_path / "blob.js"
        binary.write_bytes(b"\xff\xfe\x00bad")
        profile = learn_from_paths([tmp_path / "missing.js", binary, good], config)
        assert profile.files_analyzed == 1

    def test_nothing_readable(self, tmp_path, config):
        with pytest.raises(ValueError):
            learn_from_paths([tmp_path / "missing.js"], config)
