"""idiolect.extraction -- Parsing, signal extraction and node signatures."""

from idiolect.extraction.extractor import extract_file_signals
from idiolect.extraction.fingerprint import SignatureQueue, node_signature
from idiolect.extraction.parser import (
    ParsedSource,
    language_for_path,
    parse_clean,
    parse_source,
    walk,
)
from idiolect.extraction.signals import (
    AggregateSignals,
    FileSignals,
    SignalAccumulator,
    aggregate_signals,
)

__all__ = [
    "AggregateSignals",
    "FileSignals",
    "ParsedSource",
    "SignalAccumulator",
    "SignatureQueue",
    "aggregate_signals",
    "extract_file_signals",
    "language_for_path",
    "node_signature",
    "parse_clean",
    "parse_source",
    "walk",
]
