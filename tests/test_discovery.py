"""Tests for textual caller discovery."""

import pytest

from conftest import (
    BROKEN,
    BROKEN_FQCN,
    CONSUMER,
    CONSUMER_FQCN,
    ORIGINAL_SERVICE,
    REPORTER,
    REPORTER_FQCN,
    SERVICE_FQCN,
)
from impactscope.analysis.discovery import TextualCallDiscovery


@pytest.fixture
def discovery() -> TextualCallDiscovery:
    return TextualCallDiscovery()


@pytest.fixture
def corpus() -> dict[str, str]:
    return {
        SERVICE_FQCN: ORIGINAL_SERVICE,
        CONSUMER_FQCN: CONSUMER,
        REPORTER_FQCN: REPORTER,
    }


def test_finds_calling_methods(discovery: TextualCallDiscovery, corpus: dict[str, str]):
    """Test callers are reported with the methods that contain the call."""
    callers = discovery.find_callers(SERVICE_FQCN, "generateData", corpus)

    assert set(callers) == {CONSUMER_FQCN, REPORTER_FQCN}
    consumer = callers[CONSUMER_FQCN]
    assert consumer.method_names == ["consume"]
    assert "service.generateData()" in consumer.excerpts[0]
    assert callers[REPORTER_FQCN].method_names == ["report"]


def test_target_file_is_never_reported(discovery: TextualCallDiscovery, corpus: dict[str, str]):
    """Test the declaring file is excluded even though it contains the pattern."""
    corpus[SERVICE_FQCN] = ORIGINAL_SERVICE.replace('return "data";', 'return generateData();')
    callers = discovery.find_callers(SERVICE_FQCN, "generateData", corpus)

    assert SERVICE_FQCN not in callers


def test_no_occurrence_returns_empty(discovery: TextualCallDiscovery, corpus: dict[str, str]):
    """Test a symbol nobody calls yields an empty map."""
    assert discovery.find_callers(SERVICE_FQCN, "otherMethod", corpus) == {}


def test_blank_symbol_returns_empty(discovery: TextualCallDiscovery, corpus: dict[str, str]):
    """Test blank symbol names are not searched."""
    assert discovery.find_callers(SERVICE_FQCN, "  ", corpus) == {}


def test_broken_file_is_skipped(discovery: TextualCallDiscovery, corpus: dict[str, str]):
    """Test a file with syntax errors is excluded while valid callers remain."""
    corpus[BROKEN_FQCN] = BROKEN
    callers = discovery.find_callers(SERVICE_FQCN, "generateData", corpus)

    assert set(callers) == {CONSUMER_FQCN, REPORTER_FQCN}


def test_pattern_outside_methods_is_not_a_match(discovery: TextualCallDiscovery):
    """Test a field initializer call does not produce a method match."""
    corpus = {
        "com.example.Holder": "class Holder { String cached = DataService.generateData(); }",
    }
    assert discovery.find_callers(SERVICE_FQCN, "generateData", corpus) == {}


def test_caller_context_labels_methods(discovery: TextualCallDiscovery, corpus: dict[str, str]):
    """Test caller excerpts are formatted with module and method labels."""
    callers = discovery.find_callers(SERVICE_FQCN, "generateData", corpus)
    context = callers[CONSUMER_FQCN].to_context()

    assert context.startswith(f"// Module: {CONSUMER_FQCN} - Method: consume\n")


def test_file_with_invalid_text_is_skipped(discovery: TextualCallDiscovery, corpus: dict[str, str]):
    """Test a file that cannot be encoded as UTF-8 is skipped like a broken one."""
    corpus["com.example.Bad"] = "class Bad { void f() { x.generateData(); } } // \ud800"
    callers = discovery.find_callers(SERVICE_FQCN, "generateData", corpus)

    assert set(callers) == {CONSUMER_FQCN, REPORTER_FQCN}
