"""Tests for the structural diff engine."""

import pytest

from conftest import BROKEN, MODIFIED_SERVICE, ORIGINAL_SERVICE, SERVICE_FQCN
from impactscope.analysis.models import ChangeKind, MemberKind
from impactscope.analysis.structural_diff import StructuralDiffEngine
from impactscope.core.exceptions import UnparsableSource

BASE = """package com.example;

public class Calculator {
    private int total = 0;

    public int add(int value) {
        total += value;
        return total;
    }
}
"""


@pytest.fixture
def engine() -> StructuralDiffEngine:
    return StructuralDiffEngine()


def test_identical_text_yields_no_records(engine: StructuralDiffEngine):
    """Test identical original and modified text produce an empty list."""
    assert engine.diff_sources(SERVICE_FQCN, ORIGINAL_SERVICE, ORIGINAL_SERVICE) == []


def test_added_method(engine: StructuralDiffEngine):
    """Test a method only in the modified text yields one ADDED record."""
    modified = BASE.replace(
        "\n}\n",
        "\n\n    public void reset() {\n        total = 0;\n    }\n}\n",
    )
    records = engine.diff_sources("com.example.Calculator", BASE, modified)

    assert len(records) == 1
    record = records[0]
    assert record.change_kind == ChangeKind.ADDED
    assert record.member_kind == MemberKind.METHOD
    assert record.member_name == "reset"
    assert record.old_signature is None
    assert record.new_signature == "public void reset()"
    assert "total = 0;" in record.rendered_body


def test_removed_method(engine: StructuralDiffEngine):
    """Test a method only in the original text yields one REMOVED record."""
    modified = """package com.example;

public class Calculator {
    private int total = 0;
}
"""
    records = engine.diff_sources("com.example.Calculator", BASE, modified)

    assert len(records) == 1
    record = records[0]
    assert record.change_kind == ChangeKind.REMOVED
    assert record.member_name == "add"
    assert record.old_signature == "public int add(int value)"
    assert record.new_signature is None


def test_signature_change_is_modified(engine: StructuralDiffEngine):
    """Test a changed signature yields one MODIFIED record with both signatures."""
    modified = BASE.replace("public int add(int value)", "public long add(long value)")
    records = engine.diff_sources("com.example.Calculator", BASE, modified)

    assert len(records) == 1
    record = records[0]
    assert record.change_kind == ChangeKind.MODIFIED
    assert record.old_signature == "public int add(int value)"
    assert record.new_signature == "public long add(long value)"


def test_body_only_change_is_modified(engine: StructuralDiffEngine):
    """Test a body-only edit is still MODIFIED, with equal signatures."""
    modified = BASE.replace("return total;", "return total * 2;")
    records = engine.diff_sources("com.example.Calculator", BASE, modified)

    assert len(records) == 1
    record = records[0]
    assert record.change_kind == ChangeKind.MODIFIED
    assert record.old_signature == record.new_signature
    assert "total * 2" in record.rendered_body
    assert "return total;" in record.previous_body


def test_two_methods_modified_scenario(engine: StructuralDiffEngine):
    """Test changing two return types yields exactly two MODIFIED records."""
    records = engine.diff_sources(SERVICE_FQCN, ORIGINAL_SERVICE, MODIFIED_SERVICE)

    assert len(records) == 2
    assert {r.change_kind for r in records} == {ChangeKind.MODIFIED}
    by_name = {r.member_name: r for r in records}
    assert set(by_name) == {"generateData", "otherMethod"}
    assert by_name["generateData"].old_signature == "public String generateData()"
    assert by_name["generateData"].new_signature == "public Integer generateData()"
    assert by_name["otherMethod"].old_signature == "public int otherMethod(String input)"
    assert by_name["otherMethod"].new_signature == "public long otherMethod(String input)"


def test_field_change_in_multi_variable_statement(engine: StructuralDiffEngine):
    """Test changing one variable of a shared field statement touches only it."""
    original = "class Pair { int a = 1, b = 2; }"
    modified = "class Pair { int a = 1, b = 3; }"
    records = engine.diff_sources("Pair", original, modified)

    assert len(records) == 1
    assert records[0].member_kind == MemberKind.FIELD
    assert records[0].member_name == "b"


def test_overload_edit_yields_one_record(engine: StructuralDiffEngine):
    """Test editing one overload marks the shared slot once."""
    original = """class Logger {
    void log(String message) { System.out.println(message); }
    void log(String message, int level) { System.out.println(level + message); }
}"""
    modified = original.replace("level + message", "message + level")
    records = engine.diff_sources("Logger", original, modified)

    assert len(records) == 1
    assert records[0].member_name == "log"
    assert records[0].change_kind == ChangeKind.MODIFIED


def test_whitespace_only_edit_yields_metadata(engine: StructuralDiffEngine):
    """Test re-indenting and commenting produce only a metadata record."""
    modified = BASE.replace("        total += value;", "        // accumulate\n            total   +=   value;")
    records = engine.diff_sources("com.example.Calculator", BASE, modified)

    assert len(records) == 1
    record = records[0]
    assert record.change_kind == ChangeKind.METADATA
    assert record.member_kind is None
    assert record.member_name is None
    assert record.display_name == "com.example.Calculator"
    assert record.marker == "STRUCTURAL_METADATA_CHANGE"


def test_import_change_yields_metadata(engine: StructuralDiffEngine):
    """Test an import-only change is reported as metadata."""
    modified = BASE.replace("package com.example;\n", "package com.example;\n\nimport java.util.List;\n")
    records = engine.diff_sources("com.example.Calculator", BASE, modified)

    assert [r.change_kind for r in records] == [ChangeKind.METADATA]
    assert "+import java.util.List;" in records[0].rendered_body


def test_member_change_suppresses_metadata(engine: StructuralDiffEngine):
    """Test no metadata record is emitted when members changed."""
    modified = BASE.replace("package com.example;\n", "package com.example;\n\nimport java.util.List;\n")
    modified = modified.replace("return total;", "return -total;")
    records = engine.diff_sources("com.example.Calculator", BASE, modified)

    assert [r.change_kind for r in records] == [ChangeKind.MODIFIED]


def test_unparsable_version_raises(engine: StructuralDiffEngine):
    """Test a broken version escalates UnparsableSource."""
    with pytest.raises(UnparsableSource):
        engine.diff_sources(SERVICE_FQCN, ORIGINAL_SERVICE, BROKEN)


def test_render_diff_for_modified_record(engine: StructuralDiffEngine):
    """Test the oracle diff text carries markers, signatures and a unified diff."""
    records = engine.diff_sources(SERVICE_FQCN, ORIGINAL_SERVICE, MODIFIED_SERVICE)
    record = next(r for r in records if r.member_name == "generateData")
    text = record.render_diff()

    assert "// TYPE: METHOD_MODIFIED" in text
    assert "// OLD Signature: public String generateData()" in text
    assert "// NEW Signature: public Integer generateData()" in text
    assert "-        return \"data\";" in text
    assert "+        return 42;" in text
