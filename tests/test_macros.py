import pytest

from smake.macros import Macro, MacroTable


def test_set_and_get():
    table = MacroTable()
    table.set("CC", "gcc")
    assert table.get("CC") == "gcc"
    assert "CC" in table


def test_undefined_is_empty():
    table = MacroTable()
    assert table.get("NOPE") == ""
    assert "NOPE" not in table


def test_read_only_not_overridden_by_plain_set():
    table = MacroTable()
    table.set("CC", "cc", read_only=True)
    table.set("CC", "gcc")
    assert table.get("CC") == "cc"
    table.set("CC", "clang", read_only=True)
    assert table.get("CC") == "clang"


def test_append_accumulates_with_spaces():
    table = MacroTable()
    table.append("FLAGS", "a")
    table.append("FLAGS", "b")
    assert table.get("FLAGS") == "a b"


def test_append_combines_with_later_value():
    table = MacroTable()
    table.append("FLAGS", "extra")
    table.set("FLAGS", "base")
    assert table.get("FLAGS") == "base extra"


def test_append_keeps_existing_value():
    table = MacroTable()
    table.set("X", "one")
    table.append("X", "two")
    assert table.get("X") == "one two"


def test_export_marks_macro():
    table = MacroTable()
    table.set("PATH", "/bin")
    macro = table.export("PATH")
    assert macro.exported is True
    assert table.macro("PATH").exported is True


def test_macro_text_without_appendix():
    assert Macro(value="v").text == "v"


def test_expand_forms():
    table = MacroTable()
    table.set("CC", "gcc")
    table.set("X", "x1")
    assert table.expand("$(CC) ${CC} $X $$") == "gcc gcc x1 $"


def test_expand_recursive_value():
    table = MacroTable()
    table.set("A", "$(B)")
    table.set("B", "bee")
    assert table.expand("[$(A)]") == "[bee]"


def test_expand_computed_name():
    table = MacroTable()
    table.set("WHICH", "CC")
    table.set("CC", "gcc")
    assert table.expand("$($(WHICH))") == "gcc"


def test_expand_undefined_is_empty():
    table = MacroTable()
    assert table.expand("a$(NONE)b") == "ab"


def test_expand_cycle_raises():
    table = MacroTable()
    table.set("A", "$(B)")
    table.set("B", "$(A)")
    with pytest.raises(ValueError):
        table.expand("$(A)")


def test_expand_unterminated_raises():
    table = MacroTable()
    with pytest.raises(ValueError):
        table.expand("$(CC")