from smake.envvars import DynamicEnvVar, export_dynamic
from smake.macros import MacroTable


def _table():
    table = MacroTable()
    table.set("CC", "gcc")
    table.set("OPT", "-O2")
    return table


def test_exports_expanded_value():
    table = _table()
    environ = {}
    var = DynamicEnvVar("BUILD", "$(CC) $(OPT)")
    exported = export_dynamic([var], table, environ)
    assert environ["BUILD"] == table.expand("$(CC) $(OPT)")
    assert exported == ["BUILD=" + environ["BUILD"]]
    assert var.env_string == exported[0]
    assert var.already_put is True


def test_already_put_is_skipped():
    table = _table()
    environ = {}
    var = DynamicEnvVar("BUILD", "$(CC)", already_put=True)
    assert export_dynamic([var], table, environ) == []
    assert "BUILD" not in environ


def test_second_call_exports_nothing():
    table = _table()
    environ = {}
    var = DynamicEnvVar("X", "$(OPT)")
    export_dynamic([var], table, environ)
    table.set("OPT", "-g")
    assert export_dynamic([var], table, environ) == []
    assert environ["X"] == "-O2"


def test_order_and_undefined_macro():
    table = _table()
    environ = {}
    vars_ = [DynamicEnvVar("A", "$(CC)"), DynamicEnvVar("B", "$(MISSING)")]
    exported = export_dynamic(vars_, table, environ)
    assert [entry.split("=", 1)[0] for entry in exported] == ["A", "B"]
    assert environ["B"] == ""
    assert environ["A"] == table.get("CC")