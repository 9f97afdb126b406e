import os

import pytest

from smake.options import (
    ArgumentKind,
    OptionError,
    Options,
    VersionRequested,
    parse_options,
    quote_str,
    split_makeflags,
    unquote_str,
)


def test_apply_keep_going_sets_flags():
    options = Options()
    assert options.apply("k") == ArgumentKind.NONE
    assert options.continue_after_error
    assert options.continue_after_error_ever_seen


def test_apply_tilde_inverts_next_only():
    options = Options()
    options.apply("~")
    options.apply("n")
    assert not options.do_not_exec_rule
    options.apply("n")
    assert options.do_not_exec_rule


def test_apply_argument_kinds_and_letters():
    options = Options()
    assert options.apply("f") == ArgumentKind.MAKEFILE
    assert ArgumentKind.MAKEFILE.letter == "f"
    assert options.apply("C").letter == "C"


def test_apply_jobs_selects_parallel():
    options = Options()
    options.apply("R")
    assert options.no_parallel
    options.apply("j")
    assert options.dmake_max_jobs_specified
    assert options.dmake_mode_type == "parallel"
    assert not options.no_parallel


def test_apply_print_sets_no_exec():
    options = Options()
    options.apply("p")
    assert options.trace_status and options.do_not_exec_rule


def test_apply_debug_counts_and_inverts():
    options = Options()
    options.apply("d")
    options.apply("d")
    options.apply("~")
    options.apply("d")
    assert options.debug_level == 1


def test_apply_version_raises():
    with pytest.raises(VersionRequested):
        Options().apply("v")


def test_parse_plain_flags_removed():
    options = Options()
    result = parse_options(["make", "-k", "all"], options)
    assert result == ["make", None, "all"]
    assert options.continue_after_error


def test_parse_makefile_argument_kept():
    result = parse_options(["make", "-f", "Makefile"], Options())
    assert result == ["make", "-f", "Makefile"]


def test_parse_combined_group_keeps_letter():
    options = Options()
    result = parse_options(["make", "-kf", "rules.mk"], options)
    assert result == ["make", "-f", "rules.mk"]
    assert options.continue_after_error


def test_parse_jobs():
    options = Options()
    result = parse_options(["make", "-j", "4", "all"], options)
    assert result == ["make", "-j", "4", "all"]
    assert options.dmake_max_jobs_specified


def test_parse_obsolete_option_and_argument_dropped():
    result = parse_options(["make", "-O", "x", "all"], Options())
    assert result == ["make", None, None, "all"]


def test_parse_unknown_option():
    with pytest.raises(OptionError, match="Unknown option `-Z'"):
        parse_options(["make", "-Z"], Options())


def test_parse_missing_argument():
    with pytest.raises(OptionError, match="Missing argument after `-f'") as info:
        parse_options(["make", "-f"], Options())
    assert "-f makefile" in info.value.usage


def test_parse_double_hyphen_option():
    options = Options()
    parse_options(["make", "--k"], options)
    assert options.continue_after_error


def test_parse_svr4_rejects_sunpro_only_option():
    options = Options(svr4=True)
    with pytest.raises(OptionError, match="Unknown option `-D'"):
        parse_options(["make", "-D"], options)


def test_parse_version():
    with pytest.raises(VersionRequested):
        parse_options(["make", "-v"], Options())


def test_parse_change_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sub = tmp_path / "sub"
    sub.mkdir()
    options = Options()
    result = parse_options(["make", "-C", str(sub)], options)
    assert result == ["make", "-C", str(sub)]
    assert os.path.samefile(os.getcwd(), sub)
    assert options.rebuild_arg0 and options.path_reset


def test_parse_change_directory_failure(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(OptionError, match="failed to change to directory"):
        parse_options(["make", "-C", str(tmp_path / "missing")], Options())


def test_quote_str_escapes_space():
    assert quote_str("a b") == "a\\ b"
    assert quote_str("abc") == "abc"


@pytest.mark.parametrize("text", ["a b", "$(CC) -o x", "it's", "back\\slash", "plain"])
def test_quote_round_trip(text):
    assert unquote_str(quote_str(text)) == text


def test_split_makeflags_none():
    assert split_makeflags(None) == ["MAKEFLAGS"]


def test_split_makeflags_old_format_adds_hyphen():
    assert split_makeflags("kn") == ["MAKEFLAGS", "-kn"]


def test_split_makeflags_new_format():
    assert split_makeflags("-k -n") == ["MAKEFLAGS", "-k", "-n"]
    assert split_makeflags("CC=gcc") == ["MAKEFLAGS", "CC=gcc"]


def test_split_makeflags_duplicate_hyphens():
    assert split_makeflags("--k") == split_makeflags("-k")
    assert split_makeflags("---") == ["MAKEFLAGS"]


def test_split_makeflags_unquotes_values():
    value = "X=" + quote_str("a b;c")
    assert split_makeflags("-k " + value)[-1] == "X=a b;c"


def test_split_then_parse():
    options = Options()
    parse_options(split_makeflags("kn"), options)
    assert options.continue_after_error and options.do_not_exec_rule