# smake

`smake` is a library that holds pieces of the logic of a classic `make`
utility. It covers macros, `%` pattern rules, command-line options and
start-up decisions. Each part is a plain Python module that you can use on
its own. The package has no dependencies outside the standard library.

## What is inside

| Module | Purpose |
| --- | --- |
| `smake.macros` | `Macro` and `MacroTable`: define, append to, export and expand macros |
| `smake.envvars` | `DynamicEnvVar` and `export_dynamic`: expand environment variables whose values hold macro references and put them into an environment mapping |
| `smake.patterns` | `PatternRule`, `PercentMatch`, `match_pattern`, `construct_from_pattern`, `find_percent_rule`, `expand_target_group`, `archive_member_name`, `add_to_chain`: `%` pattern rules |
| `smake.options` | `Options`, `ArgumentKind`, `parse_options`, `split_makeflags`, `quote_str`, `unquote_str`, and the exceptions `OptionError` and `VersionRequested` |
| `smake.startup` | `MakeMode`, `DmakeMode`, `OutputMode`, `detect_mode`, `argv_zero`, `select_dmake_mode`, `output_mode`, `temp_file_directory`, `make_level`, `directory_message`, `status_message` |

## Macros

```python
from smake.macros import MacroTable

table = MacroTable()
table.set("CC", "cc", False)
table.append("CFLAGS", "-O2")
table.export("CC")

table.expand("$(CC) $(CFLAGS) -c main.c")   # "cc -O2 -c main.c"
```

`$(NAME)`, `${NAME}` and one-letter references such as `$X` are expanded,
and `$$` gives a single `$`. A reference that leads back to itself raises
`ValueError`, and so does an unclosed reference.

If a macro was set read-only, for example from the command line, its value
stays. A later `set` that is not read-only does not replace it. `append`
keeps the text added by `+=` apart from the value. `get` returns both,
joined by a space.

## Environment variables with macro references

```python
import os
from smake.envvars import DynamicEnvVar, export_dynamic

variables = [DynamicEnvVar("TOOL", "$(CC)")]
export_dynamic(variables, table, os.environ)   # ["TOOL=cc"]
```

Each variable is expanded and exported only once. After that,
`already_put` is set on it.

## Pattern rules

```python
from smake.patterns import PatternRule, find_percent_rule

rule = PatternRule.parse("%.o", "%.c", "cc -c $<")
match = find_percent_rule("main.o", [rule], lambda name: name == "main.c")
match.percent        # "main"
match.dependencies   # ("main.c",)
match.less           # "main.c"
```

`match_pattern` matches a target against the pieces of a pattern. It returns
the stem, or `None` if there is no match. `construct_from_pattern` works the
other way: it rebuilds a name from the pieces and a stem, and drops a leading
`./`.

`find_percent_rule` goes through the rules in order. It picks the first
matching rule whose dependencies can all be built, as judged by the
`can_build` callable. If there is no such rule, it takes the first matching
rule whose `%` dependencies can be built. A target group written as
`a% + b%` is expanded by `expand_target_group`. For a target of the form
`lib.a(member)`, `archive_member_name` gives the member name.

## Command-line options

```python
from smake.options import Options, parse_options, split_makeflags

options = Options()
rest = parse_options(["make", "-k", "-f", "build.mk", "all"], options)
# rest == ["make", None, "-f", "build.mk", "all"]; options.continue_after_error is True
```

`parse_options` accepts the classic option letters. It also accepts `~`,
which inverts the option after it. In SVR4 mode (`options.svr4`) it accepts
the smaller SVR4 set. An option group that takes no argument is replaced by
`None`. A group that takes an argument is reduced to its letter, and the
argument is left where it is. `-C` changes the working directory straight
away. The following raise `OptionError`, which carries the usage text:

- an unknown option,
- a missing option argument,
- two argument-taking options in one group.

`-v` raises `VersionRequested`.

`split_makeflags` turns a `MAKEFLAGS` value into an argument vector headed
by `MAKEFLAGS`. It handles:

- the old form, where a hyphen is added,
- the new form,
- repeated leading hyphens,
- backslash-escaped spaces.

`quote_str` backslash-escapes shell metacharacters. `unquote_str` removes
the escapes again.

## Start-up decisions

`smake.startup` holds the small decisions made when the program starts:

- `detect_mode` picks the dialect (Sun, POSIX or SVR4) and GNU style from
  the program name and the environment.
- `argv_zero` gives the value used for `$(MAKE)`.
- `select_dmake_mode` chooses serial or parallel building. It raises
  `ValueError` for an unknown mode.
- `output_mode` reads `DMAKE_OUTPUT_MODE`.
- `temp_file_directory` finds the directory of the state file.
- `make_level` computes the new `MAKELEVEL` and the level to show.
- `directory_message` and `status_message` produce the progress lines:
  "Entering directory", "is up to date", "is updated" and "no action was
  taken".

## What this package does not do

`smake` is a set of building blocks, not a working `make`. It installs no
command. It does not:

- read makefiles or state files,
- run commands,
- track file times,
- build targets.

Suffix rules driven by `.SUFFIXES` are not included. Neither is composing
the `MAKEFLAGS` and `MFLAGS` values from parsed options, or entering
command-line `name=value` arguments and the environment as macros. Callers
who need these must provide them on top of the modules above.