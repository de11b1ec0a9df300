# snapshotkit

A toolbox for snapshot testing. It compares what your code produced with a
stored expectation, and uses placeholders and wildcards for the parts that
change from one run to the next.

Data throughout the package is one of three kinds:

- text (`str`);
- binary (`bytes` or `bytearray`), which filters leave untouched;
- JSON values (`dict`, `list` and scalars), whose strings and object keys are
  normalized.

## Modules

### `snapshotkit.redactions`

`Redactions` maps values onto placeholders of the form `[NAME]`. A name may
only use `A`–`Z` and `_`; any other placeholder raises `InvalidPlaceholder`.

- `insert(placeholder, value)` accepts a string, a path-like object or a
  compiled `re.Pattern`.
  - A path matches both as written and with `\` turned into `/`.
  - A regex with a group named `redacted` replaces only that group.
  - An empty string or path marks the placeholder as unused.
- `extend` inserts many pairs at once.
- `remove(placeholder)` stops a placeholder from being used.
- `redact(text)` replaces the values with their placeholders.
- `clear_unused(pattern)` removes unused placeholders from a pattern.
- `Redactions.with_exe()` sets up `[EXE]` for the executable suffix of the
  running platform: `.exe` on Windows and empty, so unused, elsewhere.

### `snapshotkit.filters`

These functions make output consistent across platforms:

- `normalize_lines` turns `\r\n` and a lone `\r` into `\n`.
- `normalize_paths` turns every `\` into `/`.
- `filter_newlines`, `filter_paths` and `redact_data` apply those changes, or
  a `Redactions`, to any of the three kinds of data.
- `map_json_strings` applies a function to every string and key in a JSON
  value.

### `snapshotkit.pattern`

`NormalizeToExpected` changes actual data to fit an expected pattern. Where
the actual data fits, the matching parts are replaced with the pattern's own
text, so a plain `==` afterwards tells you whether the two agree.

It is built in steps:

- `NormalizeToExpected().redact()` turns on the built-in wildcards.
- `.redact_with(redactions)` turns on the wildcards together with your
  placeholders.
- `.unordered()` reorders the actual lines or array items to follow the
  expected order.
- `.normalize(actual, expected)` returns the adjusted data.

The wildcards are:

- `...` on a line by itself, which matches any number of whole lines;
- `[..]` inside a line, which matches any run of characters;
- `"{...}"` as a JSON value, which matches any value;
- `"...": "{...}"` in a JSON object, which matches any other keys.

`line_matches` and `is_line_elide` are available for matching single lines.

### `snapshotkit.report` and `snapshotkit.palette`

`render_diff(expected, actual, expected_name, actual_name, palette)` returns
a description of how the two pieces of data differ.

- Text and JSON get a numbered, line-based diff.
- Changed words are emphasized.
- A missing final newline is marked with `∅`.
- When there are more than 20 lines, runs of unchanged lines further than 5
  lines from a change are shown as `⋮`.
- Binary data is shown whole.

`render_text_diff` does the same for two strings, and you can give it line
offsets.

`Palette.plain()` adds no escape sequences. `Palette.color()` uses ANSI
colours, built from `Style`, `AnsiColor` and `Effects`.

### `snapshotkit.fsops`

Helpers for the file system:

- `walk` lists a tree in name order. It does not follow symlinks and skips
  files named `.keep`.
- `copy_template` copies a tree.
- `shallow_copy` copies a single entry and keeps the file's modification time.
- `resolve_dir` resolves a directory. A plain file holding a relative target
  is followed to that target.
- `canonicalize`, `normalize_path`, `strip_trailing_slash` and
  `display_relpath` work on paths.

Failures raise `DirError`.

### `snapshotkit.fixture`

`write_fixture(fixture, root)` fills `root` in one of two ways:

- from a template directory, given as a string or a path;
- from a mapping or a sequence of `(path, content)` pairs, where content is a
  `str` or `bytes`.

A path that would land outside `root` raises `DirError`.

### `snapshotkit.root`

`DirRoot` is the directory a test works in:

- `DirRoot.none()` gives no directory.
- `DirRoot.immutable(path)` uses a directory that the test must not change.
- `DirRoot.mutable_temp()` creates a temporary sandbox, which `close()`
  removes.
- `DirRoot.mutable_at(path)` empties a fixed directory and uses it as a
  sandbox.

`with_template(fixture)` fills a sandbox. `DirRoot` also works as a context
manager.

### `snapshotkit.pathdiff`

Both functions compare every entry under a pattern tree with the entry at the
same place in an actual tree:

- `subset_eq_iter(pattern_root, actual_root)` compares file contents
  literally, after normalizing newlines.
- `subset_matches_iter(pattern_root, actual_root, redactions)` also allows
  wildcards and placeholders in pattern files, and treats `\` in actual
  content as `/`.

Both yield `(expected_path, actual_path)` for each entry that agrees. For
each entry that does not, they yield a `PathDiff`, which is one of
`Failure`, `TypeMismatch`, `LinkMismatch` or `ContentMismatch`.

- `render(palette)` describes the difference.
- `overwrite()` updates the pattern tree to match the actual tree.

`FileType.from_path` tells whether a path is a dir, a file, a symlink, an
unknown entry or missing.

## Example

```python
from snapshotkit.redactions import Redactions
from snapshotkit.pattern import NormalizeToExpected

redactions = Redactions()
redactions.insert("[OBJECT]", "world")

actual = "Hello world!\nline 2\nline 3\n"
expected = "Hello [OBJECT]!\n...\n"

normalized = NormalizeToExpected().redact_with(redactions).normalize(actual, expected)
assert normalized == expected
```

```python
from snapshotkit.palette import Palette
from snapshotkit.report import render_diff

print(render_diff("Hello\nWorld\n", "Hello\n", "expected.txt", "actual", Palette.plain()))
```

## What it does not do

snapshotkit provides building blocks only.

- It has no ready-made assertion that compares data and fails a test.
- It does not update snapshot files based on an environment variable.
- It does not run commands or capture their output.
- It has no command-line program.
- It does not read or write snapshot files, apart from what
  `ContentMismatch.overwrite` writes back.

## Running the tests

```
pip install -e .[test]
pytest
```