# mimefold

Small, dependency-free helpers for working with the raw header block of an
e-mail or news message. Everything lives in `mimefold.headerutil`:

- `index_of_header(src, name)` finds the first header field called `name`
  (case-insensitively) and returns a `HeaderLocation` with `begin`, `end`,
  `data_begin` and `folded`, or `None` when there is no such field.
- `find_header_line_end(src, data_begin)` returns a `HeaderLineEnd` with the
  `end` of a field's data, the possibly adjusted `data_begin`, and whether the
  field is `folded` over several lines. An `end` of `-1` means `data_begin`
  was negative.
- `extract_header(src, name)` returns the value of the first field `name`,
  unfolded, or `None` if it is missing (or `src` is empty).
- `unfold_header(header)` joins folded lines, turning each fold into a
  single space; lines that wrongly begin with `=09` or `=20` are treated as
  continuations too.
- `fold_header(header)` folds a whole header line longer than 78 characters,
  preferring the space after a `,` or `;` outside a quoted string, and
  otherwise any unescaped space.
- `add_quotes(text, force_quotes)` escapes `\` and `"` with a backslash and
  wraps the text in double quotes if it contains one of `"(),.:;<=>@[\]`, or
  always when `force_quotes` is true. `remove_quotes(text)` drops the double
  quotes and decodes backslash pairs inside quoted parts.
- `balance_bidi_state(text)` removes unmatched PDF (U+202C) characters and
  appends the missing ones for open LRO/RLO/LRE/RLE characters, placing them
  before a trailing `"` if there is one; it logs a warning through the
  `mimefold.headerutil` logger when it has to change anything.
  `remove_bidi_control_chars(text)` simply removes LRO, RLO, LRE and RLE.

The header functions work on `bytes`; `add_quotes` and `remove_quotes`
accept either `bytes` or `str` and return the type they were given; the bidi
helpers work on `str`.

## Installation

```
pip install .
```

## Usage

```python
from mimefold.headerutil import (
    add_quotes,
    balance_bidi_state,
    extract_header,
    fold_header,
    index_of_header,
    remove_quotes,
    unfold_header,
)

head = b"From: Jane <jane@example.com>\nSubject: a long\n subject line\n"
extract_header(head, b"Subject")          # b"a long subject line"
extract_header(head, b"Cc")               # None
index_of_header(head, b"subject").folded  # True

unfold_header(b"one\n two")               # b"one two"

folded = fold_header(b"To: " + b", ".join([b"user@example.com"] * 6))
# a line break is inserted before the space that follows a comma

add_quotes("Doe, Jane", False)            # '"Doe, Jane"'
remove_quotes('"Doe, Jane"')              # 'Doe, Jane'

balance_bidi_state("Hello \u202eWorld")   # 'Hello \u202eWorld\u202c'
```

## What it does not do

This package only handles header text. It does not parse whole messages or
MIME structure, does not decode or encode RFC 2047 encoded words or RFC 2231
parameters, and does not interpret addresses, dates or other structured
header values. It has no command-line interface.

## Running the tests

```
pip install .[test]
pytest
```