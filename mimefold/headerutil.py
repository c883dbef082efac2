"""Helpers for locating, unfolding, folding and quoting RFC 5322 header fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AnyStr

__all__ = [
    "HeaderLocation",
    "HeaderLineEnd",
    "find_header_line_end",
    "index_of_header",
    "extract_header",
    "unfold_header",
    "fold_header",
    "remove_quotes",
    "add_quotes",
    "balance_bidi_state",
    "remove_bidi_control_chars",
]

log = logging.getLogger(__name__)

_LF = 0x0A
_SPACE = 0x20
_TAB = 0x09
_EQUALS = 0x3D
_QUOTE = 0x22
_BACKSLASH = 0x5C

# Line length limit recommended by RFC 5322, section 2.1.1.
MAX_LINE_LENGTH = 78

_RESERVED = frozenset('"(),.:;<=>@[\\]')

_LRO = "\u202d"
_RLO = "\u202e"
_LRE = "\u202a"
_RLE = "\u202b"
_PDF = "\u202c"
_DIRECTION_OPENERS = frozenset((_LRO, _RLO, _LRE, _RLE))


@dataclass(frozen=True)
class HeaderLineEnd:
    """End of a header field's data, with the (possibly adjusted) data start."""

    end: int
    data_begin: int
    folded: bool


@dataclass(frozen=True)
class HeaderLocation:
    """Where a header field sits inside a block of header lines."""

    begin: int
    end: int
    data_begin: int
    folded: bool


def _is_space(byte: int) -> bool:
    return byte == _SPACE or 0x09 <= byte <= 0x0D


def _is_bad_continuation(src: bytes, at: int) -> bool:
    """True if ``src[at:at + 2]`` is ``09`` or ``20`` (a '=09'/'=20' line start)."""
    return src[at:at + 2] in (b"09", b"20")


def find_header_line_end(src: bytes, data_begin: int) -> HeaderLineEnd:
    """Find where the header whose data starts at *data_begin* ends.

    An end of -1 means *data_begin* was negative. *data_begin* is moved past
    a leading empty line whose continuation is folded onto the next line.
    """
    src = bytes(src)
    last = len(src) - 1
    folded = False

    if data_begin < 0:
        return HeaderLineEnd(-1, data_begin, False)
    if data_begin > last:
        return HeaderLineEnd(last + 1, data_begin, False)

    end = data_begin
    # An entirely empty first line folded onto the following one.
    if src[end] == _LF and end + 1 < last and src[end + 1] in (_SPACE, _TAB):
        data_begin += 2
        end += 2

    if src[end] != _LF:
        while True:
            end = src.find(b"\n", end + 1)
            if end == -1 or end == last:
                break
            following = src[end + 1]
            if following in (_SPACE, _TAB) or (
                following == _EQUALS and end + 3 <= last and _is_bad_continuation(src, end + 2)
            ):
                folded = True
            else:
                break

    if end < 0:
        end = last + 1
    return HeaderLineEnd(end, data_begin, folded)


def index_of_header(src: bytes, name: bytes) -> HeaderLocation | None:
    """Locate the first header field called *name* (case-insensitively).

    Returns ``None`` when no such field exists.
    """
    src = bytes(src)
    name = bytes(name)
    needle = name + b":"

    if src[:len(needle)].lower() == needle.lower():
        begin = 0
    else:
        # The search stops at the first NUL byte, as a C string search would.
        haystack = src.split(b"\0", 1)[0]
        found = haystack.lower().find(b"\n" + needle.lower())
        if found < 0:
            return None
        begin = found + 1

    data_begin = begin + len(name) + 1
    if data_begin < len(src) and src[data_begin] == _SPACE:
        data_begin += 1
    line_end = find_header_line_end(src, data_begin)
    return HeaderLocation(begin, line_end.end, line_end.data_begin, line_end.folded)


def extract_header(src: bytes, name: bytes) -> bytes | None:
    """Return the (unfolded) value of the first header *name*, or ``None``."""
    src = bytes(src)
    if not src:
        return None
    location = index_of_header(src, name)
    if location is None:
        return None
    begin, end = location.data_begin, location.end
    if not location.folded:
        return src[begin:end]
    if end > begin:
        return unfold_header(src[begin:end])
    return b""


def unfold_header(header: bytes) -> bytes:
    """Join folded header lines, collapsing each fold into a single space."""
    header = bytes(header)
    end = len(header)
    if end == 0:
        return b""

    result = bytearray()
    pos = 0
    while True:
        nul = header.find(b"\0", pos)
        fold_mid = header.find(b"\n", pos, end if nul == -1 else nul)
        if fold_mid == -1:
            break

        fold_begin = fold_mid
        while fold_begin > 0 and _is_space(header[fold_begin - 1]):
            fold_begin -= 1

        fold_end = fold_mid
        while fold_end <= end - 1:
            current = header[fold_end]
            if _is_space(current):
                fold_end += 1
            elif (
                header[fold_end - 1] == _LF
                and current == _EQUALS
                and fold_end + 2 < end - 1
                and _is_bad_continuation(header, fold_end + 1)
            ):
                # Malformed continuation starting with =09 or =20.
                fold_end += 3
            else:
                break

        result += header[pos:fold_begin]
        if fold_begin != pos and fold_end < end - 1:
            result.append(_SPACE)
        pos = fold_end

    if end > pos:
        result += header[pos:end]
    return bytes(result)


def fold_header(header: bytes) -> bytes:
    """Fold a full header line so that lines stay within 78 characters where possible."""
    header = bytes(header)
    if len(header) <= MAX_LINE_LENGTH:
        return header

    pos = header.find(b":") + 1
    if pos <= 0 or pos >= len(header):
        return header

    hdr = bytearray(header)
    # Any unescaped space may take a fold; one after ',' or ';' outside
    # a quoted string is preferred.
    eligible = pos
    recommended = pos
    start = 0
    in_escape = False
    in_quoted = False

    while True:
        if pos - start > MAX_LINE_LENGTH and eligible:
            fws = recommended or eligible
            hdr.insert(fws, _LF)
            eligible = 0 if eligible <= fws else eligible + 1
            recommended = 0
            start = fws + 1
            pos += 1
            continue

        if pos >= len(hdr):
            break

        current = hdr[pos]
        if current == _LF:
            recommended = eligible = 0
            start = pos + 1

        if current == _SPACE and not in_escape and hdr[pos - 1] != _LF:
            eligible = pos
            if hdr[pos - 1] in b",;" and not in_quoted:
                recommended = pos

        if current == _QUOTE and not in_escape:
            in_quoted = not in_quoted
        elif current == _BACKSLASH or in_escape:
            in_escape = not in_escape

        pos += 1

    return bytes(hdr)


def _units(text: AnyStr) -> list[AnyStr]:
    if isinstance(text, str):
        return list(text)
    return [bytes((byte,)) for byte in text]


def remove_quotes(text: AnyStr) -> AnyStr:
    """Drop DQUOTE characters and decode quoted-pairs inside quoted parts."""
    as_str = isinstance(text, str)
    quote, backslash = ('"', "\\") if as_str else (b'"', b"\\")
    out = []
    in_quote = False
    units = iter(_units(text))
    for unit in units:
        if unit == quote:
            in_quote = not in_quote
        elif in_quote and unit == backslash:
            escaped = next(units, None)
            if escaped is not None:
                out.append(escaped)
        else:
            out.append(unit)
    joiner = "" if as_str else b""
    return joiner.join(out)


def add_quotes(text: AnyStr, force_quotes: bool) -> AnyStr:
    """Turn *text* into a quoted-string if it holds special characters or if forced."""
    as_str = isinstance(text, str)
    quote, backslash = ('"', "\\") if as_str else (b'"', b"\\")
    out = []
    needs_quotes = False
    for unit in _units(text):
        char = unit if as_str else unit.decode("latin-1")
        if char in _RESERVED:
            needs_quotes = True
        if unit in (backslash, quote):
            out.append(backslash)
        out.append(unit)
    if needs_quotes or force_quotes:
        out.insert(0, quote)
        out.append(quote)
    joiner = "" if as_str else b""
    return joiner.join(out)


def balance_bidi_state(text: str) -> str:
    """Balance Unicode direction overrides/embeddings with PDF characters.

    Stray PDF characters are removed; missing ones are appended, before a
    trailing double quote if there is one.
    """
    out = []
    open_changers = 0
    for char in text:
        if char in _DIRECTION_OPENERS:
            open_changers += 1
        elif char == _PDF:
            if open_changers == 0:
                log.warning("Possible Unicode spoofing (unexpected PDF) detected in %r", text)
                continue
            open_changers -= 1
        out.append(char)

    result = "".join(out)
    if open_changers > 0:
        log.warning("Possible Unicode spoofing detected in %r", text)
        closing = _PDF * open_changers
        if result.endswith('"'):
            result = result[:-1] + closing + '"'
        else:
            result += closing
    return result


def remove_bidi_control_chars(text: str) -> str:
    """Remove LRO, RLO, LRE and RLE characters from *text*."""
    return "".join(char for char in text if char not in _DIRECTION_OPENERS)