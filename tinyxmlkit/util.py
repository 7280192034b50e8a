"""Character classes, entity decoding, number formatting and parsing helpers."""

from __future__ import annotations

import enum
import math
import re
import struct

__all__ = [
    "ENTITIES",
    "XMLError",
    "XMLException",
    "Whitespace",
    "TextFlags",
    "is_whitespace",
    "is_name_start_char",
    "is_name_char",
    "is_prefix_hex",
    "skip_whitespace",
    "read_bom",
    "convert_utf32_to_utf8",
    "get_character_ref",
    "collapse_whitespace",
    "decode_text",
    "set_bool_serialization",
    "format_value",
    "format_float",
    "to_int",
    "to_unsigned",
    "to_int64",
    "to_unsigned64",
    "to_bool",
    "to_float",
    "to_double",
]

# The five predefined entities, in lookup order.
ENTITIES: tuple[tuple[str, str], ...] = (
    ("quot", '"'),
    ("amp", "&"),
    ("apos", "'"),
    ("lt", "<"),
    ("gt", ">"),
)

_WHITESPACE = " \t\n\v\f\r"
_BOM_TEXT = "\ufeff"
_BOM_BYTES = b"\xef\xbb\xbf"


class XMLError(enum.IntEnum):
    """Result and error codes."""

    SUCCESS = 0
    NO_ATTRIBUTE = 1
    WRONG_ATTRIBUTE_TYPE = 2
    ERROR_FILE_NOT_FOUND = 3
    ERROR_FILE_COULD_NOT_BE_OPENED = 4
    ERROR_FILE_READ_ERROR = 5
    ERROR_PARSING_ELEMENT = 6
    ERROR_PARSING_ATTRIBUTE = 7
    ERROR_PARSING_TEXT = 8
    ERROR_PARSING_CDATA = 9
    ERROR_PARSING_COMMENT = 10
    ERROR_PARSING_DECLARATION = 11
    ERROR_PARSING_UNKNOWN = 12
    ERROR_EMPTY_DOCUMENT = 13
    ERROR_MISMATCHED_ELEMENT = 14
    ERROR_PARSING = 15
    CAN_NOT_CONVERT_TEXT = 16
    NO_TEXT_NODE = 17
    ELEMENT_DEPTH_EXCEEDED = 18

    @property
    def label(self) -> str:
        """The conventional name of the code, such as ``XML_SUCCESS``."""
        return f"XML_{self.name}"


class XMLException(Exception):
    """An error carrying an :class:`XMLError` code and a line number."""

    def __init__(self, error: XMLError, line: int = 0, detail: str | None = None):
        self.error = XMLError(error)
        self.line = line
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        code = int(self.error)
        text = (
            f"Error={self.error.label} ErrorID={code} (0x{code:x}) "
            f"Line number={self.line}"
        )
        if self.detail is not None:
            text += f": {self.detail}"
        return text

    def __str__(self) -> str:
        return self.message


class Whitespace(enum.Enum):
    """How whitespace in text nodes is treated while parsing."""

    PRESERVE_WHITESPACE = 0
    COLLAPSE_WHITESPACE = 1
    PEDANTIC_WHITESPACE = 2


class TextFlags(enum.IntFlag):
    """Post-processing steps applied to raw parsed text."""

    NONE = 0
    NEEDS_ENTITY_PROCESSING = 0x01
    NEEDS_NEWLINE_NORMALIZATION = 0x02
    NEEDS_WHITESPACE_COLLAPSING = 0x04

    TEXT_ELEMENT = 0x03
    TEXT_ELEMENT_LEAVE_ENTITIES = 0x02
    ATTRIBUTE_NAME = 0x00
    ATTRIBUTE_VALUE = 0x03
    ATTRIBUTE_VALUE_LEAVE_ENTITIES = 0x02
    COMMENT = 0x02


# --- character classes -------------------------------------------------


def is_whitespace(ch: str) -> bool:
    """True for ASCII whitespace characters."""
    return len(ch) == 1 and ch in _WHITESPACE


def is_name_start_char(ch: str) -> bool:
    """True if *ch* may start an element or attribute name."""
    if len(ch) != 1:
        return False
    if ord(ch) >= 128:
        return True
    return ch.isalpha() or ch in ":_"


def is_name_char(ch: str) -> bool:
    """True if *ch* may appear inside an element or attribute name."""
    if is_name_start_char(ch):
        return True
    return len(ch) == 1 and (ch.isascii() and ch.isdigit() or ch in ".-")


def is_prefix_hex(text: str) -> bool:
    """True if *text*, after leading whitespace, starts with ``0x`` or ``0X``."""
    stripped = text.lstrip(_WHITESPACE)
    return len(stripped) >= 2 and stripped[0] == "0" and stripped[1] in "xX"


def skip_whitespace(text: str, pos: int = 0) -> tuple[int, int]:
    """Advance past whitespace from *pos*.

    Returns the new position and the number of line feeds skipped.
    """
    newlines = 0
    end = len(text)
    while pos < end and text[pos] in _WHITESPACE:
        if text[pos] == "\n":
            newlines += 1
        pos += 1
    return pos, newlines


def read_bom(text):
    """Strip a leading UTF-8 byte order mark.

    Accepts ``str`` or ``bytes`` and returns ``(rest, had_bom)``.
    """
    mark = _BOM_BYTES if isinstance(text, (bytes, bytearray)) else _BOM_TEXT
    if text.startswith(mark):
        return text[len(mark):], True
    return text, False


# --- character references and entities ---------------------------------


def convert_utf32_to_utf8(code: int) -> bytes:
    """Encode a code point in UTF-8, allowing values up to 0x1FFFFF.

    Values that do not fit in four bytes give ``b""``.
    """
    if code < 0x80:
        length, first_mark = 1, 0x00
    elif code < 0x800:
        length, first_mark = 2, 0xC0
    elif code < 0x10000:
        length, first_mark = 3, 0xE0
    elif code < 0x200000:
        length, first_mark = 4, 0xF0
    else:
        return b""

    tail = []
    for _ in range(length - 1):
        tail.append((code | 0x80) & 0xBF)
        code >>= 6
    return bytes([code | first_mark, *reversed(tail)])


def _code_point_to_text(code: int) -> str:
    if code >= 0x110000:
        return ""
    return chr(code)


def get_character_ref(text: str, pos: int) -> tuple[str, int] | None:
    """Decode a numeric character reference starting at ``text[pos] == '&'``.

    Returns the decoded text and the position just past the reference, or
    ``None`` if the reference is malformed.
    """
    if not (text.startswith("#", pos + 1) and pos + 2 < len(text)):
        return "", pos + 1

    if text[pos + 2] == "x":
        digits_start, base = pos + 3, 16
        if digits_start >= len(text):
            return None
        valid = "0123456789abcdefABCDEF"
    else:
        digits_start, base = pos + 2, 10
        valid = "0123456789"

    semicolon = text.find(";", digits_start)
    if semicolon < 0:
        return None
    digits = text[digits_start:semicolon]
    if any(ch not in valid for ch in digits):
        return None
    code = int(digits, base) if digits else 0
    return _code_point_to_text(code), semicolon + 1


def collapse_whitespace(text: str) -> str:
    """Trim leading and trailing whitespace and squeeze inner runs to one space."""
    words = []
    pos, _ = skip_whitespace(text, 0)
    end = len(text)
    while pos < end:
        start = pos
        while pos < end and text[pos] not in _WHITESPACE:
            pos += 1
        words.append(text[start:pos])
        pos, _ = skip_whitespace(text, pos)
    return " ".join(words)


def _decode_entity(text: str, pos: int) -> tuple[str, int]:
    """Decode the entity at ``text[pos] == '&'``; return (output, new pos)."""
    if text.startswith("#", pos + 1):
        ref = get_character_ref(text, pos)
        if ref is None:
            return "&", pos + 1
        return ref
    for pattern, value in ENTITIES:
        if text.startswith(pattern + ";", pos + 1):
            return value, pos + len(pattern) + 2
    return "&", pos + 1


def decode_text(raw: str, flags: TextFlags | int) -> str:
    """Apply newline normalization, entity decoding and whitespace collapsing."""
    flags = TextFlags(flags)
    normalize = TextFlags.NEEDS_NEWLINE_NORMALIZATION in flags
    entities = TextFlags.NEEDS_ENTITY_PROCESSING in flags

    if normalize or entities:
        out: list[str] = []
        pos = 0
        end = len(raw)
        while pos < end:
            ch = raw[pos]
            if normalize and ch == "\r":
                pos += 2 if raw.startswith("\n", pos + 1) else 1
                out.append("\n")
            elif normalize and ch == "\n":
                pos += 2 if raw.startswith("\r", pos + 1) else 1
                out.append("\n")
            elif entities and ch == "&":
                decoded, pos = _decode_entity(raw, pos)
                out.append(decoded)
            else:
                out.append(ch)
                pos += 1
        raw = "".join(out)

    if TextFlags.NEEDS_WHITESPACE_COLLAPSING in flags:
        raw = collapse_whitespace(raw)
    return raw


# --- formatting ---------------------------------------------------------


class _BoolText:
    def __init__(self) -> None:
        self.true = "true"
        self.false = "false"


_bool_text = _BoolText()


def set_bool_serialization(write_true: str | None, write_false: str | None) -> None:
    """Choose the words written for booleans; ``None`` restores the default."""
    _bool_text.true = write_true if write_true is not None else "true"
    _bool_text.false = write_false if write_false is not None else "false"


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def format_value(value) -> str:
    """Render a bool, integer, float or string as attribute or text content."""
    if isinstance(value, bool):
        return _bool_text.true if value else _bool_text.false
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return "%.17g" % value
    if isinstance(value, str):
        return value
    raise TypeError(f"cannot format value of type {type(value).__name__}")


def format_float(value: float) -> str:
    """Render a single-precision float with eight significant digits."""
    return "%.8g" % _to_float32(float(value))


# --- parsing ------------------------------------------------------------

_WS = r"[ \t\n\v\f\r]*"
_HEX_RE = re.compile(_WS + r"([+-]?)(?:0[xX])?([0-9a-fA-F]+)")
_DEC_RE = re.compile(_WS + r"([+-]?)([0-9]+)")
_FLOAT_RE = re.compile(
    _WS
    + r"([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    + r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


def _scan(text: str, base: int) -> tuple[bool, int]:
    match = (_HEX_RE if base == 16 else _DEC_RE).match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return match.group(1) == "-", int(match.group(2), base)


def _scan_signed(text: str, base: int) -> int:
    negative, magnitude = _scan(text, base)
    value = -magnitude if negative else magnitude
    return max(_INT64_MIN, min(_INT64_MAX, value))


def _scan_unsigned(text: str, base: int) -> int:
    negative, magnitude = _scan(text, base)
    if magnitude > _UINT64_MAX:
        return _UINT64_MAX
    return (-magnitude) % (1 << 64) if negative else magnitude


def _wrap(value: int, bits: int, signed: bool) -> int:
    value &= (1 << bits) - 1
    if signed and value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def to_int(text: str) -> int:
    """Parse a 32-bit signed integer, decimal or ``0x`` hexadecimal."""
    if is_prefix_hex(text):
        return _wrap(_scan_unsigned(text, 16), 32, True)
    return _wrap(_scan_signed(text, 10), 32, True)


def to_unsigned(text: str) -> int:
    """Parse a 32-bit unsigned integer, decimal or ``0x`` hexadecimal."""
    base = 16 if is_prefix_hex(text) else 10
    return _wrap(_scan_unsigned(text, base), 32, False)


def to_int64(text: str) -> int:
    """Parse a 64-bit signed integer, decimal or ``0x`` hexadecimal."""
    if is_prefix_hex(text):
        return _wrap(_scan_unsigned(text, 16), 64, True)
    return _scan_signed(text, 10)


def to_unsigned64(text: str) -> int:
    """Parse a 64-bit unsigned integer, decimal or ``0x`` hexadecimal."""
    base = 16 if is_prefix_hex(text) else 10
    return _scan_unsigned(text, base)


def to_bool(text: str) -> bool:
    """Parse an integer (non-zero is true) or one of true/True/TRUE/false/False/FALSE."""
    try:
        return to_int(text) != 0
    except ValueError:
        pass
    if text in ("true", "True", "TRUE"):
        return True
    if text in ("false", "False", "FALSE"):
        return False
    raise ValueError(f"not a boolean: {text!r}")


def to_double(text: str) -> float:
    """Parse the leading floating-point number of *text*."""
    match = _FLOAT_RE.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return float(match.group(1))


def to_float(text: str) -> float:
    """Parse the leading number of *text*, rounded to single precision."""
    return _to_float32(to_double(text))