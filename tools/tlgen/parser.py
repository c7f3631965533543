"""
Parser: line-oriented reader that turns TL schema text into constructors.

A definition looks like::

    //@description Describes a chat @id Chat identifier @title Chat title
    chat id:int53 title:string = Chat;

Documentation lines are buffered and attached to the next definition;
definitions may wrap across lines until the terminating ``;``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .log import get_logger
from .types import cap

logger = get_logger("parser")

TYPES_MARKER = "---types---"
FUNCTIONS_MARKER = "---functions---"

# TL builtins that must never become domain classes (compared lower-case).
SKIP_TYPES = {
    "vector", "int32", "int53", "int64", "double", "string",
    "bool", "bytes", "true", "error", "ok",
}

_CLASS_RE = re.compile(r"//@class\s+(\w+)\s+@description\s+(.+)")
_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*")
_FIELD_RE = re.compile(r"(\w+):([\w.<>]+)")
_TAG_RE = re.compile(r"@(\w+)")


class MalformedSchema(Exception):
    """Raised when schema text cannot be split into definitions."""
    pass


# ── Schema model ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class TlField:
    wire_name: str   # exact wire identifier, e.g. "chat_id"
    wire_type: str   # TL type, e.g. "int53" or "vector<message>"


@dataclass(frozen=True)
class TlConstructor:
    name: str          # e.g. "chatTypePrivate"
    return_type: str   # e.g. "ChatType"
    description: str
    field_docs: Dict[str, str]
    fields: Tuple[TlField, ...]
    is_function: bool = False


@dataclass(frozen=True)
class TlSchema:
    types: Tuple[TlConstructor, ...]
    functions: Tuple[TlConstructor, ...]
    class_descriptions: Dict[str, str] = field(default_factory=dict)


# ── Comments ─────────────────────────────────────────────────────────

def parse_comments(comments: List[str]) -> Tuple[str, Dict[str, str]]:
    """Split buffered doc lines into (description, field docs).

    Text before the first ``@tag`` is ignored, ``@class`` is handled by
    the pre-pass, and every other tag names a field.
    """
    joined = " ".join(c.lstrip("/").strip() for c in comments)
    parts = _TAG_RE.split(joined)

    description = ""
    field_docs: Dict[str, str] = {}
    # re.split with one group yields [head, tag1, text1, tag2, text2, ...]
    for i in range(1, len(parts), 2):
        tag, text = parts[i], parts[i + 1].strip()
        if tag == "description":
            description = text
        elif tag == "class":
            continue
        else:
            field_docs[tag] = text
    return description, field_docs


def parse_class_descriptions(lines: List[str]) -> Dict[str, str]:
    """Collect ``//@class Name @description text`` lines, wherever they are."""
    descriptions: Dict[str, str] = {}
    for line in lines:
        m = _CLASS_RE.search(line)
        if m:
            descriptions[m.group(1)] = m.group(2).strip()
    return descriptions


# ── Definitions ──────────────────────────────────────────────────────

def parse_fields(fields_str: str) -> Tuple[TlField, ...]:
    """Extract ``name:type`` pairs left to right, dropping ``flags``."""
    return tuple(
        TlField(wire_name=m.group(1), wire_type=m.group(2))
        for m in _FIELD_RE.finditer(fields_str)
        if m.group(1) != "flags"
    )


def parse_definition(defn: str, comments: List[str], is_function: bool,
                     line: int = 0) -> Optional[TlConstructor]:
    """Parse one ``name field:Type ... = ReturnType;`` definition.

    Returns None for definitions that are intentionally filtered out
    (builtins, unparsable names, bare primitive re-declarations).

    Raises:
        MalformedSchema: If the definition has no ``=``.
    """
    eq = defn.rfind("=")
    if eq < 0:
        raise MalformedSchema(f"Line {line}: definition has no '=': {defn!r}")

    return_type = cap(defn[eq + 1:].strip().rstrip(";").strip())
    if return_type.lower() in SKIP_TYPES:
        logger.debug("line %d: skipping builtin %s", line, return_type)
        return None

    lhs = defn[:eq].strip()
    m = _NAME_RE.match(lhs)
    if not m:
        logger.debug("line %d: no constructor name in %r", line, defn)
        return None
    name = m.group(0)
    if name.lower() in SKIP_TYPES:
        return None

    fields_str = lhs[len(name):].strip()
    description, field_docs = parse_comments(comments)
    if not fields_str and not description and not comments:
        logger.debug("line %d: skipping bare declaration %s", line, name)
        return None

    return TlConstructor(
        name=name,
        return_type=return_type,
        description=description,
        field_docs=field_docs,
        fields=parse_fields(fields_str),
        is_function=is_function,
    )


# ── Schema ───────────────────────────────────────────────────────────

def parse(text: str) -> TlSchema:
    """Parse complete schema text.

    Content before any section marker belongs to the types section.

    Raises:
        MalformedSchema: On a definition without ``=`` or one left
            unterminated at end of input.
    """
    lines = text.splitlines()
    class_descriptions = parse_class_descriptions(lines)

    types: List[TlConstructor] = []
    functions: List[TlConstructor] = []
    is_function = False
    comments: List[str] = []

    i = 0
    n = len(lines)
    while i < n:
        trimmed = lines[i].strip()

        if trimmed == FUNCTIONS_MARKER:
            is_function = True
            comments.clear()
            i += 1
            continue
        if trimmed == TYPES_MARKER:
            is_function = False
            comments.clear()
            i += 1
            continue
        if not trimmed:
            i += 1
            continue
        if trimmed.startswith("//"):
            comments.append(trimmed)
            i += 1
            continue

        # Definitions may wrap; collect until a line ends with ';'.
        start = i + 1
        defn_lines: List[str] = []
        terminated = False
        while i < n:
            part = lines[i].strip()
            i += 1
            if not part:
                continue
            defn_lines.append(part)
            if part.endswith(";"):
                terminated = True
                break
        if not terminated:
            raise MalformedSchema(
                f"Line {start}: definition not terminated by ';' before end of input")

        ctor = parse_definition(" ".join(defn_lines), comments, is_function, start)
        if ctor is not None:
            (functions if is_function else types).append(ctor)
        comments.clear()

    logger.debug("parsed %d types, %d functions", len(types), len(functions))
    return TlSchema(
        types=tuple(types),
        functions=tuple(functions),
        class_descriptions=class_descriptions,
    )
