"""
Type system: TL-to-Kotlin type mapping, nullability inference, and the
naming helpers shared by the emitters.
"""

import re
from typing import Optional

# Wire layer: the TDLib Java bindings.
WIRE_PACKAGE = "org.drinkless.tdlib"
WIRE_CLASS = "TdApi"

# Passed through verbatim; no domain counterpart.
ERROR_TYPE = f"{WIRE_PACKAGE}.{WIRE_CLASS}.Error"

# TL type name → Kotlin type name.
# int53 and int64 both widen to Long; int32 must stay Int.
TYPE_MAP = {
    "int32":  "Int",
    "Int32":  "Int",
    "int53":  "Long",
    "Int53":  "Long",
    "int64":  "Long",
    "Int64":  "Long",
    "double": "Double",
    "Double": "Double",
    "string": "String",
    "String": "String",
    "bool":   "Boolean",
    "Bool":   "Boolean",
    "true":   "Boolean",
    "True":   "Boolean",
    "bytes":  "ByteArray",
    "error":  ERROR_TYPE,
    "Error":  ERROR_TYPE,
}

FOREIGN_TYPES = {ERROR_TYPE}

PRIMITIVE_KOTLIN_TYPES = {"Int", "Long", "Double", "Boolean", "String", "ByteArray"}

KOTLIN_KEYWORDS = {
    "as", "break", "class", "continue", "do", "else", "false", "for", "fun",
    "if", "in", "interface", "is", "null", "object", "package", "return",
    "super", "this", "throw", "true", "try", "typealias", "typeof", "val",
    "var", "when", "while",
}

_VECTOR_RE = re.compile(r"^vector<(.+)>$", re.IGNORECASE)
_REFERENCE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


class UnresolvedType(Exception):
    """Raised when a wire type is neither known nor a plausible type name."""
    pass


def cap(name: str) -> str:
    """Upper-case the first character, leave the rest untouched."""
    return name[:1].upper() + name[1:]


def snake_to_camel(name: str) -> str:
    """chat_id → chatId"""
    parts = name.split("_")
    return parts[0] + "".join(cap(p) for p in parts[1:])


def kotlin_ident(name: str) -> str:
    """Back-quote identifiers that collide with Kotlin hard keywords."""
    if name in KOTLIN_KEYWORDS:
        return f"`{name}`"
    return name


def vector_element(wire_type: str) -> Optional[str]:
    """Return X for ``vector<X>`` (any case), else None."""
    m = _VECTOR_RE.match(wire_type.strip())
    if m:
        return m.group(1).strip()
    return None


def resolve(wire_type: str) -> str:
    """Map a TL type string to its Kotlin equivalent.

    Vectors resolve recursively, so ``vector<vector<int32>>`` becomes
    ``List<List<Int>>``.  Anything that is not a primitive is taken to be
    a reference to another generated domain type.

    Raises:
        UnresolvedType: If the string cannot name a type.
    """
    wire_type = wire_type.strip()
    inner = vector_element(wire_type)
    if inner is not None:
        return f"List<{resolve(inner)}>"
    if wire_type in TYPE_MAP:
        return TYPE_MAP[wire_type]
    if not _REFERENCE_RE.match(wire_type):
        raise UnresolvedType(f"cannot resolve wire type {wire_type!r}")
    return cap(wire_type)


def kotlin_type(wire_type: str, nullable: bool = False) -> str:
    """Kotlin declaration type, with ``? = null`` appended when nullable."""
    kt = resolve(wire_type)
    return f"{kt}? = null" if nullable else kt


def element_type(wire_type: str) -> str:
    """Strip every vector layer: ``vector<vector<X>>`` → ``X``."""
    inner = vector_element(wire_type)
    while inner is not None:
        wire_type = inner
        inner = vector_element(wire_type)
    return wire_type.strip()


def vector_depth(wire_type: str) -> int:
    depth = 0
    inner = vector_element(wire_type)
    while inner is not None:
        depth += 1
        inner = vector_element(inner)
    return depth


def is_primitive(wire_type: str) -> bool:
    """True when the innermost element maps to a Kotlin primitive."""
    return resolve(element_type(wire_type)) in PRIMITIVE_KOTLIN_TYPES


def is_foreign(wire_type: str) -> bool:
    """True when the innermost element is a pass-through wire type."""
    return resolve(element_type(wire_type)) in FOREIGN_TYPES


def domain_reference(wire_type: str) -> Optional[str]:
    """Name of the generated domain type a field refers to, if any."""
    if is_primitive(wire_type) or is_foreign(wire_type):
        return None
    return resolve(element_type(wire_type))


def is_nullable(field_doc: str) -> bool:
    """Guess optionality from field documentation prose.

    TL has no optional marker for object fields; TDLib documents them
    with "may be null" or "...; if not ..." instead.
    """
    lower = field_doc.lower()
    return "may be null" in lower or "; if not" in lower
