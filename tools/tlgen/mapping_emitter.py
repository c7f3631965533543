"""
Mapping emitter: generates ``toModel()`` adapters from TdApi wire objects
to the generated domain models.
"""

from typing import Iterable, List, Optional

from .domain_emitter import BANNER
from .parser import TlConstructor, TlField
from .types import (
    WIRE_CLASS,
    WIRE_PACKAGE,
    cap,
    is_foreign,
    is_nullable,
    is_primitive,
    kotlin_ident,
    snake_to_camel,
    vector_element,
)

WIRE_IMPORT = f"{WIRE_PACKAGE}.{WIRE_CLASS}"


def _is_leaf_copy(wire_type: str) -> bool:
    return vector_element(wire_type) is None and (
        is_primitive(wire_type) or is_foreign(wire_type))


def map_value(expr: str, wire_type: str, nullable: bool = False, depth: int = 0) -> str:
    """Kotlin expression converting ``expr`` of TL type ``wire_type``.

    - primitive / foreign      → expr
    - vector of those          → expr.toList()
    - vector<X>                → expr.map { v0 -> <X conversion> }
    - domain type              → expr.toModel()

    Nullable values use ``?.`` so a missing value stays null.
    """
    dot = "?." if nullable else "."
    inner = vector_element(wire_type)

    if inner is None:
        if _is_leaf_copy(wire_type):
            return expr
        return f"{expr}{dot}toModel()"

    if _is_leaf_copy(inner):
        return f"{expr}{dot}toList()"

    var = f"v{depth}"
    return f"{expr}{dot}map {{ {var} -> {map_value(var, inner, depth=depth + 1)} }}"


def _field_lines(ctor: TlConstructor, indent: str) -> List[str]:
    lines: List[str] = []
    last = len(ctor.fields) - 1
    for idx, f in enumerate(ctor.fields):
        lines.append(f"{indent}{_field_assignment(ctor, f)}{',' if idx < last else ''}")
    return lines


def _field_assignment(ctor: TlConstructor, f: TlField) -> str:
    camel = kotlin_ident(snake_to_camel(f.wire_name))
    nullable = is_nullable(ctor.field_docs.get(f.wire_name, ""))
    return f"{camel} = {map_value(camel, f.wire_type, nullable)}"


def _header(package_name: str, imports: Iterable[str]) -> List[str]:
    lines = [BANNER, "", f"package {package_name}", ""]
    lines.extend(f"import {imp}" for imp in sorted({WIRE_IMPORT, *imports}))
    lines.append("")
    return lines


def emit_mapper(ctor: TlConstructor, package_name: str,
                imports: Optional[Iterable[str]] = None) -> str:
    """Adapter for a standalone data class::

        fun TdApi.Chat.toModel(): Chat = Chat(
            id = id,
            type = type.toModel(),
        )
    """
    class_name = cap(ctor.name)
    lines = _header(package_name, imports or ())
    receiver = f"{WIRE_CLASS}.{class_name}"

    if not ctor.fields:
        lines.append(f"public fun {receiver}.toModel(): {class_name} = {class_name}")
    else:
        lines.append(f"public fun {receiver}.toModel(): {class_name} = {class_name}(")
        lines.extend(_field_lines(ctor, "    "))
        lines.append(")")
    lines.append("")
    return "\n".join(lines)


def emit_sealed_mapper(return_type: str, group: List[TlConstructor], package_name: str,
                       imports: Optional[Iterable[str]] = None) -> str:
    """Exhaustive adapter for a sealed interface group::

        fun TdApi.ChatType.toModel(): ChatType = when (this) {
            is TdApi.ChatTypePrivate -> ChatType.ChatTypePrivate(userId = userId)
            else -> error("Unknown ChatType: $this")
        }

    A wire object matching no variant is fatal: ``error()`` throws.
    """
    sealed_name = cap(return_type)
    lines = _header(package_name, imports or ())

    lines.append(
        f"public fun {WIRE_CLASS}.{sealed_name}.toModel(): {sealed_name} = when (this) {{")
    for ctor in group:
        class_name = cap(ctor.name)
        target = f"{sealed_name}.{class_name}"
        if not ctor.fields:
            lines.append(f"    is {WIRE_CLASS}.{class_name} -> {target}")
            continue
        lines.append(f"    is {WIRE_CLASS}.{class_name} -> {target}(")
        lines.extend(_field_lines(ctor, "        "))
        lines.append("    )")
    lines.append(f'    else -> error("Unknown {sealed_name}: $this")')
    lines.append("}")
    lines.append("")
    return "\n".join(lines)
