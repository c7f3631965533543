"""
Domain emitter: generates immutable kotlinx.serialization model files.

A return type with a single constructor becomes a standalone data class;
a return type shared by several constructors becomes one sealed interface
with every constructor nested inside it.
"""

from typing import Iterable, List, Optional

from .parser import TlConstructor
from .types import (
    FOREIGN_TYPES,
    cap,
    is_nullable,
    kotlin_ident,
    kotlin_type,
    snake_to_camel,
)

BANNER = "// Auto-generated by tlgen -- DO NOT EDIT"

WRAP_AT = 100


def _header(package_name: str, imports: Iterable[str]) -> List[str]:
    lines = [BANNER, "", f"package {package_name}", ""]
    lines.extend(f"import {imp}" for imp in sorted(set(imports)))
    lines.append("")
    return lines


def _serialization_imports(ctors: Iterable[TlConstructor]) -> List[str]:
    imports = ["kotlinx.serialization.SerialName", "kotlinx.serialization.Serializable"]
    if any(_needs_contextual(ctor, f.wire_name, f.wire_type)
           for ctor in ctors for f in ctor.fields):
        imports.append("kotlinx.serialization.Contextual")
    return imports


def _needs_contextual(ctor: TlConstructor, wire_name: str, wire_type: str) -> bool:
    # Foreign wire types have no kotlinx serializer.
    kt = kotlin_type(wire_type, is_nullable(ctor.field_docs.get(wire_name, "")))
    return any(foreign in kt for foreign in FOREIGN_TYPES)


def wrap_words(text: str, prefix: str, width: int = WRAP_AT) -> List[str]:
    """Greedy word wrap; every line starts with ``prefix``."""
    lines: List[str] = []
    buf = prefix
    for word in text.split(" "):
        if buf != prefix and len(buf) + len(word) + 1 > width:
            lines.append(buf)
            buf = f"{prefix} {word}"
        else:
            buf += f" {word}"
    lines.append(buf)
    return lines


def kdoc(ctor: TlConstructor, indent: str) -> List[str]:
    """KDoc block: wrapped description, then one @property per documented field."""
    lines = [f"{indent}/**"]
    if ctor.description:
        lines.extend(wrap_words(ctor.description, f"{indent} *"))

    props = [
        f"{indent} * @property {kotlin_ident(snake_to_camel(f.wire_name))} "
        f"{ctor.field_docs[f.wire_name]}"
        for f in ctor.fields
        if f.wire_name in ctor.field_docs
    ]
    if props:
        if ctor.description:
            lines.append(f"{indent} *")
        lines.extend(props)

    lines.append(f"{indent} */")
    return lines


def emit_class(ctor: TlConstructor, parent: str, indent: str = "") -> List[str]:
    """One data class (or data object for zero fields) extending ``parent``."""
    class_name = cap(ctor.name)
    lines: List[str] = []

    if ctor.description or ctor.field_docs:
        lines.extend(kdoc(ctor, indent))

    lines.append(f"{indent}@Serializable")
    lines.append(f'{indent}@SerialName(value = "{ctor.name}")')

    if not ctor.fields:
        lines.append(f"{indent}public data object {class_name} : {parent}")
        return lines

    lines.append(f"{indent}public data class {class_name}(")
    last = len(ctor.fields) - 1
    for idx, f in enumerate(ctor.fields):
        nullable = is_nullable(ctor.field_docs.get(f.wire_name, ""))
        kt = kotlin_type(f.wire_type, nullable)
        comma = "," if idx < last else ""

        lines.append(f'{indent}    @SerialName(value = "{f.wire_name}")')
        if _needs_contextual(ctor, f.wire_name, f.wire_type):
            lines.append(f"{indent}    @Contextual")
        lines.append(
            f"{indent}    public val {kotlin_ident(snake_to_camel(f.wire_name))}: {kt}{comma}")
    lines.append(f"{indent}) : {parent}")
    return lines


def emit_standalone_file(ctor: TlConstructor, package_name: str, base_class: str,
                         imports: Optional[Iterable[str]] = None) -> str:
    """Generate a file holding one standalone data class.

    Args:
        ctor: The only constructor of its return type.
        package_name: Kotlin package of the generated file.
        base_class: Interface every generated model implements.
        imports: Extra fully-qualified imports (cross-package references).
    """
    lines = _header(package_name, _serialization_imports([ctor]) + list(imports or ()))
    lines.extend(emit_class(ctor, parent=base_class))
    lines.append("")
    return "\n".join(lines)


def emit_sealed_file(return_type: str, group: List[TlConstructor], class_desc: str,
                     package_name: str, base_class: str,
                     imports: Optional[Iterable[str]] = None) -> str:
    """Generate a sealed interface with every constructor of the group nested.

    ::

        sealed interface ReactionType : TdObject {
            data class ReactionTypeEmoji(...) : ReactionType
            data object ReactionTypePaid : ReactionType
        }
    """
    sealed_name = cap(return_type)
    lines = _header(package_name, _serialization_imports(group) + list(imports or ()))

    if class_desc:
        lines.append("/**")
        lines.extend(wrap_words(class_desc, " *"))
        lines.append(" */")

    lines.append("@Serializable")
    lines.append(f"public sealed interface {sealed_name} : {base_class} {{")
    for ctor in group:
        lines.append("")
        lines.extend(emit_class(ctor, parent=sealed_name, indent="    "))
    lines.append("}")
    lines.append("")
    return "\n".join(lines)
