"""
Generator: schema text + configuration → generated Kotlin files.

Pure; no file I/O happens here.  The CLI writes the result.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Set

from .classifier import ANCHORS, STOP_WORDS, CategoryIndex, build_index
from .config import LAYOUT_CATEGORIZED, GeneratorConfig
from .domain_emitter import emit_sealed_file, emit_standalone_file
from .log import get_logger
from .mapping_emitter import emit_mapper, emit_sealed_mapper
from .parser import TlConstructor, TlSchema, parse
from .types import cap, domain_reference

logger = get_logger("generator")

DOMAIN_DIR = "domain"
MAPPING_DIR = "mapping"


@dataclass(frozen=True)
class GeneratedFile:
    relative_path: str   # e.g. "chat/Chat.kt"
    content: str


def group_types(schema: TlSchema) -> Dict[str, List[TlConstructor]]:
    """Return type → constructors, sorted by return type, source order kept."""
    groups: Dict[str, List[TlConstructor]] = {}
    for ctor in schema.types:
        groups.setdefault(ctor.return_type, []).append(ctor)
    return {rt: groups[rt] for rt in sorted(groups)}


def classify(schema: TlSchema, config: GeneratorConfig) -> CategoryIndex:
    """Build the category index over every return type of the schema."""
    anchors = dict(ANCHORS)
    anchors.update(config.anchors)
    return build_index(
        (ctor.return_type for ctor in schema.types),
        anchors=anchors,
        stop_words=set(STOP_WORDS) | set(config.stop_words),
        min_cluster_size=config.min_cluster_size,
    )


def _references(group: List[TlConstructor]) -> Set[str]:
    refs: Set[str] = set()
    for ctor in group:
        for f in ctor.fields:
            ref = domain_reference(f.wire_type)
            if ref is not None:
                refs.add(ref)
    return refs


def _file_name(return_type: str, group: List[TlConstructor]) -> str:
    if len(group) > 1:
        return cap(return_type)
    return cap(group[0].name)


def _emit_categorized(return_type: str, group: List[TlConstructor], schema: TlSchema,
                      index: CategoryIndex, config: GeneratorConfig) -> List[GeneratedFile]:
    category = index.get(return_type)
    package = f"{config.package_name}.{category}"
    name = _file_name(return_type, group)

    foreign_refs = sorted(
        (index.get(ref), ref) for ref in _references(group) if index.get(ref) != category)
    type_imports = [f"{config.package_name}.{cat}.{ref}" for cat, ref in foreign_refs]

    files = [GeneratedFile(f"{category}/{name}.kt",
                           _emit_domain(return_type, group, schema, package, config,
                                        type_imports))]
    if config.emit_mappers:
        mapper_imports = sorted({f"{config.package_name}.{cat}.toModel"
                                 for cat, _ in foreign_refs})
        files.append(GeneratedFile(f"{category}/{name}Mapper.kt",
                                   _emit_mapping(return_type, group, package,
                                                 mapper_imports)))
    return files


def _emit_split(return_type: str, group: List[TlConstructor], schema: TlSchema,
                config: GeneratorConfig) -> List[GeneratedFile]:
    domain_package = f"{config.package_name}.{DOMAIN_DIR}"
    name = _file_name(return_type, group)

    files = [GeneratedFile(f"{DOMAIN_DIR}/{name}.kt",
                           _emit_domain(return_type, group, schema, domain_package, config,
                                        []))]
    if config.emit_mappers:
        files.append(GeneratedFile(f"{MAPPING_DIR}/{name}Mapper.kt",
                                   _emit_mapping(return_type, group,
                                                 f"{config.package_name}.{MAPPING_DIR}",
                                                 [f"{domain_package}.{name}"])))
    return files


def _emit_domain(return_type: str, group: List[TlConstructor], schema: TlSchema,
                 package: str, config: GeneratorConfig, imports: List[str]) -> str:
    if len(group) > 1:
        return emit_sealed_file(
            return_type=return_type,
            group=group,
            class_desc=schema.class_descriptions.get(return_type, ""),
            package_name=package,
            base_class=config.base_class,
            imports=imports,
        )
    return emit_standalone_file(group[0], package, config.base_class, imports)


def _emit_mapping(return_type: str, group: List[TlConstructor], package: str,
                  imports: List[str]) -> str:
    if len(group) > 1:
        return emit_sealed_mapper(return_type, group, package, imports)
    return emit_mapper(group[0], package, imports)


def generate_from_schema(schema: TlSchema, config: GeneratorConfig) -> List[GeneratedFile]:
    groups = group_types(schema)
    index = classify(schema, config) if config.layout == LAYOUT_CATEGORIZED else None

    files: List[GeneratedFile] = []
    for return_type, group in groups.items():
        if index is not None:
            files.extend(_emit_categorized(return_type, group, schema, index, config))
        else:
            files.extend(_emit_split(return_type, group, schema, config))

    sealed = sum(1 for g in groups.values() if len(g) > 1)
    logger.info("emitted %d groups (%d sealed, %d standalone) into %d files",
                len(groups), sealed, len(groups) - sealed, len(files))
    return sorted(files, key=lambda f: f.relative_path)


def generate(schema_text: str, config: GeneratorConfig) -> List[GeneratedFile]:
    """Parse ``schema_text`` and generate every output file.

    Raises:
        MalformedSchema: If the schema cannot be parsed.
        UnresolvedType: If a field type cannot be mapped.
    """
    return generate_from_schema(parse(schema_text), config)


def summarize(files: List[GeneratedFile]) -> Dict[str, int]:
    """Top-level directory → number of files, sorted by directory."""
    counts = Counter(f.relative_path.split("/", 1)[0] for f in files)
    return {d: counts[d] for d in sorted(counts)}
