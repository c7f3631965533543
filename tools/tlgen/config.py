"""
Generator configuration and its YAML loader.

Example::

    package: com.example.tdlib
    base: TdObject
    layout: categorized
    mappers: true
    classifier:
      min_cluster_size: 4
      anchors:
        Wallet: payment
      stop_words: [Internal]
"""

import yaml
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from .classifier import DEFAULT_MIN_CLUSTER_SIZE

LAYOUT_CATEGORIZED = "categorized"
LAYOUT_SPLIT = "domain-mapping-split"
LAYOUTS = (LAYOUT_CATEGORIZED, LAYOUT_SPLIT)


class ValidationError(Exception):
    """Raised when a configuration file fails validation."""
    pass


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generator run."""
    package_name: str = "com.example.tdlib"
    base_class: str = "TdObject"
    layout: str = LAYOUT_CATEGORIZED
    emit_mappers: bool = True
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE
    anchors: Dict[str, str] = field(default_factory=dict)
    stop_words: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.layout not in LAYOUTS:
            raise ValidationError(
                f"Unknown layout {self.layout!r}, expected one of {', '.join(LAYOUTS)}")
        if not self.package_name:
            raise ValidationError("package name must not be empty")
        if not self.base_class:
            raise ValidationError("base class must not be empty")
        if self.min_cluster_size < 1:
            raise ValidationError("classifier.min_cluster_size must be >= 1")

    def override(self, **changes) -> "GeneratorConfig":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _expect(value, kind, key: str, context: str = "root"):
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValidationError(
            f"Field '{key}' in {context} section must be {kind.__name__}")
    return value


def parse_config_yaml(yaml_str: str) -> GeneratorConfig:
    """Parse a YAML configuration string into a GeneratorConfig.

    Missing keys keep their defaults; an empty document yields the
    default configuration.

    Raises:
        ValidationError: If the YAML is invalid or a value has the wrong type.
    """
    try:
        data = yaml.safe_load(yaml_str) if yaml_str else None
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML: {e}")

    if data is None:
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise ValidationError("YAML root must be a mapping")

    known = {"package", "base", "layout", "mappers", "classifier"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValidationError(f"Unknown field '{unknown[0]}' in root section")

    kwargs = {}
    if data.get("package") is not None:
        kwargs["package_name"] = _expect(data["package"], str, "package")
    if data.get("base") is not None:
        kwargs["base_class"] = _expect(data["base"], str, "base")
    if data.get("layout") is not None:
        kwargs["layout"] = _expect(data["layout"], str, "layout")
    if data.get("mappers") is not None:
        kwargs["emit_mappers"] = _expect(data["mappers"], bool, "mappers")

    # ---- classifier section (optional) ----
    classifier = data.get("classifier")
    if classifier is not None:
        _expect(classifier, dict, "classifier")
        if classifier.get("min_cluster_size") is not None:
            kwargs["min_cluster_size"] = _expect(
                classifier["min_cluster_size"], int, "min_cluster_size", "classifier")
        if classifier.get("anchors") is not None:
            anchors = _expect(classifier["anchors"], dict, "anchors", "classifier")
            for word, category in anchors.items():
                if not isinstance(word, str) or not isinstance(category, str):
                    raise ValidationError(
                        "Field 'anchors' in classifier section must map words to categories")
            kwargs["anchors"] = dict(anchors)
        if classifier.get("stop_words") is not None:
            words = _expect(classifier["stop_words"], list, "stop_words", "classifier")
            kwargs["stop_words"] = tuple(str(w) for w in words)

    return GeneratorConfig(**kwargs)


def load_config(path: Optional[str]) -> GeneratorConfig:
    """Read a YAML config file; ``None`` gives the defaults."""
    if path is None:
        return GeneratorConfig()
    with open(path) as f:
        return parse_config_yaml(f.read())
