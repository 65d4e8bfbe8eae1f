"""The set of annotations every run starts with."""

from collections.abc import Iterable
from typing import Any

from scssdoc.annotation import Annotation
from scssdoc.annotation_registry import AnnotationRegistry
from scssdoc.annotations import descriptive, references, structural

BUILTIN_FACTORIES = (
    descriptive.access,
    references.alias,
    descriptive.author,
    structural.content,
    descriptive.deprecated,
    structural.example,
    descriptive.group,
    descriptive.group_description,
    descriptive.ignore,
    descriptive.link,
    descriptive.name,
    structural.output,
    structural.parameter,
    structural.property_,
    references.require,
    structural.return_,
    references.see,
    descriptive.since,
    structural.throw,
    descriptive.todo,
    descriptive.type_,
)


def builtin_annotations(config: dict[str, Any]) -> list[Annotation]:
    """Build the built-in annotation handlers for a configuration."""
    return [factory(config) for factory in BUILTIN_FACTORIES]


def default_registry(
    config: dict[str, Any], extra: Iterable[Annotation] = ()
) -> AnnotationRegistry:
    """Build a registry with the built-ins plus user annotations."""
    registry = AnnotationRegistry(builtin_annotations(config))
    registry.register_all(extra)
    return registry
