"""Registry of annotation handlers keyed by name, with alias indirection."""

import dataclasses
import logging
from collections.abc import Iterable, Iterator

from scssdoc.annotation import Annotation
from scssdoc.errors import RegistryError

logger = logging.getLogger(__name__)


class AnnotationRegistry:
    """Holds built-in and user annotation handlers for one run."""

    def __init__(self, handlers: Iterable[Annotation] = ()) -> None:
        """Initialize the registry, optionally with a list of handlers."""
        self._handlers: dict[str, Annotation] = {}
        self._aliases: dict[str, str] = {}
        self._frozen = False
        self.register_all(handlers)

    def register(self, name: str, handler: Annotation) -> None:
        """Add a handler under a name, overriding any previous one."""
        if self._frozen:
            msg = f"Cannot register annotation `{name}` once a run has started"
            raise RegistryError(msg)
        if name in self._aliases:
            msg = (
                f"Annotation `{name}` collides with an alias "
                f"of `{self._aliases[name]}`"
            )
            raise RegistryError(msg)
        if handler.name != name:
            handler = dataclasses.replace(handler, name=name)

        previous = self._handlers.get(name)
        if previous is not None:
            logger.debug("Overriding annotation `%s`", name)
            for alias in previous.aliases:
                self._aliases.pop(alias, None)

        for alias in handler.aliases:
            if alias in self._handlers:
                msg = f"Alias `{alias}` of `{name}` collides with an annotation"
                raise RegistryError(msg)
            self._aliases[alias] = name
        self._handlers[name] = handler

    def register_all(self, handlers: Iterable[Annotation]) -> None:
        """Add handlers, each registered under its own name."""
        for handler in handlers:
            self.register(handler.name, handler)

    def canonical(self, name: str) -> str | None:
        """Resolve an alias to its canonical name; None when unknown."""
        if name in self._handlers:
            return name
        return self._aliases.get(name)

    def get(self, name: str) -> Annotation | None:
        """Return the handler for a name or alias."""
        canonical = self.canonical(name)
        return self._handlers[canonical] if canonical else None

    def freeze(self) -> None:
        """Make the registry read-only for the rest of the run."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Tell whether the registry has been frozen."""
        return self._frozen

    def names(self) -> list[str]:
        """Return canonical names in registration order."""
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        """Check a name or alias."""
        return isinstance(name, str) and self.canonical(name) is not None

    def __iter__(self) -> Iterator[Annotation]:
        """Iterate handlers in registration order."""
        return iter(self._handlers.values())

    def __len__(self) -> int:
        """Return the number of canonical handlers."""
        return len(self._handlers)
