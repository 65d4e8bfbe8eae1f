"""Exception types raised while extracting and resolving documentation."""


class ScssDocError(Exception):
    """Fatal, run-aborting failure."""


class RegistryError(ScssDocError):
    """Raised when the annotation registry is misconfigured."""


class AnnotationSyntaxError(ValueError):
    """Raised by an annotation parser when its value is malformed."""


class AliasCycleError(ValueError):
    """Raised when following an alias chain revisits a name."""

    def __init__(self, chain: list[str], cycle: frozenset[int] = frozenset()) -> None:
        """Keep the visited chain and the arena indexes forming the loop."""
        self.chain = chain
        self.cycle = cycle
        super().__init__("Alias cycle: " + " -> ".join(chain))
