"""Exceptions raised by the reveal engine and its markup host."""


class ContainerNotFound(LookupError):
    """The container reference did not resolve to a mounted container."""


class MarkupParseError(ValueError):
    """The target markup has unbalanced or unclosed structural tags."""


class RevealConfigError(ValueError):
    """Reveal options were rejected at entry."""
