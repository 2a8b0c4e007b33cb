"""Error taxonomy for field resolution and explanation.

"Not found" is not an error here: resolvers return ``None`` or an empty list.
"""


class MappingExplainerError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInputError(MappingExplainerError, ValueError):
    """Missing or malformed source id, resource, name or key."""


class UpstreamError(MappingExplainerError, RuntimeError):
    """The document store or the function explainer failed."""


class ConfigurationError(MappingExplainerError):
    """Required configuration is missing or unreadable."""
