"""Exception hierarchy for things3-mcp."""


class ThingsMCPError(Exception):
    """Base class for all things3-mcp errors."""


class OperationValidationError(ThingsMCPError, ValueError):
    """Tool arguments failed validation before any script was run."""


class UnknownOperationError(ThingsMCPError, ValueError):
    """No operation with the requested name exists in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ConfigurationError(ThingsMCPError):
    """Settings file could not be read or did not validate."""
