"""Errors raised by kritic."""


class KriticError(Exception):
    pass


class FetchError(KriticError):
    """Listing pods or nodes from the cluster failed."""

    def __init__(self, resource: str, reason: str):
        self.resource = resource
        self.reason = reason
        super().__init__(f"Failed to list {resource}: {reason}")


class ConfigError(KriticError):
    """The command line configuration cannot be used."""
