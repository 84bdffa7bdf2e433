"""Custom exception classes for deployment-registry library."""


class RegistryError(Exception):
    """Base exception for deployment registry errors."""

    pass


class RegistryNotFoundError(RegistryError, FileNotFoundError):
    """Raised when a chain's registry file is not found."""

    pass


class RegistryParseError(RegistryError, ValueError):
    """Raised when a registry file cannot be parsed into deployment records."""

    pass


class ChainNotConfiguredError(RegistryError, ValueError):
    """Raised when a requested chain id is not in the chain table."""

    pass


class RPCError(RegistryError, RuntimeError):
    """Raised when a JSON-RPC request fails at the transport or node level."""

    pass


class RPCResponseError(RPCError):
    """Raised when the node answers a request with a JSON-RPC error object."""

    pass


class ContractCallError(RPCError):
    """Raised when a read-only contract call reverts or returns malformed data."""

    pass
