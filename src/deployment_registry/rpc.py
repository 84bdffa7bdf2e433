"""JSON-RPC chain access for deployment-registry library."""

from typing import Any, List, Protocol

import requests
from web3 import Web3

from .exceptions import ContractCallError, RPCError, RPCResponseError


class ChainReader(Protocol):
    """Read-only chain access used by the classifier and verifier."""

    def get_storage_at(self, address: str, slot: str) -> bytes:
        """Return the raw 32-byte word at a storage slot (zero-filled when unset)."""
        ...

    def get_code(self, address: str) -> bytes:
        """Return the runtime bytecode at an address (empty for accounts)."""
        ...

    def call_address_getter(self, address: str, function_name: str) -> str:
        """Call a zero-argument view function returning an address."""
        ...


def function_selector(function_name: str) -> str:
    """
    Compute the 4-byte selector of a zero-argument function.

    Args:
        function_name: Function name without parentheses, e.g. "owner"

    Returns:
        0x-prefixed hex selector, e.g. "0x8da5cb5b"
    """
    digest = Web3.keccak(text=f"{function_name}()")
    return "0x" + bytes(digest[:4]).hex()


def _hex_to_bytes(value: str) -> bytes:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise RPCError(f"Malformed hex value in RPC response: {value!r}")
    try:
        return bytes.fromhex(value[2:])
    except ValueError as e:
        raise RPCError(f"Malformed hex value in RPC response: {value!r}") from e


class JSONRPCClient:
    """Minimal Ethereum JSON-RPC client over HTTP."""

    def __init__(self, rpc_url: str, timeout: float = 30):
        """
        Initialize the client.

        Args:
            rpc_url: RPC endpoint URL
            timeout: Per-request transport timeout in seconds
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._session = requests.Session()
        self._request_id = 0

    def _request(self, method: str, params: List[Any]) -> Any:
        """
        Send one JSON-RPC request and return its result.

        Raises:
            RPCError: On HTTP errors, network errors or JSON-RPC error objects
        """
        self._request_id += 1
        try:
            response = self._session.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params,
                    "id": self._request_id,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RPCError(f"Network error during {method}: {e}") from e

        # Check for HTTP errors
        if response.status_code != 200:
            raise RPCError(f"{method} failed with HTTP status {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise RPCError(f"{method} returned a non-JSON response") from e

        # Check for RPC errors
        if "error" in body:
            raise RPCResponseError(f"{method} RPC error: {body['error']}")
        if "result" not in body:
            raise RPCError(f"{method} response is missing a result")

        return body["result"]

    def get_storage_at(self, address: str, slot: str) -> bytes:
        result = self._request("eth_getStorageAt", [address, slot, "latest"])
        return _hex_to_bytes(result).rjust(32, b"\x00")

    def get_code(self, address: str) -> bytes:
        result = self._request("eth_getCode", [address, "latest"])
        return _hex_to_bytes(result)

    def call_address_getter(self, address: str, function_name: str) -> str:
        """
        Call a zero-argument view function and decode an address result.

        Raises:
            ContractCallError: If the call reverts or returns less than one word
            RPCError: On transport failures
        """
        call = {"to": address, "data": function_selector(function_name)}
        try:
            result = self._request("eth_call", [call, "latest"])
        except RPCResponseError as e:
            raise ContractCallError(f"{function_name}() reverted on {address}: {e}") from e

        data = _hex_to_bytes(result)
        if len(data) < 32:
            raise ContractCallError(
                f"{function_name}() on {address} returned {len(data)} bytes, expected 32"
            )

        return Web3.to_checksum_address("0x" + data[12:32].hex())
