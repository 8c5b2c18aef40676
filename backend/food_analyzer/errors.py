"""Exceptions and JSON-RPC error codes used by the food analyzer services."""

# Reserved JSON-RPC 2.0 error codes
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


class ExternalServiceError(Exception):
    """The vision model endpoint failed or returned an unusable reply."""


class JsonRpcError(Exception):
    """Protocol-level failure, rendered as a JSON-RPC `error` object."""

    def __init__(self, code: int, message: str, data=None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data
