class BusFactorException(Exception):
    """Base exception for all bus-factor errors."""
    pass

class FetchError(BusFactorException):
    """Raised when a GitHub endpoint could not be fetched."""
    pass

class TransportError(FetchError):
    """Raised when the request never produced a usable response (connection, timeout, bad JSON)."""
    pass

class ResponseError(FetchError):
    """Raised when GitHub answers with a 4xx/5xx status.

    The message is the raw response body, GitHub puts the useful diagnostics there.
    """
    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(body)

class PayloadError(FetchError):
    """Raised when a response decoded fine but does not have the expected shape."""
    pass

class ValidationError(BusFactorException):
    """Raised when a caller-supplied parameter is semantically invalid."""
    pass

class EmptyContributorsError(BusFactorException):
    """Raised when GitHub reports no contributions for a repository."""
    def __init__(self, endpoint: str, message: str = "No contributors returned."):
        self.endpoint = endpoint
        super().__init__(f"{message} Endpoint: {endpoint}")
