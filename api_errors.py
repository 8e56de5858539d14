# Error taxonomy shared by every lookup step.


class IssSpotterError(Exception):
    """Base exception for a failed lookup step."""
    kind = "IssSpotterError"

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage


class TransportError(IssSpotterError):
    """The HTTP request itself could not complete (DNS, connection, timeout)."""
    kind = "TransportError"

    def __init__(self, cause: Exception, stage: str):
        super().__init__(str(cause), stage)
        self.cause = cause
        self.__cause__ = cause


class HTTPStatusError(IssSpotterError):
    """The server answered with a status other than 200."""
    kind = "HTTPStatusError"

    def __init__(self, status_code: int, body: str, what: str, stage: str):
        super().__init__(
            f"Status Code {status_code} when fetching {what}: {body}", stage)
        self.status_code = status_code
        self.body = body


class ServiceError(IssSpotterError):
    """The service reported an application-level failure in its payload."""
    kind = "ServiceError"

    def __init__(self, success, service_message, ip, stage: str):
        super().__init__(
            f"Success status was {success}. Server message says: "
            f"{service_message} when fetching for IP {ip}", stage)
        self.success = success
        self.service_message = service_message
        self.ip = ip


class ParseError(IssSpotterError):
    """The response body was not the expected JSON shape."""
    kind = "ParseError"

    def __init__(self, message: str, body: str, stage: str):
        super().__init__(message, stage)
        self.body = body
