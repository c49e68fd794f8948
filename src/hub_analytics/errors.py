class AnalyticsError(Exception):
    """
    base class for every failure reported back to the caller of an
    analytics request.
    """


class InvalidRequest(AnalyticsError, ValueError):
    """
    InvalidRequest is raised for a malformed selection document or
    out-of-range query options such as a non-positive limit.
    """


class InvalidScope(AnalyticsError):
    pass


class InvalidTimeWindow(AnalyticsError):
    pass


class UpstreamError(AnalyticsError):
    """
    UpstreamError is raised when the semantic layer cannot be reached
    or answers with an error. status_code is set when an HTTP response
    was received.
    """

    def __init__(self, message: "str", status_code: "int | None" = None) -> "None":
        super().__init__(message)
        self.status_code = status_code


class DecodeError(AnalyticsError):
    pass
