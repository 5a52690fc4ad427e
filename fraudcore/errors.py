"""Exception types raised by the API client and the exporters."""


class FraudDashboardError(Exception):
    """Base class for dashboard errors."""


class ApiError(FraudDashboardError):
    """Backend answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error {status_code}: {body}")


class ShapeError(FraudDashboardError):
    """Backend response is missing a field the dashboard depends on."""

    def __init__(self, endpoint: str, errors: list[str]):
        self.endpoint = endpoint
        self.errors = errors
        super().__init__(f"Unexpected response from {endpoint}: {'; '.join(errors)}")


class ExportError(FraudDashboardError):
    """Rasterizing the dashboard or writing the export file failed."""
