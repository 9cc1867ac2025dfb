"""Errors raised by report use cases."""


class ReportRequestError(ValueError):
    """Raised when a report request is invalid."""


class ReportDataFetchError(RuntimeError):
    """Raised when a data collaborator fails while building a report."""


__all__ = ["ReportRequestError", "ReportDataFetchError"]
