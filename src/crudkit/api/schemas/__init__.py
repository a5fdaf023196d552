"""Wire schemas shared by every crudkit endpoint."""

from crudkit.api.schemas.common import ErrorDetail, ProblemDetail

__all__ = ["ErrorDetail", "ProblemDetail"]
