"""
Common API schemas — RFC 7807 error bodies.

Successful CRUD responses are returned bare (a record, a
:class:`~crudkit.core.paging.PagedList`, or an integer row count).  Every
non-2xx response uses :class:`ProblemDetail`.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Field-level error detail.

    UI Hints:
        Display field errors next to the corresponding form input.
    """

    code: str = Field(description="Machine-readable error code (e.g., 'VALIDATION_FAILED', 'missing')")
    message: str = Field(description="Human-readable error description")
    field: str | None = Field(default=None, description="Field path if error is field-specific")


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Error Codes:
        - ``VALIDATION_FAILED`` (400): Invalid input data or request body
        - ``NOT_FOUND`` (404): No record carries the public identifier
        - ``DATABASE`` (500): The record store rejected the request
        - ``CONFIG`` (500): Service is missing configuration (e.g. lookup query)
        - ``INTERNAL`` (500): Unexpected server error

    Example:
        {
            "type": "about:blank",
            "title": "Not Found",
            "status": 404,
            "detail": "contacts 'abc-123' does not exist",
            "instance": "http://testserver/api/contacts/get/abc-123",
            "errors": []
        }
    """

    type: str = Field(default="about:blank", description="Error type URI (usually 'about:blank')")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code (e.g., 400, 404, 500)")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")
    errors: list[ErrorDetail] = Field(
        default_factory=list,
        description="List of field-level error details",
    )
