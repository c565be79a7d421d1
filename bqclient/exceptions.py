from dataclasses import dataclass, field
from typing import Any, Dict, List


class IllegalArgumentException(Exception):
    """
    Passed an illegal or inappropriate argument.
    """


class UnknownFieldTypeError(IllegalArgumentException):
    """
    Exception raised when a table schema uses a type tag that is not supported.
    """


class UnsupportedValueTypeError(IllegalArgumentException):
    """
    Exception raised when a row contains a value that cannot be sent to BigQuery.
    """


class AuthError(Exception):
    """
    Exception raised when the client cannot be authenticated, or when the project is rejected at connection time.
    """


class QueryError(Exception):
    """
    Exception raised when reading the results of a query fails after the query job completed.
    The rows already read are discarded.
    """


@dataclass
class RowInsertFailure:
    """A row rejected by a streaming insert"""

    index: int
    """Position of the row in the inserted batch"""

    row: Dict[str, Any]
    """Content of the row, as it was sent to BigQuery"""

    errors: List[Dict[str, Any]] = field(default_factory=list)
    """Errors returned by BigQuery for this row"""

    def error_message(self) -> str:
        messages = [error.get("message") or error.get("reason", "") for error in self.errors]
        return f"row {self.index}: " + "; ".join(messages)


class PartialInsertError(Exception):
    """
    Exception raised when one or more rows of a streaming insert were rejected by BigQuery.
    The other rows of the same request have been committed.
    """

    def __init__(self, table_id: str, failures: List[RowInsertFailure]) -> None:
        self.table_id = table_id
        self.failures = failures
        msg = f"{len(failures)} row(s) could not be inserted into {table_id}"
        if len(failures) > 0:
            msg += f", first error: {failures[0].error_message()}"
        Exception.__init__(self, msg)
