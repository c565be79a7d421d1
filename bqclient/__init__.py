from bqclient.exceptions import AuthError, PartialInsertError, QueryError, UnknownFieldTypeError
from bqclient.row import IdentifiedRow, Row
from bqclient.warehouse_client import QueryResult, WarehouseClient

__all__ = [
    "AuthError",
    "IdentifiedRow",
    "PartialInsertError",
    "QueryError",
    "QueryResult",
    "Row",
    "UnknownFieldTypeError",
    "WarehouseClient",
]

__version__ = "0.1.0"
