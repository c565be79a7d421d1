import base64
import datetime
import decimal
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Union

from bqclient.exceptions import UnsupportedValueTypeError

Value = Union[
    None,
    bool,
    int,
    float,
    str,
    bytes,
    decimal.Decimal,
    datetime.datetime,
    datetime.date,
    datetime.time,
    List["Value"],
    Dict[str, "Value"],
]
"""A value that can be stored in a BigQuery column: a scalar, a list of values (for a repeated column)
or a mapping from field names to values (for a record column)."""

Row = Dict[str, Value]
"""A mapping from column names to values"""

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


@dataclass(frozen=True)
class IdentifiedRow:
    """A row paired with an insert id.

    BigQuery uses the insert id to ignore the duplicates of a row that was already inserted,
    when the same insert request is sent more than once. An empty insert id means that no id is sent for this row.
    """

    data: Row
    insert_id: str = ""


def to_json_value(value: Value) -> JsonValue:
    """Convert a value into a form that can be serialized to json for a streaming insert.

    >>> to_json_value({"a": [1, 2.5, None], "b": datetime.date(2020, 1, 2)})
    {'a': [1, 2.5, None], 'b': '2020-01-02'}
    >>> to_json_value(datetime.datetime(2020, 1, 2, 3, 4, 5))
    '2020-01-02T03:04:05'
    >>> to_json_value(decimal.Decimal("1.10"))
    '1.10'
    >>> to_json_value(b"abc")
    'YWJj'
    >>> to_json_value(("x", "y"))
    ['x', 'y']

    :param value: a value of a row
    :return: a json compatible value
    :raises UnsupportedValueTypeError: if the value, or one of the values it contains, has an unsupported type
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        return str(value)
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    if isinstance(value, Mapping):
        return {_check_key(key): to_json_value(item) for key, item in value.items()}
    raise UnsupportedValueTypeError(f"Unsupported value type: {type(value).__name__}")


def _check_key(key: Any) -> str:
    if not isinstance(key, str):
        raise UnsupportedValueTypeError(f"Field names must be strings, got: {key!r}")
    return key


def to_json_row(row: Mapping[str, Value]) -> Dict[str, JsonValue]:
    """Convert a row into a json compatible dict

    >>> to_json_row({"stuff": "Blah0", "age": 0})
    {'stuff': 'Blah0', 'age': 0}
    """
    return {_check_key(key): to_json_value(value) for key, value in row.items()}
