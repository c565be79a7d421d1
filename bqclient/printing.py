from typing import Any, Optional

from tabulate import tabulate

from bqclient.warehouse_client import QueryResult


def _struct_to_string_without_field_names(s: Any) -> str:
    """Transform an object into a string, but do not display the field names of dicts.

    Args:
        s: The object to transform into a string

    Returns:
        A string

    Examples:
        >>> _struct_to_string_without_field_names({"a": 1, "b": 2})
        '{1, 2}'
        >>> _struct_to_string_without_field_names({"a": [{"s": {"b": 1, "c": 2}}]})
        '{[{{1, 2}}]}'
    """
    if isinstance(s, list):
        return "[" + ", ".join(_struct_to_string_without_field_names(item) for item in s) + "]"
    elif isinstance(s, dict):
        return "{" + ", ".join(_struct_to_string_without_field_names(item) for item in s.values()) + "}"
    else:
        return str(s)


def tabulate_results(
    result: QueryResult, format_args: dict = None, limit: Optional[int] = None, simplify_structs=False
) -> str:
    """Render the rows of a query result as a table.

    >>> result = QueryResult([[1, "Blah0"], [2, "Blah1"]], column_names=["id", "stuff"])
    >>> print(tabulate_results(result, limit=1))
    +----+-------+
    | id | stuff |
    +----+-------+
    |  1 | Blah0 |
    +----+-------+
    only showing top 1 row

    :param result: the rows returned by :meth:`WarehouseClient.query`
    :param format_args: extra arguments passed to the function tabulate.tabulate()
    :param limit: maximal number of rows to display
    :param simplify_structs: If set to true, the field names of the records are not displayed
    :return: a string
    """
    if format_args is None:
        format_args = {
            "tablefmt": "pretty",
            "missingval": "null",
            "stralign": "right",
        }
    nb_rows = len(result)
    if limit is None:
        limit = nb_rows
    rows = result[0:limit]
    if simplify_structs:
        rows = [[_struct_to_string_without_field_names(field) for field in row] for row in rows]
    res = tabulate(rows, headers=result.column_names, **format_args)
    if nb_rows > limit:
        plural = "s" if limit > 1 else ""
        res += f"\nonly showing top {limit} row{plural}"
    return res
