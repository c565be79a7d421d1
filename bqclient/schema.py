import logging
from typing import Dict, List, Mapping, Optional, Tuple, Union

from google.cloud.bigquery import SchemaField

from bqclient.exceptions import UnknownFieldTypeError

NULLABLE = "NULLABLE"
REPEATED = "REPEATED"

FIELD_TYPES: Dict[str, Tuple[str, str]] = {
    "STRING": ("STRING", NULLABLE),
    "INTEGER": ("INTEGER", NULLABLE),
    "FLOAT": ("FLOAT", NULLABLE),
    "TIMESTAMP": ("TIMESTAMP", NULLABLE),
    "RECORD": ("RECORD", NULLABLE),
    "STRINGS": ("STRING", REPEATED),
    "INTEGERS": ("INTEGER", REPEATED),
    "FLOATS": ("FLOAT", REPEATED),
    "TIMESTAMPS": ("TIMESTAMP", REPEATED),
    "RECORDS": ("RECORD", REPEATED),
}
"""Type tags accepted in a table schema, with the BigQuery field type and mode they map to."""

FieldSpec = Union[str, Mapping[str, "FieldSpec"], List[Mapping[str, "FieldSpec"]]]
"""A type tag, a nested schema (a RECORD column) or a list containing one nested schema (a RECORDS column)"""

Schema = Mapping[str, FieldSpec]


def _unknown_type_error(name: str, field_spec) -> UnknownFieldTypeError:
    return UnknownFieldTypeError(
        f"Unknown type {field_spec!r} for column {name!r}. Supported types are: {', '.join(FIELD_TYPES)}"
    )


def to_schema_field(name: str, field_spec: FieldSpec, ignore_unknown_types: bool = False, logger=None) -> SchemaField:
    """Build the :class:`SchemaField` of a column.

    >>> field = to_schema_field("age", "INTEGER")
    >>> field.field_type, field.mode
    ('INTEGER', 'NULLABLE')
    >>> field = to_schema_field("tags", "STRINGS")
    >>> field.field_type, field.mode
    ('STRING', 'REPEATED')

    :param name: Name of the column
    :param field_spec: A type tag, or a nested schema for record columns
    :param ignore_unknown_types: see :func:`to_bigquery_schema`
    :param logger: see :func:`to_bigquery_schema`
    :return: a SchemaField
    :raises UnknownFieldTypeError: if the type tag is not supported
    """
    if isinstance(field_spec, Mapping):
        fields = to_bigquery_schema(field_spec, ignore_unknown_types, logger)
        return SchemaField(name, "RECORD", mode=NULLABLE, fields=fields)
    if isinstance(field_spec, list) and len(field_spec) == 1 and isinstance(field_spec[0], Mapping):
        fields = to_bigquery_schema(field_spec[0], ignore_unknown_types, logger)
        return SchemaField(name, "RECORD", mode=REPEATED, fields=fields)
    if isinstance(field_spec, str) and field_spec in FIELD_TYPES:
        field_type, mode = FIELD_TYPES[field_spec]
        return SchemaField(name, field_type, mode=mode)
    raise _unknown_type_error(name, field_spec)


def to_bigquery_schema(
    schema: Schema, ignore_unknown_types: bool = False, logger: Optional[logging.Logger] = None
) -> List[SchemaField]:
    """Transform a mapping {column name: type tag} into a BigQuery schema.

    The columns keep the order of the mapping.

    >>> [field.name for field in to_bigquery_schema({"stuff": "STRING", "age": "INTEGER"})]
    ['stuff', 'age']
    >>> address = to_bigquery_schema({"address": {"city": "STRING"}})[0]
    >>> address.field_type, [field.name for field in address.fields]
    ('RECORD', ['city'])
    >>> [field.name for field in to_bigquery_schema({"stuff": "STRING", "flag": "BOOLEAN"}, ignore_unknown_types=True)]
    ['stuff']

    :param schema: A mapping from column names to type tags (see :data:`FIELD_TYPES`) or nested schemas
    :param ignore_unknown_types: If set to true, the columns with an unknown type are dropped from the schema
                                 with a warning, instead of failing the whole schema.
    :param logger: The logger used to report dropped columns
    :return: a list of SchemaField
    :raises UnknownFieldTypeError: if a type tag is not supported and ignore_unknown_types is false
    """
    if logger is None:
        logger = logging.getLogger(__name__)
    fields = []
    for name, field_spec in schema.items():
        try:
            fields.append(to_schema_field(name, field_spec, ignore_unknown_types, logger))
        except UnknownFieldTypeError as e:
            if not ignore_unknown_types:
                raise e
            logger.warning("Dropping column %s from schema: %s", name, e)
    return fields
