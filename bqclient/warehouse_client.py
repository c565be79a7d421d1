import logging
import os
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from google.api_core.exceptions import BadRequest, GoogleAPICallError
from google.auth.exceptions import GoogleAuthError
from google.cloud.bigquery import AutoRowIDs, Dataset, Table
from google.cloud.bigquery.client import Client
from google.cloud.bigquery.table import RowIterator

from bqclient import conf
from bqclient.auth import get_bq_client
from bqclient.exceptions import AuthError, PartialInsertError, QueryError, RowInsertFailure
from bqclient.row import IdentifiedRow, Row, to_json_row
from bqclient.schema import Schema, to_bigquery_schema
from bqclient.utils import number_lines

DEFAULT_LOGGER_NAME = "bqclient"


def _get_default_location() -> str:
    return os.getenv("BQ_LOCATION") or conf.BQ_LOCATION


class QueryResult(list):
    """Rows returned by a query, in the order in which the query engine returned them.

    Each row is a list of column values, in the order of the columns of the query.
    The name of these columns is available in ``column_names``.
    """

    def __init__(self, rows: Iterable[List[Any]] = (), column_names: Iterable[str] = ()):
        super().__init__(rows)
        self.column_names: List[str] = list(column_names)


class WarehouseClient:
    """Access layer over a BigQuery project

    It creates datasets and tables, streams rows into them, runs queries and deletes tables.
    Every method performs one blocking call to BigQuery, and accepts an optional ``timeout`` (in seconds)
    that is passed to this call.

    Errors returned by BigQuery are raised as-is, as subclasses of
    :class:`google.api_core.exceptions.GoogleAPICallError` (e.g. ``NotFound`` or ``Conflict``).
    No retry is performed by this class beyond the default retry policy of the BigQuery client.
    """

    def __init__(
        self, client: Client, logger: Optional[logging.Logger] = None, location: Optional[str] = None
    ) -> None:
        """Access layer over a BigQuery project

        :param client: A :class:`google.cloud.bigquery.client.Client`
        :param logger: The logger used to report rejected rows. Defaults to the "bqclient" logger.
        :param location: Location of the datasets created by this client. Defaults to "US".
        """
        self.__client = client
        self.logger = logger if logger is not None else logging.getLogger(DEFAULT_LOGGER_NAME)
        self.location = location if location is not None else _get_default_location()

    @classmethod
    def connect(
        cls,
        project: Optional[str] = None,
        credentials_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        location: Optional[str] = None,
        verify: bool = True,
    ) -> "WarehouseClient":
        """Authenticate against BigQuery and return a new client.

        :param project: Id of the project. Defaults to the project of the credentials.
        :param credentials_path: Path to a service account json file. See :func:`bqclient.auth.get_bq_client`
                                 for the other ways of passing credentials.
        :param logger: see :class:`WarehouseClient`
        :param location: see :class:`WarehouseClient`
        :param verify: If set to true, a request is sent to BigQuery to check that the project can be accessed.
        :return: a WarehouseClient
        :raises AuthError: if the credentials are missing or invalid, or if the project is rejected
        """
        client = get_bq_client(project, credentials_path)
        if verify:
            try:
                list(client.list_datasets(max_results=1))
            except (GoogleAPICallError, GoogleAuthError) as e:
                client.close()
                raise AuthError(f"Could not access project {client.project}: {e}") from e
        return cls(client, logger=logger, location=location)

    @property
    def project(self) -> str:
        return self.__client.project

    def _table_id(self, dataset: str, table: str) -> str:
        return f"{self.project}.{dataset}.{table}"

    def create_dataset(self, dataset: str, *, timeout: Optional[float] = None) -> None:
        """Create a dataset in this client's location.

        :raises google.api_core.exceptions.Conflict: if the dataset already exists
        """
        bq_dataset = Dataset(f"{self.project}.{dataset}")
        bq_dataset.location = self.location
        self.__client.create_dataset(bq_dataset, timeout=timeout)
        self.logger.info("Created dataset %s.%s in %s", self.project, dataset, self.location)

    def delete_dataset(self, dataset: str, delete_contents: bool = False, *, timeout: Optional[float] = None) -> None:
        """Delete a dataset.

        :param delete_contents: If set to true, the tables of the dataset are deleted too.
                                Otherwise, deleting a dataset that is not empty fails.
        :raises google.api_core.exceptions.NotFound: if the dataset does not exist
        """
        self.__client.delete_dataset(f"{self.project}.{dataset}", delete_contents=delete_contents, timeout=timeout)
        self.logger.info("Deleted dataset %s.%s", self.project, dataset)

    def create_table(
        self,
        dataset: str,
        table: str,
        schema: Schema,
        ignore_unknown_types: bool = False,
        *,
        timeout: Optional[float] = None,
    ) -> None:
        """Create a table with the given schema.

        Example::

            client.create_table("testing", "test1", {"stuff": "STRING", "age": "INTEGER", "tags": "STRINGS"})

        :param schema: A mapping from column names to type tags. The supported type tags are
                       STRING, INTEGER, FLOAT, TIMESTAMP and RECORD, and their repeated counterparts
                       STRINGS, INTEGERS, FLOATS, TIMESTAMPS and RECORDS.
                       The sub-fields of a record can be given as a nested mapping instead of a type tag.
        :param ignore_unknown_types: If set to true, the columns with an unknown type tag are dropped from the
                                     table (with a warning) instead of failing the whole call.
        :raises UnknownFieldTypeError: if a type tag is not supported, before anything is sent to BigQuery
        :raises google.api_core.exceptions.NotFound: if the dataset does not exist
        :raises google.api_core.exceptions.Conflict: if the table already exists
        """
        bq_schema = to_bigquery_schema(schema, ignore_unknown_types=ignore_unknown_types, logger=self.logger)
        table_id = self._table_id(dataset, table)
        self.__client.create_table(Table(table_id, schema=bq_schema), timeout=timeout)
        self.logger.info("Created table %s", table_id)

    def delete_table(self, dataset: str, table: str, *, timeout: Optional[float] = None) -> None:
        """Delete a table.

        :raises google.api_core.exceptions.NotFound: if the table does not exist
        """
        table_id = self._table_id(dataset, table)
        self.__client.delete_table(table_id, timeout=timeout)
        self.logger.info("Deleted table %s", table_id)

    def _insert(
        self,
        dataset: str,
        table: str,
        rows: Sequence[Mapping[str, Any]],
        row_ids,
        timeout: Optional[float],
    ) -> None:
        if len(rows) == 0:
            return
        table_id = self._table_id(dataset, table)
        json_rows = [to_json_row(row) for row in rows]
        errors = self.__client.insert_rows_json(
            table_id, json_rows, row_ids=row_ids, skip_invalid_rows=True, timeout=timeout
        )
        if not errors:
            self.logger.debug("Inserted %s row(s) into %s", len(json_rows), table_id)
            return
        failures = [
            RowInsertFailure(index=error["index"], row=json_rows[error["index"]], errors=error.get("errors", []))
            for error in errors
        ]
        for failure in failures:
            self.logger.error("Row insert error: %s", failure.error_message())
        raise PartialInsertError(table_id, failures)

    def insert_row(self, dataset: str, table: str, row: Row, *, timeout: Optional[float] = None) -> None:
        """Insert a single row with a streaming insert.

        No insert id is sent: if the request is retried, the row may be inserted twice.

        :raises PartialInsertError: if BigQuery rejected the row
        """
        self._insert(dataset, table, [row], AutoRowIDs.DISABLED, timeout)

    def insert_rows(self, dataset: str, table: str, rows: Sequence[Row], *, timeout: Optional[float] = None) -> None:
        """Insert rows with one streaming insert.

        The rows are inserted independently: if some rows are rejected by BigQuery, the other rows are still inserted.
        The errors of each rejected row are logged, and a :class:`PartialInsertError` listing all of them is raised.

        No insert id is sent: if the request is retried, rows may be inserted twice.
        Use :meth:`insert_rows_with_ids` to avoid this.

        :raises PartialInsertError: if one or more rows were rejected by BigQuery
        """
        self._insert(dataset, table, rows, AutoRowIDs.DISABLED, timeout)

    def insert_rows_with_ids(
        self, dataset: str, table: str, rows: Sequence[IdentifiedRow], *, timeout: Optional[float] = None
    ) -> None:
        """Insert rows with one streaming insert, using the insert id of each row.

        BigQuery ignores the rows whose insert id was already received recently, which makes it safe to
        send the same rows again after a failure. Otherwise, this behaves like :meth:`insert_rows`.

        :raises PartialInsertError: if one or more rows were rejected by BigQuery
        """
        row_ids = [row.insert_id or None for row in rows]
        self._insert(dataset, table, [row.data for row in rows], row_ids, timeout)

    def _execute_query(self, query: str, timeout: Optional[float]) -> RowIterator:
        job = self.__client.query(query, timeout=timeout)
        try:
            return job.result(timeout=timeout)
        except BadRequest as e:
            e.message += "\nQuery:\n" + number_lines(query, 1)
            raise e

    def query(
        self, query: str, result_size_hint: Optional[int] = None, *, timeout: Optional[float] = None
    ) -> QueryResult:
        """Run a SQL query and return all its rows.

        Every page of results is fetched before this method returns, so the whole result is held in memory:
        large results should be written to a table instead.

        The query is sent as-is: no parameter is escaped.

        :param query: A SQL query
        :param result_size_hint: Number of rows the caller expects. It is only used to report, in the debug logs,
                                 results larger than expected: it neither limits nor paginates the query.
        :return: a QueryResult, which is empty if the query returned no row
        :raises google.api_core.exceptions.GoogleAPICallError: if the query job fails. A ``BadRequest``
                contains the numbered text of the query in its message.
        :raises QueryError: if reading the results fails after the query job completed
        """
        it = self._execute_query(query, timeout=timeout)
        rows = []
        try:
            for page in it.pages:
                for row in page:
                    values = list(row.values())
                    self.logger.debug("%s", values)
                    rows.append(values)
        except GoogleAPICallError as e:
            raise QueryError(f"Could not read the results of the query: {e.message}") from e
        if result_size_hint is not None and len(rows) > result_size_hint:
            self.logger.debug("Query returned %s rows, %s were expected", len(rows), result_size_hint)
        column_names = [field.name for field in it.schema] if it.schema else []
        return QueryResult(rows, column_names)

    def close(self) -> None:
        self.__client.close()

    def __enter__(self) -> "WarehouseClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
