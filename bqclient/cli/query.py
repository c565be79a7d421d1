import logging
import sys
from argparse import ArgumentParser

from bqclient.printing import tabulate_results
from bqclient.warehouse_client import WarehouseClient

DEFAULT_NB_DISPLAYED_ROWS = 20


def main(argv: list = None):
    if argv is None:
        argv = sys.argv[1:]
    if len(argv) == 0:
        argv = ["--help"]
    parser = ArgumentParser(description="Run a query on BigQuery and display its results", prog="bq-query")
    parser.add_argument(
        "query",
        type=str,
        help="The SQL query to run",
    )
    parser.add_argument(
        "--project",
        default=None,
        type=str,
        help="Id of the BigQuery project. Defaults to the project of the credentials.",
    )
    parser.add_argument(
        "--credentials",
        default=None,
        type=str,
        help="Path of a service account json file. "
        "If not set, the credentials are read from the GCP_CREDENTIALS or GCP_CREDENTIALS_PATH variables, "
        "or from the application default credentials.",
    )
    parser.add_argument(
        "--limit",
        default=DEFAULT_NB_DISPLAYED_ROWS,
        type=int,
        help=f"Maximal number of rows to display (Default: {DEFAULT_NB_DISPLAYED_ROWS}).",
    )
    parser.add_argument(
        "--simplify-structs",
        action="store_true",
        help="Do not display the field names of the records.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Display debug logs.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    with WarehouseClient.connect(args.project, args.credentials, verify=False) as client:
        result = client.query(args.query)
    print(tabulate_results(result, limit=args.limit, simplify_structs=args.simplify_structs))
