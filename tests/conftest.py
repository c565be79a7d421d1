import logging
from unittest import mock

import pytest
from google.cloud.bigquery import Client

from bqclient import WarehouseClient

TEST_PROJECT = "test-project"


@pytest.fixture()
def client() -> Client:
    client = mock.create_autospec(Client, instance=True)
    client.project = TEST_PROJECT
    client.insert_rows_json.return_value = []
    return client


@pytest.fixture()
def logger() -> logging.Logger:
    return logging.getLogger("tests.bqclient")


@pytest.fixture()
def warehouse(client: Client, logger: logging.Logger) -> WarehouseClient:
    return WarehouseClient(client, logger=logger, location="US")
