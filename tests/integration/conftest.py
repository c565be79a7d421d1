import os
from uuid import uuid4

import pytest

from bqclient import WarehouseClient

if not os.getenv("BQ_INTEGRATION_TESTS"):
    collect_ignore_glob = ["test_*.py"]


@pytest.fixture(scope="session")
def random_test_dataset() -> str:
    random_id = uuid4()
    return "test_dataset_" + str(random_id).replace("-", "_")


@pytest.fixture(scope="session")
def warehouse(random_test_dataset: str) -> WarehouseClient:
    warehouse = WarehouseClient.connect()
    warehouse.create_dataset(random_test_dataset)
    yield warehouse
    warehouse.delete_dataset(random_test_dataset, delete_contents=True)
    warehouse.close()
