import json
from unittest.mock import Mock

import pytest


@pytest.fixture
def table_json() -> dict:
    """Schema payload of ``test.t1`` as served by the status port."""
    return {
        "id": 64,
        "name": {"O": "T1", "L": "t1"},
        "charset": "utf8mb4",
        "cols": [
            {"id": 1, "name": {"O": "A", "L": "a"}, "offset": 0, "type": {"Tp": 3, "Flag": 0, "Flen": 11}},
            {"id": 2, "name": {"O": "B", "L": "b"}, "offset": 1, "type": {"Tp": 15, "Flen": 20}},
            {"id": 3, "name": {"O": "C", "L": "c"}, "offset": 2, "type": {"Tp": 12}},
            {"id": 4, "name": {"O": "D", "L": "d"}, "offset": 3, "type": {"Tp": 7}},
            {"id": 5, "name": {"O": "E", "L": "e"}, "offset": 4, "type": {"Tp": 15}},
        ],
        "index_info": [
            {"id": 1, "idx_name": {"O": "idx_b", "L": "idx_b"}},
        ],
    }


@pytest.fixture
def schema_client(table_json) -> Mock:
    body = json.dumps(table_json).encode()
    client = Mock()
    client.get.return_value = Mock(status_code=200, content=body, text=body.decode())
    return client
