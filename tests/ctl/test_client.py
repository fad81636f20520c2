from unittest.mock import Mock

import pytest

from tikeyctl.core.client import TikeyClient


@pytest.mark.ut
def test_get_builds_url_and_passes_timeout():
    session = Mock()
    client = TikeyClient("127.0.0.1", 10080, timeout=2.5, session=session)

    client.get("/schema/test/t1")
    client.get("schema", params={"table_id": "64"})

    assert session.get.call_args_list[0].args == ("http://127.0.0.1:10080/schema/test/t1",)
    assert session.get.call_args_list[0].kwargs == {"params": None, "timeout": 2.5}
    assert session.get.call_args_list[1].kwargs["params"] == {"table_id": "64"}


@pytest.mark.ut
def test_close_releases_session():
    session = Mock()
    with TikeyClient("localhost", 1, timeout=1.0, session=session) as client:
        assert client.base_url == "http://localhost:1"

    session.close.assert_called_once()
