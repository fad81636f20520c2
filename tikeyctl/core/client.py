import logging
from typing import Any

import requests


class TikeyClient:
    """
    Synchronous HTTP client for the database server's status port.

    Requests are plain GETs against ``http://<host>:<port>/<path>``. The
    session is opened lazily on first use and reused afterwards. This
    client is minimal and blocking. It is intended for CLI usage,
    debugging, and simple scripts.
    """
    def __init__(
        self,
        host: str,
        port: int,
        timeout: float,
        session: requests.Session | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._session = session
        self._logger = logging.getLogger("ctl.client")

    @property
    def base_url(self) -> str:
        return f"http://{self._host}:{self._port}"

    def connect(self) -> None:
        if self._session is not None:
            return
        self._session = requests.Session()

    def close(self) -> None:
        if self._session:
            try:
                self._session.close()
            finally:
                self._session = None

    def get(self, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        if not self._session:
            self.connect()

        url = f"{self.base_url}/{path.lstrip('/')}"
        self._logger.debug(f"GET {url} params={params}")
        return self._session.get(url, params=params, timeout=self._timeout)

    def __enter__(self) -> "TikeyClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
