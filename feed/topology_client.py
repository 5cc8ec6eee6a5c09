"""
feed/topology_client.py
=======================
One-shot HTTP retrieval of the static map layout.

No retry is configured: a failed fetch is reported to the caller, which
decides whether the session can continue.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from world.network import Topology

from .decode import decode_topology
from .errors import TopologyFetchError

log = logging.getLogger(__name__)


def make_session() -> requests.Session:
    sess = requests.Session()
    sess.headers.update({"Accept": "application/json"})
    return sess


class TopologyClient:
    """Fetches the layout document from *url*.

    Parameters
    ----------
    url : str
        Layout endpoint, e.g. ``http://localhost:8082/api/map/layout``.
    timeout_s : float
        Connect/read timeout for the request.
    session : requests.Session or None
        Injected session (tests); a JSON-accepting one is created otherwise.
    """

    def __init__(
        self,
        url: str,
        timeout_s: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self.sess = session or make_session()

    def fetch_document(self) -> Any:
        """GET the layout and return the parsed JSON body."""
        log.info("fetching layout from %s", self.url)
        try:
            r = self.sess.get(self.url, timeout=self.timeout_s)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as exc:
            raise TopologyFetchError(f"layout request to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            raise TopologyFetchError(f"layout from {self.url} is not JSON: {exc}") from exc

    def fetch(self) -> Topology:
        """Fetch and decode the layout into a :class:`Topology`."""
        return decode_topology(self.fetch_document())

    def close(self) -> None:
        self.sess.close()
