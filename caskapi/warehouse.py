"""Warehouse endpoints guarded by a feature flag."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Optional

from caskapi.config import Config

logger = logging.getLogger(__name__)

WAREHOUSES_FLAG = "warehouses-get"


@dataclass
class FlagsClient:
    """Feature-flag client identified by project, agent and environment.

    ``fetch`` receives the client and returns a mapping of flag names to their
    state. Without a fetcher, or when fetching fails, every flag is disabled.
    """

    project_id: str
    agent_id: str
    environment_id: str
    fetch: Optional[Callable[["FlagsClient"], Mapping[str, bool]]] = None

    def is_enabled(self, name: str) -> bool:
        """Return whether the named flag is switched on."""
        if self.fetch is None:
            return False
        try:
            flags = self.fetch(self)
        except Exception:
            logger.warning("could not fetch flags for project %s", self.project_id, exc_info=True)
            return False
        return bool(flags.get(name, False))


def _status_line(status: HTTPStatus) -> str:
    return f"{status.value} {status.phrase}"


class WarehouseSystem:
    """Handlers for the warehouse resources."""

    def __init__(
        self,
        config: Config,
        flags_fetch: Optional[Callable[[FlagsClient], Mapping[str, bool]]] = None,
    ) -> None:
        self.config = config
        self.flags_fetch = flags_fetch

    def _flags(self) -> FlagsClient:
        props = self.config.project_properties
        return FlagsClient(
            project_id=props["flags_project"],
            agent_id=props["flags_agent"],
            environment_id=props["flags_environment"],
            fetch=self.flags_fetch,
        )

    def get_warehouses(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        """Answer ``GET /warehouses``: OK when the flag is on, otherwise not implemented."""
        enabled = self._flags().is_enabled(WAREHOUSES_FLAG)
        status = HTTPStatus.OK if enabled else HTTPStatus.NOT_IMPLEMENTED
        start_response(_status_line(status), [("Content-Length", "0")])
        return [b""]