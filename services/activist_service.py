"""
services/activist_service.py
----------------------------
JSON-facing operations on activists.
Borrows a pooled connection per call and hands it to ActivistRepository.
"""

from typing import Any, Callable, Optional, TypeVar

from db.connection import borrowed_connection
from models.activist import ActivistExtra, ActivistRangeOptions, format_event_date
from models.status import StatusRule
from repositories.activist_repo import ActivistRepository
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ActivistService:
    """
    Handles activist requests coming from the entry point.

    Every method returns plain dicts/lists ready for ``json.dumps``.
    Errors from the repository propagate unchanged.
    """

    def __init__(self, status_policy: Optional[StatusRule] = None):
        self.status_policy = status_policy

    def get_activists_json(self) -> list[dict[str, Any]]:
        """All activists with attendance and membership data."""
        return self._with_repo(lambda repo: [a.to_json() for a in repo.get_all()])

    def get_activist_json(self, activist_id: int) -> dict[str, Any]:
        return self._with_repo(lambda repo: repo.get_by_id(activist_id).to_json())

    def get_activist_range_json(self, options: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Keyset page of activists.

        Args:
            options: ``{"name": anchor, "limit": n, "order": 1|2}``.

        Raises:
            ValidationError: If ``order`` is not 1 or 2, or ``limit`` is not an integer.
        """
        range_options = ActivistRangeOptions.from_dict(options)
        return self._with_repo(
            lambda repo: [a.to_json() for a in repo.list_range(range_options)]
        )

    def get_or_create_json(self, name: str) -> dict[str, Any]:
        return self._with_repo(lambda repo: repo.get_or_create(name).to_json())

    def update_activist_json(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Overwrite an activist from a JSON payload and return the stored record.

        Raises:
            ValidationError: If the payload has no integer ``id`` or no ``name``.
        """
        record = ActivistExtra.from_json(payload)
        logger.info(f"Updating activist #{record.id} from payload")

        def _update(repo: ActivistRepository) -> dict[str, Any]:
            activist_id = repo.update_full(record)
            return repo.get_by_id(activist_id).to_json()

        return self._with_repo(_update)

    def get_event_data_json(self, activist_id: int) -> dict[str, Any]:
        """Fresh attendance aggregates for one activist."""
        def _aggregate(repo: ActivistRepository) -> dict[str, Any]:
            summary = repo.get_event_aggregate(activist_id)
            return {
                "id": activist_id,
                "first_event": format_event_date(summary.first_event),
                "last_event": format_event_date(summary.last_event),
                "total_events": summary.total_events,
                "status": summary.status,
            }

        return self._with_repo(_aggregate)

    # ── HELPERS ───────────────────────────────────────────

    def _with_repo(self, action: Callable[[ActivistRepository], T]) -> T:
        with borrowed_connection() as conn:
            return action(ActivistRepository(conn, self.status_policy))
