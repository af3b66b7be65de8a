"""
repositories/activist_repo.py
-----------------------------
Data access layer for activists.
All SQL touching `activists`, `events` and `event_attendance` lives here.

The repository works on a connection supplied by its caller and never
opens, pools or closes connections itself.
"""

from typing import Any, Optional

import psycopg2
from psycopg2 import errors, extras

from db.query import SelectQuery
from models.activist import (
    Activist,
    ActivistAttendanceSummary,
    ActivistExtra,
    ActivistMembership,
    ActivistRangeOptions,
    Order,
    is_integer,
)
from models.errors import (
    AmbiguousResultError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from models.status import DEFAULT_STATUS_POLICY, StatusRule
from utils.logger import get_logger

logger = get_logger(__name__)

SELECT_ACTIVIST = """
SELECT
  id,
  name,
  email,
  chapter,
  phone,
  location,
  facebook,
  liberation_pledge
FROM activists
"""

SELECT_ACTIVIST_EXTRA = """
SELECT
  a.id,
  a.name,
  a.email,
  a.chapter,
  a.phone,
  a.location,
  a.facebook,
  a.activist_level,
  a.exclude_from_leaderboard,
  a.core_staff,
  a.global_team_member,
  a.liberation_pledge,
  MIN(e.date) AS first_event,
  MAX(e.date) AS last_event,
  COUNT(e.id) AS total_events
FROM activists a
LEFT JOIN event_attendance ea
  ON ea.activist_id = a.id
LEFT JOIN events e
  ON ea.event_id = e.id
"""

SELECT_EVENT_AGGREGATE = """
SELECT
  MIN(e.date) AS first_event,
  MAX(e.date) AS last_event,
  COUNT(*) AS total_events
FROM events e
JOIN event_attendance ea
  ON ea.event_id = e.id
WHERE ea.activist_id = %s
"""

INSERT_ACTIVIST = "INSERT INTO activists (name) VALUES (%s)"

UPDATE_ACTIVIST = """
UPDATE activists
SET
  name = %(name)s,
  email = %(email)s,
  chapter = %(chapter)s,
  phone = %(phone)s,
  location = %(location)s,
  facebook = %(facebook)s,
  activist_level = %(activist_level)s,
  exclude_from_leaderboard = %(exclude_from_leaderboard)s,
  core_staff = %(core_staff)s,
  global_team_member = %(global_team_member)s,
  liberation_pledge = %(liberation_pledge)s
WHERE id = %(id)s
"""


class ActivistRepository:
    """
    Repository for activist records and their attendance aggregates.

    Args:
        conn: An open psycopg2 connection owned by the caller.
        status_policy: Callable ``(first_event, last_event, total_events) -> str``
            used to fill the ``status`` field. Defaults to StatusPolicy().
    """

    def __init__(self, conn, status_policy: Optional[StatusRule] = None):
        self.conn = conn
        self.status_policy = status_policy or DEFAULT_STATUS_POLICY

    # ── READ ──────────────────────────────────────────────

    def get_all(self) -> list[ActivistExtra]:
        """Return every activist with attendance and membership data, ordered by name."""
        query = (
            SelectQuery(SELECT_ACTIVIST_EXTRA)
            .group_by("a.id")
            .order_by("a.name")
        )
        return self._fetch_extra("get_all", "all activists", query)

    def get_by_id(self, activist_id: int) -> ActivistExtra:
        """
        Fetch one activist by primary key.

        Raises:
            NotFoundError: If no activist has this id.
            StoreError: On database failure.
        """
        query = (
            SelectQuery(SELECT_ACTIVIST_EXTRA)
            .where("a.id = %s", activist_id)
            .group_by("a.id")
        )
        rows = self._fetch_extra("get_by_id", activist_id, query)
        if not rows:
            raise NotFoundError("get_by_id", activist_id, "no such activist")
        return rows[0]

    def get_by_name(self, name: str) -> ActivistExtra:
        """
        Fetch the single activist with this exact name.

        Raises:
            NotFoundError: If nobody has this name.
            AmbiguousResultError: If more than one activist has this name.
            StoreError: On database failure.
        """
        query = (
            SelectQuery(SELECT_ACTIVIST_EXTRA)
            .where("a.name = %s", name)
            .group_by("a.id")
            .order_by("a.id")
        )
        rows = self._fetch_extra("get_by_name", name, query)
        if not rows:
            raise NotFoundError("get_by_name", name, "could not find any activists")
        if len(rows) > 1:
            logger.error(f"Found {len(rows)} activists named {name!r}")
            raise AmbiguousResultError("get_by_name", name, f"found {len(rows)} activists")
        return rows[0]

    def list_basic(self) -> list[Activist]:
        """Return identity fields only (no aggregates) for every activist, ordered by name."""
        query = SelectQuery(SELECT_ACTIVIST).order_by("name")
        rows = self._fetch("list_basic", "all activists", *query.build())
        return [self._row_to_activist(r) for r in rows]

    def list_range(self, options: ActivistRangeOptions) -> list[ActivistExtra]:
        """
        Keyset page of activists ordered by name.

        With an anchor name, only rows strictly after it in the requested
        direction are returned (name > anchor ascending, name < anchor
        descending). A limit of zero or less returns every remaining row.

        Raises:
            ValidationError: If ``options.order`` is neither ascending nor descending,
                or ``options.limit`` is not an integer.
                Raised before any query runs.
            StoreError: On database failure.
        """
        valid_orders = (Order.ASCENDING, Order.DESCENDING)
        if not is_integer(options.order) or options.order not in valid_orders:
            raise ValidationError(
                "list_range", options.order, "order must be ascending or descending"
            )
        if not is_integer(options.limit):
            raise ValidationError("list_range", options.limit, "limit must be an integer")
        descending = options.order == Order.DESCENDING

        query = SelectQuery(SELECT_ACTIVIST_EXTRA)
        if options.name:
            query.where("a.name < %s" if descending else "a.name > %s", options.name)
        # a.id keeps the non-aggregated columns valid; names are unique per id
        query.group_by("a.name", "a.id").order_by("a.name", descending=descending)
        query.limit(options.limit)

        key = f"{options.limit} activists {'before' if descending else 'after'} {options.name!r}"
        return self._fetch_extra("list_range", key, query)

    def get_event_aggregate(self, activist_id: int) -> ActivistAttendanceSummary:
        """
        Compute first/last event and event count for one activist.

        Runs a single aggregate query, independent of the listing queries,
        so one activist can be refreshed without re-reading the list.
        """
        rows = self._fetch("get_event_aggregate", activist_id, SELECT_EVENT_AGGREGATE, [activist_id])
        row = rows[0] if rows else {}
        summary = ActivistAttendanceSummary(
            first_event=row.get("first_event"),
            last_event=row.get("last_event"),
            total_events=int(row.get("total_events") or 0),
        )
        summary.status = self.get_status(
            summary.first_event, summary.last_event, summary.total_events
        )
        return summary

    def get_status(self, first_event, last_event, total_events: int) -> str:
        """Map attendance aggregates to a status label using the configured policy."""
        return self.status_policy(first_event, last_event, total_events)

    # ── CREATE ────────────────────────────────────────────

    def get_or_create(self, name: str) -> ActivistExtra:
        """
        Return the activist with this name, inserting a bare row first if needed.

        The insert and the re-read share one transaction; any failure rolls it
        back so no half-created row is ever committed.

        Two concurrent callers can both miss the lookup and both insert. If the
        store enforces a unique name, the loser's insert fails and it returns
        the winner's row instead. Without that constraint both inserts succeed
        and later lookups raise AmbiguousResultError.

        Raises:
            AmbiguousResultError: If the name already matches several activists.
            StoreError: If the insert, re-read or commit fails.
        """
        try:
            return self.get_by_name(name)
        except NotFoundError:
            pass

        try:
            with self.conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(INSERT_ACTIVIST, (name,))
                query, params = (
                    SelectQuery(SELECT_ACTIVIST_EXTRA)
                    .where("a.name = %s", name)
                    .group_by("a.id")
                    .build()
                )
                cur.execute(query, params)
                row = cur.fetchone()
            if row is None:
                raise NotFoundError("get_or_create", name, "inserted activist not visible")
            self.conn.commit()
        except errors.UniqueViolation:
            self.conn.rollback()
            logger.warning(f"Activist {name!r} was created concurrently, fetching existing row")
            return self.get_by_name(name)
        except NotFoundError as e:
            self.conn.rollback()
            logger.error(f"Failed to re-read new activist {name!r}")
            raise StoreError("get_or_create", name, "failed to read back new activist") from e
        except psycopg2.Error as e:
            self.conn.rollback()
            logger.error(f"Failed to create activist {name!r}: {e}")
            raise StoreError("get_or_create", name, str(e)) from e

        created = self._row_to_extra(row)
        logger.info(f"Created activist {name!r} #{created.id}")
        return created

    # ── UPDATE ────────────────────────────────────────────

    def update_full(self, record: ActivistExtra) -> int:
        """
        Overwrite every mutable column of an existing activist.

        Returns:
            The activist id.

        Raises:
            NotFoundError: If no row has ``record.id``.
            StoreError: On database failure.
        """
        a, m = record.activist, record.membership
        params = {
            "id": a.id,
            "name": a.name,
            "email": a.email,
            "chapter": a.chapter,
            "phone": a.phone,
            "location": a.location,
            "facebook": a.facebook,
            "activist_level": m.activist_level,
            "exclude_from_leaderboard": m.exclude_from_leaderboard,
            "core_staff": m.core_staff,
            "global_team_member": m.global_team_member,
            "liberation_pledge": a.liberation_pledge,
        }
        try:
            with self.conn.cursor() as cur:
                cur.execute(UPDATE_ACTIVIST, params)
                updated = cur.rowcount
            if updated == 0:
                self.conn.rollback()
                raise NotFoundError("update_full", a.id, "no such activist")
            self.conn.commit()
        except psycopg2.Error as e:
            self.conn.rollback()
            logger.error(f"Failed to update activist #{a.id}: {e}")
            raise StoreError("update_full", a.id, str(e)) from e

        logger.info(f"Updated activist #{a.id}")
        return a.id

    # ── HELPERS ───────────────────────────────────────────

    def _fetch(self, operation: str, key: Any, query, params) -> list[dict]:
        """Run a read and return dict rows, wrapping driver errors in StoreError."""
        try:
            with self.conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        except psycopg2.Error as e:
            self.conn.rollback()
            logger.error(f"{operation} failed for {key!r}: {e}")
            raise StoreError(operation, key, str(e)) from e
        logger.debug(f"{operation}({key!r}) returned {len(rows)} rows")
        return rows

    def _fetch_extra(self, operation: str, key: Any, query: SelectQuery) -> list[ActivistExtra]:
        return [self._row_to_extra(r) for r in self._fetch(operation, key, *query.build())]

    @staticmethod
    def _row_to_activist(row: dict) -> Activist:
        """Convert a database row to an Activist."""
        return Activist(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            chapter=row["chapter"],
            phone=row["phone"],
            location=row["location"],
            facebook=row["facebook"],
            liberation_pledge=int(row["liberation_pledge"] or 0),
        )

    def _row_to_extra(self, row: dict) -> ActivistExtra:
        """Convert a joined/aggregated row to an ActivistExtra with its status filled in."""
        attendance = ActivistAttendanceSummary(
            first_event=row["first_event"],
            last_event=row["last_event"],
            total_events=int(row["total_events"] or 0),
        )
        attendance.status = self.get_status(
            attendance.first_event, attendance.last_event, attendance.total_events
        )
        return ActivistExtra(
            activist=self._row_to_activist(row),
            attendance=attendance,
            membership=ActivistMembership(
                core_staff=int(row["core_staff"] or 0),
                exclude_from_leaderboard=int(row["exclude_from_leaderboard"] or 0),
                global_team_member=int(row["global_team_member"] or 0),
                activist_level=row["activist_level"] or "",
            ),
        )
