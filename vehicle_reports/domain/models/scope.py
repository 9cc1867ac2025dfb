"""Domain models describing what a report covers."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class ReportRequest:
    """Caller-supplied parameters for building a report.

    Attributes:
        account_id: Account the report is built for.
        date_from: First day of the period (inclusive).
        date_to: Last day of the period (inclusive).
        vehicle_ids: Explicit vehicle filter; empty means all vehicles.
        tag_ids: Expense tag filter; empty means no tag filter.
        travel_types: Travel types kept in the trip breakdown; empty means
            every trip.
        lang: Language used for category and kind names.
    """

    account_id: str
    date_from: date
    date_to: date
    vehicle_ids: tuple[str, ...] = ()
    tag_ids: tuple[str, ...] = ()
    travel_types: tuple[str, ...] = ()
    lang: str = "en"

    @classmethod
    def for_year(
        cls,
        account_id: str,
        year: int,
        vehicle_ids: tuple[str, ...] = (),
        tag_ids: tuple[str, ...] = (),
        lang: str = "en",
    ) -> "ReportRequest":
        """Build a request spanning a whole calendar year."""
        return cls(
            account_id=account_id,
            date_from=date(year, 1, 1),
            date_to=date(year, 12, 31),
            vehicle_ids=tuple(vehicle_ids),
            tag_ids=tuple(tag_ids),
            lang=lang,
        )


@dataclass(frozen=True)
class ReportScope:
    """Resolved scope passed to every data collaborator."""

    account_id: str
    vehicle_ids: tuple[str, ...]
    date_from: date
    date_to: date
    tag_ids: tuple[str, ...] = ()
    lang: str = "en"

    @property
    def is_empty(self) -> bool:
        """Return True when no vehicle is in scope."""
        return not self.vehicle_ids

    def for_period(self, date_from: date, date_to: date) -> "ReportScope":
        """Return the same scope narrowed to another date range."""
        return ReportScope(
            account_id=self.account_id,
            vehicle_ids=self.vehicle_ids,
            date_from=date_from,
            date_to=date_to,
            tag_ids=self.tag_ids,
            lang=self.lang,
        )

    def without_tags(self) -> "ReportScope":
        """Return the same scope with the tag filter removed."""
        return ReportScope(
            account_id=self.account_id,
            vehicle_ids=self.vehicle_ids,
            date_from=self.date_from,
            date_to=self.date_to,
            lang=self.lang,
        )


__all__ = ["ReportRequest", "ReportScope"]
