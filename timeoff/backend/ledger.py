"""
In-memory leave ledger: leave entries, public holidays and the quota usage
derived from them. Every mutation writes the affected collection back to the
store in full.
"""
import logging
import time
import uuid
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import ValidationError

from models import ANNUAL_QUOTA, LeaveEntry, LeaveType, PublicHoliday, QuotaUsage
from utils import calculate_business_days, get_default_holidays

logger = logging.getLogger(__name__)

ENTRIES_KEY = "entries"
HOLIDAYS_KEY = "holidays"


def _new_id() -> str:
    return str(uuid.uuid4())


def default_holidays(year: int = None) -> List[PublicHoliday]:
    if year is None:
        year = date.today().year
    return [
        PublicHoliday(id=str(i), date=holiday_date, name=name)
        for i, (holiday_date, name) in enumerate(get_default_holidays(year), start=1)
    ]


class LeaveLedger:
    """
    Leave entries and holidays for a single user.

    `store` is anything with get_value(key) / put_value(key, value); the
    db_service module is the production store. Without a store the ledger
    lives in memory only.
    """

    def __init__(
        self,
        store: Any = None,
        entries: Optional[Iterable[LeaveEntry]] = None,
        holidays: Optional[Iterable[PublicHoliday]] = None,
    ):
        self.store = store
        self._entries: List[LeaveEntry] = list(entries or [])
        self._holidays: List[PublicHoliday] = list(holidays or [])

    # ==================== LOADING / PERSISTENCE ====================

    @classmethod
    def load(cls, store: Any) -> "LeaveLedger":
        """Read both collections once; fall back to empty entries / default holidays on bad data"""
        entries = cls._read_collection(store, ENTRIES_KEY, LeaveEntry)
        if entries is None:
            entries = []

        raw_holidays = store.get_value(HOLIDAYS_KEY)
        seed = raw_holidays is None
        holidays = None if seed else cls._validate_collection(HOLIDAYS_KEY, raw_holidays, PublicHoliday)
        if holidays is None:
            holidays = default_holidays()
            seed = True

        ledger = cls(store=store, entries=entries, holidays=holidays)
        if seed:
            logger.info("Seeding %d default holidays", len(holidays))
            ledger._save_holidays(holidays)
        logger.info("Ledger loaded: %d entries, %d holidays", len(entries), len(holidays))
        return ledger

    @classmethod
    def _read_collection(cls, store: Any, key: str, record_type):
        raw = store.get_value(key)
        if raw is None:
            return None
        return cls._validate_collection(key, raw, record_type)

    @staticmethod
    def _validate_collection(key: str, raw: Any, record_type):
        if not isinstance(raw, list):
            logger.warning("Stored %r is not a list (%s); ignoring it", key, type(raw).__name__)
            return None
        try:
            return [record_type.model_validate(item) for item in raw]
        except ValidationError:
            logger.warning("Stored %r failed validation; ignoring it", key, exc_info=True)
            return None

    def _save_entries(self, entries: List[LeaveEntry]) -> None:
        if self.store is not None:
            self.store.put_value(ENTRIES_KEY, [e.to_json() for e in entries])

    def _save_holidays(self, holidays: List[PublicHoliday]) -> None:
        if self.store is not None:
            self.store.put_value(HOLIDAYS_KEY, [h.to_json() for h in holidays])

    # ==================== ENTRIES ====================

    @property
    def entries(self) -> List[LeaveEntry]:
        return list(self._entries)

    def get_entry(self, entry_id: str) -> Optional[LeaveEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def add_entry(
        self,
        leave_type: LeaveType,
        start_date: str,
        end_date: str,
        description: str = "",
        holiday_snapshot: Optional[Iterable[str]] = None,
    ) -> LeaveEntry:
        """
        Record a leave entry. The business-day count is fixed here from the
        holidays in effect now and is not recomputed when holidays change.
        No quota check happens at this level.
        """
        if holiday_snapshot is None:
            holiday_snapshot = self.holiday_dates()

        entry = LeaveEntry(
            id=_new_id(),
            type=LeaveType(leave_type),
            start_date=start_date,
            end_date=end_date,
            days=calculate_business_days(start_date, end_date, holiday_snapshot),
            description=description or "",
            created_at=int(time.time() * 1000),
        )
        entries = self._entries + [entry]
        self._save_entries(entries)
        self._entries = entries
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        """Remove an entry; unknown ids are ignored. Returns whether anything was removed."""
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._save_entries(remaining)
        self._entries = remaining
        return True

    def entries_by_recency(self) -> List[LeaveEntry]:
        # ties keep the later-added entry first
        return sorted(reversed(self._entries), key=lambda e: e.created_at, reverse=True)

    def entries_by_calendar(self) -> List[LeaveEntry]:
        return sorted(self._entries, key=lambda e: (e.start_date, e.end_date))

    # ==================== HOLIDAYS ====================

    @property
    def holidays(self) -> List[PublicHoliday]:
        return list(self._holidays)

    def holiday_dates(self) -> Set[str]:
        return {h.date for h in self._holidays}

    def holidays_by_date(self) -> List[PublicHoliday]:
        return sorted(self._holidays, key=lambda h: h.date)

    def add_holiday(self, holiday_date: str, name: str) -> PublicHoliday:
        holiday = PublicHoliday(id=_new_id(), date=holiday_date, name=name)
        holidays = self._holidays + [holiday]
        self._save_holidays(holidays)
        self._holidays = holidays
        return holiday

    def remove_holiday(self, holiday_id: str) -> bool:
        remaining = [h for h in self._holidays if h.id != holiday_id]
        if len(remaining) == len(self._holidays):
            return False
        self._save_holidays(remaining)
        self._holidays = remaining
        return True

    # ==================== QUOTA ====================

    def quota_summary(self) -> Dict[LeaveType, QuotaUsage]:
        """Usage per leave type; remaining is not clamped and may go negative"""
        summary = {}
        for leave_type, total in ANNUAL_QUOTA.items():
            used = sum(e.days for e in self._entries if e.type == leave_type)
            summary[leave_type] = QuotaUsage(used=used, total=total, remaining=total - used)
        return summary

    def remaining_quota(self) -> Dict[LeaveType, int]:
        return {leave_type: usage.remaining for leave_type, usage in self.quota_summary().items()}
