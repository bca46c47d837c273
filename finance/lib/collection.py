# finance/lib/collection.py
# ─────────────────────────────────────────────────────────────────────────────
# 📋 One filter → sort → paginate pipeline shared by every log view.
#    A FilterableCollection knows *how* to narrow and order one kind of entry;
#    a TableState says *what* the user picked. apply() recomputes the page
#    from the full entry list every time.
# ─────────────────────────────────────────────────────────────────────────────

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .grouping import entry_month

ALL = "all"
ASC = "asc"
DESC = "desc"


@dataclass
class TableState:
    """What the user selected in a log view."""
    month: str = ALL                                    # "YYYY-MM" or "all"
    filters: dict = field(default_factory=dict)         # filter name → value or list of values
    sort: Optional[str] = None                          # sorter name (None = natural order)
    direction: str = DESC
    page: int = 1


@dataclass
class Page:
    items: list
    page: int
    total_pages: int
    total_items: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def clamp_page(page: int, total_pages: int) -> int:
    """Keep the page inside [1, total_pages]; an empty collection sits on page 1."""
    if not total_pages:
        return 1
    return max(1, min(page, total_pages))


def is_inactive(value) -> bool:
    """A filter is off when its value is empty or 'all'."""
    if value is None:
        return True
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return str(value).strip() in ("", ALL)


def match_field(getter: Callable[[Any], Any]):
    """Predicate factory: equality for a scalar value, membership for a list (compared as strings)."""
    def predicate(entry, value):
        actual = getter(entry)
        actual = "" if actual is None else str(actual)
        if isinstance(value, (list, tuple, set, frozenset)):
            return actual in {str(v) for v in value}
        return actual == str(value)
    return predicate


class FilterableCollection:
    """
    Parameters
      date_of   – entry → stored date (drives the month filter)
      filters   – ordered {name: predicate(entry, value)}; applied in this order after the month
      sorters   – {name: key(item)}; applied to the (optionally grouped) items
      group     – optional transform run after filtering (e.g. rows → daily summaries)
      page_size – rows per page
    """

    def __init__(self, date_of, filters=None, sorters=None, group=None, page_size=10):
        self.date_of = date_of
        self.filters = dict(filters or {})
        self.sorters = dict(sorters or {})
        self.group = group
        self.page_size = max(int(page_size), 1)

    def narrow(self, entries, state: TableState):
        items = list(entries)
        if not is_inactive(state.month):
            items = [entry for entry in items if self._month_key(entry) == state.month]
        for name, predicate in self.filters.items():
            value = state.filters.get(name)
            if is_inactive(value):
                continue
            items = [entry for entry in items if predicate(entry, value)]
        return items

    def order(self, items, state: TableState):
        key = self.sorters.get(state.sort) if state.sort else None
        if key is None:
            return list(items)
        return sorted(items, key=key, reverse=state.direction != ASC)

    def paginate(self, items, page: int) -> Page:
        total_items = len(items)
        total_pages = -(-total_items // self.page_size)                # ceiling division
        current = clamp_page(page, total_pages)
        offset = (current - 1) * self.page_size
        return Page(
            items=items[offset:offset + self.page_size],
            page=current,
            total_pages=total_pages,
            total_items=total_items,
            page_size=self.page_size,
        )

    def apply(self, entries, state: TableState) -> Page:
        items = self.narrow(entries, state)
        if self.group is not None:
            items = self.group(items)
        return self.paginate(self.order(items, state), state.page)

    def _month_key(self, entry):
        parsed = entry_month(self.date_of(entry))
        if parsed is None:
            return None
        return f"{parsed[0]:04d}-{parsed[1]:02d}"
