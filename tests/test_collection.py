from django.test import SimpleTestCase

from finance.lib.collection import ASC, FilterableCollection, TableState, clamp_page, match_field
from .helpers import expense, d


def _entries():
    return [
        expense(d("2024-03-01"), 100, "parking", vehicle="v1"),
        expense(d("2024-03-05"), 300, "tolls", vehicle="v2"),
        expense(d("2024-02-10"), 200, "parking", vehicle="v1"),
        expense(d("2024-02-11"), 400, "tolls"),
    ]


def _collection(page_size=10):
    return FilterableCollection(
        date_of=lambda e: e.paid_at,
        filters={
            "type": match_field(lambda e: e.expense_type),
            "vehicle": match_field(lambda e: e.vehicle_profile_id),
        },
        sorters={"amount": lambda e: e.amount_minor},
        page_size=page_size,
    )


class FilterableCollectionTests(SimpleTestCase):
    def test_month_then_filters_narrow_in_sequence(self):
        page = _collection().apply(_entries(), TableState(month="2024-03", filters={"type": "parking"}))
        self.assertEqual([e.amount_minor for e in page.items], [100])

    def test_list_filter_is_membership(self):
        page = _collection().apply(_entries(), TableState(filters={"vehicle": ["v1", "v2"]}))
        self.assertEqual(page.total_items, 3)

    def test_all_and_empty_filters_are_ignored(self):
        page = _collection().apply(_entries(), TableState(month="all", filters={"type": "all", "vehicle": []}))
        self.assertEqual(page.total_items, 4)

    def test_sorting_direction(self):
        collection = _collection()
        descending = collection.apply(_entries(), TableState(sort="amount"))
        ascending = collection.apply(_entries(), TableState(sort="amount", direction=ASC))
        self.assertEqual([e.amount_minor for e in descending.items], [400, 300, 200, 100])
        self.assertEqual([e.amount_minor for e in ascending.items], [100, 200, 300, 400])

    def test_unknown_sort_keeps_natural_order(self):
        page = _collection().apply(_entries(), TableState(sort="nope"))
        self.assertEqual([e.amount_minor for e in page.items], [100, 300, 200, 400])

    def test_pages_are_fixed_size_and_clamped(self):
        collection = _collection(page_size=3)
        first = collection.apply(_entries(), TableState(page=1))
        self.assertEqual((len(first.items), first.total_pages, first.has_next), (3, 2, True))

        beyond = collection.apply(_entries(), TableState(page=9))
        self.assertEqual(beyond.page, 2)
        self.assertEqual(len(beyond.items), 1)
        self.assertTrue(beyond.has_previous)

        below = collection.apply(_entries(), TableState(page=-4))
        self.assertEqual(below.page, 1)

    def test_empty_collection_sits_on_page_one(self):
        page = _collection().apply([], TableState(page=5))
        self.assertEqual((page.page, page.total_pages, page.items), (1, 0, []))
        self.assertEqual(clamp_page(3, 0), 1)

    def test_group_runs_after_filters(self):
        collection = FilterableCollection(
            date_of=lambda e: e.paid_at,
            filters={"type": match_field(lambda e: e.expense_type)},
            group=lambda rows: [{"count": len(rows)}],
        )
        page = collection.apply(_entries(), TableState(filters={"type": "tolls"}))
        self.assertEqual(page.items, [{"count": 2}])
