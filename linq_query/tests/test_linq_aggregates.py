import unittest

from linq_query import from_collection, Grouping
from linq_query.exceptions import LinqException, LinqNoElementException, LinqUnsupportedTypeException


class TestLinqAggregates(unittest.TestCase):
    def setUp(self):
        self.orders = [
            {"id": 1, "customer_id": 1, "status": "completed", "total_amount": 10.0},
            {"id": 2, "customer_id": 1, "status": "completed", "total_amount": 15.0},
            {"id": 3, "customer_id": 2, "status": "completed", "total_amount": 8.0},
            {"id": 4, "customer_id": 2, "status": "cancelled", "total_amount": 9.0},
            {"id": 5, "customer_id": 3, "status": "completed", "total_amount": None},
        ]

    def test_group_by(self):
        groups, err = (from_collection(self.orders)
                       .where(lambda o: o["status"] == "completed")
                       .group_by(lambda o: o["customer_id"], lambda o: o["id"])
                       .results())
        self.assertIsNone(err)
        self.assertTrue(all(isinstance(g, Grouping) for g in groups))
        self.assertEqual([(g.key, list(g)) for g in groups], [(1, [1, 2]), (2, [3]), (3, [5])])

    def test_group_by_then_select(self):
        totals, err = (from_collection(self.orders)
                       .group_by(lambda o: o["customer_id"])
                       .select(lambda g: (g.key, len(g)))
                       .results())
        self.assertIsNone(err)
        self.assertEqual(totals, [(1, 2), (2, 2), (3, 1)])

    def test_group_by_unhashable_key(self):
        _, err = from_collection([1, 2]).group_by(lambda x: [x]).results()
        self.assertIsInstance(err, LinqUnsupportedTypeException)

    def test_select_many(self):
        res, err = from_collection([[1, 2], [], [3]]).select_many(lambda x: x).results()
        self.assertIsNone(err)
        self.assertEqual(res, [1, 2, 3])

    def test_select_many_non_iterable(self):
        _, err = from_collection([1]).select_many(lambda x: x).results()
        self.assertIsInstance(err, LinqUnsupportedTypeException)

    def test_to_list_is_a_copy(self):
        data = [1, 2]
        res, err = from_collection(data).to_list()
        self.assertIsNone(err)
        self.assertEqual(res, data)
        self.assertIsNot(res, data)

    def test_to_set(self):
        self.assertEqual(from_collection([1, 1, 2]).to_set(), ({1, 2}, None))
        _, err = from_collection([[1]]).to_set()
        self.assertIsInstance(err, LinqUnsupportedTypeException)

    def test_to_dict(self):
        res, err = from_collection(self.orders).to_dict(lambda o: o["id"], lambda o: o["status"])
        self.assertIsNone(err)
        self.assertEqual(res[4], "cancelled")
        self.assertEqual(len(res), 5)

    def test_to_dict_duplicate_key(self):
        res, err = from_collection(self.orders).to_dict(lambda o: o["customer_id"])
        self.assertIsNone(res)
        self.assertIsInstance(err, LinqException)

    def test_sum_and_average(self):
        q = from_collection(self.orders)
        self.assertEqual(q.sum(lambda o: o["total_amount"]), (42.0, None))
        self.assertEqual(q.average(lambda o: o["total_amount"]), (8.4, None))
        self.assertEqual(from_collection([]).sum(), (0, None))
        self.assertEqual(from_collection([]).average(), (0.0, None))

    def test_sum_unsupported(self):
        total, err = from_collection(["a", "b"]).sum()
        self.assertEqual(total, 0)
        self.assertIsInstance(err, LinqUnsupportedTypeException)

    def test_min_max(self):
        q = from_collection([5, 3, 9])
        self.assertEqual(q.min(), (3, None))
        self.assertEqual(q.max(), (9, None))
        self.assertEqual(from_collection(self.orders).max(lambda o: o["id"]), (5, None))

    def test_min_max_empty(self):
        for op in (from_collection([]).min, from_collection([]).max):
            value, err = op()
            self.assertIsNone(value)
            self.assertIsInstance(err, LinqNoElementException)

    def test_aggregate_selector_failure(self):
        boom = ValueError("no amount")

        def amount(o):
            raise boom

        self.assertEqual(from_collection(self.orders).sum(amount), (0, boom))
        self.assertEqual(from_collection(self.orders).min(amount), (None, boom))


if __name__ == '__main__':
    unittest.main()
