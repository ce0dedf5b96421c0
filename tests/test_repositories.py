"""
Repository functions against a mocked psycopg2 connection.
"""
import unittest
from unittest.mock import MagicMock

from psycopg2.extras import Json

from wahotrip.db.repositories import (
    attraction_repo, booking_repo, hotel_repo, submission_repo, transport_repo,
)


def _conn(columns=("id",), rows=(), rowcount=0, fetchone=None):
    conn = MagicMock()
    cur = conn.cursor.return_value.__enter__.return_value
    cur.description = [(c,) for c in columns]
    cur.fetchall.return_value = list(rows)
    cur.fetchone.return_value = fetchone
    cur.rowcount = rowcount
    return conn, cur


class SelectTests(unittest.TestCase):
    def test_rows_come_back_as_dicts(self):
        conn, _ = _conn(("id", "attraction", "price"), [(1, "Burj Khalifa", 169)])
        rows = attraction_repo.list_attractions(conn)
        self.assertEqual(rows, [{"id": 1, "attraction": "Burj Khalifa", "price": 169}])

    def test_filters_become_parameters(self):
        conn, cur = _conn()
        attraction_repo.list_attractions(conn, emirates=["Dubai"], max_price=200, active_only=True)
        self.assertEqual(cur.execute.call_args.args[1], [["Dubai"], 200, True])

    def test_search_is_wrapped_for_ilike(self):
        conn, cur = _conn()
        hotel_repo.list_hotels(conn, stars=[4, 5], search="palm")
        self.assertEqual(cur.execute.call_args.args[1], [[4, 5], "%palm%"])

    def test_get_by_id_is_limited_to_one_row(self):
        conn, cur = _conn(("id", "label"), [(7, "Metro Pass")])
        row = transport_repo.get_transport(conn, 7)
        self.assertEqual(row, {"id": 7, "label": "Metro Pass"})
        self.assertEqual(cur.execute.call_args.args[1], [7, 1])

    def test_get_unknown_id(self):
        conn, _ = _conn(("id",), [])
        self.assertIsNone(hotel_repo.get_hotel(conn, 99))


class WriteTests(unittest.TestCase):
    def test_insert_keeps_only_writable_columns(self):
        conn, cur = _conn(("id", "label"), [(1, "Taxi")])
        row = transport_repo.create_transport(conn, {"label": "Taxi", "id": 55, "hacked": True})
        self.assertEqual(row, {"id": 1, "label": "Taxi"})
        self.assertEqual(cur.execute.call_args.args[1], ["Taxi"])

    def test_insert_without_writable_columns_raises(self):
        conn, cur = _conn()
        with self.assertRaises(ValueError):
            attraction_repo.create_attraction(conn, {"bogus": 1})
        cur.execute.assert_not_called()

    def test_update_unknown_id_returns_none(self):
        conn, cur = _conn(("id",), [])
        self.assertIsNone(hotel_repo.update_hotel(conn, 3, {"stars": 4}))
        self.assertEqual(cur.execute.call_args.args[1], [4, 3])

    def test_update_without_changes_returns_the_current_row(self):
        conn, _ = _conn(("id", "name"), [(3, "Harbour Inn")])
        self.assertEqual(hotel_repo.update_hotel(conn, 3, {}), {"id": 3, "name": "Harbour Inn"})

    def test_delete_reports_whether_a_row_went(self):
        conn, _ = _conn(rowcount=1)
        self.assertTrue(attraction_repo.delete_attraction(conn, 1))
        conn, _ = _conn(rowcount=0)
        self.assertFalse(attraction_repo.delete_attraction(conn, 1))


class SubmissionRepoTests(unittest.TestCase):
    def test_create_fills_status_and_traveler_count(self):
        conn, cur = _conn(("id",), [("sub-1",)])
        row = submission_repo.create_submission(conn, {"full_name": "A", "adults": 2, "kids": 1})
        self.assertEqual(row, {"id": "sub-1"})
        self.assertEqual(cur.execute.call_args.args[1], ["A", 2, 1, "pending", 3])

    def test_invalid_status_is_rejected(self):
        conn, cur = _conn()
        with self.assertRaises(ValueError):
            submission_repo.update_submission(conn, 1, {"submission_status": "lost"})
        cur.execute.assert_not_called()


class BookingRepoTests(unittest.TestCase):
    def test_itinerary_data_is_sent_as_json(self):
        conn, cur = _conn(("id",), [("b1",)])
        booking_repo.create_booking(conn, {"email": "a@b.c", "itinerary_data": [{"day": 1}]})
        params = cur.execute.call_args.args[1]
        self.assertEqual(params[0], "a@b.c")
        self.assertIsInstance(params[1], Json)

    def test_increment_download_count(self):
        conn, cur = _conn(fetchone=(4,))
        self.assertEqual(booking_repo.increment_download_count(conn, "b1"), 4)
        self.assertEqual(cur.execute.call_args.args[1], ("b1",))
        conn, _ = _conn(fetchone=None)
        self.assertEqual(booking_repo.increment_download_count(conn, "missing"), 0)

    def test_lookup_by_email_and_title(self):
        conn, cur = _conn(("id", "download_count"), [("b1", 2)])
        row = booking_repo.get_booking_by_email_and_package(conn, "a@b.c", "Desert Dreams")
        self.assertEqual(row["id"], "b1")
        self.assertEqual(cur.execute.call_args.args[1], ["a@b.c", "Desert Dreams", 1])

    def test_invalid_status_is_rejected(self):
        conn, _ = _conn()
        with self.assertRaises(ValueError):
            booking_repo.update_booking(conn, "b1", {"booking_status": "teleported"})


if __name__ == "__main__":
    unittest.main()
