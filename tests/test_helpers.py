"""
Tests for frontdesk/utils/helpers.py and frontdesk/services/availability.py
"""
from datetime import date, datetime

import pytz
from bson import ObjectId

from frontdesk.services.availability import conflict_filter, overlap_filter, windows_overlap
from frontdesk.services.booking_engine import no_show_note
from frontdesk.utils.helpers import build_pagination, parse_sort, serialize_doc, to_utc_naive

CHECK_IN = datetime(2026, 3, 10, 14, 0)
CHECK_OUT = datetime(2026, 3, 11, 14, 0)


class TestOverlap:

    def test_touching_windows_overlap(self):
        assert windows_overlap(CHECK_IN, CHECK_OUT, CHECK_OUT, datetime(2026, 3, 11, 17, 0))

    def test_contained_window_overlaps(self):
        assert windows_overlap(CHECK_IN, CHECK_OUT, datetime(2026, 3, 10, 18, 0), datetime(2026, 3, 10, 21, 0))

    def test_disjoint_windows(self):
        assert not windows_overlap(CHECK_IN, CHECK_OUT, datetime(2026, 3, 11, 15, 0), datetime(2026, 3, 11, 18, 0))

    def test_overlap_filter_only_counts_active_bookings(self):
        query = overlap_filter(CHECK_IN, CHECK_OUT)
        assert query["booking_status"] == {"$in": ["Confirmed", "Checked In"]}
        assert query["check_in_date"] == {"$lte": CHECK_OUT}
        assert query["check_out_date"] == {"$gte": CHECK_IN}

    def test_conflict_filter_excludes_booking(self):
        booking_id = ObjectId()
        query = conflict_filter("room-1", CHECK_IN, CHECK_OUT, str(booking_id))
        assert query["room_id"] == "room-1"
        assert query["_id"] == {"$ne": booking_id}

    def test_conflict_filter_without_exclusion(self):
        assert "_id" not in conflict_filter("room-1", CHECK_IN, CHECK_OUT)


class TestDates:

    def test_aware_datetime_becomes_naive_utc(self):
        manila = pytz.timezone("Asia/Manila").localize(datetime(2026, 3, 10, 22, 0))
        assert to_utc_naive(manila) == datetime(2026, 3, 10, 14, 0)

    def test_naive_datetime_is_kept(self):
        assert to_utc_naive(CHECK_IN) is CHECK_IN

    def test_date_becomes_midnight(self):
        assert to_utc_naive(date(2026, 3, 10)) == datetime(2026, 3, 10)

    def test_none_passes_through(self):
        assert to_utc_naive(None) is None

    def test_serialize_doc(self):
        oid = ObjectId()
        doc = serialize_doc({
            "_id": oid,
            "check_in_date": CHECK_IN,
            "guest": {"first_name": "Maria"},
            "additional_services": [{"service": "Breakfast", "amount": 15}],
        })
        assert doc["_id"] == str(oid)
        assert doc["check_in_date"] == "2026-03-10T14:00:00+00:00"
        assert doc["guest"] == {"first_name": "Maria"}
        assert doc["additional_services"][0]["service"] == "Breakfast"


class TestListHelpers:

    def test_parse_sort(self):
        assert parse_sort("-check_in_date,room_number") == [("check_in_date", -1), ("room_number", 1)]

    def test_parse_sort_default(self):
        assert parse_sort(None) == [("created_at", -1)]

    def test_pagination_first_page(self):
        assert build_pagination(1, 10, 25) == {"next": {"page": 2, "limit": 10}}

    def test_pagination_last_page(self):
        assert build_pagination(3, 10, 25) == {"prev": {"page": 2, "limit": 10}}


class TestNoShowNote:

    def test_note_without_extra_notes(self):
        booking = {"booking_number": "BK-20260310-042", "check_in_date": CHECK_IN}
        assert no_show_note(booking) == "No-show for booking BK-20260310-042 on 3/10/2026."

    def test_note_with_extra_notes(self):
        booking = {"booking_number": "BK-20260310-042", "check_in_date": CHECK_IN}
        assert no_show_note(booking, "late flight") == (
            "No-show for booking BK-20260310-042 on 3/10/2026. Additional notes: late flight"
        )
