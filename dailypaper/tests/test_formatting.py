import unittest
from datetime import datetime, timedelta, timezone

from dailypaper.client.formatting import format_time_ago
from dailypaper.records import parse_iso, to_iso


class FormatTimeAgoTests(unittest.TestCase):
    def setUp(self):
        self.now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    def _ago(self, **delta):
        return format_time_ago(to_iso(self.now - timedelta(**delta)), self.now)

    def test_labels(self):
        self.assertEqual(self._ago(seconds=30), "Just now")
        self.assertEqual(self._ago(minutes=45), "45m ago")
        self.assertEqual(self._ago(minutes=90), "1h ago")
        self.assertEqual(self._ago(hours=23, minutes=59), "23h ago")
        self.assertEqual(self._ago(days=3, hours=2), "3d ago")

    def test_accepts_offset_timestamps(self):
        self.assertEqual(format_time_ago("2026-10-19T14:00:00+03:00", self.now), "1h ago")


class IsoTimestampTests(unittest.TestCase):
    def test_z_suffix_with_milliseconds(self):
        stamp = to_iso(datetime(2026, 10, 19, 13, 51, 0, 123456, tzinfo=timezone.utc))
        self.assertEqual(stamp, "2026-10-19T13:51:00.123Z")
        self.assertEqual(parse_iso(stamp).microsecond, 123000)


if __name__ == "__main__":
    unittest.main()
