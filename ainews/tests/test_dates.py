import unittest
from datetime import datetime, timezone

from ainews.dates import isoformat_z, parse_date, parse_japanese_date, parse_timestamp, resolve_url

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _local_midnight_utc(year, month, day):
    return datetime(year, month, day).astimezone().astimezone(timezone.utc)


class ParseDateTests(unittest.TestCase):
    def test_iso_with_offset_is_normalized_to_utc(self):
        parsed = parse_date("2024-01-15T09:00:00+09:00", now=NOW)
        self.assertFalse(parsed.defaulted)
        self.assertEqual(parsed.value, datetime(2024, 1, 15, 0, 0, tzinfo=timezone.utc))

    def test_rfc822(self):
        parsed = parse_date("Mon, 25 Nov 2024 12:00:00 GMT", now=NOW)
        self.assertEqual(parsed.value, datetime(2024, 11, 25, 12, 0, tzinfo=timezone.utc))

    def test_missing_or_garbage_defaults_to_now(self):
        for value in (None, "", "   ", "not a date at all"):
            parsed = parse_date(value, now=NOW)
            self.assertTrue(parsed.defaulted, value)
            self.assertEqual(parsed.value, NOW)


class ParseJapaneseDateTests(unittest.TestCase):
    def test_supported_formats(self):
        expected = _local_midnight_utc(2024, 1, 15)
        for value in ("2024/1/15", "2024.01.15", "2024-1-15", "2024年1月15日", "2024年1月15日(月)", "20240115"):
            parsed = parse_japanese_date(value, now=NOW)
            self.assertFalse(parsed.defaulted, value)
            self.assertEqual(parsed.value, expected, value)

    def test_iso_falls_through_to_generic_parser(self):
        parsed = parse_japanese_date("2024-01-15T10:30:00Z", now=NOW)
        self.assertEqual(parsed.value, datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))

    def test_unparseable_defaults_to_now(self):
        parsed = parse_japanese_date("昨日", now=NOW)
        self.assertTrue(parsed.defaulted)
        self.assertEqual(parsed.value, NOW)

    def test_empty_defaults_to_now(self):
        self.assertTrue(parse_japanese_date(None, now=NOW).defaulted)


class TimestampTests(unittest.TestCase):
    def test_isoformat_z_uses_milliseconds(self):
        self.assertEqual(isoformat_z(datetime(2026, 1, 11, tzinfo=timezone.utc)), "2026-01-11T00:00:00.000Z")

    def test_parse_timestamp_is_strict(self):
        self.assertEqual(parse_timestamp("2026-01-11T00:00:00.000Z"), datetime(2026, 1, 11, tzinfo=timezone.utc))
        with self.assertRaises(ValueError):
            parse_timestamp("last tuesday")

    def test_naive_timestamp_is_local_time(self):
        expected = datetime(2026, 1, 11, 9, 30).astimezone().astimezone(timezone.utc)
        self.assertEqual(parse_timestamp("2026-01-11T09:30:00"), expected)
        self.assertEqual(parse_date("2026-01-11 09:30:00", now=NOW).value, expected)


class ResolveUrlTests(unittest.TestCase):
    def test_absolute_passes_through(self):
        self.assertEqual(resolve_url("https://ainow.ai/", "https://other.example/x"), "https://other.example/x")

    def test_relative_is_joined(self):
        self.assertEqual(resolve_url("https://ledge.ai/", "/articles/foo"), "https://ledge.ai/articles/foo")


if __name__ == "__main__":
    unittest.main()
