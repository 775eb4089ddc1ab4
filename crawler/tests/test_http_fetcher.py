import unittest
from unittest.mock import MagicMock, patch

import requests

from crawler.infra.http import HttpFetcher
from crawler.pipelines.dedupe import dedupe_by_key, make_digest


def _response(status, headers=None, json_body=None):
    response = MagicMock(status_code=status, headers=headers or {})
    response.json.return_value = json_body
    return response


@patch("crawler.infra.http.time.sleep")
class HttpFetcherTests(unittest.TestCase):
    def test_success_returns_response(self, _sleep):
        fetcher = HttpFetcher(user_agent="test/1.0")
        with patch.object(fetcher.session, "get", return_value=_response(200, json_body={"ok": True})) as mock_get:
            self.assertEqual(fetcher.fetch_json("https://api.example/x"), {"ok": True})
        self.assertEqual(fetcher.session.headers["User-Agent"], "test/1.0")
        self.assertEqual(mock_get.call_args.kwargs["timeout"], 10)

    def test_server_errors_are_retried(self, _sleep):
        fetcher = HttpFetcher(max_retries=3)
        responses = [_response(503), _response(502), _response(200)]
        with patch.object(fetcher.session, "get", side_effect=responses) as mock_get:
            self.assertIsNotNone(fetcher.fetch("https://example.com"))
        self.assertEqual(mock_get.call_count, 3)

    def test_client_errors_raise_immediately(self, _sleep):
        fetcher = HttpFetcher(max_retries=3)
        with patch.object(fetcher.session, "get", return_value=_response(404)) as mock_get:
            with self.assertRaises(requests.HTTPError) as ctx:
                fetcher.fetch_or_raise("https://example.com/missing")
        self.assertEqual(mock_get.call_count, 1)
        self.assertEqual(ctx.exception.response.status_code, 404)

    def test_fetch_swallows_errors(self, _sleep):
        fetcher = HttpFetcher(max_retries=2)
        with patch.object(fetcher.session, "get", side_effect=requests.ConnectionError("refused")):
            self.assertIsNone(fetcher.fetch("https://example.com"))

    def test_conditional_headers_and_not_modified(self, _sleep):
        fetcher = HttpFetcher()
        first = _response(200, headers={"ETag": '"abc"'})
        with patch.object(fetcher.session, "get", side_effect=[first, _response(304)]) as mock_get:
            self.assertIs(fetcher.fetch("https://example.com/feed"), first)
            self.assertIs(fetcher.fetch("https://example.com/feed"), first)
        self.assertEqual(mock_get.call_args.kwargs["headers"]["If-None-Match"], '"abc"')

    def test_not_modified_without_cached_body_returns_none(self, _sleep):
        fetcher = HttpFetcher()
        with patch.object(fetcher.session, "get", return_value=_response(304)):
            self.assertIsNone(fetcher.fetch("https://example.com/feed"))

    def test_no_validators_sends_plain_get(self, _sleep):
        fetcher = HttpFetcher()
        with patch.object(fetcher.session, "get", side_effect=[_response(200), _response(200)]) as mock_get:
            fetcher.fetch("https://example.com/page")
            fetcher.fetch("https://example.com/page")
        self.assertEqual(mock_get.call_args.kwargs["headers"], {})


class DedupeTests(unittest.TestCase):
    def test_first_wins_and_empty_keys_kept(self):
        items = [("a", 1), ("b", 2), ("a", 3), (None, 4), (None, 5), ("", 6)]
        result = dedupe_by_key(items, key_fn=lambda item: item[0])
        self.assertEqual([value for _, value in result], [1, 2, 4, 5, 6])

    def test_digest_is_stable(self):
        self.assertEqual(make_digest(["https://x"], length=12), make_digest(["https://x"], length=12))
        self.assertEqual(len(make_digest(["https://x"], length=12)), 12)
        self.assertNotEqual(make_digest(["https://x"]), make_digest(["https://y"]))


if __name__ == "__main__":
    unittest.main()
