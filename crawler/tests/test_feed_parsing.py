import unittest
from unittest.mock import MagicMock

import requests

from crawler.ingesters.blogs import BlogSource, blog_sources_from_config, fetch_blog_entries
from crawler.ingesters.rss_base import FeedFetchError, fetch_feed, parse_feed_entries

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>ITmedia AI+</title>
    <link>https://www.itmedia.co.jp/aiplus/</link>
    <item>
      <title>生成AIの新サービス</title>
      <link>https://www.itmedia.co.jp/aiplus/articles/2401/15/news001.html</link>
      <description>概要テキスト</description>
      <pubDate>Mon, 15 Jan 2024 10:00:00 +0900</pubDate>
      <guid>https://www.itmedia.co.jp/aiplus/articles/2401/15/news001.html</guid>
    </item>
  </channel>
</rss>
""".encode("utf-8")

ATOM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Qiita - machinelearning</title>
  <entry>
    <id>tag:qiita.com,2005:PublicArticle/123</id>
    <title>Transformer入門</title>
    <link rel="related" href="https://example.com/related"/>
    <link rel="alternate" type="text/html" href="https://qiita.com/someone/items/abc"/>
    <published>2024-01-15T10:00:00+09:00</published>
    <updated>2024-01-16T10:00:00+09:00</updated>
    <author><name>someone</name></author>
  </entry>
</feed>
""".encode("utf-8")


class ParseFeedEntriesTests(unittest.TestCase):
    def test_rss_entry(self):
        entry = parse_feed_entries(RSS_FEED)[0]
        self.assertEqual(entry.title, "生成AIの新サービス")
        self.assertEqual(entry.link, "https://www.itmedia.co.jp/aiplus/articles/2401/15/news001.html")
        self.assertEqual(entry.description, "概要テキスト")
        self.assertEqual(entry.published, "Mon, 15 Jan 2024 10:00:00 +0900")

    def test_atom_prefers_alternate_link(self):
        entry = parse_feed_entries(ATOM_FEED)[0]
        self.assertEqual(entry.link, "https://qiita.com/someone/items/abc")
        self.assertEqual(entry.guid, "tag:qiita.com,2005:PublicArticle/123")
        self.assertEqual(entry.author, "someone")
        self.assertEqual(entry.updated, "2024-01-16T10:00:00+09:00")

    def test_garbage_raises(self):
        with self.assertRaises(FeedFetchError):
            parse_feed_entries(b"<html><body>not a feed")


class FetchFeedTests(unittest.TestCase):
    def test_http_error_becomes_feed_fetch_error(self):
        fetcher = MagicMock()
        fetcher.fetch_or_raise.side_effect = requests.HTTPError("HTTP 500")
        with self.assertRaises(FeedFetchError):
            fetch_feed("https://example.com/feed", fetcher)

    def test_not_modified_returns_empty(self):
        fetcher = MagicMock()
        fetcher.fetch_or_raise.return_value = None
        self.assertEqual(fetch_feed("https://example.com/feed", fetcher), [])


class BlogFeedTests(unittest.TestCase):
    def test_failing_blog_is_skipped(self):
        ok = BlogSource("ok", "OK Blog", "https://ok.example/feed", "https://ok.example")
        broken = BlogSource("broken", "Broken", "https://broken.example/feed", "https://broken.example")
        good_response = MagicMock(content=RSS_FEED)

        def fetch(url, params=None):
            if "broken" in url:
                raise requests.ConnectionError("refused")
            return good_response

        fetcher = MagicMock()
        fetcher.fetch_or_raise.side_effect = fetch

        pairs = fetch_blog_entries([broken, ok], limit_per_source=5, fetcher=fetcher)

        self.assertEqual([blog.id for blog, _ in pairs], ["ok"])

    def test_config_entries_need_id_and_feed_url(self):
        sources = blog_sources_from_config([{"id": "a", "feed_url": "https://a/feed"}, {"name": "missing id"}])
        self.assertEqual(len(sources), 1)
        self.assertEqual(sources[0].name, "a")


if __name__ == "__main__":
    unittest.main()
