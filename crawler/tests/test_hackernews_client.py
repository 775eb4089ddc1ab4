import unittest
from unittest.mock import MagicMock

from crawler.ingesters.hackernews import HN_API_BASE, HackerNewsClient, is_ai_related

STORIES = {
    1: {"id": 1, "type": "story", "title": "OpenAI ships a new model", "url": "https://x/1", "time": 1700000000, "score": 10},
    2: {"id": 2, "type": "story", "title": "Rust 2.0 released", "url": "https://x/2", "time": 1700000000},
    3: {"id": 3, "type": "job", "title": "Hiring ML engineers", "time": 1700000000},
    4: {"id": 4, "type": "story", "title": "Why LLM agents fail", "time": 1700000000},
}


def _fetch_json(url, params=None):
    if url == f"{HN_API_BASE}/topstories.json":
        return [1, 2, 3, 4, 5]
    story_id = int(url.rsplit("/", 1)[-1].split(".")[0])
    return STORIES.get(story_id)


class HackerNewsClientTests(unittest.TestCase):
    def test_keyword_matching(self):
        self.assertTrue(is_ai_related("Show HN: A GPT wrapper"))
        self.assertTrue(is_ai_related("Deep Learning in practice"))
        self.assertFalse(is_ai_related("PostgreSQL 17 is out"))

    def test_ai_stories_filters_and_keeps_rank_order(self):
        fetcher = MagicMock()
        fetcher.fetch_json.side_effect = _fetch_json
        client = HackerNewsClient(fetcher=fetcher, max_workers=2)

        stories = client.ai_stories(limit=10, scan=5)

        self.assertEqual([s.id for s in stories], [1, 4])

    def test_limit_applies_after_filtering(self):
        fetcher = MagicMock()
        fetcher.fetch_json.side_effect = _fetch_json
        stories = HackerNewsClient(fetcher=fetcher).ai_stories(limit=1, scan=5)
        self.assertEqual([s.id for s in stories], [1])

    def test_unavailable_top_list_returns_empty(self):
        fetcher = MagicMock()
        fetcher.fetch_json.return_value = None
        self.assertEqual(HackerNewsClient(fetcher=fetcher).ai_stories(), [])


if __name__ == "__main__":
    unittest.main()
