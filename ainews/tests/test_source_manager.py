import unittest
from datetime import datetime, timedelta, timezone

from ainews.adapters.base import AdapterRegistry
from ainews.manager import SourceFilter, SourceManager
from ainews.models import Language, NewsItem, SourceConfig, SourceType

BASE = datetime(2026, 1, 10, tzinfo=timezone.utc)


def _item(item_id, url, source, hours=0):
    return NewsItem(
        id=item_id,
        title=f"title {item_id}",
        url=url,
        author=None,
        published_at=BASE + timedelta(hours=hours),
        source=source,
    )


class _StaticAdapter:
    def __init__(self, source_type, language, items, enabled=True):
        self.config = SourceConfig(name=source_type.value, type=source_type, language=language, enabled=enabled)
        self._items = items
        self.calls = []

    def fetch_news(self, limit):
        self.calls.append(limit)
        return list(self._items)


class _FailingAdapter(_StaticAdapter):
    def fetch_news(self, limit):
        raise RuntimeError("boom token=abc123")


class SourceManagerTests(unittest.TestCase):
    def _manager(self, *adapters):
        return SourceManager(AdapterRegistry(adapters))

    def test_dedupes_by_url_keeping_registry_order_winner(self):
        hn = _StaticAdapter(SourceType.HACKERNEWS, Language.EN, [_item("hn-1", "https://x.example/a", SourceType.HACKERNEWS, 1)])
        reddit = _StaticAdapter(SourceType.REDDIT, Language.EN, [_item("reddit-1", "https://x.example/a", SourceType.REDDIT, 5)])
        items = self._manager(hn, reddit).fetch_all_news(5)
        self.assertEqual([i.id for i in items], ["hn-1"])

    def test_items_without_url_are_never_deduped(self):
        hn = _StaticAdapter(
            SourceType.HACKERNEWS,
            Language.EN,
            [_item("hn-1", None, SourceType.HACKERNEWS), _item("hn-2", None, SourceType.HACKERNEWS)],
        )
        items = self._manager(hn).fetch_all_news(5)
        self.assertEqual(len(items), 2)

    def test_sorted_newest_first(self):
        qiita = _StaticAdapter(
            SourceType.QIITA,
            Language.JA,
            [_item("q-old", "https://q/1", SourceType.QIITA, 1), _item("q-new", "https://q/2", SourceType.QIITA, 9)],
        )
        itmedia = _StaticAdapter(SourceType.ITMEDIA, Language.JA, [_item("it-mid", "https://i/1", SourceType.ITMEDIA, 5)])
        items = self._manager(itmedia, qiita).fetch_all_news(5)
        self.assertEqual([i.id for i in items], ["q-new", "it-mid", "q-old"])

    def test_failing_adapter_is_isolated_and_recorded(self):
        bad = _FailingAdapter(SourceType.REDDIT, Language.EN, [])
        good = _StaticAdapter(SourceType.BLOG, Language.EN, [_item("blog-1", "https://b/1", SourceType.BLOG)])
        manager = self._manager(bad, good)

        items = manager.fetch_all_news(3)

        self.assertEqual([i.id for i in items], ["blog-1"])
        health = {h.name: h for h in manager.get_health()}
        self.assertFalse(health["reddit"].healthy)
        self.assertNotIn("abc123", health["reddit"].last_error)
        self.assertTrue(health["blog"].healthy)
        self.assertEqual(health["blog"].items_last_fetch, 1)

    def test_disabled_sources_are_not_called(self):
        disabled = _StaticAdapter(SourceType.AINOW, Language.JA, [_item("a", "https://a", SourceType.AINOW)], enabled=False)
        enabled = _StaticAdapter(SourceType.QIITA, Language.JA, [])
        manager = self._manager(disabled, enabled)
        manager.fetch_all_news(4)
        self.assertEqual(disabled.calls, [])
        self.assertEqual(enabled.calls, [4])

    def test_filters(self):
        hn = _StaticAdapter(SourceType.HACKERNEWS, Language.EN, [])
        qiita = _StaticAdapter(SourceType.QIITA, Language.JA, [])
        manager = self._manager(hn, qiita)

        self.assertEqual(manager.get_enabled_sources(SourceFilter(japanese_only=True)), [qiita])
        self.assertEqual(manager.get_enabled_sources(SourceFilter(english_only=True)), [hn])
        self.assertEqual(manager.get_enabled_sources(SourceFilter(enabled_sources=[SourceType.QIITA])), [qiita])
        self.assertEqual(manager.get_enabled_sources(SourceFilter(japanese_only=True, english_only=True)), [])

    def test_no_sources_returns_empty(self):
        hn = _StaticAdapter(SourceType.HACKERNEWS, Language.EN, [_item("hn-1", "https://h", SourceType.HACKERNEWS)])
        manager = self._manager(hn)
        self.assertEqual(manager.fetch_all_news(5, SourceFilter(japanese_only=True)), [])
        self.assertEqual(manager.fetch_japanese_news(5), [])

    def test_list_sources(self):
        manager = self._manager(_StaticAdapter(SourceType.LEDGE, Language.JA, [], enabled=False))
        info = manager.list_sources()[0]
        self.assertEqual((info.type, info.language, info.enabled), (SourceType.LEDGE, Language.JA, False))


class AdapterRegistryTests(unittest.TestCase):
    def test_duplicate_registration_rejected(self):
        registry = AdapterRegistry([_StaticAdapter(SourceType.HACKERNEWS, Language.EN, [])])
        with self.assertRaises(ValueError):
            registry.register(_StaticAdapter(SourceType.HACKERNEWS, Language.EN, []))

    def test_set_enabled_replaces_config(self):
        adapter = _StaticAdapter(SourceType.LEDGE, Language.JA, [], enabled=False)
        registry = AdapterRegistry([adapter])
        registry.set_enabled(SourceType.LEDGE, True)
        self.assertTrue(registry.get(SourceType.LEDGE).config.enabled)


if __name__ == "__main__":
    unittest.main()
