import unittest

from ainews.models import Language
from ainews.summarizer.prompts import (
    SummaryParseError,
    create_user_prompt,
    get_system_prompt,
    parse_summary_response,
)


class PromptTests(unittest.TestCase):
    def test_system_prompt_per_language(self):
        self.assertIn("JSON", get_system_prompt(Language.JA))
        self.assertTrue(get_system_prompt(Language.EN).startswith("You are"))
        self.assertNotEqual(get_system_prompt("ja"), get_system_prompt("en"))

    def test_user_prompt_truncates_long_content(self):
        prompt = create_user_prompt("Title", "x" * 5000, Language.EN, max_length=4000)
        self.assertIn("Title: Title", prompt)
        self.assertTrue(prompt.endswith("x" * 4000 + "..."))

    def test_user_prompt_keeps_short_content(self):
        prompt = create_user_prompt("タイトル", "本文です", Language.JA)
        self.assertIn("タイトル: タイトル", prompt)
        self.assertTrue(prompt.endswith("本文です"))


class ParseSummaryResponseTests(unittest.TestCase):
    def test_fenced_json(self):
        response = 'Here you go:\n```json\n{"summary": "S", "keyPoints": ["a", "b", "c", "d"], "category": "LLM", "sentiment": "positive"}\n```'
        parsed = parse_summary_response(response)
        self.assertEqual(parsed.summary, "S")
        self.assertEqual(parsed.key_points, ["a", "b", "c"])
        self.assertEqual(parsed.category, "LLM")
        self.assertEqual(parsed.sentiment, "positive")

    def test_bare_object_with_defaults(self):
        parsed = parse_summary_response('noise {"summary": "S", "keyPoints": "oops", "sentiment": "angry"} noise')
        self.assertEqual(parsed.key_points, [])
        self.assertEqual(parsed.category, "Other")
        self.assertEqual(parsed.sentiment, "neutral")

    def test_missing_summary_raises(self):
        with self.assertRaises(SummaryParseError):
            parse_summary_response('{"keyPoints": []}')

    def test_no_json_raises(self):
        with self.assertRaises(SummaryParseError):
            parse_summary_response("I cannot summarize this.")

    def test_broken_json_raises(self):
        with self.assertRaises(SummaryParseError):
            parse_summary_response('{"summary": "S",}')


if __name__ == "__main__":
    unittest.main()
