import unittest

from shipnotes.matching.matchers import (
    CatchAll,
    PatternError,
    PrefixMatcher,
    Reference,
    ReferenceMatcher,
    extract_references,
    is_catch_all,
)
from shipnotes.parsing.log_parser import Commit


def _tickets(label, text, allow_glued=False):
    return [ref.ticket_id for ref in extract_references(label, text, allow_glued=allow_glued)]


class TestExtractReferences(unittest.TestCase):
    def test_accepted_separators(self) -> None:
        cases = [
            "US-123",
            "US_123",
            "US:123",
            "US: 123",
            "US #123",
            "US#123",
            "US 123",
            "(US-123)",
            "us-123",
        ]
        for text in cases:
            with self.subTest(text=text):
                self.assertEqual(_tickets("US", text), ["123"])

    def test_label_is_taken_from_rule(self) -> None:
        self.assertEqual(extract_references("US", "closes us-7"), [Reference(label="US", ticket_id="7")])

    def test_label_must_be_whole_word(self) -> None:
        for text in ("FOCUS-123", "BUS: 12", "HOUSE 5"):
            with self.subTest(text=text):
                self.assertEqual(_tickets("US", text), [])

    def test_ticket_needs_a_digit(self) -> None:
        self.assertEqual(_tickets("US", "US: none yet"), [])
        self.assertEqual(_tickets("BUG", "BUG-ABC"), [])

    def test_alphanumeric_tickets(self) -> None:
        self.assertEqual(_tickets("US", "see US-12a"), ["12a"])
        self.assertEqual(_tickets("BUG", "BUG: PROJ-42"), ["PROJ-42"])

    def test_trailing_punctuation_is_not_part_of_ticket(self) -> None:
        self.assertEqual(_tickets("US", "Implements US-42."), ["42"])
        self.assertEqual(_tickets("US", "feat: login (US-42)"), ["42"])
        self.assertEqual(_tickets("US", "US-42- and more"), ["42"])

    def test_multiple_references(self) -> None:
        self.assertEqual(_tickets("US", "US-1, US-2\nUS: 3"), ["1", "2", "3"])

    def test_other_labels_are_ignored(self) -> None:
        text = "US: 10\nBUG: 20"
        self.assertEqual(_tickets("US", text), ["10"])
        self.assertEqual(_tickets("BUG", text), ["20"])

    def test_glued_references_are_optional(self) -> None:
        self.assertEqual(_tickets("US", "done in US123"), [])
        self.assertEqual(_tickets("US", "done in US123", allow_glued=True), ["123"])
        self.assertEqual(_tickets("US", "USER12", allow_glued=True), [])
        self.assertEqual(_tickets("US", "US-5", allow_glued=True), ["5"])

    def test_label_word_in_prose_keeps_following_reference(self) -> None:
        cases = [
            ("fix: bug\nBUG-2", ["2"]),
            ("fix: login bug BUG-2", ["2"]),
            ("Bug: BUG-7 and bug-8", ["7", "8"]),
            ("bug BUG2", []),
        ]
        for text, expected in cases:
            with self.subTest(text=text):
                self.assertEqual(_tickets("BUG", text), expected)
        self.assertEqual(_tickets("BUG", "bug BUG2", allow_glued=True), ["2"])

    def test_separator_does_not_cross_lines(self) -> None:
        self.assertEqual(_tickets("US", "story US\n42 done"), [])
        self.assertEqual(_tickets("US", "US\t42"), ["42"])

    def test_no_match_is_empty(self) -> None:
        self.assertEqual(extract_references("US", ""), [])
        self.assertEqual(extract_references("", "US-1"), [])
        self.assertEqual(extract_references("US", "nothing here"), [])

    def test_reference_key_is_case_insensitive(self) -> None:
        self.assertEqual(Reference("US", "a1").key, Reference("us", "A1").key)


class TestMatchers(unittest.TestCase):
    def setUp(self) -> None:
        self.commit = Commit(
            id="1234567890",
            subject="feat(api): add auth",
            author_name="Jane",
            author_email="jane@example.com",
            timestamp="2024-01-01T00:00:00Z",
            body="Refs US-9",
        )

    def test_prefix_matcher_is_anchored_and_case_insensitive(self) -> None:
        matcher = PrefixMatcher("^feat")
        self.assertEqual(len(matcher.find("Feat: shout")), 1)
        self.assertEqual(matcher.find("fix: feat flag"), [])
        self.assertEqual(len(PrefixMatcher("fix").find("fix(db): pool")), 1)
        self.assertEqual(PrefixMatcher("fix").find("hotfix: pool"), [])

    def test_prefix_matcher_uses_subject_only(self) -> None:
        self.assertEqual(PrefixMatcher("Refs").find_in(self.commit), [])
        self.assertEqual(len(PrefixMatcher("feat").find_in(self.commit)), 1)

    def test_prefix_matcher_invalid_pattern(self) -> None:
        with self.assertRaises(PatternError):
            PrefixMatcher("feat(")

    def test_reference_matcher_scans_body(self) -> None:
        matches = ReferenceMatcher("US").find_in(self.commit)
        self.assertEqual([m.reference for m in matches], [Reference("US", "9")])

    def test_reference_matcher_rejects_empty_label(self) -> None:
        with self.assertRaises(PatternError):
            ReferenceMatcher("  ")

    def test_catch_all(self) -> None:
        self.assertEqual(len(CatchAll().find("")), 1)
        self.assertEqual(len(CatchAll().find_in(self.commit)), 1)
        self.assertIsNone(CatchAll().find("x")[0].reference)
        self.assertTrue(is_catch_all(" * "))
        self.assertFalse(is_catch_all("^feat"))


if __name__ == "__main__":
    unittest.main()
