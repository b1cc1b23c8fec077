import unittest

from shipnotes.grouping.classifier import (
    MatchPolicy,
    build_matcher,
    classify,
    classify_commits,
    policy_for,
    split_subject,
)
from shipnotes.grouping.section_model import (
    DEFAULT_CHANGELOG_RULES,
    DEFAULT_RELEASE_NOTES_RULES,
    ChangelogMode,
    SectionRule,
)
from shipnotes.matching.matchers import CatchAll, PatternError, PrefixMatcher, Reference, ReferenceMatcher
from shipnotes.parsing.log_parser import Commit


def _commit(commit_id, subject, body=""):
    return Commit(
        id=commit_id,
        subject=subject,
        author_name="Jane Doe",
        author_email="jane@example.com",
        timestamp="2024-01-01T00:00:00Z",
        body=body,
    )


class TestSplitSubject(unittest.TestCase):
    def test_split_subject_cases(self) -> None:
        cases = [
            ("feat(api): add auth", ("api", "add auth")),
            ("fix: handle null", (None, "handle null")),
            ("feat(core)!: drop py2", ("core", "drop py2")),
            ("feat!: breaking", (None, "breaking")),
            ("feat(): empty scope", (None, "empty scope")),
            ("Merge branch 'main'", (None, "Merge branch 'main'")),
        ]
        for subject, expected in cases:
            with self.subTest(subject=subject):
                self.assertEqual(split_subject(subject), expected)


class TestPrefixMode(unittest.TestCase):
    def test_scope_and_text(self) -> None:
        result = classify_commits([_commit("1", "feat(api): add auth")], DEFAULT_CHANGELOG_RULES,
                                  ChangelogMode.CHANGELOG)
        entry = result["Features"][0]
        self.assertEqual(entry.scope, "api")
        self.assertEqual(entry.text, "add auth")
        self.assertIsNone(entry.reference)
        self.assertEqual(result["Bug Fixes"], [])
        self.assertEqual(result["Other Changes"], [])

    def test_each_commit_lands_in_exactly_one_section(self) -> None:
        commits = [
            _commit("1", "feat: one"),
            _commit("2", "fix(db): two"),
            _commit("3", "chore: three"),
            _commit("4", "FIX: four"),
            _commit("5", "Update readme"),
        ]
        result = classify_commits(commits, DEFAULT_CHANGELOG_RULES, ChangelogMode.CHANGELOG)
        placed = [entry.commit.id for entries in result.values() for entry in entries]
        self.assertEqual(sorted(placed), ["1", "2", "3", "4", "5"])
        self.assertEqual([e.commit.id for e in result["Bug Fixes"]], ["2", "4"])
        self.assertEqual([e.commit.id for e in result["Other Changes"]], ["3", "5"])

    def test_first_matching_rule_wins(self) -> None:
        rules = [
            SectionRule(name="Fixes", pattern="fix", label="fix"),
            SectionRule(name="DB Fixes", pattern=r"fix\(db\)", label="db"),
        ]
        result = classify_commits([_commit("1", "fix(db): pool")], rules, ChangelogMode.CHANGELOG)
        self.assertEqual(len(result["Fixes"]), 1)
        self.assertEqual(result["DB Fixes"], [])

    def test_catch_all_is_evaluated_last(self) -> None:
        rules = [
            SectionRule(name="Everything Else", pattern="*", label="other"),
            SectionRule(name="Features", pattern="^feat", label="feat"),
        ]
        result = classify_commits([_commit("1", "feat: x"), _commit("2", "docs: y")], rules,
                                  ChangelogMode.CHANGELOG)
        self.assertEqual(list(result), ["Everything Else", "Features"])
        self.assertEqual([e.commit.id for e in result["Features"]], ["1"])
        self.assertEqual([e.commit.id for e in result["Everything Else"]], ["2"])

    def test_without_catch_all_unmatched_commits_are_dropped(self) -> None:
        rules = [SectionRule(name="Features", pattern="^feat", label="feat")]
        result = classify_commits([_commit("1", "docs: y")], rules, ChangelogMode.CHANGELOG)
        self.assertEqual(result["Features"], [])

    def test_invalid_pattern_raises(self) -> None:
        rules = [SectionRule(name="Broken", pattern="feat(", label="x")]
        with self.assertRaises(PatternError):
            classify_commits([_commit("1", "feat: x")], rules, ChangelogMode.CHANGELOG)


class TestReferenceMode(unittest.TestCase):
    def test_commit_appears_under_every_matching_label(self) -> None:
        commit = _commit("1", "feat: login", body="US: 10\nBUG: 20")
        result = classify_commits([commit], DEFAULT_RELEASE_NOTES_RULES, ChangelogMode.RELEASE_NOTES)
        self.assertEqual([e.reference for e in result["User Stories"]], [Reference("US", "10")])
        self.assertEqual([e.reference for e in result["Bugs"]], [Reference("BUG", "20")])

    def test_one_entry_per_reference(self) -> None:
        commit = _commit("1", "feat: batch (US-1, US-2)")
        result = classify_commits([commit], DEFAULT_RELEASE_NOTES_RULES, ChangelogMode.RELEASE_NOTES)
        self.assertEqual([e.reference.ticket_id for e in result["User Stories"]], ["1", "2"])
        self.assertTrue(all(e.text == "batch (US-1, US-2)" for e in result["User Stories"]))

    def test_commits_without_references_are_excluded(self) -> None:
        commits = [_commit("1", "chore: bump deps"), _commit("2", "fix: crash (BUG-3)")]
        result = classify_commits(commits, DEFAULT_RELEASE_NOTES_RULES, ChangelogMode.RELEASE_NOTES)
        self.assertEqual(result["User Stories"], [])
        self.assertEqual([e.commit.id for e in result["Bugs"]], ["2"])

    def test_entries_follow_commit_order(self) -> None:
        commits = [_commit(str(i), f"feat: step {i} (US-{i})") for i in range(5)]
        result = classify_commits(commits, DEFAULT_RELEASE_NOTES_RULES, ChangelogMode.RELEASE_NOTES)
        self.assertEqual([e.commit.id for e in result["User Stories"]], ["0", "1", "2", "3", "4"])


class TestClassifyPolicy(unittest.TestCase):
    def test_policy_for_mode(self) -> None:
        self.assertIs(policy_for(ChangelogMode.CHANGELOG), MatchPolicy.EXCLUSIVE)
        self.assertIs(policy_for(ChangelogMode.RELEASE_NOTES), MatchPolicy.INCLUSIVE)

    def test_build_matcher_variants(self) -> None:
        rule = SectionRule(name="Stories", pattern="US", label="US")
        self.assertIsInstance(build_matcher(rule, ChangelogMode.RELEASE_NOTES), ReferenceMatcher)
        self.assertIsInstance(build_matcher(rule, ChangelogMode.CHANGELOG), PrefixMatcher)
        catch_all = SectionRule(name="Other", pattern="*", label="other")
        self.assertIsInstance(build_matcher(catch_all, ChangelogMode.CHANGELOG), CatchAll)

    def test_same_matchers_under_both_policies(self) -> None:
        rules = [
            SectionRule(name="Stories", pattern="US", label="US"),
            SectionRule(name="Bugs", pattern="BUG", label="BUG"),
        ]
        commits = [_commit("1", "feat: x (US-1) (BUG-2)")]

        def factory(rule):
            return ReferenceMatcher(rule.pattern)

        exclusive = classify(commits, rules, MatchPolicy.EXCLUSIVE, factory)
        inclusive = classify(commits, rules, MatchPolicy.INCLUSIVE, factory)
        self.assertEqual((len(exclusive["Stories"]), len(exclusive["Bugs"])), (1, 0))
        self.assertEqual((len(inclusive["Stories"]), len(inclusive["Bugs"])), (1, 1))


if __name__ == "__main__":
    unittest.main()
