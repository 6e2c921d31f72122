# tests/test_pattern_matching.py
"""Tests for gitignore rule compilation and last-match-wins evaluation."""

from codebase_to_prompt.core.discovery.pattern_matching import (
    PatternMatcher,
    load_gitignore_rules,
    parse_ignore_lines,
)


def matcher_for(*lines, base="", depth=0):
    return PatternMatcher(parse_ignore_lines(lines, base=base, origin_depth=depth))


class TestParsing:
    def test_comments_and_blank_lines_are_skipped(self):
        rules = parse_ignore_lines(["# a comment\n", "\n", "   \n", "*.log\n", "!keep.log\n"])
        assert [r.pattern for r in rules] == ["*.log", "!keep.log"]
        assert [r.is_negation for r in rules] == [False, True]

    def test_rules_record_origin(self):
        rules = parse_ignore_lines(["*.tmp"], base="sub/dir", origin_depth=2)
        assert rules[0].base == "sub/dir"
        assert rules[0].origin_depth == 2

    def test_crlf_line_endings(self):
        m = matcher_for("*.log\r\n")
        assert m.matches("a.log", False)

    def test_load_from_directory(self, tmp_path):
        (tmp_path / ".gitignore").write_text("# comment\nbuild/\n*.pyc\n")
        rules = load_gitignore_rules(tmp_path, base="", origin_depth=0)
        assert [r.pattern for r in rules] == ["build/", "*.pyc"]

    def test_missing_gitignore_gives_no_rules(self, tmp_path):
        assert load_gitignore_rules(tmp_path, base="", origin_depth=0) == []


class TestMatching:
    def test_no_rules_means_not_ignored(self):
        assert not PatternMatcher().matches("anything.py", False)

    def test_basename_pattern_matches_at_any_depth(self):
        m = matcher_for("*.log")
        assert m.matches("b.log", False)
        assert m.matches("deep/nested/b.log", False)
        assert not m.matches("b.rs", False)

    def test_negation_after_broader_rule_reincludes(self):
        m = matcher_for("*.log", "!important.log")
        assert m.matches("other.log", False)
        assert not m.matches("important.log", False)

    def test_last_matching_rule_wins(self):
        m = matcher_for("!important.log", "*.log")
        assert m.matches("important.log", False)

    def test_trailing_slash_matches_directories_only(self):
        m = matcher_for("build/")
        assert m.matches("build", True)
        assert m.matches("src/build", True)
        assert not m.matches("build", False)

    def test_leading_slash_anchors_to_gitignore_directory(self):
        m = matcher_for("/build")
        assert m.matches("build", True)
        assert not m.matches("src/build", True)

    def test_pattern_with_slash_is_anchored(self):
        m = matcher_for("docs/*.md")
        assert m.matches("docs/readme.md", False)
        assert not m.matches("other/docs/readme.md", False)

    def test_single_star_does_not_cross_directories(self):
        m = matcher_for("docs/*.md")
        assert not m.matches("docs/sub/readme.md", False)

    def test_double_star_crosses_directories(self):
        m = matcher_for("docs/**/*.md")
        assert m.matches("docs/readme.md", False)
        assert m.matches("docs/a/b/c/readme.md", False)
        assert not m.matches("src/readme.md", False)

    def test_rules_are_relative_to_their_base(self):
        m = matcher_for("/gen", base="sub", depth=1)
        assert m.matches("sub/gen", True)
        assert not m.matches("gen", True)
        assert not m.matches("sub/deeper/gen", True)

    def test_rule_does_not_match_paths_below_what_it_names(self):
        m = matcher_for("*.txt", "!docs")
        assert not m.matches("docs", True)
        assert m.matches("docs/a.txt", False)

    def test_directory_only_negation_skips_files(self):
        m = matcher_for("*", "!*/", "!*.rs")
        assert not m.matches("x", True)
        assert m.matches("x/c.txt", False)
        assert not m.matches("x/b.rs", False)

    def test_double_star_suffix_does_not_match_the_directory_itself(self):
        m = matcher_for("build/**")
        assert not m.matches("build", True)
        assert m.matches("build/out.bin", False)
        assert m.matches("build/sub", True)

    def test_directory_only_flag(self):
        rules = parse_ignore_lines(["build/", "build", "**/"])
        assert [r.directory_only for r in rules] == [True, False, True]

    def test_matching_rule_reports_deciding_rule(self):
        m = matcher_for("*.log", "!important.log")
        assert m.matching_rule("important.log", False).pattern == "!important.log"
        assert m.matching_rule("main.rs", False) is None


class TestRuleStack:
    def test_push_and_pop_scope_rules(self):
        m = PatternMatcher()
        pushed = m.push(parse_ignore_lines(["*.tmp"], base="sub", origin_depth=1))
        assert pushed == 1
        assert m.matches("sub/a.tmp", False)
        m.pop(pushed)
        assert not m.matches("sub/a.tmp", False)
        assert m.rules == []

    def test_matcher_sees_list_by_reference(self):
        rules = []
        m = PatternMatcher(rules)
        rules.extend(parse_ignore_lines(["*.tmp"]))
        assert m.matches("a.tmp", False)

    def test_pop_zero_is_noop(self):
        m = matcher_for("*.log")
        m.pop(0)
        assert len(m.rules) == 1
