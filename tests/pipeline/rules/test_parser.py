"""Tests for rule parser."""

import logging

import pytest

from tests.yaml_helper import unindent
from yamltrimmer.errors import MalformedRulesError
from yamltrimmer.pipeline.rules import IncludeRule, parse_rules


class TestParseRules:
    """Tests for parse_rules function."""

    def test_parse_single_rule(self):
        """Test parsing a single top-level rule."""
        rules = parse_rules(
            unindent(
                """
                include:
                  - key: cache
                """
            )
        )
        assert rules == (IncludeRule(key="cache"),)
        assert rules[0].is_leaf

    def test_parse_nested_rules(self):
        """Test parsing nested include lists."""
        rules = parse_rules(
            unindent(
                """
                include:
                  - key: database
                    include:
                        - key: host
                        - key: credentials
                          include:
                          - key: username
                """
            )
        )
        assert rules == (
            IncludeRule(
                key="database",
                include=(
                    IncludeRule(key="host"),
                    IncludeRule(key="credentials", include=(IncludeRule(key="username"),)),
                ),
            ),
        )

    def test_parse_keeps_declaration_order(self):
        """Test that rules keep the order they are declared in."""
        rules = parse_rules("include: [{key: b}, {key: a}, {key: c}]")
        assert [rule.key for rule in rules] == ["b", "a", "c"]

    def test_parse_ignores_job_fields(self):
        """Test that input, output and cache do not affect the rules."""
        rules = parse_rules(
            unindent(
                """
                input: https://example.com/values.yaml
                output: values.yaml
                cache:
                  enabled: true
                include:
                  - key: image
                """
            )
        )
        assert rules == (IncludeRule(key="image"),)

    def test_parse_bytes(self):
        """Test that rule text may be given as bytes."""
        assert parse_rules(b"include:\n  - key: cache\n") == (IncludeRule(key="cache"),)

    def test_parse_empty_include_list(self):
        """Test that an empty include list yields an empty forest."""
        assert parse_rules("include: []") == ()

    def test_parse_null_include(self):
        """Test that an include field without a value yields an empty forest."""
        assert parse_rules("include:\n") == ()

    def test_parse_nested_empty_include_is_leaf(self):
        """Test that a nested empty include keeps the rule a leaf."""
        rules = parse_rules("include:\n  - key: a\n    include: []\n")
        assert rules == (IncludeRule(key="a"),)
        assert rules[0].is_leaf

    def test_keys_are_raw_scalar_text(self):
        """Test that keys keep their YAML text instead of being converted to values."""
        rules = parse_rules(
            unindent(
                """
                include:
                  - key: 5432
                  - key: true
                  - key: 'quoted'
                  - key: 1.50
                """
            )
        )
        assert [rule.key for rule in rules] == ["5432", "true", "quoted", "1.50"]

    def test_unknown_fields_warn(self, caplog):
        """Test that unknown rule fields are ignored with a warning."""
        with caplog.at_level(logging.WARNING):
            rules = parse_rules("include:\n  - key: a\n    includes:\n      - key: b\n")
        assert rules == (IncludeRule(key="a"),)
        assert "Ignoring unknown field(s) includes" in caplog.text

    def test_duplicate_sibling_keys_warn(self, caplog):
        """Test that duplicate sibling keys are kept with a warning."""
        with caplog.at_level(logging.WARNING):
            rules = parse_rules("include:\n  - key: a\n  - key: a\n")
        assert len(rules) == 2
        assert "Key 'a' is selected 2 times in include" in caplog.text


class TestParseRulesErrors:
    """Tests for malformed rule definitions."""

    def test_missing_include(self):
        """Test that a document without include is rejected."""
        with pytest.raises(MalformedRulesError, match="missing required 'include' field"):
            parse_rules("input: a.yaml\noutput: b.yaml\n")

    def test_missing_key(self):
        """Test that a rule without key is rejected with its path and position."""
        with pytest.raises(MalformedRulesError, match="missing required 'key' field") as exc_info:
            parse_rules("include:\n  - include:\n      - key: a\n")
        assert exc_info.value.rule_path == "include[0]"
        assert exc_info.value.line == 2
        assert exc_info.value.column == 5

    def test_missing_nested_key(self):
        """Test that the rule path points into nested includes."""
        text = unindent(
            """
            include:
              - key: database
                include:
                  - key: host
                  - port: 5432
            """
        )
        with pytest.raises(MalformedRulesError) as exc_info:
            parse_rules(text)
        assert exc_info.value.rule_path == "include[0].include[1]"
        assert "include[0].include[1]: Rule missing required 'key' field" in str(exc_info.value)

    def test_empty_key(self):
        """Test that a null key is rejected."""
        with pytest.raises(MalformedRulesError, match="must not be empty"):
            parse_rules("include:\n  - key:\n")

    def test_non_scalar_key(self):
        """Test that a mapping key is rejected."""
        with pytest.raises(MalformedRulesError, match="must be a scalar, got a mapping"):
            parse_rules("include:\n  - key: {a: 1}\n")

    def test_include_not_a_list(self):
        """Test that include must be a list."""
        with pytest.raises(MalformedRulesError, match="'include' must be a list of rules, got a scalar"):
            parse_rules("include: cache\n")

    def test_nested_include_not_a_list(self):
        """Test that nested include must be a list."""
        with pytest.raises(MalformedRulesError, match="got a mapping") as exc_info:
            parse_rules("include:\n  - key: a\n    include: {key: b}\n")
        assert exc_info.value.rule_path == "include[0].include"

    def test_rule_not_a_mapping(self):
        """Test that bare strings are not accepted as rules."""
        with pytest.raises(MalformedRulesError, match="Rule must be a mapping"):
            parse_rules("include:\n  - cache\n")

    def test_document_not_a_mapping(self):
        """Test that the top level must be a mapping."""
        with pytest.raises(MalformedRulesError, match="Rules document must be a mapping"):
            parse_rules("- key: cache\n")

    def test_empty_document(self):
        """Test that empty rule text is rejected."""
        with pytest.raises(MalformedRulesError, match="Rules document is empty"):
            parse_rules("")

    def test_invalid_yaml(self):
        """Test that YAML syntax errors are reported as malformed rules."""
        with pytest.raises(MalformedRulesError, match="Invalid YAML") as exc_info:
            parse_rules("include: [\n")
        assert exc_info.value.line is not None

    def test_multiple_documents(self):
        """Test that rule text must hold a single document."""
        with pytest.raises(MalformedRulesError, match="single document"):
            parse_rules("include: []\n---\ninclude: []\n")
