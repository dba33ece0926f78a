"""Tests for rule models."""

import pytest
from pydantic import ValidationError

from yamltrimmer.pipeline.rules import IncludeRule, walk_rules


@pytest.fixture
def database_rule():
    return IncludeRule(
        key="database",
        include=(
            IncludeRule(key="host"),
            IncludeRule(key="credentials", include=(IncludeRule(key="username"),)),
        ),
    )


class TestIncludeRule:
    """Tests for IncludeRule."""

    def test_leaf_by_default(self):
        """Test that a rule without nested rules is a leaf."""
        rule = IncludeRule(key="cache")
        assert rule.include == ()
        assert rule.is_leaf

    def test_nested_rule_is_not_leaf(self, database_rule):
        """Test that a rule with nested rules is not a leaf."""
        assert not database_rule.is_leaf

    def test_rules_are_immutable(self):
        """Test that rules cannot be changed after construction."""
        rule = IncludeRule(key="cache")
        with pytest.raises(ValidationError):
            rule.key = "database"  # type: ignore[misc]

    def test_rules_are_hashable(self, database_rule):
        """Test that equal rules hash equally."""
        copy = IncludeRule(
            key="database",
            include=(
                IncludeRule(key="host"),
                IncludeRule(key="credentials", include=(IncludeRule(key="username"),)),
            ),
        )
        assert copy == database_rule
        assert hash(copy) == hash(database_rule)

    def test_walk_is_depth_first(self, database_rule):
        """Test that walk yields rules depth first with their depth."""
        assert [(depth, rule.key) for depth, rule in database_rule.walk()] == [
            (0, "database"),
            (1, "host"),
            (1, "credentials"),
            (2, "username"),
        ]

    def test_walk_rules_covers_forest(self, database_rule):
        """Test that walk_rules walks every tree of a forest."""
        forest = (IncludeRule(key="cache"), database_rule)
        keys = [rule.key for _, rule in walk_rules(forest)]
        assert keys == ["cache", "database", "host", "credentials", "username"]

    def test_str(self, database_rule):
        """Test the compact string form."""
        assert str(database_rule) == "database{host, credentials{username}}"
