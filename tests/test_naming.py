"""Tests for relationship naming helpers."""

import pytest

from schemalens.discovery.naming import (
    pluralize,
    relationship_name,
    reverse_relationship_name,
    to_camel_case,
)


class TestCamelCase:
    """Test to_camel_case."""

    @pytest.mark.parametrize("name,expected", [
        ("user_profile", "userProfile"),
        ("UserProfile", "userProfile"),
        ("user-profile", "userProfile"),
        ("users", "users"),
        ("ORDER_LINES", "orderLines"),
        ("", ""),
    ])
    def test_conversion(self, name, expected):
        """Test separators and camel boundaries both split words."""
        assert to_camel_case(name) == expected


class TestPluralize:
    """Test pluralize."""

    @pytest.mark.parametrize("word,expected", [
        ("post", "posts"),
        ("category", "categories"),
        ("day", "days"),
        ("address", "addresses"),
        ("box", "boxes"),
        ("posts", "posts"),
    ])
    def test_rules(self, word, expected):
        """Test suffix rules."""
        assert pluralize(word) == expected


class TestRelationshipNames:
    """Test forward and reverse relationship names."""

    def test_strips_id_suffix(self):
        """Test snake and camel key suffixes are removed."""
        assert relationship_name("author_id", "users") == "author"
        assert relationship_name("parentId", "categories") == "parent"

    def test_column_without_suffix(self):
        """Test a column without a key suffix is camelCased as-is."""
        assert relationship_name("owner", "users") == "owner"

    def test_bare_id_falls_back_to_table(self):
        """Test a column named 'id' uses the referenced table name."""
        assert relationship_name("id", "user_accounts") == "userAccounts"

    def test_reverse_name(self):
        """Test reverse names pluralize the owning table."""
        assert reverse_relationship_name("blog_post", "author_id") == "blogPosts"
        assert reverse_relationship_name("posts", "user_id") == "posts"

    def test_qualified_reverse_name(self):
        """Test qualified reverse names are prefixed with the forward name."""
        assert reverse_relationship_name("messages", "sender_id", qualify=True) == "senderMessages"
