"""Tests for view validation and dependency analysis."""

import pytest

from schemalens.database.models import ViewInfo
from schemalens.discovery.view_discovery import ViewDiscovery


@pytest.fixture
def discovery():
    return ViewDiscovery()


class TestValidateView:
    """Test view validation."""

    def test_plain_select_is_valid(self, discovery):
        view = ViewInfo(name="active_users", definition="SELECT * FROM users WHERE active = 1")

        result = discovery.validate_view(view)

        assert result.is_valid is True
        assert result.issues == []

    def test_missing_name_and_definition(self, discovery):
        """Test both missing fields are reported."""
        result = discovery.validate_view(ViewInfo(name="", definition="   "))

        assert result.is_valid is False
        assert result.issues == ["View name is required", "View definition is required"]

    @pytest.mark.parametrize("definition", [
        "SELECT 1; DROP TABLE users",
        "SELECT 1; delete from users",
        "SELECT 1; UPDATE users SET name = 'x'",
        "SELECT 1; INSERT INTO users VALUES (1)",
        "SELECT 1; TRUNCATE users",
        "SELECT 1; ALTER TABLE users ADD x INT",
    ])
    def test_dangerous_statements(self, discovery, definition):
        """Test DDL/DML inside a view body is flagged."""
        result = discovery.validate_view(ViewInfo(name="v", definition=definition))

        assert result.is_valid is False
        assert len(result.issues) == 1
        assert result.issues[0].startswith("View definition contains potentially dangerous SQL: ")

    def test_update_in_column_name_is_not_flagged(self, discovery):
        """Test a column named like a keyword does not trip the UPDATE check."""
        view = ViewInfo(name="v", definition="SELECT last_update, settings FROM jobs")

        assert discovery.validate_view(view).is_valid is True


class TestViewDependencies:
    """Test FROM/JOIN reference extraction."""

    def test_from_and_join(self, discovery):
        """Test referenced tables are listed once in order of appearance."""
        view = ViewInfo(
            name="post_summary",
            definition=(
                "SELECT p.id, u.email FROM posts p "
                "JOIN users u ON u.id = p.user_id "
                "LEFT JOIN posts p2 ON p2.id = p.id"
            ),
        )

        assert discovery.analyze_view_dependencies([view]) == {"post_summary": ["posts", "users"]}

    def test_quoted_and_qualified_names(self, discovery):
        """Test schema prefixes and identifier quotes are stripped."""
        view = ViewInfo(name="v", definition='SELECT * FROM "sales"."orders" JOIN public.customers c ON true')

        assert discovery.analyze_view_dependencies([view]) == {"v": ["orders", "customers"]}

    def test_views_without_definition_skipped(self, discovery):
        views = [ViewInfo(name="empty"), ViewInfo(name="v", definition="select * from tags")]

        assert discovery.analyze_view_dependencies(views) == {"v": ["tags"]}
