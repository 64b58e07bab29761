"""Tests for the schemalens command line."""

import json
import sqlite3
from unittest.mock import patch

from typer.testing import CliRunner

from schemalens.discovery.factory import DiscoveryFactory
from schemalens.discovery.relationship import RelationshipDiscovery
from schemalens.main import app

runner = CliRunner()


def parse_json(output):
    """Decode the JSON document in output, ignoring surrounding log lines."""
    document, _ = json.JSONDecoder().raw_decode(output[output.index("{"):])
    return document


class TestInspectCommand:
    """Test the inspect command."""

    def test_inspect_sqlite_file(self, blog_db_path):
        """Test tables and relationships are printed."""
        result = runner.invoke(app, ["inspect", str(blog_db_path), "--dialect", "sqlite"])

        assert result.exit_code == 0
        assert "users" in result.output
        assert "Relationships" in result.output

    def test_inspect_detail(self, blog_db_path):
        """Test --detail prints per-table columns."""
        result = runner.invoke(app, ["inspect", str(blog_db_path), "-d", "sqlite", "--detail"])

        assert result.exit_code == 0
        assert "users columns" in result.output

    def test_inspect_json(self, blog_db_path):
        """Test --json prints the schema and report."""
        result = runner.invoke(app, ["inspect", str(blog_db_path), "-d", "sqlite", "--json", "--views"])

        assert result.exit_code == 0
        payload = parse_json(result.output)
        assert [t["name"] for t in payload["tables"]] == ["audit_log", "post_tags", "posts", "tags", "users"]
        assert len(payload["relationships"]) == 6
        assert [v["name"] for v in payload["views"]] == ["published_posts"]
        assert payload["report"]["dialect"] == "sqlite"
        assert payload["report"]["foreign_keys_enforced"] is False
        assert payload["report"]["degraded_tables"] == []

    def test_inspect_exclude(self, blog_db_path):
        """Test --exclude patterns drop matching tables."""
        result = runner.invoke(app, ["inspect", str(blog_db_path), "-d", "sqlite", "--json", "-x", "post*"])

        payload = parse_json(result.output)
        assert [t["name"] for t in payload["tables"]] == ["audit_log", "tags", "users"]

    def test_inspect_many_to_many(self, blog_db_path):
        result = runner.invoke(app, ["inspect", str(blog_db_path), "-d", "sqlite", "--json", "--many-to-many"])

        payload = parse_json(result.output)
        assert [r["type"] for r in payload["relationships"]].count("many-to-many") == 2

    def test_unimplemented_dialect(self, blog_db_path):
        """Test an unimplemented engine fails before connecting."""
        result = runner.invoke(app, ["inspect", str(blog_db_path), "--dialect", "mysql"])

        assert result.exit_code == 1
        assert "MySQL discovery coordinator not yet implemented" in result.output

    def test_unsupported_dialect(self, blog_db_path):
        result = runner.invoke(app, ["inspect", str(blog_db_path), "--dialect", "oracle"])

        assert result.exit_code == 1
        assert "Unsupported dialect for discovery coordinator: oracle" in result.output

    def test_missing_database(self, tmp_path):
        """Test a missing SQLite file is an error, not a new empty database."""
        missing = tmp_path / "missing.db"

        result = runner.invoke(app, ["inspect", str(missing), "-d", "sqlite"])

        assert result.exit_code == 1
        assert "not found" in result.output
        assert not missing.exists()

    def test_circular_references_reported(self, tmp_path):
        """Test foreign key cycles are listed after the tables."""
        path = tmp_path / "cycle.db"
        connection = sqlite3.connect(str(path))
        connection.executescript(
            "CREATE TABLE a (id INTEGER PRIMARY KEY, b_id INTEGER REFERENCES b(id));"
            "CREATE TABLE b (id INTEGER PRIMARY KEY, a_id INTEGER REFERENCES a(id));"
        )
        connection.close()

        result = runner.invoke(app, ["inspect", str(path), "-d", "sqlite"])

        assert result.exit_code == 0
        assert "Circular references" in result.output
        assert "a -> b -> a" in result.output

    def test_report_uses_factory_relationship_service(self, blog_db_path):
        """Test cycle detection runs on the factory's shared relationship service."""
        created = []

        class RecordingFactory(DiscoveryFactory):
            def __init__(self):
                super().__init__()
                created.append(self)

        with patch("schemalens.main.DiscoveryFactory", RecordingFactory), patch.object(
            RelationshipDiscovery, "detect_circular_references", autospec=True, return_value=[]
        ) as detect:
            result = runner.invoke(app, ["inspect", str(blog_db_path), "-d", "sqlite"])

        assert result.exit_code == 0
        detect.assert_called_once()
        assert detect.call_args[0][0] is created[0].relationship_discovery


class TestOtherCommands:
    """Test capabilities and config."""

    def test_capabilities(self):
        result = runner.invoke(app, ["capabilities", "postgres"])

        assert result.exit_code == 0
        assert "supports_deferred_constraints" in result.output
        assert result.output.count("yes") == 6

    def test_capabilities_unknown_dialect(self):
        """Test unknown dialects report nothing as supported."""
        result = runner.invoke(app, ["capabilities", "oracle"])

        assert result.exit_code == 0
        assert "not available" in result.output

    def test_config(self):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Default Dialect:" in result.output
        assert "Supported Dialects: sqlite, postgresql" in result.output
