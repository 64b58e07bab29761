"""Shared pytest fixtures for schemalens tests."""

import sqlite3

import pytest

from schemalens.database.executor import SQLiteExecutor
from schemalens.discovery.factory import DiscoveryFactory
from tests.fixtures import FakeExecutor


BLOG_SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email VARCHAR(255) NOT NULL UNIQUE,
    name TEXT,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE posts (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    title TEXT NOT NULL,
    price DECIMAL(10,2),
    status TEXT CHECK (status IN ('draft', 'published')),
    CONSTRAINT positive_price CHECK (price >= 0)
);

CREATE INDEX idx_posts_user ON posts(user_id);

CREATE TABLE tags (
    id INTEGER PRIMARY KEY,
    label TEXT NOT NULL
);

CREATE TABLE post_tags (
    post_id INTEGER NOT NULL REFERENCES posts(id),
    tag_id INTEGER NOT NULL REFERENCES tags(id),
    PRIMARY KEY (post_id, tag_id)
);

CREATE TABLE audit_log (
    id INTEGER PRIMARY KEY,
    message TEXT
);

CREATE VIEW published_posts AS
    SELECT p.id, p.title, u.email
    FROM posts p
    JOIN users u ON u.id = p.user_id
    WHERE p.status = 'published';
"""


@pytest.fixture
def blog_connection():
    """In-memory blog database with foreign keys enabled."""
    connection = sqlite3.connect(":memory:", check_same_thread=False)
    connection.execute("PRAGMA foreign_keys = ON")
    connection.executescript(BLOG_SCHEMA)
    yield connection
    connection.close()


@pytest.fixture
def blog_executor(blog_connection):
    """SQLiteExecutor wrapping the blog database."""
    return SQLiteExecutor(connection=blog_connection)


@pytest.fixture
def blog_db_path(tmp_path):
    """Blog database written to a file, for CLI tests."""
    path = tmp_path / "blog.db"
    connection = sqlite3.connect(str(path))
    connection.executescript(BLOG_SCHEMA)
    connection.close()
    return path


@pytest.fixture
def factory():
    """A fresh DiscoveryFactory for each test."""
    return DiscoveryFactory()


@pytest.fixture
def shop_executor():
    """FakeExecutor answering PostgreSQL catalog queries for a small shop schema.

    customers(id PK, email) <- orders(id PK, customer_id, total CHECK)
    order_lines(order_id, line_no) with a composite FK to shipments
    """
    executor = FakeExecutor()
    executor.add_response(r"relkind = ANY", [
        {"name": "customers", "schema": "public", "kind": "r"},
        {"name": "orders", "schema": "public", "kind": "r"},
        {"name": "order_lines", "schema": "public", "kind": "r"},
        {"name": "shipments", "schema": "public", "kind": "r"},
    ])

    def column(name, udt, nullable="NO", default=None, identity="NO", length=None, precision=None, scale=None):
        return {
            "column_name": name,
            "udt_name": udt,
            "is_nullable": nullable,
            "column_default": default,
            "is_identity": identity,
            "character_maximum_length": length,
            "numeric_precision": precision,
            "numeric_scale": scale,
        }

    executor.add_response(r"information_schema\.columns", [
        column("id", "int4", default="nextval('customers_id_seq'::regclass)", precision=32, scale=0),
        column("email", "varchar", length=320),
        column("profile", "jsonb", nullable="YES"),
    ], table="customers")
    executor.add_response(r"information_schema\.columns", [
        column("id", "int8", identity="YES", precision=64, scale=0),
        column("customer_id", "int4", precision=32, scale=0),
        column("total", "numeric", precision=12, scale=2),
        column("placed_at", "timestamptz"),
    ], table="orders")
    executor.add_response(r"information_schema\.columns", [
        column("order_id", "int8", precision=64, scale=0),
        column("line_no", "int4", precision=32, scale=0),
        column("shipment_order_id", "int8", nullable="YES", precision=64, scale=0),
        column("shipment_no", "int4", nullable="YES", precision=32, scale=0),
    ], table="order_lines")
    executor.add_response(r"information_schema\.columns", [
        column("order_id", "int8", precision=64, scale=0),
        column("shipment_no", "int4", precision=32, scale=0),
    ], table="shipments")

    executor.add_response(r"contype = 'p'", [{"column_name": "id"}], table="customers")
    executor.add_response(r"contype = 'p'", [{"column_name": "id"}], table="orders")
    executor.add_response(r"contype = 'p'", [
        {"column_name": "order_id"}, {"column_name": "line_no"},
    ], table="order_lines")
    executor.add_response(r"contype = 'p'", [
        {"column_name": "order_id"}, {"column_name": "shipment_no"},
    ], table="shipments")

    executor.add_response(r"pg_catalog\.pg_index i", [
        {
            "name": "customers_pkey", "is_unique": True, "is_primary": True, "is_valid": True,
            "columns": ["id"], "definition": "CREATE UNIQUE INDEX customers_pkey ON public.customers USING btree (id)",
            "comment": None,
        },
        {
            "name": "customers_email_key", "is_unique": True, "is_primary": False, "is_valid": True,
            "columns": ["email"], "definition": "CREATE UNIQUE INDEX customers_email_key ON public.customers USING btree (email)",
            "comment": "login lookup",
        },
    ], table="customers")
    executor.add_response(r"pg_catalog\.pg_index i", [
        {
            "name": "orders_customer_idx", "is_unique": False, "is_primary": False, "is_valid": False,
            "columns": ["customer_id", "placed_at"], "definition": None, "comment": None,
        },
    ], table="orders")

    executor.add_response(r"contype = 'f'", [
        {
            "name": "orders_customer_id_fkey", "column_name": "customer_id",
            "referenced_table": "customers", "referenced_column": "id",
            "delete_action": "c", "update_action": "a", "deferrable": True, "deferred": False,
        },
    ], table="orders")
    executor.add_response(r"contype = 'f'", [
        {
            "name": "order_lines_shipment_fkey", "column_name": "shipment_order_id",
            "referenced_table": "shipments", "referenced_column": "order_id",
            "delete_action": "n", "update_action": "r", "deferrable": False, "deferred": False,
        },
        {
            "name": "order_lines_shipment_fkey", "column_name": "shipment_no",
            "referenced_table": "shipments", "referenced_column": "shipment_no",
            "delete_action": "n", "update_action": "r", "deferrable": False, "deferred": False,
        },
    ], table="order_lines")

    executor.add_response(r"contype = 'c'", [
        {
            "name": "orders_total_check", "definition": "CHECK ((total >= (0)::numeric))",
            "deferrable": False, "deferred": False, "comment": None,
        },
    ], table="orders")

    executor.add_response(r"pg_stat_user_indexes", [
        {"index_name": "customers_pkey", "scans": 120, "tuples_read": 130, "tuples_fetched": 120},
        {"index_name": "customers_email_key", "scans": 0, "tuples_read": 0, "tuples_fetched": 0},
    ], table="customers")

    executor.add_response(r"session_replication_role", [{"role": "origin"}])
    executor.add_response(r"pg_catalog\.pg_views", [
        {"name": "big_orders", "schema": "public", "definition": " SELECT orders.id FROM orders WHERE orders.total > 1000;"},
    ])
    return executor
