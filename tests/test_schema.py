"""Tests for the schema compiler."""

import logging

import pytest

from roadschema.blueprint import ColumnSpec, SpecKind
from roadschema.errors import ExecutionFailure

TABLE_OPTIONS = "ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci"


def define_books(table):
    table.increments()
    table.string("title", 255)


class TestCreate:
    """Tests for Schema.create()."""

    def test_creates_missing_table(self, schema, executor):
        assert schema.create("books", define_books) is True
        assert executor.statements == [
            "CREATE TABLE `wp_books` (\n"
            "`id` INT UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY,\n"
            "`title` VARCHAR(255) NOT NULL\n"
            f") {TABLE_OPTIONS}"
        ]
        assert schema.has_table("books")

    def test_existing_table_is_left_alone(self, schema, executor):
        executor.tables.add("wp_books")
        called = []
        assert schema.create("books", called.append) is False
        assert executor.statements == []
        assert called == []

    def test_fragments_in_declaration_order(self, schema, executor):
        def define(table):
            table.increments()
            table.foreign_id("author_id").references("id").on("authors").on_delete("cascade")
            table.string("title")
            table.string("slug").unique()
            table.timestamps()

        schema.create("books", define)
        body = executor.statements[0].split("\n")[1:-1]
        assert body == [
            "`id` INT UNSIGNED NOT NULL AUTO_INCREMENT PRIMARY KEY,",
            "`author_id` INT UNSIGNED NOT NULL,",
            "`title` VARCHAR(191) NOT NULL,",
            "`slug` VARCHAR(191) NOT NULL,",
            "UNIQUE KEY `wp_books_slug_unique` (`slug`),",
            "`created_at` DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,",
            "`updated_at` DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,",
            "CONSTRAINT `wp_books_author_id_fk` FOREIGN KEY (`author_id`) "
            "REFERENCES `wp_authors` (`id`) ON DELETE CASCADE",
        ]

    def test_create_ignores_alteration_specs(self, schema, executor):
        def define(table):
            table.increments()
            table.drop_column("legacy")

        schema.create("books", define)
        assert "DROP" not in executor.statements[0]

    def test_empty_blueprint_executes_nothing(self, schema, executor):
        assert schema.create("books", lambda table: None) is False
        assert executor.statements == []

    def test_custom_table_options(self, executor, config):
        from roadschema.schema import Schema

        config.engine = "MyISAM"
        config.charset = "latin1"
        config.collation = "latin1_swedish_ci"
        Schema(executor, config).create("books", define_books)
        assert executor.statements[0].endswith(
            ") ENGINE=MyISAM DEFAULT CHARSET=latin1 COLLATE=latin1_swedish_ci"
        )

    def test_executor_errors_propagate(self, schema, executor):
        executor.fail_on = "CREATE TABLE"
        with pytest.raises(ExecutionFailure) as info:
            schema.create("books", define_books)
        assert info.value.statement.startswith("CREATE TABLE `wp_books`")


class TestAlter:
    """Tests for Schema.alter()."""

    @pytest.fixture(autouse=True)
    def books(self, executor):
        executor.tables.add("wp_books")

    def test_missing_table_is_left_alone(self, schema, executor):
        called = []
        assert schema.alter("authors", called.append) == 0
        assert executor.statements == []
        assert called == []

    def test_rename_then_modify_uses_new_name(self, schema, executor):
        def change(table):
            table.rename_column("old", "new")
            table.modify_column("new")
            table.string("new", 100).nullable()

        assert schema.alter("books", change) == 2
        assert executor.statements == [
            "ALTER TABLE `wp_books` RENAME COLUMN `old` TO `new`",
            "ALTER TABLE `wp_books` MODIFY COLUMN `new` VARCHAR(100) NULL",
        ]

    def test_statements_per_spec_kind(self, schema, executor):
        def change(table):
            table.char("isbn", 13).after("title").index()
            table.drop_column("legacy")
            table.drop_index("wp_books_old_index")

        schema.alter("books", change)
        assert executor.statements == [
            "ALTER TABLE `wp_books` ADD COLUMN `isbn` CHAR(13) NOT NULL AFTER `title`",
            "ALTER TABLE `wp_books` ADD KEY `wp_books_isbn_index` (`isbn`)",
            "ALTER TABLE `wp_books` DROP COLUMN `legacy`",
            "ALTER TABLE `wp_books` DROP INDEX `wp_books_old_index`",
        ]

    def test_foreign_keys_are_added_last(self, schema, executor):
        def change(table):
            table.foreign_id("author_id").references("id").on("authors").on_delete("cascade")
            table.string("subtitle").nullable()

        schema.alter("books", change)
        assert executor.statements == [
            "ALTER TABLE `wp_books` ADD COLUMN `author_id` INT UNSIGNED NOT NULL",
            "ALTER TABLE `wp_books` ADD COLUMN `subtitle` VARCHAR(191) NULL",
            "ALTER TABLE `wp_books` ADD CONSTRAINT `wp_books_author_id_fk` FOREIGN KEY (`author_id`) "
            "REFERENCES `wp_authors` (`id`) ON DELETE CASCADE",
        ]

    def test_unknown_spec_kind_is_skipped(self, schema, executor, caplog):
        def change(table):
            odd = ColumnSpec(SpecKind.ADD, text="whatever")
            odd.kind = "bogus"
            table.specs.append(odd)
            table.drop_column("legacy")

        with caplog.at_level(logging.WARNING, logger="roadschema.schema"):
            assert schema.alter("books", change) == 1
        assert executor.statements == ["ALTER TABLE `wp_books` DROP COLUMN `legacy`"]
        assert "Skipping unsupported spec" in caplog.text

    def test_failure_stops_remaining_statements(self, schema, executor):
        executor.fail_on = "DROP COLUMN"

        def change(table):
            table.drop_column("legacy")
            table.string("extra")

        with pytest.raises(ExecutionFailure):
            schema.alter("books", change)
        assert len(executor.statements) == 1


class TestDrop:
    """Tests for Schema.drop()."""

    def test_drop(self, schema, executor):
        executor.tables.add("wp_books")
        schema.drop("books")
        assert executor.statements == ["DROP TABLE IF EXISTS `wp_books`"]
        assert not schema.has_table("books")

    def test_table_name_applies_prefix(self, schema):
        assert schema.table_name("books") == "wp_books"
        assert schema.blueprint("books").table == "wp_books"
