"""Tests for categories."""

import pytest

from budgetbook.cli.main import cli
from budgetbook.domain.category import DEFAULT_CATEGORIES, get_default_category
from budgetbook.domain.entities import ItemKind
from budgetbook.domain.errors import NotFoundError, ValidationError


class TestCategoryService:
    def test_defaults_listed_first(self, category_service, owner):
        category_service.create_category(owner, "Pets", ItemKind.EXPENSE)

        categories = category_service.list_categories(owner)

        assert len(categories) == len(DEFAULT_CATEGORIES) + 1
        assert categories[0].id == "default-salary"
        assert categories[-1].name == "Pets"
        assert all(c.is_default for c in categories[:-1])

    def test_filter_by_kind(self, category_service, owner):
        income = category_service.list_categories(owner, kind=ItemKind.INCOME)
        assert [c.name for c in income] == ["Salary", "Investments", "Other"]

    def test_get_default_category(self, category_service, owner):
        assert category_service.get_category(owner, "default-food") == get_default_category("default-food")
        assert category_service.get_category(owner, "default-unknown") is None

    def test_require_missing_category(self, category_service, owner):
        with pytest.raises(NotFoundError, match="not found"):
            category_service.require_category(owner, "missing")

    def test_create_and_get(self, category_service, owner):
        category_id = category_service.create_category(owner, "  Pets  ", ItemKind.EXPENSE, color="#000000")
        category = category_service.get_category(owner, category_id)
        assert category.name == "Pets"
        assert category.color == "#000000"

    def test_duplicate_name_rejected_case_insensitive(self, category_service, owner):
        category_service.create_category(owner, "Pets", ItemKind.EXPENSE)
        with pytest.raises(ValidationError, match="already exists"):
            category_service.create_category(owner, "pets", ItemKind.EXPENSE)

    def test_same_name_allowed_for_other_kind(self, category_service, owner):
        category_service.create_category(owner, "Side job", ItemKind.EXPENSE)
        category_service.create_category(owner, "Side job", ItemKind.INCOME)

    @pytest.mark.parametrize("name", ["", "   ", "x" * 51])
    def test_invalid_name(self, category_service, owner, name):
        with pytest.raises(ValidationError):
            category_service.create_category(owner, name, ItemKind.EXPENSE)


class TestCategoryCommands:
    def test_list_categories(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "list", "--kind", "income"])

        assert result.exit_code == 0
        assert "Salary" in result.output
        assert "Housing" not in result.output

    def test_create_category(self, cli_runner, temp_db, category_service, owner):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "--user", "alice", "category", "create", "Pets", "--kind", "expense"],
        )

        assert result.exit_code == 0
        assert "Created category 'Pets'" in result.output
        assert category_service.list_categories(owner)[-1].name == "Pets"

    def test_create_duplicate_category(self, cli_runner, temp_db):
        args = ["--db-path", temp_db.database_path, "category", "create", "Pets", "--kind", "expense"]
        cli_runner.invoke(cli, args)
        result = cli_runner.invoke(cli, args)

        assert result.exit_code == 1
        assert "already exists" in result.output
