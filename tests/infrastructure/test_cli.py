"""End-to-end tests of the command line against a temporary data directory."""

import pytest
from click.testing import CliRunner

from shopcart.infrastructure import bootstrap
from shopcart.infrastructure.cli import main
from shopcart.infrastructure.cli.main import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setattr(bootstrap, "_DATA_DIR", tmp_path)
    monkeypatch.setattr(main, "configure_logging", lambda: None)
    runner = CliRunner()
    result = runner.invoke(cli, ["product", "add", "--name", "Widget", "--price", "15.00"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(
        cli,
        ["product", "add", "--name", "Shirt", "--price", "20.00", "--variation", "Small:18.00"],
    )
    assert result.exit_code == 0, result.output
    return runner


class TestCartCli:

    def test_add_show_and_place(self, runner):
        result = runner.invoke(cli, ["cart", "add", "--product", "1", "--quantity", "2"])
        assert result.exit_code == 0, result.output
        assert "Item has been added successfully." in result.output

        runner.invoke(cli, ["cart", "add", "--product", "2"])
        result = runner.invoke(cli, ["cart", "show"])
        assert "Widget" in result.output
        assert "Shirt (Small)" in result.output
        assert "$48.00" in result.output

        result = runner.invoke(cli, ["cart", "place"])
        assert result.exit_code == 0, result.output
        assert "Order #1 placed" in result.output

        result = runner.invoke(cli, ["cart", "history"])
        assert "Order #1" in result.output
        result = runner.invoke(cli, ["cart", "show"])
        assert "Cart has not been created yet" in result.output

    def test_sessions_are_separate(self, runner):
        runner.invoke(cli, ["cart", "--session", "a", "add", "--product", "1"])
        result = runner.invoke(cli, ["cart", "--session", "b", "show"])
        assert "Cart has not been created yet" in result.output

    def test_failure_exits_non_zero(self, runner):
        result = runner.invoke(cli, ["cart", "remove", "--product", "1"])
        assert result.exit_code == 1
        assert "No current order." in result.output

    def test_unknown_product(self, runner):
        result = runner.invoke(cli, ["cart", "add", "--product", "99"])
        assert result.exit_code == 1
        assert "Product not found." in result.output

    def test_set_quantity_and_options(self, runner):
        runner.invoke(cli, ["cart", "add", "--product", "1", "--option", "color=red"])
        result = runner.invoke(
            cli, ["cart", "set-quantity", "--product", "1", "--quantity", "4", "--option", "color=red"]
        )
        assert result.exit_code == 0, result.output
        result = runner.invoke(cli, ["cart", "show"])
        assert "Widget [color=red]" in result.output
        assert "$60.00" in result.output

    def test_bad_option_format(self, runner):
        result = runner.invoke(cli, ["cart", "add", "--product", "1", "--option", "red"])
        assert result.exit_code == 2
