"""Tests for the catalog command line."""

import pytest
from click.testing import CliRunner

from catalog.application.product_service import ProductService
from catalog.domain.exceptions import StorageError
from catalog.domain.model.product import Product, to_float32
from catalog.infrastructure import bootstrap
from catalog.infrastructure.cli import product_commands
from catalog.infrastructure.cli.main import cli
from catalog.infrastructure.rpc.translator import domain_to_wire, wire_to_domain
from catalog.infrastructure.settings import REQUIRED_KEYS
from tests.fakes import FakeProductRepository


@pytest.fixture()
def repo(monkeypatch):
    repo = FakeProductRepository(
        [
            Product(id=1, name="Widget", sku="wdg-1", price=15.0),
            Product(id=2, name="Gadget", sku="gdg-1", price=25.0),
        ]
    )
    monkeypatch.setattr(
        product_commands, "admin_service", lambda: ProductService(product_repo=repo)
    )
    return repo


@pytest.fixture()
def runner():
    return CliRunner()


class TestProductCommands:

    def test_list(self, runner, repo):
        result = runner.invoke(cli, ["product", "list"])

        assert result.exit_code == 0
        assert "Widget" in result.output
        assert "gdg-1" in result.output

    def test_list_empty(self, runner, monkeypatch):
        monkeypatch.setattr(
            product_commands,
            "admin_service",
            lambda: ProductService(product_repo=FakeProductRepository()),
        )

        result = runner.invoke(cli, ["product", "list"])

        assert result.exit_code == 0
        assert "No products found." in result.output

    def test_add(self, runner, repo):
        result = runner.invoke(
            cli, ["product", "add", "--name", "Lamp", "--sku", "lmp-1", "--price", "40"]
        )

        assert result.exit_code == 0
        assert "Product #3 'Lamp' added at 40.00" in result.output
        assert repo.find_one(3).sku == "lmp-1"

    def test_add_stores_price_as_served_over_rpc(self, runner, repo):
        result = runner.invoke(
            cli, ["product", "add", "--name", "Lamp", "--sku", "lmp-1", "--price", "15.99"]
        )

        assert result.exit_code == 0
        stored = repo.find_one(3)
        assert stored.price == to_float32(15.99)
        assert wire_to_domain(domain_to_wire(stored)).same_details(stored)

    def test_show(self, runner, repo):
        result = runner.invoke(cli, ["product", "show", "--id", "2"])

        assert result.exit_code == 0
        assert "Gadget" in result.output
        assert "25.00" in result.output

    def test_show_missing(self, runner, repo):
        result = runner.invoke(cli, ["product", "show", "--id", "9"])

        assert result.exit_code == 1
        assert "failed to get a product 9: record not found" in result.output

    def test_update_changes_only_given_fields(self, runner, repo):
        result = runner.invoke(cli, ["product", "update", "--id", "1", "--price", "19.5"])

        assert result.exit_code == 0
        updated = repo.find_one(1)
        assert updated.price == 19.5
        assert updated.name == "Widget"

    def test_delete(self, runner, repo):
        result = runner.invoke(cli, ["product", "delete", "--id", "1"])

        assert result.exit_code == 0
        assert [p.id for p in repo.find_all()] == [2]

    def test_unreachable_database(self, runner, monkeypatch):
        def unreachable():
            raise StorageError("failed to connect to database: connection refused")

        monkeypatch.setattr(product_commands, "admin_service", unreachable)

        result = runner.invoke(cli, ["product", "list"])

        assert result.exit_code == 1
        assert "failed to connect to database" in result.output


class TestServerCommands:

    def test_serve_without_configuration_fails(self, runner, monkeypatch):
        for key in REQUIRED_KEYS:
            monkeypatch.delenv(key, raising=False)

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["serve"])

        assert result.exit_code == 1
        assert "missing required environment variables" in result.output

    def test_serve_passes_port_override(self, runner, monkeypatch):
        seen = {}
        monkeypatch.setattr(bootstrap, "serve", lambda port=None: seen.update(port=port))

        result = runner.invoke(cli, ["serve", "--port", "6001"])

        assert result.exit_code == 0
        assert seen == {"port": 6001}

    def test_serve_reports_connection_failure(self, runner, monkeypatch):
        def failing_serve(port=None):
            raise StorageError("failed to connect to database: timed out")

        monkeypatch.setattr(bootstrap, "serve", failing_serve)

        result = runner.invoke(cli, ["serve"])

        assert result.exit_code == 1
        assert "failed to connect to database: timed out" in result.output
