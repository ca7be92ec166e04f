"""Tests for CLI commands."""

import json
import re

import pytest

from kedai.cli.commands.sell import parse_item_spec
from kedai.cli.main import cli
from kedai.database.base import SALES
from kedai.domain.catalog import CatalogService
from kedai.domain.settings import SettingsService
from kedai.domain.snapshot import SnapshotService


def _invoke(cli_runner, temp_store, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_store.database_path, *args], **kwargs)


def _created_id(output):
    match = re.search(r"\(ID: ([^)]+)\)", output)
    assert match, output
    return match.group(1)


def test_help_does_not_need_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "product" in result.output
    assert "backup" in result.output


def test_init_seeds_once(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "init")
    assert result.exit_code == 0
    assert "Created default admin" in result.output
    assert "products." in result.output

    result = _invoke(cli_runner, temp_store, "init")
    assert result.exit_code == 0
    assert "default admin not created" in result.output
    assert "no products created" in result.output


def test_product_add_and_list(cli_runner, temp_store):
    result = _invoke(
        cli_runner, temp_store, "product", "add", "Mie SS Manis",
        "--price", "Rp 12.000", "--category", "Mie SS", "--stock", "30",
    )
    assert result.exit_code == 0
    assert "Created product 'Mie SS Manis'" in result.output
    product_id = _created_id(result.output)

    result = _invoke(cli_runner, temp_store, "product", "list")
    assert result.exit_code == 0
    assert product_id in result.output
    assert "Rp 12.000" in result.output


def test_product_add_invalid_price(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "product", "add", "X", "--price", "abc")

    assert result.exit_code == 1
    assert "Invalid price" in result.output


def test_product_add_zero_price(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "product", "add", "X", "--price", "0")

    assert result.exit_code == 1
    assert "greater than 0" in result.output


def test_product_edit_restock_delete(cli_runner, temp_store, mie):
    result = _invoke(cli_runner, temp_store, "product", "edit", mie.id, "--price", "13000")
    assert result.exit_code == 0
    assert CatalogService(temp_store).get_product(mie.id).price == 13000

    result = _invoke(cli_runner, temp_store, "product", "restock", mie.id, "5")
    assert result.exit_code == 0
    assert "New stock: 15" in result.output

    result = _invoke(cli_runner, temp_store, "product", "delete", mie.id, "--yes")
    assert result.exit_code == 0
    assert CatalogService(temp_store).get_product(mie.id) is None


def test_product_delete_missing(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "product", "delete", "p-missing", "--yes")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_product_categories(cli_runner, temp_store, mie, teh):
    result = _invoke(cli_runner, temp_store, "product", "categories")

    assert result.exit_code == 0
    assert result.output.split() == ["Mie", "SS", "Minuman"]


def test_product_csv_export_import(cli_runner, temp_store, tmp_path, mie):
    csv_file = tmp_path / "products.csv"
    result = _invoke(cli_runner, temp_store, "product", "export-csv", str(csv_file))
    assert result.exit_code == 0
    assert "Exported 1 products" in result.output

    csv_file.write_text(
        csv_file.read_text(encoding="utf-8") + "Camilan,Tahu Walik,6000,40,\n", encoding="utf-8"
    )
    result = _invoke(cli_runner, temp_store, "product", "import-csv", str(csv_file))
    assert result.exit_code == 0
    assert "Created: 1 products" in result.output
    assert "Updated: 1 products" in result.output


def test_sell(cli_runner, temp_store, mie, teh):
    result = _invoke(
        cli_runner, temp_store, "sell", f"{mie.id}:2", teh.id, "--paid", "30000"
    )

    assert result.exit_code == 0, result.output
    assert "Total: Rp 29.000" in result.output
    assert "Change: Rp 1.000" in result.output
    assert CatalogService(temp_store).get_product(mie.id).stock == 8
    assert len(temp_store.get_all(SALES)) == 1


def test_sell_digital_wallet(cli_runner, temp_store, teh):
    result = _invoke(
        cli_runner, temp_store, "sell", teh.id, "--method", "digital-wallet", "--reference", "QR-1"
    )

    assert result.exit_code == 0
    assert "Paid (digital-wallet): Rp 5.000" in result.output
    assert temp_store.get_all(SALES)[0].payment_reference == "QR-1"


def test_sell_beyond_stock(cli_runner, temp_store, teh):
    result = _invoke(cli_runner, temp_store, "sell", f"{teh.id}:5")

    assert result.exit_code == 1
    assert "Only 3 in stock" in result.output
    assert temp_store.get_all(SALES) == []


def test_sell_underpayment(cli_runner, temp_store, mie):
    result = _invoke(cli_runner, temp_store, "sell", mie.id, "--paid", "10000")

    assert result.exit_code == 1
    assert "less than total" in result.output
    assert CatalogService(temp_store).get_product(mie.id).stock == 10


def test_sell_unknown_product(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "sell", "p-missing")

    assert result.exit_code == 1
    assert "not found" in result.output


@pytest.mark.parametrize(
    "spec, expected",
    [("p-1", ("p-1", 1)), ("p-1:3", ("p-1", 3))],
)
def test_parse_item_spec(spec, expected):
    assert parse_item_spec(spec) == expected


@pytest.mark.parametrize("spec", ["p-1:0", "p-1:x"])
def test_parse_item_spec_invalid(spec):
    with pytest.raises(ValueError):
        parse_item_spec(spec)


def test_sales_list_and_export(cli_runner, temp_store, tmp_path, mie):
    result = _invoke(cli_runner, temp_store, "sales", "list")
    assert "No sales found" in result.output

    _invoke(cli_runner, temp_store, "sell", mie.id)

    result = _invoke(cli_runner, temp_store, "sales", "list", "--period", "today")
    assert result.exit_code == 0
    assert "1 sale(s), total Rp 12.000" in result.output

    csv_file = tmp_path / "sales.csv"
    result = _invoke(cli_runner, temp_store, "sales", "export", str(csv_file))
    assert result.exit_code == 0
    assert csv_file.read_text(encoding="utf-8").startswith("id,date,items,total")


def test_sales_list_rejects_period_with_dates(cli_runner, temp_store):
    result = _invoke(
        cli_runner, temp_store, "sales", "list", "--period", "today", "--start-date", "2024-01-01"
    )

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_backup_create_list_delete(cli_runner, temp_store, mie):
    result = _invoke(cli_runner, temp_store, "backup", "create", "--name", "closing")
    assert result.exit_code == 0
    backup_id = _created_id(result.output)

    result = _invoke(cli_runner, temp_store, "backup", "list")
    assert "closing" in result.output

    result = _invoke(cli_runner, temp_store, "backup", "delete", backup_id)
    assert result.exit_code == 0
    assert SnapshotService(temp_store).list_backups() == []


def test_backup_export_and_restore_file(cli_runner, temp_store, tmp_path, mie):
    snap_file = tmp_path / "snap.json"
    result = _invoke(cli_runner, temp_store, "backup", "export", str(snap_file))
    assert result.exit_code == 0
    assert json.loads(snap_file.read_text(encoding="utf-8"))["products"][0]["id"] == mie.id
    assert SnapshotService(temp_store).list_backups() == []

    CatalogService(temp_store).delete_product(mie.id)
    result = _invoke(cli_runner, temp_store, "backup", "restore", str(snap_file), "--yes")
    assert result.exit_code == 0
    assert CatalogService(temp_store).get_product(mie.id) is not None


def test_backup_restore_asks_for_confirmation(cli_runner, temp_store, tmp_path, mie):
    snap_file = tmp_path / "snap.json"
    snap_file.write_text('{"products": []}', encoding="utf-8")

    result = _invoke(cli_runner, temp_store, "backup", "restore", str(snap_file), input="n\n")

    assert "Restore cancelled" in result.output
    assert CatalogService(temp_store).get_product(mie.id) is not None


def test_backup_restore_invalid_file(cli_runner, temp_store, tmp_path, mie):
    snap_file = tmp_path / "snap.json"
    snap_file.write_text('{"sales": []}', encoding="utf-8")

    result = _invoke(cli_runner, temp_store, "backup", "restore", str(snap_file), "--yes")

    assert result.exit_code == 1
    assert "products" in result.output
    assert CatalogService(temp_store).get_product(mie.id) is not None


def test_backup_restore_backup(cli_runner, temp_store, mie):
    backup = SnapshotService(temp_store).create_backup()
    CatalogService(temp_store).delete_product(mie.id)

    result = _invoke(cli_runner, temp_store, "backup", "restore-backup", backup.id, "--yes")

    assert result.exit_code == 0
    assert CatalogService(temp_store).get_product(mie.id) is not None


def test_backup_auto_settings(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "backup", "auto")
    assert "Auto-backup: OFF (every 60 min)" in result.output

    result = _invoke(cli_runner, temp_store, "backup", "auto", "--enable", "--interval", "15")
    assert result.exit_code == 0
    assert "Auto-backup: ON (every 15 min)" in result.output
    assert SettingsService(temp_store).get_auto_backup_config().interval_minutes == 15

    result = _invoke(cli_runner, temp_store, "backup", "auto", "--interval", "0")
    assert result.exit_code == 1


def test_backup_watch_requires_enabled(cli_runner, temp_store):
    result = _invoke(cli_runner, temp_store, "backup", "watch")

    assert result.exit_code == 1
    assert "disabled" in result.output


def test_report(cli_runner, temp_store, mie, teh):
    _invoke(cli_runner, temp_store, "sell", mie.id)

    result = _invoke(cli_runner, temp_store, "report")

    assert result.exit_code == 0
    assert "Today: Rp 12.000 (1 sales)" in result.output
    assert "Low stock: 1 products" in result.output
    assert "Lemon Tea" in result.output


def test_user_verify_and_change_pin(cli_runner, temp_store):
    _invoke(cli_runner, temp_store, "init", "--no-products")

    result = _invoke(cli_runner, temp_store, "user", "verify", "admin", "--pin", "1234")
    assert result.exit_code == 0
    assert "Login OK" in result.output

    result = _invoke(cli_runner, temp_store, "user", "verify", "admin", "--pin", "0000")
    assert result.exit_code == 1

    result = _invoke(
        cli_runner, temp_store, "user", "change-pin", "admin", "--pin", "1234", "--new-pin", "9876"
    )
    assert result.exit_code == 0

    result = _invoke(cli_runner, temp_store, "user", "verify", "admin", input="9876\n")
    assert result.exit_code == 0
