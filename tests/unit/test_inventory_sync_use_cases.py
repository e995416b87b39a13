"""
Tests de import/export CSV <-> tabla sobre SQLite.

Cubren las propiedades del contrato de transferencia: round trip,
defaults, unicidad, import destructivo, comillas y archivo vacío.
"""
from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import update

from inventory_sync.application.services.record_mapper import header_row
from inventory_sync.application.use_cases.inventory_sync_use_cases import (
    ImportStrategy,
    InventorySyncUseCases,
    TransferMode,
    TransferRequest,
    run_transfer,
)
from inventory_sync.core.config import Settings
from inventory_sync.infrastructure.database.models import InventoryModel
from inventory_sync.infrastructure.database.session import StorageCredentials
from inventory_sync.infrastructure.repositories.inventory_repository import InventoryRepository
from inventory_sync.shared.exceptions.sync import (
    CsvParseException,
    FileAccessException,
    StorageConnectionException,
    StorageException,
)


@pytest.fixture(params=[ImportStrategy.RESET, ImportStrategy.SWAP])
def use_cases(request, repository: InventoryRepository) -> InventorySyncUseCases:
    """Ejecuta cada test con ambas estrategias de reemplazo."""
    return InventorySyncUseCases(repository, strategy=request.param, concurrency=4)


def _catalog(csv_line) -> list[str]:
    return [
        csv_line({
            "Item UUID": "a1",
            "Name": "Mug",
            "SKU (Do Not Edit)": "10001",
            "Discountable": "false",
            "Department": "Kitchen",
            "Supplier": 'Acme, "Inc."',
            "Price": "4.50",
            "Quantity": "12",
            "Cost": "2.10",
        }),
        csv_line({
            "Item UUID": "b2",
            "Name": "Tee",
            "SKU (Do Not Edit)": "10002",
            "Option1 Name (Do Not Edit)": "Size",
            "Option1 Value (Do Not Edit)": "L",
            "Price Type": "open",
            "Register Status": "inactive",
            "Quantity": "3",
        }),
        csv_line({"Name": "New item", "Quantity": ""}),
    ]


@pytest.mark.asyncio
async def test_import_writes_every_record(use_cases, repository, write_csv, csv_line) -> None:
    path = write_csv("catalog.csv", _catalog(csv_line))

    count = await use_cases.import_csv(path)

    assert count == 3
    records = await repository.read_all()
    mug = next(r for r in records if r.sku == "10001")
    assert mug.original_qty == "12"
    assert mug.updated_qty == 0
    assert mug.supplier == 'Acme, "Inc."'
    new_item = next(r for r in records if r.item_name == "New item")
    assert new_item.sku is None
    assert new_item.item_uuid is None


@pytest.mark.asyncio
async def test_empty_columns_get_defaults_on_import(use_cases, repository, write_csv, csv_line) -> None:
    path = write_csv("defaults.csv", [csv_line({"Name": "Mug", "Discountable": "", "Taxable": "", "Department": ""})])

    await use_cases.import_csv(path)

    [record] = await repository.read_all()
    assert record.discountable == "true"
    assert record.taxable == "true"
    assert record.department == "general"


@pytest.mark.asyncio
async def test_duplicate_sku_fails_with_storage_error(use_cases, write_csv, csv_line) -> None:
    path = write_csv("dup.csv", [
        csv_line({"Name": "Mug", "SKU (Do Not Edit)": "10001"}),
        csv_line({"Name": "Cup", "SKU (Do Not Edit)": "10001"}),
    ])

    with pytest.raises(StorageException) as exc:
        await use_cases.import_csv(path)

    assert "10001" in exc.value.message


@pytest.mark.asyncio
async def test_import_is_destructive(use_cases, repository, write_csv, csv_line) -> None:
    await use_cases.import_csv(write_csv("first.csv", _catalog(csv_line)))
    second = write_csv("second.csv", [
        csv_line({"Name": "Lamp", "SKU (Do Not Edit)": "10001"}),
        csv_line({"Name": "Rug"}),
    ])

    count = await use_cases.import_csv(second)

    assert count == 2
    assert sorted(r.item_name for r in await repository.read_all()) == ["Lamp", "Rug"]


@pytest.mark.asyncio
async def test_header_only_file_leaves_empty_table(use_cases, repository, write_csv, csv_line) -> None:
    await use_cases.import_csv(write_csv("first.csv", _catalog(csv_line)))

    count = await use_cases.import_csv(write_csv("empty.csv", []))

    assert count == 0
    assert await repository.count() == 0


@pytest.mark.asyncio
async def test_parse_error_does_not_touch_table(use_cases, repository, write_csv, csv_line, tmp_path) -> None:
    await use_cases.import_csv(write_csv("first.csv", _catalog(csv_line)))
    bad = tmp_path / "bad.csv"
    bad.write_text(",".join(header_row()) + '\n"unterminated,Mug\n', encoding="utf-8")

    with pytest.raises(CsvParseException):
        await use_cases.import_csv(bad)

    assert await repository.count() == 3


@pytest.mark.asyncio
async def test_missing_source_file_raises_io_error(use_cases, repository, tmp_path) -> None:
    with pytest.raises(FileAccessException):
        await use_cases.import_csv(tmp_path / "missing.csv")


@pytest.mark.asyncio
async def test_export_writes_header_and_updated_quantity(use_cases, engine, write_csv, csv_line, tmp_path) -> None:
    await use_cases.import_csv(write_csv("catalog.csv", [csv_line({"Name": "Mug", "Quantity": "12"})]))
    async with engine.begin() as conn:
        await conn.execute(update(InventoryModel.__table__).values(updatedQty=7))
    out = tmp_path / "out.csv"

    count = await use_cases.export_csv(out)

    assert count == 1
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(header_row())
    assert lines[1] == ",Mug,,,,true,,true,general,general,,,system,true,active,0,7,"


@pytest.mark.asyncio
async def test_export_does_not_mutate_table(use_cases, repository, write_csv, csv_line, tmp_path) -> None:
    await use_cases.import_csv(write_csv("catalog.csv", _catalog(csv_line)))
    before = await repository.read_all()

    await use_cases.export_csv(tmp_path / "out.csv")

    assert await repository.read_all() == before


@pytest.mark.asyncio
async def test_round_trip_moves_updated_qty_into_original_qty(use_cases, repository, engine, write_csv, csv_line, tmp_path) -> None:
    await use_cases.import_csv(write_csv("catalog.csv", _catalog(csv_line)))
    async with engine.begin() as conn:
        await conn.execute(update(InventoryModel.__table__).values(updatedQty=5))
    before = await repository.read_all()
    out = tmp_path / "round.csv"

    await use_cases.export_csv(out)
    await use_cases.import_csv(out)

    after = await repository.read_all()
    key = lambda r: r.item_name
    for old, new in zip(sorted(before, key=key), sorted(after, key=key)):
        assert new.original_qty == str(old.updated_qty)
        assert new.updated_qty == 0
        assert {**new.to_dict(), "original_qty": None, "updated_qty": None} == {
            **old.to_dict(),
            "original_qty": None,
            "updated_qty": None,
        }


@pytest.mark.asyncio
async def test_quoted_fields_round_trip_byte_for_byte(use_cases, write_csv, csv_line, tmp_path) -> None:
    await use_cases.import_csv(write_csv("catalog.csv", _catalog(csv_line)))
    first = tmp_path / "first.csv"
    second = tmp_path / "second.csv"

    await use_cases.export_csv(first)
    await use_cases.import_csv(first)
    await use_cases.export_csv(second)

    assert 'Acme, ""Inc."""' in first.read_text(encoding="utf-8")
    assert first.read_bytes() == second.read_bytes()


@pytest.mark.asyncio
async def test_export_to_unwritable_destination_raises_io_error(use_cases, write_csv, csv_line, tmp_path) -> None:
    await use_cases.import_csv(write_csv("catalog.csv", _catalog(csv_line)))
    with pytest.raises(FileAccessException):
        await use_cases.export_csv(tmp_path / "missing-dir" / "out.csv")


@pytest.mark.asyncio
async def test_reset_strategy_leaves_partial_table_on_failure(repository, write_csv, csv_line) -> None:
    use_cases = InventorySyncUseCases(repository, strategy=ImportStrategy.RESET, concurrency=1)
    path = write_csv("dup.csv", [
        csv_line({"Name": "Mug", "SKU (Do Not Edit)": "10001"}),
        csv_line({"Name": "Cup", "SKU (Do Not Edit)": "10001"}),
        csv_line({"Name": "Rug", "SKU (Do Not Edit)": "10003"}),
    ])

    with pytest.raises(StorageException):
        await use_cases.import_csv(path)

    assert await repository.count() == 2


@pytest.mark.asyncio
async def test_swap_strategy_keeps_previous_table_on_failure(repository, write_csv, csv_line) -> None:
    use_cases = InventorySyncUseCases(repository, strategy=ImportStrategy.SWAP)
    await use_cases.import_csv(write_csv("first.csv", _catalog(csv_line)))
    path = write_csv("dup.csv", [
        csv_line({"Name": "Mug", "SKU (Do Not Edit)": "20001"}),
        csv_line({"Name": "Cup", "SKU (Do Not Edit)": "20001"}),
    ])

    with pytest.raises(StorageException):
        await use_cases.import_csv(path)

    assert sorted(r.item_name for r in await repository.read_all()) == ["Mug", "New item", "Tee"]


@pytest.mark.asyncio
async def test_run_transfer_imports_and_exports(sqlite_credentials, write_csv, csv_line, tmp_path: Path) -> None:
    config = Settings(IMPORT_STRATEGY="swap", IMPORT_CONCURRENCY=2)
    source = write_csv("catalog.csv", _catalog(csv_line))
    out = tmp_path / "export.csv"

    imported = await run_transfer(TransferRequest(TransferMode.IMPORT, source), sqlite_credentials, config)
    exported = await run_transfer(TransferRequest(TransferMode.EXPORT, out), sqlite_credentials, config)

    assert imported == exported == 3
    assert out.read_text(encoding="utf-8").count("\n") == 4


@pytest.mark.asyncio
async def test_run_transfer_aborts_when_connection_fails(write_csv, csv_line, tmp_path: Path) -> None:
    credentials = StorageCredentials(
        username="",
        password="",
        url=f"sqlite+aiosqlite:///{tmp_path / 'no-such-dir' / 'inventory.db'}",
    )
    source = write_csv("catalog.csv", _catalog(csv_line))

    with pytest.raises(StorageConnectionException):
        await run_transfer(TransferRequest(TransferMode.IMPORT, source), credentials, Settings())
