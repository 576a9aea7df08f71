"""Inventory Service unit testleri."""

import logging
import threading
from unittest.mock import MagicMock

import pytest

from src.models.supply_chain import InventoryItem
from src.repositories.memory import InMemoryInventoryRepository
from src.services.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidArgumentError,
    InvalidQuantityError,
)
from src.services.inventory_service import InventoryService


def _create_service() -> InventoryService:
    return InventoryService(InMemoryInventoryRepository())


class TestAddStock:
    def test_first_addition_creates_record(self):
        service = _create_service()
        item = service.add_stock("P1", "WH001", 50)
        assert item.quantity == 50
        assert service.get_stock_level("P1", "WH001") == 50

    def test_additions_accumulate(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 50)
        service.add_stock("P1", "WH001", 25)
        assert service.get_stock_level("P1", "WH001") == 75

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amount_raises(self, amount):
        service = _create_service()
        with pytest.raises(InvalidQuantityError):
            service.add_stock("P1", "WH001", amount)

    @pytest.mark.parametrize("product_id, warehouse_id", [("", "WH001"), ("P1", "  "), (None, "WH001")])
    def test_blank_identifier_raises(self, product_id, warehouse_id):
        service = _create_service()
        with pytest.raises(InvalidArgumentError):
            service.add_stock(product_id, warehouse_id, 10)


class TestRemoveStock:
    def test_remove_decreases_quantity(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 50)
        item = service.remove_stock("P1", "WH001", 30)
        assert item.quantity == 20
        assert service.get_stock_level("P1", "WH001") == 20

    def test_remove_all_leaves_zero_record(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 10)
        service.remove_stock("P1", "WH001", 10)
        assert service.get_stock_level("P1", "WH001") == 0
        # Sıfır miktarlı kayıt hala mevcut: tekrar çıkarma NotFound değil InsufficientStock verir
        with pytest.raises(InsufficientStockError):
            service.remove_stock("P1", "WH001", 1)

    def test_never_stocked_pair_raises_not_found(self):
        service = _create_service()
        with pytest.raises(EntityNotFoundError):
            service.remove_stock("P1", "WH001", 1)

    def test_never_stocked_pair_is_not_found_even_for_large_amounts(self):
        service = _create_service()
        service.add_stock("P1", "WH002", 100)
        with pytest.raises(EntityNotFoundError) as exc:
            service.remove_stock("P1", "WH001", 1000)
        assert not isinstance(exc.value, InsufficientStockError)

    def test_insufficient_stock_reports_available_and_requested(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 10)
        with pytest.raises(InsufficientStockError) as exc:
            service.remove_stock("P1", "WH001", 20)
        assert exc.value.available == 10
        assert exc.value.requested == 20
        assert service.get_stock_level("P1", "WH001") == 10

    def test_zero_amount_raises_invalid_quantity(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 10)
        with pytest.raises(InvalidQuantityError):
            service.remove_stock("P1", "WH001", 0)

    def test_final_quantity_is_adds_minus_successful_removes(self):
        service = _create_service()
        operations = [("add", 40), ("remove", 15), ("remove", 50), ("add", 5), ("remove", 30)]
        expected = 0
        for op, amount in operations:
            if op == "add":
                service.add_stock("P1", "WH001", amount)
                expected += amount
            else:
                try:
                    service.remove_stock("P1", "WH001", amount)
                    expected -= amount
                except InsufficientStockError:
                    pass
            assert service.get_stock_level("P1", "WH001") >= 0
        assert service.get_stock_level("P1", "WH001") == expected == 0


class TestStockLevel:
    def test_unknown_pair_returns_zero(self):
        service = _create_service()
        assert service.get_stock_level("P1", "WH001") == 0

    def test_blank_identifier_still_validated(self):
        service = _create_service()
        with pytest.raises(InvalidArgumentError):
            service.get_stock_level("P1", "")

    def test_total_stock_across_warehouses(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 10)
        service.add_stock("P1", "WH002", 15)
        service.add_stock("P2", "WH001", 99)
        assert service.get_total_stock("P1") == 25


class TestTransferStock:
    def test_source_decreases_target_increases(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 100)
        service.add_stock("P1", "WH002", 50)

        source, target = service.transfer_stock("P1", "WH001", "WH002", 30)

        assert source.quantity == 70
        assert target.quantity == 80
        assert service.get_stock_level("P1", "WH001") == 70
        assert service.get_stock_level("P1", "WH002") == 80

    def test_total_is_conserved(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 100)
        total_before = service.get_total_stock("P1")
        service.transfer_stock("P1", "WH001", "WH003", 40)
        assert service.get_total_stock("P1") == total_before

    def test_same_warehouse_raises_regardless_of_stock(self):
        service = _create_service()
        with pytest.raises(InvalidArgumentError):
            service.transfer_stock("P1", "WH001", "WH001", 10)
        service.add_stock("P1", "WH001", 100)
        with pytest.raises(InvalidArgumentError):
            service.transfer_stock("P1", "WH001", "WH001", 10)
        assert service.get_stock_level("P1", "WH001") == 100

    def test_insufficient_source_changes_nothing(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 10)
        with pytest.raises(InsufficientStockError):
            service.transfer_stock("P1", "WH001", "WH002", 20)
        assert service.get_stock_level("P1", "WH001") == 10
        assert service.get_stock_level("P1", "WH002") == 0

    def test_unstocked_source_raises_not_found(self):
        service = _create_service()
        with pytest.raises(EntityNotFoundError):
            service.transfer_stock("P1", "WH001", "WH002", 5)

    def test_removal_happens_before_addition(self):
        repo = InMemoryInventoryRepository()
        repo.save(InventoryItem("P1", "WH001", 20))
        saved = []
        original_save = repo.save

        def recording_save(item):
            saved.append((item.warehouse_id, item.quantity))
            return original_save(item)

        repo.save = recording_save
        InventoryService(repo).transfer_stock("P1", "WH001", "WH002", 5)
        assert saved == [("WH001", 15), ("WH002", 5)]

    def test_failed_addition_restores_source(self):
        repo = InMemoryInventoryRepository()
        repo.save(InventoryItem("P1", "WH001", 20))
        original_save = repo.save

        def failing_save(item):
            if item.warehouse_id == "WH002":
                raise RuntimeError("depo yazma hatası")
            return original_save(item)

        repo.save = failing_save
        service = InventoryService(repo)

        with pytest.raises(RuntimeError):
            service.transfer_stock("P1", "WH001", "WH002", 5)

        assert service.get_stock_level("P1", "WH001") == 20
        assert service.get_stock_level("P1", "WH002") == 0
        operations = [e.operation_type for e in service.audit_log.get_audit_log()]
        assert operations == ["remove", "transfer_rollback"]

    def test_conserved_transfer_logs_no_error(self, caplog):
        service = _create_service()
        service.add_stock("P1", "WH001", 100)
        with caplog.at_level(logging.ERROR):
            service.transfer_stock("P1", "WH001", "WH002", 30)
        assert "tutarsızlık" not in caplog.text

    def test_lost_write_is_reported(self, caplog):
        repo = InMemoryInventoryRepository()
        repo.save(InventoryItem("P1", "WH001", 100))
        original_save = repo.save

        def dropping_save(item):
            if item.warehouse_id != "WH002":
                original_save(item)

        repo.save = dropping_save
        service = InventoryService(repo)

        with caplog.at_level(logging.ERROR):
            service.transfer_stock("P1", "WH001", "WH002", 30)

        assert "Transfer sonrası tutarsızlık" in caplog.text
        assert "önceki toplam=100, sonraki toplam=70" in caplog.text


class TestAuditTrail:
    def test_every_change_is_logged(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 50)
        service.remove_stock("P1", "WH001", 20)
        service.transfer_stock("P1", "WH001", "WH002", 10)

        entries = service.audit_log.get_audit_log(product_id="P1")
        assert [e.change_amount for e in entries] == [50, -20, -10, 10]
        assert entries[2].triggered_by == "transfer_out"
        assert entries[3].reference_id == "WH001"

    def test_failed_operation_is_not_logged(self):
        service = _create_service()
        with pytest.raises(EntityNotFoundError):
            service.remove_stock("P1", "WH001", 5)
        assert service.audit_log.get_audit_log() == []


class TestConcurrency:
    def test_parallel_additions_are_not_lost(self):
        service = _create_service()

        def worker():
            for _ in range(50):
                service.add_stock("P1", "WH001", 1)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert service.get_stock_level("P1", "WH001") == 400

    def test_parallel_opposite_transfers_do_not_deadlock(self):
        service = _create_service()
        service.add_stock("P1", "WH001", 1000)
        service.add_stock("P1", "WH002", 1000)

        def worker(src, dst):
            for _ in range(50):
                service.transfer_stock("P1", src, dst, 1)

        threads = [
            threading.Thread(target=worker, args=("WH001", "WH002")),
            threading.Thread(target=worker, args=("WH002", "WH001")),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        assert service.get_total_stock("P1") == 2000


def test_none_repository_rejected():
    with pytest.raises(InvalidArgumentError):
        InventoryService(None)


def test_storage_error_propagates():
    repo = MagicMock()
    repo.find_by_product_and_warehouse.return_value = None
    repo.save.side_effect = RuntimeError("bağlantı hatası")
    service = InventoryService(repo)
    with pytest.raises(RuntimeError):
        service.add_stock("P1", "WH001", 5)
    assert service.audit_log.get_audit_log() == []
