from __future__ import annotations

import json

import pytest

from cart import (
    FLAT_SHIPPING,
    CartStore,
    LineItem,
    RenderTargetMissing,
    compute_aggregates,
    parse_snapshot,
)
from storage import MemoryStorage, StorageQuotaExceeded


class FailingStorage(MemoryStorage):
    name = "failing"

    def set(self, key, value):
        raise StorageQuotaExceeded("quota exceeded")


def test_add_merges_by_name_and_sums_quantities(store) -> None:
    store.add("Latte", "l.png", 4, 2)
    store.add("Mocha", "m.png", 5)
    store.add("Latte", "l.png", 4, 3)

    names = [i.name for i in store.items]
    assert names == ["Latte", "Mocha"]
    assert store.items[0].quantity == 5
    assert store.items[1].quantity == 1


def test_add_clamps_each_call_into_range(store) -> None:
    store.add("Latte", "l.png", 4, 0)
    store.add("Latte", "l.png", 4, -7)
    assert store.items[0].quantity == 2

    store.add("Beans", "b.png", 10, 5000)
    assert store.items[1].quantity == 999
    store.add("Beans", "b.png", 10, 10)
    assert store.items[1].quantity == 999


def test_add_coerces_numeric_strings(store) -> None:
    store.add("Latte", "l.png", "4.50", "3")
    item = store.items[0]
    assert item.price == 4.5
    assert item.quantity == 3


@pytest.mark.parametrize("price", [-1, float("nan"), float("inf"), "abc"])
def test_add_rejects_bad_price_without_changing_cart(store, storage, price) -> None:
    with pytest.raises(ValueError):
        store.add("Latte", "l.png", price)
    assert store.items == []
    assert storage.get("cart") is None


@pytest.mark.parametrize("name", ["", 123, None])
def test_add_rejects_bad_name_so_reload_keeps_the_cart(store, storage, channel, name) -> None:
    store.add("Latte", "l.png", 4, 2)
    saved = storage.get("cart")
    with pytest.raises(ValueError):
        store.add(name, "e.png", 1)
    assert [i.name for i in store.items] == ["Latte"]
    assert storage.get("cart") == saved

    snap = CartStore(storage, channel, key="cart", context_id="tab-b").load()
    assert [(i.name, i.quantity) for i in snap.items] == [("Latte", 2)]


def test_set_quantity_never_drops_below_one(store) -> None:
    store.add("Latte", "l.png", 4, 3)
    store.set_quantity(0, -100)
    assert store.items[0].quantity == 1
    store.set_quantity(0, 2)
    assert store.items[0].quantity == 3


def test_set_quantity_and_remove_ignore_out_of_range(store, storage) -> None:
    store.add("Latte", "l.png", 4)
    before = storage.get("cart")
    store.set_quantity(5, 1)
    store.set_quantity(-1, 1)
    store.remove(3)
    store.remove(-1)
    assert len(store) == 1
    assert storage.get("cart") == before


def test_remove_deletes_entry(store) -> None:
    store.add("Latte", "l.png", 4)
    store.add("Mocha", "m.png", 5)
    store.remove(0)
    assert [i.name for i in store.items] == ["Mocha"]


def test_clear_gives_zero_aggregates(store) -> None:
    store.add("Latte", "l.png", 4, 2)
    store.clear()
    agg = store.aggregates()
    assert agg.item_count == 0
    assert agg.subtotal == 0.0
    assert agg.shipping == 0.0
    assert agg.total == 0.0


def test_every_mutation_is_persisted(store, storage) -> None:
    store.add("Latte", "l.png", 4, 2)
    assert json.loads(storage.get("cart")) == [
        {"name": "Latte", "image": "l.png", "price": 4.0, "quantity": 2}
    ]
    store.clear()
    assert json.loads(storage.get("cart")) == []


class TestAggregates:
    def test_free_shipping_at_fifty(self) -> None:
        agg = compute_aggregates([LineItem("A", "", 10, 2), LineItem("B", "", 30, 1)])
        assert agg.subtotal == pytest.approx(50.0)
        assert agg.shipping == 0.0
        assert agg.total == pytest.approx(50.0)

    def test_flat_shipping_below_fifty(self) -> None:
        agg = compute_aggregates([LineItem("A", "", 10, 1)])
        assert agg.subtotal == pytest.approx(10.0)
        assert agg.shipping == pytest.approx(5.99)
        assert agg.total == pytest.approx(15.99)

    def test_empty_cart_has_no_shipping(self) -> None:
        agg = compute_aggregates([])
        assert (agg.item_count, agg.subtotal, agg.shipping, agg.total) == (0, 0.0, 0.0, 0.0)

    def test_zero_priced_items_have_no_shipping(self) -> None:
        agg = compute_aggregates([LineItem("Sample", "", 0, 3)])
        assert agg.item_count == 3
        assert agg.shipping == 0.0

    @pytest.mark.parametrize("prices", [[1], [49.99], [50], [12.5, 20, 30], [0.01, 0.02]])
    def test_total_is_subtotal_plus_shipping(self, prices) -> None:
        agg = compute_aggregates([LineItem(f"p{i}", "", p, 1) for i, p in enumerate(prices)])
        assert agg.total == pytest.approx(agg.subtotal + agg.shipping)
        if agg.subtotal == 0 or agg.subtotal >= 50:
            assert agg.shipping == 0
        else:
            assert agg.shipping == FLAT_SHIPPING


class TestLoad:
    @pytest.mark.parametrize(
        "raw",
        [None, "", "not json", "{}", '{"name": "x"}', '[{"name": "x"}]', '[1, 2]', '[{"name": "", "price": 1, "quantity": 1}]'],
    )
    def test_bad_snapshots_give_empty_cart(self, raw) -> None:
        assert parse_snapshot(raw) == []

    def test_load_reads_existing_snapshot(self, storage, channel) -> None:
        storage.set("cart", json.dumps([{"name": "Latte", "image": "l.png", "price": 4, "quantity": 2}]))
        s = CartStore(storage, channel, context_id="tab-b")
        snap = s.load()
        assert snap.items[0].name == "Latte"
        assert snap.aggregates.item_count == 2

    def test_load_clamps_quantities_and_merges_duplicates(self) -> None:
        raw = json.dumps([
            {"name": "Latte", "image": "", "price": 4, "quantity": 0},
            {"name": "Mocha", "image": "", "price": 5, "quantity": 5000},
            {"name": "Latte", "image": "", "price": 4, "quantity": 2},
        ])
        items = parse_snapshot(raw)
        assert [(i.name, i.quantity) for i in items] == [("Latte", 3), ("Mocha", 999)]

    def test_unreadable_storage_gives_empty_cart(self, channel) -> None:
        class Broken(MemoryStorage):
            def get(self, key):
                raise OSError("disk gone")

        s = CartStore(Broken(), channel)
        assert s.load().items == ()


class TestPersistenceFailure:
    def test_failed_write_keeps_memory_state(self, channel) -> None:
        s = CartStore(FailingStorage(), channel, context_id="tab-a")
        s.add("Latte", "l.png", 4, 2)
        assert s.items[0].quantity == 2
        assert s.aggregates().item_count == 2

    def test_quota_is_enforced_by_memory_storage(self, channel) -> None:
        s = CartStore(MemoryStorage(quota_bytes=80), channel)
        s.add("Latte", "l.png", 4)
        s.add("A very long product name that will not fit", "x.png", 1)
        assert len(s) == 2
        assert len(parse_snapshot(s.storage.get("cart"))) == 1


class TestRenderCallbacks:
    def test_callbacks_get_snapshot_after_each_mutation(self, store) -> None:
        seen = []
        store.subscribe(lambda snap: seen.append(snap.aggregates.item_count))
        store.add("Latte", "l.png", 4, 2)
        store.set_quantity(0, 1)
        store.clear()
        assert seen == [2, 3, 0]

    def test_missing_render_target_is_skipped(self, store) -> None:
        seen = []

        def broken(snap):
            raise RenderTargetMissing("#cart-container")

        store.subscribe(broken)
        store.subscribe(lambda snap: seen.append(len(snap.items)))
        store.add("Latte", "l.png", 4)
        assert seen == [1]

    def test_unsubscribe(self, store) -> None:
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        store.add("Latte", "l.png", 4)
        assert seen == []


def test_discard_erases_persisted_key(store, storage) -> None:
    store.add("Latte", "l.png", 4)
    store.discard()
    assert storage.get("cart") is None
    assert len(store) == 0


def test_snapshot_is_a_copy(store) -> None:
    store.add("Latte", "l.png", 4)
    snap = store.snapshot()
    snap.items[0].quantity = 50
    assert store.items[0].quantity == 1
