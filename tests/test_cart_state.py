import random

import pytest

from conftest import make_variant
from shopfront.app.common.storage import MemoryStore, StorageError
from shopfront.modules.cart.state import CART_KEY, CartState

A = make_variant("gid://shopify/ProductVariant/1", "10.00", title="A")
B = make_variant("gid://shopify/ProductVariant/2", "10.00", title="B")
C = make_variant("gid://shopify/ProductVariant/3", "4.25", title="C")


def test_add_same_variant_merges_quantity():
    cart = CartState()
    cart.add_line(A, 2)
    cart.add_line(A, 3)

    assert len(cart) == 1
    assert cart.get(A.id).quantity == 5


def test_set_quantity_zero_or_negative_removes_line():
    cart = CartState()
    cart.add_line(A, 2)
    cart.add_line(B, 1)

    cart.set_quantity(A.id, 0)
    assert cart.get(A.id) is None

    cart.set_quantity(B.id, -5)
    assert cart.get(B.id) is None
    assert len(cart) == 0


def test_totals():
    cart = CartState()
    cart.add_line(A, 2)
    cart.add_line(B, 3)

    assert cart.total_items() == 5
    assert cart.total_minor() == 5000
    assert cart.total_price() == "$50.00"


def test_empty_cart_total_uses_default_currency():
    assert CartState().total_price() == "$0.00"
    assert CartState(default_currency="EUR").total_price() == "€0.00"


def test_mixed_currency_uses_first_line_currency():
    cart = CartState()
    cart.add_line(make_variant("gid://shopify/ProductVariant/9", "5.00", currency="EUR"), 1)
    cart.add_line(A, 1)

    assert cart.currency_code == "EUR"
    assert cart.total_price() == "€15.00"


def test_remove_missing_line_is_noop():
    cart = CartState()
    cart.add_line(A, 1)
    cart.remove_line("gid://shopify/ProductVariant/404")
    assert cart.total_items() == 1


def test_quantity_is_clamped_to_99():
    cart = CartState()
    cart.add_line(A, 60)
    cart.add_line(A, 60)
    assert cart.get(A.id).quantity == 99

    cart.set_quantity(A.id, 500)
    assert cart.get(A.id).quantity == 99


def test_line_order_is_insertion_order():
    cart = CartState()
    cart.add_line(B, 1)
    cart.add_line(A, 1)
    cart.add_line(B, 1)
    assert [line.variant_id for line in cart] == [B.id, A.id]


def test_random_operations_keep_invariants():
    rng = random.Random(7)
    variants = [A, B, C]
    cart = CartState()
    for _ in range(500):
        v = rng.choice(variants)
        op = rng.choice(["add", "remove", "set"])
        if op == "add":
            cart.add_line(v, rng.randint(-3, 120))
        elif op == "remove":
            cart.remove_line(v.id)
        else:
            cart.set_quantity(v.id, rng.randint(-10, 150))

        ids = [line.variant_id for line in cart]
        assert len(ids) == len(set(ids))
        assert all(1 <= line.quantity <= 99 for line in cart)


def test_line_items_for_checkout():
    cart = CartState()
    cart.add_line(A, 2)
    cart.add_line(C, 1)
    assert cart.line_items() == [
        {"variant_id": A.id, "quantity": 2},
        {"variant_id": C.id, "quantity": 1},
    ]


def test_every_mutation_is_persisted():
    store = MemoryStore()
    cart = CartState.load(store)
    cart.add_line(A, 2)
    cart.add_line(C, 1)

    reloaded = CartState.load(store)
    assert reloaded.line_items() == cart.line_items()
    assert reloaded.get(A.id).attributes == [("Size", "A")]

    cart.clear()
    assert CartState.load(store).total_items() == 0


def test_load_merges_duplicates_and_clamps():
    line = {"variant_id": A.id, "unit_price_minor": 1000, "currency": "USD", "quantity": 80}
    store = MemoryStore({CART_KEY: [line, dict(line, quantity=50), dict(line, variant_id=B.id, quantity=0)]})

    cart = CartState.load(store)
    assert cart.get(A.id).quantity == 99
    assert cart.get(B.id).quantity == 1


def test_load_unreadable_cart_starts_empty():
    store = MemoryStore({CART_KEY: [{"variant_id": A.id}]})
    assert len(CartState.load(store)) == 0


class FullStore(MemoryStore):
    def set(self, key, value):
        raise StorageError("Client storage is full")


def test_storage_failure_is_raised():
    cart = CartState.load(FullStore())
    with pytest.raises(StorageError):
        cart.add_line(A, 1)
