"""Address book reconciliation: default flag rules on a single edit.

Invariants:
    - Setting isDefault on X leaves X as the only default
    - A non-empty book always ends with a default; the first address is the fallback
    - Fields of other addresses never change
    - Unknown address IDs raise NotFoundError
"""

import pytest

from models.schemas import AddressUpdateRequest
from service.address_book import apply_address_edit, check_address_book, default_address_id
from service.errors import NotFoundError
from conftest import make_address


def edit_for(address, **changes):
    fields = address.model_dump(exclude={"id"})
    fields.update(changes)
    return AddressUpdateRequest(**fields)


def defaults(addresses):
    return [address.id for address in addresses if address.isDefault]


@pytest.mark.parametrize("target", ["addr-a", "addr-b", "addr-c"])
def test_setting_default_makes_edited_address_the_only_default(addresses, target):
    current = next(a for a in addresses if a.id == target)

    result = apply_address_edit(addresses, target, edit_for(current, isDefault=True))

    assert defaults(result) == [target]


def test_setting_default_clears_every_stale_default():
    book = [
        make_address("a", "1 Main Street", is_default=True),
        make_address("b", "2 Main Street", is_default=True),
        make_address("c", "3 Main Street"),
    ]

    result = apply_address_edit(book, "c", edit_for(book[2], isDefault=True))

    assert defaults(result) == ["c"]


def test_editing_non_default_address_keeps_existing_default(addresses):
    result = apply_address_edit(addresses, "addr-b", edit_for(addresses[1], isDefault=False))

    assert defaults(result) == ["addr-a"]


def test_clearing_the_only_default_falls_back_to_first_address(addresses):
    result = apply_address_edit(addresses, "addr-a", edit_for(addresses[0], isDefault=False))

    assert defaults(result) == ["addr-a"]
    assert [a.id for a in result] == ["addr-a", "addr-b", "addr-c"]


def test_clearing_default_on_later_address_hands_default_to_first():
    book = [
        make_address("a", "1 Main Street"),
        make_address("b", "2 Main Street", is_default=True),
    ]

    result = apply_address_edit(book, "b", edit_for(book[1], isDefault=False))

    assert defaults(result) == ["a"]


def test_book_without_any_default_gets_one():
    book = [make_address("a", "1 Main Street"), make_address("b", "2 Main Street")]

    result = apply_address_edit(book, "b", edit_for(book[1], street="22 Main Street"))

    assert defaults(result) == ["a"]


def test_multiple_stored_defaults_collapse_to_first_flagged():
    book = [
        make_address("a", "1 Main Street"),
        make_address("b", "2 Main Street", is_default=True),
        make_address("c", "3 Main Street", is_default=True),
    ]

    result = apply_address_edit(book, "a", edit_for(book[0], street="11 Main Street"))

    assert defaults(result) == ["b"]


def test_editing_street_leaves_other_addresses_untouched(addresses):
    result = apply_address_edit(addresses, "addr-b", edit_for(addresses[1], street="20 Rue de la Corraterie"))

    assert result[1].street == "20 Rue de la Corraterie"
    assert result[0] == addresses[0]
    assert result[2] == addresses[2]


def test_edit_keeps_address_id_and_order(addresses):
    result = apply_address_edit(addresses, "addr-c", edit_for(addresses[2], city="Lausanne"))

    assert [a.id for a in result] == ["addr-a", "addr-b", "addr-c"]
    assert result[2].city == "Lausanne"


def test_input_list_is_not_mutated(addresses):
    before = [a.model_copy() for a in addresses]

    apply_address_edit(addresses, "addr-c", edit_for(addresses[2], isDefault=True))

    assert addresses == before


def test_identical_edit_is_a_no_op(addresses):
    result = apply_address_edit(addresses, "addr-b", edit_for(addresses[1]))

    assert result == addresses


def test_unknown_address_raises_not_found(addresses):
    with pytest.raises(NotFoundError):
        apply_address_edit(addresses, "addr-z", edit_for(addresses[0]))


def test_single_address_book_stays_default():
    book = [make_address("only", "1 Main Street", is_default=True)]

    result = apply_address_edit(book, "only", edit_for(book[0], isDefault=False))

    assert defaults(result) == ["only"]


def test_check_address_book_reports_each_broken_property():
    book = [
        make_address("a", "1 Main Street", is_default=True),
        make_address("a", "2 Main Street", is_default=True),
    ]

    problems = check_address_book(book)

    assert any("multiple default" in p for p in problems)
    assert any("duplicate address ids" in p for p in problems)
    assert check_address_book([make_address("a", "1 Main Street")]) == ["no default address"]
    assert check_address_book([]) == []


def test_default_address_id(addresses):
    assert default_address_id(addresses) == "addr-a"
    assert default_address_id([]) is None
