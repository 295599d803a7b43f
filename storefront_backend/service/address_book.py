"""
Default-address reconciliation for a user's shipping addresses.

A stored address book keeps these properties:
    - at most one address has isDefault set
    - a non-empty book always has a default
    - address ids are unique

apply_address_edit() produces a new list that keeps them after one address
is edited. It never mutates its input and does no I/O.
"""
from typing import List, Optional

from config import get_logger
from models.schemas import Address, AddressUpdateRequest
from service.errors import NotFoundError

logger = get_logger(__name__)


def find_address_index(addresses: List[Address], address_id: str) -> int:
    for index, address in enumerate(addresses):
        if address.id == address_id:
            return index
    return -1


def default_address_id(addresses: List[Address]) -> Optional[str]:
    for address in addresses:
        if address.isDefault:
            return address.id
    return None


def apply_address_edit(addresses: List[Address], address_id: str, edit: AddressUpdateRequest) -> List[Address]:
    """
    Apply an edit to one address and re-derive the default flags.

    Args:
        addresses: The current ordered address book
        address_id: The ID of the address being edited
        edit: The new field values, including the requested isDefault

    Returns:
        A new list of addresses with exactly one default

    Raises:
        NotFoundError: If no address has the given ID
    """
    index = find_address_index(addresses, address_id)
    if index == -1:
        raise NotFoundError(f"Address with ID {address_id} not found")

    edited = addresses[index].model_copy(update={
        "street": edit.street,
        "city": edit.city,
        "state": edit.state,
        "zip": edit.zip,
        "country": edit.country,
        "isDefault": edit.isDefault,
    })

    if edited.isDefault:
        # Setting a default clears every other flag
        updated = [
            edited if i == index else address.model_copy(update={"isDefault": False})
            for i, address in enumerate(addresses)
        ]
    else:
        updated = [address.model_copy() for address in addresses]
        updated[index] = edited

    flagged = [i for i, address in enumerate(updated) if address.isDefault]

    if not flagged and updated:
        logger.info("No default address after edit, setting the first one as default.")
        updated[0] = updated[0].model_copy(update={"isDefault": True})
    elif len(flagged) > 1:
        # Only reachable when the stored book already had several defaults
        keep = index if index in flagged else flagged[0]
        logger.warning(f"Multiple default addresses found after edit, keeping only {updated[keep].id}.")
        updated = [
            address.model_copy(update={"isDefault": i == keep})
            for i, address in enumerate(updated)
        ]

    return updated


def check_address_book(addresses: List[Address]) -> List[str]:
    """Return a description of every broken address book property, empty when the book is sound."""
    problems = []
    defaults = [address.id for address in addresses if address.isDefault]
    if len(defaults) > 1:
        problems.append(f"multiple default addresses: {defaults}")
    if addresses and not defaults:
        problems.append("no default address")
    ids = [address.id for address in addresses]
    duplicates = sorted({address_id for address_id in ids if ids.count(address_id) > 1})
    if duplicates:
        problems.append(f"duplicate address ids: {duplicates}")
    return problems
