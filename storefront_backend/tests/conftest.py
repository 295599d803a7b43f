"""Shared test fixtures: in-memory user store, Firestore fakes, API client.

Invariants:
    - InMemoryUserStore versions each user document; a commit against a stale
      version raises ConcurrentModificationError, like a Firestore write with
      a last_update_time precondition
    - load_address_book yields to the event loop after reading, so two
      concurrent updates interleave their read and write
    - API tests override auth, the user store and the Firestore client on the
      sub-API; no network or credentials are needed
"""

import asyncio
import copy
from datetime import datetime
from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from models.schemas import Address
from service.errors import ConcurrentModificationError, NotFoundError
from service.user_store import AddressBookSnapshot


class InMemoryUserStore:
    def __init__(self):
        self.users: Dict[str, dict] = {}
        self.loads = 0
        self.commits = 0
        self.conflicts = 0
        self.fail_commit_with = None

    def add_user(self, user_id: str, addresses: List[Address]):
        self.users[user_id] = {
            "shippingAddresses": [address.model_dump() for address in addresses],
            "version": 0,
            "updatedAt": None,
        }

    def stored_addresses(self, user_id: str) -> List[Address]:
        return [Address(**raw) for raw in self.users[user_id]["shippingAddresses"]]

    async def load_address_book(self, user_id: str) -> AddressBookSnapshot:
        self.loads += 1
        if user_id not in self.users:
            raise NotFoundError(f"User document not found for UID: {user_id}")
        doc = self.users[user_id]
        snapshot = AddressBookSnapshot(
            user_id=user_id,
            addresses=[Address(**raw) for raw in copy.deepcopy(doc["shippingAddresses"])],
            version=doc["version"],
        )
        await asyncio.sleep(0)
        return snapshot

    async def commit_address_book(self, user_id, addresses, snapshot):
        if self.fail_commit_with is not None:
            raise self.fail_commit_with
        doc = self.users.get(user_id)
        if doc is None:
            raise NotFoundError(f"User document not found for UID: {user_id}")
        if doc["version"] != snapshot.version:
            self.conflicts += 1
            raise ConcurrentModificationError(f"User {user_id} was modified during the update")
        doc["shippingAddresses"] = [address.model_dump() for address in addresses]
        doc["version"] += 1
        doc["updatedAt"] = datetime.now()
        self.commits += 1
        return addresses


def make_address(address_id: str, street: str, is_default: bool = False) -> Address:
    return Address(
        id=address_id,
        street=street,
        city="Geneva",
        state="GE",
        zip="1201",
        country="Switzerland",
        isDefault=is_default,
    )


@pytest.fixture
def addresses():
    """[A (default), B, C] in insertion order."""
    return [
        make_address("addr-a", "1 Rue du Rhone", is_default=True),
        make_address("addr-b", "2 Quai du Mont-Blanc"),
        make_address("addr-c", "3 Place du Molard"),
    ]


@pytest.fixture
def store(addresses):
    user_store = InMemoryUserStore()
    user_store.add_user("user-1", addresses)
    return user_store


def make_snapshot(exists=True, data=None, doc_id="doc-1", update_time="t0"):
    snapshot = MagicMock()
    snapshot.exists = exists
    snapshot.id = doc_id
    snapshot.update_time = update_time
    snapshot.to_dict.return_value = data
    return snapshot


@pytest.fixture
def firestore_db():
    """
    A MagicMock standing in for firestore.AsyncClient.

    db.collection(name).document(id) always returns the same document mock,
    whose get/update/create are AsyncMocks. Tests set return values on
    firestore_db.doc_ref and firestore_db.collection_ref.
    """
    db = MagicMock()
    doc_ref = MagicMock()
    doc_ref.get = AsyncMock()
    doc_ref.update = AsyncMock()
    doc_ref.create = AsyncMock()
    collection_ref = MagicMock()
    collection_ref.document.return_value = doc_ref
    collection_ref.get = AsyncMock(return_value=[])
    db.collection.return_value = collection_ref
    db.doc_ref = doc_ref
    db.collection_ref = collection_ref
    return db


@pytest.fixture
async def client(store, firestore_db):
    from main import app, api_v1
    from config import get_firestore_client
    from router.dependencies import get_current_user_id, get_user_store

    api_v1.dependency_overrides[get_current_user_id] = lambda: "user-1"
    api_v1.dependency_overrides[get_user_store] = lambda: store
    api_v1.dependency_overrides[get_firestore_client] = lambda: firestore_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    api_v1.dependency_overrides.clear()
