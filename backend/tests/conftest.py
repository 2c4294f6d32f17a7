"""
P4P MIS Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── fake_db: In-memory stand-in for the async MongoDB database handle
    ├── sample_collections: Documents loaded into fake_db
    └── test_client: HTTPX AsyncClient with get_database overridden to fake_db

No test needs a running MongoDB: FakeDatabase implements the handful of
async collection methods the services call (find/to_list/async-for,
find_one, count_documents, list_collection_names, command).
"""

import os
from typing import Any, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/p4pmis_test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ALLOWED_COLLECTIONS", None)
os.environ.pop("COLLECTION_ALLOWLIST_ENABLED", None)
os.environ.pop("ALLOW_PLAINTEXT_PASSWORDS", None)


# ══════════════════════════════════════════════════════════════════════════
# In-memory database fake
# ══════════════════════════════════════════════════════════════════════════

def _matches(document: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
    return all(document.get(key) == value for key, value in (query or {}).items())


class FakeCursor:
    """Mimics AsyncCursor: supports `await to_list()` and `async for`."""

    def __init__(self, documents: Iterable[Dict[str, Any]], error: Optional[Exception] = None):
        self._documents = [dict(d) for d in documents]
        self._error = error
        self._position = 0

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        if self._error:
            raise self._error
        return self._documents if length is None else self._documents[:length]

    def __aiter__(self):
        return self

    async def __anext__(self) -> Dict[str, Any]:
        if self._error:
            raise self._error
        if self._position >= len(self._documents):
            raise StopAsyncIteration
        document = self._documents[self._position]
        self._position += 1
        return document


class FakeCollection:
    def __init__(self, name: str, documents: List[Dict[str, Any]], error: Optional[Exception] = None):
        self.name = name
        self._documents = documents
        self._error = error

    def find(self, query: Optional[Dict[str, Any]] = None) -> FakeCursor:
        matching = [d for d in self._documents if _matches(d, query)]
        return FakeCursor(matching, error=self._error)

    async def find_one(self, query: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        if self._error:
            raise self._error
        for document in self._documents:
            if _matches(document, query):
                return dict(document)
        return None

    async def count_documents(self, query: Dict[str, Any]) -> int:
        if self._error:
            raise self._error
        return sum(1 for d in self._documents if _matches(d, query))


class FakeDatabase:
    """
    Dict-of-lists database.

    Attributes:
        collections:  name → documents
        failing:      name → exception raised by any query on that collection
        accessed:     names in the order they were requested (db[name])
        list_error:   raised by list_collection_names when set
        ping_ok:      result of the `ping` command
    """

    name = "p4pmis_test"

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.collections: Dict[str, List[Dict[str, Any]]] = {
            name: list(docs) for name, docs in (collections or {}).items()
        }
        self.failing: Dict[str, Exception] = {}
        self.accessed: List[str] = []
        self.list_error: Optional[Exception] = None
        self.ping_ok = True

    def __getitem__(self, name: str) -> FakeCollection:
        self.accessed.append(name)
        return FakeCollection(name, self.collections.get(name, []), self.failing.get(name))

    async def list_collection_names(self) -> List[str]:
        if self.list_error:
            raise self.list_error
        return list(self.collections)

    async def command(self, name: str) -> Dict[str, Any]:
        if not self.ping_ok:
            from pymongo.errors import ServerSelectionTimeoutError
            raise ServerSelectionTimeoutError("no servers available")
        return {"ok": 1.0}


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sample_collections() -> Dict[str, List[Dict[str, Any]]]:
    """A small MIS dataset covering every collection the routes read."""
    return {
        "UsersMIS": [
            {"_id": ObjectId(), "username": "alice", "password": "s3cret", "role": "admin", "name": "Alice M."},
            {"_id": ObjectId(), "username": "bob", "password": "hunter2"},
        ],
        "ParticipantPROFILE": [
            {
                "_id": ObjectId(),
                "ID": 101,
                "ParticipantNAME": "Grace",
                "ParticipantGENDER": "F",
                "WorkingSectorP4P": "Maize",
                "pAddressDISTRICT": "Kisumu",
                "EthnicCultureBACKGROUND": None,
                "Extra": "kept",
            },
        ],
        "DealerPROFILE": [
            {"_id": ObjectId(), "DealerNAME": "AgroOne", "District": "Nakuru"},
            {"_id": ObjectId(), "DealerNAME": "FarmPlus", "District": "Embu"},
        ],
        "CoOpPROFILE": [
            {"_id": ObjectId(), "CoOpNAME": "Lakeside Growers"},
        ],
        "Leverages": [
            {"Entity": "Bank A", "Amount": "1000"},
            {"Entity": "Bank A", "Amount": 250.5},
            {"Entity": "NGO B", "Amount": "n/a"},
            {"Amount": 40},
        ],
        "Productivity": [
            {"Sector": "Maize", "BaseLine": 10, "Early Productivity Assessment": 12, "% Growth": 20},
            {"Sector": "Poultry", "BaseLine": 5, "Early Productivity Assessment": 5, "% Growth": 0},
        ],
        "A2F": [
            {"ParticipantID": "17", "ParticipantAGE": "34", "LoanAmountAPPLIED": "5000",
             "LoanAmountAPPROVED": 4500, "LoanPERIOD": "12", "InterestRATE": "7.5",
             "InsurancePERIOD": None, "Lender": "Bank A"},
        ],
        "A2M": [
            {"ParticipantID": 17, "ParticipantAGE": "abc", "MarginalizedSTATUS": "1",
             "EntityPHONE": "0712345678", "QtySOLD": "", "Buyer": "Mill"},
        ],
        "MarketSurveyAQUA": [{"n": 1}, {"n": 2}],
        "MarketSurveyCATTLE": [{"n": 1}],
        "MarketSurveyFH": [],
        "MarketSurveyMAIZE": [{"n": 1}, {"n": 2}, {"n": 3}],
        "MarketSurveyPOULTRY": [{"n": 1}],
        "MarketSurveyQSR": [],
    }


@pytest.fixture
def fake_db(sample_collections) -> FakeDatabase:
    return FakeDatabase(sample_collections)


@pytest_asyncio.fixture
async def test_client(fake_db):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    ASGITransport does not run the lifespan, so no MongoDB client is opened;
    get_database is overridden and app.state carries the fake for /health.
    """
    from p4pmis.database import get_database
    from p4pmis.main import app

    app.dependency_overrides[get_database] = lambda: fake_db
    app.state.mongo_db = fake_db
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    app.state.mongo_db = None
