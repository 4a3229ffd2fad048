"""Tests for the MongoDB snippet store, against an in-memory collection."""

import random

from casino.core.challenge import Difficulty, SourceKind
from casino.services.document_store import DocumentChallengeStore, snippet_to_challenge


def _matches(doc: dict, query: dict) -> bool:
    return all(doc.get(k) == v for k, v in query.items())


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs
        self._skip = 0
        self._limit = None

    def skip(self, n):
        self._skip = n
        return self

    def limit(self, n):
        self._limit = n
        return self

    async def to_list(self, length=None):
        docs = self.docs[self._skip:]
        if self._limit is not None:
            docs = docs[:self._limit]
        return docs


class FakeCollection:
    """The slice of AsyncCollection the store uses."""

    def __init__(self, docs=None):
        self.docs = list(docs or [])
        self.database = self

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))

    def find(self, query):
        return FakeCursor([d for d in self.docs if _matches(d, query)])

    async def insert_many(self, docs):
        self.docs.extend(docs)

    async def command(self, name):
        return {"ok": 1}


def _snippet(title, tech_stack="JavaScript", difficulty="Middle", active=True):
    return {
        "title": title,
        "description": "Pick one",
        "techStack": tech_stack,
        "difficulty": difficulty,
        "code1": "let a = 1",
        "code2": "var a = 1",
        "correctAnswer": 1,
        "explanation": "Prefer let.",
        "isActive": active,
    }


def test_snippet_to_challenge():
    challenge = snippet_to_challenge(_snippet("Let vs var"))

    assert challenge.kind is SourceKind.DOCUMENT_CATALOG
    assert challenge.id == -1
    assert challenge.content.snippet1 == "let a = 1"
    assert challenge.content.difficulty is Difficulty.MIDDLE


async def test_find_random_filters_by_stack_difficulty_and_active():
    collection = FakeCollection([
        _snippet("inactive", active=False),
        _snippet("other stack", tech_stack="Python"),
        _snippet("other level", difficulty="Senior"),
        _snippet("match"),
    ])
    store = DocumentChallengeStore(collection, rng=random.Random(1))

    challenge = await store.find_random("JavaScript", Difficulty.MIDDLE)
    assert challenge.content.title == "match"


async def test_find_random_picks_among_matches():
    collection = FakeCollection([_snippet(f"s{i}") for i in range(10)])
    store = DocumentChallengeStore(collection, rng=random.Random(3))

    titles = {(await store.find_random("JavaScript", Difficulty.MIDDLE)).content.title for _ in range(30)}
    assert len(titles) > 1


async def test_find_random_no_match():
    store = DocumentChallengeStore(FakeCollection([_snippet("js")]))
    assert await store.find_random("Haskell", Difficulty.SENIOR) is None


async def test_seed_only_fills_empty_collection():
    collection = FakeCollection()
    store = DocumentChallengeStore(collection)

    added = await store.seed()
    assert added == len(collection.docs) > 0
    assert await store.seed() == 0

    challenge = await store.find_random("React", Difficulty.JUNIOR)
    assert challenge is not None


async def test_ping():
    assert await DocumentChallengeStore(FakeCollection()).ping() is True
