"""Shared test fixtures."""

import asyncio

import pytest

from hydrator import Hydrator, HydratorConfig, ModelRegistry, set_config


# ── Sample Records ───────────────────────────────────────────────────────

BOOKS = [
    {'id': 1, 'name': 'Code Complete 2', 'author': 19237},
    {'id': 2, 'name': 'John Does Biography', 'author': {'id': 16030}},
    {'id': 3, 'name': 'Multi Authored Book', 'author': [19237, 16030]},
    {
        'id': 4,
        'name': 'Book With Author & Publisher',
        'author': {'id': 16030},
        'publisher': {'id': 23687},
    },
    {'id': 5, 'name': 'Book With Aliases Children', 'authors': [19237, 16030]},
]

AUTHORS = [
    {'id': 19237, 'name': 'Steve McConnel'},
    {'id': 16030, 'name': 'John Doe'},
]

PUBLISHERS = [
    {'id': 23687, 'name': 'White House Publishing', 'city': 'Washington'},
    {'id': 3456, 'name': 'Dream Factory Publishing', 'city': 'Hollywood'},
]


def make_provider(records, calls=None, delays=None):
    """Async provider looking records up by ``id``, recording every call."""
    async def provider(key):
        if calls is not None:
            calls.append(key)
        await asyncio.sleep((delays or {}).get(key, 0))
        return next((r for r in records if r['id'] == key), None)
    return provider


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def default_config():
    """Run every test with default logging toggles, whatever HYDRATOR_DEBUG says."""
    set_config(HydratorConfig())
    yield
    set_config(HydratorConfig())


@pytest.fixture
def provider_calls():
    """Per-model lists of the key values each provider was called with."""
    return {'book': [], 'author': [], 'publisher': []}


@pytest.fixture
def registry(provider_calls):
    """Registry with book → author/publisher models."""
    registry = ModelRegistry()
    registry.create_model(
        name='book',
        key='id',
        children=['author', 'publisher'],
        provider=make_provider(BOOKS, provider_calls['book']),
    )
    registry.create_model(
        name='author',
        key='id',
        aliases=['authors'],
        provider=make_provider(AUTHORS, provider_calls['author']),
    )
    registry.create_model(
        name='publisher',
        key='id',
        collapsables=['name'],
        provider=make_provider(PUBLISHERS, provider_calls['publisher']),
    )
    return registry


@pytest.fixture
def hydrator(registry):
    return Hydrator(registry)
