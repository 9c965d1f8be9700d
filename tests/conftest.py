"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock, AsyncMock

from shopping_cart.cart import Cart, MemorySessionStore, register_model
from shopping_cart.config import CartConfig
from shopping_cart.events import CartEvents, EventDispatcher
from shopping_cart.services.repositories import ShoppingCartRepository

from helpers import FakeSupabase, ProductModel

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")

register_model(ProductModel)


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client"""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock

    return client


@pytest.fixture
def fake_supabase():
    """In-memory Supabase stand-in"""
    return FakeSupabase()


@pytest.fixture
def session():
    """Empty in-memory session"""
    return MemorySessionStore()


@pytest.fixture
def fired():
    """Events fired by the cart, as (name, payload) tuples"""
    return []


@pytest.fixture
def events(fired):
    """Dispatcher recording every cart event"""
    dispatcher = EventDispatcher()
    for name in CartEvents.ALL:
        dispatcher.on(name, lambda payload, name=name: fired.append((name, payload)))
    return dispatcher


@pytest.fixture
def config():
    """Default cart config"""
    return CartConfig()


@pytest.fixture
def cart(session, fake_supabase, events, config):
    """Cart over an in-memory session and snapshot table"""
    repository = ShoppingCartRepository(fake_supabase, config.table)
    return Cart(session=session, repository=repository, events=events, config=config)
