from collections.abc import AsyncIterator, Iterator

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.services import style_transfer


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture(autouse=True)
def reset_style_client() -> Iterator[None]:
    original = style_transfer._client
    style_transfer._client = None
    yield
    style_transfer._client = original
