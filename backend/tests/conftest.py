import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    # The application code is built on asyncio (asyncio.create_task / asyncio.sleep).
    return "asyncio"
