"""Shared pytest configuration for the retirement projector tests."""

# Async MCP server tests are marked explicitly with @pytest.mark.asyncio
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: run the test inside an event loop"
    )
