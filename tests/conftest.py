"""Root test configuration."""

import logging

import pytest
import respx
import structlog
from httpx import Response
from vrakit.clients.vra import VRAClient

BASE_URL = "https://vra.example.com"
CONSUMER = f"{BASE_URL}/catalog-service/api/consumer"


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _page_body(content, total_pages, number=1, size=20):
    return {
        "links": [],
        "content": content,
        "metadata": {
            "size": size,
            "totalElements": len(content),
            "totalPages": total_pages,
            "number": number,
            "offset": (number - 1) * size,
        },
    }


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def consumer_url():
    return CONSUMER


@pytest.fixture
def client():
    """Client without retries or backoff so failures surface on the first call."""
    return VRAClient(BASE_URL, "test-token", tenant="vsphere.local", max_retries=1, backoff_factor=0)


@pytest.fixture
def page_body():
    return _page_body


@pytest.fixture
def mock_pages():
    """Register one respx route per page of a paginated collection.

    Routes match on the ``page`` query parameter only, so the page size sent
    alongside it does not matter. Pass ``router`` when the test uses its own
    ``respx.mock(...)`` router. Returns the routes in page order so tests can
    assert call counts.
    """

    def register(url, pages, router=respx):
        total = len(pages)
        routes = []
        for number, content in enumerate(pages, start=1):
            route = router.get(url, params={"page": str(number)}).mock(
                return_value=Response(200, json=_page_body(content, total, number))
            )
            routes.append(route)
        return routes

    return register
