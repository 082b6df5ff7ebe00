import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def academy_bed():
    from academy.domain import academy

    bed = DomainFixture(academy)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(academy_bed):
    with academy_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def catalogue():
    """A catalogue with two purchasable courses.

    course-python has 4 lectures and course-data has 2.
    """
    from academy.catalogue import reset_catalogue, set_catalogue
    from academy.catalogue.memory_adapter import InMemoryCatalogue

    catalogue = InMemoryCatalogue()
    catalogue.add_course(
        "course-python",
        "Python Basics",
        price=30000,
        slug="python-basics",
        thumbnail_url="https://cdn.example.com/python.png",
        lecture_ids=["lec-py-1", "lec-py-2", "lec-py-3", "lec-py-4"],
    )
    catalogue.add_course(
        "course-data",
        "Data Analysis",
        price=20000,
        slug="data-analysis",
        lecture_ids=["lec-da-1", "lec-da-2"],
    )
    set_catalogue(catalogue)
    yield catalogue
    reset_catalogue()


@pytest.fixture(autouse=True)
def gateway():
    from academy.gateway import reset_gateway, set_gateway
    from academy.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()
