from __future__ import annotations

import pytest

from src.fieldforce.fieldforce.container import Container, build_memory_container
from tests.support import ADMIN, FOREST, actor_for, employee


@pytest.fixture
def container() -> Container:
    """Memory-backed container holding two branches plus unassigned staff."""
    c = build_memory_container()
    for row in FOREST:
        c.employees_repo.add(employee(*row))
    return c


@pytest.fixture
def soundbox(container):
    return container.product_service.create(actor_for(container, ADMIN), name="Soundbox", points=6)
