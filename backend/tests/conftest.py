from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pathsearch.api import deps
from pathsearch.main import app
from pathsearch.services.graph_store import GraphStore
from pathsearch.services.overpass import load_ways_file

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture()
def ways_file() -> Path:
    return DATA_DIR / "ways.json"


@pytest.fixture()
def store(ways_file: Path) -> GraphStore:
    return GraphStore(lambda: load_ways_file(ways_file), coverage_buffer_m=250.0)


@pytest.fixture()
def client(store: GraphStore):
    app.dependency_overrides[deps.get_graph_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
