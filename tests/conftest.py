"""Test configuration and shared fixtures"""

import pytest
from latsearch.lattice.graph import Lattice

HELLO_WORLD = """id utt1
start 0
end 2
numNodes 3
numEdges 2
node 0 0.00
node 1 0.40
node 2 1.00
edge 0 1 hello 2 3
edge 1 2 world 1 1
"""

# Six paths; with lm_scale 1.0 the silence ending ties with "the store"
BRANCHING = """id utt2
start 0
end 5
numNodes 6
numEdges 8
node 0 0.00
node 1 0.50
node 2 1.00
node 3 1.50
node 4 2.00
node 5 3.00
edge 0 1 -silence- 1 0
edge 0 2 i 10 5
edge 1 2 i 2 1
edge 1 3 going_to 6 4
edge 2 3 go 3 2
edge 3 4 the 2 2
edge 3 5 -silence- 8 0
edge 4 5 store 1 3
"""

def make_lattice_text(utterance_id, times, edges, start=0, end=None):
    """Build a lattice description from node times and (src, dst, label, am, lm) edges"""
    if end is None:
        end = len(times) - 1
    lines = [
        f"id {utterance_id}",
        f"start {start}",
        f"end {end}",
        f"numNodes {len(times)}",
        f"numEdges {len(edges)}",
    ]
    lines += [f"node {i} {t}" for i, t in enumerate(times)]
    lines += [f"edge {s} {d} {label} {am} {lm}" for s, d, label, am, lm in edges]
    return "\n".join(lines) + "\n"

@pytest.fixture
def hello_world_text():
    """Three node lattice reading hello world"""
    return HELLO_WORLD

@pytest.fixture
def branching_text():
    """Six node lattice with silence, multiwords and competing paths"""
    return BRANCHING

@pytest.fixture
def hello_world_lattice():
    return Lattice.parse(HELLO_WORLD)

@pytest.fixture
def branching_lattice():
    return Lattice.parse(BRANCHING)

@pytest.fixture
def diamond_lattice():
    """Two paths: 0 -> 1 -> 3 and 0 -> 2 -> 3"""
    return Lattice.parse(make_lattice_text(
        "diamond",
        [0.0, 1.0, 1.0, 2.0],
        [
            (0, 1, "a", 1, 1),
            (0, 2, "b", 2, 2),
            (1, 3, "c", 1, 1),
            (2, 3, "d", 1, 1),
        ]
    ))

@pytest.fixture
def lattice_inputs(tmp_path):
    """Lattice and reference files for both sample utterances plus a list file"""
    input_dir = tmp_path / "input"
    input_dir.mkdir()

    files = {
        "utt1": (HELLO_WORLD, "hello world\n"),
        "utt2": (BRANCHING, "i go to the store\nsecond line is ignored\n"),
    }
    pairs = []
    for name, (lattice_text, reference_text) in files.items():
        lattice_path = input_dir / f"{name}.lattice"
        reference_path = input_dir / f"{name}.ref"
        lattice_path.write_text(lattice_text)
        reference_path.write_text(reference_text)
        pairs.append((lattice_path, reference_path))

    list_path = input_dir / "lattices.list"
    list_path.write_text("".join(f"{lat} {ref}\n" for lat, ref in pairs))

    return {
        'input_dir': input_dir,
        'output_dir': tmp_path / "output",
        'list_path': list_path,
        'pairs': pairs
    }

def pytest_configure(config):
    """Custom pytest configuration"""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test"
    )

def pytest_collection_modifyitems(items):
    """Mark pipeline and command line tests as integration tests"""
    for item in items:
        if "test_pipeline" in item.nodeid or "test_main" in item.nodeid:
            item.add_marker(pytest.mark.integration)
