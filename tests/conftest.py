import logging
import sys
from collections import deque
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # configure_logging() replaces root handlers; put pytest's back afterwards
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)


def flood_fill(start, cells):
    """4-connected component of ``start`` within ``cells``."""
    seen = {start}
    queue = deque([start])
    while queue:
        c = queue.popleft()
        for n in c.neighbors4():
            if n in cells and n not in seen:
                seen.add(n)
                queue.append(n)
    return seen


@pytest.fixture()
def reachable():
    return flood_fill
