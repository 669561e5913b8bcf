import pytest
from ruamel.yaml import YAML


def _walk_keys(node):
    """Yields every mapping key anywhere inside a parsed manifest."""
    if isinstance(node, dict):
        for key, value in node.items():
            yield key
            yield from _walk_keys(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk_keys(item)


@pytest.fixture
def load_yaml():
    parser = YAML(typ='safe')
    return parser.load


@pytest.fixture
def load_all_yaml():
    parser = YAML(typ='safe')
    return lambda text: [d for d in parser.load_all(text) if d is not None]


@pytest.fixture
def all_keys():
    return lambda doc: list(_walk_keys(doc))
