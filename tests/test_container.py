from kubeforge.building.container import build_container, build_containers


def test_minimal_container():
    assert build_container({"id": "c-1", "name": "web", "image": "nginx:latest"}) == {
        "name": "web",
        "image": "nginx:latest",
    }


def test_empty_lists_are_suppressed():
    """EMPTY SUPPRESSION: `env: []` never shows up in the spec."""
    spec = build_container({"name": "c", "image": "i", "env": [], "ports": [], "command": []})
    assert "env" not in spec
    assert "ports" not in spec
    assert "command" not in spec


def test_false_flags_survive():
    """ZERO/FALSE TEST: stdin: false is data, not noise."""
    spec = build_container({"name": "c", "image": "i", "stdin": False, "tty": False})
    assert spec["stdin"] is False
    assert spec["tty"] is False


def test_optional_groups():
    container = {
        "name": "api",
        "image": "registry.local/api:1.2",
        "imagePullPolicy": "IfNotPresent",
        "command": ["/bin/api"],
        "args": ["--port", "8080"],
        "ports": [{"containerPort": 8080}],
        "env": [{"name": "MODE", "value": "prod"}],
        "resources": {"limits": {"cpu": "500m"}, "requests": None},
        "lifecycle": {"preStop": {"exec": {"command": ["sleep", "5"]}}, "postStart": None},
        "livenessProbe": {"httpGet": {"path": "/healthz", "port": 8080}},
        "readinessProbe": None,
        "securityContext": {"runAsNonRoot": True},
        "terminationMessagePolicy": "FallbackToLogsOnError",
    }
    spec = build_container(container)

    # 1. Requested groups are present
    assert spec["command"] == ["/bin/api"]
    assert spec["resources"] == {"limits": {"cpu": "500m"}}
    assert spec["lifecycle"] == {"preStop": {"exec": {"command": ["sleep", "5"]}}}
    assert spec["livenessProbe"]["httpGet"]["path"] == "/healthz"

    # 2. Unset groups are absent
    assert "readinessProbe" not in spec
    assert "startupProbe" not in spec

    # 3. name/image always lead
    assert list(spec)[:2] == ["name", "image"]


def test_empty_nested_groups_are_dropped():
    spec = build_container({"name": "c", "image": "i", "resources": {}, "lifecycle": {"postStart": None}})
    assert "resources" not in spec
    assert "lifecycle" not in spec


def test_invalid_values_pass_through():
    """No validation: an out-of-range port and an odd image are emitted unchanged."""
    spec = build_container({"name": "c", "image": "not a ref", "ports": [{"containerPort": 99999}]})
    assert spec["image"] == "not a ref"
    assert spec["ports"] == [{"containerPort": 99999}]


def test_build_containers_preserves_order():
    built = build_containers([{"name": "a", "image": "x"}, {"name": "b", "image": "y"}])
    assert [c["name"] for c in built] == ["a", "b"]
    assert build_containers(None) == []
