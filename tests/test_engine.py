import pytest

from kubeforge.core.engine import (
    ManifestEngine,
    generate_cronjob_yaml,
    generate_daemonset_yaml,
    generate_deployment_yaml,
    generate_job_yaml,
    generate_manifest,
    generate_platform_yaml,
    generate_pod_yaml,
    generate_replicaset_yaml,
    generate_resource_yaml,
    generate_statefulset_yaml,
)
from kubeforge.core.errors import BuildError, ValidationError
from kubeforge.core.models import RouteDefaults

CONTAINERS = [{"id": "c1", "name": "web", "image": "nginx:latest", "env": []}]


def test_pod_generation(load_yaml):
    doc = load_yaml(generate_pod_yaml("mypod", {"labels": {"app": "x"}}, CONTAINERS, "default"))

    assert doc["apiVersion"] == "v1"
    assert doc["kind"] == "Pod"
    assert doc["metadata"] == {"name": "mypod", "namespace": "default", "labels": {"app": "x"}}
    assert doc["spec"]["containers"][0] == {"name": "web", "image": "nginx:latest"}


@pytest.mark.parametrize("generate, kind, api_version", [
    (generate_deployment_yaml, "Deployment", "apps/v1"),
    (generate_replicaset_yaml, "ReplicaSet", "apps/v1"),
    (generate_daemonset_yaml, "DaemonSet", "apps/v1"),
    (generate_statefulset_yaml, "StatefulSet", "apps/v1"),
    (generate_job_yaml, "Job", "batch/v1"),
])
def test_workload_entry_points(generate, kind, api_version, load_yaml):
    config = {"spec": {"selector": {"matchLabels": {"app": "web"}}}, "template": {"labels": {"app": "web"}}}
    doc = load_yaml(generate("web", config, CONTAINERS, "shop"))

    assert doc["kind"] == kind
    assert doc["apiVersion"] == api_version
    assert doc["metadata"]["namespace"] == "shop"
    assert doc["spec"]["template"]["spec"]["containers"] == [{"name": "web", "image": "nginx:latest"}]


def test_cronjob_entry_point(load_yaml):
    doc = load_yaml(generate_cronjob_yaml("tick", {"spec": {"schedule": "@hourly"}}, CONTAINERS))
    assert doc["spec"]["jobTemplate"]["spec"]["template"]["spec"]["containers"][0]["name"] == "web"


def test_no_synthetic_ids_or_empty_values(load_yaml, all_keys):
    """NOISE FREE: the output never carries `id` keys, nulls or empty collections."""
    config = {
        "namespace": "",
        "labels": {},
        "spec": {"replicas": 2, "selector": {"matchLabels": {"app": "web"}}},
        "template": {"labels": {"app": "web"}, "tolerations": [{"id": "t1"}],
                     "volumes": [{"id": "v1", "name": "data", "emptyDir": {}}]},
    }
    doc = load_yaml(generate_deployment_yaml("web", config, CONTAINERS))

    assert "id" not in all_keys(doc)
    assert "labels" not in doc["metadata"]
    assert "namespace" not in doc["metadata"]
    pod_spec = doc["spec"]["template"]["spec"]
    assert "tolerations" not in pod_spec
    assert pod_spec["volumes"] == [{"name": "data"}]


def test_http_route_fixed_parent(load_yaml):
    doc = load_yaml(generate_resource_yaml("r", "HTTPRoute", {"spec": {}}, "team-a"))
    assert doc["spec"]["parentRefs"] == [{"name": "platform-gateway", "namespace": "envoy-gateway-system"}]


def test_custom_route_defaults(load_yaml):
    engine = ManifestEngine(route_defaults=RouteDefaults(gateway_name="edge", gateway_namespace="infra"))
    doc = load_yaml(engine.generate("HTTPRoute", "r", {"spec": {}}, namespace="team-a"))
    assert doc["spec"]["parentRefs"] == [{"name": "edge", "namespace": "infra"}]


def test_statefulset_empty_claims(load_yaml):
    doc = load_yaml(generate_statefulset_yaml("db", {"spec": {"volumeClaimTemplates": []}}, CONTAINERS))
    assert "volumeClaimTemplates" not in doc["spec"]


def test_job_rule_pruning(load_yaml):
    config = {"spec": {"podFailurePolicy": {"rules": [
        {"action": "Ignore", "onExitCodes": None, "onPodConditions": None}]}}}
    doc = load_yaml(generate_job_yaml("j", config, CONTAINERS))
    assert doc["spec"]["podFailurePolicy"]["rules"] == [{"action": "Ignore"}]


def test_generation_is_deterministic():
    config = {"spec": {"replicas": 1}}
    assert generate_deployment_yaml("a", config, CONTAINERS) == generate_deployment_yaml("a", config, CONTAINERS)


@pytest.mark.parametrize("config, containers", [
    ("not-a-map", []),
    ({}, "web"),
    ({}, ["web"]),
])
def test_malformed_input_raises(config, containers):
    with pytest.raises(BuildError):
        ManifestEngine().build("Pod", "p", config, containers)


def test_kind_is_required():
    with pytest.raises(BuildError):
        ManifestEngine().build("", "p", {}, [])


def test_entry_without_type_raises():
    with pytest.raises(BuildError):
        ManifestEngine().build_entry({"name": "x"})


def test_render_reports_issues():
    result = ManifestEngine().render("Pod", "p", {}, [{"name": "web"}])
    assert not result.valid
    assert result.name == "p"
    assert result.api_version == "v1"
    assert any(i.path == "spec.containers[0].image" for i in result.issues)


def test_strict_mode_raises():
    with pytest.raises(ValidationError) as excinfo:
        ManifestEngine(strict=True).render("Pod", "p", {}, [{"name": "web"}])
    assert excinfo.value.issues


def test_multi_document_manifest(load_all_yaml):
    workloads = [{"name": "web", "type": "Deployment", "config": {"spec": {"replicas": 2}},
                  "containers": [{"name": "web", "image": "nginx"}]}]
    resources = [
        {"name": "web", "type": "Service", "config": {"spec": {"ports": [{"port": 80}]}}},
        {"name": "settings", "type": "ConfigMap", "data": {"MODE": "prod"}},
    ]
    docs = load_all_yaml(generate_manifest(workloads, resources, "shop"))

    assert [d["kind"] for d in docs] == ["Deployment", "Service", "ConfigMap"]
    assert all(d["metadata"]["namespace"] == "shop" for d in docs)
    assert docs[2]["data"] == {"MODE": "prod"}


def test_platform_yaml(load_all_yaml):
    workloads = [{"name": "web", "containers": [{"ports": [{"containerPort": 8080}]}]}]
    docs = load_all_yaml(generate_platform_yaml(workloads, {"namespace": "shop"}))

    kinds = [d["kind"] for d in docs]
    assert kinds[:3] == ["Namespace", "Service", "HTTPRoute"]
    policy = next(d for d in docs if d["kind"] == "NetworkPolicy")
    assert policy["spec"]["podSelector"] == {}


def test_platform_yaml_disabled():
    assert generate_platform_yaml([], {"namespace": "shop"}, False, False) == ""


def test_blank_affinity_rows_leave_no_affinity(load_yaml):
    config = {"affinity": {"nodeAffinity": {"preferredDuringScheduling": {
        "nodeAffinityTerm": {"matchExpressions": [{"id": "1", "key": "", "values": []}]},
    }}}}
    doc = load_yaml(generate_pod_yaml("p", config, CONTAINERS))
    assert "affinity" not in doc["spec"]
