from kubeforge.building.batch import build_cronjob, build_job, build_job_spec

CONTAINERS = [{"name": "task", "image": "busybox"}]


def test_failure_rule_pruning():
    """RULE PRUNING: unset onExitCodes/onPodConditions leave only the action."""
    spec = build_job_spec({"podFailurePolicy": {"rules": [
        {"action": "Ignore", "onExitCodes": None, "onPodConditions": None},
    ]}})
    assert spec["podFailurePolicy"]["rules"][0] == {"action": "Ignore"}


def test_failure_rule_details():
    spec = build_job_spec({"podFailurePolicy": {"rules": [
        {"id": "r1", "action": "FailJob",
         "onExitCodes": {"containerName": "", "operator": "In", "values": [42]},
         "onPodConditions": [{"type": "DisruptionTarget", "status": "True", "id": "c1"}]},
        {"action": ""},
    ]}})
    assert spec["podFailurePolicy"]["rules"] == [{
        "action": "FailJob",
        "onExitCodes": {"operator": "In", "values": [42]},
        "onPodConditions": [{"type": "DisruptionTarget", "status": "True"}],
    }]


def test_success_policy_and_zero_values():
    spec = build_job_spec({
        "backoffLimit": 0,
        "suspend": False,
        "parallelism": None,
        "successPolicy": {"rules": [{"succeededCount": 1, "succeededIndexes": ""}]},
    })
    assert spec["backoffLimit"] == 0
    assert spec["suspend"] is False
    assert "parallelism" not in spec
    assert spec["successPolicy"] == {"rules": [{"succeededCount": 1}]}


def test_job_document():
    doc = build_job("migrate", {"spec": {"completions": 1}, "template": {"restartPolicy": "Never"}},
                    CONTAINERS, namespace="ops")
    assert doc["apiVersion"] == "batch/v1"
    assert doc["spec"]["completions"] == 1
    assert doc["spec"]["template"]["spec"]["restartPolicy"] == "Never"


def test_cronjob_nests_job_template():
    config = {"spec": {
        "schedule": "*/5 * * * *",
        "concurrencyPolicy": "Forbid",
        "jobTemplate": {
            "metadata": {"labels": {"job": "sync"}},
            "spec": {"backoffLimit": 2},
            "template": {"restartPolicy": "OnFailure"},
        },
    }}
    spec = build_cronjob("sync", config, CONTAINERS)["spec"]

    assert spec["schedule"] == "*/5 * * * *"
    assert spec["jobTemplate"]["metadata"] == {"labels": {"job": "sync"}}
    assert spec["jobTemplate"]["spec"]["backoffLimit"] == 2
    pod_spec = spec["jobTemplate"]["spec"]["template"]["spec"]
    assert pod_spec["restartPolicy"] == "OnFailure"
    assert pod_spec["containers"] == CONTAINERS


def test_cronjob_without_pod():
    spec = build_cronjob("noop", {"spec": {"schedule": "@daily"}}, [])["spec"]
    assert "template" not in spec["jobTemplate"]["spec"]
