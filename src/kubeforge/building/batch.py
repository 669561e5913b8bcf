#!/usr/bin/env python3
"""
KUBEFORGE BATCH BUILDERS
------------------------
Job and CronJob manifests. A CronJob nests a complete job specification
under `spec.jobTemplate`, so both kinds share the job-control field list
and the pod failure / success policy rule builders below.

Author: KubeForge Team
Date: 2026-10-18
"""

from typing import Any, Dict, List, Mapping, Optional

from kubeforge.building.pod import build_metadata, build_pod_template
from kubeforge.building.pruner import copy_fields, prune
from kubeforge.core.catalog import api_version_for

JOB_FIELDS = (
    "activeDeadlineSeconds", "backoffLimit", "backoffLimitPerIndex", "completionMode",
    "completions", "manualSelector", "maxFailedIndexes", "parallelism",
    "podReplacementPolicy", "suspend", "ttlSecondsAfterFinished", "selector",
)
CRONJOB_FIELDS = (
    "schedule", "timeZone", "concurrencyPolicy", "suspend", "startingDeadlineSeconds",
    "successfulJobsHistoryLimit", "failedJobsHistoryLimit",
)


def _failure_rule(rule: Mapping) -> Dict[str, Any]:
    built = copy_fields({}, rule, ("action",))

    exit_codes = rule.get("onExitCodes")
    if isinstance(exit_codes, Mapping):
        built["onExitCodes"] = copy_fields({}, exit_codes, ("containerName", "operator", "values"))

    conditions = rule.get("onPodConditions")
    if conditions:
        built["onPodConditions"] = [
            copy_fields({}, c, ("type", "status")) for c in conditions if isinstance(c, Mapping)
        ]
    return prune(built)


def _success_rule(rule: Mapping) -> Dict[str, Any]:
    return prune(copy_fields({}, rule, ("succeededCount", "succeededIndexes")))


def _rules(policy: Any, build_rule) -> List[Dict[str, Any]]:
    if not isinstance(policy, Mapping):
        return []
    rules = [build_rule(r) for r in policy.get("rules") or [] if isinstance(r, Mapping)]
    return [r for r in rules if r]


def build_job_spec(source: Optional[Mapping]) -> Dict[str, Any]:
    """Job-control fields and policy rules, without the pod template."""
    source = source or {}
    spec = copy_fields({}, source, JOB_FIELDS)

    failure_rules = _rules(source.get("podFailurePolicy"), _failure_rule)
    if failure_rules:
        spec["podFailurePolicy"] = {"rules": failure_rules}

    success_rules = _rules(source.get("successPolicy"), _success_rule)
    if success_rules:
        spec["successPolicy"] = {"rules": success_rules}

    return spec


def build_job(name: str, config: Optional[Mapping], containers: Any,
              namespace: Optional[str] = None) -> Dict[str, Any]:
    config = config or {}
    spec = build_job_spec(config.get("spec"))
    spec["template"] = build_pod_template(config.get("template"), containers)

    return {
        "apiVersion": api_version_for("Job"),
        "kind": "Job",
        "metadata": build_metadata(name, config, namespace),
        "spec": spec,
    }


def build_cronjob(name: str, config: Optional[Mapping], containers: Any,
                  namespace: Optional[str] = None) -> Dict[str, Any]:
    """
    The nested pod template is built when the job template records one or
    when containers were supplied; otherwise the job template has no pod.
    """
    config = config or {}
    source = config.get("spec") or {}
    spec = copy_fields({}, source, CRONJOB_FIELDS)

    job_template = source.get("jobTemplate") or {}
    job_source = job_template.get("spec") or {}
    job_spec = build_job_spec(job_source)

    pod_template = job_template.get("template") or job_source.get("template")
    if isinstance(pod_template, Mapping) or containers:
        job_spec["template"] = build_pod_template(pod_template, containers)

    spec["jobTemplate"] = {
        "metadata": copy_fields({}, job_template.get("metadata") or {}, ("labels", "annotations")),
        "spec": job_spec,
    }

    return {
        "apiVersion": api_version_for("CronJob"),
        "kind": "CronJob",
        "metadata": build_metadata(name, config, namespace),
        "spec": spec,
    }
