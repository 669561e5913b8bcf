from ruamel.yaml import YAML

from kubeforge.cli.main import KubeForgeCLI

ENTRIES = """
- name: web
  type: Deployment
  config:
    spec:
      replicas: 2
      selector:
        matchLabels:
          app: web
  containers:
    - name: web
      image: nginx:latest
- name: web
  type: Service
  config:
    spec:
      ports:
        - port: 80
"""


def test_generate_writes_output(tmp_path):
    source = tmp_path / "entries.yaml"
    source.write_text(ENTRIES)
    target = tmp_path / "manifest.yaml"

    code = KubeForgeCLI().run(["generate", str(source), "-o", str(target), "-n", "shop"])

    assert code == 0
    docs = list(YAML(typ='safe').load_all(target.read_text()))
    assert [d["kind"] for d in docs] == ["Deployment", "Service"]
    assert docs[0]["metadata"]["namespace"] == "shop"


def test_generate_diff_against_existing(tmp_path):
    source = tmp_path / "entries.yaml"
    source.write_text(ENTRIES)
    target = tmp_path / "manifest.yaml"
    target.write_text("apiVersion: v1\n")

    assert KubeForgeCLI().run(["generate", str(source), "-o", str(target), "--diff"]) == 0
    assert "Deployment" in target.read_text()


def test_strict_generation_fails(tmp_path):
    source = tmp_path / "pod.yaml"
    source.write_text("name: p\ntype: Pod\ncontainers:\n  - name: web\n")
    assert KubeForgeCLI().run(["generate", str(source), "--strict"]) == 1


def test_missing_file_fails(tmp_path):
    assert KubeForgeCLI().run(["generate", str(tmp_path / "absent.yaml")]) == 1


def test_invalid_yaml_fails(tmp_path):
    source = tmp_path / "bad.yaml"
    source.write_text("key: [unclosed\n")
    assert KubeForgeCLI().run(["generate", str(source)]) == 1


def test_platform_command(tmp_path):
    source = tmp_path / "platform.yaml"
    source.write_text(
        "global:\n  namespace: shop\n"
        "workloads:\n  - name: web\n    containers:\n      - ports:\n          - containerPort: 8080\n"
    )
    target = tmp_path / "bundle.yaml"

    assert KubeForgeCLI().run(["platform", str(source), "-o", str(target), "--gateway-name", "edge"]) == 0
    route = next(d for d in YAML(typ='safe').load_all(target.read_text()) if d["kind"] == "HTTPRoute")
    assert route["spec"]["parentRefs"][0]["name"] == "edge"


def test_platform_rejects_list(tmp_path):
    source = tmp_path / "platform.yaml"
    source.write_text("- a\n")
    assert KubeForgeCLI().run(["platform", str(source)]) == 1


def test_kinds_and_help():
    assert KubeForgeCLI().run(["kinds"]) == 0
    assert KubeForgeCLI().run([]) == 0
