from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _project_is_readable(project, monkeypatch):
    monkeypatch.setenv("MODBUILDER_INPUT_ROOT", str(project))


def _payload(project: Path, **options):
    return {
        "layout": {
            "group_id": "com.acme",
            "artifact_id": "orders",
            "version": "1.0",
            "classes_directory": str(project / "target" / "classes"),
            "script_source_roots": [str(project / "src" / "main" / "scripts")],
            "dependencies": [
                {"artifact_id": "core", "scope": "compile", "file": str(project / "libs" / "core-1.0.jar")},
                {"artifact_id": "prov", "scope": "provided", "file": str(project / "libs" / "provided-1.0.jar")},
            ],
        },
        "options": options,
    }


def test_descriptor_preview(client):
    r = client.post("/api/v1/modules/descriptor", json={"main": "app.js", "auto_redeploy": True, "worker": False})
    assert r.status_code == 200, r.text
    assert r.json() == {"file": "mod.json", "descriptor": {"main": "app.js", "auto-redeploy": True}}


def test_assemble_relative_output_lands_in_workspace(client, workspace, project):
    r = client.post("/api/v1/modules/assemble", json=_payload(project, output_directory="mods", main="app.js"))
    assert r.status_code == 200, r.text
    body = r.json()

    module_dir = workspace.resolve() / "mods" / "com.acme.orders-v1.0"
    assert body["message"] == "assembled"
    assert body["module_dir"] == str(module_dir)
    assert body["descriptor"] == {"main": "app.js"}
    assert (module_dir / "lib" / "core-1.0.jar").exists()
    assert [d["artifact_id"] for d in body["skipped_dependencies"]] == ["prov"]


def test_assemble_defaults_output_to_workspace_build_directory(client, workspace, project):
    payload = _payload(project, module_name="m")
    payload["layout"]["build_directory"] = "build"
    r = client.post("/api/v1/modules/assemble", json=payload)
    assert r.status_code == 200, r.text
    assert (workspace / "build" / "m" / "mod.json").exists()


def test_output_outside_workspace_is_rejected(client, tmp_path, project):
    r = client.post(
        "/api/v1/modules/assemble",
        json=_payload(project, output_directory=str(tmp_path / "evil")),
    )
    assert r.status_code == 400, r.text
    assert "workspace" in r.text.lower()
    assert not (tmp_path / "evil").exists()


def test_module_name_traversal_is_rejected(client, project):
    for name in ("../escape", "a/b", ".."):
        r = client.post("/api/v1/modules/assemble", json=_payload(project, output_directory="mods", module_name=name))
        assert r.status_code == 400, r.text
        assert "module_name" in r.text


def test_missing_name_inputs_is_400(client):
    r = client.post("/api/v1/modules/assemble", json={"options": {"output_directory": "mods"}})
    assert r.status_code == 400
    assert "module name is required" in r.json()["detail"]


def test_assembly_failure_is_400_with_request_id(client, project):
    payload = _payload(project, output_directory="mods", module_name="m")
    payload["layout"]["dependencies"] = [{"scope": "compile", "file": str(project / "libs" / "gone.jar")}]
    r = client.post("/api/v1/modules/assemble", json=payload, headers={"X-Request-Id": "rid-123"})
    assert r.status_code == 400
    body = r.json()
    assert "unable to copy dependency" in body["detail"]
    assert body["request_id"] == "rid-123"
    assert r.headers["X-Request-Id"] == "rid-123"
    assert "Traceback" not in r.text


def test_invalid_body_is_422(client):
    r = client.post("/api/v1/modules/assemble", json={"options": {"worker": "definitely"}})
    assert r.status_code == 422


def test_classes_directory_outside_input_root_is_rejected(client, workspace, project, tmp_path):
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "id_rsa").write_text("PRIVATE", encoding="utf-8")
    payload = _payload(project, output_directory="mods", module_name="m")
    payload["layout"]["classes_directory"] = str(outside)

    r = client.post("/api/v1/modules/assemble", json=payload)

    assert r.status_code == 400, r.text
    assert "classes_directory" in r.json()["detail"]
    assert not (workspace / "mods" / "m").exists()


def test_dependency_file_outside_input_root_is_rejected(client, workspace, project, tmp_path):
    secret = tmp_path / "secret" / "id_rsa"
    secret.parent.mkdir()
    secret.write_text("PRIVATE", encoding="utf-8")
    payload = _payload(project, output_directory="mods", module_name="m")
    payload["layout"]["dependencies"] = [{"scope": "compile", "file": str(secret)}]

    r = client.post("/api/v1/modules/assemble", json=payload)

    assert r.status_code == 400, r.text
    assert "dependencies" in r.json()["detail"]
    assert not (workspace / "mods" / "m").exists()


def test_input_traversal_through_relative_paths_is_rejected(client, workspace, project):
    payload = _payload(project, output_directory="mods", module_name="m")
    payload["layout"]["script_source_roots"] = ["../../etc"]

    r = client.post("/api/v1/modules/assemble", json=payload)

    assert r.status_code == 400, r.text
    assert "script_source_roots" in r.json()["detail"]


def test_inputs_default_to_workspace_root(client, workspace, project, monkeypatch):
    monkeypatch.delenv("MODBUILDER_INPUT_ROOT")

    r = client.post("/api/v1/modules/assemble", json=_payload(project, output_directory="mods", module_name="m"))
    assert r.status_code == 400, r.text
    assert "input root" in r.json()["detail"]

    (workspace / "src").mkdir()
    (workspace / "src" / "app.js").write_text("//", encoding="utf-8")
    r = client.post(
        "/api/v1/modules/assemble",
        json={"layout": {"script_source_roots": ["src"]}, "options": {"output_directory": "mods", "module_name": "m"}},
    )
    assert r.status_code == 200, r.text
    assert (workspace / "mods" / "m" / "app.js").exists()
