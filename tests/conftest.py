from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from modbuilder.api.main import app
from modbuilder.core.module_spec import AssemblyRequest, Dependency, ModuleOptions, ProjectLayout
from modbuilder.core.observability.metrics import reset_metrics


@pytest.fixture(autouse=True)
def _reset_counters():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch) -> Path:
    ws = tmp_path / "workspace"
    ws.mkdir()
    monkeypatch.setenv("MODBUILDER_WORKSPACE_ROOT", str(ws))
    return ws


@pytest.fixture()
def client(workspace):
    return TestClient(app)


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    """
    A small compiled project:

      target/classes/com/acme/App.class
      target/classes/config.json
      src/main/scripts/app.js
      src/main/scripts/lib/util.js
      libs/{core-1.0.jar, rt-1.0.jar, test-1.0.jar, provided-1.0.jar}
    """
    root = tmp_path / "project"
    classes = root / "target" / "classes"
    (classes / "com" / "acme").mkdir(parents=True)
    (classes / "com" / "acme" / "App.class").write_bytes(b"\xca\xfe\xba\xbe")
    (classes / "config.json").write_text('{"port": 8080}', encoding="utf-8")

    scripts = root / "src" / "main" / "scripts"
    (scripts / "lib").mkdir(parents=True)
    (scripts / "app.js").write_text("load('lib/util.js');", encoding="utf-8")
    (scripts / "lib" / "util.js").write_text("// util", encoding="utf-8")

    libs = root / "libs"
    libs.mkdir()
    for name in ("core-1.0.jar", "rt-1.0.jar", "test-1.0.jar", "provided-1.0.jar"):
        (libs / name).write_bytes(name.encode("utf-8"))

    return root


@pytest.fixture()
def request_for(project: Path):
    def _make(output_directory: Path, **option_overrides) -> AssemblyRequest:
        libs = project / "libs"
        layout = ProjectLayout(
            group_id="com.acme",
            artifact_id="orders",
            version="1.0",
            build_directory=str(project / "target"),
            classes_directory=str(project / "target" / "classes"),
            script_source_roots=[str(project / "src" / "main" / "scripts"), "", None],
            dependencies=[
                Dependency(artifact_id="core", scope="compile", file=str(libs / "core-1.0.jar")),
                Dependency(artifact_id="rt", scope="runtime", file=str(libs / "rt-1.0.jar")),
                Dependency(artifact_id="test", scope="test", file=str(libs / "test-1.0.jar")),
                Dependency(artifact_id="provided", scope="provided", file=str(libs / "provided-1.0.jar")),
                Dependency(artifact_id="unresolved", scope="compile"),
                None,
            ],
        )
        options = ModuleOptions(output_directory=str(output_directory), **option_overrides)
        return AssemblyRequest(layout=layout, options=options)

    return _make
