"""
Package Manager Tests

1. Create: argument validation, archive resolution, initial build status
2. Update: dependents block without force, status transitions, re-pointing
3. Delete: blocked by dependents unless forced
4. Reads: info / list rendering, download of archives
"""

import re
from unittest.mock import Mock

import pytest

from core.schemas import (
    ARCHIVE_LITERAL_SIZE_LIMIT,
    Archive,
    ArchiveType,
    BuildStatus,
    ConflictException,
    FileAccessException,
    Function,
    MissingArgumentException,
    NotFoundException,
    PersistException,
)
from controller import InMemoryResourceClient
from lifecycle import generate_package_name

from fixtures import SERVER_URL, make_function, make_manager, make_package, make_response


def _seed(store, pkg_name="pkg1", status=BuildStatus.SUCCEEDED, functions=()):
    """Store a package plus functions referencing it; return the stored package."""
    meta = store.package_create(make_package(pkg_name, status=status))
    for fn_name in functions:
        store.function_create(make_function(fn_name, pkg_name, meta.resource_version))
    return store.package_get(pkg_name)


# =============================================================================
# Create
# =============================================================================

class TestCreate:

    def test_requires_env(self, manager, write_file, storage):
        with pytest.raises(MissingArgumentException):
            manager.create("", src=write_file("handler.py", size=50))
        assert storage.uploads == []

    def test_requires_an_archive(self, manager, store):
        with pytest.raises(MissingArgumentException):
            manager.create("python")
        assert store.package_list() == []

    def test_source_only_is_pending(self, manager, store, write_file):
        src = write_file("handler.py", size=50)

        pkg = manager.create("python", src=src)

        stored = store.package_get(pkg.name)
        assert stored.build_status == BuildStatus.PENDING
        assert stored.spec.source.type == ArchiveType.LITERAL
        assert stored.spec.source.literal == src.read_bytes()
        assert stored.spec.deployment is None
        assert stored.spec.environment.name == "python"

    def test_deployment_only_is_succeeded(self, manager, store, write_file):
        pkg = manager.create("python", deploy=write_file("bin.zip", size=100))
        assert store.package_get(pkg.name).build_status == BuildStatus.SUCCEEDED

    def test_source_and_deployment_is_pending(self, manager, store, write_file, caplog):
        pkg = manager.create(
            "python",
            src=write_file("handler.py", size=50),
            deploy=write_file("bin.zip", size=100),
        )

        stored = store.package_get(pkg.name)
        assert stored.build_status == BuildStatus.PENDING
        assert stored.spec.source is not None
        assert stored.spec.deployment is not None
        assert "may be overwritten" in caplog.text

    def test_large_deployment_is_uploaded(self, manager, store, storage, write_file):
        deploy = write_file("bin.zip", size=10 * 1024 * 1024)

        pkg = manager.create("python", deploy=deploy)

        stored = store.package_get(pkg.name)
        assert stored.build_status == BuildStatus.SUCCEEDED
        assert stored.spec.deployment.type == ArchiveType.URL
        assert stored.spec.deployment.literal == b""
        assert storage.uploads == [deploy]

    def test_name_is_generated_lowercase(self, manager, write_file):
        pkg = manager.create("python", src=write_file("handler.py", size=50))
        assert re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", pkg.name)
        assert pkg.resource_version

    def test_generated_names_differ(self):
        assert generate_package_name() != generate_package_name()

    def test_description_and_namespace(self, manager, write_file):
        pkg = manager.create("go", deploy=write_file("bin", size=10), description="my fn")
        assert pkg.spec.description == "my fn"
        assert pkg.spec.environment.namespace == "default"

    def test_missing_file(self, manager, store, tmp_path):
        with pytest.raises(FileAccessException):
            manager.create("python", src=tmp_path / "missing.py")
        assert store.package_list() == []

    def test_store_failure_is_persist_error(self, tmp_path, write_file):
        client = Mock(spec=InMemoryResourceClient)
        client.package_create.side_effect = PersistException("store unavailable")
        manager = make_manager(tmp_path / "dl", client=client)

        with pytest.raises(PersistException):
            manager.create("python", src=write_file("handler.py", size=50))


# =============================================================================
# Update
# =============================================================================

class TestUpdate:

    def test_requires_a_change(self, manager, store):
        _seed(store)
        with pytest.raises(MissingArgumentException):
            manager.update("pkg1")

    def test_missing_package(self, manager):
        with pytest.raises(NotFoundException):
            manager.update("nope", description="x")

    @pytest.mark.parametrize("prior", list(BuildStatus))
    def test_source_change_sets_pending(self, manager, store, write_file, prior):
        _seed(store, status=prior)

        manager.update("pkg1", src=write_file("handler.py", size=50))

        assert store.package_get("pkg1").build_status == BuildStatus.PENDING

    def test_env_change_sets_pending(self, manager, store):
        _seed(store, status=BuildStatus.FAILED)

        pkg = manager.update("pkg1", env="nodejs")

        stored = store.package_get("pkg1")
        assert stored.build_status == BuildStatus.PENDING
        assert stored.spec.environment.name == "nodejs"
        assert pkg.resource_version == stored.resource_version

    def test_env_change_keeps_environment_namespace(self, manager, store):
        pkg = make_package("pkg1")
        pkg.spec.environment.namespace = "team-b"
        store.package_create(pkg)

        manager.update("pkg1", env="nodejs")

        env = store.package_get("pkg1").spec.environment
        assert (env.namespace, env.name) == ("team-b", "nodejs")

    def test_force_keeps_function_labels(self, manager, store):
        _seed(store)
        wire = make_function("fn1", "pkg1").to_wire()
        wire["metadata"]["labels"] = {"team": "a"}
        store.function_create(Function.model_validate(wire))

        manager.update("pkg1", description="x", force=True)

        fn = store.function_get("fn1")
        assert fn.to_wire()["metadata"]["labels"] == {"team": "a"}
        assert fn.spec.package.package_ref.resource_version == store.package_get("pkg1").resource_version

    def test_deployment_change_keeps_status(self, manager, store, write_file):
        _seed(store, status=BuildStatus.FAILED)

        manager.update("pkg1", deploy=write_file("bin.zip", size=100))

        stored = store.package_get("pkg1")
        assert stored.build_status == BuildStatus.FAILED
        assert stored.spec.deployment.literal == bytes(i % 251 for i in range(100))

    def test_description_change_keeps_status(self, manager, store):
        _seed(store, status=BuildStatus.RUNNING)

        manager.update("pkg1", description="new text")

        stored = store.package_get("pkg1")
        assert stored.build_status == BuildStatus.RUNNING
        assert stored.spec.description == "new text"

    def test_build_log_kept_on_rebuild(self, manager, store):
        store.package_create(make_package("pkg1", status=BuildStatus.FAILED, build_log="error: x"))

        manager.update("pkg1", env="python3")

        assert store.package_get("pkg1").spec.status.build_log == "error: x"

    def test_dependents_block_without_force(self, manager, store, storage, write_file):
        before = _seed(store, functions=["fn1"])
        big = write_file("bin.zip", size=ARCHIVE_LITERAL_SIZE_LIMIT)

        for _ in range(2):
            with pytest.raises(ConflictException) as exc_info:
                manager.update("pkg1", deploy=big, description="x")
            assert exc_info.value.dependents == ["fn1"]

        assert store.package_get("pkg1") == before
        assert storage.uploads == []

    def test_force_repoints_every_dependent(self, manager, store):
        _seed(store, functions=["fn1", "fn2", "fn3"])
        store.function_create(make_function("other", package_name="pkg2"))

        pkg = manager.update("pkg1", description="forced", force=True)

        new_version = store.package_get("pkg1").resource_version
        assert pkg.resource_version == new_version
        for name in ["fn1", "fn2", "fn3"]:
            assert store.function_get(name).spec.package.package_ref.resource_version == new_version
        assert store.function_get("other").spec.package.package_ref.resource_version == ""

    def test_without_dependents_no_force_needed(self, manager, store):
        _seed(store)
        manager.update("pkg1", description="ok")
        assert store.package_get("pkg1").spec.description == "ok"

    def test_function_update_failure_not_rolled_back(self, manager, store):
        _seed(store, functions=["fn1", "fn2", "fn3"])
        real_update = store.function_update

        def flaky_update(fn):
            if fn.name == "fn2":
                raise PersistException("store unavailable", kind="function", name="fn2")
            return real_update(fn)

        store.function_update = flaky_update

        with pytest.raises(PersistException) as exc_info:
            manager.update("pkg1", description="x", force=True)

        assert exc_info.value.name == "fn2"
        new_version = store.package_get("pkg1").resource_version
        assert store.function_get("fn1").spec.package.package_ref.resource_version == new_version
        assert store.function_get("fn2").spec.package.package_ref.resource_version != new_version
        assert store.function_get("fn3").spec.package.package_ref.resource_version != new_version


# =============================================================================
# Delete
# =============================================================================

class TestDelete:

    def test_blocked_by_dependent(self, manager, store, caplog):
        _seed(store, functions=["fn1"])

        assert manager.delete("pkg1") is False
        assert manager.delete("pkg1") is False

        assert manager.get("pkg1").name == "pkg1"
        assert "use -f to force delete" in caplog.text

    def test_forced(self, manager, store):
        _seed(store, functions=["fn1"])

        assert manager.delete("pkg1", force=True) is True

        with pytest.raises(NotFoundException):
            store.package_get("pkg1")

    def test_unreferenced(self, manager, store):
        _seed(store)
        store.function_create(make_function("fn1", package_name="pkg2"))

        assert manager.delete("pkg1") is True
        assert store.package_list() == []

    def test_missing_package(self, manager):
        with pytest.raises(NotFoundException):
            manager.delete("nope")

    def test_requires_name(self, manager):
        with pytest.raises(MissingArgumentException):
            manager.delete("")


# =============================================================================
# Reads
# =============================================================================

class TestReads:

    def test_functions_using(self, manager, store):
        _seed(store, functions=["fn1", "fn2"])
        store.function_create(make_function("fn3", package_name="pkg2"))

        assert [fn.name for fn in manager.functions_using("pkg1")] == ["fn1", "fn2"]
        assert manager.functions_using("pkg9") == []

    def test_info_includes_build_log(self, manager, store):
        store.package_create(make_package(
            "pkg1", status=BuildStatus.FAILED, description="demo", build_log="compile error",
        ))

        text = manager.info("pkg1")

        assert "Name:" in text and "pkg1" in text
        assert "failed" in text
        assert "demo" in text
        assert text.endswith("Build Logs:\ncompile error")

    def test_render_list(self, manager, store):
        store.package_create(make_package("pkg1", env="python", description="first"))
        store.package_create(make_package("pkg2", env="go", status=BuildStatus.PENDING))

        lines = manager.render_list().splitlines()

        assert lines[0].split() == ["NAME", "STATUS", "ENV", "DESCRIPTION"]
        assert lines[1].split() == ["pkg1", "succeeded", "python", "first"]
        assert lines[2].split() == ["pkg2", "pending", "go"]

    def test_download_defaults_target_to_package_name(self, manager, store):
        store.package_create(make_package(
            "pkg1",
            source=Archive.from_literal(b"src code"),
            deployment=Archive.from_literal(b"PK\x03\x04built"),
        ))

        paths = manager.download("pkg1")

        assert [p.name for p in paths] == ["pkg1", "pkg1.zip"]
        assert paths[0].read_bytes() == b"src code"
        assert paths[0].parent != paths[1].parent

    def test_download_url_archive_with_target(self, tmp_path, store):
        http = Mock()
        http.get.return_value = make_response(200, b"binary")
        manager = make_manager(tmp_path / "dl", client=store, http=http)
        store.package_create(make_package(
            "pkg1", deployment=Archive.from_url("http://storagesvc/v1/archive?id=1"),
        ))

        [path] = manager.download("pkg1", target="out.bin")

        assert path.name == "out.bin"
        http.get.assert_called_once_with(SERVER_URL + "/proxy/storage/v1/archive?id=1")
