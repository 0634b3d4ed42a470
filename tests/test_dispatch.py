"""
Unit tests for importvars/dispatch.py and the emitted runtime.
"""
import asyncio

import pytest

from importvars.alias import ResolvedAlias
from importvars.config import AliasRule
from importvars.dispatch import DispatchTable, build_dispatch_table, candidate_specifiers
from importvars.errors import ErrorKind, UnknownSpecifierError
from importvars.runtime import TAG, render_runtime_block, runtime_name


@pytest.fixture
def at_alias():
    return ResolvedAlias(
        kind="alias",
        rule=AliasRule(find="@", replacement="/proj/src"),
        importer="/proj/src/main.ts",
        specifier="@/*",
        resolved="./*",
        specifier_head="@/",
        resolved_head="./",
    )


class TestCandidateSpecifiers:
    """Tests for the specifiers registered per file."""

    def test_index_file(self):
        assert candidate_specifiers("./foo/index.js") == ["./foo", "./foo/index", "./foo/index.js"]

    def test_plain_file(self):
        assert candidate_specifiers("./foo/bar.js") == ["./foo/bar", "./foo/bar.js"]

    def test_no_extension(self):
        assert candidate_specifiers("./foo/LICENSE") == ["./foo/LICENSE"]

    def test_alias_form(self, at_alias):
        assert candidate_specifiers("./foo/index.js", at_alias) == ["@/foo", "@/foo/index", "@/foo/index.js"]


class TestBuildDispatchTable:
    """Tests for building the lookup."""

    def test_entries(self, at_alias):
        table = build_dispatch_table(["./views/foo.js"], at_alias)
        assert table.entries == {
            "@/views/foo": "./views/foo.js",
            "@/views/foo.js": "./views/foo.js",
        }
        assert table.collisions == []

    def test_first_file_wins(self):
        table = build_dispatch_table(["./foo.js", "./foo/index.js"])
        assert table.lookup("./foo") == "./foo.js"
        assert table.lookup("./foo/index") == "./foo/index.js"
        assert len(table.collisions) == 1
        collision = table.collisions[0]
        assert collision.specifier == "./foo"
        assert collision.kept == "./foo.js"
        assert collision.dropped == "./foo/index.js"

    def test_same_stem_different_extensions(self):
        table = build_dispatch_table(["./views/a.js", "./views/a.ts"])
        assert table.lookup("./views/a") == "./views/a.js"
        assert table.lookup("./views/a.ts") == "./views/a.ts"
        assert table.specifiers_for("./views/a.ts") == ["./views/a.ts"]

    def test_every_file_is_reachable(self):
        files = ["./a.js", "./a/index.js", "./b/index.ts", "./b.ts"]
        table = build_dispatch_table(files)
        for file in files:
            assert table.specifiers_for(file)

    def test_registration_order(self):
        table = build_dispatch_table(["./b.js", "./a.js"])
        assert list(table.entries) == ["./b", "./b.js", "./a", "./a.js"]


class TestImportModule:
    """Tests for runtime evaluation of a table."""

    def test_known_specifier(self):
        table = build_dispatch_table(["./views/foo.js"])
        assert asyncio.run(table.import_module("./views/foo")) == "./views/foo.js"

    def test_loader(self):
        table = build_dispatch_table(["./views/foo.js"])
        assert asyncio.run(table.import_module("./views/foo.js", loader=str.upper)) == "./VIEWS/FOO.JS"

    def test_async_loader(self):
        async def load(path):
            return {"default": path}

        table = build_dispatch_table(["./views/foo.js"])
        assert asyncio.run(table.import_module("./views/foo", loader=load)) == {"default": "./views/foo.js"}

    def test_unknown_specifier(self):
        table = build_dispatch_table(["./views/foo.js"])
        with pytest.raises(UnknownSpecifierError) as exc_info:
            asyncio.run(table.import_module("./views/missing.js"))
        assert str(exc_info.value) == "Unknown variable dynamic import: ./views/missing.js"
        assert exc_info.value.kind == ErrorKind.UNKNOWN_SPECIFIER_AT_RUNTIME

    def test_rejection_is_deferred(self):
        """Calling with an unknown specifier does not raise until awaited."""
        table = DispatchTable()
        pending = table.import_module("./nope.js")
        try:
            with pytest.raises(UnknownSpecifierError):
                asyncio.run(pending)
        finally:
            pending.close()


class TestRender:
    """Tests for the emitted JavaScript."""

    def test_dispatch_function(self, at_alias):
        table = build_dispatch_table(["./views/foo.js"], at_alias)
        name = runtime_name(0)
        js = table.render(name)

        assert name == "__variableDynamicImportRuntime0__"
        assert js.startswith("function __variableDynamicImportRuntime0__(path) {")
        assert '"@/views/foo": function () { return import("./views/foo.js"); },' in js
        assert '"@/views/foo.js": function () { return import("./views/foo.js"); },' in js
        assert '"Unknown variable dynamic import: " + path' in js
        assert "__MODULES__" not in js

    def test_quoting(self):
        table = build_dispatch_table(['./views/it"s.js'])
        assert '"./views/it\\"s.js"' in table.render(runtime_name(1))

    def test_runtime_block(self):
        block = render_runtime_block(["function a() {}", "function b() {}"])
        assert block.splitlines() == [
            f"// {TAG} runtime -S-",
            "function a() {}",
            "function b() {}",
            f"// {TAG} runtime -E-",
        ]

    def test_empty_runtime_block(self):
        assert render_runtime_block([]) == ""
