"""Tests for template tree planning and materialisation.

Covers:
- Pre-order planning with derived target paths
- Collision detection between derived paths
- Template expansion vs. verbatim (binary-safe) copies
- Error propagation from bad templates
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

import pytest

from backend_quickstart.errors import (
    PathCollisionError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UndefinedVariableError,
)
from backend_quickstart.scaffolder.materializer import (
    DIRECTORY,
    FILE,
    TEMPLATE,
    materialize,
    plan_tree,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


class TestPlanTree:
    def test_kinds_and_targets(self, make_tree):
        root = make_tree({
            "README.md": "readme",
            "_gitignore": "node_modules/\n",
            "src/app.ts.mustache": "{{name}}",
        })
        plan = plan_tree(root, {"typescript": False, "name": "x"})
        by_target = {str(e.target): e.kind for e in plan}
        assert by_target == {
            "README.md": FILE,
            ".gitignore": FILE,
            "src": DIRECTORY,
            "src/app.js": TEMPLATE,
        }

    def test_directories_precede_children(self, make_tree):
        root = make_tree({"a/b/c.txt": "x"})
        targets = [e.target for e in plan_tree(root, {})]
        assert targets == [PurePosixPath("a"), PurePosixPath("a/b"), PurePosixPath("a/b/c.txt")]

    def test_collision_detected(self, make_tree):
        root = make_tree({
            "app.js.mustache": "js",
            "app.ts.mustache": "ts",
        })
        with pytest.raises(PathCollisionError) as exc_info:
            plan_tree(root, {"typescript": True})
        assert exc_info.value.target == "app.ts"
        assert len(exc_info.value.sources) == 2

    def test_collision_between_plain_and_template(self, make_tree):
        root = make_tree({"_env": "plain", ".env": "dot"})
        with pytest.raises(PathCollisionError):
            plan_tree(root, {})

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(TemplateNotFoundError):
            plan_tree(tmp_path / "nope", {})


# ---------------------------------------------------------------------------
# Materialisation
# ---------------------------------------------------------------------------


class TestMaterialize:
    async def test_sample_tree(self, sample_tree, tmp_path: Path):
        out = tmp_path / "out"
        out.mkdir()
        written = await materialize(sample_tree, out, {"name": "demo", "docker": True})

        assert sorted(p.name for p in written) == ["README.md", "pkg.json"]
        assert sorted(p.name for p in out.iterdir()) == ["README.md", "pkg.json"]
        assert (out / "README.md").read_bytes() == (sample_tree / "README.md").read_bytes()
        assert (out / "pkg.json").read_text(encoding="utf-8") == '{ "name": "demo", "docker": true}'

    async def test_binary_file_copied_verbatim(self, make_tree, tmp_path: Path):
        payload = bytes(range(256)) + b"{{#x}}not a template{{/x}}"
        root = make_tree({"assets/icon.bin": payload})
        out = tmp_path / "out"
        out.mkdir()
        await materialize(root, out, {"x": False})
        assert (out / "assets" / "icon.bin").read_bytes() == payload

    async def test_plain_file_with_tags_not_expanded(self, make_tree, tmp_path: Path):
        root = make_tree({"notes.md": "{{name}}"})
        out = tmp_path / "out"
        out.mkdir()
        await materialize(root, out, {"name": "demo"})
        assert (out / "notes.md").read_text(encoding="utf-8") == "{{name}}"

    async def test_empty_directories_created(self, make_tree, tmp_path: Path):
        root = make_tree({"keep.txt": ""})
        (root / "logs").mkdir()
        out = tmp_path / "out"
        out.mkdir()
        await materialize(root, out, {})
        assert (out / "logs").is_dir()

    async def test_crlf_preserved(self, make_tree, tmp_path: Path):
        root = make_tree({"win.txt.mustache": "a\r\n{{#f}}\r\nb\r\n{{/f}}\r\n"})
        out = tmp_path / "out"
        out.mkdir()
        await materialize(root, out, {"f": True})
        assert (out / "win.txt").read_bytes() == b"a\r\nb\r\n"

    async def test_syntax_error_names_file(self, make_tree, tmp_path: Path):
        root = make_tree({"bad.txt.mustache": "{{#a}}oops{{/b}}"})
        out = tmp_path / "out"
        out.mkdir()
        with pytest.raises(TemplateSyntaxError) as exc_info:
            await materialize(root, out, {})
        assert "bad.txt.mustache" in exc_info.value.source
        assert not (out / "bad.txt").exists()

    async def test_strict_mode_forwarded(self, make_tree, tmp_path: Path):
        root = make_tree({"a.txt.mustache": "{{missing}}"})
        out = tmp_path / "out"
        out.mkdir()
        with pytest.raises(UndefinedVariableError):
            await materialize(root, out, {}, strict=True)

    async def test_collision_writes_nothing(self, make_tree, tmp_path: Path):
        root = make_tree({"a.js.mustache": "", "a.ts.mustache": "", "z.txt": "z"})
        out = tmp_path / "out"
        out.mkdir()
        with pytest.raises(PathCollisionError):
            await materialize(root, out, {"typescript": False})
        assert list(out.iterdir()) == []
