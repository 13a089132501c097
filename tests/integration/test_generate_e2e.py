"""Integration tests for generating projects from the packaged templates.

These tests run the real generator against the template tree shipped with the
package, for every database engine and both languages, and verify that the
output is complete, well-formed and free of template markers.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend_quickstart.config import DEFAULT_TEMPLATE_DIR, Settings
from backend_quickstart.scaffolder import DatabaseEngine, ProjectConfig, ProjectGenerator
from backend_quickstart.scaffolder.checker import check_templates

ENGINE_URL_PREFIX = {
    DatabaseEngine.POSTGRESQL: "DATABASE_URL=postgres://",
    DatabaseEngine.MYSQL: "DATABASE_URL=mysql://",
    DatabaseEngine.SQLITE: "DATABASE_URL=file:",
    DatabaseEngine.MONGODB: "DATABASE_URL=mongodb://",
}

ENGINE_DEPENDENCY = {
    DatabaseEngine.POSTGRESQL: "pg",
    DatabaseEngine.MYSQL: "mysql2",
    DatabaseEngine.SQLITE: "better-sqlite3",
    DatabaseEngine.MONGODB: "mongoose",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _generate(tmp_path: Path, **answers) -> Path:
    config = ProjectConfig(name="shop-api", author="Grace", **answers)
    settings = Settings(template_dir=DEFAULT_TEMPLATE_DIR, strict=True)
    result = await ProjectGenerator(config, settings).generate(tmp_path / "shop-api")
    return result.project_path


def _all_files(root: Path) -> list[Path]:
    return sorted(p for p in root.rglob("*") if p.is_file())


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestPackagedTemplates:
    def test_every_template_passes_check(self):
        results = check_templates(DEFAULT_TEMPLATE_DIR)
        assert results
        failures = {str(r.path): r.errors for r in results if not r.ok}
        assert failures == {}

    @pytest.mark.parametrize("engine", list(DatabaseEngine))
    @pytest.mark.parametrize("typescript", [True, False])
    async def test_generate_combination(self, tmp_path: Path, engine, typescript):
        root = await _generate(tmp_path, database=engine, typescript=typescript)
        ext = ".ts" if typescript else ".js"
        other = ".js" if typescript else ".ts"

        for rel in ("src/app", "src/server", "src/config/database", "src/routes/health"):
            assert (root / f"{rel}{ext}").is_file()
            assert not (root / f"{rel}{other}").exists()

        for dotfile in (".env.example", ".gitignore", ".dockerignore"):
            assert (root / dotfile).is_file()
        assert not list(root.rglob("*.mustache"))
        assert not list(root.rglob("_*"))

        for path in _all_files(root):
            text = path.read_text(encoding="utf-8")
            assert "{{" not in text, path
            assert "}}" not in text, path

        package = json.loads((root / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "shop-api"
        assert package["author"] == "Grace"
        for candidate, dependency in ENGINE_DEPENDENCY.items():
            assert (dependency in package["dependencies"]) is (candidate is engine)
        assert ("typescript" in package["devDependencies"]) is typescript

        env = (root / ".env.example").read_text(encoding="utf-8")
        assert env.count("DATABASE_URL=") == 1
        assert ENGINE_URL_PREFIX[engine] in env

    async def test_feature_toggles_off(self, tmp_path: Path):
        root = await _generate(
            tmp_path,
            authentication=False,
            redis=False,
            testing=False,
            cors=False,
            rate_limit=False,
        )
        package = json.loads((root / "package.json").read_text(encoding="utf-8"))
        assert "jsonwebtoken" not in package["dependencies"]
        assert "ioredis" not in package["dependencies"]
        assert "test" not in package["scripts"]
        assert "jest" not in package["devDependencies"]

        env = (root / ".env.example").read_text(encoding="utf-8")
        assert "JWT_SECRET" not in env
        assert "REDIS_URL" not in env

        app = (root / "src" / "app.ts").read_text(encoding="utf-8")
        assert "cors" not in app
        assert "rateLimit" not in app

    async def test_rendered_names_and_year(self, tmp_path: Path):
        root = await _generate(tmp_path)
        server = (root / "src" / "server.ts").read_text(encoding="utf-8")
        assert "ShopApi listening" in server
        license_text = (root / "LICENSE").read_text(encoding="utf-8")
        assert "Grace" in license_text
        compose = (root / "docker-compose.yml").read_text(encoding="utf-8")
        assert "container_name: shop-api-api" in compose
        assert "POSTGRES_DB: shopApi" in compose

    async def test_plain_files_copied_verbatim(self, tmp_path: Path):
        root = await _generate(tmp_path)
        assert (root / ".gitignore").read_bytes() == (DEFAULT_TEMPLATE_DIR / "_gitignore").read_bytes()
