"""
Structure lint tests
Verify that the atomic component skeleton exists and follows conventions.
"""

from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent

COMPONENTS = ["auth", "content", "listing", "media", "meta", "revisions", "tree"]


class TestProjectStructure:
    """Verify project structure follows the component conventions."""

    def test_core_directories_exist(self) -> None:
        for sub in ("adapters", "api", "components", "domain", "rules"):
            assert (PROJECT_ROOT / "src" / sub).is_dir(), sub

    def test_migrations_present(self) -> None:
        migrations = sorted((PROJECT_ROOT / "migrations").glob("*.sql"))
        assert migrations, "at least one migration is required"
        assert migrations[0].name == "001_initial.sql"

    def test_rules_file_present(self) -> None:
        assert (PROJECT_ROOT / "rules.yaml").is_file()

    def test_tests_structure_exists(self) -> None:
        assert (PROJECT_ROOT / "tests" / "unit").is_dir()
        assert (PROJECT_ROOT / "tests" / "integration").is_dir()
        assert (PROJECT_ROOT / "tests" / "integration" / "api").is_dir()

    @pytest.mark.parametrize("name", COMPONENTS)
    def test_component_skeleton(self, name: str) -> None:
        """Each component exposes run_* entry points over models and ports."""
        root = PROJECT_ROOT / "src" / "components" / name
        for part in ("__init__.py", "component.py", "models.py", "ports.py"):
            assert (root / part).is_file(), f"{name} is missing {part}"

    def test_hooks_is_a_plain_package(self) -> None:
        assert (PROJECT_ROOT / "src" / "components" / "hooks" / "__init__.py").is_file()
