"""
Unit tests for the project metadata in pyproject.toml.
"""

import pytest
from pathlib import Path

tomllib = pytest.importorskip("tomllib")

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent


@pytest.fixture
def project():
    with open(PROJECT_ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]


class TestProjectMetadata:

    def test_readme_exists_when_declared(self, project):
        readme = project.get("readme")
        if readme is not None:
            assert (PROJECT_ROOT / readme).is_file()
            assert Path(readme).stem.upper() == "README"

    def test_cli_entry_point(self, project):
        assert project["scripts"]["mitra"] == "mitra_cli:app"
