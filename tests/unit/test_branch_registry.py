from decimal import Decimal
from pathlib import Path

import pytest

from wage_tracker.domain.errors import UnknownBranch
from wage_tracker.domain.models import BranchConfig
from wage_tracker.domain.services.branch_registry import BranchRegistry


def test_wage_for_known_branches(branches):
    assert branches.wage_for("Alpha") == Decimal("700")
    assert branches.wage_for("Beta") == Decimal("800")


def test_wage_for_unknown_branch_raises(branches):
    with pytest.raises(UnknownBranch) as exc_info:
        branches.wage_for("Gamma")
    assert exc_info.value.branch_id == "Gamma"


def test_registry_keeps_configured_order(branches):
    assert branches.branch_ids == ["Alpha", "Beta"]
    assert branches.default_branch.branch_id == "Alpha"
    assert "Beta" in branches
    assert not branches.contains("Gamma")
    assert len(branches) == 2


def test_registry_rejects_duplicates():
    with pytest.raises(ValueError, match="Duplicate"):
        BranchRegistry([
            BranchConfig(branch_id="Alpha", wage=Decimal("700")),
            BranchConfig(branch_id="Alpha", wage=Decimal("750")),
        ])


def test_registry_rejects_empty_configuration():
    with pytest.raises(ValueError):
        BranchRegistry([])


def test_branch_rejects_negative_wage():
    with pytest.raises(ValueError):
        BranchConfig(branch_id="Alpha", wage=Decimal("-1"))


def test_from_dict_rejects_incomplete_entries():
    with pytest.raises(ValueError, match="Invalid branch entry"):
        BranchRegistry.from_dict({"branches": [{"id": "Alpha"}]})


def test_from_yaml_loads_file(tmp_path):
    config_file = tmp_path / "branches.yml"
    config_file.write_text(
        "branches:\n"
        "  - id: Alpha\n"
        "    wage: 700\n"
        "  - id: Beta\n"
        "    wage: 800.50\n",
        encoding="utf-8",
    )

    registry = BranchRegistry.from_yaml(config_file)

    assert registry.branch_ids == ["Alpha", "Beta"]
    assert registry.wage_for("Beta") == Decimal("800.50")


def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        BranchRegistry.from_yaml(tmp_path / "missing.yml")


def test_shipped_branch_config_loads():
    config_file = Path(__file__).resolve().parents[2] / "config" / "branches.yml"
    registry = BranchRegistry.from_yaml(config_file)

    assert registry.wage_for("One Bangkok") == Decimal("700")
    assert registry.wage_for("Paragon") == Decimal("800")
    assert registry.default_branch.branch_id == "One Bangkok"


@pytest.mark.parametrize("wage", ["abc", None, True])
def test_from_dict_rejects_non_numeric_wage(wage):
    with pytest.raises(ValueError, match="Invalid branch entry"):
        BranchRegistry.from_dict({"branches": [{"id": "Alpha", "wage": wage}]})


def test_from_yaml_rejects_non_numeric_wage(tmp_path):
    config_file = tmp_path / "branches.yml"
    config_file.write_text("branches:\n  - id: Alpha\n    wage: abc\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid branch entry"):
        BranchRegistry.from_yaml(config_file)
