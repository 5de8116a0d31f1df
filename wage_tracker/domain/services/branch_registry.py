"""
BRANCH REGISTRY
Load, validate, and expose the fixed branch → daily wage table

RESPONSIBILITIES:
- Load branches.yml once at startup
- Validate configuration integrity
- Answer wage lookups

RULES:
❌ No runtime add/remove (deployment-time change only)
❌ No module-level instance; constructed and passed explicitly
✅ Fail fast on invalid config
✅ Deterministic branch order (as configured)
"""

from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Union

import yaml

from wage_tracker.domain.errors import UnknownBranch
from wage_tracker.domain.models import BranchConfig
from wage_tracker.utils.money import to_decimal


class BranchRegistry:
    """
    Immutable branch configuration.
    """

    def __init__(self, branches: Iterable[BranchConfig]):
        branches = list(branches)
        if not branches:
            raise ValueError("At least one branch must be configured")

        ids = [b.branch_id for b in branches]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate branch identifiers found in configuration")

        self._branches: Mapping[str, BranchConfig] = MappingProxyType(
            {b.branch_id: b for b in branches}
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "BranchRegistry":
        """Load branches from a YAML file with a top-level `branches` list"""
        branch_file = Path(path)
        if not branch_file.exists():
            raise FileNotFoundError(f"Branch config not found: {branch_file}")

        with open(branch_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "BranchRegistry":
        branches = []
        for entry in data.get('branches') or []:
            try:
                branch_id = str(entry['id'])
                wage = to_decimal(entry["wage"])
            except (KeyError, TypeError, ValueError) as exc:
                raise ValueError(f"Invalid branch entry: {entry!r}") from exc
            branches.append(BranchConfig(branch_id=branch_id, wage=wage))
        return cls(branches)

    def wage_for(self, branch_id: str) -> Decimal:
        """
        Fixed daily wage of a branch

        Raises:
            UnknownBranch: branch_id is not configured
        """
        branch = self._branches.get(branch_id)
        if branch is None:
            raise UnknownBranch(branch_id)
        return branch.wage

    def contains(self, branch_id: str) -> bool:
        return branch_id in self._branches

    @property
    def branch_ids(self) -> List[str]:
        return list(self._branches)

    @property
    def branches(self) -> List[BranchConfig]:
        return list(self._branches.values())

    @property
    def default_branch(self) -> BranchConfig:
        """First configured branch (initial form selection)"""
        return next(iter(self._branches.values()))

    def __len__(self) -> int:
        return len(self._branches)

    def __contains__(self, branch_id: object) -> bool:
        return branch_id in self._branches
