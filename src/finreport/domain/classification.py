"""Category to income statement line classification."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from finreport.domain import errors
from finreport.domain.entities import LineRole
from finreport.domain.errors import ConfigurationError


@dataclass(frozen=True)
class ClassificationMap:
    """Deployment-specific mapping of category ids to statement line roles.

    Categories that are not mapped classify as ``LineRole.OTHER``.
    """

    roles: Mapping[str, LineRole] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze a private copy so callers cannot mutate it afterwards
        object.__setattr__(self, "roles", MappingProxyType(dict(self.roles)))

    def role_for(self, category_id: str) -> LineRole:
        return self.roles.get(category_id, LineRole.OTHER)

    def categories_for(self, role: LineRole) -> frozenset[str]:
        return frozenset(cid for cid, mapped in self.roles.items() if mapped is role)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, str]) -> "ClassificationMap":
        """Build a map from plain strings, e.g. a parsed TOML table.

        Raises:
            ConfigurationError: If a role name is not a known LineRole
        """
        roles: dict[str, LineRole] = {}
        for category_id, role in raw.items():
            try:
                roles[str(category_id)] = LineRole(str(role).strip().lower())
            except ValueError as exc:
                raise ConfigurationError(
                    errors.unknown_line_role(str(category_id), str(role))
                ) from exc
        return cls(roles=roles)
