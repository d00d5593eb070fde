"""Port interface for assignment rule switches."""

from abc import ABC, abstractmethod


class RuleToggleRepository(ABC):
    @abstractmethod
    async def get_enabled_map(self, rule_names: list[str]) -> dict[str, bool | None]:
        """Stored enabled flag per rule; missing rules are simply absent."""
        ...

    @abstractmethod
    async def set_enabled(self, rule_name: str, enabled: bool) -> None:
        ...
