"""Monster template registry and instantiation.

Templates are registered once while a campaign loads. The combat layer
asks the registry for fresh instances; each instance gets a deep copy of
its template so that nothing done to one creature can leak into the
template or into its siblings.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import Mapping
from uuid import uuid4

from questkeeper.core.logging import get_logger
from questkeeper.models.monsters import MonsterInstance, MonsterTemplate


logger = get_logger(__name__)


def generate_instance_id(template_id: str) -> str:
    """Build a collision-improbable instance identifier for a template."""
    return f"{template_id}_{uuid4().hex[:12]}"


class MonsterTemplateRegistry:
    """Holds immutable monster templates and spawns instances from them.

    Example:
        >>> registry = MonsterTemplateRegistry([goblin])
        >>> first = registry.instantiate("goblin")
        >>> second = registry.instantiate("goblin")
        >>> first.instance_id != second.instance_id
        True
    """

    def __init__(self, templates: Iterable[MonsterTemplate] = ()) -> None:
        """Initialize the registry.

        Args:
            templates: Templates to register; later duplicates are ignored.
        """
        self._templates: dict[str, MonsterTemplate] = {}
        for template in templates:
            self.register(template)

    def register(self, template: MonsterTemplate) -> bool:
        """Register a template.

        Args:
            template: The template to add.

        Returns:
            False if a template with the same id was already registered.
        """
        if template.id in self._templates:
            return False
        self._templates[template.id] = template
        return True

    @property
    def templates(self) -> Mapping[str, MonsterTemplate]:
        """Read-only view of registered templates by id."""
        return MappingProxyType(self._templates)

    def get(self, template_id: str) -> MonsterTemplate | None:
        return self._templates.get(template_id)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def instantiate(
        self,
        template_id: str,
        instance_id: str | None = None,
    ) -> MonsterInstance | None:
        """Create a combat-ready instance of a template.

        Args:
            template_id: Template to copy.
            instance_id: Identifier for the instance; generated when omitted.

        Returns:
            A new instance at full hit points, or None if the template
            is unknown.
        """
        template = self._templates.get(template_id)
        if template is None:
            logger.warning("Unknown monster template", template_id=template_id)
            return None

        instance = MonsterInstance(
            instance_id=instance_id or generate_instance_id(template_id),
            template=template.model_copy(deep=True),
            current_hit_points=template.max_hit_points,
        )
        logger.debug(
            "Monster instantiated",
            template_id=template_id,
            instance_id=instance.instance_id,
        )
        return instance

    def instantiate_group(self, template_id: str, count: int) -> list[MonsterInstance]:
        """Spawn ``count`` independent instances of one template.

        Returns:
            The instances, or an empty list if the template is unknown.
        """
        if template_id not in self._templates:
            logger.warning("Unknown monster template", template_id=template_id)
            return []
        return [instance for _ in range(count) if (instance := self.instantiate(template_id))]


__all__ = [
    "generate_instance_id",
    "MonsterTemplateRegistry",
]
