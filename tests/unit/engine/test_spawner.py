"""Tests for the monster template registry."""

from __future__ import annotations

import pytest

from questkeeper.engine.spawner import MonsterTemplateRegistry, generate_instance_id
from questkeeper.models.enums import Condition
from questkeeper.models.monsters import MonsterTemplate


@pytest.fixture
def goblin() -> MonsterTemplate:
    """A goblin stat block."""
    return MonsterTemplate(
        id="goblin",
        name="Goblin",
        armor_class=15,
        max_hit_points=7,
        special_abilities=("Nimble Escape",),
    )


@pytest.fixture
def registry(goblin: MonsterTemplate) -> MonsterTemplateRegistry:
    """A registry holding the goblin template."""
    return MonsterTemplateRegistry([goblin])


class TestRegistration:
    """Tests for registering templates."""

    def test_register(self, registry: MonsterTemplateRegistry, goblin: MonsterTemplate) -> None:
        """Test registered templates are retrievable."""
        assert "goblin" in registry
        assert len(registry) == 1
        assert registry.get("goblin") is goblin
        assert list(registry) == ["goblin"]

    def test_duplicate_keeps_first(self, registry: MonsterTemplateRegistry, goblin: MonsterTemplate) -> None:
        """Test a duplicate id is refused."""
        impostor = MonsterTemplate(id="goblin", name="Big Goblin", max_hit_points=30)

        assert registry.register(impostor) is False
        assert registry.get("goblin") is goblin

    def test_templates_view_is_read_only(self, registry: MonsterTemplateRegistry) -> None:
        """Test the templates mapping cannot be mutated."""
        with pytest.raises(TypeError):
            registry.templates["orc"] = MonsterTemplate(id="orc", name="Orc")  # type: ignore[index]


class TestInstantiate:
    """Tests for spawning instances."""

    def test_full_hit_points(self, registry: MonsterTemplateRegistry) -> None:
        """Test a new instance starts at full health."""
        instance = registry.instantiate("goblin")

        assert instance is not None
        assert instance.current_hit_points == 7
        assert instance.template_id == "goblin"
        assert instance.name == "Goblin"
        assert instance.armor_class == 15

    def test_explicit_instance_id(self, registry: MonsterTemplateRegistry) -> None:
        """Test a caller-supplied instance id is used."""
        instance = registry.instantiate("goblin", instance_id="goblin_boss")

        assert instance is not None
        assert instance.instance_id == "goblin_boss"

    def test_unknown_template(self, registry: MonsterTemplateRegistry) -> None:
        """Test an unknown template gives None."""
        assert registry.instantiate("dragon") is None

    def test_instances_are_independent(self, registry: MonsterTemplateRegistry, goblin: MonsterTemplate) -> None:
        """Test damage and conditions on one instance do not leak."""
        first = registry.instantiate("goblin")
        second = registry.instantiate("goblin")
        assert first is not None and second is not None

        first.take_damage(5)
        first.add_condition(Condition.FRIGHTENED)

        assert first.instance_id != second.instance_id
        assert second.current_hit_points == 7
        assert not second.has_condition(Condition.FRIGHTENED)
        assert first.template is not second.template
        assert first.template is not goblin
        assert goblin.max_hit_points == 7

    def test_instantiate_group(self, registry: MonsterTemplateRegistry) -> None:
        """Test a group spawns distinct instances."""
        group = registry.instantiate_group("goblin", 3)

        assert len(group) == 3
        assert len({monster.instance_id for monster in group}) == 3

    def test_instantiate_group_unknown(self, registry: MonsterTemplateRegistry) -> None:
        """Test an unknown template gives an empty group."""
        assert registry.instantiate_group("dragon", 2) == []


class TestGenerateInstanceId:
    """Tests for instance id generation."""

    def test_prefixed_with_template(self) -> None:
        """Test ids carry the template id."""
        assert generate_instance_id("goblin").startswith("goblin_")

    def test_unique(self) -> None:
        """Test ids do not repeat."""
        ids = {generate_instance_id("goblin") for _ in range(200)}

        assert len(ids) == 200
