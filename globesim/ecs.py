"""A minimal entity-component registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from globesim.components import Renderable


class Registry:
    """Entities are integer ids holding at most one component of each type."""

    def __init__(self) -> None:
        self._components: dict[int, dict[type, Any]] = {}
        self._next_id = 0

    def _store(self, entity: "Entity | int") -> dict[type, Any]:
        key = int(entity)
        try:
            return self._components[key]
        except KeyError:
            raise KeyError(f"unknown entity {key}") from None

    def create(self) -> "Entity":
        entity_id = self._next_id
        self._next_id += 1
        self._components[entity_id] = {}
        return Entity(self, entity_id)

    def destroy(self, entity: "Entity | int") -> None:
        """Remove an entity and all its components; KeyError if unknown."""
        self._store(entity)
        del self._components[int(entity)]

    def add_component(self, entity: "Entity | int", component: Any) -> Any:
        """Attach ``component``; ValueError if one of its type is already there."""
        store = self._store(entity)
        kind = type(component)
        if kind in store:
            raise ValueError(f"entity {int(entity)} already has a {kind.__name__}")
        store[kind] = component
        return component

    def get_component(self, entity: "Entity | int", component_type: type) -> Any:
        """The entity's component of this type; KeyError if absent."""
        store = self._store(entity)
        try:
            return store[component_type]
        except KeyError:
            raise KeyError(
                f"entity {int(entity)} has no {component_type.__name__}"
            ) from None

    def has_component(self, entity: "Entity | int", component_type: type) -> bool:
        return component_type in self._store(entity)

    def remove_component(self, entity: "Entity | int", component_type: type) -> bool:
        """Detach a component; returns whether one was present."""
        return self._store(entity).pop(component_type, None) is not None

    def components(self, entity: "Entity | int") -> list[Any]:
        """The entity's components in the order they were added."""
        return list(self._store(entity).values())

    def view(self, *args: type) -> Iterator[tuple[Any, ...]]:
        """Yield ``(entity, component, ...)`` for entities having all ``args``."""
        if not args:
            raise TypeError("view needs at least one component type")
        for entity_id, store in list(self._components.items()):
            if all(kind in store for kind in args):
                yield (Entity(self, entity_id), *(store[kind] for kind in args))

    def __contains__(self, entity: object) -> bool:
        try:
            return int(entity) in self._components  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def __len__(self) -> int:
        return len(self._components)


@dataclass(frozen=True)
class Entity:
    """Handle to an entity in a registry."""

    registry: Registry
    id: int

    def __int__(self) -> int:
        return self.id

    def add_component(self, component: Any) -> Any:
        return self.registry.add_component(self, component)

    def get_component(self, component_type: type) -> Any:
        return self.registry.get_component(self, component_type)

    def has_component(self, component_type: type) -> bool:
        return self.registry.has_component(self, component_type)

    def remove_component(self, component_type: type) -> bool:
        return self.registry.remove_component(self, component_type)

    def describe_controls(self) -> list[str]:
        """Inspector lines of every renderable component, in order added."""
        lines: list[str] = []
        for component in self.registry.components(self):
            if isinstance(component, Renderable):
                lines.extend(component.describe())
        return lines