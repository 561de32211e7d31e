"""
Domain models — the node entities of a project tree.

    from nodetree.core.models import ModuleEntity, FunctionEntity
"""

from nodetree.core.context import EntityRegistry
from nodetree.core.models.function import FunctionEntity
from nodetree.core.models.module import ModuleEntity
from nodetree.core.models.node import EntityTypeError, NodeEntity


def default_registry() -> EntityRegistry:
    """Registry with every built-in entity class."""
    registry = EntityRegistry()
    registry.register(ModuleEntity.KIND, ModuleEntity)
    registry.register(FunctionEntity.KIND, FunctionEntity)
    return registry


__all__ = [
    "EntityTypeError",
    "FunctionEntity",
    "ModuleEntity",
    "NodeEntity",
    "default_registry",
]
