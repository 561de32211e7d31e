"""
Populator — resolves template references and variables in a document.

Two placeholder forms are recognised inside string values:

    $${name}    template reference, looked up in the node's templates
    ${name}     variable, looked up for the target stage/region

Templates are resolved first, so a template may itself contain
variables.  A string that is *exactly* one placeholder is replaced by
the raw value (objects and lists included); a placeholder embedded in
a longer string is interpolated as text.

The input document is never mutated.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import TYPE_CHECKING, Any, Callable

from nodetree.core.config.loader import ConfigError
from nodetree.core.services.variables import load_variables

if TYPE_CHECKING:
    from nodetree.core.context import ProjectContext

logger = logging.getLogger(__name__)

_TEMPLATE_RE = re.compile(r"\$\$\{([^${}]+)\}")
_VARIABLE_RE = re.compile(r"(?<!\$)\$\{([^${}]+)\}")


class Populator:
    """Fills in templates, then variables, for one stage and region."""

    async def populate(
        self,
        context: ProjectContext,
        data: Any,
        stage: str,
        region: str,
        templates: dict[str, Any] | None = None,
    ) -> Any:
        """Return a resolved deep copy of *data*.

        Raises:
            ConfigError: If no project root is set, or a template or
                variable reference cannot be resolved.
        """
        if context.project_root is None:
            raise ConfigError("Cannot populate: no project path has been set")

        variables = await load_variables(context.store, context.project_root, stage, region)

        result = copy.deepcopy(data)
        result = _walk(result, lambda s: _substitute(s, _TEMPLATE_RE, templates or {}, "template"))
        result = _walk(result, lambda s: _substitute(s, _VARIABLE_RE, variables, "variable"))

        logger.debug(
            "Populated document for stage=%s region=%s (%d templates, %d variables)",
            stage, region, len(templates or {}), len(variables),
        )
        return result


def _walk(value: Any, fn: Callable[[str], Any]) -> Any:
    """Apply *fn* to every string value; keys are left as they are."""
    if isinstance(value, dict):
        return {k: _walk(v, fn) for k, v in value.items()}
    if isinstance(value, list):
        return [_walk(v, fn) for v in value]
    if isinstance(value, str):
        return fn(value)
    return value


def _substitute(text: str, pattern: re.Pattern[str], values: dict[str, Any], kind: str) -> Any:
    whole = pattern.fullmatch(text)
    if whole:
        return copy.deepcopy(_lookup(whole.group(1), values, kind))

    return pattern.sub(lambda m: str(_lookup(m.group(1), values, kind)), text)


def _lookup(name: str, values: dict[str, Any], kind: str) -> Any:
    key = name.strip()
    if key not in values:
        raise ConfigError(f"Unresolved {kind} reference: {key}")
    return values[key]
