"""
Deterministic placeholder substitution over the template catalog
"""

import logging
from typing import Any, FrozenSet, List, Mapping, Optional

from .models import PromptTemplate, PLACEHOLDER_PATTERN
from .templates import TEMPLATE_CATALOG
from ..common.errors import PromptTemplateError

logger = logging.getLogger(__name__)


class PromptTemplateEngine:
    """Render task templates by literal placeholder replacement"""

    def __init__(self, catalog: Optional[Mapping[str, PromptTemplate]] = None):
        """
        Args:
            catalog: Template catalog keyed by task (uses the built-in catalog if None)
        """
        self.catalog = TEMPLATE_CATALOG if catalog is None else catalog
        logger.debug(f"PromptTemplateEngine initialized ({len(self.catalog)} templates)")

    def tasks(self) -> List[str]:
        return sorted(self.catalog)

    def get_template(self, task: str) -> PromptTemplate:
        try:
            return self.catalog[task]
        except KeyError:
            raise PromptTemplateError(
                f"Unknown prompt template: {task}", details={"task": task}
            ) from None

    def placeholders(self, task: str) -> FrozenSet[str]:
        return self.get_template(task).placeholders

    def render(self, task: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Substitute every {placeholder} in the task's template

        Args:
            task: Template name (e.g., "title", "field_mapping")
            params: Placeholder name -> value (converted with str())

        Returns:
            Fully substituted instruction text

        Raises:
            PromptTemplateError: Unknown task or missing parameters
        """
        template = self.get_template(task)
        params = dict(params or {})

        missing = sorted(template.placeholders - set(params))
        if missing:
            raise PromptTemplateError(
                f"Missing parameters for template '{task}': {', '.join(missing)}",
                details={"task": task, "missing": missing},
            )

        unused = sorted(set(params) - template.placeholders)
        if unused:
            logger.debug(f"Ignoring unused parameters for '{task}': {unused}")

        # Single pass so substituted values are never re-scanned
        rendered = PLACEHOLDER_PATTERN.sub(
            lambda match: str(params[match.group(1)]), template.text
        )

        logger.debug(
            f"Rendered template {task} v{template.version} ({len(rendered)} chars)"
        )
        return rendered
