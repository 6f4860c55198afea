"""
Pydantic models for the Prompt Template Engine
"""

import re
from typing import FrozenSet

from pydantic import BaseModel, ConfigDict

# {name} placeholders; JSON braces in template text never match
PLACEHOLDER_PATTERN = re.compile(r"\{([a-z][a-z0-9_]*)\}")


class PromptTemplate(BaseModel):
    """A named, versioned block of instruction text (immutable)"""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    text: str

    @property
    def placeholders(self) -> FrozenSet[str]:
        return frozenset(PLACEHOLDER_PATTERN.findall(self.text))
