"""
Regular Expression Entity
=========================
"""

import re
from enum import Enum
from typing import List, Pattern, Union

from ..error_handling import EntityError
from .entity import Entity, EntityMatch


class MatchMode(Enum):
    """How many occurrences a pattern is matched against."""
    FIRST = "first"
    ALL = "all"


class RegexpEntity(Entity):
    """
    Extracts entities matching a regular expression.

    The option of a match is its first captured group when the pattern has
    one, otherwise the whole match.
    """

    def __init__(self, label: str, pattern: Union[str, Pattern], flags: int = 0,
                 mode: MatchMode = MatchMode.ALL):
        super().__init__(label)
        if mode is not MatchMode.ALL:
            raise EntityError(
                "RegexpEntity pattern must match all occurrences.", label=label, mode=mode.value
            )
        try:
            self.pattern = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
        except re.error as e:
            raise EntityError(
                f"Invalid pattern for entity \"{label}\".", original_error=e, label=label
            )
        if not isinstance(pattern, str) and flags:
            raise EntityError(
                "Flags cannot be applied to an already compiled pattern.", label=label
            )
        self.mode = mode

    def search(self, text: str) -> List[EntityMatch]:
        matches = []
        for match in self.pattern.finditer(text):
            source = match.group(0)
            if not source:
                continue
            option = source
            if self.pattern.groups and match.group(1) is not None:
                option = match.group(1)
            matches.append(EntityMatch(
                label=self.label,
                option=option,
                source=source,
                score=1.0,
                start=match.start(),
            ))
        return matches
