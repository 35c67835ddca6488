"""
Change Classifier.

Groups breaking changes by kind and rewrites graphql-core's descriptions into
the Markdown lines used in the pull request comment.
"""

import re
from typing import Dict, Iterable, List, NamedTuple, Pattern

from schema_police.models.analysis import BreakingChange
from schema_police.utils.logging import get_logger

logger = get_logger(__name__)


class ClassificationError(Exception):
    """A breaking change kind has no rendering template."""

    def __init__(self, change_type: str):
        super().__init__(f"No message template for breaking change type {change_type!r}")
        self.change_type = change_type


class Replacer(NamedTuple):
    """Title line and description rewrite for one change kind."""

    title: str
    from_pattern: Pattern[str]
    to_template: str


def _replacer(title: str, pattern: str, template: str) -> Replacer:
    return Replacer(title, re.compile(pattern), template)


_TYPE = r"([\w\[\]!]+)"

REPLACERS: Dict[str, Replacer] = {
    "TYPE_REMOVED": _replacer(
        "#### Types removed",
        r"^(?:Standard scalar )?(\w+) was removed(?: because it is not referenced anymore)?\.$",
        r"- `\1` was removed",
    ),
    "TYPE_CHANGED_KIND": _replacer(
        "#### Types changed kind",
        r"^(\w+) changed from an? (.+) to an? (.+)\.$",
        r"- `\1` changed from \2 to \3",
    ),
    "TYPE_REMOVED_FROM_UNION": _replacer(
        "#### Types removed from unions",
        r"^(\w+) was removed from union type (\w+)\.$",
        r"- `\1` was removed from union `\2`",
    ),
    "VALUE_REMOVED_FROM_ENUM": _replacer(
        "#### Enum values removed",
        r"^(\w+) was removed from enum type (\w+)\.$",
        r"- `\2.\1` was removed",
    ),
    "REQUIRED_INPUT_FIELD_ADDED": _replacer(
        "#### Required input fields added",
        r"^A required field (\w+) on input type (\w+) was added\.$",
        r"- `\2.\1` was added as a required field",
    ),
    "IMPLEMENTED_INTERFACE_REMOVED": _replacer(
        "#### Interfaces no longer implemented",
        r"^(\w+) no longer implements interface (\w+)\.$",
        r"- `\1` no longer implements `\2`",
    ),
    "FIELD_REMOVED": _replacer(
        "#### Fields removed",
        r"^(\w+)\.(\w+) was removed\.$",
        r"- `\1.\2` was removed",
    ),
    "FIELD_CHANGED_KIND": _replacer(
        "#### Fields changed type",
        rf"^(\w+)\.(\w+) changed type from {_TYPE} to {_TYPE}\.$",
        r"- `\1.\2` changed type from `\3` to `\4`",
    ),
    "REQUIRED_ARG_ADDED": _replacer(
        "#### Required arguments added",
        r"^A required arg (\w+) on (\w+)\.(\w+) was added\.$",
        r"- `\2.\3(\1)` was added as a required argument",
    ),
    "ARG_REMOVED": _replacer(
        "#### Arguments removed",
        r"^(\w+)\.(\w+) arg (\w+) was removed\.$",
        r"- `\1.\2(\3)` was removed",
    ),
    "ARG_CHANGED_KIND": _replacer(
        "#### Arguments changed type",
        rf"^(\w+)\.(\w+) arg (\w+) has changed type from {_TYPE} to {_TYPE}\.$",
        r"- `\1.\2(\3)` changed type from `\4` to `\5`",
    ),
    "DIRECTIVE_REMOVED": _replacer(
        "#### Directives removed",
        r"^(\w+) was removed\.$",
        r"- `@\1` was removed",
    ),
    "DIRECTIVE_ARG_REMOVED": _replacer(
        "#### Directive arguments removed",
        r"^(\w+) was removed from (\w+)\.$",
        r"- `@\2(\1)` was removed",
    ),
    "REQUIRED_DIRECTIVE_ARG_ADDED": _replacer(
        "#### Required directive arguments added",
        r"^A required arg (\w+) on directive (\w+) was added\.$",
        r"- `@\2(\1)` was added as a required argument",
    ),
    "DIRECTIVE_REPEATABLE_REMOVED": _replacer(
        "#### Directives no longer repeatable",
        r"^Repeatable flag was removed from (\w+)\.$",
        r"- `@\1` is no longer repeatable",
    ),
    "DIRECTIVE_LOCATION_REMOVED": _replacer(
        "#### Directive locations removed",
        r"^(\w+) was removed from (\w+)\.$",
        r"- `@\2` can no longer be used on `\1`",
    ),
}

FALLBACK_REPLACER = _replacer("#### Other breaking changes", r"^(.*)$", r"- \1")


def group_by_type(changes: Iterable[BreakingChange]) -> Dict[str, List[BreakingChange]]:
    """Group changes by type; groups and members keep first-seen order."""
    groups: Dict[str, List[BreakingChange]] = {}
    for change in changes:
        groups.setdefault(change.type, []).append(change)
    return groups


class ChangeClassifier:
    """Renders breaking changes as titled Markdown sections."""

    def __init__(self, replacers: Dict[str, Replacer] = REPLACERS, strict: bool = False):
        """
        Args:
            replacers: Mapping of change type to its rendering template
            strict: Raise ClassificationError for unknown change types instead
                of rendering them under a generic section
        """
        self.replacers = replacers
        self.strict = strict

    def _replacer_for(self, change_type: str) -> Replacer:
        replacer = self.replacers.get(change_type)
        if replacer is not None:
            return replacer
        if self.strict:
            raise ClassificationError(change_type)
        logger.warning(f"No message template for breaking change type {change_type}, using fallback")
        return FALLBACK_REPLACER

    def render(self, changes: Iterable[BreakingChange]) -> List[str]:
        """
        Render changes as message lines, one title line per change type.

        Raises:
            ClassificationError: In strict mode, for an unknown change type
        """
        lines: List[str] = []
        for change_type, group in group_by_type(changes).items():
            replacer = self._replacer_for(change_type)
            lines.append(replacer.title)
            lines.extend(self._rewrite(replacer, change) for change in group)
        return lines

    @staticmethod
    def _rewrite(replacer: Replacer, change: BreakingChange) -> str:
        line, count = replacer.from_pattern.subn(replacer.to_template, change.description)
        if count:
            return line
        logger.warning(f"Unrecognised {change.type} description: {change.description}")
        return f"- {change.description}"
