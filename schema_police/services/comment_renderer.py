"""
Comment rendering.

Turns per-file analysis results into the Markdown body of the pull request
comment. Blocks follow the order of the results.
"""

from typing import Iterable, List

from schema_police.analyzers.change_classifier import ChangeClassifier, ClassificationError
from schema_police.models.analysis import SchemaFileResult
from schema_police.utils.logging import get_logger

logger = get_logger(__name__)

NO_BREAKING_CHANGES_MESSAGE = "No breaking changes detected :tada:"

BREAKING_CHANGES_EXPLANATION = (
    "Changes you have made will break GraphQL API functionality for our clients. "
    "Avoid these changes or provide a clear justification if they are necessary. "
    "Learn more about [extending schemas](https://github.com/Shopify/graphql#extending-schemas-and-versioning)."
)


def _file_link(result: SchemaFileResult) -> str:
    if result.content_url:
        return f"[`{result.file}`]({result.content_url})"
    return f"`{result.file}`"


def render_file_result(result: SchemaFileResult, classifier: ChangeClassifier) -> List[str]:
    """Render one file's block: read error, syntax error, breaking changes or clean."""
    link = _file_link(result)
    comparison = result.comparison

    if comparison.kind == "compare":
        return [f"### :bangbang: Error reading file: {link}", comparison.message]

    if comparison.kind == "parse":
        lines = [f"### :construction: Syntax error in file: {link}", comparison.message]
        if comparison.snippet:
            lines.append(f"```graphql\n{comparison.snippet}\n```")
        return lines

    if comparison.is_clean:
        return [f"### :tada: No breaking changes detected in file: {link}"]

    try:
        change_lines = classifier.render(comparison.breaking_changes)
    except ClassificationError as e:
        logger.error(str(e), extra={"file": result.file})
        return [f"### :bangbang: Error classifying breaking changes in file: {link}", str(e)]

    return [
        f"### :police_car: Breaking changes detected in file: {link}",
        BREAKING_CHANGES_EXPLANATION,
        *change_lines,
    ]


def render_comment_body(results: Iterable[SchemaFileResult], classifier: ChangeClassifier) -> str:
    """Join all file blocks into the comment body (may be empty)."""
    lines: List[str] = []
    for result in results:
        lines.extend(render_file_result(result, classifier))
    return "\n".join(lines)
