"""
Schema Diff Engine.

Builds the base and head schemas from transport-encoded SDL and lists the
breaking changes between them. Syntax and SDL validation problems are reported
as parse failures; anything else that goes wrong is a compare failure.
"""

import base64
import binascii
from typing import List, Tuple, Union

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSyntaxError,
    Source,
    build_ast_schema,
    find_breaking_changes,
    parse,
)
from graphql.language import print_source_location
from graphql.validation.validate import validate_sdl

from schema_police.models.analysis import (
    BreakingChange,
    CompareFailure,
    ComparisonSuccess,
    ParseFailure,
)
from schema_police.utils.logging import get_logger

logger = get_logger(__name__)

BASE_SOURCE_NAME = "base schema"
HEAD_SOURCE_NAME = "head schema"


class SchemaDecodeError(Exception):
    """File content could not be decoded to schema text."""


def decode_content(content: str, encoding: str = "base64") -> str:
    """
    Decode contents API payload to UTF-8 text.

    Raises:
        SchemaDecodeError: If the payload is not valid base64/UTF-8
    """
    if encoding != "base64":
        raise SchemaDecodeError(f"Unsupported content encoding: {encoding}")
    try:
        # The contents API wraps base64 at 60 columns
        return base64.b64decode(content.encode("ascii"), validate=False).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise SchemaDecodeError(f"Could not decode file content: {e}") from e


def _parse_failure(error: GraphQLError) -> ParseFailure:
    snippet = None
    if error.source is not None and error.locations:
        snippet = print_source_location(error.source, error.locations[0])
    return ParseFailure(message=error.message, snippet=snippet)


class SchemaDiffEngine:
    """Compares two versions of a GraphQL schema file."""

    def _parse(self, text: str, name: str) -> Tuple[DocumentNode, List[GraphQLError]]:
        document = parse(Source(text, name))
        return document, validate_sdl(document)

    def compare(
        self,
        old_content: str,
        new_content: str,
        encoding: str = "base64",
    ) -> Union[ParseFailure, CompareFailure, ComparisonSuccess]:
        """
        Compare two encoded schema files.

        Args:
            old_content: Base version, transport-encoded
            new_content: Head version, transport-encoded
            encoding: Transport encoding of both contents

        Returns:
            ParseFailure, CompareFailure or ComparisonSuccess
        """
        try:
            old_text = decode_content(old_content, encoding)
            new_text = decode_content(new_content, encoding)
        except SchemaDecodeError as e:
            return CompareFailure(message=str(e))

        try:
            old_document, old_errors = self._parse(old_text, BASE_SOURCE_NAME)
            new_document, new_errors = self._parse(new_text, HEAD_SOURCE_NAME)
        except GraphQLSyntaxError as e:
            return _parse_failure(e)
        except Exception as e:
            logger.warning(f"Unexpected error parsing schema: {e}", exc_info=True)
            return CompareFailure(message=str(e))

        sdl_errors = old_errors + new_errors
        if sdl_errors:
            return _parse_failure(sdl_errors[0])

        try:
            old_schema = build_ast_schema(old_document, assume_valid_sdl=True)
            new_schema = build_ast_schema(new_document, assume_valid_sdl=True)
            changes = find_breaking_changes(old_schema, new_schema)
        except Exception as e:
            logger.warning(f"Unexpected error comparing schemas: {e}", exc_info=True)
            return CompareFailure(message=str(e))

        return ComparisonSuccess(
            breaking_changes=[
                BreakingChange(type=change.type.name, description=change.description)
                for change in changes
            ]
        )
