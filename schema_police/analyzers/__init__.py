"""Schema comparison and breaking-change rendering."""

from .change_classifier import ChangeClassifier, ClassificationError
from .schema_diff import SchemaDiffEngine

__all__ = ["SchemaDiffEngine", "ChangeClassifier", "ClassificationError"]
