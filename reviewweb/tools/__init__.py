"""
ReviewWeb tools module.

Argument models and the operation table that maps each tool onto a
ReviewWeb.site endpoint.
"""

from reviewweb.tools.schema import ToolArgs, validate_arguments
from reviewweb.tools.registry import OPERATIONS, Operation, OperationRegistry, registry

__all__ = ["ToolArgs", "validate_arguments", "OPERATIONS", "Operation", "OperationRegistry", "registry"]
