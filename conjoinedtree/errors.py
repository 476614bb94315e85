"""Exception hierarchy for ConjoinedTree.

Structural misuse of the API is fatal to the call and surfaces as one of
these exceptions. Conditions such as deleting a node that is already hidden
or searching without a match are not errors and never raise.
"""


class ConjoinedTreeError(Exception):
    """Base class for all ConjoinedTree errors."""
    pass


class StructuralViolationError(ConjoinedTreeError):
    """Raised when an operation would break the shape of the tree.

    Examples: mixing branch and leaf children under one node, attaching a
    leaf to two parents on the same axis, or hanging a leaf off a root.
    """
    pass


class UnsupportedOperationError(StructuralViolationError):
    """Raised when an operation is not valid for the node variant.

    Mutation and sort calls on a leaf, and deleting a root, end up here.
    """
    pass


class IndexOutOfRangeError(ConjoinedTreeError, IndexError):
    """Raised when a positional insert is outside the children list."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Index {index} out of range for {size} children")
        self.index = index
        self.size = size


class ConfigurationError(ConjoinedTreeError, ValueError):
    """Raised when a TreeConfig fails validation."""

    def __init__(self, errors):
        super().__init__("Invalid tree configuration: " + "; ".join(errors))
        self.errors = list(errors)
