"""Runtime building blocks for interactive ink stories: values, lists, output, stacks, functions and globals."""

__version__ = "0.1.0"

__all__ = [
    "values",
    "list_store",
    "list_table",
    "numeric_ops",
    "output",
    "choice",
    "stack",
    "functions",
    "list_ops",
    "globals",
]