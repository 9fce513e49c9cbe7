"""
Input validation utilities for the edgeMarkov library.

These checks run before any computation so that malformed traces fail fast
with an :class:`InvalidInputError` or :class:`DataFormatError`.
"""

from typing import Any, List, Optional, Sequence

import polars as pl

from .exceptions import DataFormatError, InvalidInputError


CONTACT_COLUMNS = ["n1", "n2", "start", "end"]


def validate_contact_dataframe(
    df: pl.DataFrame,
    columns: Sequence[str] = CONTACT_COLUMNS,
    allow_empty: bool = False
) -> None:
    """
    Validate a contact interval table before building a temporal graph.

    Parameters
    ----------
    df : pl.DataFrame
        One row per contact: two node columns then inclusive start and end
        time indices
    columns : Sequence[str], default ("n1", "n2", "start", "end")
        Names of the node, node, start and end columns
    allow_empty : bool, default False
        Whether a table without rows is acceptable

    Raises
    ------
    DataFormatError
        If columns are missing or the time columns are not integers
    InvalidInputError
        If the table is empty, contains nulls, self-loops, negative times or
        contacts ending before they start

    Examples
    --------
    >>> df = pl.DataFrame({"n1": [1], "n2": [2], "start": [0], "end": [3]})
    >>> validate_contact_dataframe(df)
    """
    node_a, node_b, start_col, end_col = columns

    missing_cols = [col for col in columns if col not in df.columns]
    if missing_cols:
        raise DataFormatError(
            f"Missing required columns: {missing_cols}",
            format_type="DataFrame",
            details={"available_columns": df.columns, "missing": missing_cols}
        )

    if df.is_empty():
        if allow_empty:
            return
        raise InvalidInputError("Contact table is empty", field="dataframe")

    for col in columns:
        null_count = df[col].null_count()
        if null_count > 0:
            raise InvalidInputError(
                f"Column contains {null_count} null values",
                field=col,
                details={"null_count": null_count, "total_rows": len(df)}
            )

    for col in (start_col, end_col):
        if not df[col].dtype.is_integer():
            raise DataFormatError(
                f"Time column must hold integer time indices, got {df[col].dtype}",
                format_type="DataFrame",
                details={"column": col}
            )

    self_loop_count = (df[node_a] == df[node_b]).sum()
    if self_loop_count > 0:
        raise InvalidInputError(
            f"Found {self_loop_count} self-loops (contacts from a node to itself)",
            field="edges",
            details={"self_loop_count": self_loop_count}
        )

    if df[start_col].min() < 0:
        raise InvalidInputError(
            "Contact start times must be non-negative",
            field=start_col,
            value=df[start_col].min()
        )

    reversed_count = (df[end_col] < df[start_col]).sum()
    if reversed_count > 0:
        raise InvalidInputError(
            f"Found {reversed_count} contacts ending before they start",
            field=end_col,
            details={"reversed_count": reversed_count}
        )


def validate_node_membership(
    nodes: Sequence[Any],
    universe: Any,
    field: str = "nodes",
    context: Optional[str] = None
) -> None:
    """
    Check that every node belongs to ``universe``.

    Parameters
    ----------
    nodes : Sequence[Any]
        Node identifiers referenced by edges
    universe : container
        Anything supporting ``in`` (set, IDMapper, ...)
    field : str
        Name reported in the error
    context : str, optional
        Operation name added to the error message

    Raises
    ------
    InvalidInputError
        Listing up to ten offending nodes
    """
    unknown: List[Any] = [node for node in dict.fromkeys(nodes) if node not in universe]
    if unknown:
        where = f" in {context}" if context else ""
        raise InvalidInputError(
            f"{len(unknown)} node(s){where} are outside the node universe",
            field=field,
            details={"unknown_nodes": unknown[:10]}
        )
