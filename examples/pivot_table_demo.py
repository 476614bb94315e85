#!/usr/bin/env python3
"""Demo script for pivot-table style data in ConjoinedTree.

Builds a small sales table with regions and products as rows and
quarters as columns, then shows subtotals, sorting and filtering on the
shared cells.
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from conjoinedtree import (
    Location,
    SumAccumulator,
    build_tree,
    descending,
    setup_logging,
    to_matrix,
)


SALES = {
    (("North", "Widgets"), ("H1", "Q1")): 120,
    (("North", "Widgets"), ("H1", "Q2")): 80,
    (("North", "Gadgets"), ("H1", "Q1")): 45,
    (("North", "Gadgets"), ("H2", "Q3")): 60,
    (("South", "Widgets"), ("H1", "Q2")): 95,
    (("South", "Widgets"), ("H2", "Q4")): 150,
    (("South", "Gizmos"), ("H2", "Q3")): 30,
}


def print_matrix(tree, title):
    """Print the visible part of the tree as a table."""
    print(f"\n=== {title} ===")
    matrix = to_matrix(tree)
    header = ["/".join(label) for label in matrix.column_labels()]
    print(f"{'':18}" + "".join(f"{h:>8}" for h in header))
    for label, row in zip(matrix.row_labels(), matrix.values):
        cells = "".join(f"{'-' if v is None else v:>8}" for v in row)
        print(f"{'/'.join(label):18}{cells}")


def demo_subtotals(tree):
    """Show region subtotals per quarter."""
    print("\n=== Region Subtotals ===")
    total = SumAccumulator()
    quarters = [path[-1] for path in tree.columns()]
    for region in tree.root1.children:
        subtotals = [region.get_accumulated_values(total, quarter) for quarter in quarters]
        print(f"  {region.value:8} " + "  ".join(
            f"{q.value}={'-' if s is None else s}" for q, s in zip(quarters, subtotals)))


def demo_sorting(tree):
    """Sort regions descending, then order quarters by one product's sales."""
    tree.sort(tree.root1, descending())
    print_matrix(tree, "Regions Sorted Descending")

    south_widgets = tree.root1.children[0].children[0]
    ordered = tree.sort_leafs_and_traverse(tree.columns(), south_widgets, descending())
    print(f"\nQuarters by {south_widgets.value} sales in "
          f"{south_widgets.parent.value}: "
          + ", ".join("/".join(str(b.value) for b in path) for path in ordered))


def demo_filtering(tree):
    """Hide small cells, then restore everything."""
    tree.filter(lambda node: node.value >= 60, Location.LEAF)
    print_matrix(tree, "Cells >= 60")
    demo_subtotals(tree)

    tree.show_all()
    print_matrix(tree, "All Cells Restored")


def main():
    """Run all demos."""
    level = logging.DEBUG if "--debug" in sys.argv else logging.INFO
    setup_logging(level)

    tree = build_tree(SALES)
    print_matrix(tree, "Sales")
    demo_subtotals(tree)
    demo_sorting(tree)
    demo_filtering(tree)


if __name__ == "__main__":
    main()
