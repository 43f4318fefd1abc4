"""Profile stage.

Turns already-parsed rows into per-column numeric/categorical summaries plus
a bounded row sample.
"""

from .columns import profile_column
from .summarize import summarize_dataset, summarize_tabular

__all__ = ["profile_column", "summarize_dataset", "summarize_tabular"]
