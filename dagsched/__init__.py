"""Building blocks for real-time DAG task analysis: sub-tasks, SP trees, DOT parsing and plots."""

__version__ = "0.1.0"

__all__ = ["subtask", "utils", "scheduling", "sptree", "plotting"]