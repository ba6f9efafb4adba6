# dagsched

Building blocks for the schedulability analysis of real-time tasks modelled
as directed acyclic graphs (DAGs) of sub-tasks.

## Modules

- `dagsched.subtask`: `SubTask`, a DAG vertex with a WCET (`c`), lists of
  predecessors (`pred`) and successors (`succ`), an assigned `core`, a core
  type (`gamma`) and timing fields. `SubTaskMode` marks normal and conditional
  vertices. The methods `compute_local_offset`,
  `compute_earliest_finishing_time`, `compute_local_deadline` and
  `compute_latest_starting_time` fill in the per-vertex bounds; the last two
  steps raise `ValueError` if the value they depend on has not been computed.
  `cond_pred` lists the ids of predecessors that are conditional sources.
- `dagsched.utils`: `parse_dot_line` classifies one line of a DOT task
  description (`DOTLineType`) and returns a `DotInfo` with the ids, WCET,
  period and deadline it carries; `separate_on_comma` splits bracket
  attributes into key/value pairs and raises `ValueError` on malformed input.
  Also `SimpleTimer` (`tic`/`toc` with a `TimeUnit`), `are_equal`,
  `int_rand_max_min`, `float_rand_max_min` and `remove_path_and_extension`.
- `dagsched.scheduling`: `demand_bound_function`, the partitioning order
  enums `PartitioningTaskOrder` and `PartitioningCoresOrder`, and the `SSTask`
  record describing a self-suspending task seen by one core.
- `dagsched.sptree`: `SPTree` turns a nested fork-join DAG into a binary
  series-parallel decomposition tree of `SPNode` objects (`NodeType` S, P or
  L). `compute_parallel_ids` returns the widest set of vertices with work left
  that may run in parallel, and `compute_wd_uco` the carry-out workload
  distribution as `(width, parallelism)` pairs, without changing the vertices.
  `to_dot` returns a Graphviz description; `save_as_dot(name)` writes
  `name.dot` and, when Graphviz's `dot` command is installed, renders
  `name.png`.
- `dagsched.plotting`: `plot_results` draws one styled line per method
  (sorted by name) and saves `<path>.pdf`; `plot_times` draws a box plot of
  running times and saves `<path>_times.pdf`. Both return the matplotlib
  figure and show it unless `show_plots=False`.

## Installation

```
pip install .
```

## Example

```python
from dagsched.subtask import SubTask
from dagsched.sptree import SPTree

# A fork-join DAG: 0 -> {1, 2} -> 3
v = [SubTask(id=i, c=c) for i, c in enumerate([1.0, 4.0, 2.0, 1.0])]
for a, b in [(0, 1), (0, 2), (1, 3), (2, 3)]:
    v[a].succ.append(v[b])
    v[b].pred.append(v[a])

tree = SPTree()
tree.convert(v)
print(tree.to_dot())
print(tree.compute_wd_uco(v))   # [(width, parallelism), ...]
```

Parsing one line of a DOT task file:

```python
from dagsched.utils import parse_dot_line

info = parse_dot_line('3 [label="12", p=0, s=1];')
print(info.line_type, info.id, info.wcet)
```

## What it does not do

This package provides vertices, decomposition trees, parsing helpers and
plots. It has no whole-task or task-set model, does not read complete task
files or generate random task sets, contains no schedulability tests or
processor-assignment heuristics, and offers no command-line program.

## Tests

```
pip install .[test]
pytest
```