# kubeview

Building blocks for a terminal dashboard over Kubernetes clusters. The
package turns rows you have already collected into aligned strings with
ANSI colour codes, and keeps the state of a few interactive pieces (a log
viewer, confirmation dialogs). Everything returns plain `str` values
ready to print.

## Modules

- `kubeview.ansi` – measuring and laying out text in terminal cells,
  ignoring SGR escapes: `visible_width`, `truncate` (cuts with `…`),
  `pad_col` / `pad_col_right` (style a plain cell and pad it),
  `pad_cell_ansi` / `pad_cell_ansi_right` (pad or cut already-styled
  text), `render_selected` (grey selection background that survives
  inner resets), `short_host`, `overlay_at` / `splice_line` (paste a
  panel over existing lines), `visible_prefix` / `visible_suffix`, and
  `clamp_canvas` (force text to exactly `w` × `h` cells).
- `kubeview.theme` – `Style` (foreground, background, bold; `render`),
  `Theme` with `style_for_phase`, `default_theme()`, `render_box`
  (bordered box) and `place` (centre a block on a canvas).
- `kubeview.sidebar` – `short_version` (`v1.30.2+rke2r1` → `v1.30.2`),
  `pct` (clamped whole percentage) and `bar_with_pct` (a five-cell load
  bar coloured green, yellow from 60 %, red from 80 %).
- `kubeview.pods` – `PodRow`, `ContainerState`, `SortKey` (with `next`
  and `label`), `sorted_rows` / `less_by` (a total order ending in
  namespace, name, UID), `row_index`, `format_cpu`, `format_mem`,
  `format_rate`, `format_age` and `pod_container_dots`.
- `kubeview.nodes` – `NodeRow`, `NodeContainerCounts`, `node_status`
  (`Ready`, `Cordoned`, `NotReady`), `node_roles_label`,
  `sorted_node_rows`, `node_container_states` and `container_dots`.
- `kubeview.namespaces` – `NsRow`, `NsSortKey`, `NsCount`,
  `sorted_ns_rows` / `ns_less_by`, `collect_ns_counts` (pods,
  deployments and only `Warning` events per namespace),
  `label_summary`, `ns_name_cell` and `namespaces_noun`.
- `kubeview.picker` – `render_ns_picker`, a centred namespace list
  windowed around the cursor.
- `kubeview.confirm` – `ObjectRef`, `RestartConfirm`, `ScaleConfirm`
  and `is_digits`.
- `kubeview.logs` – `LogsView`, `pick_deployment_pod`,
  `clamp_logs_scroll`, `summarise_stream_err` and `highlight_matches`.

## Install

```
pip install .
```

## Examples

A sorted pod list:

```python
from kubeview.ansi import pad_col
from kubeview.pods import PodRow, SortKey, sorted_rows, format_mem
from kubeview.theme import default_theme

theme = default_theme()
rows = {
    "a": PodRow(uid="a", namespace="default", name="web", mem_bytes=300 * 1024 * 1024),
    "b": PodRow(uid="b", namespace="default", name="api", mem_bytes=2 * 1024**3),
}
for row in sorted_rows(rows, SortKey.MEM, desc=True):
    print(pad_col(row.name, 12, theme.base) + format_mem(row.mem_bytes))
```

A log viewer:

```python
from kubeview.logs import LogsView
from kubeview.theme import default_theme

view = LogsView()
view.apply_lines(["starting", "error: disk full", "retrying"])
print(view.render(default_theme(), "prod", 100, 30))
```

## Keys and callbacks

The interactive classes take key names as strings and return `True`
from `handle_key` when the key asks the application to quit
(`"ctrl+c"`).

- `LogsView.handle_key`: `esc`/`q` clears an active search or closes,
  `/` starts a search, `n`/`N` step through matches, `j`/`down`,
  `k`/`up`, `ctrl+d`, `ctrl+u`, `g`/`home`, `G`/`end` scroll, `f`
  toggles follow. While searching, printable keys edit the term,
  `backspace` deletes, `enter` keeps the search and jumps to the first
  match, `esc` drops it. With several containers, `open_for_pod` shows
  a picker driven by `j`/`k`/`enter`/`esc`.
  `LogsView(on_start=..., on_stop=...)` receives `(session, ref,
  container)` when a stream should begin and `()` when it should stop;
  `session` grows on every start.
- `RestartConfirm.handle_key`: `y`, `Y` or `enter` calls
  `on_submit(context, ref)`; `esc`, `n` or `N` closes.
- `ScaleConfirm.handle_key`: digits and `backspace` edit the count,
  `enter` validates it ("not a number", "replicas must be ≥ 0",
  "already at this size") and calls `on_submit(context, ref, replicas)`;
  `esc` closes.

## What it does not do

kubeview does not connect to a cluster, watch resources or stream logs
itself; it has no event loop and no full-screen application or command.
It provides the pieces such an application draws with: feed it rows and
key names, and wire the callbacks to your own cluster client.

## Running the tests

```
pip install ".[test]"
pytest
```