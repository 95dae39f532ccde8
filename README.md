# kclick

Building blocks for an interactive Kubernetes shell. `kclick` takes the
objects a Kubernetes API server returns (plain dictionaries decoded from
JSON) and turns them into numbered text tables, keeps the list of objects
that were shown so one can be picked by its number, and prepares the
options, paths and command lines needed to read logs, exec into pods and
delete objects.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Modules

- `kclick.util` – `format_duration` (compact durations such as `3d 4h`),
  `time_since`, `keyval_string` (one `key=value` line per entry, sorted by
  key), `uppercase_first`, `parse_duration` (`5s`, `3m5s`,
  `1h 2min 5sec`), `parse_timestamp` (RFC 3339), the validators
  `valid_u32`, `valid_duration` and `valid_date` (each returns the parsed
  value or raises `ValueError`), `mapped_val`, and `ClickError`, the
  exception raised when a command cannot be carried out.
- `kclick.command_def` – completion of column names and long options
  (`try_complete_all`, `try_complete`, `complete_option`, each returning a
  list of `Completion(display, replacement)`), `extract_first`, and
  `add_extra_cols`, which applies the `--show` rules: `all` selects every
  extra column except `Labels`, which needs `labels` or the labels switch.
- `kclick.listing` – `ObjType` and `KObj` describe a listed object (a pod's
  `KObj` also carries its container names); `CellSpec` is a table cell whose
  text renders `None` as `<none>`, datetimes as the age since then and
  durations compactly. `build_specs` extracts rows and filters them by a
  regex, `resolve_columns` works out the columns and sort column from
  `show`, `sort`, `labels` and whether a namespace is set (raising
  `ClickError` for unknown values), `handle_list_result` numbers, sorts and
  optionally reverses the rows, and `render_table` lays them out as aligned
  text.
- One listing module per kind of object, each with its column extractors:
  `kclick.pods` (`list_pods`, `pod_status`, `ready_counts`,
  `restart_count`, `last_restart`, `pod_field_selector`, ...),
  `kclick.nodes` (`list_nodes`, `node_state`, `node_roles`, ...),
  `kclick.deployments` (`list_deployments`), `kclick.replicasets`
  (`list_replicasets`), `kclick.jobs` (`list_jobs`, `job_completions`,
  `job_duration`, ...), `kclick.configmaps` (`list_configmaps`) and
  `kclick.namespaces` (`list_namespaces`).
- `kclick.pods` also describes containers with `format_containers` and
  `format_state`.
- `kclick.events` – `get_event_ts`, `sort_events` (oldest first, events
  without a time first), the field selectors `object_field_selector` and
  `namespace_field_selector`, and `event_rows` / `render_events`
  (`No events` when the list is empty).
- `kclick.logs` – `build_log_options` validates the `logs` flags
  (follow, previous, tail, since, since-time, timestamps, insecure) into a
  `LogOptions`, whose `to_params()` gives the query parameters;
  `log_timeout`, `pick_container`, `render_output_path` (fills `{name}`,
  `{namespace}` and `{time}`), `log_file_name`, `editor_command`, and
  `write_logs_to_file`, which writes byte chunks to a file until they run
  out or a stop callback returns true, and returns the number of bytes
  written.
- `kclick.exec` – `parse_bool`, `it_flag`, `build_exec_args` and
  `build_terminal_args` build the `kubectl exec` command line; `run_exec`
  runs it and raises `ClickError` if kubectl fails or is missing, or, in a
  terminal, starts the terminal (`xterm -e` by default) and returns its
  process. `kubectl` must be on your `PATH`.
- `kclick.delete` – `build_delete_options` (force, now, grace period,
  cascade) gives a `DeleteOptions` with `to_params()`; `delete_path` gives
  the API path for an object; `interpret_delete_response` turns a status
  and body into `Deleted` / `Delete request accepted` or raises
  `ClickError`; `confirm` checks a `y`/`yes` answer.

## Example

    from kclick.pods import list_pods

    pods = [...]  # the "items" of a PodList, as dictionaries
    objs, table = list_pods(pods, show=["node"], sort="age", reverse=True,
                            namespace="default")
    print(table, end="")
    selected = objs[0]  # row number 0 in the table

Every listing function returns the listed objects and the rendered table,
in that order.

## What the package does not do

`kclick` does not talk to a cluster: it has no API client, reads no
kubeconfig, and knows nothing of contexts beyond the name you pass in. It
has no interactive prompt, command dispatcher or command-line entry point,
and does not keep aliases, settings or port forwards. The only process it
starts is `kubectl` (or a terminal running it) in `kclick.exec.run_exec`.