# fuseflow

Building blocks for a workflow engine. A workflow is a graph of function
nodes joined by edges; fuseflow describes such graphs, checks them, gives
every node a thread (forks start new threads, joins merge them), and
provides the pieces an engine needs around that: execution IDs, per-thread
state, an audit log, the actions to carry out, a store for node outputs and
conversion of values to the types that function parameters declare.

## Installation

```
pip install fuseflow
```

For the test suite:

```
pip install "fuseflow[test]"
pytest
```

## Modules

- `fuseflow.schema`: `GraphSchema`, `NodeSchema`, `EdgeSchema`,
  `EdgeCondition`, `InputMapping`, `InputMappingSource`, `NodeConfig`.
  `GraphSchema.from_json(data)` parses a schema (JSON `null` gives `None`),
  `validate()` raises `SchemaValidationError` listing every missing field
  (id, name of at most 100 characters, node ids and functions, edge ids and
  ends, condition names and values), and `clone()` makes deep copies.
- `fuseflow.graph`: `Graph`, `Node`, `Edge`, `GraphError`. `Graph(schema)`
  validates the schema, builds nodes and edges (the first node is the
  trigger) and assigns threads. `find_node`, `nodes`, `edges`,
  `update_schema`, `update_node_metadata`, `is_nodes_metadata_populated`,
  `schema` (a deep copy) and `mermaid_flowchart()` are available.
- `fuseflow.store`: `KV`, a thread-safe store addressed by selectors such as
  `"user.profile.name"`, `"products[1].price"` or `"matrix[2][2]"`, with
  typed getters (`get_str`, `get_int`, `get_bool`, `get_float`,
  `get_int_slice`, `get_float64_slice`, `get_map_str`) that fall back to
  empty values.
- `fuseflow.function_input`: `FunctionInput`, the arguments of one
  function execution, with `..._or_default` getters.
- `fuseflow.results`: `FunctionOutputStatus`, `FunctionOutput`,
  `FunctionResult`, `ExecutionInfo`, and `function_output`,
  `function_success_output`, `function_result`, `function_result_success`,
  `function_result_error`, `function_result_async`.
- `fuseflow.metadata`: `FunctionMetadata`, `InputMetadata`,
  `OutputMetadata`, `ParameterSchema`, edge metadata classes,
  `TransportType`, `Package` and `PackagedFunction` with `validate()`
  raising `PackageValidationError`.
- `fuseflow.typeschema`: `parse_value(type_str, value)` converts a value to
  `"string"`, `"int"`, `"float64"`, `"bool"`, `"map[string]any"` or a
  `"[]T"` list of those; failures raise `TypeSchemaError`.
- `fuseflow.ids`: `uuid_v7()`, `new_workflow_id()`, `v8_exec_id(thread)`,
  `new_exec_id(thread)` and `ExecID`, whose `thread()` reads back the
  12-bit thread number.
- `fuseflow.threads`: `Threads`, `Thread`, `ThreadState`.
- `fuseflow.audit_log`: `AuditLog` (entries in insertion order, `to_json()`)
  and `AuditLogEntry`.
- `fuseflow.actions`: `ActionType`, `NoopAction`, `RunFunctionAction`,
  `RunParallelFunctionsAction`.
- `fuseflow.http_client`: `Client(host, options)` with `get`, `post`,
  `put`, `delete`, `send_request` and `set_default_header`; `Request`,
  `Response` (with `is_json()`), `ClientOptions`, `HTTPClientError`.
- `fuseflow.strings`: `replace_tokens`, `after_first_dot`,
  `serialize_string`.

## Example

```python
from fuseflow.schema import GraphSchema
from fuseflow.graph import Graph

schema = GraphSchema.from_json(b"""
{
  "id": "demo",
  "name": "Demo",
  "nodes": [
    {"id": "start", "function": "system/trigger"},
    {"id": "a", "function": "debug/nil"},
    {"id": "b", "function": "debug/nil"}
  ],
  "edges": [
    {"id": "e1", "from": "start", "to": "a"},
    {"id": "e2", "from": "start", "to": "b"}
  ]
}
""")
graph = Graph(schema)
print(graph.find_node("a").function_id())   # debug/nil
print(graph.mermaid_flowchart())
```

```python
from fuseflow.store import KV

kv = KV()
kv.set("user.profile.name", "John Doe")
kv.get("user.profile")           # {"name": "John Doe"}
kv.get_str("user.profile.name")  # "John Doe"
```

## What it does not do

fuseflow has no workflow runner: nothing here takes a `Graph`, steps
through it and executes functions, so producing actions, updating threads
and filling the audit log is left to the code that uses these pieces. It
has no command-line program, no server, and does not store workflows or
their results anywhere but in memory.