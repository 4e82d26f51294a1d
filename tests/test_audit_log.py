import json

from fuseflow.audit_log import AuditLog
from fuseflow.ids import new_exec_id
from fuseflow.results import function_result_error, function_result_success


def test_new_entry_is_returned_by_get():
    log = AuditLog()
    exec_id = new_exec_id(0)
    entry = log.new_entry(0, "trigger", exec_id, {"a": 1})
    assert log.get(exec_id) is entry
    assert entry.thread_id == 0
    assert entry.function_node_id == "trigger"
    assert entry.input == {"a": 1}
    assert entry.result is None


def test_get_missing_returns_none():
    log = AuditLog()
    log.new_entry(0, "trigger", new_exec_id(0), None)
    assert log.get(new_exec_id(1)) is None


def test_json_keeps_insertion_order():
    log = AuditLog()
    ids = [new_exec_id(thread) for thread in (3, 1, 2)]
    for thread, exec_id in zip((3, 1, 2), ids):
        log.new_entry(thread, f"node-{thread}", exec_id, None)
    parsed = json.loads(log.to_json())
    assert list(parsed) == [str(exec_id) for exec_id in ids]
    assert list(log) == [str(exec_id) for exec_id in ids]
    assert parsed[str(ids[0])]["function_node_id"] == "node-3"


def test_json_omits_empty_input_and_result():
    log = AuditLog()
    exec_id = new_exec_id(0)
    log.new_entry(0, "trigger", exec_id, None)
    entry = json.loads(log.to_json())[str(exec_id)]
    assert "input" not in entry
    assert "result" not in entry
    assert entry["thread_id"] == 0


def test_json_includes_result():
    log = AuditLog()
    exec_id = new_exec_id(2)
    entry = log.new_entry(2, "sum", exec_id, {"values": [1, 2]})
    entry.result = function_result_success({"total": 3})
    parsed = json.loads(log.to_json())[str(exec_id)]
    assert parsed["input"] == {"values": [1, 2]}
    assert parsed["result"]["async"] is False
    assert parsed["result"]["output"] == {"status": "success", "data": {"total": 3}}


def test_error_result_serialises_error_as_empty_object():
    log = AuditLog()
    exec_id = new_exec_id(0)
    entry = log.new_entry(0, "fail", exec_id, None)
    entry.result = function_result_error(ValueError("boom"))
    parsed = json.loads(log.to_json())[str(exec_id)]
    assert parsed["result"]["output"]["status"] == "error"
    assert parsed["result"]["output"]["data"] == {"error": {}}


def test_replacing_entry_keeps_position():
    log = AuditLog()
    first, second = new_exec_id(0), new_exec_id(1)
    log.new_entry(0, "a", first, None)
    log.new_entry(1, "b", second, None)
    replacement = log.new_entry(0, "c", first, None)
    assert len(log) == 2
    assert log.get(first) is replacement
    assert list(json.loads(log.to_json())) == [str(first), str(second)]


def test_empty_log_serialises_to_empty_object():
    log = AuditLog()
    assert json.loads(log.to_json()) == {}
    assert len(log) == 0