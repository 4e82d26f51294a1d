from fuseflow.function_input import FunctionInput
from fuseflow.ids import new_exec_id
from fuseflow.results import (
    ExecutionInfo,
    FunctionOutput,
    FunctionOutputStatus,
    FunctionResult,
    function_output,
    function_result,
    function_result_async,
    function_result_error,
    function_result_success,
    function_success_output,
)


def test_status_values_match_wire_format():
    assert FunctionOutputStatus("nil") is FunctionOutputStatus.NIL
    assert FunctionOutputStatus("success") is FunctionOutputStatus.SUCCESS
    assert FunctionOutputStatus("error") is FunctionOutputStatus.ERROR


def test_function_output_keeps_data():
    data = {"a": 1}
    output = function_output(FunctionOutputStatus.ERROR, data)
    assert output.status is FunctionOutputStatus.ERROR
    assert output.data is data


def test_success_output():
    output = function_success_output({"x": "y"})
    assert output == FunctionOutput(FunctionOutputStatus.SUCCESS, {"x": "y"})


def test_result_without_data_gets_empty_dict():
    result = function_result(FunctionOutputStatus.SUCCESS, None)
    assert result.output.data == {}
    assert result.is_async is False


def test_result_success_with_data():
    result = function_result_success({"k": 2})
    assert result.output.status is FunctionOutputStatus.SUCCESS
    assert result.output.data == {"k": 2}


def test_result_success_default_is_empty():
    assert function_result_success().output.data == {}


def test_result_error_holds_exception():
    exc = RuntimeError("boom")
    result = function_result_error(exc)
    assert result.output.status is FunctionOutputStatus.ERROR
    assert result.output.data["error"] is exc


def test_result_async():
    result = function_result_async()
    assert result.is_async is True
    assert result.output.data is None
    assert result.output.status is FunctionOutputStatus.SUCCESS


def test_result_to_dict():
    result = function_result_success({"v": 1})
    assert result.to_dict() == {
        "async": False,
        "output": {"status": "success", "data": {"v": 1}},
    }


def test_execution_info_finish_callback():
    received = []
    exec_id = new_exec_id(3)
    info = ExecutionInfo(
        workflow_id="wf",
        exec_id=exec_id,
        input=FunctionInput({"n": 5}),
        finish=received.append,
    )

    def double(ctx: ExecutionInfo) -> FunctionResult:
        ctx.finish(function_success_output({"n": ctx.input.get_int("n") * 2}))
        return function_result_async()

    result = double(info)
    assert result.is_async is True
    assert received == [FunctionOutput(FunctionOutputStatus.SUCCESS, {"n": 10})]
    assert info.exec_id.thread() == 3