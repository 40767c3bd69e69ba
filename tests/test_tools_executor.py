"""Unit tests for ToolExecutor.

Tests cover:
- Parsing tool calls, including malformed arguments
- Rejecting rounds that name unknown tools before anything runs
- Sibling calls failing independently
- Started tools finishing after the caller is cancelled
"""

import asyncio
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from labtrack.agent.tools_executor import ToolCall, ToolExecutor
from labtrack.tools import ToolContext, ToolDefinition, ToolRegistry, ToolResult, UnknownToolError
from tests.fakes import completion, tool_call

PROJECT_ARGS = {"name": "Atlas", "omics_type": "Genomics", "lead": "Dr. Who"}


@pytest.fixture
def executor():
    return ToolExecutor()


class TestParseToolCalls:
    """Parsing tool calls from completions."""

    def test_no_tool_calls(self, executor):
        assert executor.parse_tool_calls(completion("Hello")) == []

    def test_parses_name_id_and_arguments(self, executor):
        response = completion(tool_calls=[
            tool_call("createProject", PROJECT_ARGS, call_id="call-a"),
            tool_call("suggestProjectIdeas", {"topic": "genomics"}, call_id="call-b"),
        ])

        calls = executor.parse_tool_calls(response)

        assert [(c.id, c.name) for c in calls] == [
            ("call-a", "createProject"),
            ("call-b", "suggestProjectIdeas"),
        ]
        assert calls[0].arguments == PROJECT_ARGS

    def test_malformed_json_becomes_empty_arguments(self, executor):
        response = completion(tool_calls=[tool_call("createProject", "{not json")])

        calls = executor.parse_tool_calls(response)

        assert calls[0].arguments == {}
        assert calls[0].raw_arguments == "{not json"

    def test_non_object_arguments_become_empty(self, executor):
        response = completion(tool_calls=[tool_call("createProject", "[1, 2]")])

        assert executor.parse_tool_calls(response)[0].arguments == {}

    def test_assistant_message_echoes_the_calls(self, executor):
        response = completion(tool_calls=[tool_call("createProject", PROJECT_ARGS)])
        calls = executor.parse_tool_calls(response)

        message = executor.assistant_message(response, calls)

        assert message["role"] == "assistant"
        assert message["tool_calls"][0]["id"] == "call-1"
        assert message["tool_calls"][0]["function"]["name"] == "createProject"


class TestExecuteAll:
    """Executing one round of tool calls."""

    @pytest.mark.asyncio
    async def test_unknown_tool_aborts_round_before_any_write(self, executor, make_registry, store, user):
        calls = [
            ToolCall(id="c1", name="createProject", arguments=PROJECT_ARGS),
            ToolCall(id="c2", name="dropDatabase", arguments={}),
        ]

        with pytest.raises(UnknownToolError) as exc_info:
            await executor.execute_all(make_registry(user), calls)

        assert exc_info.value.names == ["dropDatabase"]
        assert await store.list_records("projects") == []

    @pytest.mark.asyncio
    async def test_failed_call_does_not_stop_siblings(self, executor, make_registry, store, user):
        calls = [
            ToolCall(id="c1", name="createProject", arguments={"lead": "Dr. Who"}),
            ToolCall(id="c2", name="createSample", arguments={"sample_id": "S-1", "project_name": "Atlas"}),
        ]

        results = await executor.execute_all(make_registry(user), calls)

        assert [r.tool_call_id for r in results] == ["c1", "c2"]
        assert results[0].result.success is False
        assert results[0].result.error_type == "validation"
        assert results[1].result.success is True
        assert len(await store.list_records("samples")) == 1

    @pytest.mark.asyncio
    async def test_results_format_as_tool_messages(self, executor, make_registry, user):
        calls = [ToolCall(id="c1", name="createProject", arguments={})]

        results = await executor.execute_all(make_registry(user), calls)
        message = results[0].to_openai_message()

        assert message["role"] == "tool"
        assert message["tool_call_id"] == "c1"
        assert message["content"].startswith("Error (validation):")


class SlowArgs(BaseModel):
    label: str


class TestCancellation:
    """A tool that has started runs to completion."""

    @pytest.mark.asyncio
    async def test_started_tool_finishes_when_caller_is_cancelled(self, executor, store, user):
        started = asyncio.Event()
        release = asyncio.Event()
        finished = []

        async def _slow_write(params: SlowArgs, context: ToolContext) -> ToolResult:
            started.set()
            await release.wait()
            finished.append(params.label)
            return ToolResult(success=True, data="written")

        registry = ToolRegistry(ToolContext(user=user, store=store, openai=MagicMock(), model="m"))
        registry.register(ToolDefinition("slowWrite", "Writes slowly.", SlowArgs, _slow_write))

        task = asyncio.create_task(executor.execute_all(
            registry, [ToolCall(id="c1", name="slowWrite", arguments={"label": "first"})]
        ))
        await started.wait()

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        release.set()
        for _ in range(5):
            await asyncio.sleep(0)

        assert finished == ["first"]
