"""测试 RequestDispatcher 的 ask / list_conversations / dispatch。"""

import asyncio

import pytest

from chatgpt_mcp.dispatch.dispatcher import REPLY_FALLBACK, RequestDispatcher
from chatgpt_mcp.dispatch.rate_limiter import RateLimiter
from chatgpt_mcp.domain.exceptions import AdapterInteractionFailed, AdapterUnreachable
from chatgpt_mcp.domain.models import ErrorKind, Operation, ToolRequest


def make_dispatcher(adapter, cfg, clock, sleeper):
    limiter = RateLimiter(cfg.rate_limit_interval_ms, clock=clock, sleep=sleeper)
    return RequestDispatcher(adapter, limiter, cfg=cfg, sleep=sleeper)


def test_ask_returns_reply(adapter, cfg, clock, sleeper):
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    reply = asyncio.run(dispatcher.ask("ping"))
    assert reply == "pong"
    assert adapter.ops() == ["process_exists", "activate", "keystrokes", "return", "read"]
    assert ("keystrokes", "ping") in adapter.calls
    # 激活 1s、提交前 0.5s、等待回复 5s
    assert sleeper.calls == [1.0, 0.5, 5.0]


def test_ask_marks_dispatch_before_interaction(adapter, cfg, clock, sleeper):
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    start = clock.now
    asyncio.run(dispatcher.ask("ping"))
    assert dispatcher.rate_limiter.last_dispatch == start


def test_second_ask_waits_remaining_interval(adapter, cfg, clock, sleeper):
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    asyncio.run(dispatcher.ask("one"))
    sleeper.calls.clear()
    asyncio.run(dispatcher.ask("two"))
    # 第一次交互本身耗时 6.5s，只需再等 113.5s
    assert sleeper.calls[0] == pytest.approx(113.5)


def test_zero_delay_skips_wait(adapter, cfg, clock, sleeper):
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    asyncio.run(dispatcher.ask("one"))
    sleeper.calls.clear()
    asyncio.run(dispatcher.ask("two", delay_ms=0))
    assert sleeper.calls == [1.0, 0.5, 5.0]


def test_ask_selects_conversation(adapter, cfg, clock, sleeper):
    adapter.clickable.add("Trip planning")
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    asyncio.run(dispatcher.ask("hi", conversation_id="Trip planning"))
    assert adapter.ops() == ["process_exists", "activate", "click", "keystrokes", "return", "read"]
    assert sleeper.calls == [1.0, 1.0, 0.5, 5.0]


def test_missing_conversation_is_ignored(adapter, cfg, clock, sleeper):
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    reply = asyncio.run(dispatcher.ask("hi", conversation_id="nope"))
    assert reply == "pong"
    assert "keystrokes" in adapter.ops()
    assert sleeper.calls == [1.0, 0.5, 5.0]


def test_unreadable_reply_falls_back(adapter, cfg, clock, sleeper):
    adapter.reply_unavailable = True
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    reply = asyncio.run(dispatcher.ask("hi"))
    assert reply == "Could not retrieve the response from ChatGPT."
    assert reply == REPLY_FALLBACK


def test_unreachable_app_fails_ask(adapter, cfg, clock, sleeper):
    adapter.fail_on.add("process_exists")
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    with pytest.raises(AdapterInteractionFailed) as exc_info:
        asyncio.run(dispatcher.ask("hi"))
    assert "Failed to get response from ChatGPT" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, AdapterUnreachable)
    assert dispatcher.rate_limiter.last_dispatch is None


def test_script_failure_fails_ask(adapter, cfg, clock, sleeper):
    adapter.fail_on.add("keystrokes")
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    with pytest.raises(AdapterInteractionFailed) as exc_info:
        asyncio.run(dispatcher.ask("hi"))
    assert exc_info.value.message == "Failed to get response from ChatGPT: keystrokes failed"
    assert dispatcher.rate_limiter.last_dispatch is not None


def test_list_excludes_new_chat(adapter, cfg, clock, sleeper):
    adapter.elements = [
        ("New chat", "button"),
        ("Trip planning", "button"),
        ("Search", "text field"),
        ("Recipes", "button"),
        ("New chat", "button"),
        ("Python help", "button"),
    ]
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    names = asyncio.run(dispatcher.list_conversations())
    assert names == ["Trip planning", "Recipes", "Python help"]


def test_list_is_not_rate_limited(adapter, cfg, clock, sleeper):
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    asyncio.run(dispatcher.ask("hi"))
    sleeper.calls.clear()
    asyncio.run(dispatcher.list_conversations())
    assert sleeper.calls == [1.0]


def test_list_failure_raises(adapter, cfg, clock, sleeper):
    adapter.fail_on.add("list")
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    with pytest.raises(AdapterInteractionFailed):
        asyncio.run(dispatcher.list_conversations())


def test_dispatch_rejects_empty_prompt(adapter, cfg, clock, sleeper):
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    result = asyncio.run(dispatcher.dispatch(ToolRequest(operation=Operation.ASK, prompt="")))
    assert not result.succeeded
    assert result.error_kind == ErrorKind.INVALID_REQUEST
    assert adapter.calls == []
    assert dispatcher.rate_limiter.last_dispatch is None


def test_dispatch_folds_list_failure(adapter, cfg, clock, sleeper):
    adapter.fail_on.add("process_exists")
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    result = asyncio.run(dispatcher.dispatch(ToolRequest(operation=Operation.LIST_CONVERSATIONS)))
    assert not result.succeeded
    assert result.error_kind == ErrorKind.ADAPTER_UNREACHABLE
    assert result.lines == []


def test_dispatch_ask_success(adapter, cfg, clock, sleeper):
    adapter.reply = "line one\nline two"
    dispatcher = make_dispatcher(adapter, cfg, clock, sleeper)
    result = asyncio.run(dispatcher.dispatch(ToolRequest(operation=Operation.ASK, prompt="hi")))
    assert result.succeeded
    assert result.text == "line one\nline two"
