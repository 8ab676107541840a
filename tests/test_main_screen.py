"""Tests for MainScreen behavior."""

import asyncio

from textual.widgets import Input

from runnel.app import RunnelTUI
from runnel.config import ConfigManager
from runnel.providers.base import ProviderConfig
from runnel.providers.replay import ReplayProvider
from runnel.screens.main import summarize_user_prompt
from runnel.widgets import CodeBlock, JumpToLatest, StreamMessage

REPLY = "Here you go:\n```python\ndef add(a, b):\n    return a + b\n```\nThat's it.\n"


def test_summarize_user_prompt_single_line_unchanged():
    text = "hello world"
    assert summarize_user_prompt(text) == text


def test_summarize_user_prompt_multiline_collapses():
    text = "line1\nline2\nline3\nline4"
    assert summarize_user_prompt(text) == "[pasted content 1 + 3 lines]"


def _app(tmp_path, text=REPLY, delay=0.0):
    provider = ReplayProvider(ProviderConfig(
        model="replay", options={"text": text, "chunk_size": 5, "delay": delay},
    ))
    return RunnelTUI(provider, "replay", config=ConfigManager(str(tmp_path / "config.yaml")))


def test_reply_streams_into_transcript(tmp_path):
    async def run():
        app = _app(tmp_path)
        async with app.run_test() as pilot:
            await pilot.pause()
            app.screen.query_one(Input).value = "add two numbers"
            await pilot.press("enter")
            await app.workers.wait_for_complete()
            for _ in range(5):
                await pilot.pause()

            roles = [m.role for m in app.state.messages]
            assert roles == ["you", "replay"]
            assert app.state.messages[1].content == REPLY
            assert not app.state.streaming

            msg = app.screen.query_one(StreamMessage)
            assert msg.finished
            blocks = [b for b in msg.blocks if isinstance(b, CodeBlock)]
            assert len(blocks) == 1
            assert blocks[0].language == "python"
            assert not blocks[0].streaming
            assert not app.screen.query_one(JumpToLatest).display

    asyncio.run(run())


def test_escape_cancels_reply(tmp_path):
    async def run():
        app = _app(tmp_path, text="word " * 400, delay=0.01)
        async with app.run_test() as pilot:
            await pilot.pause()
            app.screen.query_one(Input).value = "talk"
            await pilot.press("enter")
            await pilot.pause(0.1)
            await pilot.press("escape")
            await app.workers.wait_for_complete()
            for _ in range(5):
                await pilot.pause()

            assert not app.state.streaming
            reply = app.state.messages[-1]
            assert reply.metadata.get("cancelled") is True
            assert len(reply.content) < len("word " * 400)
            assert app.screen.query_one(StreamMessage).finished

    asyncio.run(run())


def test_new_prompt_mid_stream_keeps_thinking(tmp_path):
    async def run():
        app = _app(tmp_path, text="word " * 400, delay=0.01)
        async with app.run_test() as pilot:
            await pilot.pause()
            prompt = app.screen.query_one(Input)
            prompt.value = "first"
            await pilot.press("enter")
            await pilot.pause(0.1)
            prompt.value = "second"
            await pilot.press("enter")
            for _ in range(5):
                await pilot.pause()

            # the first reply's end event has been handled by now
            assert app.state.messages[-1].metadata.get("cancelled") is True
            assert app.state.streaming
            assert app.state.is_thinking

            await pilot.press("escape")
            await app.workers.wait_for_complete()
            for _ in range(5):
                await pilot.pause()
            assert not app.state.is_thinking

    asyncio.run(run())
