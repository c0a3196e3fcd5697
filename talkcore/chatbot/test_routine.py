"""
Unit Tests for Conversation Routine
===================================
"""

import asyncio

import pytest

from talkcore.chatbot.routine import Routine, RoutineState
from talkcore.error_handling import RoutineError


class TestRoutine:
    """Test suspending and resuming routine scripts."""

    @pytest.mark.asyncio
    async def test_yields_data_outside(self):
        async def script(ctx):
            await ctx.yield_("Hello")
            await ctx.yield_("World")

        routine = Routine(script)
        assert await routine.process() == "Hello"
        assert await routine.process() == "World"
        assert await routine.process() is None
        assert routine.is_done()

    @pytest.mark.asyncio
    async def test_yields_data_inside(self):
        async def script(ctx):
            name = await ctx.yield_("What is your name?")
            await ctx.yield_(f"Your name is {name}")

        routine = Routine(script)
        assert await routine.process("Hello") == "What is your name?"
        assert await routine.process("Petro") == "Your name is Petro"
        assert await routine.process("Right") is None

    @pytest.mark.asyncio
    async def test_yields_data_in_a_loop(self):
        async def script(ctx):
            await ctx.yield_("Hello")
            await ctx.yield_("World")

        answers = [answer async for answer in Routine(script)]
        assert answers == ["Hello", "World"]

    @pytest.mark.asyncio
    async def test_asend_stops_when_done(self):
        async def script(ctx):
            await ctx.yield_("Hello")

        routine = Routine(script)
        assert await routine.asend() == "Hello"
        with pytest.raises(StopAsyncIteration):
            await routine.asend()

    @pytest.mark.asyncio
    async def test_early_termination(self):
        async def script(ctx):
            await ctx.yield_("Hello")
            return
            await ctx.yield_("World")

        routine = Routine(script)
        assert await routine.process() == "Hello"
        assert await routine.process() is None

    @pytest.mark.asyncio
    async def test_script_error(self):
        async def script(ctx):
            raise ValueError("Test")

        routine = Routine(script)
        with pytest.raises(ValueError, match="Test"):
            await routine.asend()
        assert routine.is_done()
        assert routine.state is RoutineState.FAILED
        assert await routine.process() is None

    @pytest.mark.asyncio
    async def test_script_error_after_resume(self):
        async def script(ctx):
            await ctx.yield_("Hello")
            raise ValueError("Later")

        routine = Routine(script)
        assert await routine.process() == "Hello"
        with pytest.raises(ValueError, match="Later"):
            await routine.process()
        assert routine.is_done()

    @pytest.mark.asyncio
    async def test_empty_script(self):
        async def script(ctx):
            return

        routine = Routine(script)
        assert await routine.process() is None
        assert await routine.process() is None

    @pytest.mark.asyncio
    async def test_state_transitions(self):
        async def script(ctx):
            await ctx.yield_("Hello")

        routine = Routine(script)
        assert routine.state is RoutineState.PENDING
        await routine.process()
        assert routine.state is RoutineState.SUSPENDED
        assert not routine.is_done()
        await routine.process()
        assert routine.state is RoutineState.DONE

    @pytest.mark.asyncio
    async def test_close_suspended_routine(self):
        finished = []

        async def script(ctx):
            try:
                await ctx.yield_("Hello")
            finally:
                finished.append(True)

        routine = Routine(script)
        assert await routine.process() == "Hello"
        routine.close()
        assert routine.is_done()
        await asyncio.sleep(0)
        assert finished == [True]
        assert await routine.process() is None

    @pytest.mark.asyncio
    async def test_concurrent_process_rejected(self):
        release = asyncio.Event()

        async def script(ctx):
            await release.wait()
            await ctx.yield_("Hello")

        routine = Routine(script)
        pending = asyncio.ensure_future(routine.process())
        await asyncio.sleep(0)
        with pytest.raises(RoutineError):
            await routine.process()
        release.set()
        assert await pending == "Hello"

    @pytest.mark.asyncio
    async def test_independent_routines_interleave(self):
        async def script(ctx):
            name = await ctx.yield_("name?")
            await ctx.yield_(f"hi {name}")

        first, second = Routine(script), Routine(script)
        assert await first.process() == "name?"
        assert await second.process() == "name?"
        assert await second.process("B") == "hi B"
        assert await first.process("A") == "hi A"
