"""
Conversation Routine
====================

Two-way coroutine letting a script suspend while it waits for external input.

The script runs as an asyncio task. Every ``process`` call hands one input to
the script and waits for the next output; every ``yield_`` inside the script
hands one output to the caller and waits for the next input. The two sides
exchange values through a pair of single-use futures, so nothing runs between
turns and no threads are involved.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from ..error_handling import RoutineError

logger = logging.getLogger(__name__)

Input = TypeVar("Input")
Output = TypeVar("Output")


class RoutineState(Enum):
    """Routine execution state."""
    PENDING = "pending"
    RUNNING = "running"
    SUSPENDED = "suspended"
    DONE = "done"
    FAILED = "failed"


class RoutineContext(Generic[Input, Output]):
    """Handle passed to a routine script."""

    def __init__(self, routine: "Routine[Input, Output]"):
        self._routine = routine

    async def yield_(self, output: Output) -> Input:
        """
        Hand output to the caller and suspend until the next input arrives.

        Args:
            output: Value returned by the pending process call

        Returns:
            Input passed to the next process call
        """
        return await self._routine._suspend(output)


RoutineScript = Callable[[RoutineContext], Awaitable[Any]]


class Routine(Generic[Input, Output]):
    """
    Generator-like routine driven by external input.

    Usage:
        async def script(ctx):
            name = await ctx.yield_("What is your name?")
            await ctx.yield_(f"Your name is {name}")

        routine = Routine(script)
        await routine.process()         # "What is your name?"
        await routine.process("Petro")  # "Your name is Petro"
        await routine.process()         # None, routine is done
    """

    def __init__(self, script: RoutineScript):
        self.script = script
        self.state = RoutineState.PENDING
        self.error: Optional[BaseException] = None
        self._task: Optional[asyncio.Task] = None
        self._to_caller: Optional[asyncio.Future] = None
        self._to_script: Optional[asyncio.Future] = None

    def is_done(self) -> bool:
        """Check whether the script has finished, successfully or not."""
        return self.state in (RoutineState.DONE, RoutineState.FAILED)

    async def process(self, data: Optional[Input] = None) -> Optional[Output]:
        """
        Pass data to the script and wait for its next output.

        The first call starts the script and its data is not delivered. Any
        exception raised by the script is re-raised here.

        Args:
            data: Value returned from the pending yield inside the script

        Returns:
            Next yielded output, or None once the script has finished
        """
        if self.is_done():
            return None
        if self.state is RoutineState.RUNNING:
            raise RoutineError("Routine is already being processed.")

        loop = asyncio.get_running_loop()
        self._to_caller = loop.create_future()
        self.state = RoutineState.RUNNING

        if self._task is None:
            self._task = loop.create_task(self._run())
        else:
            self._to_script.set_result(data)

        return await self._to_caller

    async def asend(self, data: Optional[Input] = None) -> Output:
        """Iterator-style step. Raises StopAsyncIteration once the script has finished."""
        output = await self.process(data)
        if self.is_done():
            raise StopAsyncIteration
        return output

    def __aiter__(self):
        return self

    async def __anext__(self) -> Output:
        return await self.asend(None)

    def close(self):
        """Cancel the script. Does nothing if it has already finished."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if not self.is_done():
            self.state = RoutineState.DONE

    async def _run(self):
        try:
            await self.script(RoutineContext(self))
        except asyncio.CancelledError:
            self.state = RoutineState.DONE
            self._resolve(None)
            raise
        except Exception as e:
            self.state = RoutineState.FAILED
            self.error = e
            logger.debug(f"Routine script failed: {e!r}")
            if self._to_caller is not None and not self._to_caller.done():
                self._to_caller.set_exception(e)
        else:
            self.state = RoutineState.DONE
            self._resolve(None)

    async def _suspend(self, output: Output) -> Input:
        if self.state is not RoutineState.RUNNING:
            raise RoutineError("Routine can only yield while it is being processed.")
        self._to_script = asyncio.get_running_loop().create_future()
        self.state = RoutineState.SUSPENDED
        self._resolve(output)
        return await self._to_script

    def _resolve(self, output: Optional[Output]):
        if self._to_caller is not None and not self._to_caller.done():
            self._to_caller.set_result(output)
