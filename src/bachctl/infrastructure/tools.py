"""Tool execution: in-process providers first, external processes second.

Dispatch for a command named ``X``:

1. A provider registered under ``X`` runs synchronously in-process; its
   output writers forward completed lines to the caller's sinks.
2. Otherwise ``X`` is spawned as a process.  Two drain tasks forward
   stdout and stderr line by line while the caller waits; both drains are
   joined before the exit code is returned, so no output is lost.

No timeouts are enforced.  Failures to dispatch become exit code 1.
"""

from __future__ import annotations

import io
import logging
import subprocess
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import IO, TYPE_CHECKING, Protocol, runtime_checkable

from bachctl.domain.errors import ToolDispatchError

if TYPE_CHECKING:
    from bachctl.domain.command import Command
    from bachctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

LineSink = Callable[[str], None]


@runtime_checkable
class ToolProvider(Protocol):
    """An in-process implementation of a named tool."""

    name: str

    def run(self, args: Sequence[str], out: IO[str], err: IO[str]) -> int:
        """Run the tool and return its exit code."""
        ...


class LineWriter(io.TextIOBase):
    """Writable text stream that forwards each completed line to a sink.

    A trailing partial line is forwarded when the writer is closed.
    """

    def __init__(self, sink: LineSink) -> None:
        super().__init__()
        self._sink = sink
        self._pending = ""

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        if self.closed:
            raise ValueError("write to closed LineWriter")
        *lines, self._pending = (self._pending + text).split("\n")
        for line in lines:
            self._sink(line)
        return len(text)

    def close(self) -> None:
        if not self.closed and self._pending:
            pending, self._pending = self._pending, ""
            self._sink(pending)
        super().close()


class ToolRunner:
    """Run commands via registered providers or external processes.

    Parameters:
        plugin_manager: Registry consulted for in-process providers.  When
            None, every command is spawned as a process.
    """

    def __init__(self, plugin_manager: PluginManager | None = None) -> None:
        self._pm = plugin_manager

    def find_provider(self, name: str) -> ToolProvider | None:
        """Return the in-process provider for *name*, if any."""
        if self._pm is None:
            return None
        return self._pm.find_tool(name)

    def run(self, command: Command, out: LineSink, err: LineSink) -> int:
        """Run *command* and return its exit code.

        Raises:
            ToolDispatchError: The tool could not be started, or its
                in-process provider raised.
        """
        provider = self.find_provider(command.name)
        if provider is not None:
            logger.debug("Running in-process provider for %s", command.name)
            return self._run_provider(provider, command, out, err)
        return self._run_process(command, out, err)

    def execute(self, command: Command, out: LineSink, err: LineSink) -> int:
        """Like :meth:`run`, but a dispatch failure is logged and becomes 1."""
        try:
            return self.run(command, out, err)
        except ToolDispatchError as exc:
            logger.error("Running tool failed: %s", exc)
            logger.debug("Dispatch failure detail", exc_info=True)
            return 1

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _run_provider(
        provider: ToolProvider,
        command: Command,
        out: LineSink,
        err: LineSink,
    ) -> int:
        out_writer = LineWriter(out)
        err_writer = LineWriter(err)
        try:
            return int(provider.run(list(command.arguments), out_writer, err_writer))
        except Exception as exc:
            msg = f"tool provider {command.name!r} raised {type(exc).__name__}: {exc}"
            raise ToolDispatchError(msg) from exc
        finally:
            out_writer.close()
            err_writer.close()

    @staticmethod
    def _run_process(command: Command, out: LineSink, err: LineSink) -> int:
        try:
            process = subprocess.Popen(
                command.to_list(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            msg = f"cannot start {command.name!r}: {exc}"
            raise ToolDispatchError(msg) from exc

        with (
            process,
            ThreadPoolExecutor(max_workers=2, thread_name_prefix="bachctl-drain") as pool,
        ):
            drains = [
                pool.submit(_drain, process.stdout, out),
                pool.submit(_drain, process.stderr, err),
            ]
            code = process.wait()
            for drain in drains:
                drain.result()
        return code


def _drain(stream: IO[str] | None, sink: LineSink) -> None:
    """Forward every line of *stream* to *sink* until end of stream.

    After the sink raises, remaining lines are read and discarded so the
    process never blocks on a full pipe.
    """
    if stream is None:
        return
    forwarding = True
    try:
        for line in stream:
            if not forwarding:
                continue
            try:
                sink(line.removesuffix("\n"))
            except Exception:
                logger.warning("Output sink failed; discarding remaining output", exc_info=True)
                forwarding = False
    except (OSError, ValueError):
        logger.debug("Output drain stopped early", exc_info=True)
