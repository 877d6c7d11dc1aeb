"""
Execution backends for extracted fragments.

A fragment is self-contained source ending in `<fn>(<argument>);`. An executor
binds `<argument>` to the token and returns what that final call evaluates to.
playersig never evaluates JS itself; anything satisfying Executor will do.

  - NodeExecutor:  `node` subprocess, fragment run in a fresh vm context
  - DukpyExecutor: embedded Duktape (pip install playersig[dukpy])
"""
from __future__ import annotations
import asyncio
import json
import logging
import re
from typing import Protocol

from .errors import ExecutionFailed

log = logging.getLogger("playersig.executor")


class Executor(Protocol):
    async def execute(self, fragment: str, token: str, *, argument: str) -> str:
        ...


def _check_result(argument: str, token: str, result) -> str:
    if not isinstance(result, str):
        raise ExecutionFailed(argument, f"expected a string, got {result!r}")
    log.debug("%s: %s -> %s", argument, token, result)
    return result


# ──────────────────────────────
#  Node.js
# ──────────────────────────────
# Reads {fragment, token, argument, timeout} as JSON on stdin, prints {result}.
_NODE_RUNNER = r"""
const vm = require("vm");
let input = "";
process.stdin.setEncoding("utf8");
process.stdin.on("data", (chunk) => { input += chunk; });
process.stdin.on("end", () => {
  const job = JSON.parse(input);
  const context = {};
  context[job.argument] = job.token;
  const result = vm.runInNewContext(job.fragment, context, { timeout: job.timeout });
  process.stdout.write(JSON.stringify({ result: result === undefined ? null : result }));
});
"""

# first error line of node's stack dump, e.g. "TypeError: a.split is not a function"
_ERROR_LINE_RE = re.compile(r"^\w*Error\b.*$", re.MULTILINE)


class NodeExecutor:
    def __init__(self, node: str = "node", *, timeout: float = 10):
        self.node = node
        self.timeout = timeout

    async def execute(self, fragment: str, token: str, *, argument: str) -> str:
        payload = json.dumps({
            "fragment": fragment,
            "token": token,
            "argument": argument,
            "timeout": int(self.timeout * 1000),
        }).encode()

        try:
            proc = await asyncio.create_subprocess_exec(
                self.node, "-e", _NODE_RUNNER,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExecutionFailed(argument, f"cannot start {self.node}: {e}") from e

        try:
            out, err = await asyncio.wait_for(proc.communicate(payload), self.timeout + 5)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise ExecutionFailed(argument, f"{self.node} timed out") from None

        if proc.returncode != 0:
            m = _ERROR_LINE_RE.search(err.decode("utf-8", "replace"))
            raise ExecutionFailed(argument, m.group(0) if m else f"exit {proc.returncode}")

        try:
            result = json.loads(out)["result"]
        except (ValueError, KeyError) as e:
            raise ExecutionFailed(argument, f"unreadable output: {out[:200]!r}") from e
        return _check_result(argument, token, result)


# ──────────────────────────────
#  Duktape (dukpy)
# ──────────────────────────────
class DukpyExecutor:
    """Runs fragments in the embedded Duktape engine, one fresh interpreter per call."""

    def __init__(self):
        import dukpy
        self._dukpy = dukpy

    def _run(self, fragment: str, token: str, argument: str):
        # the token goes through dukpy's argument marshalling, never into source
        return self._dukpy.evaljs(f"var {argument}=dukpy['token'];{fragment}", token=token)

    async def execute(self, fragment: str, token: str, *, argument: str) -> str:
        try:
            result = await asyncio.to_thread(self._run, fragment, token, argument)
        except self._dukpy.JSRuntimeError as e:
            raise ExecutionFailed(argument, str(e)) from e
        return _check_result(argument, token, result)


EXECUTORS = ("node", "dukpy")


def make_executor(name: str = "node", *, node: str = "node", timeout: float = 10) -> Executor:
    if name == "node":
        return NodeExecutor(node, timeout=timeout)
    if name == "dukpy":
        return DukpyExecutor()
    raise ValueError(f"unknown executor {name!r}, expected one of {', '.join(EXECUTORS)}")
