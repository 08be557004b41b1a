"""Python execution tool: run a script in a child interpreter with a timeout."""

from __future__ import annotations

import asyncio
import logging
import tempfile
from pathlib import Path

from toolhub.schemas.config import ServerConfig
from toolhub.schemas.tools import PythonExecInput, ToolResponse, text_response
from toolhub.tools.base import ToolConfig, ToolHandler, error_message

logger = logging.getLogger(__name__)

CONFIG = ToolConfig(
    name="python_exec",
    description="Execute Python code with data science libraries (pandas, numpy, matplotlib, seaborn)",
    input_model=PythonExecInput,
)

_PREAMBLE = '''\
import sys
import subprocess
import os

# Install additional packages if provided
additional_packages = {packages!r}
for package in additional_packages:
    try:
        subprocess.check_call([sys.executable, "-m", "pip", "install", package])
        print(f"Successfully installed {{package}}")
    except subprocess.CalledProcessError as e:
        print(f"Failed to install {{package}}: {{e}}")

# Common imports for data science
try:
    import pandas as pd
    import numpy as np
    import matplotlib.pyplot as plt
    import seaborn as sns
    from datetime import datetime, timedelta
    import json
    import re
    print("✅ Standard data science packages loaded successfully")
except ImportError as e:
    print(f"Warning: Some packages not available: {{e}}")

# User code
'''


def build_script(code: str, packages: list[str] | None = None) -> str:
    """Prefix user code with the package-install and data-science-import preamble."""
    return _PREAMBLE.format(packages=list(packages or [])) + code + "\n"


def format_result(stdout: str, stderr: str, returncode: int | None) -> str:
    result = ""
    if stdout:
        result += f"📊 **Output:**\n```\n{stdout.strip()}```\n\n"
    # pip and library deprecation chatter is not worth surfacing.
    if stderr and "WARNING" not in stderr:
        result += f"⚠️ **Errors/Warnings:**\n```\n{stderr.strip()}```\n\n"
    if returncode != 0:
        result += f"❌ **Exit Code:** {returncode}\n"
    else:
        result += "✅ **Execution completed successfully**"
    return result


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except OSError as exc:
        logger.error("Failed to clean up temp file %s: %s", path, exc)


async def run_python(
    code: str,
    packages: list[str] | None = None,
    *,
    python_executable: str,
    timeout: float,
    temp_dir: str | Path,
) -> str:
    """Write the script to a temp file, run it and return the formatted result.

    The temp file is removed whether the process exits or is killed on timeout.
    If the calling task is cancelled the child is killed before the error
    propagates.
    """
    temp_dir = Path(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        "w", dir=temp_dir, prefix="script_", suffix=".py", delete=False, encoding="utf-8",
    ) as fh:
        fh.write(build_script(code, packages))
        script = Path(fh.name)

    try:
        proc = await asyncio.create_subprocess_exec(
            python_executable, str(script),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning("Python script %s killed after %ss", script.name, timeout)
            return f"❌ **Error:** Execution timed out after {timeout:g} seconds"
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
                logger.warning("Python script %s killed on cancellation", script.name)
            raise
    finally:
        _remove(script)

    return format_result(
        out.decode("utf-8", errors="replace"),
        err.decode("utf-8", errors="replace"),
        proc.returncode,
    )


def make_python_handler(config: ServerConfig) -> ToolHandler:
    """Create the ``python_exec`` handler bound to the configured interpreter."""

    async def handle(params: PythonExecInput) -> ToolResponse:
        try:
            text = await run_python(
                params.code,
                params.packages,
                python_executable=config.python_executable,
                timeout=config.python_timeout,
                temp_dir=config.temp_dir,
            )
        except Exception as exc:
            logger.warning("python_exec failed: %s", exc)
            text = f"❌ **Error:** {error_message(exc)}"
        return text_response(text)

    return handle
