"""
Smoke script for the stdio MCP server against the real Strava API.

It performs:
 1) spawns `python -m strava_mcp.server` over stdio
 2) lists tools
 3) calls get_athlete_profile and get_athlete_stats

Needs STRAVA_ACCESS_TOKEN in the environment (or a .env at the repo root).
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Any

_REPO_ROOT = Path(__file__).resolve().parents[1]


def _unwrap_tool_result(res: Any) -> str:
    content = getattr(res, "content", None)
    if not content:
        return str(res)
    return getattr(content[0], "text", str(content[0]))


async def main() -> int:
    from mcp import ClientSession
    from mcp.client.stdio import StdioServerParameters, stdio_client

    python_cmd = os.getenv("MCP_PYTHON") or sys.executable
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(_REPO_ROOT / "src"), env.get("PYTHONPATH", "")) if p)

    print(f"[smoke] Repo root: {_REPO_ROOT}")
    print(f"[smoke] Python: {python_cmd}")

    server = StdioServerParameters(command=python_cmd, args=["-m", "strava_mcp.server"], env=env)

    ok = True
    async with stdio_client(server) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()

            tools = await session.list_tools()
            print("\n[smoke] TOOLS:")
            for t in tools.tools:
                print(f" - {t.name}: {t.description}")

            for name in ("get_athlete_profile", "get_athlete_stats"):
                text = _unwrap_tool_result(await session.call_tool(name, {}))
                print(f"\n[smoke] CALL {name}:")
                print(text)
                if text.startswith("Error: "):
                    ok = False

    print("\n[smoke] OK" if ok else "\n[smoke] Completed with errors")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
