"""Invoke a single tool from the shell: invoke_tool.py search_web query="python httpx". Prints the rendered result."""
import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from tools.base import ToolRequest
from tools.registry import build_registry


def parse_params(pairs: list[str]) -> dict[str, str]:
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise SystemExit(f"Expected key=value, got: {pair!r}")
        params[key] = value
    return params


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Call one agent tool and print its result.")
    parser.add_argument("--list", action="store_true", help="List available tools and exit.")
    parser.add_argument("tool", nargs="?", help="Tool name, e.g. search_web")
    parser.add_argument("params", nargs="*", help="Parameters as key=value")
    args = parser.parse_args(argv)

    registry = build_registry()
    if args.list:
        print(json.dumps(registry.describe(), indent=2))
        return 0
    if not args.tool:
        parser.error("tool is required unless --list is given")

    result = registry.invoke(ToolRequest(tool_name=args.tool, parameters=parse_params(args.params)))
    print(result.render())
    return 0 if result.is_ok else 1


if __name__ == "__main__":
    sys.exit(main())
