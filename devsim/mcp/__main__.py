"""CLI entry point: python -m devsim.mcp [config_module] [--seed N]"""

from __future__ import annotations

import sys


def main() -> None:
    args = sys.argv[1:]
    seed = None
    if "--seed" in args:
        i = args.index("--seed")
        if i + 1 >= len(args):
            print("Usage: python -m devsim.mcp [config_module] [--seed N]", file=sys.stderr)
            sys.exit(1)
        seed = int(args[i + 1])
        del args[i:i + 2]

    # Redirect stdout to stderr during module loading in case define_config() prints
    real_stdout = sys.stdout
    sys.stdout = sys.stderr
    try:
        from devsim.cli import _load_config_or_exit

        config = _load_config_or_exit(args[0] if args else None)
    finally:
        sys.stdout = real_stdout

    from devsim.mcp.server import create_server

    server = create_server(config, seed=seed)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
