"""CLI entry point: python -m clickengine.mcp"""

from __future__ import annotations

import logging

from clickengine.definition import default_definition
from clickengine.log import configure_logging


def main() -> None:
    # stdout carries the MCP protocol, so logs must stay on stderr
    configure_logging(logging.WARNING)

    from clickengine.mcp.server import create_server

    server = create_server(default_definition())
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
