"""
Stdio Transport

Newline-delimited JSON-RPC over stdin/stdout for direct process-to-process
integration. One request per line in, one response per line out.
Logging must stay on stderr; stdout carries protocol messages only.
"""

import asyncio
import json
import logging
import sys
from typing import Optional, TextIO

from .config import Settings, configure_logging
from .protocol import McpProtocol
from .service import create_service

logger = logging.getLogger(__name__)


def write_message(writer: TextIO, message: dict) -> None:
    writer.write(json.dumps(message) + "\n")
    writer.flush()


async def serve(
    protocol: McpProtocol,
    reader: Optional[TextIO] = None,
    writer: Optional[TextIO] = None
) -> int:
    """
    Process requests until EOF.
    Returns the number of responses written.
    """
    reader = reader or sys.stdin
    writer = writer or sys.stdout
    loop = asyncio.get_running_loop()
    written = 0

    # readline() instead of iteration avoids buffered read-ahead on pipes
    while True:
        line = await loop.run_in_executor(None, reader.readline)
        if not line:
            break
        if not line.strip():
            continue

        response = await protocol.handle_raw(line)
        if response is not None:
            write_message(writer, response)
            written += 1

    logger.info("Stdin closed, stdio transport stopping")
    return written


def main(settings: Optional[Settings] = None):
    """Entry point: serve the stdio transport."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    service = create_service()
    logger.info(f"Memory server listening on stdio with {len(service.registry)} tools")
    asyncio.run(serve(service.protocol))


if __name__ == "__main__":
    main()
