"""Entry point for the D-Vault reveal bridge.

Usage:
    python -m dvault [options]

Options:
    --api-url URL        Vault backend URL (default: DVAULT_API_URL or http://localhost:8080)
    --actor-id ID        Actor recorded in audit events (default: DVAULT_ACTOR_ID or current_user)
    --ttl SECS           Reveal window when the backend sends none (default: DVAULT_REVEAL_TTL or 15)
    --host HOST          Bridge bind address (default: 127.0.0.1)
    --port PORT          Bridge port (default: DVAULT_BRIDGE_PORT or 8765)
    --no-audit           Do not send audit events
    --log-dir DIR        Also write logs to files in DIR
"""

import argparse
import asyncio
import signal

import uvicorn

from .config import RevealConfig
from .logging import get_logger, setup_logging
from .reveal import RevealSessionManager
from .server import create_bridge_app
from .services import HttpAuditLogService, HttpDecryptionService

logger = get_logger("main")


def parse_args(argv=None) -> tuple[RevealConfig, argparse.Namespace]:
    parser = argparse.ArgumentParser(description="D-Vault reveal bridge")
    parser.add_argument("--api-url", default="", help="Vault backend URL")
    parser.add_argument("--actor-id", default="", help="Actor recorded in audit events")
    parser.add_argument("--ttl", type=int, default=0, help="Default reveal window (seconds)")
    parser.add_argument("--host", default="127.0.0.1", help="Bridge bind address")
    parser.add_argument("--port", type=int, default=0, help="Bridge port")
    parser.add_argument("--no-audit", action="store_true", help="Do not send audit events")
    parser.add_argument("--log-dir", default=None, help="Directory for log files")

    args = parser.parse_args(argv)

    config = RevealConfig(
        api_url=args.api_url,
        actor_id=args.actor_id,
        default_ttl_seconds=args.ttl,
        bridge_host=args.host,
        bridge_port=args.port,
        audit_enabled=not args.no_audit,
    )
    return config, args


async def run(config: RevealConfig):
    shutdown_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, shutdown_event.set)

    decryption = HttpDecryptionService(config.base_url, timeout=config.request_timeout)
    audit = HttpAuditLogService(config.base_url, timeout=config.request_timeout)
    manager = RevealSessionManager.from_config(config, decryption, audit)

    logger.info("D-Vault reveal bridge starting")
    logger.info(f"  Backend:    {config.base_url}")
    logger.info(f"  Actor:      {config.actor_id}")
    logger.info(f"  TTL:        {config.default_ttl_seconds}s")
    logger.info(f"  Audit:      {'on' if config.audit_enabled else 'off'}")
    logger.info(f"  Listening:  {config.bridge_host}:{config.bridge_port}")

    app = create_bridge_app(manager)
    server = uvicorn.Server(uvicorn.Config(
        app,
        host=config.bridge_host,
        port=config.bridge_port,
        log_level="warning",
    ))
    server_task = asyncio.create_task(server.serve())

    await shutdown_event.wait()
    logger.info("Shutdown signal received")

    # Mask everything before the process goes away
    await manager.shutdown()
    server.should_exit = True
    await server_task

    await decryption.close()
    await audit.close()
    logger.info("Bridge stopped")


def main(argv=None):
    config, args = parse_args(argv)
    if args.log_dir:
        setup_logging(args.log_dir)
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
