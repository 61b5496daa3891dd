"""Command line entry point: ``cert-renewer renew`` / ``cert-renewer revoke``."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from cert_renewer.config import load_config
from cert_renewer.errors import CertRenewerError
from cert_renewer.handlers import create_or_renew_certificate, revoke_certificate

logger = logging.getLogger(__name__)

_COMMANDS = {
    "renew": create_or_renew_certificate,
    "revoke": revoke_certificate,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cert-renewer",
        description="Issue, renew and revoke a DNS-01 validated certificate. Options come from the environment.",
    )
    parser.add_argument("command", choices=sorted(_COMMANDS), help="operation to run")
    parser.add_argument("--log-level", help="override LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = load_config()
    except CertRenewerError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("%s", exc)
        return 2

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        result = _COMMANDS[args.command](config)
    except CertRenewerError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    print(json.dumps(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
