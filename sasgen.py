from __future__ import annotations

import argparse
import os
import sys
from datetime import timedelta

from relay.constants import APP_VERSION, KEY_ENV, KEY_NAME_ENV, LOGGER
from relay.env import get_time_to_live, load_env, load_provider, setup_logging, validate_env
from sas.encoding import utf8_key_encoder
from sas.errors import SharedAccessSignatureError
from sas.signature import verify_signature
from sas.token import SharedAccessSignatureToken


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sasgen",
        description="Build and inspect SharedAccessSignature tokens.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)

    build = commands.add_parser("build", help="Build a token for a resource.")
    build.add_argument("resource")
    build.add_argument(
        "--ttl",
        type=int,
        default=None,
        help="Validity in seconds (defaults to RELAY_SAS_TTL_SECONDS or 3600).",
    )

    inspect = commands.add_parser("inspect", help="Validate a token and print its fields.")
    inspect.add_argument("token")

    verify = commands.add_parser("verify", help="Check a token's signature with the configured key.")
    verify.add_argument("token")
    return parser


def print_token_fields(token: SharedAccessSignatureToken) -> None:
    print(f"audience:   {token.audience}")
    print(f"key name:   {token.key_name}")
    print(f"expires at: {token.expires_at.isoformat()} ({token.expiry_seconds})")
    print(f"expired:    {'yes' if token.is_expired() else 'no'}")


def run_build(resource: str, ttl_seconds: int | None) -> None:
    provider = load_provider()
    valid_for = get_time_to_live() if ttl_seconds is None else timedelta(seconds=ttl_seconds)
    LOGGER.info("Issuing token for %s valid for %ss", resource, int(valid_for.total_seconds()))
    print(provider.build_signature(resource, valid_for))


def run_inspect(token: str) -> None:
    print_token_fields(SharedAccessSignatureToken.parse(token))


def run_verify(token: str) -> bool:
    validate_env()
    parsed = SharedAccessSignatureToken.parse(token)
    if parsed.key_name != os.getenv(KEY_NAME_ENV, "").strip():
        print(f"Token was signed with key '{parsed.key_name}', not the configured key.")
        return False

    valid = verify_signature(token, utf8_key_encoder(os.getenv(KEY_ENV, "").strip()))
    print("signature: valid" if valid else "signature: INVALID")
    print_token_fields(parsed)
    return valid


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_env()
    setup_logging()

    try:
        if args.command == "build":
            run_build(args.resource, args.ttl)
        elif args.command == "inspect":
            run_inspect(args.token)
        elif args.command == "verify":
            if not run_verify(args.token):
                return 1
    except (SharedAccessSignatureError, RuntimeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
