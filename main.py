#!/usr/bin/env python3
"""
Policy Enforcement Point - access validation against an XACML-style decision service.
"""

import argparse
import json
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=sys.stderr
)

#
# NOTE: Keep pep imports lazy (inside functions) so `--help` works without the
# server dependencies installed.
#


def check_once(token: str, organization: str, action: str) -> int:
    """Run one access check and print the outcome as JSON. Returns the exit code."""
    from pep.access.errors import TemplateLoadingError
    from pep.access.models import AccessRequestParameters
    from pep.access.pipeline import create_access_validator

    try:
        validator = create_access_validator()
    except TemplateLoadingError as e:
        print(json.dumps({"allowed": False, "reason": e.code, "message": e.message}))
        return 2

    outcome = validator.validate(AccessRequestParameters(identity_token=token, organization=organization, action=action))
    out = {"allowed": outcome.allowed, "decision": outcome.decision}
    if outcome.error is not None:
        out["reason"] = outcome.reason
        out["message"] = outcome.error.message
    print(json.dumps(out))
    return 0 if outcome.allowed else 1


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Validate access against the decision service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the enforcement API
  python main.py --serve --port 1026

  # Check one access request
  python main.py --check --token tok123 --org org:X --action read
        """,
    )

    parser.add_argument("--serve", action="store_true", help="Run the policy enforcement HTTP API")
    parser.add_argument("--host", default="0.0.0.0", help="API bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=1026, help="API listen port (default: 1026)")

    parser.add_argument("--check", action="store_true", help="Run a single access check and print the outcome")
    parser.add_argument("--token", help="Identity token of the subject (used with --check)")
    parser.add_argument("--org", help="Organization of the request (used with --check)")
    parser.add_argument("--action", help="Requested action, e.g. read/create/update/delete (used with --check)")

    args = parser.parse_args()

    if args.serve:
        from pep.api.server import run as run_server

        run_server(host=args.host, port=args.port)
        return

    if args.check:
        missing = [n for n, v in (("--token", args.token), ("--org", args.org), ("--action", args.action)) if not v]
        if missing:
            parser.error(f"--check requires {', '.join(missing)}")
        sys.exit(check_once(args.token, args.org, args.action))

    parser.print_help()


if __name__ == "__main__":
    main()
