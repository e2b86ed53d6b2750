#!/usr/bin/env python3
"""
create-api-key.py: Mint an admin session token and create a Vetify API key.

Signs a short-lived admin session with API_SECRET_KEY (read from the
environment or .env) and, when --api-url is given, creates an API key through
the admin endpoint.

Usage:
    python scripts/create-api-key.py --tenant-id <id> --staff-id <id>
    python scripts/create-api-key.py --tenant-id <id> --staff-id <id> \\
        --api-url http://localhost:8000 --name "Booking site" --bundle readonly
"""

import argparse
import sys

import httpx

from vetify.config import get_settings
from vetify.services.admin_session import issue_admin_token
from vetify.services.scopes import ALL_SCOPES, SCOPE_BUNDLES


# ANSI color codes
class C:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RESET = "\033[0m"


def create_key(api_url: str, token: str, payload: dict) -> tuple[bool, dict | str]:
    """POST the key request to the admin API."""
    url = f"{api_url.rstrip('/')}/api/settings/api-keys"
    try:
        resp = httpx.post(
            url,
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
            timeout=10,
        )
    except httpx.HTTPError as e:
        return False, f"Connection error: {e}"
    if resp.status_code != 201:
        return False, f"HTTP {resp.status_code}: {resp.text[:200]}"
    return True, resp.json()["data"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Create Vetify public API keys")
    parser.add_argument("--tenant-id", required=True, help="Tenant that will own the key")
    parser.add_argument("--staff-id", required=True, help="Administrator creating the key")
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="API base URL (e.g., http://localhost:8000); omit to print the token only",
    )
    parser.add_argument("--name", default="CLI key", help="Label for the new key")
    parser.add_argument(
        "--bundle",
        choices=sorted(SCOPE_BUNDLES),
        default=None,
        help="Scope bundle to grant",
    )
    parser.add_argument(
        "--scope",
        action="append",
        default=[],
        choices=sorted(ALL_SCOPES),
        help="Individual scope to grant (repeatable)",
    )
    parser.add_argument("--location-id", default=None, help="Restrict the key to one location")
    parser.add_argument("--rate-limit", type=int, default=None, help="Requests per hour")
    args = parser.parse_args()

    settings = get_settings()
    token = issue_admin_token(
        settings.api_secret_key,
        args.tenant_id,
        args.staff_id,
        ttl_seconds=settings.admin_session_ttl_seconds,
    )

    print(f"\n{C.BOLD}Vetify API Key Tool{C.RESET}")
    print(f"{C.DIM}{'=' * 60}{C.RESET}\n")
    print(f"  {C.BOLD}Admin token:{C.RESET} {C.CYAN}{token}{C.RESET}")
    print(f"  {C.DIM}Valid for {settings.admin_session_ttl_seconds}s{C.RESET}\n")

    if not args.api_url:
        return

    if not args.scope and args.bundle is None:
        print(f"  {C.RED}Pass --bundle or at least one --scope{C.RESET}\n")
        sys.exit(2)

    payload = {"name": args.name, "scopes": args.scope}
    if args.bundle:
        payload["bundle"] = args.bundle
    if args.location_id:
        payload["locationId"] = args.location_id
    if args.rate_limit is not None:
        payload["rateLimit"] = args.rate_limit

    print(f"  {C.BOLD}Creating key...{C.RESET}")
    ok, result = create_key(args.api_url, token, payload)
    if not ok:
        print(f"  {C.RED}Creation failed{C.RESET} {C.DIM}{result}{C.RESET}\n")
        sys.exit(1)

    print(f"  {C.GREEN}Created{C.RESET} {result['name']} ({result['keyPrefix']})")
    print(f"  {C.BOLD}Scopes:{C.RESET}  {', '.join(result['scopes'])}")
    print(f"  {C.BOLD}API key:{C.RESET} {C.CYAN}{result['fullKey']}{C.RESET}\n")
    print(f"  {C.YELLOW}This is the only time the full key is shown.{C.RESET}")
    print(f"  {C.DIM}Store it in a secret manager; Vetify keeps only its hash.{C.RESET}\n")


if __name__ == "__main__":
    main()
