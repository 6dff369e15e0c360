#!/usr/bin/env python3
"""
Issue a development access token and store it for the flow scripts.

Tokens are normally issued by the identity service. This signs one with
the local JWT secret so the API can be exercised without it.

Usage:
    python scripts/issue_token.py --user-id <UUID>
    python scripts/issue_token.py --user-id <UUID> --role staff --nft-holder
"""

import argparse
from pathlib import Path

from app.core.security import create_user_token

TOKEN_FILE = Path(__file__).parent.parent / ".token"


def main():
    parser = argparse.ArgumentParser(description="Issue a development access token")
    parser.add_argument("--user-id", required=True, help="User UUID (must exist in users)")
    parser.add_argument("--email", default=None, help="Email claim")
    parser.add_argument("--role", default="user", choices=["user", "staff", "admin"])
    parser.add_argument("--nft-holder", action="store_true", help="Grant NFT holder pricing")
    args = parser.parse_args()

    token = create_user_token(args.user_id, args.email, args.role, args.nft_holder)
    TOKEN_FILE.write_text(token)
    print(f"Token for {args.user_id} ({args.role}) written to {TOKEN_FILE}")


if __name__ == "__main__":
    main()
