#!/usr/bin/env python3
"""
Booking check-in / check-out flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/issue_token.py --user-id <UUID>
    python scripts/flow_check_in_out.py --workspace-id <UUID> --date 2026-04-01 --start 09:00 --end 11:00

Check-in only opens 15 minutes before the start time, so pick a slot that
has started (or starts within 15 minutes) in the site timezone.

Flow:
    1. Create booking
    2. Check in
    3. Calculate current cost
    4. Check out
"""

import argparse
import json
import sys
from pathlib import Path

import httpx

BASE_URL = "http://localhost:8000"
TOKEN_FILE = Path(__file__).parent.parent / ".token"


def get_token() -> str:
    """Read stored access token."""
    if not TOKEN_FILE.exists():
        print("ERROR: No token found. Run issue_token.py first.")
        sys.exit(1)
    return TOKEN_FILE.read_text().strip()


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    url = f"{BASE_URL}{endpoint}"

    response = httpx.request(
        method,
        url,
        headers=headers,
        json=data if method != "GET" else None,
        timeout=10.0,
        follow_redirects=True,
    )
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict) -> bool:
    """Print result; False on error responses."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    print(json.dumps(result["data"], indent=2))
    return True


def main():
    parser = argparse.ArgumentParser(description="Booking check-in / check-out flow")
    parser.add_argument("--workspace-id", required=True, help="Workspace UUID")
    parser.add_argument("--date", required=True, help="Booking date (YYYY-MM-DD)")
    parser.add_argument("--start", required=True, help="Start time (HH:MM)")
    parser.add_argument("--end", required=True, help="End time (HH:MM)")
    parser.add_argument("--skip-check-out", action="store_true", help="Stop after checking in")
    args = parser.parse_args()

    token = get_token()

    # Step 1: Create booking
    print_step(1, "Create booking")
    booking_result = api_request(token, "POST", "/api/v1/bookings", {
        "workspace_id": args.workspace_id,
        "booking_date": args.date,
        "start_time": args.start,
        "end_time": args.end,
    })
    if not print_result(booking_result):
        sys.exit(1)

    booking = booking_result["data"]["booking"]
    booking_id = booking["id"]
    print(f"\nBooking {booking['confirmation_code']}: ${booking['total_price']}")

    # Step 2: Check in
    print_step(2, "Check in")
    if not print_result(api_request(token, "POST", f"/api/v1/bookings/{booking_id}/check-in")):
        sys.exit(1)

    # Step 3: Current cost
    print_step(3, "Calculate current cost")
    if not print_result(api_request(token, "GET", f"/api/v1/bookings/{booking_id}/calculate-cost")):
        sys.exit(1)

    if args.skip_check_out:
        print("\nFLOW COMPLETE (still checked in)")
        return

    # Step 4: Check out
    print_step(4, "Check out")
    checkout_result = api_request(token, "POST", f"/api/v1/bookings/{booking_id}/check-out")
    if not print_result(checkout_result):
        sys.exit(1)

    charges = checkout_result["data"]["charges"]
    print("\n" + "="*60)
    print("FULL FLOW COMPLETE")
    print("="*60)
    print(f"Initial charge: ${charges['initial_charge']}")
    print(f"Final charge:   ${charges['final_charge']}")
    print(f"Refund:         ${charges['refund_amount']}")
    print(f"Overage:        ${charges['overage_charge']}")


if __name__ == "__main__":
    main()
