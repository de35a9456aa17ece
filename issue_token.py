#!/usr/bin/env python3
"""Quick script to mint a session token for local testing of the API."""
import sys

from attendance.core.security import create_access_token

if len(sys.argv) != 2:
    print("Usage: python issue_token.py <user-id>")
    print()
    print("Example:")
    print("  python issue_token.py 0b7c4a7e-3f0e-4c55-9d0a-6a4f4d2c9e11")
    sys.exit(1)

user_id = sys.argv[1].strip()

if not user_id:
    print("❌ Error: User id cannot be empty")
    sys.exit(1)

token = create_access_token({"sub": user_id})

print("✅ Session token generated!")
print()
print("Send it as a bearer token or the session_token cookie:")
print("-" * 80)
print(f"Authorization: Bearer {token}")
print("-" * 80)
