"""
Mint a bearer token for a front desk staff member.

    python -m frontdesk.scripts.issue_token --user-id u-17 --name "Ana Cruz" --role user
"""
import argparse
from datetime import timedelta

from frontdesk.utils.auth import create_access_token, ROLE_ADMIN, ROLE_USER


def main():
    parser = argparse.ArgumentParser(description="Issue a front desk access token")
    parser.add_argument("--user-id", required=True, help="Staff user reference stored as created_by")
    parser.add_argument("--name", default="")
    parser.add_argument("--role", choices=[ROLE_ADMIN, ROLE_USER], default=ROLE_USER)
    parser.add_argument("--hours", type=int, default=None, help="Token lifetime in hours")
    args = parser.parse_args()

    expires = timedelta(hours=args.hours) if args.hours else None
    token = create_access_token({"sub": args.user_id, "name": args.name, "role": args.role}, expires)
    print(token)


if __name__ == "__main__":
    main()
