"""
Create a user (e.g. the first admin) without going through the HTTP API. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD EMAIL [ROLE]
Example:
  python -m app.scripts.create_user admin your-secure-password admin@example.com Admin
"""
import argparse
import logging
import sys

from app.core.config import get_auth_config
from app.core.database import SessionLocal
from app.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from app.repositories.users import SqlAlchemyUserStore
from app.services.auth import AuthService, UsernameTaken

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Worktrack user.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password (1-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("role", nargs="?", default="User", help="Role (default: User; Admin is privileged)")
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > PASSWORD_MAX_LEN:
        print(f"Password must be 1-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        auth = AuthService(SqlAlchemyUserStore(db), get_auth_config())
        result = auth.register(username, args.password, args.role, args.email)
        if isinstance(result, UsernameTaken):
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{username}' ({result.id}) with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
