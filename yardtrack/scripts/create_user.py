"""
Create a system user (e.g. first admin). Run from project root:
  python -m yardtrack.scripts.create_user NAME USERNAME PASSWORD [role] [--unit CODE]
Example:
  python -m yardtrack.scripts.create_user "Yard Admin" admin your-secure-password admin --unit HQ
"""
import argparse
import logging
import sys

from yardtrack.core.database import session_scope
from yardtrack.schemas.users import UserCreate, UserRole
from yardtrack.services import units as unit_service
from yardtrack.services import users as user_service
from yardtrack.services.errors import ServiceError


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    parser = argparse.ArgumentParser(description="Create a YardTrack user (no registration UI).")
    parser.add_argument("name", help="Display name")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.OPERATOR.value,
        choices=[r.value for r in UserRole],
    )
    parser.add_argument("--unit", dest="unit_code", default=None, help="Code of the unit to assign")
    args = parser.parse_args()

    with session_scope() as db:
        if user_service.get_user_by_username(db, args.username.strip()) is not None:
            print(f"User '{args.username.strip()}' already exists.", file=sys.stderr)
            return 1
        unit_id = None
        if args.unit_code:
            unit = unit_service.get_unit_by_code(db, args.unit_code)
            if unit is None:
                print(f"Unit '{args.unit_code}' not found.", file=sys.stderr)
                return 1
            unit_id = unit.id
        try:
            data = UserCreate(
                name=args.name,
                username=args.username.strip(),
                password=args.password,
                role=UserRole(args.role),
                unit_id=unit_id,
            )
        except ValueError as e:
            print(f"Invalid user data: {e}", file=sys.stderr)
            return 1
        try:
            user = user_service.create_user(db, data)
        except ServiceError as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{user.username}' with role '{user.role}'.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
