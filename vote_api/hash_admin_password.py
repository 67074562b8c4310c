"""Print a bcrypt hash for ADMIN_PASSWORD_HASH.

Usage: python -m vote_api.hash_admin_password <password>
"""
import sys
from typing import List, Optional

from vote_api.security import hash_password


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1 or not args[0]:
        print("usage: python -m vote_api.hash_admin_password <password>", file=sys.stderr)
        return 2
    print(hash_password(args[0]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
