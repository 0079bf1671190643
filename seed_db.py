import argparse
import os
import sys

# Add root to pythonpath
sys.path.append(os.getcwd())

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.auth_utils import get_password_hash
from src.api.deps import Settings
from src.domain.entities import User


def seed(login: str, email: str, password: str) -> None:
    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    print(f"Seeding to {settings.db_path}")

    applied = SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    for name in applied:
        print(f"Applied {name}")

    repo = SQLiteUserRepo(settings.db_path)
    if repo.get_by_login_or_email(login) or repo.get_by_login_or_email(email):
        print(f"User {login} already exists.")
        return

    admin = repo.save(
        User(
            login=login,
            email=email,
            display_name="Administrator",
            password_hash=get_password_hash(password),
            roles=["administrator"],
        )
    )
    print(f"Created administrator {admin.login} ({admin.id})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the schema and a first administrator.")
    parser.add_argument("--login", default="admin")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default=os.environ.get("LAB_ADMIN_PASSWORD", "changeme123"))
    args = parser.parse_args()
    seed(args.login, args.email, args.password)
