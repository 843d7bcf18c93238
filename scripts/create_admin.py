import argparse
import getpass
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from werkzeug.security import generate_password_hash

from dorothy import create_app
from dorothy.extensions import db
from dorothy.models import User, UserRole
from dorothy.repositories import UserRepository


def create_admin_user(email, name, password, update=False):
    app = create_app()
    with app.app_context():
        db.create_all()
        # Check if admin already exists
        admin = UserRepository.find_by_email(email)
        if not admin:
            UserRepository.create(
                User(
                    email=email.strip().lower(),
                    password_hash=generate_password_hash(password),
                    name=name,
                    role=UserRole.ADMIN.value,
                    active=True,
                )
            )
            print(f"Admin user {email} created successfully!")
        elif update:
            admin.password_hash = generate_password_hash(password)
            admin.role = UserRole.ADMIN.value
            admin.active = True
            db.session.commit()
            print(f"Admin user {email} updated successfully!")
        else:
            print(f"Admin user {email} already exists!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or reset an admin account")
    parser.add_argument("email")
    parser.add_argument("--name", default="Admin")
    parser.add_argument("--update", action="store_true", help="reset the password if the account exists")
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if len(password) < 6:
        sys.exit("Password must be at least 6 characters")
    create_admin_user(args.email, args.name, password, update=args.update)
