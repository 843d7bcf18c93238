import sys
import os

sys.path.append(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)  # relative imports

from dorothy import create_app, db


def rebuild_database():
    """Drop and recreate every table. Destroys all data."""
    app = create_app()
    with app.app_context():
        print("Dropping all tables...")
        db.drop_all()

        print("Creating all tables...")
        db.create_all()
        print(f"Database rebuilt successfully with tables: {list(db.metadata.tables.keys())}")


if __name__ == "__main__":
    if "--yes" not in sys.argv:
        sys.exit("This drops every table. Re-run with --yes to continue.")
    rebuild_database()
