import sys
import os

sys.path.append(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)  # relative imports

from datetime import timedelta

from dorothy import create_app, db
from dorothy.models import EventStatus, PartnerCategory, Program
from dorothy.repositories import (
    EventRepository,
    PartnerRepository,
    TeamRepository,
)
from dorothy.utils.dates import utcnow

app = create_app()

# Print the database URI the app is configured to use
with app.app_context():
    print(f"INFO: Connecting to database: {app.config['SQLALCHEMY_DATABASE_URI']}")


def create_demo_events():
    """One published event per program, spread over the coming weeks"""
    today = utcnow().date()
    events = []
    for i, program in enumerate(Program):
        events.append(
            EventRepository.create(
                {
                    "title": f"Atelier {program.value.replace('_', ' ').title()}",
                    "description": "Atelier de démonstration ouvert à tous.",
                    "date": today + timedelta(days=7 * (i + 1)),
                    "time": "14h00",
                    "location": "Centre Social Dorothy",
                    "category": program.value,
                    "status": EventStatus.PUBLISHED.value,
                    "featured": i == 0,
                    "max_participants": 20,
                    "tags": ["demo", program.value.lower()],
                }
            )
        )
    print(f"Created {len(events)} demo events")
    return events


def create_demo_team():
    members = [
        ("Claire Martin", "Directrice", Program.GENERAL),
        ("Karim Benali", "Animateur jeunesse", Program.JEUNESSE),
        ("Sophie Durand", "Référente seniors", Program.SENIORS),
    ]
    for order, (name, position, category) in enumerate(members):
        TeamRepository.create(
            {
                "name": name,
                "position": position,
                "category": category.value,
                "sort_order": order,
            }
        )
    print(f"Created {len(members)} team members")


def create_demo_partners():
    partners = [
        ("Ville de Montreuil", PartnerCategory.INSTITUTIONAL),
        ("CAF", PartnerCategory.INSTITUTIONAL),
        ("Les Amis du Quartier", PartnerCategory.ASSOCIATIF),
    ]
    for order, (name, category) in enumerate(partners):
        PartnerRepository.create(
            {"name": name, "category": category.value, "sort_order": order}
        )
    print(f"Created {len(partners)} partners")


if __name__ == "__main__":
    with app.app_context():
        db.create_all()
        create_demo_events()
        create_demo_team()
        create_demo_partners()
        print("Demo data created.")
