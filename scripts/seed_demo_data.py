"""Seed demo sellers and firewood locations around Coos Bay, Oregon."""

import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.location import Location  # noqa: E402
from models.user import User  # noqa: E402


def get_or_create_user(name: str, email: str, password: str) -> User:
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(name=name, email=email, role="user")
        user.set_password(password)
        db.session.add(user)
    else:
        user.name = name
        user.set_password(password)
    return user


def main() -> None:
    app = create_app()
    with app.app_context():
        db.create_all()

        ann = get_or_create_user("Ann", "ann@example.com", "secret1")
        bob = get_or_create_user("Bob", "bob@example.com", "secret2")

        db.session.flush()

        locations_data = [
            {
                "owner": ann,
                "name": "Ann's Wood",
                "description": "Seasoned fir, self-serve stand by the mailbox.",
                "price": Decimal("8.00"),
                "latitude": 43.366,
                "longitude": -124.217,
            },
            {
                "owner": ann,
                "name": "Ann's Kindling",
                "description": "Split cedar kindling bundles.",
                "price": Decimal("5.00"),
                "latitude": 43.3712,
                "longitude": -124.2243,
            },
            {
                "owner": bob,
                "name": "Bob's Oak",
                "description": "Dry oak rounds, cash only.",
                "price": Decimal("10.00"),
                "latitude": 43.4065,
                "longitude": -124.2243,
            },
        ]

        created = 0
        for data in locations_data:
            owner = data.pop("owner")
            location = Location.query.filter_by(
                name=data["name"], created_by_id=owner.id
            ).first()
            if location is None:
                location = Location(created_by_id=owner.id, status="active", **data)
                db.session.add(location)
                created += 1
            else:
                for key, value in data.items():
                    setattr(location, key, value)

        db.session.commit()

        print(f"Seed data inserted: 2 users, {created} new location(s).")


if __name__ == "__main__":
    main()
