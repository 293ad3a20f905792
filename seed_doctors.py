#!/usr/bin/env python3
"""
Development seeding script
Creates the demo doctor roster and/or resets every doctor's password
"""
import argparse
import sys

from sqlmodel import Session, select

from app.database import create_db_and_tables, engine
from app.db.models import Doctor
from app.utils import hash_password

DEFAULT_PASSWORD = "password123"

DEMO_DOCTORS = [
    {
        "name": "Dr. Alice Uwase",
        "specialty": "Cardiologist",
        "availability": "Monday - Friday, 8:00 AM - 4:00 PM",
        "phone": "0788000001",
        "email": "dr.alice@rwandahealth.rw",
    },
    {
        "name": "Dr. James Mugisha",
        "specialty": "Pediatrician",
        "availability": "Tuesday - Saturday, 9:00 AM - 5:00 PM",
        "phone": "0788000002",
        "email": "dr.james@rwandahealth.rw",
    },
    {
        "name": "Dr. Marie Kamali",
        "specialty": "Dermatologist",
        "availability": "Monday - Thursday, 10:00 AM - 6:00 PM",
        "phone": "0788000003",
        "email": "dr.marie@rwandahealth.rw",
    },
    {
        "name": "Dr. Patrick Habimana",
        "specialty": "General Practitioner",
        "availability": "Monday - Friday, 8:00 AM - 6:00 PM",
        "phone": "0788000004",
        "email": "dr.patrick@rwandahealth.rw",
    },
]


def seed_doctors(session: Session, password: str = DEFAULT_PASSWORD) -> int:
    """Insert demo doctors that are not present yet; returns how many were added."""
    password_hash = hash_password(password)
    added = 0
    for data in DEMO_DOCTORS:
        exists = session.exec(select(Doctor).where(Doctor.email == data["email"])).first()
        if exists:
            print(f"✓ {data['name']} already exists")
            continue
        session.add(Doctor(password_hash=password_hash, **data))
        added += 1
        print(f"✓ Added {data['name']}")
    session.commit()
    return added


def reset_passwords(session: Session, password: str = DEFAULT_PASSWORD) -> int:
    """Set every doctor's password to ``password``; returns how many rows changed."""
    password_hash = hash_password(password)
    doctors = session.exec(select(Doctor)).all()
    for doctor in doctors:
        doctor.password_hash = password_hash
        session.add(doctor)
    session.commit()
    return len(doctors)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--password", default=DEFAULT_PASSWORD, help="password to set for seeded doctors")
    parser.add_argument("--reset-passwords", action="store_true", help="reset every doctor's password instead of seeding")
    args = parser.parse_args(argv)

    create_db_and_tables()
    with Session(engine) as session:
        if args.reset_passwords:
            count = reset_passwords(session, args.password)
            print(f"🎉 Updated {count} doctor passwords")
        else:
            count = seed_doctors(session, args.password)
            print(f"🎉 Seeded {count} doctors")
    return 0


if __name__ == "__main__":
    sys.exit(main())
