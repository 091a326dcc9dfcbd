#!/usr/bin/env python3
"""
Initialize default users (admin + sample doctor).
Run with: python3 init_admin.py   (same as `flask seed-users`)
"""
from agenda import create_app
from agenda.extensions import db
from agenda.seeds import seed_default_users, DEFAULT_USERS


def create_admins():
    """Create tables if needed, then the default users"""
    app = create_app()

    with app.app_context():
        print("=" * 60)
        print("Initializing Default Users")
        print("=" * 60)
        print()

        db.create_all()
        created = seed_default_users()
        for user in created:
            password = next(entry['password'] for entry in DEFAULT_USERS if entry['email'] == user.email)
            print(f"  ✓ Created: {user.email} ({user.role}) - Password: {password}")

        print()
        print("=" * 60)
        print(f"✅ Created {len(created)} new user(s)")
        print("=" * 60)
        print("\n⚠️  IMPORTANT: Change passwords after first login!")


if __name__ == '__main__':
    create_admins()
