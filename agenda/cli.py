import click

from agenda.extensions import db


def register_cli(app):
    """
    Adds small helper CLI commands:
    - flask create-db: create tables using the configured database
    - flask drop-db: drop all tables (use with caution)
    - flask seed-users: create the default admin and doctor accounts
    """

    @app.cli.command("create-db")
    def create_db_command():
        """Create database tables if they do not exist."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("drop-db")
    @click.confirmation_option(prompt="Drop all tables?")
    def drop_db_command():
        """Drop all database tables. This is destructive."""
        db.drop_all()
        click.echo("Database tables dropped.")

    @app.cli.command("seed-users")
    def seed_users_command():
        """Create default users (skips existing emails)."""
        from agenda.seeds import seed_default_users, DEFAULT_USERS

        created = seed_default_users()
        for user in created:
            password = next(entry['password'] for entry in DEFAULT_USERS if entry['email'] == user.email)
            click.echo(f"  Created: {user.email} ({user.role}) - Password: {password}")
        click.echo(f"Created {len(created)} new user(s). Change passwords after first login!")
