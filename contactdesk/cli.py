"""Management commands: create tables, load demo data, inspect tables."""

from datetime import date, timedelta
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy import select

from . import crud, mailer, models, schemas
from .auth import get_password_hash
from .core import get_settings
from .database import Database

console = Console()

app = typer.Typer(
    help="ContactDesk management commands",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

DEMO_USER = {
    "first_name": "John",
    "last_name": "Doe",
    "email": "john.doe@example.com",
    "phone": "9876543210",
    "password": "Demo@1234",
}

DEMO_CONTACTS = [
    ("9123456789", "alice.smith@company.com", "Project Manager - ABC Corp"),
    ("9234567890", "bob.johnson@tech.com", "Senior Developer - Tech Solutions"),
    ("9345678901", "carol.williams@startup.io", "CEO - Startup Inc"),
    ("9456789012", "david.brown@consulting.com", "Business Consultant"),
    ("9567890123", "emma.davis@design.studio", "UI/UX Designer"),
]

DEMO_ADDRESSES = [
    ("12 MG Road", "Bengaluru", "Karnataka", "560001"),
    ("45 Park Street", "Kolkata", "West Bengal", "700016"),
    ("8 Marine Drive", "Mumbai", "Maharashtra", "400020"),
    ("221 Anna Salai", "Chennai", "Tamil Nadu", "600002"),
    ("17 FC Road", "Pune", "Maharashtra", "411004"),
]

DEMO_TASKS = [
    ("Follow up on proposal", models.TaskStatus.pending),
    ("Review pull request", models.TaskStatus.in_progress),
    ("Quarterly sync", models.TaskStatus.completed),
    ("Send contract draft", models.TaskStatus.pending),
    ("Design review", models.TaskStatus.cancelled),
]

TABLES = [
    models.User,
    models.Contact,
    models.Address,
    models.Task,
    models.EmailLog,
]


def _database(database_url: Optional[str]) -> Database:
    return Database(database_url or get_settings().DATABASE_URL)


DatabaseUrlOption = typer.Option(
    None, "--database-url", "-d", help="Override DATABASE_URL from the environment"
)


@app.command("init-db")
def init_db(database_url: Optional[str] = DatabaseUrlOption) -> None:
    """Create all tables."""
    database = _database(database_url)
    database.create_all()
    console.print("[green]✓ Tables created[/green]")


@app.command("seed-demo")
def seed_demo(database_url: Optional[str] = DatabaseUrlOption) -> None:
    """Create a demo user with five contacts, their addresses and tasks."""
    database = _database(database_url)
    database.create_all()

    with database.session() as db:
        if crud.get_user_by_email(db, DEMO_USER["email"]) is not None:
            console.print(
                f"[yellow]Demo user {DEMO_USER['email']} already exists, nothing to do[/yellow]"
            )
            return

        user_in = schemas.UserCreate(**DEMO_USER)
        user = crud.create_user(db, user_in, get_password_hash(user_in.password))
        mailer.send_welcome_email(db, user)

        due = date.today() + timedelta(days=7)
        for (number, email, note), (line1, city, state, pincode), (title, status) in zip(
            DEMO_CONTACTS, DEMO_ADDRESSES, DEMO_TASKS
        ):
            contact = crud.create_contact(
                db,
                schemas.ContactCreate(contact_number=number, contact_email=email, note=note),
                user,
            )
            crud.create_address(
                db,
                contact,
                schemas.AddressCreate(
                    address_line1=line1, city=city, state=state, pincode=pincode
                ),
                user,
            )
            task = crud.create_task(
                db,
                schemas.TaskCreate(
                    contact_id=contact.id, title=title, status=status, due_date=due
                ),
                user,
            )
            mailer.send_task_created_email(db, user, task)

    console.print(
        f"[green]✓ Demo user created[/green] "
        f"(Email: {DEMO_USER['email']}, Password: {DEMO_USER['password']})"
    )
    console.print(f"[green]✓ {len(DEMO_CONTACTS)} contacts with addresses and tasks[/green]")


@app.command("show-db")
def show_db(
    database_url: Optional[str] = DatabaseUrlOption,
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum rows per table"),
) -> None:
    """Print the rows of every table."""
    database = _database(database_url)
    database.create_all()

    with database.session() as db:
        for model in TABLES:
            columns = [
                column.name
                for column in model.__table__.columns
                if column.name != "hashed_password"
            ]
            rows = db.scalars(select(model).limit(limit)).all()

            table = Table(title=f"{model.__tablename__} ({len(rows)} shown)")
            for name in columns:
                table.add_column(name, overflow="fold")
            for row in rows:
                table.add_row(*[_cell(getattr(row, name)) for name in columns])
            console.print(table)


def _cell(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, models.TaskStatus):
        return value.value
    return str(value)


def main() -> None:
    """Entry point of the ``contactdesk`` command."""
    app()


if __name__ == "__main__":
    main()
