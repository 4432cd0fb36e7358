"""User management CLI commands."""

import asyncio
import json
from pathlib import Path

import typer

user_app = typer.Typer()


@user_app.command("create")
def create_user(
    full_name: str = typer.Option(..., prompt=True, help="Full name"),
    email: str = typer.Option(..., prompt=True, help="Email address"),
    password: str = typer.Option(
        "",
        help="Password (non-admin users get a derived default when omitted)",
        hide_input=True,
    ),
    department: str = typer.Option("", help="Department (required for non-admin users)"),
    college: str = typer.Option("", help="College (required for non-admin users)"),
    rollno: str = typer.Option("", help="Roll number (required for non-admin users)"),
    mobile_no: str = typer.Option("", "--mobile-no", help="Mobile number"),
    admin: bool = typer.Option(False, "--admin", help="Create an administrator"),
) -> None:
    """Create a single user and print the password that was set."""
    payload = {
        "full_name": full_name,
        "email": email,
        "password": password,
        "department": department,
        "college": college,
        "rollno": rollno,
        "mobile_no": mobile_no,
        "admin": admin,
    }
    asyncio.run(_create_user(payload))


async def _create_user(payload: dict) -> None:
    """Async implementation of user creation."""
    from user_api.core.config import get_settings
    from user_api.core.database import dispose_engine, get_session_factory, init_engine
    from user_api.core.exceptions import UserServiceError
    from user_api.schemas.user import UserCreateRequest
    from user_api.services.provisioning_service import create_user

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            created = await create_user(session, UserCreateRequest.model_validate(payload))
            typer.echo(f"User '{created.email}' created")
            typer.echo(f"Password: {created.plain_password}")
    except UserServiceError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()


@user_app.command("import")
def import_users(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file with a list of users"),
) -> None:
    """Bulk-create users from a JSON array and report each outcome."""
    try:
        items = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        typer.echo(f"Error: {file} is not valid JSON ({e})", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_import_users(items))


async def _import_users(items: object) -> None:
    """Async implementation of bulk user creation."""
    from user_api.core.config import get_settings
    from user_api.core.database import dispose_engine, get_session_factory, init_engine
    from user_api.core.exceptions import UserServiceError
    from user_api.services.provisioning_service import bulk_create_users

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            result = await bulk_create_users(session, items)
    except UserServiceError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()

    typer.echo(f"{'Email':<35} {'Password':<20}")
    typer.echo("-" * 56)
    for created in result.successes:
        typer.echo(f"{created.email:<35} {created.plain_password:<20}")
    for failure in result.failures:
        typer.echo(f"FAILED {failure.email}: {failure.msg}", err=True)
    typer.echo(f"\nCreated: {len(result.successes)}  Failed: {len(result.failures)}")


@user_app.command("list")
def list_users() -> None:
    """List all users."""
    asyncio.run(_list_users())


async def _list_users() -> None:
    """Async implementation of user listing."""
    from user_api.core.config import get_settings
    from user_api.core.database import dispose_engine, get_session_factory, init_engine
    from user_api.services.user_service import list_all

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            users = await list_all(session)
            typer.echo(f"{'User ID':<38} {'Email':<30} {'Roll No':<12} {'Admin':<6} {'Active':<6}")
            typer.echo("-" * 96)
            for user in users:
                typer.echo(
                    f"{user.user_id:<38} {user.email:<30} {user.rollno or '-':<12} {user.admin!s:<6} {user.status!s:<6}"
                )
            typer.echo(f"\nTotal: {len(users)}")
    finally:
        await dispose_engine()
