"""
HeartBridge - predictive support for everyday autism care.

Command-line shell around the client core: bootstraps the session from
local storage, runs the phone/OTP login flow against the backend, and
logs out.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from shared.config import Settings, get_settings
from shared.exceptions import HeartBridgeError
from modules.auth.login_flow import LoginFlow, LoginStep
from modules.session.service import SessionService, create_session_service

console = Console()

BACK = "back"
RESEND = "resend"

STEP_PROMPTS = {
    LoginStep.NAME: "How should we address you?",
    LoginStep.CHILD_NAME: "Who is your amazing child?",
    LoginStep.PHONE: "Where can we send your code? +1",
    LoginStep.CODE: f"Enter the 4-digit code ('{RESEND}' for a new one)",
}

INVALID_INPUT_HINTS = {
    LoginStep.NAME: "Please enter at least 2 characters.",
    LoginStep.CHILD_NAME: "Please enter at least 2 characters.",
    LoginStep.PHONE: "Please enter a 10-digit phone number.",
    LoginStep.CODE: "The code has 4 digits.",
}


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def print_status(service: SessionService) -> None:
    """Bootstrap the session and describe it."""
    state = service.bootstrap()
    if not state.is_authenticated:
        console.print("[yellow]Not signed in.[/yellow] Run [bold]login[/bold] to get started.")
        return

    profile = state.profile
    console.print(f"[bold]Signed in as:[/bold] {profile.display_name} ({profile.role.value})")
    if profile.child_name:
        console.print(f"[dim]Child: {profile.child_name}[/dim]")
    console.print(f"[dim]Tier: {profile.subscription_tier.value} | Points: {profile.points}[/dim]")
    console.print(f"[dim]Home: {state.active_tab.value}[/dim]")
    if not state.has_credential:
        console.print("[yellow]No stored credential; sign in again to reach the backend.[/yellow]")


async def run_login(flow: LoginFlow) -> bool:
    """Drive the login flow interactively until it completes."""
    while not flow.is_complete:
        if flow.step == LoginStep.ROLE_SELECTION:
            role = Prompt.ask("Select your role", choices=["parent", "expert"], console=console)
            flow.select_role(role)
            continue

        answer = Prompt.ask(
            f"Step {flow.step_number}/{flow.total_steps} · {STEP_PROMPTS[flow.step]}",
            console=console,
        ).strip()

        if answer.lower() == BACK:
            flow.back()
            continue

        if flow.step == LoginStep.CODE and answer.lower() == RESEND:
            if await flow.resend_code():
                console.print("[green]A new code is on its way.[/green]")
            else:
                console.print(f"[red]{flow.error_message}[/red]")
            continue

        _enter(flow, answer)
        if not flow.is_step_valid():
            console.print(f"[yellow]{INVALID_INPUT_HINTS[flow.step]}[/yellow]")
            continue

        with console.status("Loading…"):
            moved = await flow.advance()
        if not moved and flow.error_message:
            console.print(f"[red]{flow.error_message}[/red]")

    return True


def _enter(flow: LoginFlow, answer: str) -> None:
    if flow.step == LoginStep.NAME:
        flow.enter_name(answer)
    elif flow.step == LoginStep.CHILD_NAME:
        flow.enter_child_name(answer)
    elif flow.step == LoginStep.PHONE:
        flow.enter_phone(answer)
    elif flow.step == LoginStep.CODE:
        flow.enter_code(answer)


def login(service: SessionService) -> None:
    state = service.bootstrap()
    if state.is_authenticated:
        console.print(f"Already signed in as [bold]{state.profile.display_name}[/bold].")
        return

    asyncio.run(run_login(state.login_flow))
    console.print(f"\n[bold green]Welcome to HeartBridge, {service.state.profile.display_name}![/bold green]")


def logout(service: SessionService) -> None:
    service.bootstrap()
    service.logout()
    console.print("Signed out.")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="HeartBridge client: sign in, check the session, sign out"
    )
    parser.add_argument(
        "command",
        choices=["status", "login", "logout"],
        help="What to do",
    )
    parser.add_argument(
        "--base-url",
        help="Backend base URL (default: API_BASE_URL or http://localhost:8000)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.base_url:
        settings = settings.model_copy(update={"api_base_url": args.base_url})
    configure_logging(settings)

    service = create_session_service(settings)
    try:
        if args.command == "status":
            print_status(service)
        elif args.command == "login":
            login(service)
        else:
            logout(service)
    except HeartBridgeError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled[/dim]")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
