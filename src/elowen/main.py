"""
Elowen - CLI Entry Point.

Usage:
    elowen start             Start an interactive coaching session
    elowen health            Check configuration
    elowen --help            Show help
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

from elowen.core.models import Period
from elowen.onboarding.forms import CONCERN_OPTIONS, LIFESTYLE_OPTIONS, SKIN_TYPE_OPTIONS
from elowen.onboarding.wizard import WizardStep
from elowen.session import View

app = typer.Typer(
    name="elowen",
    help="Elowen - Your personal skincare coach.",
    add_completion=False,
)
console = Console()

TAB_KEYS = {
    "h": "home",
    "r": "routine",
    "p": "progress",
    "c": "chat",
    "l": "library",
    "m": "profile",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


async def _ask(prompt: str) -> str:
    # Blocking input runs off-loop so coach replies keep arriving
    return (await asyncio.to_thread(console.input, prompt)).strip()


async def _with_spinner(text: str, coro):
    with Live(Spinner("dots", text=text), console=console, transient=True):
        return await coro


# =============================================================================
# Screens
# =============================================================================


async def _onboarding(session) -> None:
    wizard = session.wizard
    draft = wizard.draft
    step = wizard.step
    console.print(Panel.fit(f"[bold]{step['title']}[/bold]\n{step['description']}", title=f"Step {wizard.current_step_index + 1}/3"))

    if wizard.current_step_index == WizardStep.SKIN_TYPE:
        for i, skin_type in enumerate(SKIN_TYPE_OPTIONS, 1):
            mark = "●" if draft.skin_type == skin_type else "○"
            console.print(f"  {i}. {mark} {skin_type.value}")
    elif wizard.current_step_index == WizardStep.CONCERNS:
        for i, concern in enumerate(CONCERN_OPTIONS, 1):
            mark = "☑" if concern in draft.concerns else "☐"
            console.print(f"  {i}. {mark} {concern}")
    else:
        console.print(f"  Sensitivity: [bold]{draft.sensitivity}[/bold]/5  (s <1-5>)")
        for i, factor in enumerate(LIFESTYLE_OPTIONS, 1):
            mark = "☑" if factor in draft.lifestyle else "☐"
            console.print(f"  {i}. {mark} {factor}")
        console.print("  Current routine: r <text>")

    action = "Reveal My Routine" if wizard.is_last_step else "Next Step"
    # Re-assessment can be abandoned; the committed plan stays
    cancel = ", x = cancel" if session.store.has_plan else ""
    choice = await _ask(f"\n[dim]number to choose, n = {action}, b = Back{cancel}, q = quit[/dim] > ")

    if choice == "q":
        raise typer.Exit()
    if choice == "x" and session.store.has_plan:
        session.navigate(View.HOME)
    elif choice == "n":
        if wizard.is_last_step:
            ok = await _with_spinner("Designing...", wizard.advance())
            if not ok:
                console.print(f"[red]Could not create your routine: {session.last_error}. Try again.[/red]")
        else:
            await wizard.advance()
    elif choice == "b":
        wizard.retreat()
    elif choice.startswith("s ") and choice[2:].isdigit() and wizard.current_step_index == WizardStep.LIFESTYLE:
        wizard.set_sensitivity(int(choice[2:]))
    elif choice.startswith("r ") and wizard.current_step_index == WizardStep.LIFESTYLE:
        wizard.set_current_routine(choice[2:])
    elif choice.isdigit():
        index = int(choice) - 1
        if wizard.current_step_index == WizardStep.SKIN_TYPE and 0 <= index < len(SKIN_TYPE_OPTIONS):
            wizard.select_skin_type(SKIN_TYPE_OPTIONS[index])
        elif wizard.current_step_index == WizardStep.CONCERNS and 0 <= index < len(CONCERN_OPTIONS):
            wizard.toggle_concern(CONCERN_OPTIONS[index])
        elif wizard.current_step_index == WizardStep.LIFESTYLE and 0 <= index < len(LIFESTYLE_OPTIONS):
            wizard.toggle_lifestyle_factor(LIFESTYLE_OPTIONS[index])


async def _capture(session) -> None:
    console.print(Panel.fit(
        "[bold]Baseline Analysis[/bold]\n"
        "Capture a visual starting point to track improvements and validate product efficacy.",
    ))
    choice = await _ask("[dim]path to a photo, or 'skip'[/dim] > ")
    if choice == "skip":
        session.skip_capture()
        return

    path = Path(choice).expanduser()
    if not path.is_file():
        console.print(f"[red]No such file: {path}[/red]")
        return
    ok = await _with_spinner("Analyzing Skin Markers...", session.submit_photo(path.read_bytes()))
    if not ok:
        console.print(f"[red]Analysis failed: {session.last_error}. Try again.[/red]")


def _home(session) -> None:
    store = session.store
    name = store.profile.display_name
    console.print(f"\n[bold green]Welcome back, {name}.[/bold green]")
    console.print(
        f"Today: AM {store.completed_count(Period.AM)}/{store.total_steps(Period.AM)}, "
        f"PM {store.completed_count(Period.PM)}/{store.total_steps(Period.PM)} "
        f"({store.progress_ratio():.0%})"
    )
    latest = store.latest_analysis()
    if latest:
        console.print(f"Latest analysis: {latest.summary}\n[italic]{latest.coach_note}[/italic]")
    else:
        console.print("[dim]No analyses yet.[/dim]")


async def _routine(session) -> None:
    from elowen.library import ROUTINE_TIPS

    routine = session.store.routine
    for period, label in ((Period.AM, "Morning"), (Period.PM, "Evening")):
        table = Table(title=f"{label} Ritual")
        table.add_column("#")
        table.add_column("Step")
        table.add_column("Why")
        for i, step in enumerate(routine.steps(period), 1):
            mark = "[green]✓[/green]" if step.is_completed else " "
            table.add_row(f"{period.value[0]}{i}", f"{mark} {step.name}", step.rationale)
        console.print(table)

    choice = await _ask("[dim]a<n>/p<n> toggles a step, 't' shows tips, Enter to go back[/dim] > ")
    if choice == "t":
        for tip in ROUTINE_TIPS:
            console.print(f"[bold]{tip.title}[/bold]: {tip.body}")
    elif len(choice) > 1 and choice[0] in "ap" and choice[1:].isdigit():
        period = Period.AM if choice[0] == "a" else Period.PM
        steps = routine.steps(period)
        index = int(choice[1:]) - 1
        if 0 <= index < len(steps):
            session.toggle_step(period, steps[index].id)


async def _progress(session) -> None:
    table = Table(title="Progress")
    for column in ("date", "hydration", "clarity", "texture", "redness"):
        table.add_column(column)
    for point in session.store.progress_series():
        table.add_row(point["date"], *(f"{point[k]:.0f}" for k in ("hydration", "clarity", "texture", "redness")))
    console.print(table)
    if await _ask("[dim]'new' for a new analysis, Enter to go back[/dim] > ") == "new":
        session.navigate(View.CAPTURE)


async def _chat(session) -> bool:
    for message in session.chat.transcript:
        who = "[bold blue]You[/bold blue]" if message.role == "user" else "[bold green]Coach[/bold green]"
        console.print(f"{who}: {message.text}")
    text = await _ask("[dim]message (Enter to go back)[/dim] > ")
    return bool(text) and session.send_chat(text)


async def _library(session) -> None:
    from elowen.library import ARTICLES, articles_by_tag

    tags = sorted({article.tag for article in ARTICLES})
    console.print(f"[dim]Topics: {', '.join(tags)}[/dim]")
    tag = await _ask("[dim]topic to filter, Enter for all[/dim] > ")
    articles = articles_by_tag(tag) if tag else ARTICLES
    if not articles:
        console.print(f"[yellow]No articles on '{tag}'.[/yellow]")
    for article in articles:
        console.print(f"• [bold]{article.title}[/bold] [dim]({article.tag})[/dim]")


async def _profile(session) -> None:
    profile = session.store.profile
    assessment = session.store.assessment
    console.print(Panel.fit(
        f"[bold]{profile.display_name}[/bold]\n"
        f"Skin type: {assessment.skin_type.value if assessment else '-'}\n"
        f"Analyses: {len(profile.analyses)}",
        title="Profile",
    ))
    choice = await _ask("[dim]'export' (.ics), 'retake', 'signout', Enter to go back[/dim] > ")
    if choice == "export":
        export = session.export_calendar()
        if export:
            path = export.write(".")
            console.print(f"[green]Saved {path} ({export.mime_type})[/green]")
    elif choice == "retake":
        session.retake_assessment()
    elif choice == "signout":
        session.sign_out()


async def _run_session(session) -> None:
    try:
        while True:
            view = session.view
            if view == View.ONBOARDING:
                await _onboarding(session)
                continue
            if view == View.CAPTURE:
                await _capture(session)
                continue

            if view == View.HOME:
                _home(session)
            elif view == View.ROUTINE:
                await _routine(session)
            elif view == View.PROGRESS:
                await _progress(session)
                if session.view != View.PROGRESS:
                    continue
            elif view == View.CHAT:
                if await _chat(session):
                    continue
            elif view == View.LIBRARY:
                await _library(session)
            elif view == View.PROFILE:
                await _profile(session)
                if session.view != View.PROFILE:
                    continue

            choice = await _ask(
                "\n[dim]h)ome r)outine p)rogress c)hat l)ibrary m)e q)uit[/dim] > "
            )
            if choice == "q":
                break
            if choice in TAB_KEYS:
                session.navigate(View(TAB_KEYS[choice]))
    finally:
        await session.close()


# =============================================================================
# Commands
# =============================================================================


@app.command()
def start(
    name: str = typer.Option(None, "--name", "-n", help="Display name (defaults to DISPLAY_NAME)"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log collaborator prompts to prompt_logs/"),
) -> None:
    """Start an interactive coaching session."""
    from zoneinfo import ZoneInfo

    from elowen.collaborator import LLMCollaborator
    from elowen.config import settings
    from elowen.core.store import ProfileStore
    from elowen.llm.prompt_logger import enable_prompt_logging, get_session_log_dir
    from elowen.session import AppSession

    configure_logging(settings.log_level)
    if log_prompts or settings.elowen_log_prompts:
        enable_prompt_logging(True)
        console.print("[dim]📝 Prompt logging enabled. Check prompt_logs/ after the session.[/dim]")

    store = ProfileStore(display_name=name or settings.display_name)
    session = AppSession(
        store,
        LLMCollaborator(),
        reply_delay=settings.coach_reply_delay,
        tz=ZoneInfo(settings.timezone) if settings.timezone else None,
    )

    console.print(
        Panel.fit(
            "[bold green]Elowen[/bold green]\n"
            "Your personal skincare coach.\n\n"
            "[dim]Type 'q' at any menu to end the session.[/dim]",
            title="Welcome",
            border_style="green",
        )
    )

    try:
        asyncio.run(_run_session(session))
    except KeyboardInterrupt:
        console.print("\n\n[dim]Session interrupted.[/dim]")

    log_dir = get_session_log_dir()
    if log_dir:
        console.print(f"\n[dim]📝 Prompts logged to: {log_dir}[/dim]")
    console.print("\n[dim]Goodbye! 👋[/dim]")


@app.command()
def health() -> None:
    """Check configuration."""
    from elowen.config import get_settings

    console.print("\n[bold]Elowen Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.elowen_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Models: routine={settings.routine_model}, vision={settings.vision_model}")

        if settings.openai_api_key.startswith("sk-"):
            console.print("✅ OpenAI API key configured")
        else:
            console.print("⚠️  OpenAI API key may be invalid")

        if settings.timezone:
            from zoneinfo import ZoneInfo

            ZoneInfo(settings.timezone)
            console.print(f"✅ Calendar time zone: {settings.timezone}")
        else:
            console.print("ℹ️  Calendar uses system local time")

        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from elowen import __version__

    console.print(f"Elowen version {__version__}")


if __name__ == "__main__":
    app()
