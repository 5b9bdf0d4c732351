"""
Terminal front end for the FitAI login/signup form.
Forwards typed commands to the form controller and re-renders its state.
"""

import asyncio
import getpass
import shlex
from typing import Callable, List, Optional

from FitAI.api.client import IdentityServiceClient, close_session
from FitAI.config import config
from FitAI.core.client.auth import (
    AuthDispatcher,
    AuthFormController,
    FormMode,
    FormState,
    MessageKind,
    SubmitEvent,
)
from FitAI.core.client.services import ConsoleNavigator, FileSessionStore
from FitAI.core.client.utils import FormFieldError
from FitAI.core.logging import get_logger

__all__ = ['client', 'render_state']

logger = get_logger(__name__)

SECRET_FIELDS = ("password", "confirm_password", "confirmPassword")

MODE_FIELDS = {
    FormMode.LOGIN: ("email", "password"),
    FormMode.SIGNUP: ("username", "email", "password", "confirm_password"),
}

FIELD_LABELS = {
    "username": "Full Name",
    "email": "Email",
    "password": "Password",
    "confirm_password": "Confirm Password",
}

HELP_TEXT = (
    "Commands:\n"
    "  tab login|signup      - Switch between the login and signup forms\n"
    "  set <field> [value]   - Set username, email, password or confirm_password\n"
    "  submit                - Submit the current form\n"
    "  show                  - Show the form again\n"
    "  exit                  - Leave without signing in"
)


def render_state(state: FormState) -> str:
    """Draw the form as text."""
    login_tab = "[Login]" if state.mode is FormMode.LOGIN else " Login "
    signup_tab = "[Sign Up]" if state.mode is FormMode.SIGNUP else " Sign Up "
    lines: List[str] = ["", f"  {login_tab} {signup_tab}"]

    if state.message.kind is MessageKind.SUCCESS:
        lines.append(f"  ✔ {state.message.text}")
    elif state.message.kind is MessageKind.ERROR:
        lines.append(f"  ✖ {state.message.text}")

    for name in MODE_FIELDS[state.mode]:
        value = state.fields[name]
        if name in SECRET_FIELDS and value:
            value = "*" * len(value)
        lines.append(f"  {FIELD_LABELS[name]:<17}: {value}")

    if state.mode is FormMode.LOGIN:
        button = "Logging in..." if state.is_pending else "Login"
    else:
        button = "Signing up..." if state.is_pending else "Create Account"
    lines.append(f"  < {button} >")
    return "\n".join(lines)


async def _read(prompt: str, secret: bool = False) -> str:
    # Blocking reads run off-loop so scheduled callbacks still fire
    reader: Callable[[str], str] = getpass.getpass if secret else input
    return await asyncio.get_running_loop().run_in_executor(None, reader, prompt)


async def _set_field(controller: AuthFormController, name: str, value: Optional[str]) -> None:
    if value is None:
        value = await _read(f"{name}: ", secret=name in SECRET_FIELDS)
    try:
        controller.set_field(name, value)
    except FormFieldError as e:
        print(f"{e.message}. Fields: username, email, password, confirm_password")


async def _submit(controller: AuthFormController) -> None:
    if controller.is_pending:
        print("Please wait, a request is in progress.")
        return
    if controller.mode is FormMode.LOGIN:
        await controller.submit_login(SubmitEvent())
    else:
        await controller.submit_signup(SubmitEvent())


async def run_form(api_url: Optional[str] = None, signup: bool = False,
                   session_file: Optional[str] = None) -> bool:
    """
    Run the interactive form until the user signs in or leaves.

    Returns:
        True if the user signed in
    """
    api_client = IdentityServiceClient(api_url)
    session_store = FileSessionStore(session_file or config.SESSION_FILE)
    signed_in = asyncio.Event()
    navigator = ConsoleNavigator(config.APP_URL, on_navigate=lambda _path: signed_in.set())
    dispatcher = AuthDispatcher(api_client, session_store, navigator)
    controller = AuthFormController(dispatcher, query={"signup": "true"} if signup else None)
    controller.subscribe(lambda state: print(render_state(state)))

    print("Welcome to FitAI!")
    print("Sign in to your account or create a new one. Type 'help' for commands.")
    print(render_state(controller.state))

    try:
        while not signed_in.is_set():
            try:
                command = (await _read(">> ")).strip()
            except EOFError:
                break

            try:
                parts = shlex.split(command)
            except ValueError as e:
                print(f"Could not parse command: {e}")
                continue

            match parts:
                case []:
                    continue

                case ["exit"] | ["quit"]:
                    break

                case ["tab", "login" | "signup" as mode]:
                    controller.set_mode(mode)

                case ["tab", *_]:
                    print("Usage: tab login|signup")

                case ["set", name]:
                    await _set_field(controller, name, None)

                case ["set", name, *words]:
                    await _set_field(controller, name, " ".join(words))

                case ["set"]:
                    print("Usage: set <field> [value]")

                case ["submit"]:
                    await _submit(controller)

                case ["show"]:
                    print(render_state(controller.state))

                case ["help"]:
                    print(HELP_TEXT)

                case _:
                    print(f"Unknown command: {command}, try type command 'help' to check commands")
    finally:
        controller.dispose()
        await close_session()

    if signed_in.is_set():
        logger.info("Session saved to %s", session_store.path)
    return signed_in.is_set()


def client(api_url: Optional[str] = None, signup: bool = False,
           session_file: Optional[str] = None) -> bool:
    """
    Start the terminal login/signup form.

    Args:
        api_url: Identity service origin (default: FITAI_API_URL or http://localhost:5000)
        signup: Open on the signup tab
        session_file: Where to keep the session token
    """
    try:
        return asyncio.run(run_form(api_url, signup, session_file))
    except KeyboardInterrupt:
        print("\nBye!")
        return False
