#!/usr/bin/env python3
"""Interactive console for managing patients on a running patient service."""

import sys

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

PATIENT_FIELDS = [
    ("name", "Name"),
    ("email", "Email"),
    ("address", "Address"),
    ("dateOfBirth", "Date of birth (YYYY-MM-DD)"),
    ("registeredDate", "Registered date (YYYY-MM-DD)"),
]


class PatientsCLI:
    """Interactive interface for the patient service."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        """Initialize patients CLI."""
        self.base_url = base_url
        self.console = Console()
        self.client = httpx.Client(timeout=30.0)

    def start(self) -> None:
        """Start the interactive session."""
        self.console.print(
            Panel.fit(
                "[bold blue]🏥 Patient Service - Admin Console[/bold blue]\n"
                "Commands: /list, /add, /edit <id>, /delete <id>, /help, /quit",
                border_style="blue",
            )
        )

        if not self._test_connection():
            self.console.print(f"[red]❌ Cannot connect to the service at {self.base_url}.[/red]")
            return

        self.console.print("[green]✅ Connected to patient service[/green]\n")

        try:
            while True:
                user_input = Prompt.ask("\n[bold cyan]patients[/bold cyan]").strip()
                command, _, argument = user_input.partition(" ")
                command = command.lower()

                if command in ["/quit", "/exit", "quit", "exit"]:
                    break
                elif command == "/help":
                    self._show_help()
                elif command == "/list":
                    self._list_patients()
                elif command == "/add":
                    self._add_patient()
                elif command == "/edit" and argument:
                    self._edit_patient(argument.strip())
                elif command == "/delete" and argument:
                    self._delete_patient(argument.strip())
                elif command:
                    self.console.print("[yellow]Unknown command, type /help[/yellow]")

        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]👋 Goodbye![/yellow]")
            self.client.close()

    def _test_connection(self) -> bool:
        """Test connection to the service."""
        try:
            response = self.client.get(f"{self.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response | None:
        """Send a request, reporting connection failures."""
        try:
            return self.client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as e:
            self.console.print(f"[red]❌ Connection error: {e}[/red]")
            return None

    def _list_patients(self) -> None:
        response = self._request("GET", "/patients")
        if response is None:
            return
        if response.status_code != 200:
            self._display_error(response)
            return

        table = Table(title="Patients")
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Email")
        table.add_column("Date of birth")
        for patient in response.json():
            table.add_row(patient["id"], patient["name"], patient["email"], patient["dateOfBirth"])
        self.console.print(table)

    def _prompt_patient(self) -> dict[str, str]:
        return {field: Prompt.ask(label) for field, label in PATIENT_FIELDS}

    def _add_patient(self) -> None:
        response = self._request("POST", "/patients", json=self._prompt_patient())
        if response is None:
            return
        if response.status_code == 200:
            self._display_patient(response.json(), "Created")
        else:
            self._display_error(response)

    def _edit_patient(self, patient_id: str) -> None:
        self.console.print("[dim]Every field is replaced, enter current values for unchanged ones.[/dim]")
        response = self._request("PUT", f"/patients/{patient_id}", json=self._prompt_patient())
        if response is None:
            return
        if response.status_code == 200:
            self._display_patient(response.json(), "Updated")
        else:
            self._display_error(response)

    def _delete_patient(self, patient_id: str) -> None:
        if not Confirm.ask(f"Delete patient {patient_id}?"):
            return
        response = self._request("DELETE", f"/patients/{patient_id}")
        if response is None:
            return
        if response.status_code == 204:
            self.console.print(f"[green]🗑  Deleted patient {patient_id}[/green]")
        else:
            self._display_error(response)

    def _display_patient(self, patient: dict, action: str) -> None:
        self.console.print(
            Panel(
                f"[bold]{patient['name']}[/bold]\n{patient['email']}\nBorn {patient['dateOfBirth']}",
                title=f"[bold green]{action} {patient['id']}[/bold green]",
                border_style="green",
            )
        )

    def _display_error(self, response: httpx.Response) -> None:
        """Show an error body, one line per field or message."""
        try:
            body = response.json()
            lines = "\n".join(f"• {key}: {value}" for key, value in body.items())
        except ValueError:
            lines = response.text
        self.console.print(
            Panel(lines, title=f"[bold red]❌ Error {response.status_code}[/bold red]", border_style="red")
        )

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /list - Show all patients
• /add - Register a new patient
• /edit <id> - Replace a patient's details
• /delete <id> - Remove a patient
• /help - Show this help message
• /quit or /exit - Exit the console

[bold]Tips:[/bold]
• Dates use the format YYYY-MM-DD
• Emails must be unique across patients
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]❓ Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the patients CLI."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"

    cli = PatientsCLI(base_url)
    cli.start()


if __name__ == "__main__":
    main()
