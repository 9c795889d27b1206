"""
Interactive hook generation handler.

"""

from dataclasses import asdict
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt, Confirm
from rich.panel import Panel
from rich.table import Table
from rich import box

from .cli_integration import OUTPUT_FILES, display_response, write_response
from .core.config import ConfigError, GeneratorConfig, load_config
from .core.generator import GeneratorError
from .core.templates import TemplateError
from .models import GenerateFileResponse, GenerateRequest, HookType, HttpMethod
from .pipeline import HookGenerator


class InteractiveSession:
    """Prompts for an endpoint description, generates and previews the fragments."""

    def __init__(self, config: Optional[GeneratorConfig] = None, console: Console = None):
        self.console = console or Console()
        self.config = config or GeneratorConfig()
        self._last: Optional[GenerateFileResponse] = None

    def run_interactive(self) -> bool:
        """
        Run the interactive loop.

        Returns:
            True when the user leaves normally, False if cancelled
        """
        try:
            while True:
                action = self._show_main_menu()

                if action == "back":
                    return True
                elif action == "generate":
                    self._interactive_generation()
                elif action == "save":
                    self._save_last()
                elif action == "config":
                    self._load_configuration()
                elif action == "info":
                    self._show_config_info()

        except KeyboardInterrupt:
            self.console.print("\n[yellow]👋 Hook generation cancelled[/yellow]")
            return False

    def _show_main_menu(self) -> str:
        menu_panel = Panel.fit(
            """[bold blue]⚡ Hook Generation Menu[/bold blue]

[cyan]1.[/cyan] 🚀 Generate hook for an endpoint
[cyan]2.[/cyan] 💾 Save last result
[cyan]3.[/cyan] ⚙️  Load configuration file
[cyan]4.[/cyan] 📋 Show active configuration
[cyan]b.[/cyan] 🔙 Exit""",
            border_style="blue",
        )

        self.console.print()
        self.console.print(menu_panel)

        choice = Prompt.ask(
            "\n[bold]Choose an option[/bold]",
            choices=["1", "2", "3", "4", "b"],
            default="1",
        )

        return {
            "1": "generate",
            "2": "save",
            "3": "config",
            "4": "info",
            "b": "back",
        }[choice]

    def _interactive_generation(self):
        request = self._prompt_request()
        if request is None:
            return

        try:
            self._last = HookGenerator(self.config).generate(request)
        except (GeneratorError, TemplateError) as e:
            self.console.print(f"[red]❌ Generation error:[/red] {e}")
            return

        self.console.print("[green]✅ Hook generated[/green]")
        display_response(self._last, self.console)

        if Confirm.ask("\nSave to a directory?", default=False):
            self._save_last()

    def _prompt_request(self) -> Optional[GenerateRequest]:
        """Ask for each request field; JSON inputs accept ``@path`` to read a file."""
        feature_name = Prompt.ask("Feature name", default="getItems")
        method_type = Prompt.ask(
            "HTTP method",
            choices=[m.value for m in HttpMethod],
            default="GET",
        )
        api_url = Prompt.ask("API URL", default="/items")
        hook_type = Prompt.ask(
            "Hook type",
            choices=[h.value for h in HookType],
            default=HookType.QUERY.value,
        )

        example_response = self._ask_json("Example response (JSON or @file, empty to skip)")
        params = self._ask_json("Example params (JSON or @file, empty to skip)")
        if example_response is None or params is None:
            return None

        response_schema = params_schema = None
        if Confirm.ask("Provide JSON Schemas?", default=False):
            response_schema = self._ask_json("Response schema (JSON or @file)") or None
            params_schema = self._ask_json("Params schema (JSON or @file)") or None

        wrapper_args = Prompt.ask("Envelope type (empty for none)", default="")

        return GenerateRequest(
            feature_name=feature_name,
            method_type=method_type,
            api_url=api_url,
            hook_type=hook_type,
            example_response=example_response,
            params=params,
            response_schema=response_schema,
            params_schema=params_schema,
            skip_model_generation=not Confirm.ask("Generate models?", default=True),
            wrapper_args=wrapper_args or None,
        )

    def _ask_json(self, label: str) -> Optional[str]:
        text = Prompt.ask(label, default="")
        if not text.startswith("@"):
            return text

        path = Path(text[1:]).expanduser()
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            self.console.print(f"[red]❌ Cannot read {path}:[/red] {e}")
            return None

    def _save_last(self):
        if self._last is None:
            self.console.print("[yellow]⚠️ Nothing generated yet[/yellow]")
            return

        output_dir = Path(Prompt.ask("Output directory", default="generated"))
        existing = [
            output_dir / OUTPUT_FILES[kind]
            for kind, _ in self._last.fragments()
            if (output_dir / OUTPUT_FILES[kind]).exists()
        ]
        if existing and not Confirm.ask(
            f"{len(existing)} file(s) exist in {output_dir}. Overwrite?", default=False
        ):
            return

        try:
            written = write_response(self._last, output_dir)
        except OSError as e:
            self.console.print(f"[red]❌ Error saving files:[/red] {e}")
            return

        for path in written.values():
            self.console.print(f"[green]✅ Saved to:[/green] {path}")

    def _load_configuration(self):
        config_file = Prompt.ask("Configuration file")
        try:
            self.config = load_config(config_file=config_file)
        except ConfigError as e:
            self.console.print(f"[red]❌ {e}[/red]")
            return
        self.console.print(f"[green]✅ Loaded configuration from {config_file}[/green]")

    def _show_config_info(self):
        table = Table(title="⚙️ Active Configuration", box=box.SIMPLE)
        table.add_column("Option", style="cyan")
        table.add_column("Value", style="white")

        for key, value in asdict(self.config).items():
            table.add_row(key, str(value))

        self.console.print()
        self.console.print(table)
