# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance for Tagcomplete command-line output."""
from rich.console import Console

from tagcomplete.themes import get_theme

console = Console(color_system="truecolor", theme=get_theme())
