from rich.console import Console
from rich.table import Table

from no_unsafe_any.messages import MESSAGES, REQUIRED_DATA, RULE_DESCRIPTION, MessageId

console = Console()


def messages() -> None:
    """List every message id with its interpolation keys and text."""
    table = Table(title=RULE_DESCRIPTION, show_lines=False)
    table.add_column("message id")
    table.add_column("data")
    table.add_column("message")
    for message_id in MessageId:
        keys = ", ".join(sorted(REQUIRED_DATA[message_id])) or "-"
        table.add_row(message_id.value, keys, MESSAGES[message_id])
    console.print(table)
    console.print(f"({len(MessageId)} messages)")
