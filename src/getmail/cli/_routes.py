"""``getmail routes``: print the route tree.

One row per route, indented by depth, with the matcher and the
controller/action it dispatches to. The table-level fallback comes last.
"""

import argparse

from getmail.cli._load import load_app
from getmail.routing.table import RouteTable


def format_routes(table: RouteTable) -> list[str]:
    rows: list[tuple[str, str, str]] = []
    for depth, route in table.walk():
        name = f"{'  ' * depth}{route.name}"
        rows.append((name, f"{route.match_type} {route.pattern}", f"{route.handler}.{route.action}"))
    rows.append(("(fallback)", "-", f"{table.fallback_handler}.{table.fallback_action}"))

    name_width = max(4, *(len(r[0]) for r in rows))
    match_width = max(5, *(len(r[1]) for r in rows))
    fmt = f"{{:<{name_width}}}  {{:<{match_width}}}  {{}}"
    lines = [fmt.format("NAME", "MATCH", "HANDLER")]
    lines.append("-" * min(name_width + match_width + 4 + max(len(r[2]) for r in rows), 80))
    lines.extend(fmt.format(*row) for row in rows)
    return lines


def run_routes(args: argparse.Namespace) -> None:
    app = load_app(args)
    for line in format_routes(app.dispatcher.table):
        print(line)
