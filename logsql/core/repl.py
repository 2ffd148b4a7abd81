"""
REPL - Interactive shell for LogSQL

Provides a command-line interface for executing LogSQL statements
and managing databases.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .. import config
from .database import Database
from .executor import QueryResult


def format_result(result: QueryResult, max_width: int = config.MAX_DISPLAY_WIDTH) -> str:
    """Render a result as a plain-text table followed by its message"""
    lines: List[str] = []

    if result.columns:
        widths = [len(col) for col in result.columns]
        for row in result.rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))
        widths = [min(w, max_width) for w in widths]

        def fit(cells):
            return " | ".join(str(c).replace('\n', ' ').ljust(w)[:w] for c, w in zip(cells, widths))

        lines.append(fit(result.columns))
        lines.append("-+-".join("-" * w for w in widths))
        for row in result.rows:
            lines.append(fit(row))

        if result.truncated:
            lines.append(f"... and {result.total_rows - len(result.rows)} more rows")
        label = "distinct row(s)" if result.distinct else "row(s)"
        lines.append(f"({result.total_rows} {label})")
    elif result.message:
        lines.append(result.message)

    return '\n'.join(lines)


class REPL:
    """
    Interactive REPL (Read-Eval-Print Loop) for LogSQL.

    Features:
    - Multi-line input (statements ending with ;)
    - Special commands (.databases, .tables, .schema, .use, .quit)
    - Pretty-printed results
    """

    BANNER = """
LogSQL - typed tables over append-only logs

Type .help for commands, or enter statements.
Statements must end with a semicolon (;).
"""

    HELP = """
Special Commands:
  .help             Show this help message
  .databases        List all databases
  .use <database>   Select a database
  .tables           List tables in the current database
  .schema <table>   Show schema for a table
  .quit / .exit     Exit the REPL

Statements:
  CREATE DATABASE   Create a database
  DROP DATABASE     Delete an empty database
  USE               Select a database
  SHOW DATABASES    List all databases
  SHOW TABLES       List tables in the current database
  CREATE TABLE      Create a table, with or without a schema
  DROP TABLE        Delete a table and its rows
  DESCRIBE          Show table structure
  INSERT INTO       Append a row to a table
  SELECT            Query recent rows, with DISTINCT and WHERE

Example:
  CREATE DATABASE shop;
  USE shop;
  CREATE TABLE users (id INT PRIMARY KEY, name VARCHAR(50) NOT NULL, active BOOLEAN);
  INSERT INTO users VALUES (1, 'Alice', true);
  SELECT name FROM users WHERE (name='Alice' OR name='Bob') AND active=true;
"""

    def __init__(self, db: Database):
        """Initialize REPL with a database."""
        self.db = db
        self.running = False
        self.buffer: List[str] = []

    def run(self) -> None:
        """Start the REPL loop."""
        self.running = True
        print(self.BANNER)

        while self.running:
            try:
                self._process_input()
            except KeyboardInterrupt:
                print("\n(Use .quit to exit)")
            except EOFError:
                print()
                self._quit()

    def _get_prompt(self) -> str:
        """Get the appropriate prompt."""
        if self.buffer:
            return "   ...> "
        database = self.db.current_database()
        return f"logsql:{database}> " if database else "logsql> "

    def _process_input(self) -> None:
        """Read and process user input."""
        line = input(self._get_prompt()).strip()

        if not line:
            return

        if not self.buffer and line.startswith('.'):
            self.handle_command(line)
            return

        self.buffer.append(line)

        full_statement = '\n'.join(self.buffer)
        if full_statement.rstrip().endswith(';'):
            self.execute_statement(full_statement)
            self.buffer = []

    def handle_command(self, cmd: str) -> None:
        """Handle special dot commands."""
        parts = cmd.split(None, 1)
        command = parts[0].lower()
        args = parts[1].strip() if len(parts) > 1 else None

        try:
            if command in ('.quit', '.exit', '.q'):
                self._quit()
            elif command == '.help':
                print(self.HELP)
            elif command == '.databases':
                self._print_list("Databases", self.db.databases())
            elif command == '.use':
                if not args:
                    print("Usage: .use <database>")
                else:
                    print(f"Using database '{self.db.use(args)}'")
            elif command == '.tables':
                self._print_list("Tables", self.db.tables())
            elif command == '.schema':
                self._show_schema(args)
            else:
                print(f"Unknown command: {command}")
                print("Type .help for available commands.")
        except ValueError as e:
            print(f"Error: {e}")

    def _quit(self) -> None:
        """Exit the REPL."""
        print("Goodbye!")
        self.running = False
        self.db.close()

    def _print_list(self, title: str, names: List[str]) -> None:
        if not names:
            print(f"No {title.lower()} found.")
            return
        print(f"\n{title}:")
        for name in names:
            print(f"  {name}")
        print()

    def _show_schema(self, table_name: Optional[str]) -> None:
        """Show schema for a table."""
        if not table_name:
            print("Usage: .schema <table_name>")
            return

        columns = self.db.describe(table_name)
        print(f"\nTable: {table_name}")
        print("-" * 60)
        if not columns:
            print("  (no schema, any row shape is accepted)")
        for col in columns:
            flags = []
            if col['key'] == 'PRI':
                flags.append('PRIMARY KEY')
            if col['nullable'] == 'NO':
                flags.append('NOT NULL')
            print(f"  {col['column_name']:20} {col['data_type']:15} {' '.join(flags)}")
        print()

    def execute_statement(self, sql: str) -> None:
        """Execute a statement and display results."""
        try:
            for result in self.db.execute_many(sql):
                print(format_result(result))
        except ValueError as e:
            print(f"Error: {e}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the REPL."""
    parser = argparse.ArgumentParser(
        description="LogSQL - typed tables over append-only logs"
    )
    parser.add_argument(
        '-d', '--data-dir',
        default=config.DATA_DIR,
        help=f'Directory to store database files (default: {config.DATA_DIR})'
    )
    parser.add_argument(
        '-e', '--execute',
        help='Execute statements and exit'
    )
    parser.add_argument(
        '-f', '--file',
        help='Execute statements from file and exit'
    )
    parser.add_argument(
        '--log-level',
        default=config.LOG_LEVEL,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help=f'Logging level (default: {config.LOG_LEVEL})'
    )
    parser.add_argument(
        '--strict-unique',
        action='store_true',
        help='Reject inserts when existing rows cannot be read for the primary key check'
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=config.LOG_FORMAT)

    db = Database(args.data_dir, fail_open=not args.strict_unique)

    script = args.execute
    if args.file:
        with open(args.file, 'r', encoding='utf-8') as f:
            script = f.read()

    if script is not None:
        try:
            for result in db.execute_many(script):
                print(format_result(result))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    REPL(db).run()


if __name__ == '__main__':
    main()
