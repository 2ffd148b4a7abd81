#!/usr/bin/env python3
"""
LogSQL entry point script

Run the REPL:
    python -m logsql

Or use as a library:
    from logsql import Database
    db = Database()
    db.execute("SHOW DATABASES;")
"""

from logsql.core.repl import main

if __name__ == '__main__':
    main()
