#!/usr/bin/env python3
"""
Demo Web Application - LogSQL over HTTP

A small JSON API that lets several users share one LogSQL instance.
Each (tenant, user) pair is a session with its own selected database.

Endpoints:
- POST /sql                     run a statement: {"tenant", "user", "sql"}
- GET  /databases               list databases
- GET  /databases/<db>/tables   list the tables of a database
- GET  /health                  liveness check

Run:
    pip install flask
    python app.py

Then:
    curl -X POST localhost:5000/sql -H 'Content-Type: application/json' \
         -d '{"tenant": "acme", "user": "alice", "sql": "SHOW DATABASES"}'
"""

import logging
import os
import sys
from dataclasses import asdict
from typing import Optional

from flask import Flask, jsonify, request

# Add parent directory to path to import logsql
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from logsql import Database, SessionContext
from logsql import config
from logsql.errors import DatabaseNotFound
from logsql.storage.engine import sanitize_name


logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logsql_data')


def create_app(data_dir: Optional[str] = DATA_DIR, db: Optional[Database] = None) -> Flask:
    """Build the Flask app around a database (data_dir=None keeps it in memory)"""
    app = Flask(__name__)
    app.config['DATABASE'] = db or Database(data_dir)

    def database() -> Database:
        return app.config['DATABASE']

    @app.route('/sql', methods=['POST'])
    def run_sql():
        """Execute one statement for the requesting session."""
        payload = request.get_json(silent=True) or {}
        sql = payload.get('sql')
        if not isinstance(sql, str) or not sql.strip():
            return jsonify({'error': "Missing 'sql'. Example: {\"tenant\": \"t\", \"user\": \"u\", \"sql\": \"SHOW DATABASES\"}"}), 400

        session = SessionContext(str(payload.get('tenant', 'default')), str(payload.get('user', 'anonymous')))
        try:
            result = database().execute(sql, session)
        except ValueError as e:
            logger.info("Statement rejected for %s/%s: %s", session.tenant_id, session.user_id, e)
            return jsonify({'error': str(e)}), 400

        body = asdict(result)
        body['database'] = database().current_database(session)
        return jsonify(body)

    @app.route('/databases')
    def list_databases():
        return jsonify({'databases': database().databases()})

    @app.route('/databases/<name>/tables')
    def list_tables(name):
        database_name, _ = sanitize_name(name)
        try:
            tables = database().catalog.list_tables(database_name)
        except DatabaseNotFound as e:
            return jsonify({'error': str(e)}), 404
        return jsonify({'database': database_name, 'tables': tables})

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)

    print("\n" + "="*60)
    print("LogSQL Demo - HTTP command surface")
    print("="*60)
    print(f"\nDatabase location: {DATA_DIR}")
    print("Starting server at http://localhost:5000")
    print("\nPress Ctrl+C to stop the server.\n")

    create_app(DATA_DIR).run(debug=True, host='0.0.0.0', port=5000)
