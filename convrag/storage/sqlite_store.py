import sqlite3
import uuid
from datetime import datetime
from config.settings import SQLITE_DB_PATH
import json


class SQLiteStore:
    """Manage SQLite database for the service registry and audit logs."""

    def __init__(self, db_path = SQLITE_DB_PATH):
        self.db_path = db_path
        self._init_database()

    def _init_database(self):
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        # Service registry table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS service_registry (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                service_id INTEGER,
                domain_name TEXT,
                fq_service_name TEXT NOT NULL,
                is_active BOOLEAN DEFAULT 1,
                effective_date TEXT NOT NULL
            )
        """)

        # Error log table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS error_log (
                id TEXT PRIMARY KEY,
                procedure_name TEXT NOT NULL,
                error_message TEXT,
                input_params TEXT,
                created_at TEXT NOT NULL
            )
        """)

        # Debug log table
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS debug_log (
                id TEXT PRIMARY KEY,
                service_id INTEGER,
                input_params TEXT,
                question_summary TEXT,
                rag_results TEXT,
                llm_response TEXT,
                elapsed_ms INTEGER,
                created_at TEXT NOT NULL
            )
        """)

        conn.commit()
        conn.close()

    def add_service(self, fq_service_name, service_id = None, domain_name = None,
                    is_active = True, effective_date = None):
        if effective_date is None:
            effective_date = datetime.now().isoformat()
        elif isinstance(effective_date, datetime):
            effective_date = effective_date.isoformat()

        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO service_registry (service_id, domain_name, fq_service_name,
                                          is_active, effective_date)
            VALUES (?, ?, ?, ?, ?)
        """, (service_id, domain_name, fq_service_name, is_active, effective_date))

        row_id = cursor.lastrowid
        conn.commit()
        conn.close()
        return row_id

    def get_service_by_id(self, service_id):
        """
        Active registry row for a service id, latest effective date first.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()

        cursor.execute("""
            SELECT * FROM service_registry
            WHERE service_id = ?
              AND is_active = 1
            ORDER BY effective_date DESC, id DESC
            LIMIT 1
        """, (service_id,))

        row = cursor.fetchone()
        conn.close()

        if row:
            return dict(row)
        return None

    def get_service_by_domain(self, domain_name):
        """
        Registry row for a domain with the most recent effective date.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()

        cursor.execute("""
            SELECT * FROM service_registry
            WHERE domain_name = ?
            ORDER BY effective_date DESC, id DESC
            LIMIT 1
        """, (domain_name,))

        row = cursor.fetchone()
        conn.close()

        if row:
            return dict(row)
        return None

    def add_error_record(self, procedure_name, error_message, input_params):
        record_id = f"err_{uuid.uuid4().hex}"
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO error_log (id, procedure_name, error_message,
                                   input_params, created_at)
            VALUES (?, ?, ?, ?, ?)
        """, (record_id, procedure_name, error_message, input_params,
              datetime.now().isoformat()))

        conn.commit()
        conn.close()
        return record_id

    def add_debug_record(self, service_id, input_params, question_summary,
                         rag_results, llm_response, elapsed_ms):
        record_id = f"dbg_{uuid.uuid4().hex}"
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO debug_log
            (id, service_id, input_params, question_summary, rag_results,
             llm_response, elapsed_ms, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (record_id, service_id, input_params, question_summary, rag_results,
              llm_response, elapsed_ms, datetime.now().isoformat()))

        conn.commit()
        conn.close()
        return record_id

    def _read_audit_rows(self, table, json_columns, limit):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()

        if limit is None:
            cursor.execute(f"SELECT * FROM {table} ORDER BY created_at ASC")
            rows = cursor.fetchall()
        else:
            cursor.execute(f"SELECT * FROM {table} ORDER BY created_at DESC LIMIT ?", (limit,))
            rows = list(reversed(cursor.fetchall()))
        conn.close()

        records = []
        for row in rows:
            record = dict(row)
            # Parse JSON fields
            for column in json_columns:
                if record.get(column):
                    record[column] = json.loads(record[column])
            records.append(record)
        return records

    def get_error_records(self, limit = None):
        """
        Read back error_log rows, oldest first, with input_params decoded.
        The pipeline only writes audit rows; this is for inspection.
        With a limit, only the newest `limit` rows are returned.
        """
        return self._read_audit_rows("error_log", ("input_params",), limit)

    def get_debug_records(self, limit = None):
        """Read back debug_log rows like get_error_records, decoding rag_results too."""
        return self._read_audit_rows("debug_log", ("input_params", "rag_results"), limit)
