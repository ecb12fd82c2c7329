import sqlite3
import glob
import os

DB_PATH = os.getenv("SQLITE_PATH", os.path.join("data", "sqlite", "facility_booking.db"))
MIGRATIONS_DIR = os.path.join("backend", "migrations")


def apply_migrations(db_path: str = DB_PATH, migrations_dir: str = MIGRATIONS_DIR) -> int:
    """Apply pending *.sql migrations in version order. Returns the resulting version."""
    print(f"Using DB: {db_path}")
    os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
    conn = sqlite3.connect(db_path)
    cur = conn.cursor()

    # Applied versions
    cur.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            applied_at TEXT DEFAULT CURRENT_TIMESTAMP
        );
    """)

    cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations;")
    current_version = cur.fetchone()[0]
    print(f"Current schema version: {current_version}")

    files = sorted(glob.glob(os.path.join(migrations_dir, "*.sql")))

    for path in files:
        filename = os.path.basename(path)
        version = int(filename.split("_")[0])

        if version > current_version:
            print(f"Applying migration {filename}...")

            with open(path, "r", encoding="utf-8") as f:
                sql = f.read()

            cur.executescript(sql)
            cur.execute("INSERT INTO schema_migrations(version) VALUES (?)", (version,))
            conn.commit()
            current_version = version

            print(f"✔ Applied {filename}")

    conn.close()
    print("All migrations applied.")
    return current_version


if __name__ == "__main__":
    apply_migrations()
