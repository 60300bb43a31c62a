import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Employees computed in parallel per payroll run
PAYROLL_MAX_WORKERS = int(os.getenv("PAYROLL_MAX_WORKERS", "4"))
# Retries when a concurrent run creates the same (employee, month) record first
PAYROLL_UPSERT_ATTEMPTS = int(os.getenv("PAYROLL_UPSERT_ATTEMPTS", "3"))
