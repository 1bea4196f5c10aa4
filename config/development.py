import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance"),
}

# Class start and grace period before an arrival counts as late.
CLASS_START_TIME = os.getenv("CLASS_START_TIME", "16:00")
LATE_CUTOFF_MINUTES = int(os.getenv("LATE_CUTOFF_MINUTES", "15"))
# {"class_id:subject_id": {"start": "09:00", "cutoff_minutes": 10}}
TIMING_OVERRIDES = {}

NOTIFY_OUTBOX = bool(int(os.getenv("NOTIFY_OUTBOX", "1")))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
