import os

DATA_DIR = os.getenv("DATA_DIR", ".")

STORAGE_FILE = os.path.join(DATA_DIR, "sheetvault_storage.json")
WAL_FILE = os.path.join(DATA_DIR, "sheetvault_wal")
LOG_FILE = os.path.join(DATA_DIR, "sheetvault.log")

RATE_LIMIT = os.getenv("RATE_LIMIT", "10/minute")

INFERENCE_SAMPLE_SIZE = int(os.getenv("INFERENCE_SAMPLE_SIZE", "10"))

SERIAL_COLUMN_ID = "serialNo"
SERIAL_COLUMN_NAME = "Serial No."
SERIAL_HEADER_ALIASES = ("serial no.", "serialno")
