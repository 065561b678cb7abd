import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Snapshot file holding the whole catalog
    data_file: str = os.getenv("LIBRARY_DATA_FILE", "library.json")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")

    # Logging
    log_level: str = os.getenv("LIBRARY_LOG_LEVEL", "WARNING").upper()

    # Application
    app_name: str = os.getenv("APP_NAME", "Library CLI")


settings = Settings()
