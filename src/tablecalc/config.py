"""Configuration management for tablecalc."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # Formula engine limits - bound the work a single cell can trigger
    formula_max_length: int = int(os.getenv("FORMULA_MAX_LENGTH", "500"))
    formula_max_argument_length: int = int(os.getenv("FORMULA_MAX_ARGUMENT_LENGTH", "50"))
    formula_max_reference_length: int = int(os.getenv("FORMULA_MAX_REFERENCE_LENGTH", "10"))
    formula_max_row: int = int(os.getenv("FORMULA_MAX_ROW", "10000"))
    formula_max_range_cells: int = int(os.getenv("FORMULA_MAX_RANGE_CELLS", "1000"))
    formula_max_depth: int = int(os.getenv("FORMULA_MAX_DEPTH", "50"))
    formula_max_evaluation_steps: int = int(os.getenv("FORMULA_MAX_EVALUATION_STEPS", "500000"))

    # Marker shown in place of a formula that failed to evaluate
    error_marker: str = os.getenv("ERROR_MARKER", "#ERR")

    # Largest grid accepted over HTTP (rows x widest row)
    max_grid_cells: int = int(os.getenv("MAX_GRID_CELLS", "10000"))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()


settings = Settings()
