"""
Defaults for the command line, read with pydantic-settings.

Every field can be overridden with a ``SCHEDSIM_``-prefixed environment
variable (``SCHEDSIM_DEFAULT_QUANTUM=4``) or a ``.env`` file in the working
directory. Explicit CLI flags always win over these values.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Simulation ──────────────────────────────────────────────
    DEFAULT_ALGORITHM: str = "fcfs"
    DEFAULT_QUANTUM: int = 3             # time units per slice for rr / priority_rr
    DEFAULT_PRIORITY_MODE: str = "low"   # "low": smaller number runs first

    # ── Terminal output ─────────────────────────────────────────
    STEP_DELAY: float = 0.3              # seconds between frames with --step
    LOG_LEVEL: str = "WARNING"

    model_config = {"env_prefix": "SCHEDSIM_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
