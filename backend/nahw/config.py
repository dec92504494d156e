from pathlib import Path
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    log_dir: Path = BASE_DIR / "data" / "logs"
    log_interactions: bool = True
    parallel_detection: bool = False
    detection_workers: int = 4

    model_config = {
        "env_file": [BASE_DIR / ".env", BASE_DIR.parent / ".env"],
        "env_prefix": "NAHW_",
        "extra": "ignore",
    }


settings = Settings()
