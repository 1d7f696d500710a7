"""
Configuration settings for the scheduling engine.
Load configuration from environment variables or a .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


class Settings:
    """Application settings loaded from environment variables."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    DATA_DIR = PROJECT_ROOT / 'data'
    OUTPUT_DATA_DIR = Path(os.getenv('OUTPUT_DATA_DIR', str(DATA_DIR / 'output')))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', '')

    # ============================================================================
    # CPM Configuration
    # ============================================================================
    CPM_MAX_ITERATIONS = int(os.getenv('CPM_MAX_ITERATIONS', '100'))
    UNASSIGNED_PROJECT_KEY = os.getenv('UNASSIGNED_PROJECT_KEY', 'unassigned')

    # ============================================================================
    # Risk Analysis Configuration
    # ============================================================================
    COMPRESSION_MAX_DURATION_DAYS = int(os.getenv('COMPRESSION_MAX_DURATION_DAYS', '2'))
    NEAR_CRITICAL_THRESHOLD_DAYS = int(os.getenv('NEAR_CRITICAL_THRESHOLD_DAYS', '5'))

    @classmethod
    def validate_required_settings(cls) -> list[str]:
        """
        Validate that settings hold usable values.
        Returns list of problems found.
        """
        problems = []

        if cls.CPM_MAX_ITERATIONS < 1:
            problems.append('CPM_MAX_ITERATIONS must be at least 1')
        if not cls.UNASSIGNED_PROJECT_KEY:
            problems.append('UNASSIGNED_PROJECT_KEY must not be empty')
        if cls.COMPRESSION_MAX_DURATION_DAYS < 0:
            problems.append('COMPRESSION_MAX_DURATION_DAYS must not be negative')

        return problems


# Create settings instance
settings = Settings()
