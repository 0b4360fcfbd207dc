import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Companion app configuration settings"""
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///companion.db')
    
    # Runtime settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')  # Empty string disables file logging
    
    # Home screen settings
    VIEWER_PLAYER_ID = int(os.getenv('VIEWER_PLAYER_ID', 0))
    MATCH_ENRICHMENT_CONCURRENCY = int(os.getenv('MATCH_ENRICHMENT_CONCURRENCY', 1))  # 1 = one call at a time
    
    @classmethod
    def get_async_database_url(cls, database_url: str = None) -> str:
        """Return the database URL with an async driver for sqlite"""
        url = database_url or cls.DATABASE_URL
        if url.startswith('sqlite:///'):
            url = url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        return url
    
    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.VIEWER_PLAYER_ID:
            raise ValueError("VIEWER_PLAYER_ID is required")
        if cls.MATCH_ENRICHMENT_CONCURRENCY < 1:
            raise ValueError("MATCH_ENRICHMENT_CONCURRENCY must be at least 1")
