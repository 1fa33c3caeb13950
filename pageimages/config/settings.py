from pydantic_settings import BaseSettings
from typing import Any, Dict, List, Tuple
import os

class DatabaseSettings(BaseSettings):
    URL: str = os.getenv("DATABASE_URL", "postgresql://wiki_user:wiki_password@db:5432/wiki_db")

class RedisSettings(BaseSettings):
    URL: str = os.getenv("REDIS_URL", "redis://redis:6379/0")
    BLACKLIST_KEY: str = "pageimages:blacklist"

class ServerSettings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

class PageImagesSettings(BaseSettings):
    # Namespaces whose pages get a representative image (0 = main)
    ELIGIBLE_NAMESPACES: List[int] = [0]

    # Score bands: (inclusive upper boundary, score)
    WIDTH_SCORES: List[Tuple[float, int]] = [(119, -100), (400, 10), (600, 5), (601, 0)]
    POSITION_SCORES: List[int] = [8, 6, 4, 3]
    # Ratio is width / height * 10, truncated
    RATIO_SCORES: List[Tuple[float, int]] = [(3, -100), (5, 0), (20, 5), (30, 0), (31, -100)]

    # Blacklist
    # e.g. [{"kind": "internal", "page": "MediaWiki:Pageimages-blacklist"},
    #       {"kind": "remote", "url": "https://example.org/w/index.php?title=X&action=raw"}]
    BLACKLIST_SOURCES: List[Dict[str, Any]] = []
    BLACKLIST_EXPIRY_SECONDS: int = 900  # 15 min
    REMOTE_FETCH_TIMEOUT: float = 3.0
    FILE_EXTENSIONS: List[str] = ["png", "gif", "jpg", "jpeg", "webp", "svg"]

    # Thumbnail sizing used for width estimation
    THUMB_LIMITS: List[int] = [120, 150, 180, 200, 250, 300]
    DEFAULT_THUMBSIZE_INDEX: int = 5

    EXPAND_OPENSEARCH: bool = False

class FileSettings(BaseSettings):
    UPLOAD_BASE_URL: str = os.getenv("UPLOAD_BASE_URL", "https://upload.example.org/images")

class ApiSettings(BaseSettings):
    DEFAULT_THUMBSIZE: int = 50
    DEFAULT_LIMIT: int = 1
    MAX_LIMIT: int = 100

class AppSettings(BaseSettings):
    DB: DatabaseSettings = DatabaseSettings()
    REDIS: RedisSettings = RedisSettings()
    SERVER: ServerSettings = ServerSettings()
    PAGEIMAGES: PageImagesSettings = PageImagesSettings()
    FILES: FileSettings = FileSettings()
    API: ApiSettings = ApiSettings()

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = AppSettings()
