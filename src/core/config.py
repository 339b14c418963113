from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "GeoMetaLens Worker"
    LOG_LEVEL: str = "DEBUG"
    ENVIRONMENT: str = "development"

    # ExifTool
    EXIFTOOL_PATH: str = "exiftool"
    EXIFTOOL_TIMEOUT_SECONDS: float = 30.0

    # Upload
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE: int = 10 * 1024 * 1024
    ALLOWED_EXTENSIONS: str = "jpg,jpeg,png,heic,webp,tiff,pdf"

    # Map links
    MAP_ZOOM: int = 13

    @property
    def allowed_extensions(self) -> list[str]:
        return [ext.strip().lower().lstrip(".") for ext in self.ALLOWED_EXTENSIONS.split(",") if ext.strip()]

    class Config:
        env_file = ".env"

configs = Settings()
