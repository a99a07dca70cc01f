from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Salon Time & Payroll"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Database URL (read from .env file)
    DATABASE_URL: str = ''

    # Client URL for CORS
    CLIENT_URL: str = 'http://localhost:3000'
    # Extra comma-separated origins
    CORS_ORIGINS: str = ''

    # Attendance settings
    # Minutes a staff member must work for the day to count as complete
    STANDARD_DAILY_MINUTES: int = 540
    # Calendar day of a check-in is taken in this timezone
    BUSINESS_TIMEZONE: str = 'UTC'

    # Payroll settings
    DEFAULT_OT_RATE: float = 50.0
    PAYROLL_DAYS_PER_MONTH: int = 30

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

    @property
    def DB_URL(self):
        if self.ENV_MODE == "dev":
            return self.DEV_DB_URL
        else:
            if self.DATABASE_URL:
                return self.DATABASE_URL
            else:
                return '{}://{}:{}@{}:{}/{}'.format(
                    self.DB_ENGINE,
                    self.DB_USERNAME,
                    self.DB_PASS,
                    self.DB_HOST,
                    self.DB_PORT,
                    self.DB_NAME
                )

    @property
    def API_BASE_URL(self) -> str:
        if self.ENV_MODE == "dev":
            return 'http://localhost:8000/'
        return self.HOST_URL

class DevSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'dev'

    # Database settings for development
    @property
    def DEV_DB_URL(self) -> str:
        # Use PostgreSQL in dev mode if DATABASE_URL is provided in .env
        # Otherwise fall back to SQLite
        return self.DATABASE_URL if self.DATABASE_URL else "sqlite:///./dev.db"

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

class ProdSettings(Settings):
    # Environment mode: 'dev' or 'prod'
    ENV_MODE: str = 'prod'

    # Database settings for production
    DB_ENGINE: str = 'postgresql+psycopg'
    DB_USERNAME: str = ''
    DB_PASS: str = ''
    DB_HOST: str = ''
    DB_PORT: str = ''
    DB_NAME: str = ''

    # Define HOST_URL based on environment mode
    HOST_URL: str = ''

    model_config = SettingsConfigDict(env_file=".env", extra='allow')

def get_settings(env_mode: str = "dev"):
    if env_mode == "dev":
        return DevSettings()
    return ProdSettings()
