from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # App
    app_name: str = "Document Approval"
    debug: bool = False
    
    # Database
    database_url: str = "sqlite:///./docapproval.db"
    
    # Redis
    redis_url: str = "redis://localhost:6379/0"
    
    # Celery
    celery_broker_url: Optional[str] = None
    celery_result_backend: Optional[str] = None
    
    @property
    def celery_broker(self) -> str:
        return self.celery_broker_url or self.redis_url
    
    @property
    def celery_backend(self) -> str:
        return self.celery_result_backend or self.redis_url
    
    # Approval workflow
    approver_role_name: str = "Approver"
    admin_role_name: str = "Administrator"  # may change the approval configuration
    vote_max_attempts: int = 3  # optimistic-concurrency retries per vote
    
    # Notifications
    app_base_url: str = "http://localhost:8000"  # used in notification links
    notification_timeout: float = 10.0  # seconds per outbound delivery
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from_email: str = "noreply@docapproval.local"
    smtp_from_name: str = "Document Approval"
    smtp_use_tls: bool = True
    
    # Webhooks
    decision_webhook_url: Optional[str] = None
    decision_webhook_template: Optional[str] = None  # Jinja2 JSON template
    
    # Logging
    log_level: str = "INFO"
    log_dir: str = "./logs"
    log_to_file: bool = False
    
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
