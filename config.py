"""
config.py — Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks CI_LISP_.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging (diagnostyka zawsze na stderr)
    log_level: str = "WARNING"

    # Prezentacja wyników
    float_precision: int = 2

    # Walidacja arności przy ewaluacji (eval_checked zamiast eval)
    strict_arity: bool = False

    # App
    app_title: str = "CI LISP"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="CI_LISP_", env_file=".env", extra="ignore")
