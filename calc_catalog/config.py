import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .calculators.base import SUPPORTED_LANGS


@dataclass(frozen=True)
class Settings:
    lang: str = "en"
    site_name: str = "CalcFlow"
    default_slug: str = "bmi-calculator"
    content_dir: Optional[str] = None  # None: the packaged content/ folder


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Settings from CALC_CATALOG_* environment variables, after loading a .env file if present.
    """
    load_dotenv(dotenv_path)

    lang = os.getenv("CALC_CATALOG_LANG", "en")
    if lang not in SUPPORTED_LANGS:
        raise ValueError(f"Unsupported language '{lang}', expected one of {', '.join(SUPPORTED_LANGS)}")

    return Settings(
        lang=lang,
        site_name=os.getenv("CALC_CATALOG_SITE_NAME", "CalcFlow"),
        default_slug=os.getenv("CALC_CATALOG_DEFAULT_SLUG", "bmi-calculator"),
        content_dir=os.getenv("CALC_CATALOG_CONTENT_DIR") or None,
    )
