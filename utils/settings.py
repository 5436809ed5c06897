import logging
import os

import streamlit as st

SECRETS_SECTION = "strength_journeys"

ENV_KEY = "STRENGTH_JOURNEYS_ENV"
E1RM_FORMULA_KEY = "STRENGTH_JOURNEYS_E1RM_FORMULA"
UNIT_KEY = "STRENGTH_JOURNEYS_UNIT"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_setting(key: str, default=None):
    """
    Look a setting up in Streamlit secrets, then the [strength_journeys] section,
    then the environment.
    """
    # 1. Top level secrets
    try:
        if key in st.secrets:
            return st.secrets[key]
    except Exception:
        pass  # no secrets.toml at all

    # 2. Nested section
    try:
        section = st.secrets.get(SECRETS_SECTION, {})
        if key in section:
            return section[key]
    except Exception:
        pass

    # 3. Environment
    value = os.getenv(key)
    return value if value not in (None, "") else default


def is_development() -> bool:
    return str(get_setting(ENV_KEY, "production")).lower() == "development"


def configure_logging(level: int | None = None) -> None:
    """Root logging for the dashboard process. Library modules never call this."""
    if level is None:
        level = logging.DEBUG if is_development() else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
