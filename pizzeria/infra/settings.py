import os

class Settings:
    ADMIN_USER = os.getenv("ADMIN_USER", "admin")
    ADMIN_PASS = os.getenv("ADMIN_PASS", "")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pizzeria.db")

    # Fallback-menukaart als de menu_items tabel leeg is
    MENU_JSON = os.getenv("PIZZERIA_MENU_JSON", "data/menu.json")

    TZ = os.getenv("TZ", "America/Sao_Paulo")

    # MODE: 'dev' (testmodus) of 'prod' (live)
    PIZZERIA_MODE = os.getenv("PIZZERIA_MODE", "dev")

    # Naam van de sessie-cookie voor winkelwagen + notificaties
    SESSION_COOKIE = os.getenv("PIZZERIA_SESSION_COOKIE", "pz_session")

settings = Settings()

def is_dev() -> bool:
    """Geeft True als de applicatie in testmodus draait."""
    return (settings.PIZZERIA_MODE or "dev").lower() == "dev"
