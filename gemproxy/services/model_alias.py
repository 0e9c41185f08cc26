"""Backend model alias resolution."""

DEFAULT_PRO_MODEL = "gemini-2.5-pro"
DEFAULT_FLASH_MODEL = "gemini-2.5-flash"
DEFAULT_FLASH_LITE_MODEL = "gemini-2.5-flash-lite"

MODEL_ALIASES: dict[str, str] = {
    "auto": DEFAULT_PRO_MODEL,
    "pro": DEFAULT_PRO_MODEL,
    "flash": DEFAULT_FLASH_MODEL,
    "flash-lite": DEFAULT_FLASH_LITE_MODEL,
}


def resolve_model(name: str) -> str:
    """Map a configured model alias to a concrete backend model name.

    Unknown names are returned unchanged; an empty name means ``auto``.
    """
    key = (name or "auto").strip()
    return MODEL_ALIASES.get(key.lower(), key)
