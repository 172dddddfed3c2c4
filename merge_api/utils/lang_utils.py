from __future__ import annotations

_ALIASES = {
    "c++": "cpp",
    "c#": "csharp",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "golang": "go",
}


def normalize_language(language: str) -> str:
    """Return the canonical storage key for a language name.

    "TypeScript" -> "typescript", "C++" -> "cpp".
    """
    key = (language or "").strip().lower()
    return _ALIASES.get(key, key)


def language_display_name(language: str) -> str:
    """Capitalise a language key for display ("python" -> "Python")."""
    key = normalize_language(language)
    return key[:1].upper() + key[1:]
