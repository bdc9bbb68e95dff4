"""Shared constants for naming prompts."""

from __future__ import annotations

MAX_PROMPT_USAGES = 3
MAX_PROMPT_NEIGHBORS = 5
MAX_DESCRIPTION_CHARS = 200

LANGUAGE_CONVENTIONS: dict[str, str] = {
    "typescript": """TypeScript conventions:
- Variables/functions: camelCase (e.g., getUserData, isValid)
- Classes/Interfaces: PascalCase (e.g., UserService, DataProvider)
- Constants: SCREAMING_SNAKE_CASE (e.g., MAX_RETRIES)
- Private members: prefix with _ or use private keyword
- Boolean variables: use is/has/should prefix (e.g., isActive, hasPermission)
- Async functions: consider async prefix or suffix (e.g., fetchUserAsync)""",
    "javascript": """JavaScript conventions:
- Variables/functions: camelCase (e.g., getUserData, isValid)
- Classes: PascalCase (e.g., UserService, DataProvider)
- Constants: SCREAMING_SNAKE_CASE (e.g., MAX_RETRIES)
- Boolean variables: use is/has/should prefix (e.g., isActive, hasPermission)
- Callback functions: descriptive names (e.g., handleClick, onUserLogin)""",
    "python": """Python conventions (PEP 8):
- Variables/functions: snake_case (e.g., get_user_data, is_valid)
- Classes: PascalCase (e.g., UserService, DataProvider)
- Constants: SCREAMING_SNAKE_CASE (e.g., MAX_RETRIES)
- Private members: prefix with _ (e.g., _internal_method)
- Boolean variables: use is/has/should prefix (e.g., is_active, has_permission)
- Avoid single letter names except for iterators (i, j, k)""",
    "go": """Go conventions:
- Variables/functions: camelCase or mixedCaps (e.g., getUserData, isValid)
- Exported symbols: PascalCase (e.g., UserService, DataProvider)
- Unexported: lowercase start (e.g., internalHelper)
- Acronyms: all caps (e.g., HTTPServer, URLParser)
- Interface names: often end with -er (e.g., Reader, Writer)
- Short variable names acceptable in small scopes (e.g., i, err, ok)""",
}


__all__ = [
    "LANGUAGE_CONVENTIONS",
    "MAX_DESCRIPTION_CHARS",
    "MAX_PROMPT_NEIGHBORS",
    "MAX_PROMPT_USAGES",
]
