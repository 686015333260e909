from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class ThemeDefinition:
    slug: str
    label: str


STANDARD_THEMES: Final[tuple[ThemeDefinition, ...]] = (
    ThemeDefinition(slug="red", label="Red"),
    ThemeDefinition(slug="white", label="White"),
    ThemeDefinition(slug="blackglass", label="Black glass"),
    ThemeDefinition(slug="clean", label="Clean"),
)
STANDARD_THEME_SLUGS: Final[frozenset[str]] = frozenset(theme.slug for theme in STANDARD_THEMES)
DEFAULT_THEME: Final[str] = STANDARD_THEMES[0].slug
CUSTOM_THEME: Final[str] = "custom"
DEFAULT_CUSTOM_WIDGET_ID: Final[str] = "recaptcha_widget"


def is_standard_theme(candidate: object) -> bool:
    return isinstance(candidate, str) and candidate in STANDARD_THEME_SLUGS
