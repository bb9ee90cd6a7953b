"""Keyword tables for relevance scoring and legacy template matching.

Both tables are defaults.  A template definition may override the
per-purpose vocabulary (``vocabulary``) and its legacy keywords
(``keywords``); lookups here only run when the template is silent.
"""

import re

from app.models.template import SlotTemplate
from models.requirement import Requirement

# Purpose → relevance keywords.  Keys are snake_case purposes; requirement
# purposes are also tried in camelCase→snake_case form and by asset_class.
DEFAULT_VOCABULARY: dict[str, tuple[str, ...]] = {
    "background_music": ("lullaby", "bedtime", "calm", "peaceful", "soothing"),
    "intro_audio":      ("voice", "speech", "narrated", "intro", "welcome"),
    "outro_audio":      ("voice", "speech", "narrated", "outro", "goodbye", "ending"),
    "intro_image":      ("background", "scene", "setting", "intro", "welcome"),
    "outro_image":      ("background", "scene", "setting", "outro", "ending"),
    "slideshow_image":  ("scene", "character", "setting", "story", "visual"),
}

# Template → theme/tag keywords that make an untagged legacy asset acceptable.
DEFAULT_TEMPLATE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "lullaby": (
        "bedtime", "sleep", "calm", "peaceful", "gentle",
        "soothing", "lullaby", "night", "moon", "stars",
    ),
    "name-video": ("educational", "learning", "name", "alphabet", "colorful", "fun", "playful"),
    "letter-hunt": ("educational", "learning", "alphabet", "letters", "colorful", "fun", "playful"),
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(purpose: str) -> str:
    """``backgroundMusic`` → ``background_music``."""
    return _CAMEL_BOUNDARY.sub("_", purpose).lower()


def vocabulary_for(requirement: Requirement, template: SlotTemplate | None = None) -> tuple[str, ...]:
    """Return the relevance keywords for *requirement*.

    Lookup order: template override → default by purpose → default by
    snake_case purpose → default by asset_class → empty.
    """
    if template is not None and requirement.purpose in template.vocabulary:
        return tuple(template.vocabulary[requirement.purpose])
    for key in (requirement.purpose, snake_case(requirement.purpose), requirement.asset_class):
        if key and key in DEFAULT_VOCABULARY:
            return DEFAULT_VOCABULARY[key]
    return ()


def template_keywords(template: SlotTemplate) -> tuple[str, ...]:
    if template.keywords:
        return template.keywords
    for name in (template.name, *template.aliases):
        if name in DEFAULT_TEMPLATE_KEYWORDS:
            return DEFAULT_TEMPLATE_KEYWORDS[name]
    return ()
