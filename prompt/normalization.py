"""
클래스 / 배경 이름 정규화
여러 언어의 동의어를 스키마가 기대하는 영어 표준 이름으로 변환
"""

from typing import Optional

from templates.dnd_reference import BACKGROUNDS, CLASSES

CLASS_SYNONYMS = {
    "warrior": "Fighter",
    "guerreiro": "Fighter",
    "guerrero": "Fighter",
    "fighter": "Fighter",
    "barbarian": "Barbarian",
    "bárbaro": "Barbarian",
    "barbaro": "Barbarian",
    "rogue": "Rogue",
    "ladino": "Rogue",
    "pícaro": "Rogue",
    "picaro": "Rogue",
    "thief": "Rogue",
    "bard": "Bard",
    "bardo": "Bard",
    "wizard": "Wizard",
    "mago": "Wizard",
    "cleric": "Cleric",
    "clérigo": "Cleric",
    "clerigo": "Cleric",
    "ranger": "Ranger",
    "patrulheiro": "Ranger",
    "explorador": "Ranger",
    "paladin": "Paladin",
    "paladino": "Paladin",
    "paladín": "Paladin",
    "monk": "Monk",
    "monge": "Monk",
    "monje": "Monk",
    "sorcerer": "Sorcerer",
    "feiticeiro": "Sorcerer",
    "hechicero": "Sorcerer",
    "warlock": "Warlock",
    "bruxo": "Warlock",
    "brujo": "Warlock",
    "druid": "Druid",
    "druida": "Druid",
}

BACKGROUND_SYNONYMS = {
    "artist": "Entertainer",
    "artista": "Entertainer",
    "entertainer": "Entertainer",
    "noble": "Noble",
    "nobre": "Noble",
    "sage": "Sage",
    "sábio": "Sage",
    "sabio": "Sage",
    "acolyte": "Acolyte",
    "acólito": "Acolyte",
    "acolito": "Acolyte",
    "criminal": "Criminal",
    "criminoso": "Criminal",
    "soldier": "Soldier",
    "soldado": "Soldier",
    "hermit": "Hermit",
    "eremita": "Hermit",
    "urchin": "Urchin",
    "órfão": "Urchin",
    "huérfano": "Urchin",
    "folk hero": "Folk Hero",
    "herói do povo": "Folk Hero",
    "héroe del pueblo": "Folk Hero",
    "outlander": "Outlander",
    "forasteiro": "Outlander",
    "forastero": "Outlander",
    "charlatan": "Charlatan",
    "charlatão": "Charlatan",
    "charlatán": "Charlatan",
    "guild artisan": "Guild Artisan",
    "artesão de guilda": "Guild Artisan",
    "artesano del gremio": "Guild Artisan",
}

_CANONICAL_CLASSES = {c.lower(): c for c in CLASSES}
_CANONICAL_BACKGROUNDS = {b.lower(): b for b in BACKGROUNDS}


def normalize_class_name(class_name: Optional[str]) -> Optional[str]:
    """'guerreiro' / 'warrior' -> 'Fighter'; unknown names are returned trimmed."""
    if not class_name or not class_name.strip():
        return None
    key = class_name.strip().lower()
    return CLASS_SYNONYMS.get(key) or _CANONICAL_CLASSES.get(key) or class_name.strip()


def normalize_background_name(background: Optional[str]) -> Optional[str]:
    """'artista' -> 'Entertainer'; unknown names are returned trimmed."""
    if not background or not background.strip():
        return None
    key = background.strip().lower()
    return BACKGROUND_SYNONYMS.get(key) or _CANONICAL_BACKGROUNDS.get(key) or background.strip()
