"""
생성 콘텐츠 모델 정의 (캐릭터 / 환경 / 미션)
필드 이름은 snake_case, JSON 직렬화는 camelCase alias 사용
"""

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ContentType(str, Enum):
    CHARACTER = "character"
    ENVIRONMENT = "environment"
    MISSION = "mission"


Difficulty = Literal["easy", "medium", "hard", "deadly"]
PathType = Literal["combat", "social", "stealth", "mixed"]


class ContentModel(BaseModel):
    """공통 설정: 속성 이름과 camelCase 이름 모두 허용, alias 로 직렬화"""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------- character

class Spell(ContentModel):
    name: str = Field(..., description="The name of the spell")
    level: int = Field(..., ge=0, le=9, description="The spell level (0-9)")
    description: str = Field(..., description="A brief description of what the spell does")


class ClassFeature(ContentModel):
    name: str = Field(..., description='The name of the class feature (e.g., "Rage", "Sneak Attack")')
    description: str = Field(..., description="A brief description of what the feature does")
    level: int = Field(..., ge=1, le=20, description="The level at which this feature is obtained (1-20)")


class Skill(ContentModel):
    name: str = Field(..., description="The skill name (e.g., Persuasion, Stealth)")
    proficiency: bool = Field(..., description="Whether the character is proficient in this skill")
    modifier: int = Field(..., description="The skill modifier (typically -5 to +10)")


class Attributes(ContentModel):
    strength: int = Field(..., ge=1, le=30, description="Strength score (1-30, typically 8-15 at start)")
    dexterity: int = Field(..., ge=1, le=30, description="Dexterity score (1-30, typically 8-15 at start)")
    constitution: int = Field(..., ge=1, le=30, description="Constitution score (1-30, typically 8-15 at start)")
    intelligence: int = Field(..., ge=1, le=30, description="Intelligence score (1-30, typically 8-15 at start)")
    wisdom: int = Field(..., ge=1, le=30, description="Wisdom score (1-30, typically 8-15 at start)")
    charisma: int = Field(..., ge=1, le=30, description="Charisma score (1-30, typically 8-15 at start)")


class Character(ContentModel):
    name: str = Field(..., description="The character's full name")
    race: str = Field(..., description="D&D 5e race (e.g., Human, Elf, Dwarf, Tiefling)")
    class_name: str = Field(..., alias="class", description="D&D 5e class (e.g., Bard, Wizard, Fighter, Rogue)")
    level: int = Field(..., ge=1, le=20, description="Character level (1-20)")
    background: str = Field(..., description="Character background (e.g., Entertainer, Sage, Noble)")
    history: str = Field(..., description="A detailed backstory and history of the character")
    personality: str = Field(..., description="The character's personality traits and demeanor")
    attributes: Attributes = Field(..., description="Ability scores (STR, DEX, CON, INT, WIS, CHA)")
    expertise: List[str] = Field(
        default_factory=list,
        description="Skill names with expertise (double proficiency bonus), typically 2-4 for Rogue or Bard",
    )
    spells: List[Spell] = Field(default_factory=list, description="Spells the character knows; empty for non-casters")
    skills: List[Skill] = Field(default_factory=list, description="Skills with proficiency flags and modifiers")
    traits: List[str] = Field(default_factory=list, description="Character traits, quirks, or notable features")
    racial_traits: Optional[List[str]] = Field(
        None,
        alias="racialTraits",
        description="All standard racial features for the race (e.g., Darkvision 60ft, Fey Ancestry)",
    )
    class_features: Optional[List[ClassFeature]] = Field(
        None,
        alias="classFeatures",
        description="ALL mandatory class features for this class and level, including non-casters",
    )
    voice_description: str = Field(
        ...,
        alias="voiceDescription",
        description='Voice quality only (e.g., "Hoarse voice", "Melodic voice"), NOT dialogue',
    )
    associated_mission: Optional[str] = Field(
        None, alias="associatedMission", description="Optional: name of a related mission or quest"
    )


# -------------------------------------------------------------- environment

class Environment(ContentModel):
    name: str = Field(..., description="The name of the location")
    description: str = Field(..., description="A vivid visual description (no mood or lighting here)")
    ambient: str = Field(..., description="Ambient sounds and atmosphere")
    mood: str = Field(..., description="The overall mood of the location")
    lighting: str = Field(..., description="Lighting conditions and visibility")
    features: List[str] = Field(default_factory=list, description="Notable interactive features")
    npcs: List[str] = Field(
        default_factory=list,
        description='NPCs present, each "Name - role" (e.g., "Guard Captain - Oversees the gate")',
    )
    current_conflict: Optional[str] = Field(
        None, alias="currentConflict", description="What is currently wrong or unstable in this location"
    )
    adventure_hooks: Optional[List[str]] = Field(
        None, alias="adventureHooks", description="2-3 concrete hooks that can immediately involve the players"
    )


# ------------------------------------------------------------------ mission

class Objective(ContentModel):
    description: str = Field(..., description="The objective description")
    primary: bool = Field(..., description="Whether this is a primary (required) objective")
    is_alternative: Optional[bool] = Field(
        None, alias="isAlternative", description="Mutually exclusive alternative path"
    )
    path_type: Optional[PathType] = Field(
        None, alias="pathType", description="Approach: combat, social, stealth, or mixed"
    )


class Reward(ContentModel):
    xp: Optional[int] = Field(None, ge=0, description="Experience points reward")
    gold: Optional[int] = Field(None, ge=0, description="Gold pieces reward")
    items: List[str] = Field(default_factory=list, description="List of item rewards")


class PowerfulItem(ContentModel):
    name: str = Field(..., description="The name of the powerful item or artifact")
    status: str = Field(..., description='Status/control of the item (e.g., "Dormant Artifact (awakens later)")')


class ChoiceBasedReward(ContentModel):
    condition: str = Field(..., description='Path that triggers these rewards (e.g., "If negotiated")')
    rewards: Reward = Field(..., description="Rewards for this specific condition/path")


class Mission(ContentModel):
    title: str = Field(..., description="The mission/quest title")
    description: str = Field(..., description="A detailed description of the mission")
    context: str = Field(..., description="Background context and setup")
    objectives: List[Objective] = Field(default_factory=list, description="Primary, optional and alternative objectives")
    rewards: Reward = Field(..., description="Rewards for completing the mission")
    difficulty: Difficulty = Field(..., description="Mission difficulty level")
    related_npcs: List[str] = Field(default_factory=list, alias="relatedNPCs", description="NPCs involved")
    related_locations: List[str] = Field(
        default_factory=list, alias="relatedLocations", description="Locations relevant to this mission"
    )
    recommended_level: Optional[str] = Field(
        None,
        alias="recommendedLevel",
        description="Party level range (Easy: 1-3, Medium: 4-6, Hard: 7-10, Deadly: 11+)",
    )
    powerful_items: Optional[List[PowerfulItem]] = Field(
        None, alias="powerfulItems", description="Powerful items with a clear status/control mechanism"
    )
    possible_outcomes: Optional[List[str]] = Field(
        None, alias="possibleOutcomes", description="3-4 outcomes showing concrete consequences of choices"
    )
    choice_based_rewards: Optional[List[ChoiceBasedReward]] = Field(
        None, alias="choiceBasedRewards", description="Rewards tied to specific choices or paths"
    )


ContentBody = Union[Character, Environment, Mission]

CONTENT_MODELS = {
    ContentType.CHARACTER: Character,
    ContentType.ENVIRONMENT: Environment,
    ContentType.MISSION: Mission,
}


class GeneratedContent(ContentModel):
    """생성 결과 래퍼 (type 은 생성 시 고정, 본문 타입과 일치해야 함)"""

    type: ContentType
    content: ContentBody
    scenario: str
    language: str = "English"
    source: Literal["ai", "fallback"] = "ai"

    @model_validator(mode="before")
    @classmethod
    def _parse_tagged_body(cls, data):
        if isinstance(data, dict):
            content_type = data.get("type")
            body = data.get("content")
            if content_type is not None and isinstance(body, dict):
                model = CONTENT_MODELS[ContentType(content_type)]
                data = {**data, "content": model.model_validate(body)}
        return data

    @model_validator(mode="after")
    def _check_tag(self):
        expected = CONTENT_MODELS[self.type]
        if not isinstance(self.content, expected):
            raise ValueError(
                f"content body {type(self.content).__name__} does not match type '{self.type.value}'"
            )
        return self
