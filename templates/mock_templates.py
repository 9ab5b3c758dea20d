"""
결정적 폴백 생성기
AI 호출 불가/실패 시 사용, 네트워크 없이 항상 유효한 콘텐츠 반환
같은 (타입, 시나리오) 입력이면 같은 결과
"""

import copy
import hashlib
import logging
import random
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.content_models import (
    Attributes,
    Character,
    ChoiceBasedReward,
    ClassFeature,
    ContentBody,
    ContentType,
    Environment,
    Mission,
    Objective,
    PowerfulItem,
    Reward,
    Skill,
    Spell,
)
from models.request_models import (
    AdvancedCharacterInput,
    AdvancedEnvironmentInput,
    AdvancedInput,
    AdvancedMissionInput,
)
from prompt.normalization import normalize_background_name, normalize_class_name
from services.content_validator import compute_skill_modifier
from templates.dnd_reference import (
    BACKGROUND_SKILLS,
    BACKGROUNDS,
    CLASS_ABILITY_PRIORITY,
    CLASS_SKILLS,
    CLASSES,
    EXPERTISE_CLASSES,
    NAMES_BY_RACE,
    RACES,
    SKILL_ABILITIES,
    SPELL_POOLS,
    VOICE_DESCRIPTIONS,
    class_features_for,
    max_spell_level,
    racial_traits_for,
    recommended_level_for,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "[Placeholder]"
# 객체 섹션 항목에서 표시할 문자열 필드 (앞에 있을수록 우선)
MARKED_FIELDS = ("description", "condition", "status")

ABILITIES = ["strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma"]

SCENARIO_CLASS_HINTS = [
    ("bard", "Bard"),
    ("wizard", "Wizard"),
    ("thief", "Rogue"),
]

CHARACTER_TRAITS = [
    "Quick to make friends",
    "Loves telling stories",
    "Always carries a musical instrument",
    "Keeps a journal of every oath sworn",
    "Distrusts anyone who refuses a drink",
    "Hums when nervous",
    "Collects trinkets from every town",
    "Never forgets a face",
]

GENERIC_NPCS = [
    "Guardian Spirit - Protects the location from intruders",
    "Ancient Wizard - Former owner who left behind magical research",
    "Curious Apprentice - Seeks knowledge about the location's history",
    "Weary Sentry - Watches the only road in and out",
    "Traveling Merchant - Sells oddities of questionable origin",
    "Local Herbalist - Knows every plant and every rumor",
    "Retired Adventurer - Tells stories that are mostly true",
    "Hooded Stranger - Pays in old coins and asks strange questions",
    "Street Urchin - Runs messages for a copper",
    "Town Crier - Announces news a day too late",
]

BARD_NPCS = [
    "The Mysterious Bard - Performs nightly and knows many local secrets",
    "Tavern Keeper - Owner who keeps a watchful eye on patrons",
    "Local Patrons - Regulars who gossip about town happenings",
]

EXTRA_OBJECTIVES = [
    Objective(description="Avoid detection", primary=False, path_type="stealth"),
    Objective(description="Rescue any hostages", primary=False),
    Objective(description="Recover the missing ledger", primary=False),
    Objective(description="Return before the next full moon", primary=False),
]

REWARD_RANGES = {
    "easy": ((100, 300), (25, 100)),
    "medium": ((300, 700), (100, 300)),
    "hard": ((700, 1500), (300, 800)),
    "deadly": ((1500, 4000), (800, 2500)),
}


def _rng_for(content_type: ContentType, scenario: str) -> random.Random:
    digest = hashlib.sha256(f"{content_type.value}{scenario}".encode("utf-8")).hexdigest()
    return random.Random(int(digest, 16))


def _name_from_scenario(scenario: str) -> Optional[str]:
    match = re.search(r"\bnamed\s+([^\W\d_][\w'-]*)", scenario, re.IGNORECASE)
    if match:
        name = match.group(1)
        return name[0].upper() + name[1:]
    return None


def _names_for_race(race: str) -> List[str]:
    race_lower = race.lower()
    for key, names in NAMES_BY_RACE.items():
        if key != "default" and key in race_lower:
            return names
    return NAMES_BY_RACE["default"]


class MockContentGenerator:
    """오프라인 폴백 생성기 (캐릭터 / 환경 / 미션)"""

    def generate(self, scenario: str, content_type, advanced_input: Optional[AdvancedInput] = None) -> ContentBody:
        content_type = ContentType(content_type)
        rng = _rng_for(content_type, scenario)

        if content_type == ContentType.CHARACTER:
            return self._generate_character(scenario, rng, advanced_input)
        if content_type == ContentType.ENVIRONMENT:
            return self._generate_environment(scenario, rng, advanced_input)
        return self._generate_mission(scenario, rng, advanced_input)

    # ------------------------------------------------------------ character

    def _generate_character(self, scenario: str, rng: random.Random,
                            advanced_input: Optional[AdvancedCharacterInput]) -> Character:
        constraints = advanced_input if isinstance(advanced_input, AdvancedCharacterInput) else AdvancedCharacterInput()
        scenario_lower = scenario.lower()

        race = (constraints.race or "").strip() or rng.choice(RACES)
        char_class = normalize_class_name(constraints.class_name)
        if not char_class:
            hinted = [cls for keyword, cls in SCENARIO_CLASS_HINTS if keyword in scenario_lower]
            char_class = hinted[0] if hinted else rng.choice(CLASSES)
        background = normalize_background_name(constraints.background) or rng.choice(BACKGROUNDS)
        level = constraints.level or rng.randint(1, 10)

        name = _name_from_scenario(scenario) or rng.choice(_names_for_race(race))
        attributes = self._roll_attributes(char_class, rng)

        proficient = set(CLASS_SKILLS.get(char_class, [])) | set(BACKGROUND_SKILLS.get(background, []))
        expertise: List[str] = []
        if char_class in EXPERTISE_CLASSES and (char_class == "Rogue" or level >= 3):
            expertise = [s for s in CLASS_SKILLS[char_class] if s in proficient][:2]

        skills = self._build_skills(attributes, level, proficient, expertise)
        spells = self._pick_spells(char_class, level, rng)
        features = [ClassFeature(name=n, level=lvl, description=d) for n, lvl, d in class_features_for(char_class, level)]
        racial = racial_traits_for(race)

        place = "tavern" if "tavern" in scenario_lower else "distant land"
        lore = "deep knowledge of ancient lore" if "ancient" in scenario_lower else "charming demeanor"

        return Character(
            name=name,
            race=race,
            class_name=char_class,
            level=level,
            background=background,
            history=(
                f"Born in a {place}, {name} was shaped by years as a {background.lower()} before taking up "
                f"the path of the {char_class.lower()}. Their connection to {scenario.strip() or 'this tale'} "
                f"is undeniable."
            ),
            personality=f"A {char_class.lower()} with a {background.lower()} background, {name} is known for their {lore}.",
            attributes=attributes,
            expertise=expertise,
            spells=spells,
            skills=skills,
            traits=rng.sample(CHARACTER_TRAITS, 3),
            racial_traits=racial or None,
            class_features=features or None,
            voice_description=rng.choice(VOICE_DESCRIPTIONS),
            associated_mission="The Lost Melody" if "flute" in scenario_lower else None,
        )

    @staticmethod
    def _roll_attributes(char_class: str, rng: random.Random) -> Attributes:
        primary, secondary = CLASS_ABILITY_PRIORITY.get(char_class, ("strength", "constitution"))
        scores = {}
        for ability in ABILITIES:
            if ability == primary:
                scores[ability] = rng.randint(15, 17)
            elif ability == secondary:
                scores[ability] = rng.randint(13, 15)
            else:
                scores[ability] = rng.randint(10, 12)
        return Attributes(**scores)

    @staticmethod
    def _build_skills(attributes: Attributes, level: int, proficient, expertise: List[str]) -> List[Skill]:
        skills = []
        for skill_name in sorted(SKILL_ABILITIES):
            is_proficient = skill_name in proficient
            modifier = compute_skill_modifier(attributes, level, skill_name, is_proficient, skill_name in expertise)
            skills.append(Skill(name=skill_name, proficiency=is_proficient, modifier=modifier))
        return skills

    @staticmethod
    def _pick_spells(char_class: str, level: int, rng: random.Random) -> List[Spell]:
        top = max_spell_level(char_class, level)
        if top < 0:
            return []
        pool = [s for s in SPELL_POOLS.get(char_class, []) if s[1] <= top]
        count = rng.randint(6, 10) if char_class == "Wizard" else rng.randint(4, 8)
        chosen = rng.sample(pool, min(count, len(pool)))
        chosen.sort(key=lambda s: (s[1], s[0]))
        return [Spell(name=n, level=lvl, description=d) for n, lvl, d in chosen]

    # ---------------------------------------------------------- environment

    def _generate_environment(self, scenario: str, rng: random.Random,
                              advanced_input: Optional[AdvancedEnvironmentInput]) -> Environment:
        constraints = advanced_input if isinstance(advanced_input, AdvancedEnvironmentInput) else AdvancedEnvironmentInput()
        scenario_lower = scenario.lower()
        is_dark = "dark" in scenario_lower or "abandoned" in scenario_lower
        is_tavern = "tavern" in scenario_lower
        is_tower = "tower" in scenario_lower

        name = "Mysterious Location"
        if is_tavern:
            name = rng.choice(["The Rusty Tankard", "The Gilded Lute", "The Sleeping Griffin"])
        if is_tower:
            name = "The Abandoned Tower"
        if "wizard" in scenario_lower:
            name = "Wizard's Sanctum"

        if is_tavern:
            conflict = ("A heated argument between two merchants is escalating, and the tavern keeper is trying "
                        "to calm them down before it turns violent.")
            hooks = [
                "The merchants offer gold to anyone who can help resolve their dispute",
                "A mysterious figure in the corner watches the party with keen interest",
                "The tavern keeper mentions a missing shipment that needs investigating",
            ]
            features = ["Large fireplace", "Bar counter with stools", "Stage for performers", "Private booths"]
        elif is_tower:
            conflict = "Magical wards are failing, causing unpredictable magical effects throughout the tower."
            hooks = [
                "A magical artifact at the top of the tower is causing the instability",
                "Ancient guardians have awakened and are hostile to all intruders",
                "A previous explorer left behind valuable notes about the tower's secrets",
            ]
            features = ["Spiral staircase", "Ancient library", "Magical traps", "Observation deck"]
        else:
            conflict = "Strange occurrences have been reported, and the locals are growing increasingly fearful."
            hooks = [
                "Locals are offering a reward for anyone who can solve the mystery",
                "A witness claims to have seen something important but is too scared to talk",
                "The strange occurrences follow a pattern that suggests a hidden cause",
            ]
            features = ["Mysterious artifacts", "Hidden passages", "Magical auras"]

        npc_pool = list(GENERIC_NPCS)
        rng.shuffle(npc_pool)
        if "bard" in scenario_lower or is_tavern:
            npc_pool = BARD_NPCS + [n for n in npc_pool if n not in BARD_NPCS]
        npc_count = constraints.npc_count if constraints.npc_count is not None else 3

        mood = constraints.mood or ("Tense and mysterious" if is_dark else "Warm and inviting")
        lighting = constraints.lighting or (
            "Dim torchlight casting long shadows" if is_dark else "Warm firelight illuminating the space"
        )

        return Environment(
            name=name,
            description=(
                f"A {'dark and foreboding' if is_dark else 'well-worn'} place shaped by its story: "
                f"{scenario.strip() or 'a place that holds many secrets'}."
            ),
            ambient=(
                "Echoing footsteps, distant whispers, the creaking of old wood"
                if is_dark else "Lively chatter, clinking mugs, crackling fire, bardic music"
            ),
            mood=mood,
            lighting=lighting,
            features=features,
            npcs=npc_pool[:npc_count],
            current_conflict=conflict,
            adventure_hooks=rng.sample(hooks, rng.randint(2, 3)),
        )

    # -------------------------------------------------------------- mission

    def _generate_mission(self, scenario: str, rng: random.Random,
                          advanced_input: Optional[AdvancedMissionInput]) -> Mission:
        constraints = advanced_input if isinstance(advanced_input, AdvancedMissionInput) else AdvancedMissionInput()
        scenario_lower = scenario.lower()
        has_artifact = "artifact" in scenario_lower or "flute" in scenario_lower
        has_thieves = "thief" in scenario_lower or "stolen" in scenario_lower
        has_guild = "guild" in scenario_lower

        if has_artifact:
            title = "The Lost Artifact"
            objectives = [
                Objective(description="Retrieve the stolen artifact", primary=True, path_type="mixed"),
                Objective(description="Negotiate with the sorceress for the artifact", primary=False,
                          is_alternative=True, path_type="social"),
                Objective(description="Defeat the sorceress in combat", primary=False,
                          is_alternative=True, path_type="combat"),
            ]
            outcomes = [
                "If artifact is retrieved and sealed -> Balance is maintained, but factions seek it later",
                "If artifact is destroyed -> Imbalance spreads, magical instability increases",
                "If artifact is kept by party -> Future consequences arise, attracts powerful enemies",
                "If negotiation succeeds -> Alliance formed, but artifact remains a threat",
            ]
            conditions = ["If negotiated with sorceress", "If combat is chosen"]
            powerful_items = [PowerfulItem(name="The Heart of Balance",
                                           status="Dormant Artifact (awakens later, DM-controlled)")]
        elif has_thieves:
            title = "Thieves' Guild Infiltration"
            objectives = [
                Objective(description="Infiltrate the thieves' guild hideout", primary=True, path_type="stealth"),
                Objective(description="Negotiate with the guild leader", primary=False,
                          is_alternative=True, path_type="social"),
                Objective(description="Assault the hideout directly", primary=False,
                          is_alternative=True, path_type="combat"),
            ]
            outcomes = [
                "If guild is infiltrated successfully -> Information gained, but guild becomes hostile",
                "If negotiation succeeds -> Temporary alliance, but guild demands favors",
                "If combat is chosen -> Guild is weakened, but other criminal groups take notice",
            ]
            conditions = ["If negotiation succeeds", "If combat is chosen"]
            powerful_items = None
        else:
            title = rng.choice(["A Mysterious Quest", "Shadows on the Road", "The Silent Bell"])
            objectives = [
                Objective(description="Complete the primary objective", primary=True, path_type="mixed"),
            ]
            outcomes = [
                "If primary objective succeeds -> Quest giver becomes ally",
                "If stealth approach is used -> Information gained without confrontation",
                "If hostages are rescued -> Additional rewards and reputation",
            ]
            conditions = ["If stealth approach is used"]
            powerful_items = None

        objectives = objectives + [o for o in EXTRA_OBJECTIVES if o.description not in {x.description for x in objectives}]
        objective_count = constraints.objective_count or min(len(objectives), 4)
        objectives = [o.model_copy() for o in objectives[:objective_count]]

        difficulty = constraints.difficulty or ("hard" if has_guild else "medium" if has_artifact else "easy")
        reward_types = constraints.reward_types if constraints.reward_types is not None else ["xp", "gold", "items"]

        rewards = self._roll_reward(difficulty, reward_types, rng, ["Potion of Healing", "Map of the Old Roads"])
        choice_rewards = [
            ChoiceBasedReward(condition=condition,
                              rewards=self._roll_reward(difficulty, reward_types, rng, ["Alliance Favor"]))
            for condition in conditions
        ]

        return Mission(
            title=title,
            description=f"{title}: {scenario.strip() or 'a task that cannot wait'}.",
            context="Rumors have spread through the region, and someone must act before it is too late.",
            objectives=objectives,
            rewards=rewards,
            difficulty=difficulty,
            related_npcs=["Quest Giver - Desperate for help", "Rival Agent - Wants the same prize"],
            related_locations=["The Starting Town", "The Forgotten Ruins"],
            recommended_level=recommended_level_for(difficulty),
            powerful_items=powerful_items,
            possible_outcomes=outcomes,
            choice_based_rewards=choice_rewards,
        )

    @staticmethod
    def _roll_reward(difficulty: str, reward_types: List[str], rng: random.Random, items: List[str]) -> Reward:
        (xp_low, xp_high), (gold_low, gold_high) = REWARD_RANGES[difficulty]
        return Reward(
            xp=rng.randint(xp_low, xp_high) if "xp" in reward_types else None,
            gold=rng.randint(gold_low, gold_high) if "gold" in reward_types else None,
            items=list(items) if "items" in reward_types else [],
        )

    # -------------------------------------------------------------- section

    def generate_section(self, content_type, section: str, current_content: Dict[str, Any],
                         section_index: Optional[int] = None, scenario: str = "") -> Any:
        """현재 레코드 제약 기반 섹션 플레이스홀더 값"""
        content_type = ContentType(content_type)
        constraints = self._constraints_from(content_type, current_content)
        record = self.generate(scenario, content_type, constraints)

        if content_type == ContentType.CHARACTER and section == "skills":
            skills = self._skills_for_current(current_content, record)
            value = [s.to_wire() for s in skills]
        else:
            value = record.to_wire().get(section)

        if section != "expertise":
            value = self._mark(value)
        if section_index is None:
            if value is None:
                return [] if isinstance(current_content.get(section), list) else ""
            return value

        if isinstance(value, list) and value:
            return value[min(section_index, len(value) - 1)]
        current = current_content.get(section) or []
        if section_index < len(current):
            return copy.deepcopy(current[section_index])
        return f"{PLACEHOLDER_PREFIX} entry"

    @staticmethod
    def _mark(value: Any) -> Any:
        """플레이스홀더 표시 (객체는 설명 문자열 하나 또는 아이템 목록에 표시)"""
        if isinstance(value, str):
            return f"{PLACEHOLDER_PREFIX} {value}"
        if isinstance(value, list):
            return [MockContentGenerator._mark(v) for v in value]
        if isinstance(value, dict):
            marked = dict(value)
            field = next((f for f in MARKED_FIELDS if isinstance(marked.get(f), str)), None)
            if field is not None:
                marked[field] = MockContentGenerator._mark(marked[field])
            elif isinstance(marked.get("items"), list):
                marked["items"] = MockContentGenerator._mark(marked["items"])
            return marked
        return value

    @staticmethod
    def _skills_for_current(current_content: Dict[str, Any], record: Character) -> List[Skill]:
        try:
            current = Character.model_validate(current_content)
        except ValidationError:
            logger.warning("현재 캐릭터 검증 실패, 폴백 스킬 그대로 사용")
            return record.skills

        skills = []
        for skill in record.skills:
            modifier = compute_skill_modifier(current.attributes, current.level, skill.name,
                                              skill.proficiency, skill.name in current.expertise)
            skills.append(Skill(name=skill.name, proficiency=skill.proficiency, modifier=modifier))
        return skills

    @staticmethod
    def _constraints_from(content_type: ContentType, current: Dict[str, Any]) -> Optional[AdvancedInput]:
        try:
            if content_type == ContentType.CHARACTER:
                level = current.get("level")
                return AdvancedCharacterInput(
                    level=level if isinstance(level, int) and 1 <= level <= 20 else None,
                    class_name=current.get("class"),
                    race=current.get("race"),
                    background=current.get("background"),
                )
            if content_type == ContentType.ENVIRONMENT:
                return AdvancedEnvironmentInput(
                    mood=current.get("mood"),
                    lighting=current.get("lighting"),
                    npc_count=min(len(current.get("npcs") or []), 10),
                )
            rewards = current.get("rewards") or {}
            reward_types = [k for k in ("xp", "gold") if rewards.get(k) is not None]
            if rewards.get("items"):
                reward_types.append("items")
            objective_count = len(current.get("objectives") or [])
            return AdvancedMissionInput(
                difficulty=current.get("difficulty"),
                objective_count=max(2, min(objective_count, 5)) if objective_count else None,
                reward_types=reward_types or None,
            )
        except ValidationError:
            logger.warning(f"현재 {content_type.value} 제약 추출 실패, 기본값 사용")
            return None
