"""
프롬프트 관리자
콘텐츠 타입별 시스템/사용자 프롬프트 생성 (전체 생성 / 섹션 재생성 / 변형 시나리오)
모든 메서드는 순수 함수 (I/O 없음)
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models.content_models import ContentType
from models.request_models import (
    AdvancedCharacterInput,
    AdvancedEnvironmentInput,
    AdvancedGenerationParams,
    AdvancedInput,
    AdvancedMissionInput,
)
from prompt.normalization import normalize_background_name, normalize_class_name
from schemas.schema_registry import SectionContract, content_spec_for
from templates.dnd_reference import SPELLCASTING_CLASSES

EXAMPLE_NAMES = {
    "Portuguese": ["João", "Maria", "Carlos", "Elena", "Rafael"],
    "Spanish": ["Juan", "María", "Carlos", "Elena", "Rafael"],
    "English": ["John", "Mary", "Charles", "Elena", "Robert"],
}

TONE_INSTRUCTIONS = {
    "serious": " Maintain a serious, dramatic tone throughout. Focus on realism and consequences.",
    "playful": " Maintain a light, playful tone throughout. Include humor and whimsical elements where appropriate.",
    "balanced": " Maintain a balanced tone that can include both serious and light moments as appropriate.",
}

COMPLEXITY_INSTRUCTIONS = {
    "simple": " Keep descriptions concise and straightforward. Focus on essential details only.",
    "detailed": (
        " Provide extensive, rich details. Include sensory descriptions, deeper motivations, "
        "and elaborate world-building elements."
    ),
    "standard": "",
}

DEFAULT_VARIATION_INSTRUCTION = (
    " Create a similar but distinctly different version with unique characteristics, different details, "
    "and fresh elements while maintaining the same general theme and type."
)

_RULE = "═" * 55


@dataclass(frozen=True)
class PromptPair:
    system_prompt: str
    user_prompt: str


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class PromptManager:
    """콘텐츠 생성 프롬프트 빌더"""

    # ------------------------------------------------------------ framing

    @staticmethod
    def _language_header(language: str) -> str:
        return (
            f"CRITICAL LANGUAGE REQUIREMENT: The user's scenario is written in {language}. "
            f"You MUST generate ALL content in {language}. This includes ALL text, descriptions, names, "
            f"titles, dialogue, and every single word of output. Every field must be in {language}."
        )

    @staticmethod
    def _user_language_header(language: str) -> str:
        return (
            f"CRITICAL LANGUAGE REQUIREMENT: The user's scenario below is written in {language}. "
            f"You MUST respond entirely in {language}. Every word, name, description, and text must be in {language}."
        )

    @staticmethod
    def _final_reminder(language: str, subject: str = "Every name, description, and text field") -> str:
        return (
            f"FINAL REMINDER: The user wrote in {language}. All output MUST be in {language}. "
            f"{subject} must be in {language}."
        )

    @staticmethod
    def get_tone_instruction(tone: Optional[str]) -> str:
        if not tone:
            return ""
        return TONE_INSTRUCTIONS.get(tone, TONE_INSTRUCTIONS["balanced"])

    @staticmethod
    def get_complexity_instruction(complexity: Optional[str]) -> str:
        if not complexity:
            return ""
        return COMPLEXITY_INSTRUCTIONS.get(complexity, "")

    def build_advanced_constraints(self, content_type: ContentType, advanced_input: Optional[AdvancedInput]) -> str:
        """고급 입력을 필수 요구사항 블록으로 변환"""
        constraints: List[str] = []

        if isinstance(advanced_input, AdvancedCharacterInput):
            class_name = normalize_class_name(advanced_input.class_name)
            background = normalize_background_name(advanced_input.background)
            if advanced_input.level:
                constraints.append(
                    f"CRITICAL: The character MUST be exactly level {advanced_input.level}. Do NOT change this level."
                )
            if class_name:
                constraints.append(
                    f"CRITICAL: The character MUST be a {class_name}. Do NOT use any other class. "
                    f'The "class" field in the JSON response must be exactly "{class_name}".'
                )
            if advanced_input.race:
                constraints.append(
                    f"CRITICAL: The character MUST be a {advanced_input.race}. Do NOT use any other race. "
                    f'The "race" field in the JSON response must be exactly "{advanced_input.race}".'
                )
            if background:
                constraints.append(
                    f"CRITICAL: The character MUST have the {background} background. Do NOT use any other "
                    f'background. The "background" field in the JSON response must be exactly "{background}".'
                )
        elif isinstance(advanced_input, AdvancedEnvironmentInput):
            if advanced_input.mood:
                constraints.append(f"The environment MUST have a {advanced_input.mood} mood")
            if advanced_input.lighting:
                constraints.append(f"The environment MUST have {advanced_input.lighting} lighting")
            if advanced_input.npc_count is not None:
                constraints.append(f"The environment MUST include exactly {_plural(advanced_input.npc_count, 'NPC')}")
        elif isinstance(advanced_input, AdvancedMissionInput):
            if advanced_input.difficulty:
                constraints.append(f"The mission MUST be {advanced_input.difficulty} difficulty")
            if advanced_input.objective_count:
                constraints.append(
                    f"The mission MUST have exactly {_plural(advanced_input.objective_count, 'objective')}"
                )
            if advanced_input.reward_types:
                constraints.append(f"The mission rewards MUST include: {', '.join(advanced_input.reward_types)}")

        if not constraints:
            return ""

        lines = "\n".join(f"• {c}" for c in constraints)
        return (
            f"\n\n{_RULE}\nCRITICAL USER REQUIREMENTS (MUST BE FOLLOWED EXACTLY):\n{_RULE}\n{lines}\n{_RULE}\n\n"
            "These requirements are ABSOLUTELY MANDATORY. The JSON output MUST match these requirements "
            "exactly. Do not deviate from these requirements."
        )

    # -------------------------------------------------------------- build

    def build(self, scenario: str, content_type, language: str,
              advanced_input: Optional[AdvancedInput] = None,
              params: Optional[AdvancedGenerationParams] = None) -> PromptPair:
        """전체 콘텐츠 생성 프롬프트"""
        content_type = ContentType(content_type)
        language = str(getattr(language, "value", language))
        tone = self.get_tone_instruction(params.tone if params else None)
        complexity = self.get_complexity_instruction(params.complexity if params else None)
        constraints = self.build_advanced_constraints(content_type, advanced_input)

        if content_type == ContentType.CHARACTER:
            return self._create_character_prompts(scenario, language, advanced_input, tone, complexity, constraints)
        if content_type == ContentType.ENVIRONMENT:
            return self._create_environment_prompts(scenario, language, advanced_input, tone, complexity, constraints)
        return self._create_mission_prompts(scenario, language, advanced_input, tone, complexity, constraints)

    def _create_character_prompts(self, scenario, language, advanced_input, tone, complexity, constraints) -> PromptPair:
        char_input = advanced_input if isinstance(advanced_input, AdvancedCharacterInput) else AdvancedCharacterInput()
        class_name = normalize_class_name(char_input.class_name)
        background = normalize_background_name(char_input.background)
        examples = EXAMPLE_NAMES.get(language, EXAMPLE_NAMES["English"])

        system_prompt = f"""{self._language_header(language)}

Example: If the user writes in Portuguese like "um bardo na taverna", you MUST respond with Portuguese names like "João" or "Maria", Portuguese descriptions, and all text in Portuguese. If the user writes in Spanish like "un bardo en la taberna", respond with Spanish names like "Juan" or "María" and all text in Spanish.

You are an expert D&D 5e game master and character creator. Create detailed, immersive characters that feel authentic to the D&D 5e universe. Characters should have rich backstories, distinct personalities, and appropriate abilities for their level and class.{tone}{complexity} Include spells appropriate to the character's class and level. IMPORTANT: Ensure all skill proficiency flags are correctly set based on class, background, and race. Include all standard racial traits for the character's race. CRITICAL: Every character MUST include ALL mandatory class features for their class and level - this is non-negotiable. Non-spellcasting classes (Barbarian, Rogue, Fighter, Monk) must have their complete feature list.

{self._final_reminder(language, "Every name, description, trait, and text field")}"""

        name_instruction = (
            f"CRITICAL: Generate a UNIQUE, CREATIVE character name appropriate for {language} culture. "
            f'DO NOT use generic names like "{char_input.race or "Race"} {class_name or "Class"}" or literal '
            f"translations. Create an authentic, memorable name that fits the character's background and culture "
            f"(e.g., {', '.join(examples)}). The name field must contain ONLY the character's name, not their race and class."
        )

        level_text = char_input.level or "the character"
        if class_name == "Wizard":
            spell_instruction = (
                f"- Spells: For Wizards, include ALL spells appropriate for level {level_text}. "
                f"A Wizard should have 6-10 spells in their spellbook (mix of cantrips and leveled spells). "
                f"Include essential spells like Magic Missile, Detect Magic, Mage Armor, and other spells fitting "
                f"their level and specialization. The spells array must contain multiple spells, not just 3."
            )
        elif class_name in SPELLCASTING_CLASSES:
            spell_instruction = (
                f"- Spells: Include appropriate spells for a {class_name} of this level "
                f"(typically 4-8 spells for lower levels, more for higher levels)."
            )
        elif class_name:
            spell_instruction = "- Spells: Non-spellcasting classes must have an empty spells array []."
        else:
            spell_instruction = (
                "- Spells: Wizards 6-10 spells, other spellcasting classes 4-8 spells; "
                "non-spellcasting classes (Barbarian, Fighter, Monk, Rogue) must have an empty spells array []."
            )

        headline = "".join(
            f" {part}" for part in (
                f"Level {char_input.level}" if char_input.level else "",
                class_name or "",
                char_input.race or "",
            ) if part
        )

        requirements = [f"- Name: {name_instruction}"]
        if char_input.level:
            requirements.append(
                f'- CRITICAL: MUST be exactly level {char_input.level} (the "level" field in JSON must be {char_input.level})'
            )
        else:
            requirements.append("- Level between 1-10 (choose appropriately based on the scenario)")
        if class_name:
            requirements.append(f'- CRITICAL: MUST be a {class_name} (the "class" field in JSON must be exactly "{class_name}")')
        if char_input.race:
            requirements.append(
                f'- CRITICAL: MUST be a {char_input.race} (the "race" field in JSON must be exactly "{char_input.race}")'
            )
        if background:
            requirements.append(
                f'- CRITICAL: MUST have the {background} background (the "background" field in JSON must be exactly "{background}")'
            )
        requirements.extend([
            "- D&D 5e ability scores (STR, DEX, CON, INT, WIS, CHA) - values typically 8-15 for starting characters, "
            "with one or two higher stats (15-17) based on class",
            f"- A compelling backstory that connects to the scenario (ALL text in {language})",
            f"- Distinct personality traits (described in {language}, at least 3-4 traits that make the character unique)",
            "- Expertise in 2-4 skills (if the class grants expertise, like Rogue or Bard)",
            spell_instruction,
            "- ALL skills with accurate proficiency flags - mark proficiency: true for skills granted by class, "
            "background, or race. The modifier field should match: ability modifier + proficiency bonus (if proficient) "
            "or ability modifier + 2×proficiency bonus (if expertise)",
            "- Racial traits: Include ALL standard D&D 5e racial features for the character's race (e.g., Tiefling: "
            "Darkvision, Hellish Resistance, Infernal Legacy; Elf: Darkvision, Fey Ancestry, Keen Senses; "
            "Dwarf: Darkvision, Dwarven Resilience, Stonecunning)",
            "- Class Features: Include ALL mandatory class features for this class and level. This is REQUIRED for "
            "every character. Examples:\n"
            "  * Barbarian (Level 3): Rage (Level 1), Unarmored Defense (Level 1), Reckless Attack (Level 2), "
            "Danger Sense (Level 2), Primal Path feature (Level 3)\n"
            "  * Rogue (Level 3): Sneak Attack (Level 1), Thieves' Cant (Level 1), Expertise (Level 1), "
            "Cunning Action (Level 2), Roguish Archetype feature (Level 3)\n"
            "  * Fighter (Level 3): Fighting Style (Level 1), Second Wind (Level 1), Action Surge (Level 2), "
            "Martial Archetype feature (Level 3)\n"
            "  * Monk (Level 3): Unarmored Defense (Level 1), Martial Arts (Level 1), Ki (Level 2), "
            "Unarmored Movement (Level 2), Monastic Tradition feature (Level 3)\n"
            "  * Spellcasting classes (Bard, Wizard, etc.) must also include their class features "
            "(e.g., Bardic Inspiration for Bard, Arcane Recovery for Wizard)",
            "- Character traits and quirks",
            '- Voice description (e.g., "Hoarse voice", "Sweet voice", "Deep voice", "Melodic voice") - '
            "NOT dialogue phrases, just the voice quality",
            "- Optional associated mission if relevant",
        ])

        user_prompt = f"""{self._user_language_header(language)}

Create a D&D 5e character based on this scenario: "{scenario}"{headline}{constraints}

IMPORTANT: The scenario above is written in {language}. You MUST match this language exactly. All character names, descriptions, backstories, personality traits, and every single text field must be in {language}. Use names appropriate for {language} culture (e.g., {', '.join(examples[:3])}).

Generate a complete character with:
{chr(10).join(requirements)}

CRITICAL:
1. Ensure skill modifiers are calculated correctly. For each skill, proficiency: true means the modifier should be (ability modifier + proficiency bonus). For expertise, it should be (ability modifier + 2×proficiency bonus). The proficiency bonus is floor((level + 7) / 4).
2. Class features are MANDATORY - every character must have their complete class feature list. Non-spellcasting classes cannot rely on spells alone.
3. Make the character feel alive and ready to use in a campaign.
4. FINAL REMINDER: EVERY SINGLE TEXT FIELD MUST BE IN {language}. Names, descriptions, traits, backstory, personality - everything must be in {language}."""

        return PromptPair(system_prompt=system_prompt, user_prompt=user_prompt)

    def _create_environment_prompts(self, scenario, language, advanced_input, tone, complexity, constraints) -> PromptPair:
        env_input = advanced_input if isinstance(advanced_input, AdvancedEnvironmentInput) else AdvancedEnvironmentInput()

        system_prompt = f"""{self._language_header(language)}

Example: If the user writes in Portuguese like "uma torre de mago", you MUST respond with Portuguese location names like "Torre do Mago" and all descriptions in Portuguese. If the user writes in Spanish like "una torre del mago", respond with Spanish names like "Torre del Mago" and all text in Spanish.

You are an expert D&D 5e game master and world builder. Create immersive, atmospheric locations that bring the game world to life.{tone}{complexity} Environments should have rich sensory details, mood, and interactive elements that engage players.

{self._final_reminder(language, "Every name, description, feature, and text field")}"""

        headline = ""
        if env_input.mood:
            headline += f" with a {env_input.mood} mood"
        if env_input.lighting:
            headline += f" with {env_input.lighting} lighting"
        if env_input.npc_count is not None:
            headline += f" with exactly {_plural(env_input.npc_count, 'NPC')}"

        if env_input.mood:
            mood_line = f"- Mood: MUST be {env_input.mood}"
        else:
            mood_line = (f"- Mood: The emotional tone players should feel upon entering, described in {language} "
                         "(keep this distinct from the description)")
        if env_input.lighting:
            lighting_line = f"- Lighting: MUST be {env_input.lighting}"
        else:
            lighting_line = f"- Lighting: Lighting conditions and visibility described in {language} (do NOT repeat description text)"
        if env_input.npc_count is not None:
            npc_line = f"- NPCs: Exactly {_plural(env_input.npc_count, 'NPC')}, each with a short role description in {language}"
            if env_input.npc_count == 0:
                npc_line += " (no NPCs should be included)"
        else:
            npc_line = (f"- NPCs: Key NPCs present, each with a short role description in {language} "
                        f"(NPC names should be in {language})")

        user_prompt = f"""{self._user_language_header(language)}

Create a D&D 5e environment/location based on this scenario: "{scenario}"{headline}{constraints}

IMPORTANT: The scenario above is written in {language}. You MUST match this language exactly. All location names, descriptions, features, NPC names, and every single text field must be in {language}. Use names appropriate for {language} culture.

Generate a complete location with the following clearly separated sections (ALL in {language}):
{mood_line}
{lighting_line}
- Name: A memorable and unique location name (in {language}, appropriate for {language} culture)
- Description: A vivid visual description of the place in {language} (do NOT describe mood or lighting here)
- Atmosphere: Ambient sounds, smells, and environmental details (described in {language})
- Notable Features: Interactive elements players can investigate or use (described in {language})
{npc_line}
- Current Conflict: What is currently wrong or unstable in this location (described in {language})
- Adventure Hooks: 2-3 concrete hooks that can immediately involve the players (written in {language})

Make the environment feel immersive, playable, and ready to use at the table.
Avoid repeating the same text across sections.

FINAL REMINDER: EVERY SINGLE TEXT FIELD MUST BE IN {language}. Location name, all descriptions, NPC names, features, conflicts, hooks - everything must be in {language}."""

        return PromptPair(system_prompt=system_prompt, user_prompt=user_prompt)

    def _create_mission_prompts(self, scenario, language, advanced_input, tone, complexity, constraints) -> PromptPair:
        mission_input = advanced_input if isinstance(advanced_input, AdvancedMissionInput) else AdvancedMissionInput()

        system_prompt = f"""{self._language_header(language)}

Example: If the user writes in Portuguese like "recuperar um artefato", you MUST respond with Portuguese mission titles like "A Recuperação do Artefato" and all descriptions in Portuguese. If the user writes in Spanish like "recuperar un artefacto", respond with Spanish titles like "La Recuperación del Artefacto" and all text in Spanish.

You are an expert D&D 5e game master and quest designer. Create engaging missions and quests that provide clear objectives, appropriate challenges, and meaningful rewards.{tone}{complexity} Missions should fit naturally into a campaign and offer both primary and optional objectives. CRITICAL: Ensure difficulty matches stakes (world-altering content requires higher tier levels). Clarify artifact power and control mechanisms. Mark alternative objective paths clearly. Define concrete consequences for player choices.

{self._final_reminder(language, "Every title, description, objective, reward, and text field")}"""

        headline = ""
        if mission_input.difficulty:
            headline += f" with {mission_input.difficulty} difficulty"
        if mission_input.objective_count:
            headline += f" with exactly {_plural(mission_input.objective_count, 'objective')}"
        if mission_input.reward_types:
            headline += f" with rewards including: {', '.join(mission_input.reward_types)}"

        if mission_input.difficulty:
            difficulty_line = f"- Difficulty: MUST be {mission_input.difficulty}"
        else:
            difficulty_line = ("- Difficulty: Level (easy, medium, hard, or deadly) - must align with stakes "
                               "and recommended level")
        if mission_input.objective_count:
            objective_text = f"Exactly {_plural(mission_input.objective_count, 'objective')}"
        else:
            objective_text = "2-4 objectives (mix of primary required and optional)"
        reward_text = ", ".join(mission_input.reward_types) if mission_input.reward_types else "XP, gold, items"

        user_prompt = f"""{self._user_language_header(language)}

Create a D&D 5e mission/quest based on this scenario: "{scenario}"{headline}{constraints}

IMPORTANT: The scenario above is written in {language}. You MUST match this language exactly. All mission titles, descriptions, objectives, rewards, NPC names, location names, and every single text field must be in {language}. Use names appropriate for {language} culture.

Generate a complete mission with the following (ALL in {language}):
{difficulty_line}
- Title: An engaging mission title (in {language})
- Description: Detailed mission description (written entirely in {language})
- Context: Background context and setup (written in {language})
- Recommended Level: Party level range based on difficulty and stakes (Easy: 1-3, Medium: 4-6, Hard: 7-10, Deadly: 11+). World-altering stakes (artifacts, prophecies, world balance) should match higher tier levels. Format the level text in {language}.
- Objectives: {objective_text}, all described in {language}. When objectives represent different approaches (e.g., negotiate vs. combat), mark them as alternative paths (isAlternative: true) and specify pathType (combat, social, stealth, or mixed).
- Powerful Items: If the mission involves artifacts or powerful items, include them with clear status descriptions in {language} (e.g., "Dormant Artifact (awakens later)", "DM-controlled Artifact (unstable)", "Narrative Artifact (limited mechanical use)") to help DMs manage game balance.
- Possible Outcomes: 3-4 possible outcomes showing concrete consequences of different player choices, all written in {language}.
- Rewards: Base rewards ({reward_text}) appropriate for difficulty level. Item names and descriptions must be in {language}.
- Choice-Based Rewards: Optional rewards tied to specific paths/choices, all described in {language}.
- Related NPCs: NPCs involved in the mission (NPC names and descriptions in {language})
- Related Locations: Locations relevant to the mission (location names in {language})

Make the mission feel exciting, playable, and ready to run in a campaign. Ensure difficulty matches the scope of stakes.

FINAL REMINDER: EVERY SINGLE TEXT FIELD MUST BE IN {language}. Mission title, all descriptions, objective texts, reward item names, NPC names, location names, outcomes - everything must be in {language}."""

        return PromptPair(system_prompt=system_prompt, user_prompt=user_prompt)

    # ------------------------------------------------------------ section

    def build_section(self, scenario: str, content_type, section: SectionContract,
                      current_content: Dict[str, Any], language: str,
                      section_index: Optional[int] = None) -> PromptPair:
        """단일 섹션 재생성 프롬프트"""
        content_type = ContentType(content_type)
        language = str(getattr(language, "value", language))
        context_summary = content_spec_for(content_type).describe(current_content)

        target = f'the "{section.name}" section'
        if section_index is not None:
            target = f'entry #{section_index} of the "{section.name}" section'

        system_prompt = f"""CRITICAL LANGUAGE REQUIREMENT: The user's scenario is written in {language}. You MUST generate ALL content in {language}.

You are regenerating only {target} of a {content_type.value}. The rest of the content already exists and should not be changed. Generate ONLY the requested section data, maintaining consistency with the existing content.

FINAL REMINDER: All output MUST be in {language}."""

        replacing = ""
        if section_index is not None:
            existing = (current_content.get(section.name) or [])[section_index]
            replacing = (f"\nReplace ONLY this entry (index {section_index}); all other entries stay as they are:\n"
                         f"{json.dumps(existing, ensure_ascii=False, indent=2)}\n")

        return_shape = (
            'Return a JSON object with a single "value" field holding the new data.'
            if section.wrapped else f"Return ONLY the {section.name} data in the required format."
        )

        user_prompt = f"""CRITICAL LANGUAGE REQUIREMENT: Respond entirely in {language}.

Regenerate {target} for this {content_type.value}:

Context: {context_summary}
Original Scenario: "{scenario}"

Current Content (for reference only - do NOT regenerate these):
{json.dumps(current_content, ensure_ascii=False, indent=2)}
{replacing}
Generate NEW {section.description} (ALL in {language}).

{return_shape} Do not include any other fields or explanations."""

        return PromptPair(system_prompt=system_prompt, user_prompt=user_prompt)

    # ---------------------------------------------------------- variation

    @staticmethod
    def build_variation_scenario(original_summary: str, content_type, original_scenario: str,
                                 variation_prompt: Optional[str] = None) -> str:
        content_type = ContentType(content_type)
        if variation_prompt and variation_prompt.strip():
            instructions = f" Make the following specific changes: {variation_prompt.strip()}"
        else:
            instructions = DEFAULT_VARIATION_INSTRUCTION
        return (
            f'Based on this {content_type.value}: "{original_summary}"{instructions} '
            f'The original scenario was: "{original_scenario}". '
            f"Generate a new variation that is similar in theme but different in specific details."
        )


prompt_manager = None


def get_prompt_manager() -> PromptManager:
    """프롬프트 매니저 싱글톤"""
    global prompt_manager
    if prompt_manager is None:
        prompt_manager = PromptManager()
    return prompt_manager
