"""
프롬프트 매니저 테스트
"""
import pytest

from models.content_models import ContentType
from models.request_models import (
    AdvancedCharacterInput,
    AdvancedEnvironmentInput,
    AdvancedGenerationParams,
    AdvancedMissionInput,
)
from prompt.prompt_manager import (
    COMPLEXITY_INSTRUCTIONS,
    DEFAULT_VARIATION_INSTRUCTION,
    TONE_INSTRUCTIONS,
    PromptManager,
)
from schemas.schema_registry import schema_for_section


@pytest.fixture
def manager():
    return PromptManager()


@pytest.mark.unit
class TestBuildPrompts:
    """전체 생성 프롬프트 테스트"""

    @pytest.mark.parametrize("content_type", list(ContentType))
    def test_language_in_both_prompts(self, manager, content_type):
        """시스템/사용자 프롬프트 모두 언어 지시 포함"""
        prompts = manager.build("Um bardo na taverna", content_type, "Portuguese")
        assert "written in Portuguese" in prompts.system_prompt
        assert "written in Portuguese" in prompts.user_prompt
        assert '"Um bardo na taverna"' in prompts.user_prompt

    def test_prompts_are_deterministic(self, manager):
        """같은 입력이면 같은 프롬프트"""
        first = manager.build("A bard in a tavern", "character", "English")
        second = manager.build("A bard in a tavern", "character", "English")
        assert first == second

    def test_tone_and_complexity(self, manager):
        """톤/복잡도 지시 포함"""
        params = AdvancedGenerationParams(tone="playful", complexity="detailed")
        prompts = manager.build("A haunted mill", "environment", "English", params=params)
        assert TONE_INSTRUCTIONS["playful"] in prompts.system_prompt
        assert COMPLEXITY_INSTRUCTIONS["detailed"] in prompts.system_prompt

    def test_no_tone_by_default(self, manager):
        """파라미터 없으면 톤 지시 없음"""
        prompts = manager.build("A haunted mill", "environment", "English")
        for instruction in TONE_INSTRUCTIONS.values():
            assert instruction not in prompts.system_prompt

    def test_character_constraints(self, manager):
        """캐릭터 고급 입력은 필수 요구사항으로"""
        advanced = AdvancedCharacterInput(level=5, class_name="guerreiro", race="Dwarf")
        prompts = manager.build("Um guerreiro anão", "character", "Portuguese", advanced)
        assert "CRITICAL USER REQUIREMENTS" in prompts.user_prompt
        assert "MUST be exactly level 5" in prompts.user_prompt
        assert '"class" field in JSON must be exactly "Fighter"' in prompts.user_prompt
        assert "Non-spellcasting classes must have an empty spells array" in prompts.user_prompt

    def test_wizard_spell_count(self, manager):
        """위저드는 6-10개 주문 지시"""
        prompts = manager.build("A wizard", "character", "English", AdvancedCharacterInput(class_name="Wizard"))
        assert "6-10 spells" in prompts.user_prompt

    def test_environment_zero_npcs(self, manager):
        """NPC 0명 지정"""
        prompts = manager.build("An empty crypt", "environment", "English", AdvancedEnvironmentInput(npc_count=0))
        assert "exactly 0 NPCs" in prompts.user_prompt
        assert "(no NPCs should be included)" in prompts.user_prompt

    def test_mission_constraints(self, manager):
        """미션 난이도/목표 수/보상 종류"""
        advanced = AdvancedMissionInput(difficulty="hard", objective_count=2, reward_types=["gold"])
        prompts = manager.build("Rob the vault", "mission", "English", advanced)
        assert "- Difficulty: MUST be hard" in prompts.user_prompt
        assert "Exactly 2 objectives" in prompts.user_prompt
        assert "Base rewards (gold)" in prompts.user_prompt


@pytest.mark.unit
class TestAdvancedConstraints:
    """필수 요구사항 블록 테스트"""

    def test_empty_input(self, manager):
        """입력 없으면 빈 문자열"""
        assert manager.build_advanced_constraints(ContentType.CHARACTER, None) == ""
        assert manager.build_advanced_constraints(ContentType.CHARACTER, AdvancedCharacterInput()) == ""

    def test_background_normalized(self, manager):
        """배경 동의어 정규화"""
        block = manager.build_advanced_constraints(ContentType.CHARACTER, AdvancedCharacterInput(background="artista"))
        assert "Entertainer background" in block

    def test_single_npc_is_singular(self, manager):
        """단수형"""
        block = manager.build_advanced_constraints(ContentType.ENVIRONMENT, AdvancedEnvironmentInput(npc_count=1))
        assert "exactly 1 NPC" in block
        assert "1 NPCs" not in block


@pytest.mark.unit
class TestSectionPrompts:
    """섹션 재생성 프롬프트 테스트"""

    def test_whole_section(self, manager, sample_character):
        """섹션 전체 재생성"""
        contract = schema_for_section("character", "traits")
        prompts = manager.build_section("A wizard", "character", contract, sample_character, "English")
        assert 'the "traits" section' in prompts.system_prompt
        assert "Character: Aelar, Elf Wizard (Level 5)" in prompts.user_prompt
        assert '"value" field' in prompts.user_prompt

    def test_indexed_entry(self, manager, sample_character):
        """리스트 항목 하나만 재생성"""
        contract = schema_for_section("character", "skills", indexed=True)
        prompts = manager.build_section("A wizard", "character", contract, sample_character, "Spanish", 1)
        assert 'entry #1 of the "skills" section' in prompts.system_prompt
        assert '"History"' in prompts.user_prompt
        assert "Respond entirely in Spanish" in prompts.user_prompt


@pytest.mark.unit
class TestVariationScenario:
    """변형 시나리오 테스트"""

    def test_with_instructions(self):
        """명시적 변경 지시"""
        scenario = PromptManager.build_variation_scenario("Aelar, an Elf Wizard", "character",
                                                          "A wizard", "make her a necromancer")
        assert "Make the following specific changes: make her a necromancer" in scenario
        assert 'The original scenario was: "A wizard"' in scenario

    def test_default_instructions(self):
        """지시 없으면 기본 문구"""
        scenario = PromptManager.build_variation_scenario("The Rusty Tankard", "environment", "A tavern", "  ")
        assert DEFAULT_VARIATION_INSTRUCTION in scenario
        assert scenario.startswith('Based on this environment: "The Rusty Tankard"')
