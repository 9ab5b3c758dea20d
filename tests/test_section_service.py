"""
섹션 재생성 서비스 테스트
"""
import copy

import pytest

from config.settings import Settings
from models.content_models import Reward, Skill
from providers.llm_provider import GenerationResult
from schemas.errors import ConfigurationError, GenerationError, SchemaRegistryError
from schemas.schema_registry import schema_for_section
from services.content_validator import validate_content
from services.section_service import SectionService, apply_section
from templates.mock_templates import PLACEHOLDER_PREFIX


@pytest.fixture
def make_service(heuristic_detector, test_settings):
    def _make(provider=None, settings=None):
        return SectionService(provider=provider, detector=heuristic_detector, settings=settings or test_settings)
    return _make


def _wrapped(content_type, section, value, indexed=False):
    """Provider 가 돌려주는 형태로 감싼 섹션 값"""
    contract = schema_for_section(content_type, section, indexed=indexed)
    return contract.model.model_validate(contract.wrap(value))


@pytest.mark.unit
class TestApplySection:
    """섹션 교체 테스트"""

    def test_only_target_changes(self, sample_character):
        """대상 섹션만 변경"""
        before = copy.deepcopy(sample_character)
        updated = apply_section(sample_character, "traits", ["Brave"])

        assert updated["traits"] == ["Brave"]
        assert {k: v for k, v in updated.items() if k != "traits"} == \
            {k: v for k, v in before.items() if k != "traits"}
        # 원본 유지
        assert sample_character == before

    def test_single_entry(self, sample_environment):
        """리스트 항목 하나만 교체"""
        updated = apply_section(sample_environment, "npcs", "Vex - Smuggler", 1)
        assert updated["npcs"] == ["Mara - Tavern keeper", "Vex - Smuggler", "Silas - Bard"]
        assert sample_environment["npcs"][1] == "Old Tom - Regular"

    def test_invalid_index(self, sample_environment):
        """존재하지 않는 인덱스"""
        with pytest.raises(IndexError):
            apply_section(sample_environment, "npcs", "Vex - Smuggler", 3)


@pytest.mark.unit
class TestRegenerateSection:
    """섹션 재생성 테스트"""

    @pytest.mark.asyncio
    async def test_unknown_section_raises_before_model_call(self, make_service, stub_provider_factory,
                                                             sample_character):
        """알 수 없는 섹션은 모델 호출 없이 오류"""
        stub = stub_provider_factory()
        with pytest.raises(SchemaRegistryError):
            await make_service(stub).regenerate_section("A wizard", "character", "nonexistentField",
                                                        sample_character)
        stub.generate_object.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_index_out_of_range(self, make_service, stub_provider_factory, sample_environment):
        """범위 밖 인덱스는 오류"""
        stub = stub_provider_factory()
        with pytest.raises(SchemaRegistryError):
            await make_service(stub).regenerate_section("A tavern", "environment", "npcs", sample_environment, 7)
        stub.generate_object.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_model_value_returned(self, make_service, stub_provider_factory, sample_character):
        """모델 결과를 섹션 값으로 반환"""
        stub = stub_provider_factory(GenerationResult.success(
            _wrapped("character", "traits", ["Brave", "Loyal"])
        ))
        result = await make_service(stub).regenerate_section("A wizard", "character", "traits", sample_character)

        assert result.source == "ai"
        assert result.value == ["Brave", "Loyal"]
        updated = apply_section(sample_character, result.section, result.value)
        assert {k: v for k, v in updated.items() if k != "traits"} == \
            {k: v for k, v in sample_character.items() if k != "traits"}

    @pytest.mark.asyncio
    async def test_skills_corrected_against_current_record(self, make_service, stub_provider_factory,
                                                           sample_character):
        """재생성된 스킬은 현재 능력치 기준으로 보정"""
        skills = [Skill(name="Arcana", proficiency=True, modifier=1).to_wire(),
                  Skill(name="Perception", proficiency=False, modifier=9).to_wire()]
        stub = stub_provider_factory(GenerationResult.success(_wrapped("character", "skills", skills)))

        result = await make_service(stub).regenerate_section("A wizard", "character", "skills", sample_character)

        assert result.value == [
            {"name": "Arcana", "proficiency": True, "modifier": 6},
            {"name": "Perception", "proficiency": False, "modifier": 1},
        ]

    @pytest.mark.asyncio
    async def test_single_skill_corrected(self, make_service, stub_provider_factory, sample_character):
        """스킬 항목 하나 재생성"""
        stub = stub_provider_factory(GenerationResult.success(Skill(name="Stealth", proficiency=True, modifier=0)))

        result = await make_service(stub).regenerate_section("A wizard", "character", "skills",
                                                             sample_character, 2)

        assert result.section_index == 2
        assert result.value == {"name": "Stealth", "proficiency": True, "modifier": 5}

    @pytest.mark.asyncio
    async def test_non_caster_spells_empty(self, make_service, stub_provider_factory, sample_character):
        """비시전 클래스 주문 섹션은 빈 리스트"""
        sample_character["class"] = "Barbarian"
        spells = [{"name": "Fireball", "level": 3, "description": "Boom."}]
        stub = stub_provider_factory(GenerationResult.success(_wrapped("character", "spells", spells)))

        result = await make_service(stub).regenerate_section("A barbarian", "character", "spells", sample_character)

        assert result.value == []

    @pytest.mark.asyncio
    async def test_localized_caster_spells_kept(self, make_service, stub_provider_factory, sample_character):
        """현지화된 시전 클래스 주문 섹션은 유지"""
        sample_character["class"] = "Mago"
        spells = [{"name": "Fire Bolt", "level": 0, "description": "A mote of fire."}]
        stub = stub_provider_factory(GenerationResult.success(_wrapped("character", "spells", spells)))

        result = await make_service(stub).regenerate_section("Um mago elfo", "character", "spells", sample_character)

        assert result.value == spells

    @pytest.mark.asyncio
    async def test_expertise_leaves_skills_for_validation(self, make_service, stub_provider_factory,
                                                         sample_character):
        """전문화 재생성은 skills 를 바꾸지 않고 검증이 불일치를 보고"""
        stub = stub_provider_factory(GenerationResult.success(_wrapped("character", "expertise", ["Arcana"])))

        result = await make_service(stub).regenerate_section("A wizard", "character", "expertise", sample_character)
        updated = apply_section(sample_character, result.section, result.value)

        assert updated["skills"] == sample_character["skills"]
        report = validate_content("character", updated)
        assert report.is_valid is False
        assert any("Arcana" in error for error in report.errors)

    @pytest.mark.asyncio
    async def test_object_section(self, make_service, stub_provider_factory, sample_mission):
        """객체 섹션 (보상)"""
        stub = stub_provider_factory(GenerationResult.success(Reward(xp=900, gold=50, items=["Ring"])))
        result = await make_service(stub).regenerate_section("An artifact", "mission", "rewards", sample_mission)
        assert result.value == {"xp": 900, "gold": 50, "items": ["Ring"]}

    @pytest.mark.asyncio
    async def test_generation_error_returns_placeholder(self, make_service, stub_provider_factory,
                                                        sample_environment):
        """생성 실패 시 플레이스홀더"""
        stub = stub_provider_factory(GenerationResult.failure(GenerationError("bad json", kind="schema")))

        result = await make_service(stub).regenerate_section("A tavern", "environment", "currentConflict",
                                                             sample_environment)

        assert result.source == "fallback"
        assert result.value.startswith(PLACEHOLDER_PREFIX)

    @pytest.mark.asyncio
    async def test_no_credential_returns_placeholder(self, make_service, sample_environment):
        """자격 증명 없으면 플레이스홀더"""
        result = await make_service().regenerate_section("A tavern", "environment", "npcs", sample_environment, 0)
        assert result.source == "fallback"
        assert isinstance(result.value, str)

    @pytest.mark.asyncio
    async def test_fallback_splice_keeps_other_fields(self, make_service, sample_mission):
        """폴백 결과도 대상 섹션만 변경"""
        result = await make_service().regenerate_section("An artifact", "mission", "possibleOutcomes", sample_mission)
        updated = apply_section(sample_mission, result.section, result.value, result.section_index)

        assert updated["possibleOutcomes"] != sample_mission["possibleOutcomes"]
        for key in sample_mission:
            if key != "possibleOutcomes":
                assert updated[key] == sample_mission[key]

    @pytest.mark.asyncio
    async def test_malformed_key(self, heuristic_detector, sample_character):
        """잘못된 키 형식은 ConfigurationError"""
        settings = Settings(_env_file=None, AI_PROVIDER="claude", CLAUDE_API_KEY="sk-wrong")
        service = SectionService(detector=heuristic_detector, settings=settings)
        with pytest.raises(ConfigurationError):
            await service.regenerate_section("A wizard", "character", "history", sample_character)
