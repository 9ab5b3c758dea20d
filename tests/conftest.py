"""
Pytest 설정 및 공통 Fixtures
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
import sys
import os

# 경로 추가 - 프로젝트 루트 모듈을 import할 수 있도록
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# 테스트는 항상 폴백 경로에서 시작 (실제 API 호출 없음)
os.environ["AI_PROVIDER"] = "mock"
os.environ["OPENAI_API_KEY"] = ""
os.environ["CLAUDE_API_KEY"] = ""

from config.settings import Settings
from main import app
from providers.llm_provider import LLMProvider
from utils.language_detector import LanguageClassifierHandle, LanguageDetector


class StubProvider(LLMProvider):
    """테스트용 Provider: generate_object 는 AsyncMock"""

    def __init__(self, result=None, available=True, error=None):
        super().__init__()
        self.available = available
        self.generate_object = AsyncMock(return_value=result, side_effect=error)

    async def generate_object(self, system_prompt, user_prompt, schema, temperature):
        raise NotImplementedError

    def is_available(self) -> bool:
        return self.available

    def get_provider_name(self) -> str:
        return "Stub Provider"


@pytest.fixture
def client():
    """FastAPI 테스트 클라이언트"""
    return TestClient(app)


@pytest.fixture
def test_settings():
    """외부 .env 영향을 받지 않는 설정"""
    return Settings(_env_file=None, AI_PROVIDER="mock", OPENAI_API_KEY="", CLAUDE_API_KEY="")


@pytest.fixture
def heuristic_detector():
    """통계 분류기 없이 휴리스틱만 사용하는 감지기"""
    return LanguageDetector(LanguageClassifierHandle(enabled=False))


@pytest.fixture
def stub_provider_factory():
    def _make(result=None, available=True, error=None):
        return StubProvider(result=result, available=available, error=error)
    return _make


@pytest.fixture
def sample_character():
    """Level 5 Elf Wizard (pb = 3), 스킬 수치 정상"""
    return {
        "name": "Aelar",
        "race": "Elf",
        "class": "Wizard",
        "level": 5,
        "background": "Sage",
        "history": "Raised among the archives of a drowned city.",
        "personality": "Curious, precise, quietly stubborn.",
        "attributes": {
            "strength": 8,
            "dexterity": 14,
            "constitution": 12,
            "intelligence": 16,
            "wisdom": 12,
            "charisma": 10
        },
        "expertise": [],
        "spells": [
            {"name": "Fire Bolt", "level": 0, "description": "Hurl a mote of fire."},
            {"name": "Magic Missile", "level": 1, "description": "Three darts of force."}
        ],
        "skills": [
            {"name": "Arcana", "proficiency": True, "modifier": 6},
            {"name": "History", "proficiency": True, "modifier": 6},
            {"name": "Stealth", "proficiency": False, "modifier": 2},
            {"name": "Athletics", "proficiency": False, "modifier": -1}
        ],
        "traits": ["Hums when reading", "Keeps meticulous notes"],
        "racialTraits": ["Darkvision 60ft", "Fey Ancestry", "Keen Senses", "Trance"],
        "classFeatures": [
            {"name": "Spellcasting", "description": "Casts wizard spells.", "level": 1},
            {"name": "Arcane Recovery", "description": "Recover slots on a short rest.", "level": 1}
        ],
        "voiceDescription": "Melodic voice"
    }


@pytest.fixture
def sample_environment():
    return {
        "name": "The Rusty Tankard",
        "description": "A low-beamed hall of dark oak and brass.",
        "ambient": "Clinking mugs and a crackling hearth.",
        "mood": "Warm and inviting",
        "lighting": "Warm firelight",
        "features": ["Large fireplace", "Stage for performers"],
        "npcs": ["Mara - Tavern keeper", "Old Tom - Regular", "Silas - Bard"],
        "currentConflict": "Two merchants are arguing over a debt.",
        "adventureHooks": ["A missing shipment", "A stranger watching the party"]
    }


@pytest.fixture
def sample_mission():
    return {
        "title": "The Lost Artifact",
        "description": "Recover the artifact before the eclipse.",
        "context": "The sorceress stole it from the temple.",
        "objectives": [
            {"description": "Retrieve the artifact", "primary": True, "pathType": "mixed"},
            {"description": "Negotiate with the sorceress", "primary": False, "isAlternative": True,
             "pathType": "social"},
            {"description": "Defeat the sorceress", "primary": False, "isAlternative": True, "pathType": "combat"}
        ],
        "rewards": {"xp": 500, "gold": 200, "items": ["Amulet of Dawn"]},
        "difficulty": "medium",
        "relatedNPCs": ["The Sorceress - Thief"],
        "relatedLocations": ["The Temple"],
        "recommendedLevel": "Level 4-6",
        "possibleOutcomes": ["Sealed", "Destroyed", "Kept"]
    }
