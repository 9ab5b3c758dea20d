"""
API 엔드포인트 테스트
"""
import pytest


@pytest.mark.api
@pytest.mark.unit
class TestHealthEndpoint:
    """헬스체크 엔드포인트 테스트"""

    def test_health_check_returns_200(self, client):
        """헬스체크 성공"""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["available_providers"]["mock"] is True
        assert isinstance(data["language_classifier"], bool)

    def test_root(self, client):
        """서버 기본 정보"""
        data = client.get("/").json()
        assert data["provider"] == "Mock Provider"
        assert "generate" in data["endpoints"]

    def test_providers(self, client):
        """Provider 상태"""
        data = client.get("/providers").json()
        assert data["checks"]["mock"]["status"] == "unavailable"
        assert data["settings"]["provider"] == "mock"

    def test_config_hides_keys(self, client):
        """설정 조회 시 키 값 노출 없음"""
        data = client.get("/config").json()
        assert data["ai_provider"] == "mock"
        assert data["openai_configured"] is False
        assert "OPENAI_API_KEY" not in str(data)


@pytest.mark.api
@pytest.mark.unit
class TestSectionsEndpoint:
    """섹션 목록 테스트"""

    def test_character_sections(self, client):
        """캐릭터 섹션 목록"""
        response = client.get("/sections/character")
        assert response.status_code == 200

        data = response.json()
        assert data["contentType"] == "character"
        assert "skills" in data["sections"]

    def test_unknown_content_type(self, client):
        """알 수 없는 타입"""
        response = client.get("/sections/monster")
        assert response.status_code == 422


@pytest.mark.api
@pytest.mark.unit
class TestGenerateEndpoint:
    """콘텐츠 생성 API 테스트"""

    def test_missing_all_fields(self, client):
        """필수 필드 누락 시 422"""
        response = client.post("/generate", json={})
        assert response.status_code == 422

    def test_empty_scenario(self, client):
        """빈 시나리오"""
        response = client.post("/generate", json={"scenario": "", "contentType": "character"})
        assert response.status_code == 422

    def test_invalid_content_type(self, client):
        """잘못된 콘텐츠 타입"""
        response = client.post("/generate", json={"scenario": "A bard", "contentType": "monster"})
        assert response.status_code == 422

    def test_generate_character_fallback(self, client):
        """자격 증명 없이 폴백 캐릭터 생성"""
        response = client.post("/generate", json={
            "scenario": "Create a level 5 Wizard named constraints: race=Elf",
            "contentType": "character",
            "advancedInput": {"level": 5, "class": "wizard", "race": "Elf"}
        })
        assert response.status_code == 200

        data = response.json()
        assert data["type"] == "character"
        assert data["source"] == "fallback"
        assert data["content"]["class"] == "Wizard"
        assert data["content"]["level"] == 5
        assert "voiceDescription" in data["content"]

    def test_generate_environment(self, client):
        """환경 생성"""
        response = client.post("/generate", json={
            "scenario": "Uma taverna escura no porto",
            "contentType": "environment",
            "advancedInput": {"npcCount": 2}
        })
        assert response.status_code == 200

        data = response.json()
        assert data["language"] in ("English", "Portuguese", "Spanish")
        assert len(data["content"]["npcs"]) == 2

    def test_advanced_input_for_wrong_type(self, client):
        """다른 타입의 고급 입력"""
        response = client.post("/generate", json={
            "scenario": "A tavern",
            "contentType": "environment",
            "advancedInput": {"difficulty": "hard"}
        })
        assert response.status_code == 422

    def test_temperature_out_of_range(self, client):
        """온도 범위 초과"""
        response = client.post("/generate", json={
            "scenario": "A tavern",
            "contentType": "mission",
            "generationParams": {"temperature": 3.0}
        })
        assert response.status_code == 422


@pytest.mark.api
@pytest.mark.unit
class TestRegenerateEndpoint:
    """섹션 재생성 API 테스트"""

    def test_regenerate_section(self, client, sample_environment):
        """섹션 재생성 (폴백)"""
        response = client.post("/generate/regenerate", json={
            "scenario": "A tavern",
            "contentType": "environment",
            "section": "adventureHooks",
            "currentContent": sample_environment
        })
        assert response.status_code == 200

        data = response.json()
        assert data["section"] == "adventureHooks"
        assert data["source"] == "fallback"
        assert isinstance(data["data"], list)

    def test_unknown_section(self, client, sample_character):
        """알 수 없는 섹션은 400"""
        response = client.post("/generate/regenerate", json={
            "scenario": "A wizard",
            "contentType": "character",
            "section": "nonexistentField",
            "currentContent": sample_character
        })
        assert response.status_code == 400
        assert "nonexistentField" in response.json()["error"]

    def test_index_out_of_range(self, client, sample_environment):
        """범위 밖 인덱스는 400"""
        response = client.post("/generate/regenerate", json={
            "scenario": "A tavern",
            "contentType": "environment",
            "section": "npcs",
            "currentContent": sample_environment,
            "sectionIndex": 9
        })
        assert response.status_code == 400


@pytest.mark.api
@pytest.mark.unit
class TestVariationEndpoint:
    """변형 생성 API 테스트"""

    def test_variation(self, client, sample_mission):
        """변형 생성 (폴백)"""
        response = client.post("/generate/variation", json={
            "originalContent": sample_mission,
            "contentType": "mission",
            "originalScenario": "Recover the artifact",
            "variationPrompt": "set it in a desert"
        })
        assert response.status_code == 200

        data = response.json()
        assert data["type"] == "mission"
        assert "set it in a desert" in data["scenario"]


@pytest.mark.api
@pytest.mark.unit
class TestValidateContentEndpoint:
    """콘텐츠 검증 API 테스트"""

    def test_valid_content(self, client, sample_character):
        """정상 콘텐츠"""
        response = client.post("/validate-content", json={"contentType": "character", "content": sample_character})
        assert response.status_code == 200
        assert response.json()["isValid"] is True

    def test_invalid_content(self, client, sample_character):
        """스킬 수치 오류"""
        sample_character["skills"][1]["modifier"] = 0
        response = client.post("/validate-content", json={"contentType": "character", "content": sample_character})

        data = response.json()
        assert data["isValid"] is False
        assert len(data["errors"]) == 1
