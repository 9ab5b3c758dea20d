"""
입력 언어 감지
통계 분류기(langdetect) 우선, 사용 불가/불확실 시 휴리스틱 사용
"""

import logging
import re
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Language(str, Enum):
    ENGLISH = "English"
    PORTUGUESE = "Portuguese"
    SPANISH = "Spanish"


MIN_CLASSIFIER_LENGTH = 10
HEURISTIC_THRESHOLD = 1.5

ISO_CODES = {
    "en": Language.ENGLISH,
    "eng": Language.ENGLISH,
    "pt": Language.PORTUGUESE,
    "por": Language.PORTUGUESE,
    "es": Language.SPANISH,
    "spa": Language.SPANISH,
}

PT_CHARACTERS = set("éãõçáêôúíóàèìòù")
PT_FUNCTION_WORDS = {
    "o", "a", "de", "que", "e", "do", "da", "em", "um", "para", "com", "não", "uma", "os", "no", "se",
    "na", "por", "mais", "as", "dos", "como", "mas", "foi", "ao", "ele", "das", "tem", "à", "seu", "sua",
    "ou", "ser", "quando", "muito", "há", "nos", "já", "está", "eu", "também", "só", "pelo", "pela",
    "até", "isso", "ela", "entre", "era", "depois", "sem", "mesmo", "aos", "ter", "seus", "suas",
    "numa", "pelos", "pelas", "havia", "seja", "qual", "será", "nós", "tenho", "lhe", "deles",
    "essas", "esses",
}
PT_DOMAIN_WORDS = {
    "bardo", "taverna", "mago", "torre", "artefato", "guilda", "ladrão", "missão", "personagem",
    "ambiente", "herói", "vilão", "espada", "magia", "feitiço", "dragão", "elfo", "anão",
}

ES_CHARACTERS = set("ñáéíóúü¿¡")
ES_FUNCTION_WORDS = {
    "el", "la", "de", "que", "y", "a", "en", "un", "ser", "se", "no", "haber", "por", "con", "su",
    "para", "como", "estar", "tener", "le", "lo", "todo", "pero", "más", "hacer", "o", "poder", "decir",
    "este", "ir", "otro", "ese", "si", "me", "ya", "ver", "porque", "dar", "cuando", "él", "muy", "sin",
    "vez", "mucho", "saber", "qué", "sobre", "mi", "alguno", "mismo", "yo", "también", "hasta", "año",
    "dos", "querer", "entre", "así", "primero", "desde", "grande", "eso", "ni", "nos", "llegar", "pasar",
    "tiempo", "ella", "sí", "día", "uno", "bien", "poco", "deber", "entonces", "poner", "cosa", "tanto",
    "hombre", "parecer", "nuestro", "tan", "donde", "ahora", "parte", "después", "vida", "quedar",
    "siempre", "creer", "hablar", "llevar", "dejar", "nada", "cada", "seguir", "menos", "nuevo",
    "encontrar", "algo", "solo",
}
ES_DOMAIN_WORDS = {
    "bardo", "taberna", "mago", "torre", "artefacto", "gremio", "ladrón", "misión", "personaje",
    "entorno", "héroe", "villano", "espada", "magia", "hechizo", "dragón", "elfo", "enano",
}

_PUNCTUATION = re.compile(r"[.,!?;:()\[\]{}'\"]")


class LanguageClassifier(ABC):
    """통계 기반 언어 분류기 (ISO 코드 반환, 판별 불가 시 None)"""

    @abstractmethod
    def classify(self, text: str) -> Optional[str]:
        pass


class LangdetectClassifier(LanguageClassifier):
    def __init__(self):
        from langdetect import DetectorFactory, detect
        from langdetect.lang_detect_exception import LangDetectException

        # fixed seed: same input, same answer
        DetectorFactory.seed = 0
        self._detect = detect
        self._undetermined = LangDetectException

    def classify(self, text: str) -> Optional[str]:
        try:
            return self._detect(text)
        except self._undetermined:
            return None


class LanguageClassifierHandle:
    """선택적 분류기 핸들 (한 번만 초기화)
    라이브러리가 없으면 비어 있고 감지기는 휴리스틱 사용
    """

    def __init__(self, factory: Callable[[], LanguageClassifier] = LangdetectClassifier, enabled: bool = True):
        self._factory = factory
        self._enabled = enabled
        self._lock = threading.Lock()
        self._initialized = False
        self._classifier: Optional[LanguageClassifier] = None

    def get(self) -> Optional[LanguageClassifier]:
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    self._classifier = self._load()
                    self._initialized = True
        return self._classifier

    def is_available(self) -> bool:
        return self.get() is not None

    def _load(self) -> Optional[LanguageClassifier]:
        if not self._enabled:
            logger.info("언어 분류기 비활성화 설정, 휴리스틱 사용")
            return None
        try:
            return self._factory()
        except ImportError as e:
            logger.warning(f"언어 분류기 사용 불가, 휴리스틱으로 감지: {str(e)}")
            return None


_classifier_handle: Optional[LanguageClassifierHandle] = None
_handle_lock = threading.Lock()


def get_classifier_handle() -> LanguageClassifierHandle:
    """프로세스 단위 분류기 핸들"""
    global _classifier_handle
    if _classifier_handle is None:
        with _handle_lock:
            if _classifier_handle is None:
                from config.settings import get_settings
                _classifier_handle = LanguageClassifierHandle(enabled=get_settings().LANGUAGE_CLASSIFIER_ENABLED)
    return _classifier_handle


class LanguageDetector:
    def __init__(self, classifier_handle: Optional[LanguageClassifierHandle] = None):
        self.classifier_handle = classifier_handle or get_classifier_handle()

    def detect(self, text: Optional[str]) -> Language:
        if not text or not text.strip():
            logger.debug("[Language Detection] 빈 텍스트, English 사용")
            return Language.ENGLISH

        trimmed = text.strip()
        if len(trimmed) < MIN_CLASSIFIER_LENGTH:
            logger.debug(f"[Language Detection] 짧은 텍스트, 휴리스틱 사용: {trimmed[:30]}")
            return self.detect_heuristic(text)

        classifier = self.classifier_handle.get()
        if classifier is not None:
            code = classifier.classify(trimmed)
            logger.debug(f"[Language Detection] 분류기 결과 {code}: {trimmed[:50]}")
            if code and code.lower() in ISO_CODES:
                return ISO_CODES[code.lower()]
            logger.debug(f"[Language Detection] 지원하지 않는 결과 {code}, 휴리스틱 사용")

        return self.detect_heuristic(text)

    @staticmethod
    def detect_heuristic(text: Optional[str]) -> Language:
        if not text or not text.strip():
            return Language.ENGLISH

        text_lower = text.lower()
        words = [_PUNCTUATION.sub("", w) for w in text_lower.split()]

        pt_score = 0
        es_score = 0
        for char in text_lower:
            if char in PT_CHARACTERS:
                pt_score += 3
            if char in ES_CHARACTERS:
                es_score += 3
        for word in words:
            if word in PT_FUNCTION_WORDS:
                pt_score += 2
            if word in PT_DOMAIN_WORDS:
                pt_score += 5
            if word in ES_FUNCTION_WORDS:
                es_score += 2
            if word in ES_DOMAIN_WORDS:
                es_score += 5

        divisor = max(len(text_lower) / 50, 1)
        pt_normalized = pt_score / divisor
        es_normalized = es_score / divisor

        if pt_normalized > es_normalized and pt_normalized > HEURISTIC_THRESHOLD:
            logger.debug(f"[Language Detection] 휴리스틱 Portuguese (pt: {pt_normalized:.2f} es: {es_normalized:.2f})")
            return Language.PORTUGUESE
        if es_normalized > pt_normalized and es_normalized > HEURISTIC_THRESHOLD:
            logger.debug(f"[Language Detection] 휴리스틱 Spanish (pt: {pt_normalized:.2f} es: {es_normalized:.2f})")
            return Language.SPANISH

        logger.debug(f"[Language Detection] 휴리스틱 기본값 English (pt: {pt_normalized:.2f} es: {es_normalized:.2f})")
        return Language.ENGLISH
