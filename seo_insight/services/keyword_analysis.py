from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import List, Tuple

from seo_insight.ports.llm import ModelInvoker
from seo_insight.domain.errors import KeywordAnalysisError
from seo_insight.domain.models import AnalysisRun, AnalysisState, KeywordRecord
from seo_insight.services.prompt_builder import AnalysisStage, build_prompt
from seo_insight.services.response_extractor import extract_keywords
from seo_insight.services.url_normalization import UrlNormalizer

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = (
    "Si è verificato un errore durante l'analisi. Assicurati che l'URL sia corretto e riprova."
)


class KeywordAnalysisService:
    """
    Service layer: owns the single active AnalysisRun and its state machine.

    IDLE -> ANALYZING_CURRENT -> ANALYZING_POTENTIAL -> COMPLETE
    Either analyzing state -> ERROR. COMPLETE/ERROR -> ANALYZING_CURRENT on a new submit.
    """

    def __init__(
        self,
        model_invoker: ModelInvoker,
        url_normalizer: UrlNormalizer,
        *,
        keyword_count: int = 20,
        search_grounding: bool = True,
    ):
        self.model_invoker = model_invoker
        self.url_normalizer = url_normalizer
        self.keyword_count = keyword_count
        self.search_grounding = search_grounding

        self._lock = threading.Lock()
        self._state = AnalysisState.IDLE
        self._run = AnalysisRun()

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def run(self) -> AnalysisRun:
        return self._run

    def snapshot(self) -> Tuple[AnalysisState, AnalysisRun]:
        with self._lock:
            return self._state, self._run

    def fetch_keywords(self, stage: AnalysisStage, url: str) -> List[KeywordRecord]:
        prompt = build_prompt(stage, url, self.keyword_count)
        raw_text = self.model_invoker.invoke(prompt, enable_search_grounding=self.search_grounding)
        return extract_keywords(raw_text)

    def submit(self, raw_url: str) -> bool:
        """Runs both stages in the caller's thread. False when nothing was started."""
        url = self._begin(raw_url)
        if url is None:
            return False
        self._run_stages(url)
        return True

    def submit_async(self, raw_url: str) -> bool:
        """Admits the run synchronously, then runs both stages on a daemon thread."""
        url = self._begin(raw_url)
        if url is None:
            return False
        threading.Thread(target=self._run_stages, args=(url,), name="keyword-analysis", daemon=True).start()
        return True

    def _begin(self, raw_url: str) -> str | None:
        url = self.url_normalizer.normalize(raw_url)
        if not url:
            return None

        with self._lock:
            if self._state.is_active:
                logger.info("Submit ignored, run already active for %s", self._run.url)
                return None
            # New submission replaces the previous run wholesale.
            self._run = AnalysisRun(url=url)
            self._state = AnalysisState.ANALYZING_CURRENT

        logger.info("Analysis started url=%s", url)
        return url

    def _transition(self, state: AnalysisState, **changes) -> None:
        with self._lock:
            self._run = replace(self._run, **changes)
            self._state = state

    def _run_stages(self, url: str) -> None:
        try:
            current = self.fetch_keywords(AnalysisStage.CURRENT_TRAFFIC, url)
            logger.info("Current traffic keywords url=%s count=%d", url, len(current))
            self._transition(AnalysisState.ANALYZING_POTENTIAL, current_keywords=tuple(current))

            potential = self.fetch_keywords(AnalysisStage.POTENTIAL_GAP, url)
            logger.info("Potential keywords url=%s count=%d", url, len(potential))
            self._transition(AnalysisState.COMPLETE, potential_keywords=tuple(potential))
        except KeywordAnalysisError:
            logger.exception("Analysis failed url=%s state=%s", url, self._state.value)
            self._transition(AnalysisState.ERROR, error=GENERIC_ERROR_MESSAGE)
        except Exception:
            # The run must never stay parked in an analyzing state.
            logger.exception("Unexpected failure url=%s state=%s", url, self._state.value)
            self._transition(AnalysisState.ERROR, error=GENERIC_ERROR_MESSAGE)
