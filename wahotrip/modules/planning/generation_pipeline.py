"""
modules/planning/generation_pipeline.py
---------------------------------------
One generation cycle: preferences in, a non-empty package list out.

  1. fetch resources           ResourceTool (per-table failures → empty rows)
  2. build prompt              PromptBuilder (token ceiling, reduced retry)
  3. complete                  LLMClient (failure is a value, not an exception)
  4. repair + parse            parse_completion
  5. assemble                  ItineraryAssembler (normalise, backfill, reconcile, cost)

Any failure in 3-5, an empty package list, or an empty attraction table sends
the cycle to FallbackGenerator, which always succeeds. The only way this
raises is an unexpected exception; the API layer reports that with a retry
and a manual-planning escape hatch.

Each step is logged as a JSONL event under the session id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from wahotrip.llm import LLMClient, make_llm_client
from wahotrip.modules.observability import logger as events_log
from wahotrip.modules.observability.logger import StructuredLogger
from wahotrip.modules.planning.assembler import ItineraryAssembler
from wahotrip.modules.planning.fallback_generator import FallbackGenerator
from wahotrip.modules.planning.prompt_builder import PromptBuilder
from wahotrip.modules.planning.response_parser import parse_completion
from wahotrip.modules.planning.seeded_random import SeededRandom, time_seed
from wahotrip.modules.tool_usage.resource_tool import ResourceTool
from wahotrip.schemas.itinerary import GenerationMethod, ItineraryPackage
from wahotrip.schemas.preferences import TravelPreferences
from wahotrip.schemas.resources import ResourceBundle

logger = logging.getLogger(__name__)


@dataclass
class GenerationOutcome:
    packages: list[ItineraryPackage]
    method: GenerationMethod
    seed: int
    fallback_reason: str = ""     # why the AI path was abandoned; empty on AI success
    prompt_tokens: int = 0

    @property
    def used_fallback(self) -> bool:
        return self.method is GenerationMethod.RANDOM

    def to_dict(self) -> dict:
        return {
            "generationMethod": self.method.value,
            "seed": self.seed,
            "fallbackReason": self.fallback_reason,
            "packages": [p.to_dict() for p in self.packages],
        }


class GenerationPipeline:
    def __init__(
        self,
        llm: Optional[LLMClient] = None,
        resource_tool: Optional[ResourceTool] = None,
        events: Optional[StructuredLogger] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        self._llm = llm or make_llm_client()
        self._resource_tool = resource_tool or ResourceTool()
        self._events = events or StructuredLogger()
        self._prompt_builder = prompt_builder or PromptBuilder()

    def run(
        self,
        session_id: str,
        prefs: TravelPreferences,
        seed: Optional[int] = None,
    ) -> GenerationOutcome:
        seed = time_seed() if seed is None else seed
        self._events.log(session_id, events_log.GENERATION_START, {
            "trip_days": prefs.trip_duration,
            "emirates": prefs.emirates,
            "traveler_type": prefs.traveler_type,
            "seed": seed,
        })

        resources = self._resource_tool.fetch_all(prefs.emirates)
        self._events.log(session_id, events_log.RESOURCES_FETCHED, {
            "attractions": len(resources.attractions),
            "hotels": len(resources.hotels),
            "transport": len(resources.transport),
        })

        if not resources.attractions:
            return self._fallback(session_id, prefs, resources, seed, "No attraction rows available")

        # ── AI path ───────────────────────────────────────────────────────
        prompt = self._prompt_builder.build(prefs, resources)
        self._events.log(session_id, events_log.PROMPT_BUILT, {
            "estimated_tokens": prompt.estimated_tokens,
            "attractions": prompt.attraction_count,
            "long_trip": prompt.long_trip,
            "reduced": prompt.reduced,
        })

        completion = self._llm.complete(prompt.text)
        if not completion.success:
            self._events.log(session_id, events_log.COMPLETION_FAILED, {
                "error": completion.error,
                "finish_reason": completion.finish_reason,
            })
            return self._fallback(session_id, prefs, resources, seed, completion.error,
                                  prompt.estimated_tokens)

        parsed = parse_completion(completion.content)
        if not parsed.ok:
            self._events.log(session_id, events_log.PARSE_FAILED, {
                "error": parsed.error,
                "content_chars": len(completion.content),
            })
            return self._fallback(session_id, prefs, resources, seed, parsed.error,
                                  prompt.estimated_tokens)

        assembler = ItineraryAssembler(resources, SeededRandom(seed))
        packages = assembler.assemble(parsed.packages or [], prefs.trip_duration)
        if not packages:
            return self._fallback(session_id, prefs, resources, seed, "Completion produced no packages",
                                  prompt.estimated_tokens)

        self._complete(session_id, packages, GenerationMethod.AI)
        return GenerationOutcome(packages, GenerationMethod.AI, seed,
                                 prompt_tokens=prompt.estimated_tokens)

    # ── internals ─────────────────────────────────────────────────────────

    def _fallback(
        self,
        session_id: str,
        prefs: TravelPreferences,
        resources: ResourceBundle,
        seed: int,
        reason: str,
        prompt_tokens: int = 0,
    ) -> GenerationOutcome:
        logger.warning("Session %s: using fallback generation (%s)", session_id, reason)
        self._events.log(session_id, events_log.FALLBACK_USED, {"reason": reason})
        packages = FallbackGenerator(resources, seed).generate(prefs)
        self._complete(session_id, packages, GenerationMethod.RANDOM)
        return GenerationOutcome(packages, GenerationMethod.RANDOM, seed, reason, prompt_tokens)

    def _complete(self, session_id: str, packages: list[ItineraryPackage], method: GenerationMethod) -> None:
        self._events.log(session_id, events_log.GENERATION_COMPLETE, {
            "method": method.value,
            "packages": len(packages),
            "totals": [p.total_cost for p in packages],
        })
        logger.info("Session %s: %d %s packages generated", session_id, len(packages), method.value)
