"""
Intent set and keyword classifier for the Mitra coordinator

The coordinator only ever receives a structured {intent, arguments} pair.
KeywordIntentClassifier is the default collaborator that produces one from
free text so the chat endpoint works without a language model; callers with
their own classifier send the pair directly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import logging
import re

from ..core.errors import UnsupportedIntentError
from ..core.models import AgentKind


class Intent(str, Enum):
    """The closed set of supported intents"""
    LOG_WORKOUT = "log_workout"
    ADD_TASK = "add_task"
    LOG_FINANCE = "log_finance"
    WRITE_JOURNAL = "write_journal"
    ADD_MEDICATION = "add_medication"
    ADD_HABIT = "add_habit"
    GENERATE_SCHEDULE = "generate_schedule"

    @classmethod
    def from_name(cls, name: str) -> 'Intent':
        """
        Resolve an intent name.

        Raises:
            UnsupportedIntentError: if the name is not a supported intent
        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedIntentError(name)


# Intent -> owning agent. GENERATE_SCHEDULE is handled by the coordinator.
INTENT_ROUTES: Dict[Intent, AgentKind] = {
    Intent.LOG_WORKOUT: AgentKind.FITNESS,
    Intent.ADD_TASK: AgentKind.TASK,
    Intent.LOG_FINANCE: AgentKind.FINANCE,
    Intent.WRITE_JOURNAL: AgentKind.JOURNAL,
    Intent.ADD_MEDICATION: AgentKind.HEALTHCARE,
    Intent.ADD_HABIT: AgentKind.LIFESTYLE,
}

COORDINATOR_INTENTS = frozenset({Intent.GENERATE_SCHEDULE})


@dataclass
class ClassifiedIntent:
    """An intent name with the structured arguments extracted for it"""
    intent_name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


class KeywordIntentClassifier:
    """
    Pattern-based intent classifier.

    Every pattern that matches scores its own length; the longest matching
    pattern wins, so specific phrases beat single keywords.
    """

    INTENT_PATTERNS = {
        Intent.GENERATE_SCHEDULE: [
            r"\bplan\s+my\s+day\b", r"\bmy\s+schedule\b",
            r"\b(?:generate|make|create|build)\s+(?:a\s+|my\s+)?schedule\b",
            r"\bschedule\s+(?:for\s+)?today\b", r"\bwhat(?:'s|s)?\s+my\s+day\b",
        ],
        Intent.ADD_MEDICATION: [
            r"\bmedication\b", r"\bmedicine\b", r"\bpills?\b", r"\btablets?\b",
            r"\bremind\s+me\s+to\s+take\b", r"\btake\s+(?:my\s+)?\w+\s+(?:in\s+the\s+|at\s+)?(?:morning|afternoon|evening|night)\b",
        ],
        Intent.LOG_WORKOUT: [
            r"\bworkout\b", r"\bworked\s+out\b", r"\bgym\b", r"\bexercise\b",
            r"\b\d+\s*x\s*\d+\b", r"\b\d+\s+sets?\b", r"\b\d+\s+reps?\b",
            r"\b(?:bench(?:\s+press)?|squats?|deadlifts?|pull-?ups?|push-?ups?)\b",
            r"\bpersonal\s+record\b", r"\bnew\s+pr\b",
        ],
        Intent.LOG_FINANCE: [
            r"\bspent\b", r"\bpaid\b", r"\bbought\b", r"\bexpense\b",
            r"\bearned\b", r"\breceived\b", r"\bincome\b", r"\bsalary\b",
        ],
        Intent.WRITE_JOURNAL: [
            r"\bjournal\b", r"\bdear\s+diary\b", r"\btoday\s+i\s+felt\b",
            r"\bi(?:'m|\s+am)\s+feeling\b", r"\breflect(?:ion)?\b",
        ],
        Intent.ADD_HABIT: [
            r"\bhabit\b", r"\bstart\s+(?:a\s+)?routine\b", r"\bevery\s+day\s+i\s+want\s+to\b",
        ],
        Intent.ADD_TASK: [
            r"\badd\s+(?:a\s+)?task\b", r"\bnew\s+task\b", r"\bcreate\s+(?:a\s+)?task\b",
            r"\btodo\b", r"\bto-do\b", r"\bremind\s+me\s+to\b",
            r"\bneed\s+to\b", r"\bhave\s+to\b", r"\bgotta\b",
        ],
    }

    TIMES_OF_DAY = ("morning", "afternoon", "evening", "night")

    MOODS = {
        "happy": ["happy", "great", "good", "excited", "grateful"],
        "sad": ["sad", "down", "lonely", "upset"],
        "anxious": ["anxious", "stressed", "worried", "nervous"],
        "tired": ["tired", "exhausted", "drained"],
        "angry": ["angry", "frustrated", "annoyed"],
    }

    def __init__(self):
        self.logger = logging.getLogger("agent.classifier")

    def classify(self, text: str) -> Optional[ClassifiedIntent]:
        """
        Classify free text into an intent with arguments.

        Args:
            text: User message

        Returns:
            ClassifiedIntent, or None if nothing matched
        """
        text_lower = (text or "").strip().lower()
        if not text_lower:
            return None

        intent = self._match_intent(text_lower)
        if intent is None:
            self.logger.info("No intent matched")
            return None

        extractor = getattr(self, f"_extract_{intent.value}")
        arguments = extractor(text.strip(), text_lower)
        self.logger.info("Classified intent: %s", intent.value)
        return ClassifiedIntent(intent_name=intent.value, arguments=arguments)

    def _match_intent(self, text_lower: str) -> Optional[Intent]:
        best_match = None
        best_score = 0
        for intent, patterns in self.INTENT_PATTERNS.items():
            for pattern in patterns:
                if re.search(pattern, text_lower):
                    score = len(pattern)
                    if score > best_score:
                        best_score = score
                        best_match = intent
        return best_match

    # =========================================================================
    # Argument extraction
    # =========================================================================

    def _time_of_day(self, text_lower: str, default: str = "morning") -> str:
        for time_of_day in self.TIMES_OF_DAY:
            if time_of_day in text_lower:
                return time_of_day
        if "tonight" in text_lower or "bed" in text_lower:
            return "night"
        return default

    def _strip_prefix(self, text: str, prefixes: List[str]) -> str:
        for prefix in prefixes:
            match = re.match(prefix, text, re.IGNORECASE)
            if match:
                return text[match.end():].strip()
        return text

    def _extract_generate_schedule(self, text: str, text_lower: str) -> Dict[str, Any]:
        return {}

    def _extract_add_medication(self, text: str, text_lower: str) -> Dict[str, Any]:
        medicine = None
        match = re.search(
            r"\b(?:take|taking|medication|medicine|pill|tablet)s?\s+(?:my\s+|the\s+)?([a-z][\w-]*)",
            text_lower,
        )
        if match and match.group(1) not in self.TIMES_OF_DAY + ("in", "at", "every"):
            medicine = match.group(1)
        dose = re.search(r"\b(\d+(?:\.\d+)?\s*(?:mg|ml|g|mcg))\b", text_lower)

        args = {"medicine": medicine, "time": self._time_of_day(text_lower)}
        if dose:
            args["dose"] = dose.group(1)
        return args

    def _extract_log_workout(self, text: str, text_lower: str) -> Dict[str, Any]:
        args: Dict[str, Any] = {}

        sets_reps = re.search(r"\b(\d+)\s*x\s*(\d+)\b", text_lower)
        if sets_reps:
            args["sets"], args["reps"] = sets_reps.group(1), sets_reps.group(2)
        else:
            sets = re.search(r"\b(\d+)\s+sets?\b", text_lower)
            reps = re.search(r"\b(\d+)\s+reps?\b", text_lower)
            if sets:
                args["sets"] = sets.group(1)
            if reps:
                args["reps"] = reps.group(1)

        weight = re.search(r"\b(\d+(?:\.\d+)?)\s*(?:kg|kgs|lbs?|pounds)\b", text_lower)
        if weight:
            args["weight"] = weight.group(1)

        exercise = re.search(
            r"\b(bench(?:\s+press)?|squats?|deadlifts?|pull-?ups?|push-?ups?|run(?:ning)?|cardio|yoga|swim(?:ming)?)\b",
            text_lower,
        )
        args["exercise"] = exercise.group(1) if exercise else "workout"
        args["is_pr"] = "true" if re.search(r"\b(?:pr|personal\s+record|personal\s+best)\b", text_lower) else "false"
        return args

    def _extract_log_finance(self, text: str, text_lower: str) -> Dict[str, Any]:
        amount = re.search(r"[$€£₹]?\s*(\d[\d,]*(?:\.\d+)?)", text)
        item = re.search(r"\b(?:on|for)\s+(?:a\s+|an\s+|the\s+)?([a-z][a-z ]*?)\s*(?:$|[.,!]|\bat\b|\bfrom\b)", text_lower)
        if item is None:
            item = re.search(r"\b(?:bought|paid)\s+(?:a\s+|an\s+|the\s+)?([a-z][a-z ]*?)\s*(?:$|[.,!]|\bfor\b)", text_lower)
        entry_type = "income" if re.search(r"\b(?:earned|received|income|salary)\b", text_lower) else "expense"
        return {
            "item": item.group(1).strip() if item else ("Income" if entry_type == "income" else "Expense"),
            "amount": amount.group(1) if amount else None,
            "type": entry_type,
        }

    def _extract_write_journal(self, text: str, text_lower: str) -> Dict[str, Any]:
        content = self._strip_prefix(text, [r"journal\s*(?:entry)?\s*[:\-]?\s*", r"dear\s+diary\s*[,:\-]?\s*"])
        mood = "neutral"
        for name, words in self.MOODS.items():
            if any(re.search(rf"\b{word}\b", text_lower) for word in words):
                mood = name
                break
        return {"content": content or text, "mood": mood}

    def _extract_add_habit(self, text: str, text_lower: str) -> Dict[str, Any]:
        match = re.search(r"\bhabit\s*[:\-]?\s*(?:of\s+|to\s+)?(.+)$", text, re.IGNORECASE)
        if match is None:
            match = re.search(r"\b(?:want\s+to|start)\s+(.+)$", text, re.IGNORECASE)
        return {"habit": match.group(1).strip().rstrip(".!") if match else text}

    def _extract_add_task(self, text: str, text_lower: str) -> Dict[str, Any]:
        task = self._strip_prefix(text, [
            r"(?:please\s+)?(?:add|create)\s+(?:a\s+)?(?:new\s+)?task\s*(?:to\s+)?[:\-]?\s*",
            r"new\s+task\s*[:\-]?\s*",
            r"(?:todo|to-do)\s*[:\-]?\s*",
            r"remind\s+me\s+to\s+",
            r"i\s+(?:need|have)\s+to\s+",
            r"(?:need|have)\s+to\s+",
            r"gotta\s+",
        ])
        if re.search(r"\b(?:urgent|asap|important|critical)\b", text_lower):
            priority = "high"
        elif re.search(r"\b(?:whenever|someday|eventually|low\s+priority)\b", text_lower):
            priority = "low"
        else:
            priority = "medium"
        return {"task": task.rstrip(".!") or text, "priority": priority}

