"""Fixed 21-parameter assessment taxonomy shared by schemas and core."""

from __future__ import annotations

from dataclasses import dataclass

TAXONOMY_VERSION = "2024.1"
EXPECTED_PARAMETER_COUNT = 21
COMMENT_SUFFIX = "_comments"


@dataclass(frozen=True, slots=True)
class Parameter:
    """Individually rated assessment dimension."""

    id: str
    label: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class Category:
    """Named group of parameters."""

    id: str
    name: str
    icon: str
    color: str
    parameters: tuple[Parameter, ...]

    @property
    def parameter_ids(self) -> tuple[str, ...]:
        return tuple(parameter.id for parameter in self.parameters)


class Taxonomy:
    """Ordered, versioned category/parameter table consulted by every computation."""

    def __init__(self, categories: tuple[Category, ...], *, version: str = TAXONOMY_VERSION) -> None:
        self._categories = categories
        self.version = version
        self._parameters: dict[str, Parameter] = {}
        self._category_of: dict[str, Category] = {}
        for category in categories:
            for parameter in category.parameters:
                if parameter.id in self._parameters:
                    raise ValueError(f"Duplicate parameter id: {parameter.id!r}")
                self._parameters[parameter.id] = parameter
                self._category_of[parameter.id] = category

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    def parameter_ids(self) -> list[str]:
        return list(self._parameters)

    def parameter(self, parameter_id: str) -> Parameter:
        try:
            return self._parameters[parameter_id]
        except KeyError as exc:
            raise KeyError(f"Unknown parameter: {parameter_id!r}") from exc

    def category_for(self, parameter_id: str) -> Category:
        try:
            return self._category_of[parameter_id]
        except KeyError as exc:
            raise KeyError(f"Unknown parameter: {parameter_id!r}") from exc

    def category(self, category_id: str) -> Category:
        for category in self._categories:
            if category.id == category_id:
                return category
        raise KeyError(f"Unknown category: {category_id!r}")

    def __contains__(self, parameter_id: object) -> bool:
        return parameter_id in self._parameters

    def __len__(self) -> int:
        return len(self._parameters)

    @staticmethod
    def comment_field(parameter_id: str) -> str:
        return f"{parameter_id}{COMMENT_SUFFIX}"


ASSESSMENT_TAXONOMY = Taxonomy(
    (
        Category(
            id="trainer_readiness",
            name="Trainer Initial Readiness",
            icon="🎯",
            color="blue",
            parameters=(
                Parameter("logs_in_early", "Early Login", "Trainer logs in a few minutes before the session to host the participants"),
                Parameter("video_always_on", "Video Always On", "Trainer on video at all times for the training"),
                Parameter("minimal_disturbance", "Minimal Disturbance", "Trainer ensured minimal / zero background disturbance"),
                Parameter("presentable_prompt", "Presentable & Prompt", "Trainer looks presentable and prompt for the training session"),
                Parameter("ready_with_tools", "Ready with Tools", "Trainer is ready with content and tools needed for the session"),
            ),
        ),
        Category(
            id="expertise_delivery",
            name="Trainer Expertise & Delivery",
            icon="📚",
            color="green",
            parameters=(
                Parameter("adequate_knowledge", "Subject Knowledge", "Trainer demonstrated adequate knowledge of the subject"),
                Parameter("simplifies_topics", "Simplifies Topics", "Trainer simplified complex topics for the participants"),
                Parameter("encourages_participation", "Encourages Participation", "Trainer encouraged participation"),
                Parameter("handles_questions", "Handles Questions", "Trainer encouraged questions and provided real-time responses"),
                Parameter("provides_context", "Provides Context", "Trainer related learning material to BU / production requirements"),
            ),
        ),
        Category(
            id="engagement_interaction",
            name="Participant Engagement & Interaction",
            icon="👥",
            color="purple",
            parameters=(
                Parameter("maintains_attention", "Maintains Attention", "Trainer kept every participant's attention"),
                Parameter("uses_interactive_tools", "Uses Interactive Tools", "Trainer engaged participants with quiz / polls / activities"),
                Parameter("assesses_learning", "Assesses Learning", "Trainer checked participants' understanding"),
                Parameter("clear_speech", "Clear Speech", "Trainer maintained clarity and an acceptable rate of speech"),
            ),
        ),
        Category(
            id="communication",
            name="Communication Skills",
            icon="💬",
            color="orange",
            parameters=(
                Parameter("minimal_grammar_errors", "Grammar & Language", "Trainer spoke with little / no grammatical errors"),
                Parameter("professional_tone", "Professional Tone", "Trainer kept an energetic, professional tone"),
                Parameter("manages_teams_well", "Manages Teams", "Trainer managed Teams efficiently"),
            ),
        ),
        Category(
            id="technical_acumen",
            name="Technical Acumen",
            icon="⚙️",
            color="indigo",
            parameters=(
                Parameter("efficient_tool_switching", "Tool Switching", "Trainer toggled efficiently between tools during screen share"),
                Parameter("audio_video_clarity", "Audio/Video Clarity", "Trainer ensured audio / video clarity"),
                Parameter("session_recording", "Session Recording", "Trainer recorded the session for participants"),
                Parameter("survey_assignment", "Survey Assignment", "Trainer assigned survey / assessment seamlessly"),
            ),
        ),
    )
)

if len(ASSESSMENT_TAXONOMY) != EXPECTED_PARAMETER_COUNT:  # pragma: no cover - guarded by tests
    raise RuntimeError("Assessment taxonomy must define exactly 21 parameters")

PARAMETER_IDS: tuple[str, ...] = tuple(ASSESSMENT_TAXONOMY.parameter_ids())
CATEGORY_IDS: tuple[str, ...] = tuple(category.id for category in ASSESSMENT_TAXONOMY.categories)
