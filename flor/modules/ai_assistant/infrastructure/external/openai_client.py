# 📄 File: flor/modules/ai_assistant/infrastructure/external/openai_client.py
# 🧭 Purpose (Layman Explanation):
# Writes a care sheet for a plant, either by asking OpenAI or, while developing, by looking
# the plant up in a small built-in care guide.
#
# 🧪 Purpose (Technical Summary):
# Care instruction generator. Mock mode resolves the plant name against a static care table
# (exact, then normalised substring, else a generic entry); real mode calls the chat
# completions API with aiohttp, extracts JSON (tolerating code fences), validates required
# fields, clamps the frequency to [1, 365] and defaults bad watering amounts to "mid".
#
# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - flor.shared.config.settings, flor.shared.core.exceptions
#
# 🔄 Connected Modules / Calls From:
# - flor.modules.ai_assistant.domain.ai_plant_service (wrapped with timeout + retry)

import asyncio
import json
import logging
import re
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from flor.shared.config.settings import Settings, get_settings
from flor.shared.core.exceptions import APITimeoutError, ExternalAPIError

from ...domain.models import CareInstructions, WateringAmount

logger = logging.getLogger(__name__)

API_NAME = "OpenAI"
UNKNOWN_PLANT = "Unknown Plant"

MOCK_CARE: Dict[str, CareInstructions] = {
    "Monstera deliciosa": CareInstructions(
        watering_frequency_days=7,
        watering_amount=WateringAmount.MID,
        light_requirements="Bright indirect light, 6-8 hours daily. Avoid direct sun which can scorch leaves.",
        fertilizing_tips=[
            "Fertilize every 4-6 weeks during spring and summer",
            "Use a balanced liquid fertilizer diluted to half strength",
            "Skip feeding in winter",
        ],
        pruning_tips=[
            "Cut yellow or damaged leaves at the base of the stem",
            "Trim aerial roots if they get unruly",
        ],
        troubleshooting=[
            "Yellow leaves: usually overwatering or too much direct sun",
            "Brown leaf tips: low humidity or underwatering",
            "No leaf splits: give it more light",
        ],
    ),
    "Epipremnum aureum": CareInstructions(
        watering_frequency_days=7,
        watering_amount=WateringAmount.MID,
        light_requirements="Tolerates low to bright indirect light. Grows faster in brighter spots.",
        fertilizing_tips=[
            "Fertilize monthly during the growing season",
            "Stop fertilizing over winter",
        ],
        pruning_tips=[
            "Pinch stems back to keep it bushy",
            "Root cuttings in water to propagate",
        ],
        troubleshooting=[
            "Yellow leaves: overwatering or root issues",
            "Leggy vines: not enough light",
        ],
    ),
    "Sansevieria trifasciata": CareInstructions(
        watering_frequency_days=14,
        watering_amount=WateringAmount.LOW,
        light_requirements="Anything from low light to bright indirect light; tolerates some direct sun.",
        fertilizing_tips=["Feed lightly 2-3 times during spring and summer"],
        pruning_tips=["Remove damaged leaves at soil level"],
        troubleshooting=[
            "Mushy base: overwatering, let the soil dry out completely",
            "Wrinkled leaves: underwatering",
        ],
    ),
    "Chlorophytum comosum": CareInstructions(
        watering_frequency_days=5,
        watering_amount=WateringAmount.MID,
        light_requirements="Bright, indirect light. Can tolerate some shade.",
        fertilizing_tips=["Fertilize every 2-3 weeks in the growing season"],
        pruning_tips=["Trim brown tips with clean scissors", "Remove plantlets to propagate"],
        troubleshooting=["Brown tips: tap water chemicals, try filtered water"],
    ),
    "Ficus elastica": CareInstructions(
        watering_frequency_days=10,
        watering_amount=WateringAmount.LOW,
        light_requirements="Bright indirect light; a few hours of gentle morning sun is fine.",
        fertilizing_tips=["Fertilize monthly in spring and summer"],
        pruning_tips=["Prune in spring to shape; wear gloves, the sap irritates skin"],
        troubleshooting=["Dropping leaves: sudden temperature change or overwatering"],
    ),
    "Zamioculcas zamiifolia": CareInstructions(
        watering_frequency_days=14,
        watering_amount=WateringAmount.LOW,
        light_requirements="Low to bright indirect light. Avoid harsh direct sun.",
        fertilizing_tips=["Feed every 2 months during the growing season"],
        pruning_tips=["Remove yellow stems at the base"],
        troubleshooting=["Yellow stems: overwatering, check the rhizomes for rot"],
    ),
    "Spathiphyllum wallisii": CareInstructions(
        watering_frequency_days=5,
        watering_amount=WateringAmount.HEAVY,
        light_requirements="Medium to low indirect light. Direct sun burns the leaves.",
        fertilizing_tips=["Fertilize every 6 weeks in spring and summer"],
        pruning_tips=["Cut spent flower stalks at the base"],
        troubleshooting=["Drooping: thirsty, water thoroughly", "No flowers: more light"],
    ),
    UNKNOWN_PLANT: CareInstructions(
        watering_frequency_days=7,
        watering_amount=WateringAmount.MID,
        light_requirements="Prefers bright, indirect light.",
        fertilizing_tips=[
            "Fertilize every 4-6 weeks during the growing season",
            "Use a balanced, water-soluble fertilizer at half strength",
        ],
        pruning_tips=[
            "Remove dead or yellowing leaves regularly",
            "Prune to control size and shape as needed",
        ],
        troubleshooting=[
            "Yellow leaves: check watering and drainage",
            "Slow growth: ensure adequate light and nutrients",
            "Pests: watch for common houseplant pests",
        ],
    ),
}

CARE_PROMPT = """Generate comprehensive care instructions for the plant: "{plant_name}"

Respond with ONLY a valid JSON object (no markdown) with this exact structure:
{{
  "wateringFrequencyDays": <number between 1-30>,
  "wateringAmount": <one of "low", "mid", "heavy">,
  "lightRequirements": "<string describing light needs>",
  "fertilizingTips": ["<tip1>", "<tip2>", "<tip3>", "<tip4>"],
  "pruningTips": ["<tip1>", "<tip2>", "<tip3>", "<tip4>"],
  "troubleshooting": ["<issue1>", "<issue2>", "<issue3>", "<issue4>"]
}}

Be specific to this plant species. Use "low" for drought-tolerant plants, "mid" for typical
houseplants and "heavy" for water-loving plants."""

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def normalize_plant_name(name: str) -> str:
    return re.sub(r"[-_\s]+", " ", name.lower()).strip()


def lookup_mock_care(plant_name: str) -> CareInstructions:
    """Exact match, then substring match either way, then the generic entry."""
    care = MOCK_CARE.get(plant_name)
    if care is not None:
        return care

    normalized = normalize_plant_name(plant_name)
    if normalized:
        for key, value in MOCK_CARE.items():
            key_lower = key.lower()
            if normalized in key_lower or key_lower in normalized:
                return value

    return MOCK_CARE[UNKNOWN_PLANT]


def extract_json(content: str) -> str:
    """Strip markdown code fences around a JSON answer, if any."""
    content = content.strip()
    match = _FENCED_JSON.search(content)
    return match.group(1).strip() if match else content


def parse_care_payload(payload: Dict[str, Any]) -> CareInstructions:
    """
    Validate a model answer and coerce it into CareInstructions.

    Raises:
        ExternalAPIError: If a required field is missing
    """
    required_lists = ("fertilizingTips", "pruningTips", "troubleshooting")
    if (
        not payload.get("wateringFrequencyDays")
        or not payload.get("lightRequirements")
        or not all(isinstance(payload.get(key), list) for key in required_lists)
    ):
        raise ExternalAPIError("Missing required fields in API response", api_name=API_NAME)

    try:
        frequency = int(payload["wateringFrequencyDays"])
    except (TypeError, ValueError):
        raise ExternalAPIError("Invalid wateringFrequencyDays in API response", api_name=API_NAME)

    amount = payload.get("wateringAmount")
    if amount not in {a.value for a in WateringAmount}:
        amount = WateringAmount.MID.value

    return CareInstructions(
        watering_frequency_days=max(1, min(365, frequency)),
        watering_amount=WateringAmount(amount),
        light_requirements=str(payload["lightRequirements"]),
        fertilizing_tips=[str(tip) for tip in payload["fertilizingTips"]],
        pruning_tips=[str(tip) for tip in payload["pruningTips"]],
        troubleshooting=[str(item) for item in payload["troubleshooting"]],
    )


class OpenAICareClient:
    """Care instruction generation through OpenAI chat completions."""

    def __init__(
        self,
        use_real_api: bool = False,
        api_key: Optional[str] = None,
        api_url: str = "https://api.openai.com/v1/chat/completions",
        model: str = "gpt-4o-mini",
        max_tokens: int = 500,
        mock_delay_seconds: float = 2.0,
        request_timeout_seconds: float = 60.0,
    ):
        self.use_real_api = use_real_api
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.max_tokens = max_tokens
        self.mock_delay_seconds = mock_delay_seconds
        self.request_timeout_seconds = request_timeout_seconds

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "OpenAICareClient":
        settings = settings or get_settings()
        return cls(
            use_real_api=settings.USE_REAL_OPENAI_API,
            api_key=settings.OPENAI_API_KEY,
            api_url=settings.OPENAI_API_URL,
            model=settings.OPENAI_MODEL,
            max_tokens=settings.OPENAI_MAX_TOKENS,
            mock_delay_seconds=settings.AI_MOCK_DELAY_SECONDS,
            request_timeout_seconds=settings.AI_REQUEST_TIMEOUT_SECONDS,
        )

    async def generate(self, plant_name: str) -> CareInstructions:
        if self.use_real_api:
            return await self._generate_with_api(plant_name)

        if self.mock_delay_seconds > 0:
            await asyncio.sleep(self.mock_delay_seconds)
        return lookup_mock_care(plant_name)

    async def _generate_with_api(self, plant_name: str) -> CareInstructions:
        if not self.api_key:
            raise ExternalAPIError(
                "OPENAI_API_KEY is not set. Set USE_REAL_OPENAI_API=false to use mocked data.",
                api_name=API_NAME
            )

        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": CARE_PROMPT.format(plant_name=plant_name)}],
            "temperature": 0.7,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

        try:
            async with aiohttp.ClientSession(timeout=ClientTimeout(total=self.request_timeout_seconds)) as session:
                async with session.post(self.api_url, json=body, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise ExternalAPIError(
                            f"OpenAI API error ({response.status}): {error_text[:200]}",
                            api_name=API_NAME,
                            status_code=response.status
                        )
                    data = await response.json()

        except asyncio.TimeoutError as e:
            raise APITimeoutError("OpenAI request timed out", api_name=API_NAME) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ExternalAPIError("Invalid response format from OpenAI API", api_name=API_NAME)

        try:
            payload = json.loads(extract_json(content))
        except json.JSONDecodeError:
            logger.error(f"Unparseable care instructions for {plant_name!r}: {content[:200]}")
            raise ExternalAPIError("Failed to parse OpenAI API response as JSON", api_name=API_NAME)

        if not isinstance(payload, dict):
            raise ExternalAPIError("Invalid response format from OpenAI API", api_name=API_NAME)

        return parse_care_payload(payload)
