# 📄 File: flor/modules/ai_assistant/infrastructure/external/plantnet_client.py
# 🧭 Purpose (Layman Explanation):
# Figures out which plant is in a photo, either by asking the PlantNet service or, while
# developing, by picking a realistic answer from a built-in list of common houseplants.
#
# 🧪 Purpose (Technical Summary):
# PlantNet identification client. Mock mode (default) sleeps a configurable delay and
# returns a random species with confidence in [0.8, 1.0]; real mode POSTs the image as
# multipart/form-data with aiohttp and maps the top result. HTTP and transport failures
# become ExternalAPIError / APITimeoutError.
#
# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - flor.shared.config.settings (feature flag, key, endpoint)
# - flor.shared.core.exceptions
#
# 🔄 Connected Modules / Calls From:
# - flor.modules.ai_assistant.domain.ai_plant_service (wrapped with timeout + retry)

import asyncio
import logging
import random
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
from aiohttp import ClientTimeout

from flor.shared.config.settings import Settings, get_settings
from flor.shared.core.exceptions import APITimeoutError, ExternalAPIError

from ...domain.models import PlantIdentificationResult

logger = logging.getLogger(__name__)

API_NAME = "PlantNet"

# (scientific name, common names, base score)
MOCK_SPECIES: List[Tuple[str, List[str], float]] = [
    ("Monstera deliciosa Liebm.", ["Monstera", "Swiss Cheese Plant", "Splitting Philodendron"], 0.92),
    ("Epipremnum aureum (Linden & André) G.S.Bunting", ["Pothos", "Devil's Ivy", "Golden Pothos"], 0.88),
    ("Dracaena trifasciata (Prain) Mabb.", ["Snake Plant", "Mother-in-law's Tongue"], 0.95),
    ("Chlorophytum comosum (Thunb.) Jacques", ["Spider Plant", "Ribbon Plant", "Airplane Plant"], 0.89),
    ("Philodendron hederaceum Schott", ["Heartleaf Philodendron", "Philodendron"], 0.87),
    ("Ficus elastica Roxb. ex Hornem.", ["Rubber Plant", "Rubber Fig"], 0.91),
    ("Spathiphyllum wallisii Rég.", ["Peace Lily", "Spath", "White Flag Plant"], 0.86),
    ("Ficus lyrata Warb.", ["Fiddle Leaf Fig", "Fiddle Fig"], 0.93),
    ("Zamioculcas zamiifolia (Lodd.) Engl.", ["ZZ Plant", "Zamioculcas"], 0.90),
    ("Pilea peperomioides Diels", ["Chinese Money Plant", "Pilea", "Pancake Plant"], 0.84),
    ("Calathea orbifolia (Linden) H.Kennedy", ["Calathea", "Prayer Plant"], 0.82),
    ("Dypsis lutescens (H.Wendl.) Beentje & J.Dransf.", ["Areca Palm", "Butterfly Palm"], 0.85),
    ("Echeveria pulvinata Rose", ["Echeveria", "Succulent"], 0.79),
    ("Phalaenopsis amabilis (L.) Blume", ["Moth Orchid", "Phalaenopsis", "Orchid"], 0.88),
    ("Nephrolepis exaltata (L.) Schott", ["Boston Fern", "Sword Fern"], 0.81),
    ("Aloe barbadensis Mill.", ["Aloe Vera", "Aloe"], 0.94),
]

MIN_MOCK_CONFIDENCE = 0.8
MAX_MOCK_CONFIDENCE = 1.0


class PlantNetClient:
    """
    Plant identification through PlantNet.

    Args:
        use_real_api: Call PlantNet instead of the mock table
        api_key: PlantNet API key (real mode only)
        api_url: Identification endpoint
        mock_delay_seconds: Simulated latency in mock mode
        request_timeout_seconds: aiohttp total timeout in real mode
        rng: Random source for mock answers
    """

    def __init__(
        self,
        use_real_api: bool = False,
        api_key: Optional[str] = None,
        api_url: str = "https://my-api.plantnet.org/v2/identify/all",
        mock_delay_seconds: float = 2.0,
        request_timeout_seconds: float = 60.0,
        rng: Optional[random.Random] = None,
    ):
        self.use_real_api = use_real_api
        self.api_key = api_key
        self.api_url = api_url
        self.mock_delay_seconds = mock_delay_seconds
        self.request_timeout_seconds = request_timeout_seconds
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PlantNetClient":
        settings = settings or get_settings()
        return cls(
            use_real_api=settings.USE_REAL_PLANTNET_API,
            api_key=settings.PLANTNET_API_KEY,
            api_url=settings.PLANTNET_API_URL,
            mock_delay_seconds=settings.AI_MOCK_DELAY_SECONDS,
            request_timeout_seconds=settings.AI_REQUEST_TIMEOUT_SECONDS,
        )

    async def identify(self, image_data: bytes) -> PlantIdentificationResult:
        if self.use_real_api:
            return await self._identify_with_api(image_data)
        return await self._identify_mocked()

    async def _identify_mocked(self) -> PlantIdentificationResult:
        if self.mock_delay_seconds > 0:
            await asyncio.sleep(self.mock_delay_seconds)

        scientific_name, common_names, score = self._rng.choice(MOCK_SPECIES)
        variance = 0.95 + self._rng.random() * 0.08
        confidence = min(MAX_MOCK_CONFIDENCE, max(MIN_MOCK_CONFIDENCE, score * variance))

        return PlantIdentificationResult(
            scientific_name=scientific_name,
            common_names=list(common_names),
            confidence=round(confidence, 2),
        )

    async def _identify_with_api(self, image_data: bytes) -> PlantIdentificationResult:
        if not self.api_key:
            raise ExternalAPIError(
                "PLANTNET_API_KEY is not set. Set USE_REAL_PLANTNET_API=false to use mocked data.",
                api_name=API_NAME
            )

        form = aiohttp.FormData()
        form.add_field("images", image_data, filename="plant.jpg", content_type="image/jpeg")
        form.add_field("organs", "auto")

        params = {"api-key": self.api_key, "lang": "en", "include-related-images": "false"}

        try:
            async with aiohttp.ClientSession(timeout=ClientTimeout(total=self.request_timeout_seconds)) as session:
                async with session.post(self.api_url, data=form, params=params) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise ExternalAPIError(
                            f"PlantNet API error ({response.status}): {error_text[:200]}",
                            api_name=API_NAME,
                            status_code=response.status
                        )
                    data = await response.json()

        except asyncio.TimeoutError as e:
            raise APITimeoutError("PlantNet request timed out", api_name=API_NAME) from e

        return self._parse_response(data)

    @staticmethod
    def _parse_response(data: Dict[str, Any]) -> PlantIdentificationResult:
        results = data.get("results") or []
        if not results:
            raise ExternalAPIError("No plant identification results from PlantNet API", api_name=API_NAME)

        top = results[0]
        species = top.get("species") or {}
        score = float(top.get("score") or 0.0)

        return PlantIdentificationResult(
            scientific_name=species.get("scientificName") or species.get("scientificNameWithoutAuthor", "Unknown"),
            common_names=list(species.get("commonNames") or []),
            confidence=round(min(1.0, max(0.0, score)), 2),
        )
