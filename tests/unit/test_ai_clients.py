import json
import random

import pytest

from flor.modules.ai_assistant.domain.models import WateringAmount
from flor.modules.ai_assistant.infrastructure.external.openai_client import (
    MOCK_CARE,
    OpenAICareClient,
    extract_json,
    lookup_mock_care,
    parse_care_payload,
)
from flor.modules.ai_assistant.infrastructure.external.plantnet_client import (
    MOCK_SPECIES,
    PlantNetClient,
)
from flor.shared.core.exceptions import ExternalAPIError

VALID_PAYLOAD = {
    "wateringFrequencyDays": 10,
    "wateringAmount": "low",
    "lightRequirements": "Full sun",
    "fertilizingTips": ["Monthly in summer"],
    "pruningTips": [],
    "troubleshooting": ["Soft stems: overwatering"],
}


class TestPlantNetMock:

    async def test_mock_results_come_from_table_with_bounded_confidence(self):
        client = PlantNetClient(mock_delay_seconds=0, rng=random.Random(42))
        known = {name for name, _, _ in MOCK_SPECIES}

        for _ in range(25):
            result = await client.identify(b"image")
            assert result.scientific_name in known
            assert 0.8 <= result.confidence <= 1.0
            assert result.confidence == round(result.confidence, 2)

    async def test_same_seed_same_answer(self):
        first = await PlantNetClient(mock_delay_seconds=0, rng=random.Random(3)).identify(b"a")
        second = await PlantNetClient(mock_delay_seconds=0, rng=random.Random(3)).identify(b"b")

        assert first == second

    async def test_real_mode_without_key_fails(self):
        client = PlantNetClient(use_real_api=True, api_key=None)

        with pytest.raises(ExternalAPIError, match="PLANTNET_API_KEY"):
            await client.identify(b"image")

    def test_parse_response_takes_top_result(self):
        data = {
            "results": [
                {
                    "score": 0.8731,
                    "species": {"scientificName": "Ficus lyrata Warb.", "commonNames": ["Fiddle Leaf Fig"]},
                },
                {"score": 0.05, "species": {"scientificName": "Ficus elastica"}},
            ]
        }

        result = PlantNetClient._parse_response(data)

        assert result.scientific_name == "Ficus lyrata Warb."
        assert result.display_name == "Fiddle Leaf Fig"
        assert result.confidence == 0.87

    def test_parse_response_without_results_fails(self):
        with pytest.raises(ExternalAPIError, match="No plant identification results"):
            PlantNetClient._parse_response({"results": []})


class TestCareMock:

    def test_exact_match(self):
        assert lookup_mock_care("Monstera deliciosa") is MOCK_CARE["Monstera deliciosa"]

    def test_normalised_substring_match(self):
        assert lookup_mock_care("monstera") is MOCK_CARE["Monstera deliciosa"]
        assert lookup_mock_care("Ficus-elastica  'Tineke'") is MOCK_CARE["Ficus elastica"]

    def test_unknown_plant_falls_back_to_generic(self):
        assert lookup_mock_care("Triffid") is MOCK_CARE["Unknown Plant"]

    async def test_generate_in_mock_mode(self):
        care = await OpenAICareClient(mock_delay_seconds=0).generate("Zamioculcas zamiifolia")

        assert care.watering_amount == WateringAmount.LOW
        assert 1 <= care.watering_frequency_days <= 365


class TestCarePayload:

    def test_extract_json_strips_code_fences(self):
        fenced = "```json\n" + json.dumps(VALID_PAYLOAD) + "\n```"

        assert json.loads(extract_json(fenced)) == VALID_PAYLOAD
        assert extract_json('  {"a": 1} ') == '{"a": 1}'

    def test_valid_payload(self):
        care = parse_care_payload(VALID_PAYLOAD)

        assert care.watering_frequency_days == 10
        assert care.watering_amount == WateringAmount.LOW
        assert care.pruning_tips == []

    def test_frequency_is_clamped(self):
        assert parse_care_payload({**VALID_PAYLOAD, "wateringFrequencyDays": 900}).watering_frequency_days == 365
        assert parse_care_payload({**VALID_PAYLOAD, "wateringFrequencyDays": -3}).watering_frequency_days == 1

    def test_unknown_amount_defaults_to_mid(self):
        care = parse_care_payload({**VALID_PAYLOAD, "wateringAmount": "drench"})

        assert care.watering_amount == WateringAmount.MID

    @pytest.mark.parametrize("missing", ["wateringFrequencyDays", "lightRequirements", "fertilizingTips"])
    def test_missing_fields_rejected(self, missing):
        payload = {k: v for k, v in VALID_PAYLOAD.items() if k != missing}

        with pytest.raises(ExternalAPIError, match="Missing required fields in API response"):
            parse_care_payload(payload)

    async def test_real_mode_without_key_fails(self):
        with pytest.raises(ExternalAPIError, match="OPENAI_API_KEY"):
            await OpenAICareClient(use_real_api=True).generate("Basil")
