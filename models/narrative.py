"""
Narrative Generator
Builds kind-specific prompts from AQI data and asks Gemini for the text
"""

import logging
import requests
from typing import Dict, Optional

from config.settings import settings
from utils.constants import FALLBACK_NARRATIVE, NARRATIVE_KINDS
from utils.exceptions import ParseError, UpstreamError
from utils.helpers import format_value

logger = logging.getLogger(__name__)


class NarrativeGenerator:
    """
    Generates citizen summaries, health advice and policy suggestions

    Each kind only sees the AQI fields relevant to it.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.base_url = settings.GEMINI_BASE_URL
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT
        self.templates = self._create_templates()

    def _create_templates(self) -> Dict:
        """Prompt template and interpolated fields for each narrative kind"""
        return {
            'summary': {
                'fields': ['aqi', 'pm25', 'pm10', 'no2', 'co', 'o3'],
                'template': (
                    "Based on this air quality data for {city}: AQI: {aqi}, PM2.5: {pm25}, "
                    "PM10: {pm10}, NO2: {no2}, CO: {co}, O3: {o3}.\n"
                    "Write a brief, friendly 2-3 sentence summary of today's air quality, "
                    "any trends, and what it means for residents. Keep it conversational "
                    "and easy to understand."
                ),
            },
            'health': {
                'fields': ['aqi', 'pm25', 'pm10'],
                'template': (
                    "Based on this air quality data: AQI: {aqi}, PM2.5: {pm25}, PM10: {pm10}.\n"
                    "Give 3-4 specific health recommendations for residents today as a "
                    "bulleted list. Include activity suggestions and timing. Be concise "
                    "and actionable."
                ),
            },
            'policy': {
                'fields': ['aqi', 'pm25', 'pm10', 'no2'],
                'template': (
                    "You are analyzing air pollution data for {city}: AQI: {aqi}, "
                    "PM2.5: {pm25}, PM10: {pm10}, NO2: {no2}.\n"
                    "Suggest 2-3 specific policy interventions that could improve air "
                    "quality. Focus on practical, evidence-based actions."
                ),
            },
        }

    def build_prompt(self, aqi_data: Dict, location: Optional[str], kind: str = 'summary') -> str:
        """
        Render the prompt for a narrative kind

        Args:
            aqi_data: Reading with aqi and pollutant values; pm2_5 is accepted for pm25
            location: City name shown in the prompt
            kind: One of summary, health, policy

        Returns:
            Prompt string
        """
        if kind not in NARRATIVE_KINDS:
            raise ValueError(f"Unknown narrative kind: {kind}")

        template = self.templates[kind]
        data = dict(aqi_data or {})
        if 'pm25' not in data and 'pm2_5' in data:
            data['pm25'] = data['pm2_5']

        values = {field: format_value(data.get(field)) for field in template['fields']}
        values['city'] = location or 'your area'
        return template['template'].format(**values)

    def _request_body(self, prompt: str) -> Dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": settings.GEMINI_TEMPERATURE,
                "maxOutputTokens": settings.GEMINI_MAX_OUTPUT_TOKENS,
            },
        }

    @staticmethod
    def extract_text(data) -> str:
        """First candidate's text, or the fallback when there is none"""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return FALLBACK_NARRATIVE
        return text or FALLBACK_NARRATIVE

    def generate(self, aqi_data: Dict, location: Optional[str] = None, kind: str = 'summary') -> str:
        """
        Generate narrative text for AQI data

        One upstream call per invocation; identical requests are not cached.

        Raises:
            ConfigurationError: GEMINI_API_KEY is missing
            UpstreamError: Gemini failed or answered with a non-success status
        """
        api_key = settings.require("GEMINI_API_KEY")
        prompt = self.build_prompt(aqi_data, location, kind)

        url = f"{self.base_url}/{settings.GEMINI_MODEL}:generateContent"
        logger.info("Requesting %s narrative from %s", kind, settings.GEMINI_MODEL)
        logger.debug("Prompt: %s", prompt)

        try:
            response = requests.post(
                url,
                params={"key": api_key},
                json=self._request_body(prompt),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Gemini request failed: %s", e)
            raise UpstreamError(f"Gemini API request failed: {e}")

        logger.info("Gemini API response status: %s", response.status_code)

        if not response.ok:
            logger.error("Gemini API error response: %s", response.text)
            raise UpstreamError(
                f"Gemini API error: {response.status_code} - {response.text}",
                upstream_status=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError:
            raise ParseError(
                "Gemini API returned a non-JSON body",
                upstream_status=response.status_code,
                body=response.text,
            )

        text = self.extract_text(data)
        logger.info("Generated %s narrative (%d chars)", kind, len(text))
        return text
