"""
OCR Reader - Extracts raw text from event images via the OCR.space API.
"""

import base64
from typing import Dict, Any, Optional

from config import (
    OCR_SPACE_URL, OCR_SPACE_API_KEY, OCR_LANGUAGE, OCR_MAX_IMAGE_BYTES,
    HTTP_TIMEOUT_LONG, MAX_ERROR_RESPONSE_DISPLAY
)
from shared_utils import HTTPClient, OCRError, logger, performance_monitor


class OCRReader:
    """Thin client for the OCR.space parse endpoint."""

    def __init__(self, api_key: Optional[str] = None, http_client: Optional[HTTPClient] = None):
        self.api_key = api_key or OCR_SPACE_API_KEY
        self.http_client = http_client or HTTPClient()

    def build_payload(self, image_bytes: bytes, content_type: str) -> Dict[str, Any]:
        """Build the JSON body with the image inlined as a data URI."""
        encoded = base64.b64encode(image_bytes).decode('ascii')
        return {
            'base64Image': f"data:{content_type};base64,{encoded}",
            'language': OCR_LANGUAGE,
            'detectOrientation': True,
            'scale': True,
            'isTable': False,
        }

    @performance_monitor
    def read_text(self, image_bytes: bytes, content_type: str = 'image/png') -> str:
        """
        Run OCR on an image.

        Args:
            image_bytes: Raw image file contents
            content_type: MIME type of the image

        Returns:
            Extracted text (may be empty when the image has no text)

        Raises:
            OCRError: if the request fails or the service reports an error
        """
        if not image_bytes:
            raise OCRError("Empty image upload")
        if len(image_bytes) > OCR_MAX_IMAGE_BYTES:
            raise OCRError(f"Image too large ({len(image_bytes)} bytes)")

        logger.log("info", "Sending image to OCR service", bytes=len(image_bytes), type=content_type)

        try:
            response = self.http_client.post(
                OCR_SPACE_URL,
                json=self.build_payload(image_bytes, content_type),
                headers={'apikey': self.api_key},
                timeout=HTTP_TIMEOUT_LONG
            )
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            raise OCRError(f"OCR request failed: {e}") from e

        return self.parse_response(data)

    @staticmethod
    def parse_response(data: Dict[str, Any]) -> str:
        """Pull the text of the first parsed result out of an OCR.space response."""
        if data.get('IsErroredOnProcessing'):
            message = data.get('ErrorMessage') or 'unknown error'
            if isinstance(message, list):
                message = '; '.join(str(m) for m in message)
            raise OCRError(f"OCR service error: {str(message)[:MAX_ERROR_RESPONSE_DISPLAY]}")

        results = data.get('ParsedResults') or []
        text = results[0].get('ParsedText', '') if results else ''

        logger.log("info", "OCR completed", characters=len(text))
        return text
