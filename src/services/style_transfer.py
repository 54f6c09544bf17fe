import httpx
import structlog

from src.config import settings
from src.core.exceptions import ConfigurationError, ModelDeclinedError
from src.schemas.style import GenerateContentResponse, ImagePart, ModelResponsePart, StyleRequest, TextPart
from src.services import encoder
from src.services.encoder import ImageBlob

logger = structlog.get_logger()

MODEL = "gemini-2.5-flash-image-preview"
RESPONSE_MODALITIES = ["IMAGE", "TEXT"]
ADDITIONAL_EDITS_MARKER = "**Additional Edits:**"

_PROMPT_HEADER = """You are a highly skilled digital artist specializing in style transfer. \
Your task is to repaint the subject from the main image using the complete aesthetic of the reference image.

**Main Image:** Contains the subject to be restyled.
**Reference Image:** Provides the target style.

**Your Goal:**
Generate a new image where the subject from the Main Image is seamlessly integrated into the world of \
the Reference Image. You must replicate the following stylistic elements from the Reference Image exactly:
- **Lighting:** Match the direction, softness, and color of the light.
- **Color Palette:** Use the same colors and overall color grading.
- **Composition:** Adapt the composition to match the reference style.
- **Background:** Replace the main image's background with one that fits the reference style.
- **Texture/Medium:** If the reference is a painting, replicate the brushstrokes. \
If it's a photo, match the grain and focus."""

_PROMPT_FOOTER = (
    "Crucially, the final output must be the image itself, with no additional text or explanation."
)

_client: "StyleTransferClient | None" = None


def build_prompt(instructions: str) -> str:
    sections = [_PROMPT_HEADER]
    if instructions:
        sections.append(f"{ADDITIONAL_EDITS_MARKER} {instructions}")
    sections.append(_PROMPT_FOOTER)
    return "\n\n".join(sections)


def build_request_body(request: StyleRequest) -> dict:
    return {
        "contents": [
            {
                "parts": [
                    {"inlineData": {"data": request.subject.data, "mimeType": request.subject.mime_type}},
                    {"inlineData": {"data": request.reference.data, "mimeType": request.reference.mime_type}},
                    {"text": build_prompt(request.instructions)},
                ]
            }
        ],
        "generationConfig": {"responseModalities": RESPONSE_MODALITIES},
    }


def classify_parts(parts: list[ModelResponsePart]) -> str | None:
    """Pick the outcome of a response from its parts.

    The first image part wins. Without one, the first text part is raised as
    a ``ModelDeclinedError``. With neither, ``None`` is returned.
    """
    image = next((p for p in parts if isinstance(p, ImagePart)), None)
    if image is not None:
        return image.data
    text = next((p for p in parts if isinstance(p, TextPart)), None)
    if text is not None:
        raise ModelDeclinedError(text.text)
    return None


class StyleTransferClient:
    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=None)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{MODEL}:generateContent"

    async def generate(self, subject: ImageBlob, reference: ImageBlob, instructions: str = "") -> str | None:
        if not self.api_key:
            raise ConfigurationError("API_KEY environment variable is not set.")

        request = StyleRequest(
            subject=await encoder.encode(subject),
            reference=await encoder.encode(reference),
            instructions=instructions,
        )
        logger.info(
            "style_transfer_requested",
            model=MODEL,
            subject_mime_type=request.subject.mime_type,
            reference_mime_type=request.reference.mime_type,
            has_instructions=bool(instructions),
        )

        response = await self._http.post(
            self.endpoint,
            json=build_request_body(request),
            headers={"x-goog-api-key": self.api_key},
        )
        response.raise_for_status()

        parts = GenerateContentResponse.model_validate(response.json()).first_candidate_parts()
        try:
            result = classify_parts(parts)
        except ModelDeclinedError as e:
            logger.warning("style_transfer_declined", model=MODEL, text=e.text[:200])
            raise
        if result is None:
            logger.warning("style_transfer_no_result", model=MODEL)
        else:
            logger.info("style_transfer_completed", model=MODEL)
        return result

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()


def get_style_client() -> StyleTransferClient:
    global _client
    if _client is None:
        _client = StyleTransferClient(settings.api_key)
    return _client


async def close_client() -> None:
    global _client
    if _client:
        await _client.aclose()
        _client = None
