from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class EncodedImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: str
    mime_type: str


class StyleRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: EncodedImage
    reference: EncodedImage
    instructions: str = ""


class ImagePart(BaseModel):
    kind: Literal["image"] = "image"
    data: str
    mime_type: str


class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str


ModelResponsePart = Annotated[ImagePart | TextPart, Field(discriminator="kind")]


# Wire shapes of the generateContent response. Only the fields we read are declared.


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class InlineData(_WireModel):
    mime_type: str = Field(default="image/png", alias="mimeType")
    data: str = ""


class WirePart(_WireModel):
    inline_data: InlineData | None = Field(default=None, alias="inlineData")
    text: str | None = None

    def to_part(self) -> ModelResponsePart | None:
        if self.inline_data is not None:
            return ImagePart(data=self.inline_data.data, mime_type=self.inline_data.mime_type)
        if self.text:
            return TextPart(text=self.text)
        return None


class Content(_WireModel):
    parts: list[WirePart] = []


class Candidate(_WireModel):
    content: Content | None = None


class GenerateContentResponse(_WireModel):
    candidates: list[Candidate] = []

    def first_candidate_parts(self) -> list[ModelResponsePart]:
        if not self.candidates or self.candidates[0].content is None:
            return []
        parts = (p.to_part() for p in self.candidates[0].content.parts)
        return [p for p in parts if p is not None]


class StyleTransferResponse(BaseModel):
    data: str
    mime_type: str
    data_uri: str
