from pydantic import BaseModel
from pydantic import Field
from pydantic import model_validator


class VectorizeRequest(BaseModel):
    """A single tokenized sequence, as produced by the host's tokenizer."""

    input_ids: list[float] = Field(..., description="Token ids.")
    attention_mask: list[float] = Field(..., description="Attention mask, 1 for real tokens and 0 for padding.")
    token_type_ids: list[float] = Field(..., description="Segment ids.")
    sequence_length: int = Field(..., ge=1, description="Length of each of the three arrays.")

    @model_validator(mode="after")
    def check_lengths(self) -> "VectorizeRequest":
        for name in ("input_ids", "attention_mask", "token_type_ids"):
            size = len(getattr(self, name))
            if size != self.sequence_length:
                raise ValueError(f"{name} has length {size}, expected sequence_length={self.sequence_length}")
        return self


class VectorizeResponse(BaseModel):
    embedding: list[float]
    dimension: int


class LoadResponse(BaseModel):
    loaded: bool
    state: str


class ModelStatus(BaseModel):
    """Loader state as seen by an out-of-process host."""

    state: str
    model_file: str
    locations: list[str]
    embedding_dimension: int
    last_error: str | None = None
