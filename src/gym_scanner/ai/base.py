"""The AI coach interface the rest of the application depends on."""

from dataclasses import dataclass
from typing import Literal, Protocol

from ..core.models import ExtractedRoutine
from ..core.results import AiText
from ..io.documents import UploadedDocument

ChatRole = Literal["user", "model"]


@dataclass(frozen=True)
class ChatMessage:
    """One turn of a chat conversation."""

    role: ChatRole
    text: str


class Coach(Protocol):
    """
    AI capabilities used by gym-scanner.

    Only ``extract`` may raise (ExtractionFailure).  The others always
    return text: Ok when the service answered, Degraded with a local
    fallback otherwise.
    """

    def extract(self, document: UploadedDocument) -> list[ExtractedRoutine]: ...

    def explain(self, name: str, muscle_group: str) -> AiText: ...

    def chat(self, message: str, history: list[ChatMessage]) -> AiText: ...

    def quote(self) -> AiText: ...
