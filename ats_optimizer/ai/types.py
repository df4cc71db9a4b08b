from dataclasses import dataclass
from typing import Any, Literal, Mapping, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class AIClient(Protocol):
    provider: str
    model: str

    async def generate_json(
        self,
        messages: Sequence[ChatMessage],
        *,
        response_schema: Mapping[str, Any] | None = None,
    ) -> str: ...


class AIProviderError(RuntimeError):
    def __init__(self, message: str, *, auth_failed: bool = False):
        super().__init__(message)
        self.auth_failed = auth_failed
