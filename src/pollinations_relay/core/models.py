"""
Dataclasses métier pour Pollinations Relay.
"""
from dataclasses import dataclass
from typing import List, Optional, Dict, Any, Union

from .constants import DEFAULT_MODEL, IMAGE_DATA_URL_PREFIX


# Contenu d'un message: texte brut ou liste de parts (text / image_url)
MessageContent = Union[str, List[Dict[str, Any]]]


@dataclass(frozen=True)
class ChatRequest:
    """Requête de chat entrante, immuable une fois construite."""
    prompt_text: str
    model: str = DEFAULT_MODEL
    system_prompt: Optional[str] = None
    json_mode: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_model: str = DEFAULT_MODEL) -> "ChatRequest":
        """Crée une instance depuis le corps JSON entrant (clés camelCase)."""
        return cls(
            prompt_text=data.get("inputCode") or "",
            model=data.get("model") or default_model,
            system_prompt=data.get("systemPrompt") or None,
            json_mode=bool(data.get("jsonMode", False))
        )


@dataclass
class UpstreamMessage:
    """Un message envoyé à l'API upstream."""
    role: str
    content: MessageContent

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass
class UpstreamRequestBody:
    """Corps JSON POSTé à l'API upstream."""
    messages: List[UpstreamMessage]
    model: str
    seed: Optional[int] = None
    json_mode: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Sérialise avec les clés attendues par l'upstream."""
        payload: Dict[str, Any] = {
            "messages": [message.to_dict() for message in self.messages],
            "model": self.model,
        }
        if self.seed is not None:
            payload["seed"] = self.seed
        payload["jsonMode"] = self.json_mode
        return payload


def text_part(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def image_part(base64_image: str) -> Dict[str, Any]:
    return {
        "type": "image_url",
        "image_url": {"url": f"{IMAGE_DATA_URL_PREFIX}{base64_image}"},
    }
