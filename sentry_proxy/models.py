from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class SourceAlert:
    """
    Alerta recebido do Sentry, normalizado para um único formato.
    Cada schema de webhook preenche só os campos que possui; o resto fica vazio.
    """

    id: str = ""
    event_id: str = ""
    title: str = ""
    event_title: str = ""
    message: str = ""
    culprit: str = ""
    level: str = ""
    project: str = ""
    environment: str = ""
    release: str = ""
    timestamp: float = 0.0
    web_url: str = ""
    api_url: str = ""


@dataclass
class Field:
    name: str
    value: str
    inline: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "inline": self.inline}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Field":
        return cls(
            name=data.get("name", ""),
            value=data.get("value", ""),
            inline=bool(data.get("inline", False)),
        )


@dataclass
class Embed:
    title: str
    url: str
    color: int
    fields: List[Field] = field(default_factory=list)
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "color": self.color,
        }
        # fields vazio é omitido do JSON
        if self.fields:
            data["fields"] = [f.to_dict() for f in self.fields]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Embed":
        return cls(
            title=data.get("title", ""),
            url=data.get("url", ""),
            color=int(data.get("color", 0)),
            fields=[Field.from_dict(f) for f in data.get("fields") or []],
            description=data.get("description", ""),
        )


@dataclass
class NotificationPayload:
    content: str = ""
    embeds: List[Embed] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"content": self.content}
        if self.embeds:
            data["embeds"] = [e.to_dict() for e in self.embeds]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotificationPayload":
        return cls(
            content=data.get("content", ""),
            embeds=[Embed.from_dict(e) for e in data.get("embeds") or []],
        )
