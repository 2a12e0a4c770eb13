"""
TwiML document builder.

Verbs render themselves to XML fragments; Twiml wraps them in <Response>.
Rendering has no side effects, so the same document always yields the
same bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'


def _xml_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _element(tag: str, attrs: dict[str, str], inner: str | None = None) -> str:
    attr_str = "".join(f' {k}="{_xml_escape(v)}"' for k, v in attrs.items())
    if inner is None:
        return f"<{tag}{attr_str}/>"
    return f"<{tag}{attr_str}>{inner}</{tag}>"


class Verb(Protocol):
    def as_twiml(self) -> str: ...


class Voice(str, Enum):
    MAN = "man"
    WOMAN = "woman"
    ALICE = "alice"


class Method(str, Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class Say:
    txt: str
    voice: Voice = Voice.WOMAN
    language: str = "en"

    def as_twiml(self) -> str:
        return _element(
            "Say",
            {"voice": self.voice.value, "language": self.language},
            _xml_escape(self.txt),
        )


@dataclass(frozen=True)
class Play:
    url: str
    loop: int = 1

    def as_twiml(self) -> str:
        return _element("Play", {"loop": str(self.loop)}, _xml_escape(self.url))


@dataclass(frozen=True)
class Message:
    txt: str

    def as_twiml(self) -> str:
        return _element("Message", {}, _xml_escape(self.txt))


@dataclass(frozen=True)
class Redirect:
    url: str
    method: Method = Method.POST

    def as_twiml(self) -> str:
        return _element("Redirect", {"method": self.method.value}, _xml_escape(self.url))


@dataclass(frozen=True)
class Dial:
    number: str

    def as_twiml(self) -> str:
        return _element("Dial", {}, _xml_escape(self.number))


@dataclass(frozen=True)
class Hangup:
    def as_twiml(self) -> str:
        return "<Hangup/>"


@dataclass(frozen=True)
class Gather:
    """Collect digits or speech; nested verbs play while waiting."""

    actions: tuple[Verb, ...] = ()
    method: Method = Method.POST
    action: str | None = None
    finish_on_key: str = "#"
    timeout: int = 5

    def as_twiml(self) -> str:
        attrs = {"method": self.method.value}
        if self.action is not None:
            attrs["action"] = self.action
        attrs["finishOnKey"] = self.finish_on_key
        attrs["timeout"] = str(self.timeout)
        return _element("Gather", attrs, "".join(a.as_twiml() for a in self.actions))


@dataclass
class Twiml:
    """Accumulates verbs and serializes them into a TwiML <Response>."""

    content_type = "text/xml"

    verbs: list[Verb] = field(default_factory=list)

    def add(self, verb: Verb) -> Twiml:
        self.verbs.append(verb)
        return self

    def as_twiml(self) -> str:
        inner = "".join(v.as_twiml() for v in self.verbs)
        return f"{XML_HEADER}<Response>{inner}</Response>"
