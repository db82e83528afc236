"""Dispatch sinks that hand a composed message to an outbound channel."""

from __future__ import annotations

import webbrowser
from typing import Callable, Protocol
from urllib.parse import quote

import requests

from hydrant_survey.common.errors import DispatchError
from hydrant_survey.common.http import HttpClient, HttpRequestError

WHATSAPP_BASE_URL = "https://wa.me"
# Links issued by earlier clients leave these characters unescaped.
URI_COMPONENT_SAFE = "!*'()"


class DispatchSink(Protocol):
    def send(self, message: str) -> None: ...


class NullDispatchSink:
    def send(self, message: str) -> None:
        return None


def build_whatsapp_link(number: str, message: str) -> str:
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(message, safe=URI_COMPONENT_SAFE)}"


class WhatsAppLinkSink:
    def __init__(self, number: str, opener: Callable[[str], object] | None = None) -> None:
        self.number = number
        self.opener = opener or webbrowser.open
        self.last_link: str | None = None

    def send(self, message: str) -> None:
        link = build_whatsapp_link(self.number, message)
        self.last_link = link
        self.opener(link)


class WebhookDispatchSink:
    def __init__(self, url: str, client: HttpClient | None = None) -> None:
        self.url = url
        self.client = client or HttpClient()

    def send(self, message: str) -> None:
        try:
            self.client.post_json(self.url, json_body={"text": message})
        except (HttpRequestError, requests.exceptions.RequestException) as exc:
            raise DispatchError(f"Webhook dispatch failed: {exc}") from exc
