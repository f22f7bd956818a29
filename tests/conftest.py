from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Callable, Dict, List, Optional

import pytest


# When running via the `pytest` console script, sys.path[0] is the script
# location rather than the repo root. Ensure the local `app` package is importable.
_REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)


VALID_COPY = {
    "headline": "Save 20%",
    "subheadline": None,
    "body": "Take 20% off every pair of shoes this week.",
    "callToAction": "Shop Now",
    "legalDisclaimer": None,
}


def offer(description: str = "20% off shoes", offer_type: str = "discount", existing_copy: Optional[str] = None) -> dict:
    item = {"offerType": offer_type, "offerDescription": description}
    if existing_copy is not None:
        item["existingCopy"] = existing_copy
    return item


def user_prompt(messages: List[Dict[str, str]]) -> str:
    return next(msg["content"] for msg in messages if msg["role"] == "user")


def description_of(messages: List[Dict[str, str]]) -> str:
    # The description is the line right after "OFFER DESCRIPTION:"
    lines = user_prompt(messages).split("\n")
    return lines[lines.index("OFFER DESCRIPTION:") + 1]


class FakeLLM:
    """Stand-in generation service recording calls and peak concurrency"""

    def __init__(
        self,
        respond: Optional[Callable[[List[Dict[str, str]]], str]] = None,
        delay: Optional[Callable[[List[Dict[str, str]]], float]] = None,
    ) -> None:
        self.respond = respond or (lambda messages: json.dumps(VALID_COPY))
        self.delay = delay or (lambda messages: 0.0)
        self.calls: List[List[Dict[str, str]]] = []
        self.active = 0
        self.max_active = 0

    async def invoke(self, messages, **kwargs):
        self.calls.append(messages)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay(messages))
            return self.respond(messages)
        finally:
            self.active -= 1


@pytest.fixture()
def fake_llm() -> FakeLLM:
    return FakeLLM()
