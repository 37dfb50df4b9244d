#!/usr/bin/env python3
"""Example: Quickstart — slack-llm-bot

Runs three request cycles through the conversation middleware with an
in-memory store and prints the prompt that would be sent to the LLM.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install slack-llm-bot
"""
from __future__ import annotations

import slack_llm_bot
from slack_llm_bot import (
    ContextConfig,
    ConversationKey,
    ConversationMiddleware,
    InMemoryStore,
)


def main() -> None:
    print(f"slack-llm-bot version: {slack_llm_bot.__version__}")

    # Step 1: Wire a store and a builder into the middleware
    store = InMemoryStore()
    middleware = ConversationMiddleware.from_config(
        store, context_config=ContextConfig(min_recent_messages=2)
    )
    key = ConversationKey(user_id="U123", channel_id="C456")

    # Step 2: Simulate a few turns; a real bot would call its LLM here
    turns = [
        ("Any tips for a crispy pizza dough?", "Use a hot oven and a long cold ferment."),
        ("What should I pack for Lisbon in May?", "Light layers and comfortable shoes."),
        ("Is tram 28 worth it?", "Yes, but ride it early to avoid crowds."),
    ]
    for question, answer in turns:
        middleware.before_request(key, question)
        middleware.after_request(key, answer)
    print(f"Stored messages for {key}: {store.count_messages(key)}")

    # Step 3: A prompt that refers back to the first topic
    turn = middleware.before_request(key, "How long should the pizza dough ferment?")
    print(
        f"\nContext: {turn.stats.included_messages}/{turn.stats.total_messages} messages, "
        f"{turn.stats.utilization_percent}% of budget"
    )
    print("\n--- prompt ---")
    print(turn.prompt)


if __name__ == "__main__":
    main()
